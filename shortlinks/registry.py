"""Link registry: owns every shortened link and its lifecycle."""

import asyncio
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from .shortcode import ShortCodeGenerator
from .events import EventLogger
from .models import ClickEvent, Link
from .errors import FailureKind, FieldFailure, LinkValidationError
from .common.validators import (
    RESERVED_WORDS,
    is_valid_short_code,
    is_valid_url,
    is_valid_validity,
)
from .common.headers import DIRECT_SOURCE

DEFAULT_VALIDITY_MINUTES = 30


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ResolveStatus(str, Enum):
    """Outcome of resolving a short code."""

    REDIRECT = "redirect"
    NOT_FOUND = "not_found"
    EXPIRED = "expired"


@dataclass(frozen=True)
class Resolution:
    """Result of ``LinkRegistry.resolve``."""

    status: ResolveStatus
    shortcode: str
    original_url: Optional[str] = None
    click: Optional[ClickEvent] = None

    @property
    def is_redirect(self) -> bool:
        return self.status is ResolveStatus.REDIRECT


class LinkRegistry:
    """In-memory registry of shortened links.

    Codes are never released: expired links stay in the registry and keep
    their code for the registry's whole lifetime. ``create`` and ``resolve``
    are serialized by a single lock around the code map.
    """

    def __init__(
        self,
        event_logger: Optional[EventLogger] = None,
        short_code_generator: Optional[ShortCodeGenerator] = None,
        logger: Optional[logging.Logger] = None,
        clock: Optional[Callable[[], datetime]] = None,
        default_validity_minutes: int = DEFAULT_VALIDITY_MINUTES,
        max_collision_retries: int = 5,
    ):
        """Initialize link registry.

        Args:
            event_logger: Optional sink for lifecycle events
            short_code_generator: Optional short code generator
            logger: Optional diagnostic logger
            clock: Callable returning the current aware UTC datetime
            default_validity_minutes: Validity used when none is requested
            max_collision_retries: Random codes tried before the UUID fallback
        """
        self.event_logger = event_logger
        self.generator = short_code_generator or ShortCodeGenerator()
        self.logger = logger or logging.getLogger(__name__)
        self.clock = clock or utc_now
        self.default_validity_minutes = default_validity_minutes
        self.max_collision_retries = max_collision_retries

        # dicts keep insertion order, which list_links relies on
        self._links: Dict[str, Link] = {}
        self._lock = asyncio.Lock()

    async def create(
        self,
        original_url: str,
        validity_minutes: Optional[int] = None,
        custom_shortcode: Optional[str] = None,
    ) -> Link:
        """Create a new short link.

        Args:
            original_url: The original long URL
            validity_minutes: Minutes until the link expires (default 30)
            custom_shortcode: Optional custom short code

        Returns:
            The stored link

        Raises:
            LinkValidationError: If any field is rejected
            RuntimeError: If no free code could be generated
        """
        if validity_minutes is None:
            validity_minutes = self.default_validity_minutes
        if isinstance(custom_shortcode, str):
            custom_shortcode = custom_shortcode.strip() or None

        async with self._lock:
            failures = self._validate(original_url, validity_minutes, custom_shortcode)
            if not failures:
                shortcode = custom_shortcode or self._generate_unique_shortcode()
                created_at = self.clock()
                link = Link(
                    id=uuid.uuid4().hex,
                    original_url=original_url,
                    shortcode=shortcode,
                    created_at=created_at,
                    expiry_at=created_at + timedelta(minutes=validity_minutes),
                )
                self._links[shortcode] = link

        if failures:
            error = LinkValidationError(failures)
            self.logger.info(f"Rejected link creation: {error}")
            await self._emit("VALIDATION_ERROR", {"errors": error.to_dict()})
            raise error

        self.logger.info(f"Created short link: {link.shortcode} -> {link.original_url}")
        await self._emit("URL_CREATED", {
            "shortcode": link.shortcode,
            "originalUrl": link.original_url,
            "expiryDate": link.expiry_at.isoformat(),
        })
        return link

    async def resolve(self, shortcode: str, click_source: str = DIRECT_SOURCE) -> Resolution:
        """Resolve a short code, counting a click when the link is live.

        Args:
            shortcode: The short code to resolve
            click_source: Source tag recorded with the click

        Returns:
            Resolution with status REDIRECT, NOT_FOUND or EXPIRED
        """
        async with self._lock:
            link = self._links.get(shortcode)
            now = self.clock()
            if link is None:
                resolution = Resolution(ResolveStatus.NOT_FOUND, shortcode)
            elif link.is_expired(now):
                resolution = Resolution(ResolveStatus.EXPIRED, shortcode)
            else:
                click = ClickEvent(timestamp=now, source=click_source)
                link.record_click(click)
                resolution = Resolution(
                    ResolveStatus.REDIRECT,
                    shortcode,
                    original_url=link.original_url,
                    click=click,
                )

        if resolution.status is ResolveStatus.NOT_FOUND:
            self.logger.warning(f"Short code not found: {shortcode}")
            await self._emit("URL_NOT_FOUND", {"shortcode": shortcode})
        elif resolution.status is ResolveStatus.EXPIRED:
            self.logger.info(f"Short code expired: {shortcode}")
            await self._emit("URL_EXPIRED", {"shortcode": shortcode})
        else:
            self.logger.debug(f"Resolved {shortcode} -> {resolution.original_url}")
            await self._emit("URL_CLICKED", {
                "shortcode": shortcode,
                "originalUrl": resolution.original_url,
                "clickData": resolution.click.to_dict(),
            })

        return resolution

    async def get(self, shortcode: str) -> Optional[Link]:
        """Look up a link without counting a click."""
        return self._links.get(shortcode)

    async def list_links(self) -> List[Link]:
        """All links in creation order."""
        return list(self._links.values())

    async def summary(self) -> Dict[str, int]:
        """Registry-wide statistics, recomputed on every call.

        Returns:
            Dictionary with total_links, total_clicks, active_links
        """
        now = self.clock()
        links = list(self._links.values())
        return {
            "total_links": len(links),
            "total_clicks": sum(link.clicks for link in links),
            "active_links": sum(1 for link in links if link.is_active(now)),
        }

    async def close(self) -> None:
        """Release the event logger."""
        if self.event_logger:
            await self.event_logger.close()

    def _validate(
        self,
        original_url: Any,
        validity_minutes: Any,
        custom_shortcode: Optional[str],
    ) -> List[FieldFailure]:
        failures = []

        is_valid, error = is_valid_url(original_url)
        if not is_valid:
            failures.append(FieldFailure(FailureKind.INVALID_URL, error))

        is_valid, error = is_valid_validity(validity_minutes)
        if not is_valid:
            failures.append(FieldFailure(FailureKind.INVALID_VALIDITY, error))

        if custom_shortcode is not None:
            is_valid, error = is_valid_short_code(custom_shortcode)
            if not is_valid:
                failures.append(FieldFailure(FailureKind.INVALID_SHORTCODE, error))
            elif custom_shortcode in self._links:
                failures.append(FieldFailure(
                    FailureKind.SHORTCODE_TAKEN, "This shortcode is already taken"
                ))

        return failures

    def _is_available(self, code: str) -> bool:
        """A generated code is usable when well-formed, unused and not reserved."""
        return (
            self.generator.is_valid_format(code)
            and code not in self._links
            and code.lower() not in RESERVED_WORDS
        )

    def _generate_unique_shortcode(self) -> str:
        """Generate a code not held by any link, live or expired.

        Raises:
            RuntimeError: If unable to generate a unique code after retries
        """
        for attempt in range(self.max_collision_retries + 1):
            code = self.generator.generate_random()
            if self._is_available(code):
                if attempt:
                    self.logger.debug(f"Generated code after {attempt + 1} attempts: {code}")
                return code

        # Last resort: UUID-based code (highly unlikely to collide)
        code = self.generator.generate_from_uuid(length=8)
        if self._is_available(code):
            return code

        raise RuntimeError("Unable to generate unique short code after multiple attempts")

    async def _emit(self, event_type: str, payload: Dict[str, Any]) -> None:
        """Send an event; failures are logged and never reach the caller."""
        if self.event_logger is None:
            return
        try:
            await self.event_logger.log(event_type, payload)
        except Exception as e:
            self.logger.warning(f"Logging failed for {event_type}: {e}")
