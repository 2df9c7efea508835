"""Event loggers: sinks for application events such as link creation and clicks."""

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Set

import httpx

from .common.logging_config import get_logger


def utc_timestamp() -> str:
    """Current time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


class EventLogger(ABC):
    """Interface for event sinks.

    Any event type is accepted; implementations never validate names.
    """

    @abstractmethod
    async def log(
        self,
        event_type: str,
        payload: Optional[Dict[str, Any]] = None,
        timestamp: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Record an event.

        Args:
            event_type: Free-form event name (e.g. URL_CREATED)
            payload: Structured event data
            timestamp: ISO-8601 timestamp (defaults to now)

        Returns:
            Acknowledgment dictionary with ``success``
        """
        pass

    async def close(self) -> None:
        """Release any resources held by the sink."""
        return None


class StreamEventLogger(EventLogger):
    """Writes event records to the process output stream through ``logging``."""

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        identity: Optional[Dict[str, Optional[str]]] = None,
    ):
        """Initialize stream event logger.

        Args:
            logger: Logger to write records to
            identity: Optional identity fields merged into every record as ``user``
        """
        self.logger = logger or get_logger("shortlinks.events")
        self.identity = {k: v for k, v in (identity or {}).items() if v}

    async def log(
        self,
        event_type: str,
        payload: Optional[Dict[str, Any]] = None,
        timestamp: Optional[str] = None,
    ) -> Dict[str, Any]:
        timestamp = timestamp or utc_timestamp()
        record: Dict[str, Any] = {}
        if self.identity:
            record["user"] = self.identity
        record.update(payload or {})

        self.logger.info(f"[{timestamp}] {event_type}: {json.dumps(record, default=str)}")

        return {"success": True, "message": "Event logged successfully"}


class HttpEventLogger(EventLogger):
    """Forwards events to a remote log sink over HTTP.

    Each record is posted in a background task; ``log`` returns as soon as the
    record is queued. Delivery failures are logged and dropped, never retried.
    """

    def __init__(
        self,
        sink_url: str,
        timeout: float = 5.0,
        logger: Optional[logging.Logger] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize HTTP event logger.

        Args:
            sink_url: Full URL of the remote log endpoint
            timeout: Request timeout in seconds
            logger: Diagnostic logger for delivery failures
            client: Optional preconfigured httpx client (owned by the caller)
        """
        self.sink_url = sink_url
        self.logger = logger or get_logger("shortlinks.events")
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout)
        self._pending: Set[asyncio.Task] = set()

    async def log(
        self,
        event_type: str,
        payload: Optional[Dict[str, Any]] = None,
        timestamp: Optional[str] = None,
    ) -> Dict[str, Any]:
        record = {
            "eventType": event_type,
            "data": payload or {},
            "timestamp": timestamp or utc_timestamp(),
        }

        task = asyncio.create_task(self._send(record))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

        return {"success": True, "message": "Event queued"}

    async def _send(self, record: Dict[str, Any]) -> None:
        try:
            body = json.loads(json.dumps(record, default=str))
            response = await self.client.post(self.sink_url, json=body)
            response.raise_for_status()
        except Exception as e:
            self.logger.warning(f"Logging failed for {record['eventType']}: {e}")

    async def flush(self) -> None:
        """Wait for every queued record to be delivered or dropped."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    async def close(self) -> None:
        await self.flush()
        if self._owns_client:
            await self.client.aclose()
