"""Header parsing utilities for the short-link service."""

from typing import Mapping
from urllib.parse import urlparse

DIRECT_SOURCE = "direct"


def click_source_from_headers(headers: Mapping[str, str]) -> str:
    """Derive the source tag recorded against a click.

    The referrer's host when the request carries a ``Referer`` header,
    otherwise ``direct``.

    Args:
        headers: Request headers

    Returns:
        Source tag
    """
    headers_lower = {k.lower(): v for k, v in headers.items()}
    referer = (headers_lower.get("referer") or "").strip()
    if not referer:
        return DIRECT_SOURCE

    host = urlparse(referer).hostname
    return host or DIRECT_SOURCE
