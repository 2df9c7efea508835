"""Validation utilities for the short-link service."""

import re
from urllib.parse import urlparse
from typing import Any, Tuple

SHORT_CODE_PATTERN = re.compile(r'^[A-Za-z0-9]{3,10}$')

# Paths the web app serves itself; a link under one of these would be unreachable
RESERVED_WORDS = {"api", "create", "health", "statistics"}

MAX_URL_LENGTH = 2048


def is_valid_url(url: Any) -> Tuple[bool, str]:
    """Validate that a URL is absolute (scheme and host).

    Args:
        url: The URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str):
        return False, "Original URL is required"

    if len(url) > MAX_URL_LENGTH:
        return False, f"URL is too long (max {MAX_URL_LENGTH} characters)"

    if any(c.isspace() for c in url):
        return False, "Please enter a valid URL"

    try:
        result = urlparse(url)
    except ValueError:
        return False, "Please enter a valid URL"

    if not result.scheme or not result.netloc or not result.hostname:
        return False, "Please enter a valid URL"

    return True, ""


def is_valid_validity(minutes: Any) -> Tuple[bool, str]:
    """Validate a validity period in minutes.

    Args:
        minutes: Requested validity period

    Returns:
        Tuple of (is_valid, error_message)
    """
    if isinstance(minutes, bool) or not isinstance(minutes, int):
        return False, "Validity period must be a whole number of minutes"

    if minutes < 1:
        return False, "Validity period must be at least 1 minute"

    return True, ""


def is_valid_short_code(short_code: Any) -> Tuple[bool, str]:
    """Validate a custom short code.

    Args:
        short_code: The short code to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(short_code, str) or not SHORT_CODE_PATTERN.match(short_code):
        return False, "Shortcode must be 3-10 alphanumeric characters"

    if short_code.lower() in RESERVED_WORDS:
        return False, f"'{short_code}' is a reserved word and cannot be used"

    return True, ""
