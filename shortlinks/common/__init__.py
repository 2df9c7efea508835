"""Common utilities for the short-link service."""

from .validators import is_valid_url, is_valid_short_code, is_valid_validity
from .headers import click_source_from_headers
from .url_builder import build_short_url, short_url_for_config
from .logging_config import JsonFormatter, setup_logging

__all__ = [
    "is_valid_url",
    "is_valid_short_code",
    "is_valid_validity",
    "click_source_from_headers",
    "build_short_url",
    "short_url_for_config",
    "JsonFormatter",
    "setup_logging",
]
