"""Core business logic for the short-link service."""

from .shortcode import ShortCodeGenerator
from .registry import LinkRegistry, Resolution, ResolveStatus
from .errors import LinkValidationError, FailureKind
from .events import EventLogger, StreamEventLogger, HttpEventLogger

__all__ = [
    "ShortCodeGenerator",
    "LinkRegistry",
    "Resolution",
    "ResolveStatus",
    "LinkValidationError",
    "FailureKind",
    "EventLogger",
    "StreamEventLogger",
    "HttpEventLogger",
]
