"""HTML pages and the short-code redirect."""

from .routes import router as web_router

__all__ = ["web_router"]
