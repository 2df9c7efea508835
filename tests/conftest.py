"""Pytest configuration and fixtures."""

import random
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import pytest
from httpx import AsyncClient, ASGITransport

from config import Config
from shortlinks.events import EventLogger, StreamEventLogger
from shortlinks.registry import LinkRegistry
from shortlinks.shortcode import ShortCodeGenerator
from shortlinks.common.logging_config import setup_logging
from web_app import create_app


class RecordingEventLogger(EventLogger):
    """Event logger that keeps every record in memory."""

    def __init__(self):
        self.events: List[Dict[str, Any]] = []
        self.closed = False

    async def log(self, event_type, payload=None, timestamp=None):
        self.events.append({"event_type": event_type, "payload": payload or {}, "timestamp": timestamp})
        return {"success": True, "message": "recorded"}

    async def close(self):
        self.closed = True

    def types(self) -> List[str]:
        return [event["event_type"] for event in self.events]

    def last(self, event_type: Optional[str] = None) -> Dict[str, Any]:
        matching = [e for e in self.events if event_type is None or e["event_type"] == event_type]
        return matching[-1]


class FailingEventLogger(EventLogger):
    """Event logger whose transport always fails."""

    def __init__(self):
        self.attempts = 0

    async def log(self, event_type, payload=None, timestamp=None):
        self.attempts += 1
        raise ConnectionError("log sink unreachable")


class FakeClock:
    """Settable clock for simulating the passage of time."""

    def __init__(self, start: Optional[datetime] = None):
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def events():
    return RecordingEventLogger()


@pytest.fixture
def failing_events():
    return FailingEventLogger()


@pytest.fixture
def short_code_generator():
    """Create short code generator."""
    return ShortCodeGenerator(default_length=6, rng=random.Random(1234))


@pytest.fixture
def registry(events, short_code_generator, logger, clock) -> LinkRegistry:
    """Create registry instance."""
    return LinkRegistry(
        event_logger=events,
        short_code_generator=short_code_generator,
        logger=logger,
        clock=clock,
    )


@pytest.fixture
def config():
    return Config(base_url="http://testserver", path_prefix="", event_sink_url=None)


@pytest.fixture
def app(registry, config):
    """Create test FastAPI app."""
    return create_app(
        registry=registry,
        event_sink=StreamEventLogger(identity=config.identity),
        config=config,
    )


@pytest.fixture
async def client(app):
    """Create test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/path",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]
