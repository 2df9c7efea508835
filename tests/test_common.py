"""Tests for common utilities."""

import json
import logging

from config import Config
from shortlinks.common.validators import is_valid_url, is_valid_short_code, is_valid_validity
from shortlinks.common.headers import click_source_from_headers
from shortlinks.common.url_builder import build_short_url, short_url_for_config
from shortlinks.events import StreamEventLogger
from shortlinks.common.logging_config import setup_logging


class TestValidators:
    """Test validation utilities."""

    def test_valid_urls(self):
        """Test valid URL validation."""
        valid, _ = is_valid_url("https://example.com")
        assert valid

        valid, _ = is_valid_url("http://example.com/path")
        assert valid

        valid, _ = is_valid_url("https://sub.example.com:8080/path?query=value")
        assert valid

        valid, _ = is_valid_url("ftp://files.example.com/archive.zip")
        assert valid

    def test_invalid_urls(self):
        """Test invalid URL validation."""
        valid, error = is_valid_url("")
        assert not valid
        assert "required" in error.lower()

        valid, error = is_valid_url(None)
        assert not valid

        valid, error = is_valid_url("not-a-url")
        assert not valid
        assert error == "Please enter a valid URL"

        valid, _ = is_valid_url("example.com/path")
        assert not valid

        valid, _ = is_valid_url("https://exa mple.com")
        assert not valid

        valid, _ = is_valid_url("mailto:someone@example.com")
        assert not valid

        valid, error = is_valid_url("https://example.com/" + "a" * 2048)
        assert not valid
        assert "too long" in error

    def test_validity(self):
        """Test validity period validation."""
        assert is_valid_validity(1)[0]
        assert is_valid_validity(10080)[0]

        valid, error = is_valid_validity(0)
        assert not valid
        assert error == "Validity period must be at least 1 minute"

        assert not is_valid_validity(False)[0]
        assert not is_valid_validity("5")[0]

    def test_valid_short_codes(self):
        """Test valid short code validation."""
        for code in ("abc", "abc123", "ABCDEFGHIJ", "x9Y"):
            valid, _ = is_valid_short_code(code)
            assert valid, code

    def test_invalid_short_codes(self):
        """Test invalid short code validation."""
        valid, error = is_valid_short_code("ab")
        assert not valid
        assert error == "Shortcode must be 3-10 alphanumeric characters"

        valid, _ = is_valid_short_code("a" * 11)
        assert not valid

        valid, _ = is_valid_short_code("test-code")
        assert not valid

        valid, error = is_valid_short_code("API")
        assert not valid
        assert "reserved" in error.lower()

        valid, error = is_valid_short_code(123)
        assert not valid
        assert error == "Shortcode must be 3-10 alphanumeric characters"


class TestHeaders:
    """Test header utilities."""

    def test_direct_without_referer(self):
        assert click_source_from_headers({}) == "direct"
        assert click_source_from_headers({"Referer": "  "}) == "direct"

    def test_referer_host(self):
        headers = {"Referer": "https://news.example.org/story?id=1"}
        assert click_source_from_headers(headers) == "news.example.org"

    def test_referer_case_insensitive(self):
        assert click_source_from_headers({"referer": "http://blog.test/post"}) == "blog.test"

    def test_unparseable_referer(self):
        assert click_source_from_headers({"Referer": "not a url"}) == "direct"


class TestURLBuilder:
    """Test URL building utilities."""

    def test_build_short_url_no_prefix(self):
        """Test short URL building without prefix."""
        url = build_short_url(
            short_code="abc123",
            base_url="https://example.com/",
            path_prefix=""
        )

        assert url == "https://example.com/abc123"

    def test_build_short_url_with_prefix(self):
        """Test short URL building with prefix."""
        url = build_short_url(
            short_code="abc123",
            base_url="https://example.com",
            path_prefix="/s/"
        )

        assert url == "https://example.com/s/abc123"

    def test_prefix_slashes_normalized(self):
        """Test prefix with or without surrounding slashes."""
        for prefix in ("s", "/s", "s/", "//s//"):
            assert build_short_url("abc123", "https://example.com/", prefix) == "https://example.com/s/abc123"

    def test_short_url_for_config(self):
        config = Config(_env_file=None, base_url="https://sho.rt/", path_prefix="/go")

        assert short_url_for_config(config, "Zx9") == "https://sho.rt/go/Zx9"


class TestConfig:
    """Test configuration loading."""

    def test_defaults(self, monkeypatch):
        for var in ("BASE_URL", "PORT", "EVENT_SINK_URL", "EMAIL", "NAME", "ROLL_NO"):
            monkeypatch.delenv(var, raising=False)

        config = Config(_env_file=None)

        assert config.port == 5000
        assert config.short_code_length == 6
        assert config.default_validity_minutes == 30
        assert config.event_sink_url is None

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("BASE_URL", "https://sho.rt")
        monkeypatch.setenv("EMAIL", "dev@example.com")
        monkeypatch.setenv("ROLL_NO", "42")

        config = Config(_env_file=None)

        assert config.base_url == "https://sho.rt"
        assert config.identity["email"] == "dev@example.com"
        assert config.identity["rollNo"] == "42"

    def test_safe_dump_hides_credentials(self):
        config = Config(_env_file=None, client_secret="s3cret", access_token="tok")

        dumped = config.safe_dump()

        assert "client_secret" not in dumped
        assert "access_token" not in dumped
        assert "base_url" in dumped


class TestLogging:
    """Test logging setup."""

    def test_setup_logging(self, tmp_path):
        log_file = tmp_path / "service.log"

        logger = setup_logging(level="debug", log_file=str(log_file))

        assert logger.name == "shortlinks"
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 2
        logger.info("hello")
        for handler in logger.handlers:
            handler.flush()
        assert "hello" in log_file.read_text()
        setup_logging(level="INFO")

    async def test_json_format_event_lines_parse(self, tmp_path):
        """Test JSON lines stay valid when the message itself carries JSON."""
        log_file = tmp_path / "events.log"
        logger = setup_logging(level="INFO", log_file=str(log_file), json_format=True)

        await StreamEventLogger().log("URL_CREATED", {"shortcode": "abc", "originalUrl": 'https://example.com/?q="x"'})
        for handler in logger.handlers:
            handler.flush()

        lines = log_file.read_text().splitlines()
        entry = json.loads(lines[-1])
        assert entry["level"] == "INFO"
        assert entry["logger"] == "shortlinks.events"
        assert "URL_CREATED" in entry["message"]
        assert '"shortcode": "abc"' in entry["message"]
        setup_logging(level="INFO")
