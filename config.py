"""Configuration management for the short-link service."""

from typing import Dict, Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Config(BaseSettings):
    """Application configuration."""

    # Server settings
    host: str = Field(
        default="0.0.0.0",
        description="Host to bind to"
    )

    port: int = Field(
        default=5000,
        description="Port to listen on"
    )

    # Short link settings
    base_url: str = Field(
        default="http://localhost:5000",
        description="Base URL for generating short URLs"
    )

    path_prefix: str = Field(
        default="",
        description="Path prefix for short URLs (e.g., '/s' for /s/abc123)"
    )

    short_code_length: int = Field(
        default=6,
        ge=3,
        le=10,
        description="Length of generated short codes"
    )

    default_validity_minutes: int = Field(
        default=30,
        ge=1,
        description="Validity period used when a request does not give one"
    )

    max_collision_retries: int = Field(
        default=5,
        ge=0,
        description="Maximum retries when generating short codes"
    )

    # Event sink settings
    event_sink_url: Optional[str] = Field(
        default=None,
        description="Remote log endpoint for link events (logged locally if not set)"
    )

    event_sink_timeout: float = Field(
        default=5.0,
        gt=0,
        description="Timeout in seconds for forwarding a single event"
    )

    # Identity settings
    client_id: Optional[str] = Field(default=None, description="Client identifier")
    client_secret: Optional[str] = Field(default=None, description="Client secret")
    email: Optional[str] = Field(default=None, description="Owner email, added to event records")
    name: Optional[str] = Field(default=None, description="Owner name, added to event records")
    roll_no: Optional[str] = Field(default=None, description="Owner roll number, added to event records")
    access_code: Optional[str] = Field(default=None, description="Access code")
    access_token: Optional[str] = Field(default=None, description="Access token")

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    log_file: Optional[str] = Field(
        default=None,
        description="Log file path (logs to stdout if not specified)"
    )

    log_json: bool = Field(
        default=False,
        description="Use JSON format for logs"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",  # Ignore extra environment variables
    }

    @property
    def identity(self) -> Dict[str, Optional[str]]:
        """Identity fields merged into locally logged events."""
        return {"email": self.email, "name": self.name, "rollNo": self.roll_no}

    def safe_dump(self) -> dict:
        """Configuration without credentials, for the startup log line."""
        return self.model_dump(exclude={"client_secret", "access_code", "access_token"})


def load_config() -> Config:
    """Load configuration from environment."""
    return Config()
