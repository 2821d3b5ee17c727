"""Bridge configuration using pydantic-settings.

This module defines the BridgeSettings class that reads configuration from
environment variables. Settings are resolved once at the start of every
invocation and handed to the webhook handler, so the handler itself never
reads the environment.

Environment variables (no prefix, case-insensitive):
- SLACK_URL: Slack incoming-webhook URL that receives issue notifications
- LOG_LEVEL: Root log level name (default INFO)
- LOG_JSON: Render log lines as JSON (default true)
- HOST / PORT: Bind address for the standalone HTTP server
"""

import logging
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BridgeSettings(BaseSettings):
    """Webhook bridge configuration from environment variables.

    SLACK_URL is optional at load time: an unset or blank value is
    normalized to None and reported by the handler as a configuration
    error for the individual request, not as a startup failure.
    """

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )

    # -------------------------------------------------------------------------
    # Slack Configuration
    # -------------------------------------------------------------------------
    # Destination incoming-webhook URL; None when unset or blank
    slack_url: Optional[str] = None

    # -------------------------------------------------------------------------
    # Logging Configuration
    # -------------------------------------------------------------------------
    log_level: str = "INFO"

    # JSON lines for CloudWatch; console rendering for local development
    log_json: bool = True

    # -------------------------------------------------------------------------
    # Server Configuration
    # -------------------------------------------------------------------------
    # Host address to bind the server to
    host: str = "0.0.0.0"

    # Port number for the server
    port: int = 8080

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------
    @field_validator("slack_url")
    @classmethod
    def normalize_slack_url(cls, v: Optional[str]) -> Optional[str]:
        """Treat a blank Slack URL as unset."""
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate that the log level is a known logging level name."""
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"log_level must be a logging level name, got {v!r}")
        return level

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate that port is in valid range."""
        if not 1 <= v <= 65535:
            raise ValueError("port must be between 1 and 65535")
        return v

    @property
    def slack_configured(self) -> bool:
        return self.slack_url is not None


def get_settings() -> BridgeSettings:
    """Create and return a BridgeSettings instance.

    Reads the current process environment on every call, which lets warm
    Lambda containers and long-running servers pick up the values in effect
    for each invocation.

    Returns:
        BridgeSettings: Configured settings instance.

    Raises:
        pydantic.ValidationError: If LOG_LEVEL or PORT is invalid.
    """
    return BridgeSettings()


def redact_secret(value: Optional[str], visible_chars: int = 4) -> str:
    """Redact a secret value, showing only the first few characters.

    Args:
        value: The secret value to redact.
        visible_chars: Number of characters to show at the start.

    Returns:
        Redacted string with asterisks replacing hidden characters, or
        "(unset)" when there is no value.
    """
    if value is None:
        return "(unset)"
    if len(value) <= visible_chars:
        return "*" * len(value)
    return value[:visible_chars] + "*" * (len(value) - visible_chars)
