"""Runtime settings and the fixed table of user-facing strings."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PipelineSettings(BaseSettings):
    """Settings for a page session's submission pipeline.

    Values come from ``CONTACTFLOW_*`` environment variables or a ``.env``
    file; durations are in milliseconds unless the name says otherwise.
    """

    model_config = SettingsConfigDict(
        env_prefix="CONTACTFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Endpoint
    base_url: str = "http://localhost"
    endpoint: str = "process.php"
    request_timeout: float = Field(default=10.0, gt=0)

    # Navigation
    redirect_url: str = "thank_you.html"
    redirect_delay_ms: int = Field(default=1000, ge=0)

    # Notifications
    notification_lifetime_ms: int = Field(default=5000, ge=0)
    notification_fade_ms: int = Field(default=150, ge=0)

    # Form behaviour
    input_debounce_ms: int = Field(default=300, ge=0)
    honeypot_name: str = "website"
    message_min_length: int = Field(default=10, ge=1)

    # Observability
    log_level: str = "INFO"


@dataclass(frozen=True)
class MessageTable:
    """Fixed user-facing strings.

    ``message_too_short`` is a format string taking ``min_length``.
    """
    required: str = "This field is required."
    invalid_email: str = "Please enter a valid email address."
    invalid_name: str = "Names may only contain letters, spaces, hyphens and apostrophes."
    invalid_phone: str = "Please enter a valid phone number."
    message_too_short: str = "Your message must be at least {min_length} characters long."
    must_agree: str = "You must agree to the terms."
    form_has_errors: str = "Please correct the errors in the form."
    sending: str = "Sending..."
    sent: str = "Your message has been sent successfully!"
    send_failed: str = "Something went wrong while sending. Please try again."
    connection_error: str = "Connection error. Please try again later."


__all__ = [
    "PipelineSettings",
    "MessageTable",
]
