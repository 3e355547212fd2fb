"""Application configuration.

Configuration is loaded from environment variables using pydantic-settings.
Every variable is prefixed with ``CALENDAR_``. Credentials are never stored
in configuration directly; point ``CALENDAR_SERVICE_ACCOUNT_KEY_FILE`` at the
service account JSON key instead.

## Optional Environment Variables

- CALENDAR_DEFAULT_CALENDAR_ID: Calendar to operate on (default: primary)
- CALENDAR_SERVICE_ACCOUNT_KEY_FILE: Path to the service account JSON key
- CALENDAR_DELEGATED_USER: User to impersonate (domain-wide delegation)
- CALENDAR_DEFAULT_TIME_ZONE: Zone used for naive dates (default: UTC)
- CALENDAR_LOG_LEVEL: Logging level for the CLI (default: WARNING)

## Example .env file

```
CALENDAR_DEFAULT_CALENDAR_ID=team@group.calendar.google.com
CALENDAR_SERVICE_ACCOUNT_KEY_FILE=/etc/calendar-helper/service-account.json
CALENDAR_DELEGATED_USER=scheduler@example.com
CALENDAR_DEFAULT_TIME_ZONE=America/New_York
```
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from dateutil import tz as dateutil_tz
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Hard limit enforced by the Google batch endpoint
MAX_BATCH_SIZE = 1000


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CALENDAR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Calendar
    default_calendar_id: str = Field(
        default="primary",
        min_length=1,
        description="Calendar ID used unless overridden per call",
    )
    default_time_zone: str = Field(
        default="UTC",
        description="IANA zone used to interpret dates without an offset",
    )

    # Google service account
    service_account_key_file: Path | None = Field(
        default=None,
        description="Path to the service account JSON key file",
    )
    delegated_user: str | None = Field(
        default=None,
        description="User e-mail to impersonate via domain-wide delegation",
    )
    scopes: list[str] = Field(
        default=["https://www.googleapis.com/auth/calendar"],
        description="Google Calendar API scopes",
    )

    # Requests
    num_retries: int = Field(default=2, ge=0, le=10)
    batch_size: int = Field(default=50, ge=1, le=MAX_BATCH_SIZE)

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"

    @field_validator("default_time_zone")
    @classmethod
    def validate_time_zone(cls, v: str) -> str:
        """Reject zone names the tz database does not know."""
        if dateutil_tz.gettz(v) is None:
            raise ValueError(f"Unknown time zone: {v}")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v

    @property
    def service_account_configured(self) -> bool:
        """Check if a service account key file is configured."""
        return self.service_account_key_file is not None


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are loaded once and cached. To reload, clear the cache:
    ```python
    get_settings.cache_clear()
    ```
    """
    return Settings()


def get_settings_uncached() -> Settings:
    """Get fresh settings without caching.

    Useful for testing when environment variables change.
    """
    return Settings()
