# ==============================================================================
# Application Configuration
# ==============================================================================
"""
Configuration management using pydantic-settings.

All configuration is loaded from environment variables, with support for
.env files via python-dotenv.

Settings are only read by the CLI layer. The core receives the resolved
timezone and week-start day as explicit arguments.
"""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from timecard.core.models import Weekday

# Load .env file before any settings are instantiated
load_dotenv()

logger = logging.getLogger(__name__)

DATA_FILE_NAME = "hours.csv"
DEFAULT_TIMEZONE = "UTC"


# ==============================================================================
# Timezone Resolution
# ==============================================================================


def load_timezone(name: str) -> ZoneInfo:
    """
    Load an IANA timezone by key.

    Raises:
        ValueError: If zoneinfo does not recognise the key
    """
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Timezone {name!r} is not recognised by zoneinfo") from exc


def detect_local_timezone() -> str:
    """
    Best-effort IANA key of the system timezone.

    Checks, in order: the TZ environment variable, /etc/timezone, and the
    /etc/localtime symlink. Falls back to UTC.
    """
    tz_env = os.environ.get("TZ", "").lstrip(":").strip()
    if tz_env:
        return tz_env

    etc_timezone = Path("/etc/timezone")
    if etc_timezone.is_file():
        key = etc_timezone.read_text().strip()
        if key:
            return key

    localtime = Path("/etc/localtime")
    if localtime.is_symlink():
        target = str(localtime.resolve())
        marker = "zoneinfo/"
        if marker in target:
            return target.split(marker, 1)[1]

    logger.warning("Could not determine local timezone, using %s", DEFAULT_TIMEZONE)
    return DEFAULT_TIMEZONE


def default_data_folder() -> Path:
    """Platform data directory for the event file."""
    xdg = os.environ.get("XDG_DATA_HOME")
    base = Path(xdg) if xdg else Path.home() / ".local" / "share"
    return base / "timecard"


# ==============================================================================
# Settings
# ==============================================================================


class ReportSettings(BaseSettings):
    """Defaults for the report command."""

    model_config = SettingsConfigDict(env_prefix="TIMECARD_REPORT_")

    week_start: Weekday = Field(
        default=Weekday.MONDAY, description="First day of the week (name or 0-6, Monday=0)"
    )
    rows: int = Field(default=10, ge=1, description="Number of trailing rows to display")
    exact_durations: bool = Field(
        default=False, description="Show exact durations instead of rounded"
    )

    @field_validator("week_start", mode="before")
    @classmethod
    def _parse_weekday(cls, value):
        if not isinstance(value, str):
            return value
        text = value.strip()
        if text.isdigit():
            return int(text)
        name = text.upper()
        for day in Weekday:
            if day.name == name or day.name[:3] == name:
                return day
        raise ValueError(f"Unknown weekday {value!r}")


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="TIMECARD_",
        extra="ignore",
    )

    report: ReportSettings = Field(default_factory=ReportSettings)

    data_folder: Optional[Path] = Field(
        default=None, description="Folder holding the event file (defaults to the data dir)"
    )
    timezone: Optional[str] = Field(
        default=None, description="IANA timezone for reports (defaults to the system timezone)"
    )
    log_level: str = Field(default="WARNING", description="Logging level")

    @property
    def data_folder_path(self) -> Path:
        """Resolved data folder."""
        return self.data_folder if self.data_folder else default_data_folder()

    @property
    def data_file(self) -> Path:
        """Path to the append-only event file."""
        return self.data_folder_path / DATA_FILE_NAME

    @property
    def timezone_name(self) -> str:
        return self.timezone or detect_local_timezone()

    def get_timezone(self) -> ZoneInfo:
        """Resolve the configured (or detected) timezone."""
        return load_timezone(self.timezone_name)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Settings are loaded once and cached for subsequent calls.
    """
    return Settings()
