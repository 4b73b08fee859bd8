"""
Docpress configuration.

Settings are read from DP_* environment variables.

Environment variables:
- DP_OUTPUT_DIR: Directory holding processed files (default: temp)
- DP_FILE_TTL_SECONDS: Lifetime of a processed file (default: 900)
- DP_DOWNLOAD_GRACE_SECONDS: Delay before deleting a downloaded file (default: 5)
- DP_CLEANUP_INTERVAL_SECONDS: Background sweep period, 0 disables (default: 60)
- DP_LOG_LEVEL: Log level (default: INFO)
- DP_CORS_ORIGINS: Comma-separated allowed origins
"""

import logging
import os
from datetime import timedelta
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, model_validator

from docpress.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_FILE_TTL_SECONDS = 15 * 60
DEFAULT_DOWNLOAD_GRACE_SECONDS = 5.0
DEFAULT_CLEANUP_INTERVAL_SECONDS = 60.0

DEFAULT_CORS_ORIGINS: list[str] = [
    "http://localhost:5000",
    "http://localhost:5173",
    "http://127.0.0.1:5000",
    "http://127.0.0.1:5173",
]


class Settings(BaseModel):
    """Runtime settings for the docpress server."""

    output_dir: Path = Field(default=Path("temp"), description="Directory holding processed files")
    file_ttl_seconds: float = Field(
        default=DEFAULT_FILE_TTL_SECONDS, description="Lifetime of a processed file"
    )
    download_grace_seconds: float = Field(
        default=DEFAULT_DOWNLOAD_GRACE_SECONDS,
        description="Delay before a downloaded file is deleted",
    )
    cleanup_interval_seconds: float = Field(
        default=DEFAULT_CLEANUP_INTERVAL_SECONDS,
        description="Background sweep period; 0 disables the sweep loop",
    )
    log_level: str = Field(default="INFO", description="Log level")
    cors_origins: list[str] = Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))

    @model_validator(mode="after")
    def check_durations(self) -> "Settings":
        """Reject a non-positive TTL and negative delays."""
        if self.file_ttl_seconds <= 0:
            raise ConfigurationError(
                "File TTL must be positive",
                setting="file_ttl_seconds",
                value=self.file_ttl_seconds,
            )
        if self.download_grace_seconds < 0:
            raise ConfigurationError(
                "Download grace delay cannot be negative",
                setting="download_grace_seconds",
                value=self.download_grace_seconds,
            )
        if self.cleanup_interval_seconds < 0:
            raise ConfigurationError(
                "Cleanup interval cannot be negative",
                setting="cleanup_interval_seconds",
                value=self.cleanup_interval_seconds,
            )
        return self

    @property
    def file_ttl(self) -> timedelta:
        return timedelta(seconds=self.file_ttl_seconds)

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from the environment."""
        origins_raw = os.getenv("DP_CORS_ORIGINS", "")
        origins = [o.strip() for o in origins_raw.split(",") if o.strip()]

        return cls(
            output_dir=Path(os.getenv("DP_OUTPUT_DIR", "temp")),
            file_ttl_seconds=_float_env("DP_FILE_TTL_SECONDS", DEFAULT_FILE_TTL_SECONDS),
            download_grace_seconds=_float_env(
                "DP_DOWNLOAD_GRACE_SECONDS", DEFAULT_DOWNLOAD_GRACE_SECONDS
            ),
            cleanup_interval_seconds=_float_env(
                "DP_CLEANUP_INTERVAL_SECONDS", DEFAULT_CLEANUP_INTERVAL_SECONDS
            ),
            log_level=os.getenv("DP_LOG_LEVEL", "INFO").upper(),
            cors_origins=origins or list(DEFAULT_CORS_ORIGINS),
        )


def _float_env(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning(f"Invalid {name}: {value}, using default {default}")
        return default


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the process settings (cached)."""
    return Settings.from_env()
