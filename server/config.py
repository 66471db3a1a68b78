"""Configuration settings for the speed test server."""

import os
from dataclasses import dataclass

from common.constants import (
    CHUNK_SIZE_BYTES,
    DEFAULT_SERVER_PORT,
    DEFAULT_SIZE_BYTES,
    MAX_SIZE_BYTES,
    MAX_UPLOAD_BYTES,
    MIN_SIZE_BYTES,
)
from server.exceptions import ConfigurationError


SERVER_HOST = os.environ.get("SPEEDTEST_HOST", "0.0.0.0")

SERVER_PORT = int(os.environ.get("SPEEDTEST_PORT", str(DEFAULT_SERVER_PORT)))

API_PREFIX = os.environ.get("SPEEDTEST_API_PREFIX", "").rstrip("/")

CORS_ALLOW_ORIGIN = os.environ.get("SPEEDTEST_CORS_ORIGIN", "*")

CORS_MAX_AGE = int(os.environ.get("SPEEDTEST_CORS_MAX_AGE", "86400"))


@dataclass(frozen=True)
class TransferSettings:
    """Read-only bounds shared by every transfer request."""
    min_size: int = MIN_SIZE_BYTES
    default_size: int = DEFAULT_SIZE_BYTES
    max_size: int = MAX_SIZE_BYTES
    chunk_size: int = CHUNK_SIZE_BYTES
    max_upload: int = MAX_UPLOAD_BYTES
    strict_size: bool = False

    def validate(self) -> "TransferSettings":
        """
        Check that the size triple is consistent.

        Returns:
            self, so construction and validation can be chained

        Raises:
            ConfigurationError: If any bound is non-positive or out of order
        """
        if self.min_size <= 0:
            raise ConfigurationError(f"Minimum size must be positive, got {self.min_size}")
        if not self.min_size <= self.default_size <= self.max_size:
            raise ConfigurationError(
                f"Size bounds must satisfy min <= default <= max, got "
                f"{self.min_size} / {self.default_size} / {self.max_size}"
            )
        if self.chunk_size <= 0:
            raise ConfigurationError(f"Chunk size must be positive, got {self.chunk_size}")
        if self.max_upload <= 0:
            raise ConfigurationError(f"Upload maximum must be positive, got {self.max_upload}")
        return self


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


def load_transfer_settings() -> TransferSettings:
    """
    Build TransferSettings from SPEEDTEST_* environment variables.

    Raises:
        ConfigurationError: If a value is not an integer or the bounds are inconsistent
    """
    try:
        settings = TransferSettings(
            min_size=int(os.environ.get("SPEEDTEST_MIN_SIZE_BYTES", str(MIN_SIZE_BYTES))),
            default_size=int(os.environ.get("SPEEDTEST_DEFAULT_SIZE_BYTES", str(DEFAULT_SIZE_BYTES))),
            max_size=int(os.environ.get("SPEEDTEST_MAX_SIZE_BYTES", str(MAX_SIZE_BYTES))),
            chunk_size=int(os.environ.get("SPEEDTEST_CHUNK_SIZE_BYTES", str(CHUNK_SIZE_BYTES))),
            max_upload=int(os.environ.get("SPEEDTEST_MAX_UPLOAD_BYTES", str(MAX_UPLOAD_BYTES))),
            strict_size=_env_flag("SPEEDTEST_STRICT_SIZE"),
        )
    except ValueError as e:
        raise ConfigurationError(f"Invalid transfer setting: {e}") from e
    return settings.validate()


_settings: TransferSettings | None = None


def get_transfer_settings() -> TransferSettings:
    """
    FastAPI dependency returning the process-wide transfer settings.

    Loaded lazily on first use and cached; tests replace it through
    ``app.dependency_overrides``.
    """
    global _settings
    if _settings is None:
        _settings = load_transfer_settings()
    return _settings
