"""Configuration management for deskcapture using pydantic-settings.

Settings are read from ``DESKCAPTURE_*`` environment variables and an
optional ``.env`` file.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

BackendName = Literal["auto", "x11", "wayland", "macos", "windows", "wsl"]


class CaptureSettings(BaseSettings):
    """Settings for the capture engine."""

    model_config = SettingsConfigDict(
        env_prefix="DESKCAPTURE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Backend selection
    backend: BackendName = Field(
        default="auto", description="Capture backend, 'auto' detects it from the platform"
    )
    x11_display: str | None = Field(
        default=None, description="DISPLAY value passed to X11 tools, inherited when unset"
    )

    # Fallback geometry used when displays cannot be enumerated
    fallback_width: int = Field(
        default=1920, gt=0, description="Width of the synthetic fallback display"
    )
    fallback_height: int = Field(
        default=1080, gt=0, description="Height of the synthetic fallback display"
    )

    # External process settings
    command_timeout: float | None = Field(
        default=None,
        gt=0,
        description="Upper bound in seconds for each external capture command, unbounded when unset",
    )

    # Logging settings
    debug_mode: bool = Field(default=False, description="Enable debug logging")
    log_level: str = Field(default="INFO", description="Log level")
    log_file: Path | None = Field(default=None, description="Optional log file path")
    structured_logs: bool = Field(default=True, description="Render logs as JSON")


# Singleton instance
_settings: CaptureSettings | None = None


def get_settings() -> CaptureSettings:
    """Get the singleton settings instance.

    Returns:
        CaptureSettings instance
    """
    global _settings

    if _settings is None:
        _settings = CaptureSettings()

    return _settings


def reset_settings() -> None:
    """Reset the settings singleton (mainly for testing)."""
    global _settings
    _settings = None
