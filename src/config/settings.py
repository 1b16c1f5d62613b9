"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use REVEALTEXT_ prefix (e.g., REVEALTEXT_BASE_PERIOD=0.1).

Settings can also be loaded from a .env file in the project root.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use REVEALTEXT_ prefix.

    Examples:
        REVEALTEXT_BASE_PERIOD=0.1
        REVEALTEXT_DEFAULT_MODE=repeating
        REVEALTEXT_SHAKE_INTENSITY=0.25
    """

    model_config = SettingsConfigDict(
        env_prefix="REVEALTEXT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Reveal engine configuration
    base_period: float = Field(
        default=1.0 / 20.0,
        gt=0.0,
        description="Seconds per revealed character at speed factor 1",
    )

    default_mode: Literal["once", "repeating"] = Field(
        default="once",
        description="Scroll mode given to new reveal engines",
    )

    # Parser configuration
    shake_intensity: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Intensity attached to [shake] spans",
    )

    # Playback configuration
    playback_step: float = Field(
        default=1.0 / 60.0,
        gt=0.0,
        description="Fixed frame delta (seconds) used by offline playback",
    )

    playback_limit: float = Field(
        default=600.0,
        gt=0.0,
        description="Simulated seconds after which offline playback stops",
    )

    interact_delay: float = Field(
        default=1.0,
        ge=0.0,
        description="Simulated seconds playback waits at an await-clear gate before interacting",
    )

    # Output configuration
    pygments_style: str = Field(
        default="monokai",
        description="Pygments style used for highlighted source previews",
    )

    debug_mode: bool = Field(
        default=False,
        description="Force trace-level logging and tracebacks in the command line tool",
    )


# Singleton instance - import this in your code
appsettings = AppSettings()
