"""Configuration management for MText Bridge."""

from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration via environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Serializer defaults
    default_font: str = Field(
        default="Arial",
        alias="MTEXT_DEFAULT_FONT",
    )

    # Editor marker classes and the values they imply when no inline
    # style carries the actual amount
    tracking_marker_class: str = Field(
        default="letterspacing",
        alias="MTEXT_TRACKING_CLASS",
    )
    default_tracking: float = Field(
        default=10,
        alias="MTEXT_DEFAULT_TRACKING",
    )
    width_marker_class: str = Field(
        default="letterwidth",
        alias="MTEXT_WIDTH_CLASS",
    )
    default_width: float = Field(
        default=1,
        alias="MTEXT_DEFAULT_WIDTH",
    )

    # CSS unit conversion (lengths are normalized to em)
    base_font_px: float = Field(
        default=16,
        gt=0,
        alias="MTEXT_BASE_FONT_PX",
    )
    px_per_pt: float = Field(
        default=1.33,
        gt=0,
        alias="MTEXT_PX_PER_PT",
    )

    # BeautifulSoup tree builder
    html_parser: str = Field(
        default="html.parser",
        alias="MTEXT_HTML_PARSER",
    )

    log_level: Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"] = Field(
        default="WARNING",
        alias="MTEXT_LOG_LEVEL",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: object) -> object:
        """Accept level names in any case."""
        if isinstance(v, str):
            return v.strip().upper()
        return v


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, creating it if needed."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """Load settings from an optional specific .env file."""
    global _settings
    if env_file:
        _settings = Settings(_env_file=env_file)
    else:
        _settings = Settings()
    return _settings
