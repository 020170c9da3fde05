"""
xlsx-templates - Configuration Module

Centralized configuration management with Pydantic settings.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RequiredHighlight(str, Enum):
    """Conditional formatting rule used for empty required cells."""
    TRIMMED = "trimmed"    # LEN(TRIM(cell))=0, catches whitespace-only values
    BLANK = "blank"        # ISBLANK(cell)
    NONE = "none"


class LogFormat(str, Enum):
    """Log output formats."""
    JSON = "json"
    CONSOLE = "console"


class RenderingConfig(BaseSettings):
    """Workbook rendering configuration."""

    model_config = SettingsConfigDict(
        env_prefix="XLSX_RENDER_",
        extra="ignore"
    )

    data_rows: int = Field(default=10000, gt=0, le=1_048_000)
    info_row: bool = Field(default=False)
    protect_sheets: bool = Field(default=True)
    sheet_password: Optional[str] = Field(default=None)
    required_highlight: RequiredHighlight = Field(default=RequiredHighlight.TRIMMED)
    column_padding: float = Field(default=1.25, ge=1.0)
    min_column_width: int = Field(default=8, ge=1)
    max_column_width: int = Field(default=60, ge=1)
    comment_author: str = Field(default="xlsx-templates")

    @field_validator("sheet_password", mode="before")
    @classmethod
    def blank_password_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def header_rows(self) -> int:
        """Rows reserved above the data band."""
        return 2 if self.info_row else 1


class LogConfig(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="XLSX_LOG_",
        extra="ignore"
    )

    level: str = Field(default="INFO")
    format: LogFormat = Field(default=LogFormat.CONSOLE)

    @field_validator("level", mode="before")
    @classmethod
    def upper_level(cls, v):
        return v.upper() if isinstance(v, str) else v


class AppConfig(BaseSettings):
    """Main application configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True
    )

    templates_file: Optional[Path] = Field(default=None, alias="XLSX_TEMPLATES_FILE")
    rendering: RenderingConfig = Field(default_factory=RenderingConfig)
    log: LogConfig = Field(default_factory=LogConfig)

    @field_validator("templates_file", mode="before")
    @classmethod
    def empty_path_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "AppConfig":
        """Load configuration from environment (and optional .env file)."""
        kwargs = {}
        if env_file and Path(env_file).exists():
            kwargs["_env_file"] = env_file
        return cls(
            rendering=RenderingConfig(**kwargs),
            log=LogConfig(**kwargs),
            **kwargs,
        )


def load_config(env_file: Optional[str] = None) -> AppConfig:
    """Load application configuration."""
    return AppConfig.from_env(env_file)
