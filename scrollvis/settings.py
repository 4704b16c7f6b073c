"""
Module: settings

Purpose: Centralized configuration management for the scroll visualization.

Key Functions:
- get_settings: Load settings from environment variables
- load_settings: Load settings from a YAML file
- Settings: Pydantic settings model with validation

Architecture Notes:
- Uses pydantic-settings for type-safe configuration
- All settings have sensible defaults for the 800x520 layout
- Environment variables (SCROLLVIS_*) override defaults
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Margin(BaseModel):
    """Margins around the plot area, in pixels."""

    model_config = ConfigDict(frozen=True)

    top: int = 0
    left: int = 20
    bottom: int = 40
    right: int = 10


class Settings(BaseSettings):
    """Scroll visualization settings."""

    model_config = SettingsConfigDict(
        env_prefix="SCROLLVIS_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Plot geometry
    width: int = Field(default=800, gt=0)
    height: int = Field(default=520, gt=0)
    margin: Margin = Field(default_factory=Margin)

    # Input data
    data_path: str = "data/data.csv"
    date_format: str = "%m/%d/%y"

    # Bar chart
    default_year: str = "2016"
    bar_padding: float = Field(default=0.2, ge=0.0, lt=1.0)

    # Axes
    axis_ticks: int = 3

    # Durations in milliseconds
    section_duration_ms: int = Field(default=600, ge=0)
    bar_duration_ms: int = Field(default=1000, ge=0)
    zoom_duration_ms: int = Field(default=200, ge=0)

    # Output
    output_dir: str = "output/essays"

    @property
    def outer_width(self) -> int:
        """Width of the drawing surface including margins."""
        return self.width + self.margin.left + self.margin.right

    @property
    def outer_height(self) -> int:
        """Height of the drawing surface including margins."""
        return self.height + self.margin.top + self.margin.bottom


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the process settings (environment variables over defaults)."""
    return Settings()


def load_settings(path: Path | str) -> Settings:
    """Load settings from a YAML file.

    Expected YAML format:
    ```yaml
    width: 800
    height: 520
    margin:
      left: 20
    default_year: "2015"
    ```

    Args:
        path: Path to the YAML settings file

    Returns:
        Settings with file values applied over defaults

    Raises:
        FileNotFoundError: If the settings file doesn't exist
        yaml.YAMLError: If the YAML is invalid
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")

    with open(path) as f:
        data: dict[str, Any] = yaml.safe_load(f) or {}

    return Settings(**data)
