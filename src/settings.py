"""Tiles cache settings.

Environment-driven configuration (prefix DEM_TILES_), e.g.:

    DEM_TILES_MAX_TILES=16
    DEM_TILES_LONGITUDE_WINDOW=positive
    DEM_TILES_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from domain.terrain.value_objects import LongitudeWindow


class TilesCacheSettings(BaseSettings):
    """Validated settings for building a TilesCache."""

    model_config = SettingsConfigDict(
        env_prefix="DEM_TILES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Tiles kept in memory, zipper tiles included
    max_tiles: int = Field(default=8, ge=1)
    # Must match the longitude frame of the tiles produced by the updater
    longitude_window: LongitudeWindow = LongitudeWindow.SIGNED
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level
