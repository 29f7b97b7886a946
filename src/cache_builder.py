"""Tiles cache construction.

Wires settings, logging and the domain TilesCache. The DEM access itself
(TileUpdater) and the tile backing (TileFactory) are supplied by the caller.
"""

from __future__ import annotations

import logging

from domain.terrain.tiles_cache import FactoryLike, TilesCache, UpdaterLike
from src.settings import TilesCacheSettings

# Module-level logger (reused across all calls)
logger = logging.getLogger(__name__)

# Root logger of the domain layer, tuned by the log_level setting
DOMAIN_LOGGER = "domain"


def build_tiles_cache(
    factory: FactoryLike,
    updater: UpdaterLike,
    settings: TilesCacheSettings | None = None,
) -> TilesCache:
    """Build a TilesCache configured from settings.

    Args:
        factory: TileFactory or zero-argument callable creating empty tiles
        updater: TileUpdater or callable(latitude, longitude, tile)
        settings: Settings to use; read from the environment when None

    Returns:
        Empty TilesCache
    """
    if settings is None:
        settings = TilesCacheSettings()

    # Only the level is set: handlers stay the application's business
    logging.getLogger(DOMAIN_LOGGER).setLevel(settings.log_level)

    cache = TilesCache(
        factory,
        updater,
        max_tiles=settings.max_tiles,
        longitude_window=settings.longitude_window,
    )
    logger.info(
        "Built tiles cache: max_tiles=%d, longitude_window=%s",
        settings.max_tiles,
        settings.longitude_window.value,
    )
    return cache
