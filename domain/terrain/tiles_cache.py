"""Terrain Bounded Context - Tiles Cache.

Bounded cache of DEM tiles with Least Recently Used eviction. Tiles are
created empty by a TileFactory and filled by a TileUpdater the first time a
point they cover is requested.

A point lying between the last node of a tile and the first node of its
neighbor has no interpolation neighbors in any real tile. For such points
the cache synthesizes a zipper tile from the neighboring tiles, inserts it
like any other tile and returns it. Zipper tiles are subject to the same
LRU policy.

Not thread-safe: callers must serialize access.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, Generic, Union

from domain.terrain.errors import TileWithoutRequiredNeighborsError
from domain.terrain.neighbors import NeighborResolver
from domain.terrain.repositories import T, TileFactory, TileUpdater, UpdatableTile
from domain.terrain.tile import footprint_contains
from domain.terrain.value_objects import Location, LongitudeWindow
from domain.terrain.zipper import ZipperTile, build_zipper_tile

logger = logging.getLogger(__name__)

FactoryLike = Union[TileFactory[T], Callable[[], T]]
UpdaterLike = Union[TileUpdater, Callable[[float, float, UpdatableTile], None]]


class TilesCache(Generic[T]):
    """LRU cache of at most max_tiles tiles, zipper tiles included.

    Example:
        >>> cache = TilesCache(SimpleTileFactory(), updater, max_tiles=8)
        >>> tile = cache.get_tile(latitude, longitude)
        >>> elevation = tile.interpolate_elevation(latitude, longitude)
    """

    def __init__(
        self,
        factory: FactoryLike,
        updater: UpdaterLike,
        max_tiles: int,
        longitude_window: LongitudeWindow = LongitudeWindow.SIGNED,
    ) -> None:
        if max_tiles < 1:
            raise ValueError(f"max_tiles must be at least 1, got {max_tiles}")
        self._create = getattr(factory, "create_tile", factory)
        self._update = getattr(updater, "update_tile", updater)
        self._max_tiles = max_tiles
        self._longitude_window = longitude_window
        self._neighbors = NeighborResolver(self._real_tile, longitude_window)
        # Most recently used first
        self._tiles: list[T | ZipperTile] = []

    def __len__(self) -> int:
        return len(self._tiles)

    @property
    def max_tiles(self) -> int:
        return self._max_tiles

    @property
    def longitude_window(self) -> LongitudeWindow:
        return self._longitude_window

    @property
    def tiles(self) -> tuple[T | ZipperTile, ...]:
        """Snapshot of the cached tiles, most recently used first."""
        return tuple(self._tiles)

    def get_tile(self, latitude: float, longitude: float) -> T | ZipperTile:
        """Get a tile able to interpolate elevation at a point.

        Args:
            latitude: Point latitude (radians)
            longitude: Point longitude (radians), in the updater frame

        A freshly loaded tile whose footprint holds the point only between
        its border nodes is zipped with its neighbors instead of rejected.

        Returns:
            Tile in which the point has interpolation neighbors, a real tile
            whenever one is cached

        Raises:
            TileWithoutRequiredNeighborsError: If the updater does not provide
                tiles covering the point
        """
        border = None
        zipper = None
        for tile in self._tiles:
            has_neighbors = (
                tile.get_location(latitude, longitude)
                is Location.HAS_INTERPOLATION_NEIGHBORS
            )
            if isinstance(tile, ZipperTile):
                if has_neighbors and zipper is None:
                    zipper = tile
                continue
            if has_neighbors:
                self._touch(tile)
                return tile
            if border is None and footprint_contains(tile, latitude, longitude):
                border = tile

        # zippers resample real tiles: only used where no real tile can interpolate
        if zipper is not None:
            self._touch(zipper)
            return zipper

        if border is None:
            tile = self._create_tile(latitude, longitude)
            if (
                tile.get_location(latitude, longitude)
                is Location.HAS_INTERPOLATION_NEIGHBORS
            ):
                return tile
            if not footprint_contains(tile, latitude, longitude):
                raise TileWithoutRequiredNeighborsError(latitude, longitude)
            border = tile
        else:
            self._touch(border)

        return self._zip(border, latitude, longitude)

    # -----------------------------------------------------------------------
    # Internals
    # -----------------------------------------------------------------------
    def _real_tile(self, latitude: float, longitude: float) -> T:
        """Get the real tile whose footprint contains a point, loading it if needed."""
        for tile in self._tiles:
            if not isinstance(tile, ZipperTile) and footprint_contains(
                tile, latitude, longitude
            ):
                self._touch(tile)
                return tile
        tile = self._create_tile(latitude, longitude)
        if not footprint_contains(tile, latitude, longitude):
            raise TileWithoutRequiredNeighborsError(latitude, longitude)
        return tile

    def _zip(self, border: T, latitude: float, longitude: float) -> ZipperTile:
        location = border.get_location(latitude, longitude)
        contributors = self._neighbors.interpolation_contributors(border, location)
        zipper = build_zipper_tile(contributors, latitude, longitude, location)
        if (
            zipper.get_location(latitude, longitude)
            is not Location.HAS_INTERPOLATION_NEIGHBORS
        ):
            raise TileWithoutRequiredNeighborsError(latitude, longitude)
        self._insert(zipper)
        return zipper

    def _create_tile(self, latitude: float, longitude: float) -> T:
        tile = self._create()
        self._update(latitude, longitude, tile)
        tile.tile_update_completed()
        self._insert(tile)
        logger.debug(
            "Loaded tile %r for point (%.6f, %.6f) deg",
            tile,
            math.degrees(latitude),
            math.degrees(longitude),
        )
        return tile

    def _insert(self, tile: T | ZipperTile) -> None:
        if len(self._tiles) >= self._max_tiles:
            evicted = self._tiles.pop()
            logger.debug("Evicted least recently used tile %r", evicted)
        self._tiles.insert(0, tile)

    def _touch(self, tile: T | ZipperTile) -> None:
        if self._tiles[0] is not tile:
            self._tiles.remove(tile)
            self._tiles.insert(0, tile)
