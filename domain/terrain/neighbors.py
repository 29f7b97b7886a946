"""Terrain Bounded Context - Neighbor Tiles Resolution.

Finds the real tiles adjacent to a given tile, one tile span away from its
middle point. Tiles are obtained through a lookup callable, normally the
cache's own real-tile path, so neighbors are loaded (and may evict) exactly
like any other tile.
"""

from __future__ import annotations

import logging
from typing import Callable

from domain.terrain.repositories import Tile
from domain.terrain.tile import middle_point
from domain.terrain.value_objects import Location, LongitudeWindow

logger = logging.getLogger(__name__)

TileLookup = Callable[[float, float], Tile]


class NeighborResolver:
    """Resolve the north/south/east/west (and diagonal) neighbors of a tile."""

    def __init__(
        self,
        lookup: TileLookup,
        longitude_window: LongitudeWindow = LongitudeWindow.SIGNED,
    ) -> None:
        self._lookup = lookup
        self._window = longitude_window

    def north(self, tile: Tile) -> Tile:
        return self._vertical(tile, 1)

    def south(self, tile: Tile) -> Tile:
        return self._vertical(tile, -1)

    def east(self, tile: Tile) -> Tile:
        return self._horizontal(tile, 1)

    def west(self, tile: Tile) -> Tile:
        return self._horizontal(tile, -1)

    def interpolation_contributors(self, tile: Tile, location: Location) -> list[Tile]:
        """Tiles needed to interpolate around a point on the tile border.

        Returns the tile itself followed by its vertical neighbor, its
        horizontal neighbor and the diagonal one, each only when the
        location points that way. Diagonal = east/west of the north/south
        neighbor.
        """
        contributors = [tile]
        vertical = None
        if location.latitude_offset:
            vertical = self._vertical(tile, location.latitude_offset)
            contributors.append(vertical)
        if location.longitude_offset:
            contributors.append(self._horizontal(tile, location.longitude_offset))
            if vertical is not None:
                contributors.append(
                    self._horizontal(vertical, location.longitude_offset)
                )
        logger.debug(
            "Resolved %d contributor tile(s) for location %s",
            len(contributors),
            location.name,
        )
        return contributors

    def _vertical(self, tile: Tile, direction: int) -> Tile:
        latitude, longitude = middle_point(tile)
        span = tile.latitude_rows * tile.latitude_step
        return self._lookup(latitude + direction * span, longitude)

    def _horizontal(self, tile: Tile, direction: int) -> Tile:
        latitude, longitude = middle_point(tile)
        span = tile.longitude_columns * tile.longitude_step
        return self._lookup(latitude, self._window.normalize(longitude + direction * span))
