"""Terrain Bounded Context - Error Hierarchy.

Custom exceptions for tile and tiles cache operations.

Geometry and index errors are programmer errors surfaced immediately.
OutOfTileAnglesError is recoverable (ask another tile). A cell without
intersection is NOT an error: Tile.cell_intersection returns None.
"""

from __future__ import annotations

import math

from domain.terrain.value_objects import TileState


class TerrainError(Exception):
    """Base error for terrain operations."""


class EmptyTileError(TerrainError):
    """Tile geometry has zero latitude rows or zero longitude columns."""

    def __init__(self, latitude_rows: int, longitude_columns: int) -> None:
        self.latitude_rows = latitude_rows
        self.longitude_columns = longitude_columns
        super().__init__(
            f"Empty tile: {latitude_rows} latitude rows x "
            f"{longitude_columns} longitude columns"
        )


class InvalidTileGeometryError(TerrainError):
    """Tile steps are not strictly positive or coordinates are not finite."""


class TileStateError(TerrainError):
    """Operation not allowed in the tile's current lifecycle state.

    Attributes:
        state: The TileState the tile was in
    """

    def __init__(self, message: str, state: TileState) -> None:
        self.state = state
        super().__init__(f"{message} (tile state: {state.value})")


class OutOfTileIndicesError(TerrainError):
    """Grid indices outside of the tile.

    Attributes:
        latitude_index, longitude_index: The offending indices
        max_latitude_index, max_longitude_index: The largest valid indices
    """

    def __init__(
        self,
        latitude_index: int,
        longitude_index: int,
        max_latitude_index: int,
        max_longitude_index: int,
    ) -> None:
        self.latitude_index = latitude_index
        self.longitude_index = longitude_index
        self.max_latitude_index = max_latitude_index
        self.max_longitude_index = max_longitude_index
        super().__init__(
            f"Indices ({latitude_index}, {longitude_index}) out of tile "
            f"[0, {max_latitude_index}] x [0, {max_longitude_index}]"
        )


class OutOfTileAnglesError(TerrainError):
    """Point is farther from the tile than the interpolation tolerance.

    All attributes are in degrees.

    Attributes:
        latitude, longitude: The offending point
        min_latitude, max_latitude, min_longitude, max_longitude: Tile bounds
    """

    def __init__(
        self,
        latitude: float,
        longitude: float,
        min_latitude: float,
        max_latitude: float,
        min_longitude: float,
        max_longitude: float,
    ) -> None:
        self.latitude = math.degrees(latitude)
        self.longitude = math.degrees(longitude)
        self.min_latitude = math.degrees(min_latitude)
        self.max_latitude = math.degrees(max_latitude)
        self.min_longitude = math.degrees(min_longitude)
        self.max_longitude = math.degrees(max_longitude)
        super().__init__(
            f"Point ({self.latitude:.6f}, {self.longitude:.6f}) out of tile "
            f"[lat: {self.min_latitude:.6f} to {self.max_latitude:.6f}, "
            f"lon: {self.min_longitude:.6f} to {self.max_longitude:.6f}]"
        )


class TileWithoutRequiredNeighborsError(TerrainError):
    """Tile updater produced no tile able to interpolate around the point.

    Signals an inconsistent TileUpdater / TileFactory pairing.

    Attributes:
        latitude, longitude: The requested point, in degrees
    """

    def __init__(self, latitude: float, longitude: float) -> None:
        self.latitude = math.degrees(latitude)
        self.longitude = math.degrees(longitude)
        super().__init__(
            f"No tile with interpolation neighbors for point "
            f"({self.latitude:.6f}, {self.longitude:.6f})"
        )
