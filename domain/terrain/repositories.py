"""Domain Port(s) for Terrain Tiles.

Defines interfaces (Protocols) that tile backings and elevation sources
must implement. No concrete I/O here: reading DEM files is entirely the
business of the TileUpdater supplied by the caller.
"""

from __future__ import annotations

from typing import Protocol, TypeVar

from numpy.typing import ArrayLike

from .value_objects import GeodeticPoint, Location, NormalizedGeodeticPoint


class UpdatableTile(Protocol):
    """Write side of a tile, as seen by a TileUpdater."""

    def set_geometry(
        self,
        min_latitude: float,
        min_longitude: float,
        latitude_step: float,
        longitude_step: float,
        latitude_rows: int,
        longitude_columns: int,
    ) -> None:
        """Set the tile grid; min coordinates are those of the south-west cell center."""
        ...

    def set_elevation(
        self, latitude_index: int, longitude_index: int, elevation: float
    ) -> None:
        """Set the elevation (m) of one grid node."""
        ...


class Tile(UpdatableTile, Protocol):
    """Rectangular elevation grid answering interpolation queries."""

    @property
    def minimum_latitude(self) -> float: ...

    @property
    def maximum_latitude(self) -> float: ...

    @property
    def minimum_longitude(self) -> float: ...

    @property
    def maximum_longitude(self) -> float: ...

    @property
    def latitude_step(self) -> float: ...

    @property
    def longitude_step(self) -> float: ...

    @property
    def latitude_rows(self) -> int: ...

    @property
    def longitude_columns(self) -> int: ...

    @property
    def min_elevation(self) -> float: ...

    @property
    def max_elevation(self) -> float: ...

    def tile_update_completed(self) -> None: ...

    def latitude_at_index(self, latitude_index: int) -> float: ...

    def longitude_at_index(self, longitude_index: int) -> float: ...

    def floor_latitude_index(self, latitude: float) -> int: ...

    def floor_longitude_index(self, longitude: float) -> int: ...

    def elevation_at_indices(self, latitude_index: int, longitude_index: int) -> float: ...

    def get_location(self, latitude: float, longitude: float) -> Location: ...

    def interpolate_elevation(self, latitude: float, longitude: float) -> float: ...

    def cell_intersection(
        self,
        point: GeodeticPoint,
        los: ArrayLike,
        latitude_index: int,
        longitude_index: int,
    ) -> NormalizedGeodeticPoint | None: ...


T = TypeVar("T", bound=Tile)
T_co = TypeVar("T_co", bound=Tile, covariant=True)


class TileFactory(Protocol[T_co]):
    """Port creating empty (UNINITIALIZED) tiles of one concrete backing."""

    def create_tile(self) -> T_co:
        ...


class TileUpdater(Protocol):
    """Port filling a tile with geometry and elevations around a point.

    Implementations must configure the tile so that its footprint contains
    (latitude, longitude). Called at most once per tile, never incrementally.
    Implementations may perform blocking I/O; errors propagate unchanged.
    """

    def update_tile(
        self, latitude: float, longitude: float, tile: UpdatableTile
    ) -> None:
        ...
