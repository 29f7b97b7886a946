"""Terrain Bounded Context - Simple Tile.

Dense in-memory tile backing. Grid indexing convention:

- minimum latitude/longitude are those of the CENTER of the south-west
  cell, not of its outer edge;
- row 0 is the southernmost row, column 0 the westernmost column;
- latitude_at_index(i) = minimum_latitude + i * latitude_step.

A tile is configured exactly once (set_geometry then set_elevation calls),
then frozen by tile_update_completed(), which computes min/max elevations.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import ArrayLike, NDArray

from domain.terrain.errors import (
    EmptyTileError,
    InvalidTileGeometryError,
    OutOfTileAnglesError,
    OutOfTileIndicesError,
    TileStateError,
)
from domain.terrain.repositories import Tile
from domain.terrain.services import (
    bilinear_interpolate,
    crossing_coefficients,
    solve_crossing,
)
from domain.terrain.value_objects import (
    GeodeticPoint,
    Location,
    NormalizedGeodeticPoint,
    TileState,
)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
TOLERANCE = 1.0 / 8.0  # Interpolation tolerance out of the tile, in cells


class SimpleTile:
    """Tile storing its elevations in a dense float64 array.

    Unconfigured tiles report zero for every geometry accessor.
    """

    def __init__(self) -> None:
        self._state = TileState.UNINITIALIZED
        self._min_latitude = 0.0
        self._min_longitude = 0.0
        self._latitude_step = 0.0
        self._longitude_step = 0.0
        self._latitude_rows = 0
        self._longitude_columns = 0
        self._min_elevation = 0.0
        self._max_elevation = 0.0
        self._min_elevation_indices = (-1, -1)
        self._max_elevation_indices = (-1, -1)
        self._elevations: NDArray[np.float64] = np.empty((0, 0), dtype=np.float64)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(state={self._state.value}, "
            f"lat={math.degrees(self.minimum_latitude):.6f}.."
            f"{math.degrees(self.maximum_latitude):.6f}, "
            f"lon={math.degrees(self.minimum_longitude):.6f}.."
            f"{math.degrees(self.maximum_longitude):.6f}, "
            f"shape=({self._latitude_rows}, {self._longitude_columns}))"
        )

    # -----------------------------------------------------------------------
    # Update
    # -----------------------------------------------------------------------
    def set_geometry(
        self,
        min_latitude: float,
        min_longitude: float,
        latitude_step: float,
        longitude_step: float,
        latitude_rows: int,
        longitude_columns: int,
    ) -> None:
        """Set the tile grid and allocate a NaN-filled elevation array.

        Raises:
            TileStateError: If the tile was already configured
            EmptyTileError: If rows or columns are not strictly positive
            InvalidTileGeometryError: If steps are not strictly positive
                or coordinates are not finite
        """
        if self._state is not TileState.UNINITIALIZED:
            raise TileStateError("Tile geometry can be set only once", self._state)
        if latitude_rows < 1 or longitude_columns < 1:
            raise EmptyTileError(latitude_rows, longitude_columns)
        if not (math.isfinite(min_latitude) and math.isfinite(min_longitude)):
            raise InvalidTileGeometryError(
                f"Non-finite tile origin: ({min_latitude}, {min_longitude})"
            )
        if not (
            math.isfinite(latitude_step)
            and math.isfinite(longitude_step)
            and latitude_step > 0
            and longitude_step > 0
        ):
            raise InvalidTileGeometryError(
                f"Tile steps must be positive: ({latitude_step}, {longitude_step})"
            )

        self._min_latitude = float(min_latitude)
        self._min_longitude = float(min_longitude)
        self._latitude_step = float(latitude_step)
        self._longitude_step = float(longitude_step)
        self._latitude_rows = int(latitude_rows)
        self._longitude_columns = int(longitude_columns)
        self._elevations = np.full(
            (self._latitude_rows, self._longitude_columns), np.nan, dtype=np.float64
        )
        self._state = TileState.CONFIGURED

    def set_elevation(
        self, latitude_index: int, longitude_index: int, elevation: float
    ) -> None:
        """Set the elevation of one grid node.

        Raises:
            OutOfTileIndicesError: If indices are outside the grid
            TileStateError: If the tile update is already completed
        """
        self._check_indices(latitude_index, longitude_index)
        if self._state is not TileState.CONFIGURED:
            raise TileStateError("Tile elevations are read-only", self._state)
        self._elevations[latitude_index, longitude_index] = elevation

    def tile_update_completed(self) -> None:
        """Freeze the tile and compute its min/max elevations.

        NaN samples (never written) are ignored. Ties keep the first sample
        in row-major order.
        """
        if self._state is not TileState.CONFIGURED:
            raise TileStateError(
                "Tile update can be completed only once, after set_geometry",
                self._state,
            )
        self._elevations.flags.writeable = False
        self._min_elevation = math.inf
        self._max_elevation = -math.inf
        valid = ~np.isnan(self._elevations)
        if valid.any():
            shape = self._elevations.shape
            low = int(np.argmin(np.where(valid, self._elevations, np.inf)))
            high = int(np.argmax(np.where(valid, self._elevations, -np.inf)))
            self._min_elevation_indices = tuple(
                int(k) for k in np.unravel_index(low, shape)
            )
            self._max_elevation_indices = tuple(
                int(k) for k in np.unravel_index(high, shape)
            )
            self._min_elevation = float(self._elevations[self._min_elevation_indices])
            self._max_elevation = float(self._elevations[self._max_elevation_indices])
        self._state = TileState.AVAILABLE

    # -----------------------------------------------------------------------
    # Geometry accessors
    # -----------------------------------------------------------------------
    @property
    def state(self) -> TileState:
        return self._state

    @property
    def minimum_latitude(self) -> float:
        """Latitude of the centers of the south row cells."""
        return self.latitude_at_index(0)

    @property
    def maximum_latitude(self) -> float:
        """Latitude of the centers of the north row cells.

        Points at this latitude never have interpolation neighbors in this tile.
        """
        return self.latitude_at_index(self._latitude_rows - 1)

    @property
    def minimum_longitude(self) -> float:
        """Longitude of the centers of the west column cells."""
        return self.longitude_at_index(0)

    @property
    def maximum_longitude(self) -> float:
        """Longitude of the centers of the east column cells.

        Points at this longitude never have interpolation neighbors in this tile.
        """
        return self.longitude_at_index(self._longitude_columns - 1)

    @property
    def latitude_step(self) -> float:
        return self._latitude_step

    @property
    def longitude_step(self) -> float:
        return self._longitude_step

    @property
    def latitude_rows(self) -> int:
        return self._latitude_rows

    @property
    def longitude_columns(self) -> int:
        return self._longitude_columns

    @property
    def min_elevation(self) -> float:
        return self._min_elevation

    @property
    def min_elevation_latitude_index(self) -> int:
        return self._min_elevation_indices[0]

    @property
    def min_elevation_longitude_index(self) -> int:
        return self._min_elevation_indices[1]

    @property
    def max_elevation(self) -> float:
        return self._max_elevation

    @property
    def max_elevation_latitude_index(self) -> int:
        return self._max_elevation_indices[0]

    @property
    def max_elevation_longitude_index(self) -> int:
        return self._max_elevation_indices[1]

    def latitude_at_index(self, latitude_index: int) -> float:
        return self._min_latitude + self._latitude_step * latitude_index

    def longitude_at_index(self, longitude_index: int) -> float:
        return self._min_longitude + self._longitude_step * longitude_index

    # -----------------------------------------------------------------------
    # Indexing
    # -----------------------------------------------------------------------
    def double_latitude_index(self, latitude: float) -> float:
        """Fractional latitude index (it may lie outside of the tile!)."""
        return (latitude - self._min_latitude) / self._latitude_step

    def double_longitude_index(self, longitude: float) -> float:
        """Fractional longitude index (it may lie outside of the tile!)."""
        return (longitude - self._min_longitude) / self._longitude_step

    def floor_latitude_index(self, latitude: float) -> int:
        """Index i such that latitude_at_index(i) <= latitude < latitude_at_index(i + 1).

        The index is NOT clamped and may lie outside of the tile.
        """
        return math.floor(self.double_latitude_index(latitude))

    def floor_longitude_index(self, longitude: float) -> int:
        """Index j such that longitude_at_index(j) <= longitude < longitude_at_index(j + 1).

        The index is NOT clamped and may lie outside of the tile.
        """
        return math.floor(self.double_longitude_index(longitude))

    def elevation_at_indices(self, latitude_index: int, longitude_index: int) -> float:
        self._check_indices(latitude_index, longitude_index)
        return float(self._elevations[latitude_index, longitude_index])

    def get_location(self, latitude: float, longitude: float) -> Location:
        """Classify a point with respect to the tile interpolation grid."""
        latitude_index = self.floor_latitude_index(latitude)
        longitude_index = self.floor_longitude_index(longitude)
        return Location.from_offsets(
            _offset(latitude_index, self._latitude_rows),
            _offset(longitude_index, self._longitude_columns),
        )

    # -----------------------------------------------------------------------
    # Interpolation
    # -----------------------------------------------------------------------
    def interpolate_elevation(self, latitude: float, longitude: float) -> float:
        """Bilinear interpolation of the elevation at a point.

        To cope with numerical noise at tile boundaries, points up to 1/8
        cell out of the tile are extrapolated linearly from the closest cell.

        Raises:
            OutOfTileAnglesError: If the point is farther than the tolerance,
                or the tile has a single row or column
        """
        d_lat_index = self.double_latitude_index(latitude)
        d_lon_index = self.double_longitude_index(longitude)
        if (
            self._latitude_rows < 2
            or self._longitude_columns < 2
            or d_lat_index < -TOLERANCE
            or d_lat_index >= self._latitude_rows - 1 + TOLERANCE
            or d_lon_index < -TOLERANCE
            or d_lon_index >= self._longitude_columns - 1 + TOLERANCE
        ):
            raise OutOfTileAnglesError(
                latitude,
                longitude,
                self.minimum_latitude,
                self.maximum_latitude,
                self.minimum_longitude,
                self.maximum_longitude,
            )

        # Index clamped into the tile, fractional part kept as is
        i = _clamp(math.floor(d_lat_index), 0, self._latitude_rows - 2)
        j = _clamp(math.floor(d_lon_index), 0, self._longitude_columns - 2)
        e = self._elevations
        return bilinear_interpolate(
            float(e[i, j]),
            float(e[i, j + 1]),
            float(e[i + 1, j]),
            float(e[i + 1, j + 1]),
            d_lat_index - i,
            d_lon_index - j,
        )

    def cell_intersection(
        self,
        point: GeodeticPoint,
        los: ArrayLike,
        latitude_index: int,
        longitude_index: int,
    ) -> NormalizedGeodeticPoint | None:
        """Find where a line crosses the bilinear surface of one grid cell.

        Args:
            point: Point on the line
            los: Line direction (east, north, zenith), scaled to radians in
                the horizontal plane and meters along the vertical
            latitude_index: Latitude index of the cell (clamped into the tile)
            longitude_index: Longitude index of the cell (clamped into the tile)

        Returns:
            First crossing along the line from the point, if it lies within
            the cell (1/8 cell tolerance), None otherwise (also for a tile
            with a single row or column, which has no cell)
        """
        if self._latitude_rows < 2 or self._longitude_columns < 2:
            return None
        i = _clamp(latitude_index, 0, self._latitude_rows - 2)
        j = _clamp(longitude_index, 0, self._longitude_columns - 2)
        los_lon, los_lat, los_alt = (float(v) for v in np.asarray(los, dtype=float))

        x00 = self.longitude_at_index(j)
        y00 = self.latitude_at_index(i)
        d_lon = (point.longitude - x00) / self._longitude_step
        d_lat = (point.latitude - y00) / self._latitude_step
        step_lon = los_lon / self._longitude_step
        step_lat = los_lat / self._latitude_step

        e = self._elevations
        a, b, c = crossing_coefficients(
            float(e[i, j]),
            float(e[i, j + 1]),
            float(e[i + 1, j]),
            float(e[i + 1, j + 1]),
            d_lon,
            d_lat,
            point.altitude,
            step_lon,
            step_lat,
            los_alt,
        )
        roots = solve_crossing(a, b, c)
        if roots is None:
            return None

        best_t = None
        for t in roots:
            if math.isinf(t) or not (
                _in_cell(d_lon + t * step_lon) and _in_cell(d_lat + t * step_lat)
            ):
                continue
            if best_t is None or t < best_t:
                best_t = t
        if best_t is None:
            return None

        return NormalizedGeodeticPoint(
            latitude=point.latitude + best_t * los_lat,
            longitude=point.longitude + best_t * los_lon,
            altitude=point.altitude + best_t * los_alt,
            central_longitude=x00,
        )

    # -----------------------------------------------------------------------
    # Helpers
    # -----------------------------------------------------------------------
    def _check_indices(self, latitude_index: int, longitude_index: int) -> None:
        if not (
            0 <= latitude_index < self._latitude_rows
            and 0 <= longitude_index < self._longitude_columns
        ):
            raise OutOfTileIndicesError(
                latitude_index,
                longitude_index,
                self._latitude_rows - 1,
                self._longitude_columns - 1,
            )


class SimpleTileFactory:
    """TileFactory creating empty SimpleTile instances."""

    def create_tile(self) -> SimpleTile:
        return SimpleTile()


# ---------------------------------------------------------------------------
# Tile Geometry Helpers (any Tile implementation)
# ---------------------------------------------------------------------------
def footprint_contains(tile: Tile, latitude: float, longitude: float) -> bool:
    """Check if a point lies in the footprint of the tile cells.

    The footprint extends half a cell beyond the border nodes, so a point
    may be in the footprint without having interpolation neighbors.
    Longitude is used as is: callers normalize it into the tile frame.
    """
    if tile.latitude_rows < 1 or tile.longitude_columns < 1:
        return False
    d_lat = (latitude - tile.minimum_latitude) / tile.latitude_step
    d_lon = (longitude - tile.minimum_longitude) / tile.longitude_step
    return (
        -0.5 <= d_lat <= tile.latitude_rows - 0.5
        and -0.5 <= d_lon <= tile.longitude_columns - 0.5
    )


def middle_point(tile: Tile) -> tuple[float, float]:
    """Center (latitude, longitude) of the tile node range."""
    return (
        tile.minimum_latitude + 0.5 * (tile.latitude_rows - 1) * tile.latitude_step,
        tile.minimum_longitude
        + 0.5 * (tile.longitude_columns - 1) * tile.longitude_step,
    )


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def _offset(index: int, count: int) -> int:
    """Direction of a floor index with respect to the interpolation range [0, count-2]."""
    if index < 0:
        return -1
    if index <= count - 2:
        return 0
    return 1


def _in_cell(d: float) -> bool:
    return -TOLERANCE <= d <= 1.0 + TOLERANCE
