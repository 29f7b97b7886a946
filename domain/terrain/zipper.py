"""Terrain Bounded Context - Zipper Tiles.

A zipper tile is a small synthetic tile stitching together the tiles that
meet around a point lying on a tile border (between the last node of a tile
and the first node of its neighbor), so that the point gets the four
interpolation neighbors no single real tile can provide.

Zipper grid per axis:
- step is the finest step among the contributors (the reference tile);
- nodes are aligned on the reference tile nodes;
- on an axis the point straddles, the window starts one node before the
  point floor node, so the point ends up between zipper nodes 1 and 2;
- on the other axis the window is kept inside the reference tile nodes
  whenever the tile is large enough, so samples are exact copies.
"""

from __future__ import annotations

import logging
import math
from typing import Sequence

import numpy as np
from numpy.typing import ArrayLike

from domain.terrain.errors import TileWithoutRequiredNeighborsError
from domain.terrain.repositories import Tile
from domain.terrain.services import bilinear_interpolate
from domain.terrain.tile import SimpleTile, footprint_contains, middle_point
from domain.terrain.value_objects import Location, normalize_angle

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
ZIPPER_SIZE = 4  # Nodes per axis
NODE_SNAP = 1.0e-6  # Distance to a node (in cells) considered as exactly on it


class ZipperTile(SimpleTile):
    """SimpleTile built in one shot from an elevation array."""

    def create_geometry(
        self,
        min_latitude: float,
        latitude_step: float,
        min_longitude: float,
        longitude_step: float,
        elevations: ArrayLike,
    ) -> None:
        """Configure the tile and mark it available.

        Args:
            elevations: 2-D array, row 0 southernmost, column 0 westernmost
        """
        grid = np.asarray(elevations, dtype=np.float64)
        rows, columns = grid.shape
        self.set_geometry(
            min_latitude, min_longitude, latitude_step, longitude_step, rows, columns
        )
        for i in range(rows):
            for j in range(columns):
                self.set_elevation(i, j, float(grid[i, j]))
        self.tile_update_completed()


def build_zipper_tile(
    contributors: Sequence[Tile],
    latitude: float,
    longitude: float,
    location: Location,
) -> ZipperTile:
    """Synthesize the zipper tile giving interpolation neighbors to a point.

    Args:
        contributors: Border tile first, then its neighbors in the location
            direction (see NeighborResolver.interpolation_contributors)
        latitude, longitude: The point (radians)
        location: Location of the point in the border tile

    Raises:
        TileWithoutRequiredNeighborsError: If no contributor is given
    """
    if not contributors:
        raise TileWithoutRequiredNeighborsError(latitude, longitude)

    lat_ref = min(contributors, key=lambda t: t.latitude_step)
    lon_ref = min(contributors, key=lambda t: t.longitude_step)

    # latitude axis
    lat_step = lat_ref.latitude_step
    lat_start = _window_start(
        math.floor((latitude - lat_ref.minimum_latitude) / lat_step),
        lat_ref.latitude_rows,
        location.latitude_offset != 0,
    )
    min_latitude = lat_ref.latitude_at_index(lat_start)

    # longitude axis, reference grid shifted into the query frame
    lon_step = lon_ref.longitude_step
    ref_longitude = normalize_angle(longitude, middle_point(lon_ref)[1])
    lon_start = _window_start(
        math.floor((ref_longitude - lon_ref.minimum_longitude) / lon_step),
        lon_ref.longitude_columns,
        location.longitude_offset != 0,
    )
    min_longitude = lon_ref.longitude_at_index(lon_start) + (longitude - ref_longitude)

    elevations = np.empty((ZIPPER_SIZE, ZIPPER_SIZE), dtype=np.float64)
    for i in range(ZIPPER_SIZE):
        node_latitude = min_latitude + i * lat_step
        for j in range(ZIPPER_SIZE):
            node_longitude = min_longitude + j * lon_step
            elevations[i, j] = _sample(contributors, node_latitude, node_longitude)

    zipper = ZipperTile()
    zipper.create_geometry(min_latitude, lat_step, min_longitude, lon_step, elevations)
    logger.debug(
        "Built zipper tile at (%.6f, %.6f) deg from %d tile(s), location %s",
        math.degrees(latitude),
        math.degrees(longitude),
        len(contributors),
        location.name,
    )
    return zipper


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _window_start(floor_index: int, count: int, straddling: bool) -> int:
    if not straddling and count >= ZIPPER_SIZE and 0 <= floor_index <= count - 2:
        return max(0, min(count - ZIPPER_SIZE, floor_index - 1))
    return floor_index - 1


def _sample(contributors: Sequence[Tile], latitude: float, longitude: float) -> float:
    """Elevation at a zipper node, taken from the best contributor."""
    best = None
    best_distance = math.inf
    for tile in contributors:
        tile_longitude = normalize_angle(longitude, middle_point(tile)[1])
        if footprint_contains(tile, latitude, tile_longitude):
            return _resample(tile, latitude, tile_longitude)
        distance = _footprint_distance(tile, latitude, tile_longitude)
        if distance < best_distance:
            best, best_distance = (tile, tile_longitude), distance
    tile, tile_longitude = best
    return _resample(tile, latitude, tile_longitude)


def _footprint_distance(tile: Tile, latitude: float, longitude: float) -> float:
    """Angular distance from a point to the tile footprint (0 inside)."""
    half_lat = 0.5 * tile.latitude_step
    half_lon = 0.5 * tile.longitude_step
    d_lat = max(
        0.0,
        tile.minimum_latitude - half_lat - latitude,
        latitude - tile.maximum_latitude - half_lat,
    )
    d_lon = max(
        0.0,
        tile.minimum_longitude - half_lon - longitude,
        longitude - tile.maximum_longitude - half_lon,
    )
    return math.hypot(d_lat, d_lon)


def _resample(tile: Tile, latitude: float, longitude: float) -> float:
    """Elevation of a tile at a point: exact node value or clamped bilinear."""
    i0, i1, d_lat = _axis(
        (latitude - tile.minimum_latitude) / tile.latitude_step, tile.latitude_rows
    )
    j0, j1, d_lon = _axis(
        (longitude - tile.minimum_longitude) / tile.longitude_step,
        tile.longitude_columns,
    )
    if i0 == i1 and j0 == j1:
        return tile.elevation_at_indices(i0, j0)
    return bilinear_interpolate(
        tile.elevation_at_indices(i0, j0),
        tile.elevation_at_indices(i0, j1),
        tile.elevation_at_indices(i1, j0),
        tile.elevation_at_indices(i1, j1),
        d_lat,
        d_lon,
    )


def _axis(index: float, count: int) -> tuple[int, int, float]:
    """Bracketing node indices and clamped fraction along one axis."""
    nearest = round(index)
    if abs(index - nearest) <= NODE_SNAP and 0 <= nearest < count:
        return nearest, nearest, 0.0
    if count == 1:
        return 0, 0, 0.0
    low = max(0, min(count - 2, math.floor(index)))
    return low, low + 1, min(1.0, max(0.0, index - low))
