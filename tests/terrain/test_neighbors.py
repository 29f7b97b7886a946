"""Tests for NeighborResolver (neighbor tiles one span away)."""

from __future__ import annotations

import math

import pytest

from domain.terrain.neighbors import NeighborResolver
from domain.terrain.tile import SimpleTile, middle_point
from domain.terrain.value_objects import Location, LongitudeWindow
from tests.terrain.elevation_updaters import SrtmLikeElevationUpdater


# ---------------------------------------------------------------------------
# Test Fixture Helpers
# ---------------------------------------------------------------------------
class RecordingLookup:
    """Tile lookup loading a fresh SRTM-like tile on every call."""

    def __init__(self) -> None:
        self.updater = SrtmLikeElevationUpdater()
        self.calls: list[tuple[float, float]] = []

    def __call__(self, latitude: float, longitude: float) -> SimpleTile:
        self.calls.append((latitude, longitude))
        tile = SimpleTile()
        self.updater.update_tile(latitude, longitude, tile)
        tile.tile_update_completed()
        return tile


def tile_at(latitude_deg: float, longitude_deg: float) -> SimpleTile:
    return RecordingLookup()(math.radians(latitude_deg), math.radians(longitude_deg))


def assert_origin(tile: SimpleTile, latitude_deg: float, longitude_deg: float):
    """Check the south-west node of a tile, in degrees."""
    assert math.degrees(tile.minimum_latitude) == pytest.approx(latitude_deg, abs=1e-9)
    assert math.degrees(tile.minimum_longitude) == pytest.approx(longitude_deg, abs=1e-9)


# ===========================================================================
# TC-001: Middle Point
# ===========================================================================
def test_middle_point_is_center_of_nodes():
    """TC-001: Middle point is halfway between first and last nodes."""
    tile = tile_at(2.6, 2.6)

    latitude, longitude = middle_point(tile)

    assert math.degrees(latitude) == pytest.approx(2.5, abs=1e-9)
    assert math.degrees(longitude) == pytest.approx(2.5, abs=1e-9)


# ===========================================================================
# TC-002: Direct Neighbors
# ===========================================================================
def test_direct_neighbors():
    """TC-002: Neighbors are one tile span away in each direction."""
    lookup = RecordingLookup()
    resolver = NeighborResolver(lookup)
    tile = tile_at(2.6, 2.6)

    assert_origin(resolver.north(tile), 5.25, 0.25)
    assert_origin(resolver.south(tile), -4.75, 0.25)
    assert_origin(resolver.east(tile), 0.25, 5.25)
    assert_origin(resolver.west(tile), 0.25, -4.75)
    assert len(lookup.calls) == 4


def test_east_neighbor_across_antimeridian():
    """TC-003: East of the last tile before 180 deg wraps to -180 deg."""
    lookup = RecordingLookup()
    resolver = NeighborResolver(lookup, LongitudeWindow.SIGNED)
    tile = tile_at(2.6, 177.6)

    east = resolver.east(tile)

    assert math.degrees(lookup.calls[0][1]) == pytest.approx(-177.5, abs=1e-9)
    assert_origin(east, 0.25, -179.75)


def test_neighbor_across_resolution_change():
    """TC-004: North of a 0.5 deg tile below 60 deg is a 1 deg tile."""
    resolver = NeighborResolver(RecordingLookup())
    tile = tile_at(57.6, 2.6)

    north = resolver.north(tile)

    assert math.degrees(north.latitude_step) == pytest.approx(1.0, abs=1e-9)
    assert north.latitude_rows == 5
    assert_origin(north, 60.5, 0.5)


# ===========================================================================
# TC-005: Interpolation Contributors
# ===========================================================================
def test_contributors_inside_tile():
    """TC-005: A point with interpolation neighbors needs no other tile."""
    lookup = RecordingLookup()
    tile = tile_at(2.6, 2.6)

    contributors = NeighborResolver(lookup).interpolation_contributors(
        tile, Location.HAS_INTERPOLATION_NEIGHBORS
    )

    assert contributors == [tile]
    assert lookup.calls == []


@pytest.mark.parametrize(
    "location, origins",
    [
        (Location.NORTH, [(5.25, 0.25)]),
        (Location.WEST, [(0.25, -4.75)]),
        (Location.SOUTH_EAST, [(-4.75, 0.25), (0.25, 5.25), (-4.75, 5.25)]),
        (Location.NORTH_WEST, [(5.25, 0.25), (0.25, -4.75), (5.25, -4.75)]),
    ],
)
def test_contributors_on_border(location, origins):
    """TC-006: Vertical, horizontal then diagonal neighbors follow the tile."""
    tile = tile_at(2.6, 2.6)

    contributors = NeighborResolver(RecordingLookup()).interpolation_contributors(
        tile, location
    )

    assert contributors[0] is tile
    assert len(contributors) == len(origins) + 1
    for neighbor, (latitude_deg, longitude_deg) in zip(contributors[1:], origins):
        assert_origin(neighbor, latitude_deg, longitude_deg)
