"""Tests for terrain value objects (angles, locations, geodetic points)."""

from __future__ import annotations

import math

import pytest

from domain.terrain.value_objects import (
    GeodeticPoint,
    Location,
    LongitudeWindow,
    NormalizedGeodeticPoint,
    TileState,
    normalize_angle,
)


# ===========================================================================
# TC-001: Angle Normalization
# ===========================================================================
@pytest.mark.parametrize(
    "angle, center, expected",
    [
        (3.0 * math.pi, 0.0, -math.pi),
        (0.5, 0.0, 0.5),
        (-0.5, math.pi, 2.0 * math.pi - 0.5),
        (7.0, 7.0, 7.0),
        (0.0, 10.0, 4.0 * math.pi),
    ],
)
def test_normalize_angle(angle, center, expected):
    """TC-001: Angles are mapped into [center - pi, center + pi)."""
    assert normalize_angle(angle, center) == pytest.approx(expected, abs=1e-12)


# ===========================================================================
# TC-002: Longitude Windows
# ===========================================================================
class TestLongitudeWindow:
    """Tests for longitude wrapping windows."""

    def test_signed_keeps_pi(self):
        """SIGNED window covers (-pi, pi]."""
        assert LongitudeWindow.SIGNED.normalize(math.pi) == math.pi
        assert LongitudeWindow.SIGNED.normalize(-math.pi) == math.pi

    def test_signed_wraps_past_antimeridian(self):
        """182.5 deg east wraps to 177.5 deg west."""
        assert LongitudeWindow.SIGNED.normalize(math.radians(182.5)) == pytest.approx(
            math.radians(-177.5), abs=1e-12
        )

    def test_positive_wraps_negative(self):
        """POSITIVE window covers [0, 2 pi)."""
        assert LongitudeWindow.POSITIVE.normalize(-0.5) == pytest.approx(
            2.0 * math.pi - 0.5, abs=1e-12
        )
        assert LongitudeWindow.POSITIVE.normalize(2.0 * math.pi) == 0.0

    def test_window_from_string(self):
        """Windows are built from their configuration value."""
        assert LongitudeWindow("positive") is LongitudeWindow.POSITIVE


# ===========================================================================
# TC-003: Location Offsets
# ===========================================================================
class TestLocation:
    """Tests for Location directions."""

    def test_offsets(self):
        assert Location.NORTH_WEST.latitude_offset == 1
        assert Location.NORTH_WEST.longitude_offset == -1
        assert Location.HAS_INTERPOLATION_NEIGHBORS.latitude_offset == 0
        assert Location.HAS_INTERPOLATION_NEIGHBORS.longitude_offset == 0

    def test_from_offsets_round_trip(self):
        """Every location is rebuilt from its own offsets."""
        for location in Location:
            assert (
                Location.from_offsets(location.latitude_offset, location.longitude_offset)
                is location
            )

    def test_nine_locations(self):
        assert len(Location) == 9


# ===========================================================================
# TC-004: Geodetic Points
# ===========================================================================
class TestGeodeticPointInvariants:
    """Tests for GeodeticPoint Value Object invariants."""

    def test_non_finite_rejected(self):
        """Coordinates must be finite."""
        with pytest.raises(ValueError):
            GeodeticPoint(latitude=math.nan, longitude=0.0, altitude=0.0)
        with pytest.raises(ValueError):
            GeodeticPoint(latitude=0.0, longitude=0.0, altitude=math.inf)

    def test_equality_by_value(self):
        p1 = GeodeticPoint(latitude=0.1, longitude=0.2, altitude=30.0)
        p2 = GeodeticPoint(latitude=0.1, longitude=0.2, altitude=30.0)

        assert p1 == p2

    def test_immutable(self):
        point = GeodeticPoint(latitude=0.1, longitude=0.2, altitude=30.0)

        with pytest.raises(Exception):  # ValidationError or AttributeError
            point.latitude = 0.0


class TestNormalizedGeodeticPoint:
    """Tests for longitude normalization around a central longitude."""

    def test_longitude_normalized_around_center(self):
        point = NormalizedGeodeticPoint(
            latitude=0.1, longitude=1.5 * math.pi, altitude=0.0, central_longitude=0.0
        )

        assert point.longitude == pytest.approx(-0.5 * math.pi, abs=1e-12)
        assert point.central_longitude == 0.0

    def test_longitude_kept_near_center(self):
        center = math.radians(179.0)
        point = NormalizedGeodeticPoint(
            latitude=0.1,
            longitude=math.radians(-179.0),
            altitude=0.0,
            central_longitude=center,
        )

        assert point.longitude == pytest.approx(math.radians(181.0), abs=1e-12)

    def test_is_a_geodetic_point(self):
        point = NormalizedGeodeticPoint(latitude=0.1, longitude=0.2, altitude=3.0)

        assert isinstance(point, GeodeticPoint)


def test_tile_states():
    """TC-005: Tile lifecycle states."""
    assert [state.value for state in TileState] == [
        "uninitialized",
        "configured",
        "available",
    ]
