"""Terrain Bounded Context - Value Objects.

Immutable data structures representing geographic concepts.
Geodetic points are validated at construction time via Pydantic.

All angles are radians, all altitudes meters.
"""

from __future__ import annotations

import math
from enum import Enum

from pydantic import BaseModel, ConfigDict, FiniteFloat, model_validator

TWO_PI = 2.0 * math.pi


def normalize_angle(angle: float, center: float) -> float:
    """Normalize an angle into [center - pi, center + pi)."""
    return angle - TWO_PI * math.floor((angle + math.pi - center) / TWO_PI)


# ---------------------------------------------------------------------------
# Longitude Windows
# ---------------------------------------------------------------------------
class LongitudeWindow(str, Enum):
    """Longitude range used when a longitude must be wrapped.

    SIGNED covers (-pi, pi], POSITIVE covers [0, 2 pi).
    """

    SIGNED = "signed"
    POSITIVE = "positive"

    def normalize(self, longitude: float) -> float:
        if self is LongitudeWindow.POSITIVE:
            normalized = normalize_angle(longitude, math.pi)
            # guard against rounding up to the excluded bound
            return 0.0 if normalized >= TWO_PI else normalized
        normalized = normalize_angle(longitude, 0.0)
        return math.pi if normalized <= -math.pi else normalized


# ---------------------------------------------------------------------------
# Tile Location
# ---------------------------------------------------------------------------
class Location(Enum):
    """Position of a point with respect to the interpolation grid of a tile.

    Elevations are interpolated from the four grid points (i, j), (i+1, j),
    (i, j+1), (i+1, j+1). A point in the northernmost row (resp. easternmost
    column) misses the row i+1 (resp. column j+1) and cannot be interpolated
    by the tile alone, even though it may lie within the tile.

    Only HAS_INTERPOLATION_NEIGHBORS means the four neighbors are available.
    Each value holds its (latitude_offset, longitude_offset) direction.
    """

    SOUTH_WEST = (-1, -1)
    WEST = (0, -1)
    NORTH_WEST = (1, -1)
    SOUTH = (-1, 0)
    HAS_INTERPOLATION_NEIGHBORS = (0, 0)
    NORTH = (1, 0)
    SOUTH_EAST = (-1, 1)
    EAST = (0, 1)
    NORTH_EAST = (1, 1)

    @property
    def latitude_offset(self) -> int:
        return self.value[0]

    @property
    def longitude_offset(self) -> int:
        return self.value[1]

    @classmethod
    def from_offsets(cls, latitude_offset: int, longitude_offset: int) -> "Location":
        return cls((latitude_offset, longitude_offset))


class TileState(str, Enum):
    """Tile lifecycle: created empty, configured once, then read-only."""

    UNINITIALIZED = "uninitialized"
    CONFIGURED = "configured"
    AVAILABLE = "available"


# ---------------------------------------------------------------------------
# Geodetic Points
# ---------------------------------------------------------------------------
class GeodeticPoint(BaseModel):
    """Point given by geodetic latitude, longitude (radians) and altitude (m).

    Note on __eq__ and __hash__: Pydantic frozen models compare by value.
    """

    latitude: FiniteFloat
    longitude: FiniteFloat
    altitude: FiniteFloat

    model_config = ConfigDict(frozen=True)


class NormalizedGeodeticPoint(GeodeticPoint):
    """Geodetic point whose longitude lies in [central - pi, central + pi).

    Invariants:
        central_longitude - pi <= longitude < central_longitude + pi
    """

    central_longitude: FiniteFloat = 0.0

    @model_validator(mode="after")
    def normalize_longitude(self) -> "NormalizedGeodeticPoint":
        # Frozen model: write through object.__setattr__ during validation only
        object.__setattr__(
            self, "longitude", normalize_angle(self.longitude, self.central_longitude)
        )
        return self
