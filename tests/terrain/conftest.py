"""Pytest configuration for terrain domain tests.

Provides factories and synthetic updaters shared by the tile, zipper and
cache tests. See elevation_updaters.py for their exact geometry.
"""

import math

import pytest

from tests.terrain.elevation_updaters import (
    CheckedPatternElevationUpdater,
    CountingFactory,
    SrtmLikeElevationUpdater,
)


@pytest.fixture
def counting_factory() -> CountingFactory:
    return CountingFactory()


@pytest.fixture
def checked_updater() -> CheckedPatternElevationUpdater:
    """1 degree overlapping tiles, 11 nodes per axis, elevations 10/20."""
    return CheckedPatternElevationUpdater(math.radians(1.0), 11, 10.0, 20.0)


@pytest.fixture
def srtm_updater() -> SrtmLikeElevationUpdater:
    """5 degree contiguous tiles, 0.5 degree step (1 degree beyond 60 deg)."""
    return SrtmLikeElevationUpdater()
