"""Root pytest configuration for all tests.

Domain tests build tiles directly from numpy arrays or synthetic updaters:
no DEM file and no network access is ever needed.
"""

import numpy as np
import pytest


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded random generator, so randomized scenarios are reproducible."""
    return np.random.default_rng(42)
