"""Terrain Bounded Context - Domain Services.

Pure numerical logic shared by tiles: bilinear interpolation inside one
grid cell and the crossing of a line with the bilinear surface of a cell.
NO I/O operations and no tile state here.

Cell coordinates: (d_lat, d_lon) are the normalized position inside the
cell, 0 at the south-west corner node and 1 at the north-east corner node.
Corner elevations are named e<lon><lat>: e00 south-west, e10 south-east,
e01 north-west, e11 north-east.
"""

from __future__ import annotations

import math

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
# Relative threshold below which the quadratic term is considered zero
QUADRATIC_EPSILON = 2.0**-53


# ---------------------------------------------------------------------------
# Bilinear Interpolation
# ---------------------------------------------------------------------------
def bilinear_interpolate(
    e00: float, e10: float, e01: float, e11: float, d_lat: float, d_lon: float
) -> float:
    """Interpolate elevation inside one cell from its four corner elevations.

    The fractional coordinates are NOT clamped: values slightly outside
    [0, 1] extrapolate linearly from the cell.

    Args:
        e00, e10, e01, e11: Corner elevations (see module docstring)
        d_lat: Normalized latitude inside the cell
        d_lon: Normalized longitude inside the cell

    Returns:
        Interpolated elevation (NaN if any corner is NaN)
    """
    return (e00 * (1.0 - d_lon) + d_lon * e10) * (1.0 - d_lat) + (
        e01 * (1.0 - d_lon) + d_lon * e11
    ) * d_lat


# ---------------------------------------------------------------------------
# Line / Bilinear Surface Crossing
# ---------------------------------------------------------------------------
def crossing_coefficients(
    e00: float,
    e10: float,
    e01: float,
    e11: float,
    d_lon: float,
    d_lat: float,
    altitude: float,
    step_lon: float,
    step_lat: float,
    step_altitude: float,
) -> tuple[float, float, float]:
    """Coefficients of the surface-minus-line height along a parametric line.

    The line starts at cell coordinates (d_lon, d_lat) and altitude, and moves
    by (step_lon, step_lat, step_altitude) per unit of its parameter t. As
    the position is linear in t and the surface is bilinear in position, the
    surface height below the line is quadratic in t, and so is its difference
    with the line altitude:

        h_surface(t) - h_line(t) = a t^2 + b t + c

    Returns:
        Tuple (a, b, c)
    """
    twist = e00 - e10 - e01 + e11
    slope_lon = e10 - e00
    slope_lat = e01 - e00

    a = twist * step_lon * step_lat
    b = (
        slope_lon * step_lon
        + slope_lat * step_lat
        + twist * (d_lon * step_lat + d_lat * step_lon)
        - step_altitude
    )
    c = e00 + slope_lon * d_lon + slope_lat * d_lat + twist * d_lon * d_lat - altitude
    return a, b, c


def solve_crossing(a: float, b: float, c: float) -> tuple[float, float] | None:
    """Solve a t^2 + b t + c = 0 exactly, including degenerate cases.

    The equation is treated as linear when the quadratic term is negligible
    with respect to the constant term (coplanar corners, or a line aligned
    with a cell axis). A line lying entirely on the surface (b == c == 0)
    yields t = 0. A missing root is reported as math.inf.

    Returns:
        Tuple (t1, t2) of roots (possibly math.inf), or None when there is
        no real root at all
    """
    if abs(a) <= QUADRATIC_EPSILON * abs(c):
        if b == 0.0:
            return (0.0 if c == 0.0 else math.inf), math.inf
        return -c / b, math.inf

    discriminant = b * b - 4.0 * a * c
    if discriminant < 0.0:
        return None

    # Stable formulation avoiding cancellation between b and the square root
    s = math.sqrt(discriminant)
    q = -0.5 * (b - s) if b < 0.0 else -0.5 * (b + s)
    if q == 0.0:
        # b == 0 and c == 0: double root at the origin
        return 0.0, 0.0
    return q / a, c / q
