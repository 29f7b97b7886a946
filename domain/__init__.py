"""DEM Tiles Domain Layer.

This package contains the core business logic organized by bounded contexts:
- terrain: Elevation tiles, bilinear interpolation, ray/cell crossing,
  bounded tiles cache with zipper stitching
"""

from domain import terrain

__all__ = ["terrain"]
