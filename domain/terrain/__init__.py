"""Terrain Bounded Context.

Responsible for Digital Elevation Model tiles and their caching:
- Value Objects: GeodeticPoint, NormalizedGeodeticPoint, Location, LongitudeWindow
- Tiles: SimpleTile, ZipperTile (interpolation, cell intersection)
- Services: bilinear interpolation, line/surface crossing
- TilesCache: LRU cache of tiles, zipper synthesis across tile borders
"""
