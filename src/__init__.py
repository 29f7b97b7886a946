"""Application Layer.

Application services that configure and wire the terrain domain:
environment-driven settings and tiles cache construction. DEM reading is
left to the TileUpdater supplied by the caller.
"""
