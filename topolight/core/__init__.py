"""Core engine: heightfield, sun geometry, occlusion and the topo-time solver.

- TileMath: Web Mercator tile coordinates and tile world scale
- HeightFieldTile: Terrarium tile decoding
- HeightFieldGrid: Stitched tile grid with bilinear height queries
- TileSource / TerrainLoader: Tile fetching and concurrent grid reloads
- SunGeometry: Sun position in the local frame
- Ephemeris / AstralEphemeris: Sun position and sun event oracle
- OcclusionTester: Ray march against the heightfield
- TopoTimeSolver: Topographic sunrise/sunset bisection
"""

from topolight.core.ephemeris import AstralEphemeris, Ephemeris
from topolight.core.errors import TileDecodeError, TileFetchError, TopolightError
from topolight.core.height_grid import EmptySlot, HeightFieldGrid, LoadedSlot, TileSlot
from topolight.core.height_tile import HeightFieldTile
from topolight.core.occlusion import OcclusionTester
from topolight.core.sun_geometry import SunGeometry
from topolight.core.terrain_loader import TerrainLoader
from topolight.core.tile_math import TileMath
from topolight.core.tile_source import TileSource
from topolight.core.topo_solver import TopoTimeSolver

__all__ = [
    # Tiles and heightfield
    "TileMath",
    "HeightFieldTile",
    "HeightFieldGrid",
    "TileSlot",
    "EmptySlot",
    "LoadedSlot",
    "TileSource",
    "TerrainLoader",
    # Sun
    "SunGeometry",
    "Ephemeris",
    "AstralEphemeris",
    # Occlusion and solver
    "OcclusionTester",
    "TopoTimeSolver",
    # Errors
    "TopolightError",
    "TileFetchError",
    "TileDecodeError",
]
