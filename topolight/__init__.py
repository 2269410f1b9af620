"""Topolight - topographic sunrise and sunset on real terrain.

Determines whether direct sunlight reaches a point given the surrounding
terrain relief, and derives topographic sunrise/sunset times as distinct
from the astronomical ones:
- Stitched Terrarium heightfield around the location
- Sun ray march occlusion test
- Bisection solver for topographic sunrise/sunset
- Yearly precomputation cache and daylight-loss reports

Modules:
    core: Heightfield, sun geometry, occlusion, solver
    model: Data structures (GeoPoint, TileKey, TopoDayRecord, ...)
    cache: Yearly topographic times cache
    report: Daylight-loss reporting

Example:
    from topolight.core import AstralEphemeris, HeightFieldGrid, OcclusionTester, TopoTimeSolver
    from topolight.cache import YearlyTopoCache
    from topolight.report import DaylightReport
"""
