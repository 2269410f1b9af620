"""Data model classes for topographic sunlight computations.

- GeoPoint: Observer location (lat, lon)
- TileKey: One slippy-map raster tile (zoom, x, y)
- SunState / SunTimes: Ephemeris answers
- OcclusionResult: Lit/occluded outcome of a ray march
- TopoDayRecord: Astronomical and topographic sun times of one day
- DaylightSummary: One row of the daylight-loss report
"""

from topolight.model.daylight_summary import DaylightSummary
from topolight.model.geo_point import GeoPoint
from topolight.model.occlusion_result import OcclusionResult, Point3
from topolight.model.sun_state import SunState, SunTimes
from topolight.model.tile_key import TileKey
from topolight.model.topo_day_record import TopoDayRecord

__all__ = [
    "GeoPoint",
    "TileKey",
    "SunState",
    "SunTimes",
    "OcclusionResult",
    "Point3",
    "TopoDayRecord",
    "DaylightSummary",
]
