"""Print the yearly daylight-loss report for one location.

Developer utility: loads the real terrain around LOCATION from AWS Terrain
Tiles (cached under data/tiles), then solves the topographic sunrise and
sunset for both solstices and the first day of every month.

To report a different place:
1. Update LOCATION (and optionally YEAR / ZOOM) below
2. Run: python scripts/daylight_report.py
"""

import logging

from topolight.constants import TileConfig
from topolight.core.ephemeris import AstralEphemeris
from topolight.core.height_grid import HeightFieldGrid
from topolight.core.occlusion import OcclusionTester
from topolight.core.terrain_loader import TerrainLoader
from topolight.core.tile_source import TileSource
from topolight.core.topo_solver import TopoTimeSolver
from topolight.model.geo_point import GeoPoint
from topolight.report import DaylightReport, format_duration, format_time_diff, worst_day_sunlight_hours

logging.basicConfig(level=logging.INFO)

# Hallstatt, a lakeside village under steep eastern and southern slopes
LOCATION = GeoPoint(lat=47.5622, lon=13.6493)
YEAR = 2024
ZOOM = 13


def _clock(value) -> str:
    return value.strftime("%H:%M") if value is not None else "--:--"


def print_daylight_report() -> None:
    """Load terrain around LOCATION and print one row per report date."""
    grid = HeightFieldGrid()
    loader = TerrainLoader(source=TileSource(cache_dir=TileConfig.CACHE_DIR))
    loaded = loader.load(grid, LOCATION, zoom=ZOOM)
    print(f"Loaded {loaded} tiles around {LOCATION} at zoom {ZOOM}")

    solver = TopoTimeSolver(tester=OcclusionTester(ephemeris=AstralEphemeris()))
    rows = DaylightReport(solver=solver, grid=grid).yearly_report(YEAR)

    print(f"{'Date':<36} {'Sunrise':>7} {'Topo':>6} {'Lost':>7} {'Sunset':>7} {'Topo':>6} {'Lost':>7} {'Total':>6}")
    for row in rows:
        print(
            f"{row.label:<36} "
            f"{_clock(row.astronomical_sunrise):>7} {_clock(row.topo_sunrise):>6} "
            f"{format_time_diff(row.sunrise_loss):>7} "
            f"{_clock(row.astronomical_sunset):>7} {_clock(row.topo_sunset):>6} "
            f"{format_time_diff(row.sunset_loss):>7} "
            f"{format_duration(row.total_loss):>6}"
        )

    worst = worst_day_sunlight_hours(rows)
    if worst is None:
        print("No date with both a topographic sunrise and sunset")
    else:
        print(f"Worst day: {worst:.1f} hours of direct sunlight (times in UTC)")


if __name__ == "__main__":
    print_daylight_report()
