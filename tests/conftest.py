"""Shared pytest fixtures for topolight tests.

Provides synthetic ephemerides and heightfield grids with known geometry.
All fixtures use explicit values with documented rationale.

GRID GEOMETRY:
    Grids are centered on the exact middle of a zoom-12 tile, so the
    sub-tile offset is (0.5, 0.5) and world coordinates coincide with
    grid-local ones: tile (row, col) spans x in [col*20 - 10, col*20 + 10]
    and z in [-row*20 - 10, -row*20 + 10] (rows grow south, z grows north).
    Tiles are 16x16 samples to keep tests fast; sample spacing is 20/15.

SUN GEOMETRY:
    The virtual sun sits 10 units from the observer. With the default
    2.0 step the ray is sampled 2, 4 and 6 units away from the sun.
"""

from datetime import date, datetime, timedelta, timezone
from math import pi, sin
from typing import Callable

import numpy as np
import pytest

from topolight.core.height_grid import HeightFieldGrid
from topolight.core.height_tile import HeightFieldTile
from topolight.core.tile_math import TileMath
from topolight.model.geo_point import GeoPoint
from topolight.model.sun_state import SunState, SunTimes

TILE_SAMPLES = 16
ZOOM = 12
CENTER_TILE = (2165, 1447)  # Eastern Alps, about 46.6N 10.3E

# Azimuths in the ephemeris convention (from south, positive toward west)
AZIMUTH_EAST = -pi / 2
AZIMUTH_SOUTH = 0.0
AZIMUTH_WEST = pi / 2


# =============================================================================
# SYNTHETIC EPHEMERIDES
# =============================================================================


class FixedSunEphemeris:
    """Ephemeris with the sun frozen at one altitude/azimuth."""

    def __init__(self, altitude: float, azimuth: float) -> None:
        self.state = SunState(altitude=altitude, azimuth=azimuth)

    def sun_position(self, when: datetime, lat: float, lon: float) -> SunState:
        return self.state

    def sun_times(self, day: date, lat: float, lon: float) -> SunTimes:
        noon = datetime(day.year, day.month, day.day, 12, tzinfo=timezone.utc)
        return SunTimes(sunrise=noon - timedelta(hours=6), solar_noon=noon, sunset=noon + timedelta(hours=6))


class LinearSunEphemeris:
    """Sun due east all morning and due west all afternoon.

    Sunrise 06:00 UTC, solar noon 12:00 UTC, sunset 18:00 UTC on every day.
    Altitude grows linearly from 0 at sunrise at `rate` radians per hour and
    falls back to 0 at sunset, so the altitude at an instant is known in
    closed form:

        morning:   altitude = rate * hours_since_sunrise
        afternoon: altitude = rate * hours_until_sunset
    """

    def __init__(self, rate_per_hour: float) -> None:
        self.rate_per_hour = rate_per_hour

    def sun_times(self, day: date, lat: float, lon: float) -> SunTimes:
        noon = datetime(day.year, day.month, day.day, 12, tzinfo=timezone.utc)
        return SunTimes(sunrise=noon - timedelta(hours=6), solar_noon=noon, sunset=noon + timedelta(hours=6))

    def sun_position(self, when: datetime, lat: float, lon: float) -> SunState:
        times = self.sun_times(when.date(), lat, lon)
        if when <= times.solar_noon:
            hours = (when - times.sunrise).total_seconds() / 3600
            return SunState(altitude=self.rate_per_hour * hours, azimuth=AZIMUTH_EAST)
        hours = (times.sunset - when).total_seconds() / 3600
        return SunState(altitude=self.rate_per_hour * hours, azimuth=AZIMUTH_WEST)


class ArcSunEphemeris:
    """Sun on a half-sine arc from sunrise to sunset (east -> south -> west).

    Sunrise/sunset are given as UTC hours of the day; altitude is
    `max_altitude * sin(pi * f)` for the day fraction f in [0, 1], and
    negative outside the window.
    """

    def __init__(self, sunrise_hour: float, sunset_hour: float, max_altitude: float) -> None:
        self.sunrise_hour = sunrise_hour
        self.sunset_hour = sunset_hour
        self.max_altitude = max_altitude

    def sun_times(self, day: date, lat: float, lon: float) -> SunTimes:
        midnight = datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
        sunrise = midnight + timedelta(hours=self.sunrise_hour)
        sunset = midnight + timedelta(hours=self.sunset_hour)
        return SunTimes(sunrise=sunrise, solar_noon=sunrise + (sunset - sunrise) / 2, sunset=sunset)

    def sun_position(self, when: datetime, lat: float, lon: float) -> SunState:
        times = self.sun_times(when.date(), lat, lon)
        f = (when - times.sunrise) / (times.sunset - times.sunrise)
        return SunState(altitude=self.max_altitude * sin(pi * f), azimuth=AZIMUTH_EAST + pi * f)


# =============================================================================
# GRID BUILDERS
# =============================================================================


def tile_center_location(tile_x: int = CENTER_TILE[0], tile_y: int = CENTER_TILE[1], zoom: int = ZOOM) -> GeoPoint:
    """Location at the exact middle of a tile (sub-tile offset 0.5, 0.5)."""
    lon, lat = TileMath.tile_to_lon_lat(tile_x + 0.5, tile_y + 0.5, zoom)
    return GeoPoint(lat=lat, lon=lon)


def make_tile(
    terrain: Callable[[np.ndarray, np.ndarray], np.ndarray],
    row: int,
    col: int,
    size: float = 20.0,
    samples: int = TILE_SAMPLES,
) -> HeightFieldTile:
    """Tile (row, col) of a grid centered on a tile middle, sampled from terrain(x, z)."""
    step = size / (samples - 1)
    xs = col * size - size / 2 + np.arange(samples) * step
    # Sample row 0 is the northern edge
    zs = -(row * size - size / 2 + np.arange(samples) * step)
    x_grid, z_grid = np.meshgrid(xs, zs)
    return HeightFieldTile(heights=np.asarray(terrain(x_grid, z_grid), dtype=np.float64))


def build_grid(
    terrain: Callable[[np.ndarray, np.ndarray], np.ndarray],
    radius: int = 2,
    stitch: bool = True,
) -> HeightFieldGrid:
    """Fully loaded zoom-12 grid sampled from terrain(x, z)."""
    grid = HeightFieldGrid()
    keys = grid.recenter(tile_center_location(), zoom=ZOOM, grid_radius=radius)
    for row, col in keys:
        grid.install_tile((row, col), make_tile(terrain, row, col))
    if stitch:
        grid.stitch_boundaries()
    return grid


def flat_terrain(x: np.ndarray, z: np.ndarray) -> np.ndarray:
    return np.zeros_like(x)


RIDGE_START_X = 4.5
RIDGE_HEIGHT = 2.0


def east_ridge_terrain(x: np.ndarray, z: np.ndarray) -> np.ndarray:
    """Flat ground with a plateau 2 units high everywhere east of x = 4.5."""
    return np.where(x >= RIDGE_START_X, RIDGE_HEIGHT, 0.0)


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def flat_grid() -> HeightFieldGrid:
    """Stitched 5x5 grid of flat (all-zero) tiles."""
    return build_grid(flat_terrain)


@pytest.fixture
def east_ridge_grid() -> HeightFieldGrid:
    """Stitched 5x5 grid with a 2-unit plateau east of x = 4.5.

    Morning sun due east at altitude a is blocked by the ray sample 4 units
    from the sun (x = 6 cos a, y = 6 sin a + 0.004) while 6 sin a + 0.004 < 2,
    i.e. below a* = asin(0.332667) = 19.43 degrees.
    """
    return build_grid(east_ridge_terrain)


@pytest.fixture
def empty_grid() -> HeightFieldGrid:
    """Recentered grid with no tiles installed."""
    grid = HeightFieldGrid()
    grid.recenter(tile_center_location(), zoom=ZOOM, grid_radius=2)
    return grid
