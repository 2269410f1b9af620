"""Solar ephemeris oracle.

The engine consumes sun positions and daily sun events through the
Ephemeris protocol. AstralEphemeris implements it with the `astral`
library; tests substitute synthetic ephemerides.

Conventions:
    - Instants are timezone-aware UTC datetimes (naive values are read as UTC)
    - altitude in radians above the horizon
    - azimuth in radians measured from south, positive toward west
"""

import logging
from datetime import date, datetime, timedelta, timezone, tzinfo
from math import pi, radians
from typing import Protocol

from astral import Observer
from astral import sun as astral_sun

from topolight.model.sun_state import SunState, SunTimes

logger = logging.getLogger(__name__)


def as_utc(when: datetime) -> datetime:
    """Return `when` as an aware UTC datetime (naive values are taken as UTC)."""
    if when.tzinfo is None:
        return when.replace(tzinfo=timezone.utc)
    return when.astimezone(timezone.utc)


def local_mean_time(lon: float) -> tzinfo:
    """Fixed-offset zone of local mean solar time (4 minutes per degree).

    Sun events of one calendar day in this zone always come in the order
    sunrise < solar noon < sunset, whatever the longitude.
    """
    return timezone(timedelta(minutes=round(lon * 4)))


class Ephemeris(Protocol):
    """Sun position and sun event oracle."""

    def sun_position(self, when: datetime, lat: float, lon: float) -> SunState:
        """Sun altitude/azimuth at an instant."""
        ...

    def sun_times(self, day: date, lat: float, lon: float) -> SunTimes:
        """Sunrise, solar noon and sunset of a calendar day."""
        ...


class AstralEphemeris:
    """Ephemeris backed by astral's NOAA-based solar calculations.

    Sun positions are geometric (no refraction). Sunrise and sunset follow
    astral's standard definition (upper limb at the refracted horizon) and
    belong to the calendar day in local mean solar time.

    Example:
        ephemeris = AstralEphemeris()
        state = ephemeris.sun_position(datetime(2024, 6, 21, 12, tzinfo=timezone.utc), 46.9, 10.3)
    """

    def __init__(self, elevation_m: float = 0.0):
        """Initialize with an optional observer elevation (meters).

        Args:
            elevation_m: Observer elevation passed to astral for event times
        """
        self._elevation_m = elevation_m

    def _observer(self, lat: float, lon: float) -> Observer:
        return Observer(latitude=lat, longitude=lon, elevation=self._elevation_m)

    def sun_position(self, when: datetime, lat: float, lon: float) -> SunState:
        observer = self._observer(lat, lon)
        when = as_utc(when)
        altitude_deg = astral_sun.elevation(observer, when, with_refraction=False)
        azimuth_deg = astral_sun.azimuth(observer, when)
        # astral azimuth is clockwise from north; shift to south-based
        return SunState(altitude=radians(altitude_deg), azimuth=radians(azimuth_deg) - pi)

    def sun_times(self, day: date, lat: float, lon: float) -> SunTimes:
        observer = self._observer(lat, lon)
        local = local_mean_time(lon)
        solar_noon = astral_sun.noon(observer, day, tzinfo=local).astimezone(timezone.utc)

        try:
            sunrise = astral_sun.sunrise(observer, day, tzinfo=local).astimezone(timezone.utc)
        except ValueError as exc:
            logger.debug(f"No sunrise on {day} at ({lat:.4f}, {lon:.4f}): {exc}")
            sunrise = None
        try:
            sunset = astral_sun.sunset(observer, day, tzinfo=local).astimezone(timezone.utc)
        except ValueError as exc:
            logger.debug(f"No sunset on {day} at ({lat:.4f}, {lon:.4f}): {exc}")
            sunset = None

        return SunTimes(sunrise=sunrise, solar_noon=solar_noon, sunset=sunset)
