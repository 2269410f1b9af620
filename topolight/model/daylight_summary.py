"""DaylightSummary - one row of the daylight-loss report."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional


@dataclass(frozen=True)
class DaylightSummary:
    """Astronomical vs topographic daylight for one date.

    Attributes:
        label: Row label, e.g. "Winter Solstice (21 June 2024)"
        day: Calendar date of the row
        astronomical_sunrise / astronomical_sunset: Terrain-free events
        topo_sunrise / topo_sunset: Terrain-occluded events
        sunrise_loss: topo_sunrise - astronomical_sunrise
        sunset_loss: astronomical_sunset - topo_sunset
        total_loss: Sum of the positive parts of both losses
        astronomical_daylight: astronomical_sunset - astronomical_sunrise
        topo_daylight: topo_sunset - topo_sunrise
    """

    label: str
    day: date
    astronomical_sunrise: Optional[datetime]
    topo_sunrise: Optional[datetime]
    sunrise_loss: timedelta
    astronomical_sunset: Optional[datetime]
    topo_sunset: Optional[datetime]
    sunset_loss: timedelta
    total_loss: timedelta
    astronomical_daylight: timedelta
    topo_daylight: timedelta

    @property
    def topo_daylight_hours(self) -> float:
        return self.topo_daylight.total_seconds() / 3600.0
