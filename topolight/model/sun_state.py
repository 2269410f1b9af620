"""Sun position and daily sun event values returned by the ephemeris."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class SunState:
    """Sun position at one instant for one location.

    Attributes:
        altitude: Angle above the horizon in radians (negative below)
        azimuth: Radians measured from south, positive toward west
    """

    altitude: float
    azimuth: float


@dataclass(frozen=True)
class SunTimes:
    """Astronomical sun events of one day (UTC instants).

    sunrise and sunset are None when the sun never crosses the horizon
    (polar day or polar night).
    """

    sunrise: Optional[datetime]
    solar_noon: datetime
    sunset: Optional[datetime]

    @property
    def has_daylight_window(self) -> bool:
        return self.sunrise is not None and self.sunset is not None
