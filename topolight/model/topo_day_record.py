"""TopoDayRecord - astronomical and topographic sun times of one day."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional


@dataclass(frozen=True)
class TopoDayRecord:
    """Sun times for one calendar day at one location.

    Times are None on days without a sunrise/sunset (polar day or night).

    Attributes:
        day_of_year: 1-based day of the year
        astronomical_sunrise: Terrain-free sunrise (UTC)
        astronomical_sunset: Terrain-free sunset (UTC)
        topo_sunrise: First lit instant with terrain occlusion (UTC)
        topo_sunset: Last lit instant with terrain occlusion (UTC)
    """

    day_of_year: int
    astronomical_sunrise: Optional[datetime]
    astronomical_sunset: Optional[datetime]
    topo_sunrise: Optional[datetime]
    topo_sunset: Optional[datetime]

    @property
    def sunrise_loss(self) -> timedelta:
        """Daylight lost in the morning (zero when unknown)."""
        if self.topo_sunrise is None or self.astronomical_sunrise is None:
            return timedelta(0)
        return self.topo_sunrise - self.astronomical_sunrise

    @property
    def sunset_loss(self) -> timedelta:
        """Daylight lost in the evening (zero when unknown)."""
        if self.topo_sunset is None or self.astronomical_sunset is None:
            return timedelta(0)
        return self.astronomical_sunset - self.topo_sunset
