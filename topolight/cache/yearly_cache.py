"""Yearly cache of topographic sun times.

Precomputes the TopoDayRecord of every day of a year for one location so
that reports and year animations do not re-run the solver. The cache is
keyed by (lat, lon, year) compared by exact equality; any change discards
everything and rebuilds from January 1st. It is never patched partially.

The build is cooperative: iter_build() is a generator yielding after every
solved day, so a host loop can interleave other work (repaints, progress)
between days.
"""

import calendar
import logging
import time
from datetime import date, timedelta
from typing import Callable, Iterator, Optional

from topolight.model.geo_point import GeoPoint
from topolight.model.topo_day_record import TopoDayRecord

logger = logging.getLogger(__name__)

CacheKey = tuple[float, float, int]
SolveDay = Callable[[date], TopoDayRecord]


class YearlyTopoCache:
    """Mapping day-of-year -> TopoDayRecord for one (lat, lon, year).

    Example:
        cache = YearlyTopoCache()
        records = cache.ensure(location, 2024, solve=lambda d: solver.solve_day(d, grid))
    """

    def __init__(self) -> None:
        self._key: Optional[CacheKey] = None
        self._records: dict[int, TopoDayRecord] = {}
        self._complete = False

    @staticmethod
    def days_in_year(year: int) -> int:
        """365, or 366 in Gregorian leap years."""
        return 366 if calendar.isleap(year) else 365

    @staticmethod
    def key_for(location: GeoPoint, year: int) -> CacheKey:
        return (location.lat, location.lon, year)

    @property
    def key(self) -> Optional[CacheKey]:
        return self._key

    @property
    def records(self) -> dict[int, TopoDayRecord]:
        return self._records

    def is_valid_for(self, location: GeoPoint, year: int) -> bool:
        """True if a completed build exists for exactly this location and year."""
        return self._complete and self._key == self.key_for(location, year) and len(self._records) > 0

    def get(self, day_of_year: int) -> Optional[TopoDayRecord]:
        return self._records.get(day_of_year)

    def invalidate(self) -> None:
        """Discard all cached records."""
        self._key = None
        self._records = {}
        self._complete = False

    def iter_build(self, location: GeoPoint, year: int, solve: SolveDay) -> Iterator[TopoDayRecord]:
        """Rebuild the cache day by day, yielding each record once solved.

        The cache only becomes valid when the generator is exhausted; an
        abandoned build leaves it invalid.

        Args:
            location: Location the records belong to
            year: Calendar year
            solve: Computes the record of one calendar day
        """
        records: dict[int, TopoDayRecord] = {}
        self._key = self.key_for(location, year)
        self._records = records
        self._complete = False

        days = self.days_in_year(year)
        logger.info(f"Caching yearly topographic times for {location} in {year} ({days} days)")
        start_time = time.time()
        first_day = date(year, 1, 1)

        for day_of_year in range(1, days + 1):
            records[day_of_year] = solve(first_day + timedelta(days=day_of_year - 1))
            yield records[day_of_year]

        # A newer build may have replaced this one while we were suspended
        if self._records is records:
            self._complete = True
            elapsed = time.time() - start_time
            logger.info(f"Yearly cache for {year} complete in {elapsed:.2f}s")

    def ensure(
        self,
        location: GeoPoint,
        year: int,
        solve: SolveDay,
        progress_callback: Optional[Callable[[float], None]] = None,
    ) -> dict[int, TopoDayRecord]:
        """Return the records for (location, year), building them if needed.

        Args:
            location: Location of the records
            year: Calendar year
            solve: Computes the record of one calendar day
            progress_callback: Optional callback receiving progress 0.0-1.0
                after each day

        Returns:
            Mapping day-of-year (1-based) -> TopoDayRecord.
        """
        if self.is_valid_for(location, year):
            return self._records

        days = self.days_in_year(year)
        for done, _ in enumerate(self.iter_build(location, year, solve), start=1):
            if progress_callback:
                progress_callback(done / days)
        return self._records
