"""Daylight-loss reporting.

Summarizes how much direct sunlight terrain takes away from a location:
- Per-date summary (sunrise, sunset and total loss; daylight totals)
- Yearly report: both solstices plus the first day of every month
- Worst-day sunlight hours over a report
- HH:MM formatting of durations and signed differences

Rows are computed with the TopoTimeSolver, or taken from a YearlyTopoCache
when it holds a completed build for the same location and year.
"""

import logging
from datetime import date, timedelta
from typing import Optional

from topolight.cache.yearly_cache import YearlyTopoCache
from topolight.constants import ReportConfig
from topolight.core.height_grid import HeightFieldGrid
from topolight.core.topo_solver import TopoTimeSolver
from topolight.model.daylight_summary import DaylightSummary
from topolight.model.topo_day_record import TopoDayRecord

logger = logging.getLogger(__name__)


def format_duration(delta: timedelta) -> str:
    """Format a duration as HH:MM; negative durations read as 00:00."""
    total_seconds = delta.total_seconds()
    if total_seconds < 0:
        return "00:00"
    hours = int(total_seconds // 3600)
    minutes = int((total_seconds // 60) % 60)
    return f"{hours:02d}:{minutes:02d}"


def format_time_diff(delta: timedelta) -> str:
    """Format a signed difference as +HH:MM or -HH:MM."""
    total_seconds = delta.total_seconds()
    sign = "-" if total_seconds < 0 else "+"
    magnitude = abs(total_seconds)
    hours = int(magnitude // 3600)
    minutes = int((magnitude // 60) % 60)
    return f"{sign}{hours:02d}:{minutes:02d}"


def format_day(day: date) -> str:
    """Long date label, e.g. '21 June 2024'."""
    return f"{day.day} {day.strftime('%B')} {day.year}"


def summarize(record: TopoDayRecord, day: date, label: Optional[str] = None) -> DaylightSummary:
    """Build a report row from the sun times of one day.

    Missing times (polar day/night) give zero durations.
    """
    sunrise_loss = record.sunrise_loss
    sunset_loss = record.sunset_loss
    total_loss = max(timedelta(0), sunrise_loss) + max(timedelta(0), sunset_loss)

    astronomical_daylight = timedelta(0)
    if record.astronomical_sunrise is not None and record.astronomical_sunset is not None:
        astronomical_daylight = record.astronomical_sunset - record.astronomical_sunrise
    topo_daylight = timedelta(0)
    if record.topo_sunrise is not None and record.topo_sunset is not None:
        topo_daylight = record.topo_sunset - record.topo_sunrise

    full_label = f"{label} ({format_day(day)})" if label else format_day(day)
    return DaylightSummary(
        label=full_label,
        day=day,
        astronomical_sunrise=record.astronomical_sunrise,
        topo_sunrise=record.topo_sunrise,
        sunrise_loss=sunrise_loss,
        astronomical_sunset=record.astronomical_sunset,
        topo_sunset=record.topo_sunset,
        sunset_loss=sunset_loss,
        total_loss=total_loss,
        astronomical_daylight=astronomical_daylight,
        topo_daylight=topo_daylight,
    )


def worst_day_sunlight_hours(rows: list[DaylightSummary]) -> Optional[float]:
    """Fewest topographic daylight hours over rows with both topo times.

    Returns:
        Minimum hours, or None when no row has a topographic sunrise and sunset.
    """
    hours = [
        max(0.0, row.topo_daylight_hours)
        for row in rows
        if row.topo_sunrise is not None and row.topo_sunset is not None
    ]
    if not hours:
        return None
    worst = min(hours)
    logger.debug(f"Worst day over {len(hours)} valid days: {worst:.1f} hours")
    return worst


class DaylightReport:
    """Daylight-loss report for the grid's location.

    Example:
        report = DaylightReport(solver=solver, grid=grid, cache=cache)
        rows = report.yearly_report(2024)
        print(format_duration(rows[0].total_loss))
    """

    def __init__(
        self,
        solver: TopoTimeSolver,
        grid: HeightFieldGrid,
        cache: Optional[YearlyTopoCache] = None,
    ):
        self._solver = solver
        self._grid = grid
        self._cache = cache

    def _record_for(self, day: date) -> TopoDayRecord:
        center = self._grid.center
        if self._cache is not None and center is not None and self._cache.is_valid_for(center, day.year):
            cached = self._cache.get(day.timetuple().tm_yday)
            if cached is not None:
                return cached
        return self._solver.solve_day(day, self._grid)

    def summary_for(self, day: date, label: Optional[str] = None) -> DaylightSummary:
        """Report row for one date, optionally prefixed with a label."""
        return summarize(self._record_for(day), day, label)

    def solstice_dates(self, year: int) -> tuple[date, date]:
        """(summer, winter) solstice dates for the hemisphere of the location."""
        center = self._grid.center
        june = date(year, *ReportConfig.JUNE_SOLSTICE)
        december = date(year, *ReportConfig.DECEMBER_SOLSTICE)
        northern = center is not None and center.lat > 0
        return (june, december) if northern else (december, june)

    def yearly_report(self, year: int) -> list[DaylightSummary]:
        """Both solstices followed by the first day of every month."""
        summer, winter = self.solstice_dates(year)
        rows = [
            self.summary_for(summer, ReportConfig.SUMMER_SOLSTICE_LABEL),
            self.summary_for(winter, ReportConfig.WINTER_SOLSTICE_LABEL),
        ]
        rows.extend(self.summary_for(date(year, month, 1)) for month in range(1, 13))
        logger.info(f"Daylight report for {year}: {len(rows)} rows")
        return rows
