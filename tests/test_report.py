"""Tests for daylight-loss reporting.

Tests: format_duration, format_time_diff, format_day, summarize,
       worst_day_sunlight_hours, DaylightReport
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from topolight.cache.yearly_cache import YearlyTopoCache
from topolight.core.height_grid import HeightFieldGrid
from topolight.model.geo_point import GeoPoint
from topolight.model.topo_day_record import TopoDayRecord
from topolight.report import (
    DaylightReport,
    format_day,
    format_duration,
    format_time_diff,
    summarize,
    worst_day_sunlight_hours,
)

SOLSTICE = date(2024, 6, 21)
SUNRISE = datetime(2024, 6, 21, 5, 30, tzinfo=timezone.utc)
SUNSET = datetime(2024, 6, 21, 19, 30, tzinfo=timezone.utc)


def make_record(
    day: date = SOLSTICE,
    sunrise_delay: timedelta = timedelta(minutes=45),
    sunset_advance: timedelta = timedelta(minutes=20),
) -> TopoDayRecord:
    sunrise = datetime(day.year, day.month, day.day, 5, 30, tzinfo=timezone.utc)
    sunset = datetime(day.year, day.month, day.day, 19, 30, tzinfo=timezone.utc)
    return TopoDayRecord(
        day_of_year=day.timetuple().tm_yday,
        astronomical_sunrise=sunrise,
        astronomical_sunset=sunset,
        topo_sunrise=sunrise + sunrise_delay,
        topo_sunset=sunset - sunset_advance,
    )


POLAR_RECORD = TopoDayRecord(
    day_of_year=173,
    astronomical_sunrise=None,
    astronomical_sunset=None,
    topo_sunrise=None,
    topo_sunset=None,
)


class StubSolver:
    """Records the days it is asked to solve."""

    def __init__(self) -> None:
        self.days: list[date] = []

    def solve_day(self, day: date, grid: HeightFieldGrid) -> TopoDayRecord:
        self.days.append(day)
        return make_record(day)


class FailingSolver:
    def solve_day(self, day: date, grid: HeightFieldGrid) -> TopoDayRecord:
        raise AssertionError(f"solver called for {day}")


def placed_grid(location: GeoPoint) -> HeightFieldGrid:
    grid = HeightFieldGrid()
    grid.recenter(location, zoom=12)
    return grid


NORTH = GeoPoint(lat=46.969, lon=10.29)
SOUTH = GeoPoint(lat=-25.2744, lon=133.7751)


# =============================================================================
# FORMATTING
# =============================================================================


class TestFormatting:
    @pytest.mark.parametrize(
        "delta, text",
        [
            (timedelta(0), "00:00"),
            (timedelta(hours=2, minutes=5, seconds=59), "02:05"),
            (timedelta(hours=25), "25:00"),
            (timedelta(minutes=-30), "00:00"),
        ],
    )
    def test_format_duration(self, delta: timedelta, text: str) -> None:
        assert format_duration(delta) == text

    @pytest.mark.parametrize(
        "delta, text",
        [
            (timedelta(minutes=45), "+00:45"),
            (timedelta(0), "+00:00"),
            (-timedelta(minutes=90), "-01:30"),
        ],
    )
    def test_format_time_diff(self, delta: timedelta, text: str) -> None:
        assert format_time_diff(delta) == text

    def test_format_day(self) -> None:
        assert format_day(date(2024, 6, 21)) == "21 June 2024"
        assert format_day(date(2024, 12, 1)) == "1 December 2024"


# =============================================================================
# SUMMARIES
# =============================================================================


class TestSummarize:
    """summarize - one report row from a day record."""

    def test_losses_and_daylight(self) -> None:
        row = summarize(make_record(), SOLSTICE, label="Summer Solstice")

        assert row.label == "Summer Solstice (21 June 2024)"
        assert row.sunrise_loss == timedelta(minutes=45)
        assert row.sunset_loss == timedelta(minutes=20)
        assert row.total_loss == timedelta(minutes=65)
        assert row.astronomical_daylight == SUNSET - SUNRISE
        assert row.topo_daylight == timedelta(hours=14, minutes=-65)

    def test_negative_loss_not_counted(self) -> None:
        """A topo sunrise before the astronomical one (bisection jitter) adds nothing."""
        row = summarize(make_record(sunrise_delay=-timedelta(seconds=1)), SOLSTICE)
        assert row.total_loss == timedelta(minutes=20)
        assert row.label == "21 June 2024"

    def test_polar_day(self) -> None:
        row = summarize(POLAR_RECORD, SOLSTICE)
        assert row.total_loss == timedelta(0)
        assert row.astronomical_daylight == timedelta(0)
        assert row.topo_daylight == timedelta(0)


class TestWorstDay:
    def test_minimum_over_valid_rows(self) -> None:
        rows = [
            summarize(make_record(), SOLSTICE),
            summarize(make_record(sunrise_delay=timedelta(hours=3)), SOLSTICE),
            summarize(POLAR_RECORD, SOLSTICE),
        ]
        # 14h astronomical - 3h - 20min
        assert worst_day_sunlight_hours(rows) == pytest.approx(14 - 3 - 1 / 3)

    def test_no_valid_rows(self) -> None:
        assert worst_day_sunlight_hours([summarize(POLAR_RECORD, SOLSTICE)]) is None
        assert worst_day_sunlight_hours([]) is None


# =============================================================================
# REPORT
# =============================================================================


class TestDaylightReport:
    """DaylightReport - solstices plus the first of every month."""

    def test_northern_yearly_report(self) -> None:
        solver = StubSolver()
        rows = DaylightReport(solver=solver, grid=placed_grid(NORTH)).yearly_report(2024)

        assert len(rows) == 14
        assert rows[0].label == "Summer Solstice (21 June 2024)"
        assert rows[1].label == "Winter Solstice (21 December 2024)"
        assert [row.day for row in rows[2:]] == [date(2024, month, 1) for month in range(1, 13)]
        assert solver.days[0] == date(2024, 6, 21)

    def test_southern_solstices_swapped(self) -> None:
        report = DaylightReport(solver=StubSolver(), grid=placed_grid(SOUTH))
        assert report.solstice_dates(2024) == (date(2024, 12, 21), date(2024, 6, 21))
        rows = report.yearly_report(2024)
        assert rows[0].label == "Summer Solstice (21 December 2024)"

    def test_summary_for(self) -> None:
        row = DaylightReport(solver=StubSolver(), grid=placed_grid(NORTH)).summary_for(date(2024, 3, 1))
        assert row.day == date(2024, 3, 1)
        assert row.total_loss == timedelta(minutes=65)

    def test_uses_valid_cache(self) -> None:
        cache = YearlyTopoCache()
        stub = StubSolver()
        cache.ensure(NORTH, 2024, solve=lambda day: stub.solve_day(day, None))

        rows = DaylightReport(solver=FailingSolver(), grid=placed_grid(NORTH), cache=cache).yearly_report(2024)
        assert len(rows) == 14

    def test_cache_for_other_year_ignored(self) -> None:
        cache = YearlyTopoCache()
        stub = StubSolver()
        cache.ensure(NORTH, 2023, solve=lambda day: stub.solve_day(day, None))

        solver = StubSolver()
        DaylightReport(solver=solver, grid=placed_grid(NORTH), cache=cache).yearly_report(2024)
        assert len(solver.days) == 14
