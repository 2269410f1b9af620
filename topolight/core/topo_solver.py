"""Topographic sunrise/sunset solver.

Bisects the morning window [sunrise, solar noon] for the first lit instant
and the afternoon window [solar noon, sunset] for the last lit instant,
using the occlusion test as a monotonic oracle.

The bisection runs a fixed number of iterations (no convergence epsilon),
so the result is within (end - start) / 2^iterations of the transition:
well under a second for a normal half-day window. Good enough, not exact.

Edge case policy: if the oracle is constant over the window (polar day,
a location permanently shaded), the solver returns the bound nearest the
side it could not find instead of signalling an error.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Callable

from topolight.constants import SolverConfig
from topolight.core.height_grid import HeightFieldGrid
from topolight.core.occlusion import OcclusionTester
from topolight.model.topo_day_record import TopoDayRecord

logger = logging.getLogger(__name__)


class TopoTimeSolver:
    """Turns the occlusion test into topographic sunrise/sunset instants.

    Example:
        solver = TopoTimeSolver(tester=OcclusionTester(ephemeris))
        record = solver.solve_day(day=date(2024, 6, 21), grid=grid)
    """

    def __init__(
        self,
        tester: OcclusionTester,
        iterations: int = SolverConfig.BISECTION_ITERATIONS,
    ):
        self._tester = tester
        self._iterations = iterations

    @property
    def iterations(self) -> int:
        return self._iterations

    @staticmethod
    def precision(start: datetime, end: datetime, iterations: int = SolverConfig.BISECTION_ITERATIONS) -> timedelta:
        """Width of the final bisection interval."""
        return (end - start) / 2**iterations

    @staticmethod
    def find_transition(
        start: datetime,
        end: datetime,
        find_rising_edge: bool,
        is_lit_at: Callable[[datetime], bool],
        iterations: int = SolverConfig.BISECTION_ITERATIONS,
    ) -> datetime:
        """Locate the single lit/occluded transition inside [start, end].

        Args:
            start: Window start
            end: Window end
            find_rising_edge: True for the earliest lit instant (sunrise side),
                False for the latest lit instant (sunset side)
            is_lit_at: Oracle, assumed monotonic over the window
            iterations: Fixed number of halvings

        Returns:
            Best lit instant found; an endpoint side when the oracle never flips.
        """
        low, high = start, end
        best = high if find_rising_edge else low

        for _ in range(iterations):
            mid = low + (high - low) / 2
            lit = is_lit_at(mid)
            if find_rising_edge:
                if lit:
                    best = mid
                    high = mid
                else:
                    low = mid
            else:
                if lit:
                    best = mid
                    low = mid
                else:
                    high = mid
        return best

    def is_lit_at(self, grid: HeightFieldGrid) -> Callable[[datetime], bool]:
        """Occlusion oracle bound to a grid."""
        return lambda when: self._tester.is_lit(when, grid).is_lit

    def solve_day(self, day: date, grid: HeightFieldGrid) -> TopoDayRecord:
        """Astronomical and topographic sun times of one calendar day.

        Args:
            day: Calendar day
            grid: Stitched heightfield around the location

        Returns:
            TopoDayRecord; times are None when the day has no sunrise/sunset.
        """
        center = grid.center
        if center is None:
            raise ValueError("Grid has no location; call recenter() first")
        day_of_year = day.timetuple().tm_yday
        times = self._tester.ephemeris.sun_times(day, center.lat, center.lon)

        if not times.has_daylight_window:
            logger.warning(f"No sunrise/sunset on {day} at {center}; topographic times unavailable")
            return TopoDayRecord(
                day_of_year=day_of_year,
                astronomical_sunrise=times.sunrise,
                astronomical_sunset=times.sunset,
                topo_sunrise=None,
                topo_sunset=None,
            )

        oracle = self.is_lit_at(grid)
        topo_sunrise = self.find_transition(
            start=times.sunrise,
            end=times.solar_noon,
            find_rising_edge=True,
            is_lit_at=oracle,
            iterations=self._iterations,
        )
        topo_sunset = self.find_transition(
            start=times.solar_noon,
            end=times.sunset,
            find_rising_edge=False,
            is_lit_at=oracle,
            iterations=self._iterations,
        )
        return TopoDayRecord(
            day_of_year=day_of_year,
            astronomical_sunrise=times.sunrise,
            astronomical_sunset=times.sunset,
            topo_sunrise=topo_sunrise,
            topo_sunset=topo_sunset,
        )
