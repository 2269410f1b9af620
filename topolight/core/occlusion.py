"""Terrain occlusion of direct sunlight.

Marches a ray from a virtual sun (on a sphere around the observer) toward
the observer through the heightfield. The first coarse step that dips
below the terrain is refined with a few linear probes to locate the
blocking point.

All positions and heights share the heightfield's world units.
"""

import logging
from datetime import datetime
from math import floor
from typing import Optional

import numpy as np

from topolight.constants import OcclusionConfig
from topolight.core.ephemeris import Ephemeris
from topolight.core.height_grid import HeightFieldGrid
from topolight.core.sun_geometry import SunGeometry
from topolight.model.occlusion_result import BELOW_HORIZON, LIT, OcclusionResult

logger = logging.getLogger(__name__)


class OcclusionTester:
    """Decides whether the observer is in direct sunlight at an instant.

    Stateless between calls: the result depends only on the instant, the
    grid's location and the grid's loaded data.

    Example:
        tester = OcclusionTester(ephemeris=AstralEphemeris())
        result = tester.is_lit(when=datetime(2024, 6, 21, 6, tzinfo=timezone.utc), grid=grid)
    """

    def __init__(
        self,
        ephemeris: Ephemeris,
        ray_origin_radius: float = OcclusionConfig.RAY_ORIGIN_RADIUS,
        step_size: float = OcclusionConfig.STEP_SIZE,
        probe_count: int = OcclusionConfig.PROBE_COUNT,
    ):
        """Initialize with an ephemeris and ray march parameters.

        Args:
            ephemeris: Sun position oracle
            ray_origin_radius: Distance of the virtual sun from the observer
            step_size: Coarse march step in world units
            probe_count: Fine probes per blocked coarse step
        """
        if step_size <= 0:
            raise ValueError(f"step_size must be positive, got {step_size}")
        self._ephemeris = ephemeris
        self._ray_origin_radius = ray_origin_radius
        self._step_size = step_size
        self._probe_fractions = [
            OcclusionConfig.PROBE_START + k * OcclusionConfig.PROBE_SPACING for k in range(probe_count)
        ]

    @property
    def ephemeris(self) -> Ephemeris:
        return self._ephemeris

    def is_lit(
        self,
        when: datetime,
        grid: HeightFieldGrid,
        observer: Optional[np.ndarray] = None,
    ) -> OcclusionResult:
        """Ray march from the sun to the observer at an instant.

        Args:
            when: Instant to test (UTC)
            grid: Stitched heightfield of the current generation
            observer: Observer world position (default: grid.observer_position())

        Returns:
            OcclusionResult; lit when the grid holds no terrain at all.
        """
        if not grid.has_data:
            logger.debug(f"No terrain loaded (generation {grid.generation}), sun unobstructed at {when}")
            return LIT

        center = grid.center
        state = self._ephemeris.sun_position(when, center.lat, center.lon)
        sun = np.array(SunGeometry.sun_direction(state.altitude, state.azimuth, self._ray_origin_radius))
        target = grid.observer_position() if observer is None else np.asarray(observer, dtype=float)

        if sun[1] < target[1] - OcclusionConfig.BELOW_HORIZON_MARGIN and state.altitude < 0:
            return BELOW_HORIZON

        ray = target - sun
        ray_length = float(np.linalg.norm(ray))
        if ray_length == 0.0:
            return LIT
        direction = ray / ray_length
        num_steps = floor(ray_length / self._step_size)

        for i in range(1, num_steps):
            current = sun + direction * (i * self._step_size)
            if current[1] < grid.height_at(current[0], current[2]):
                previous = sun + direction * ((i - 1) * self._step_size)
                return OcclusionResult(is_lit=False, blocking_point=self._refine(previous, current, grid))

        return LIT

    def _refine(self, previous: np.ndarray, current: np.ndarray, grid: HeightFieldGrid) -> tuple[float, float, float]:
        """First probe under terrain between two coarse steps, snapped to the ground.

        Falls back to the blocked coarse step itself when every probe is clear.
        """
        for fraction in self._probe_fractions:
            probe = previous + (current - previous) * fraction
            terrain = grid.height_at(probe[0], probe[2])
            if probe[1] < terrain:
                return float(probe[0]), terrain, float(probe[2])
        terrain = grid.height_at(current[0], current[2])
        return float(current[0]), terrain, float(current[2])
