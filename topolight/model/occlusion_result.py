"""OcclusionResult - outcome of one sun ray march."""

from dataclasses import dataclass
from typing import Optional

Point3 = tuple[float, float, float]


@dataclass(frozen=True)
class OcclusionResult:
    """Whether the observer is lit, and where the sun ray hit terrain.

    Attributes:
        is_lit: True if direct sunlight reaches the observer
        blocking_point: First terrain hit in world units (x, y, z), y snapped
            to the terrain height. None when lit, or when the sun is below
            the horizon and no ray was marched.
    """

    is_lit: bool
    blocking_point: Optional[Point3] = None


LIT = OcclusionResult(is_lit=True)
BELOW_HORIZON = OcclusionResult(is_lit=False)
