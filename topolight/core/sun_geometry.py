"""Sun direction in the engine's local frame.

The local frame has the observer at the origin, +x east, +y up and +z
north. The ephemeris reports azimuth measured from south, positive toward
west; adding pi turns it into a north-based bearing so that sin/cos map
straight onto the x (east) and z (north) axes.
"""

from math import cos, pi, sin

from topolight.constants import OcclusionConfig


class SunGeometry:
    """Static conversion of (altitude, azimuth) into a local position."""

    @staticmethod
    def sun_direction(
        altitude: float,
        azimuth: float,
        radius: float = OcclusionConfig.RAY_ORIGIN_RADIUS,
    ) -> tuple[float, float, float]:
        """Position of the sun on a sphere of `radius` around the observer.

        Args:
            altitude: Sun altitude in radians
            azimuth: Sun azimuth in radians (from south, positive toward west)
            radius: Sphere radius in world units

        Returns:
            Tuple (x, y, z) in world units.
        """
        y = radius * sin(altitude)
        r = radius * cos(altitude)
        x = r * sin(azimuth + pi)
        z = r * cos(azimuth + pi)
        return x, y, z
