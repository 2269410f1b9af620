"""GeoPoint - an observer location on Earth's surface.

The tracked location of the engine: drives tile selection, the ephemeris
queries and the yearly cache key.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class GeoPoint:
    """A WGS84 location in decimal degrees.

    Attributes:
        lat: Latitude in decimal degrees (-90 to +90)
        lon: Longitude in decimal degrees (-180 to +180)

    Example:
        point = GeoPoint(lat=46.985, lon=10.295)
    """

    lat: float
    lon: float

    def __post_init__(self) -> None:
        """Validate coordinate ranges."""
        if not -90.0 <= self.lat <= 90.0:
            raise ValueError(f"Latitude out of range: {self.lat}")
        if not -180.0 <= self.lon <= 180.0:
            raise ValueError(f"Longitude out of range: {self.lon}")

    @property
    def lat_lon(self) -> tuple[float, float]:
        """Return (lat, lon) tuple - standard geographic order."""
        return (self.lat, self.lon)

    @property
    def lon_lat(self) -> tuple[float, float]:
        """Return (lon, lat) tuple - tile math order."""
        return (self.lon, self.lat)

    def __repr__(self) -> str:
        return f"GeoPoint(lat={self.lat:.5f}, lon={self.lon:.5f})"
