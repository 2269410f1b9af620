"""Slippy-map tile coordinate math (Web Mercator).

Provides conversions between geographic coordinates and fractional
XYZ tile coordinates, plus the world-space scale of a tile per zoom:
- lon/lat -> fractional tile (x, y)
- fractional tile (x, y) -> lon/lat (exact inverse)
- Integer TileKey containing a location
- Tile world size and grid radius per zoom

Latitudes must lie strictly within (-85.05, 85.05) for finite output;
beyond that the Mercator projection diverges and no special handling is done.
"""

from math import atan, cos, degrees, floor, log, pi, radians, sinh, tan

from topolight.constants import TerrainConfig, TileConfig
from topolight.model.geo_point import GeoPoint
from topolight.model.tile_key import TileKey


class TileMath:
    """Static methods for Web Mercator tile coordinates.

    Tile x grows eastward and tile y grows southward. Coordinates are in
    decimal degrees (WGS84).
    """

    @staticmethod
    def lon_lat_to_tile(lon: float, lat: float, zoom: int) -> tuple[float, float]:
        """Convert a location to fractional tile coordinates.

        Args:
            lon: Longitude in decimal degrees
            lat: Latitude in decimal degrees, within (-85.05, 85.05)
            zoom: Zoom level

        Returns:
            Tuple (x, y) of fractional tile coordinates.
        """
        n = 2.0**zoom
        x = n * ((lon + 180.0) / 360.0)
        lat_rad = radians(lat)
        y = n * (1.0 - (log(tan(lat_rad) + 1.0 / cos(lat_rad)) / pi)) / 2.0
        return x, y

    @staticmethod
    def tile_to_lon_lat(x: float, y: float, zoom: int) -> tuple[float, float]:
        """Convert fractional tile coordinates back to (lon, lat) degrees."""
        n = 2.0**zoom
        lon = x / n * 360.0 - 180.0
        lat = degrees(atan(sinh(pi * (1.0 - 2.0 * y / n))))
        return lon, lat

    @staticmethod
    def tile_key_for(point: GeoPoint, zoom: int) -> TileKey:
        """Return the tile containing a location."""
        x, y = TileMath.lon_lat_to_tile(lon=point.lon, lat=point.lat, zoom=zoom)
        return TileKey(zoom=zoom, x=floor(x), y=floor(y))

    @staticmethod
    def tile_world_size(zoom: int) -> float:
        """World-space edge length of one tile at a zoom level.

        A zoom-12 tile spans BASE_SIZE world units; every zoom level halves it.
        """
        return TerrainConfig.BASE_SIZE / 2.0 ** (zoom - TerrainConfig.BASE_ZOOM)

    @staticmethod
    def grid_radius_for_zoom(zoom: int) -> int:
        """Tile grid radius for a zoom level (5x5 at zoom 12 up to 11x11 at 15)."""
        return TileConfig.GRID_RADIUS_BY_ZOOM.get(zoom, TileConfig.DEFAULT_GRID_RADIUS)
