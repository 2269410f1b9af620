"""TileKey - identifies one slippy-map raster tile."""

from dataclasses import dataclass

from topolight.constants import TileConfig


@dataclass(frozen=True)
class TileKey:
    """One raster tile at a zoom level (Web Mercator XYZ scheme).

    Attributes:
        zoom: Zoom level
        x: Tile column (grows eastward)
        y: Tile row (grows southward)
    """

    zoom: int
    x: int
    y: int

    def url(self, template: str = TileConfig.TERRARIUM_URL) -> str:
        """Format the tile URL from a {z}/{x}/{y} template."""
        return template.format(z=self.zoom, x=self.x, y=self.y)

    def __str__(self) -> str:
        return f"{self.zoom}/{self.x}/{self.y}"
