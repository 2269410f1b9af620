"""Terrarium elevation tile decoding.

Terrarium tiles encode a signed elevation in meters in the RGB channels:

    height_m = (R * 256 + G + B / 256) - 32768

Heights are scaled by TerrainConfig.HEIGHT_SCALE into world units. The
decode runs in float64 so that repeated decodes of the same bytes are
identical and stitched edge averages are reproducible.
"""

import logging
import warnings
from dataclasses import dataclass

import numpy as np
from rasterio.errors import NotGeoreferencedWarning, RasterioError
from rasterio.io import MemoryFile

from topolight.constants import TerrainConfig
from topolight.core.errors import TileDecodeError

logger = logging.getLogger(__name__)

EDGES = ("top", "bottom", "left", "right")


@dataclass
class HeightFieldTile:
    """Scaled elevation samples of one raster tile.

    Row 0 is the northern edge, column 0 the western edge. The array is
    written once by the grid's stitch pass (edge averaging) and is otherwise
    read-only.

    Attributes:
        heights: 2D float64 array of shape (height, width), world units
    """

    heights: np.ndarray

    @property
    def width(self) -> int:
        return int(self.heights.shape[1])

    @property
    def height(self) -> int:
        return int(self.heights.shape[0])

    @property
    def samples(self) -> np.ndarray:
        """Flat row-major view of the samples (length width * height)."""
        return self.heights.reshape(-1)

    def edge_indices(self, edge: str) -> np.ndarray:
        """Flat sample indices lying on one edge of the tile.

        Args:
            edge: "top", "bottom", "left" or "right"

        Returns:
            Index array ordered west-to-east (top/bottom) or north-to-south
            (left/right).
        """
        w, h = self.width, self.height
        if edge == "top":
            return np.arange(w)
        if edge == "bottom":
            return (h - 1) * w + np.arange(w)
        if edge == "left":
            return np.arange(h) * w
        if edge == "right":
            return np.arange(h) * w + (w - 1)
        raise ValueError(f"Unknown edge {edge!r}, expected one of {EDGES}")

    @classmethod
    def decode(cls, raster: np.ndarray) -> "HeightFieldTile":
        """Decode an RGB raster of shape (height, width, channels>=3).

        Dimensions are not validated: whatever shape is given is decoded.
        """
        rgb = np.asarray(raster, dtype=np.float64)
        r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]
        meters = (
            r * TerrainConfig.TERRARIUM_R_SCALER
            + g * TerrainConfig.TERRARIUM_G_SCALER
            + b * TerrainConfig.TERRARIUM_B_SCALER
        ) + TerrainConfig.TERRARIUM_OFFSET
        return cls(heights=meters * TerrainConfig.HEIGHT_SCALE)

    @classmethod
    def from_png_bytes(cls, data: bytes) -> "HeightFieldTile":
        """Decode encoded tile bytes (PNG) into a tile.

        Raises:
            TileDecodeError: If the bytes are not a readable raster with at
                least three bands.
        """
        try:
            with warnings.catch_warnings():
                # Terrarium PNGs carry no georeferencing
                warnings.simplefilter("ignore", NotGeoreferencedWarning)
                with MemoryFile(data) as memfile:
                    with memfile.open() as dataset:
                        if dataset.count < 3:
                            raise TileDecodeError(f"Expected an RGB raster, got {dataset.count} band(s)")
                        bands = dataset.read(indexes=[1, 2, 3])
        except RasterioError as exc:
            raise TileDecodeError(f"Undecodable tile raster: {exc}") from exc

        # (bands, rows, cols) -> (rows, cols, bands)
        raster = np.moveaxis(bands, 0, -1)
        logger.debug(f"Decoded tile raster {raster.shape[1]}x{raster.shape[0]}")
        return cls.decode(raster)
