"""Tiled heightfield around the tracked location.

Owns a (2R+1) x (2R+1) grid of tile slots centered on the tile that
contains the tracked location, and answers continuous height queries in
world space.

World frame:
    The observer sits at the origin; +x is east, +y is up, +z is north.
    Slot (row, col) holds tile (cx + col, cy + row), so columns grow east
    and rows grow south. Each tile is a square of tile_world_size units
    whose center lies at grid-local (col * size, row * size); the whole grid
    is shifted by the sub-tile offset of the location so that the location
    lands exactly on the origin.

Query results:
    -inf  outside the grid footprint ("never occludes")
    0.0   inside the footprint but the slot has no data ("assume flat")
"""

import logging
from dataclasses import dataclass
from math import ceil, floor
from typing import Optional, Union

import numpy as np

from topolight.constants import TerrainConfig, TileConfig
from topolight.core.height_tile import HeightFieldTile
from topolight.core.tile_math import TileMath
from topolight.model.geo_point import GeoPoint
from topolight.model.tile_key import TileKey

logger = logging.getLogger(__name__)

Offset = tuple[int, int]


@dataclass(frozen=True)
class EmptySlot:
    """Slot without data (not fetched yet, or the fetch/decode failed)."""


@dataclass(frozen=True)
class LoadedSlot:
    """Slot holding a decoded tile."""

    tile: HeightFieldTile


TileSlot = Union[EmptySlot, LoadedSlot]

EMPTY_SLOT = EmptySlot()


def _round_half_up(value: float) -> int:
    return floor(value + 0.5)


class HeightFieldGrid:
    """Square grid of heightfield tiles with bilinear height queries.

    Lifecycle per location change (strictly in this order):
        keys = grid.recenter(location, zoom)
        grid.install_tile(offset, tile)   # for every tile that loaded
        grid.stitch_boundaries()
        grid.height_at(x, z)              # queries against this generation

    Example:
        grid = HeightFieldGrid()
        keys = grid.recenter(GeoPoint(lat=46.98, lon=10.31), zoom=13)
    """

    def __init__(self) -> None:
        self._center: Optional[GeoPoint] = None
        self._zoom: int = TileConfig.DEFAULT_ZOOM
        self._radius: int = 0
        self._tile_size: float = TileMath.tile_world_size(TileConfig.DEFAULT_ZOOM)
        self._offset_x: float = 0.5
        self._offset_y: float = 0.5
        self._center_key: Optional[TileKey] = None
        self._slots: dict[Offset, TileSlot] = {}
        self._generation: int = 0
        self._stitched_generation: Optional[int] = None

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def center(self) -> Optional[GeoPoint]:
        """Tracked location, or None before the first recenter."""
        return self._center

    @property
    def zoom(self) -> int:
        return self._zoom

    @property
    def radius(self) -> int:
        return self._radius

    @property
    def tile_world_size(self) -> float:
        return self._tile_size

    @property
    def center_key(self) -> Optional[TileKey]:
        return self._center_key

    @property
    def sub_tile_offset(self) -> tuple[float, float]:
        """Fractional (x, y) position of the location inside the central tile."""
        return self._offset_x, self._offset_y

    @property
    def generation(self) -> int:
        """Incremented by every recenter; identifies one reload."""
        return self._generation

    @property
    def is_stitched(self) -> bool:
        return self._stitched_generation == self._generation

    @property
    def loaded_count(self) -> int:
        return sum(1 for slot in self._slots.values() if isinstance(slot, LoadedSlot))

    @property
    def has_data(self) -> bool:
        """True if at least one tile of the current generation is loaded."""
        return any(isinstance(slot, LoadedSlot) for slot in self._slots.values())

    @property
    def footprint_half_size(self) -> float:
        """Half edge length of the square covered by the grid (world units)."""
        return (self._radius + 0.5) * self._tile_size

    def slot(self, offset: Offset) -> TileSlot:
        """Slot at (row, col); offsets outside the grid read as empty."""
        return self._slots.get(offset, EMPTY_SLOT)

    def offsets(self) -> list[Offset]:
        """All (row, col) offsets of the grid, row-major from the north-west."""
        r = self._radius
        return [(row, col) for row in range(-r, r + 1) for col in range(-r, r + 1)]

    # -------------------------------------------------------------------------
    # Reload
    # -------------------------------------------------------------------------

    def recenter(
        self,
        location: GeoPoint,
        zoom: int,
        grid_radius: Optional[int] = None,
    ) -> dict[Offset, TileKey]:
        """Move the grid to a new location and return the tiles to fetch.

        Discards every installed tile and starts a new generation.

        Args:
            location: Tracked location
            zoom: Tile zoom level
            grid_radius: Grid radius R (default: lookup by zoom)

        Returns:
            Mapping (row, col) -> TileKey for all (2R+1)^2 slots.
        """
        radius = TileMath.grid_radius_for_zoom(zoom) if grid_radius is None else grid_radius
        if radius < 0:
            raise ValueError(f"Grid radius must be non-negative, got {radius}")

        precise_x, precise_y = TileMath.lon_lat_to_tile(lon=location.lon, lat=location.lat, zoom=zoom)
        center_x, center_y = floor(precise_x), floor(precise_y)

        self._center = location
        self._zoom = zoom
        self._radius = radius
        self._tile_size = TileMath.tile_world_size(zoom)
        self._offset_x = precise_x - center_x
        self._offset_y = precise_y - center_y
        self._center_key = TileKey(zoom=zoom, x=center_x, y=center_y)
        self._generation += 1
        self._slots = {offset: EMPTY_SLOT for offset in self.offsets()}

        keys = {
            (row, col): TileKey(zoom=zoom, x=center_x + col, y=center_y + row)
            for row, col in self.offsets()
        }
        logger.info(
            f"Recentered grid on {location} at zoom {zoom}: {len(keys)} tiles around "
            f"{self._center_key} (generation {self._generation})"
        )
        return keys

    def install_tile(self, offset: Offset, tile: HeightFieldTile) -> None:
        """Store a decoded tile into its slot. Does not stitch.

        Raises:
            KeyError: If the offset is not part of the current grid.
        """
        if offset not in self._slots:
            raise KeyError(f"Offset {offset} outside grid of radius {self._radius}")
        self._slots[offset] = LoadedSlot(tile=tile)

    def clear(self) -> None:
        """Drop all tile data, keeping the current placement."""
        self._slots = {offset: EMPTY_SLOT for offset in self.offsets()}
        self._stitched_generation = None

    def stitch_boundaries(self) -> int:
        """Average shared edge samples of every adjacent pair of loaded tiles.

        The right column of each tile is averaged with the left column of
        its eastern neighbor, and the bottom row with the top row of its
        southern neighbor; both tiles receive the mean. Runs once per
        generation.

        Returns:
            Number of shared edges stitched.
        """
        if self.is_stitched:
            logger.debug(f"Generation {self._generation} already stitched, skipping")
            return 0

        r = self._radius
        stitched = 0
        for row in range(-r, r + 1):
            for col in range(-r, r + 1):
                slot = self.slot((row, col))
                if not isinstance(slot, LoadedSlot):
                    continue
                heights = slot.tile.heights

                if col < r:
                    right = self.slot((row, col + 1))
                    if isinstance(right, LoadedSlot):
                        other = right.tile.heights
                        if other.shape[0] == heights.shape[0]:
                            avg = (heights[:, -1] + other[:, 0]) / 2.0
                            heights[:, -1] = avg
                            other[:, 0] = avg
                            stitched += 1
                        else:
                            logger.warning(
                                f"Cannot stitch ({row}, {col}) with its eastern neighbor: "
                                f"{heights.shape} vs {other.shape}"
                            )

                if row < r:
                    bottom = self.slot((row + 1, col))
                    if isinstance(bottom, LoadedSlot):
                        other = bottom.tile.heights
                        if other.shape[1] == heights.shape[1]:
                            avg = (heights[-1, :] + other[0, :]) / 2.0
                            heights[-1, :] = avg
                            other[0, :] = avg
                            stitched += 1
                        else:
                            logger.warning(
                                f"Cannot stitch ({row}, {col}) with its southern neighbor: "
                                f"{heights.shape} vs {other.shape}"
                            )

        self._stitched_generation = self._generation
        logger.debug(f"Stitched {stitched} tile edges (generation {self._generation})")
        return stitched

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def height_at(self, world_x: float, world_z: float) -> float:
        """Terrain height at a world position by bilinear interpolation.

        Args:
            world_x: East coordinate (world units)
            world_z: North coordinate (world units)

        Returns:
            Height in world units; -inf outside the grid footprint, 0.0 when
            the owning tile has no data.
        """
        size = self._tile_size
        # Grid-local: x grows east, "row" coordinate grows south
        local_x = world_x + (self._offset_x - 0.5) * size
        local_row = -world_z + (self._offset_y - 0.5) * size

        col = _round_half_up(local_x / size)
        row = _round_half_up(local_row / size)
        r = self._radius
        if row < -r or row > r or col < -r or col > r:
            return float("-inf")

        slot = self.slot((row, col))
        if not isinstance(slot, LoadedSlot):
            return 0.0
        tile = slot.tile

        tile_local_x = local_x - col * size
        tile_local_row = local_row - row * size
        grid_x = (tile_local_x + size / 2) / size * (tile.width - 1)
        grid_z = (tile_local_row + size / 2) / size * (tile.height - 1)

        x1, z1 = floor(grid_x), floor(grid_z)
        x2, z2 = ceil(grid_x), ceil(grid_z)
        if x1 < 0 or x2 >= tile.width or z1 < 0 or z2 >= tile.height:
            return 0.0

        h = tile.heights
        h11 = h[z1, x1]
        h12 = h[z2, x1]
        h21 = h[z1, x2]
        h22 = h[z2, x2]

        tx = grid_x - x1
        tz = grid_z - z1
        h_z1 = h11 * (1 - tz) + h12 * tz
        h_z2 = h21 * (1 - tz) + h22 * tz
        return float(h_z1 * (1 - tx) + h_z2 * tx)

    def observer_position(self) -> np.ndarray:
        """World position of the observer: the origin, lifted onto the terrain.

        The ground height is the central tile sample nearest the location
        (rounded down); 0 when the central tile has no data.
        """
        ground = 0.0
        slot = self.slot((0, 0))
        if isinstance(slot, LoadedSlot):
            tile = slot.tile
            row = floor(self._offset_y * (tile.height - 1))
            col = floor(self._offset_x * (tile.width - 1))
            ground = float(tile.heights[row, col])
        return np.array([0.0, ground + TerrainConfig.OBSERVER_LIFT, 0.0])
