"""Heightfield reload: recenter, concurrent fetch+decode, install, stitch.

One reload is a fan-out of independent fetch-and-decode tasks (one per grid
slot) on a thread pool, joined before stitching. Worker threads never touch
the grid: results are installed on the calling thread as they complete, so
the grid keeps a single owner.

Failure policy:
    - A tile whose fetch or decode fails is logged and its slot stays empty
      (height queries there return the flat-ground fallback)
    - A tile that fails to decode is evicted from the source cache so the
      next reload fetches it again
    - If the grid is recentered while a reload is in flight, the remaining
      results of the superseded generation are abandoned and it is not
      stitched
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Optional, Protocol

from topolight.constants import TileConfig
from topolight.core.errors import TileDecodeError, TileFetchError
from topolight.core.height_grid import HeightFieldGrid
from topolight.core.height_tile import HeightFieldTile
from topolight.model.geo_point import GeoPoint
from topolight.model.tile_key import TileKey

logger = logging.getLogger(__name__)


class TileFetcher(Protocol):
    def fetch_tile(self, key: TileKey) -> bytes: ...

    def evict_tile(self, key: TileKey) -> None: ...


class TerrainLoader:
    """Loads the heightfield grid around a location.

    Example:
        loader = TerrainLoader(source=TileSource(cache_dir=TileConfig.CACHE_DIR))
        loaded = loader.load(grid, GeoPoint(lat=46.98, lon=10.31), zoom=13)
    """

    def __init__(
        self,
        source: TileFetcher,
        decoder: Callable[[bytes], HeightFieldTile] = HeightFieldTile.from_png_bytes,
        max_workers: int = TileConfig.MAX_FETCH_WORKERS,
    ):
        """Initialize with a tile source.

        Args:
            source: Provides raw tile bytes per TileKey
            decoder: Turns tile bytes into a HeightFieldTile
            max_workers: Concurrent fetch+decode tasks
        """
        self._source = source
        self._decoder = decoder
        self._max_workers = max_workers

    @staticmethod
    def should_reload(grid: HeightFieldGrid, location: GeoPoint, zoom: int) -> bool:
        """True unless the grid already covers (almost) the same location and zoom."""
        center = grid.center
        if center is None or grid.zoom != zoom:
            return True
        return not (
            abs(location.lat - center.lat) < TileConfig.RELOAD_THRESHOLD_DEG
            and abs(location.lon - center.lon) < TileConfig.RELOAD_THRESHOLD_DEG
        )

    def _fetch_and_decode(self, key: TileKey) -> HeightFieldTile:
        data = self._source.fetch_tile(key)
        try:
            return self._decoder(data)
        except TileDecodeError:
            # Next reload refetches instead of re-reading the cached bytes
            self._source.evict_tile(key)
            raise

    def load(
        self,
        grid: HeightFieldGrid,
        location: GeoPoint,
        zoom: int,
        grid_radius: Optional[int] = None,
        progress_callback: Optional[Callable[[float], None]] = None,
    ) -> int:
        """Reload the grid around a location and stitch it.

        Args:
            grid: Grid to recenter and fill
            location: Tracked location
            zoom: Tile zoom level
            grid_radius: Grid radius (default: lookup by zoom)
            progress_callback: Optional callback receiving progress 0.0-1.0
                after each finished tile

        Returns:
            Number of tiles installed (0 if the reload was superseded).
        """
        keys = grid.recenter(location, zoom, grid_radius)
        generation = grid.generation
        total = len(keys)
        start_time = time.time()
        installed = 0
        failed = 0
        done = 0

        with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
            futures = {pool.submit(self._fetch_and_decode, key): (offset, key) for offset, key in keys.items()}
            for future in as_completed(futures):
                offset, key = futures[future]
                if grid.generation != generation:
                    continue
                try:
                    tile = future.result()
                except (TileFetchError, TileDecodeError) as exc:
                    failed += 1
                    logger.warning(f"Skipping tile {key} at offset {offset}: {exc}")
                else:
                    grid.install_tile(offset, tile)
                    installed += 1
                done += 1
                if progress_callback:
                    progress_callback(done / total)

        if grid.generation != generation:
            logger.info(f"Reload of generation {generation} superseded by {grid.generation}; results abandoned")
            return 0

        grid.stitch_boundaries()
        elapsed = time.time() - start_time
        logger.info(f"Loaded {installed}/{total} tiles in {elapsed:.2f}s ({failed} failed)")
        return installed
