"""Elevation tile byte source.

Fetches raw tile bytes over HTTP with an optional on-disk cache keyed by
the tile URL path. No retries: a failed fetch raises TileFetchError and the
caller decides what to do with the missing tile.

Data Source:
    AWS Terrain Tiles (Terrarium encoding), free, no API key
    https://s3.amazonaws.com/elevation-tiles-prod/terrarium/{z}/{x}/{y}.png
"""

import logging
import tempfile
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import requests

from topolight.constants import TileConfig
from topolight.core.errors import TileFetchError
from topolight.model.tile_key import TileKey

logger = logging.getLogger(__name__)


class TileSource:
    """Fetch tile bytes for a URL, optionally cached on disk.

    Example:
        source = TileSource(cache_dir=TileConfig.CACHE_DIR)
        data = source.fetch_tile(TileKey(zoom=12, x=2165, y=1447))
    """

    def __init__(
        self,
        url_template: str = TileConfig.TERRARIUM_URL,
        cache_dir: Optional[Path] = None,
        timeout_s: float = TileConfig.REQUEST_TIMEOUT_S,
    ):
        """Initialize the source.

        Args:
            url_template: Tile URL with {z}/{x}/{y} placeholders
            cache_dir: Directory for cached tiles (None disables caching)
            timeout_s: HTTP timeout per request in seconds
        """
        self._url_template = url_template
        self._cache_dir = cache_dir
        self._timeout_s = timeout_s

    def url_for(self, key: TileKey) -> str:
        return key.url(self._url_template)

    def _cache_path(self, url: str) -> Optional[Path]:
        if self._cache_dir is None:
            return None
        parsed = urlparse(url)
        return self._cache_dir / parsed.netloc / parsed.path.lstrip("/")

    def fetch_bytes(self, url: str) -> bytes:
        """Return the bytes at `url`, from the cache when present.

        An unreadable cache entry is logged and fetched again over HTTP.

        Raises:
            TileFetchError: On non-2xx status, timeout or connection failure.
        """
        cache_path = self._cache_path(url)
        if cache_path is not None and cache_path.exists():
            try:
                data = cache_path.read_bytes()
            except OSError as exc:
                logger.warning(f"Unreadable cached tile {cache_path}, fetching again: {exc}")
            else:
                logger.debug(f"Tile cache hit: {cache_path}")
                return data

        try:
            response = requests.get(url, timeout=self._timeout_s)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise TileFetchError(url=url, reason=str(exc)) from exc

        data = response.content
        if cache_path is not None:
            self._write_cache(cache_path, data, url)
        return data

    def _write_cache(self, cache_path: Path, data: bytes, url: str) -> None:
        """Write through a sibling temp file so a cache entry is never partial."""
        tmp_path = None
        try:
            cache_path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(dir=cache_path.parent, suffix=".part", delete=False) as tmp:
                tmp_path = Path(tmp.name)
                tmp.write(data)
            tmp_path.replace(cache_path)
        except OSError as exc:
            logger.warning(f"Could not cache tile {url} at {cache_path}: {exc}")
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)

    def fetch_tile(self, key: TileKey) -> bytes:
        """Fetch the bytes of one tile."""
        return self.fetch_bytes(self.url_for(key))

    def evict_tile(self, key: TileKey) -> None:
        """Drop a tile's cache entry, e.g. after it failed to decode."""
        cache_path = self._cache_path(self.url_for(key))
        if cache_path is None:
            return
        try:
            cache_path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning(f"Could not evict cached tile {cache_path}: {exc}")
        else:
            logger.info(f"Evicted cached tile {key}")
