"""Exceptions raised by the terrain pipeline.

Both concrete errors are per-tile: the terrain loader catches them, logs,
and leaves the affected grid slot empty.
"""


class TopolightError(Exception):
    """Base class for Topolight errors."""


class TileFetchError(TopolightError):
    """Tile bytes could not be fetched (non-2xx status, timeout, connection)."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch {url}: {reason}")


class TileDecodeError(TopolightError):
    """Tile bytes could not be decoded into an RGB elevation raster."""
