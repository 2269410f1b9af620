"""Configuration constants for Topolight.

All configurable parameters are centralized here for easy tuning.
Constructor arguments of the engine classes default to these values.

Classes:
    TileConfig: Elevation tile source, zoom levels and grid sizing
    TerrainConfig: Heightfield decoding and world-space scale
    OcclusionConfig: Sun ray march parameters
    SolverConfig: Topographic sunrise/sunset bisection parameters
    ReportConfig: Daylight report dates
"""

from pathlib import Path

# Package root directory (where topolight/ lives)
PACKAGE_DIR = Path(__file__).parent

# Project root directory (parent of topolight/)
PROJECT_ROOT = PACKAGE_DIR.parent

# Default on-disk tile cache (created on first write, not shipped with package)
DATA_DIR = PROJECT_ROOT / "data"


class TileConfig:
    """Elevation tile source and grid sizing."""

    # AWS Terrain Tiles (free, open, no API key)
    TERRARIUM_URL = "https://s3.amazonaws.com/elevation-tiles-prod/terrarium/{z}/{x}/{y}.png"

    CACHE_DIR = DATA_DIR / "tiles"
    REQUEST_TIMEOUT_S = 30

    # Concurrent fetch+decode workers per reload
    MAX_FETCH_WORKERS = 8

    # Grid radius per zoom: radius R gives a (2R+1) x (2R+1) tile grid
    GRID_RADIUS_BY_ZOOM = {
        12: 2,  # 5x5
        13: 3,  # 7x7
        14: 4,  # 9x9
        15: 5,  # 11x11
    }
    DEFAULT_GRID_RADIUS = 2
    DEFAULT_ZOOM = 12

    # Moves smaller than this (degrees, both axes) keep the loaded terrain
    RELOAD_THRESHOLD_DEG = 0.0001


class TerrainConfig:
    """Heightfield decoding and world-space scale."""

    # Terrarium encoding: height_m = (R * 256 + G + B / 256) - 32768
    TERRARIUM_R_SCALER = 256.0
    TERRARIUM_G_SCALER = 1.0
    TERRARIUM_B_SCALER = 1.0 / 256.0
    TERRARIUM_OFFSET = -32768.0

    # World units per meter of elevation
    HEIGHT_SCALE = 0.005

    # A zoom-12 tile spans 20 world units; each zoom level halves it
    BASE_ZOOM = 12
    BASE_SIZE = 20.0

    # Observer sits this far above the sampled ground height
    OBSERVER_LIFT = 0.01


class OcclusionConfig:
    """Sun ray march parameters.

    Step size and probe count are empirical; no derivation exists for them.
    """

    RAY_ORIGIN_RADIUS = 10.0  # Distance of the virtual sun from the observer
    STEP_SIZE = 2.0  # Coarse march step (world units)
    PROBE_COUNT = 5  # Fine probes at 0.1, 0.3, 0.5, 0.7, 0.9 of a coarse step
    PROBE_START = 0.1
    PROBE_SPACING = 0.2

    # Sun this far below the observer with negative altitude is a night early-out
    BELOW_HORIZON_MARGIN = 5.0


class SolverConfig:
    """Topographic sunrise/sunset bisection parameters."""

    # Fixed iteration count, not an epsilon: width ends at (end - start) / 2^15
    BISECTION_ITERATIONS = 15


class ReportConfig:
    """Daylight report dates (month, day)."""

    JUNE_SOLSTICE = (6, 21)
    DECEMBER_SOLSTICE = (12, 21)
    SUMMER_SOLSTICE_LABEL = "Summer Solstice"
    WINTER_SOLSTICE_LABEL = "Winter Solstice"
