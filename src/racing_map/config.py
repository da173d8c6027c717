"""Runtime configuration for the track mapping engine and web adapter.

Values default from environment variables (a ``.env`` file in the working
directory is loaded first).  Tests construct :class:`MappingConfig` directly
with explicit keyword arguments.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

_LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    return int(raw) if raw not in (None, "") else default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    return float(raw) if raw not in (None, "") else default


@dataclass
class MappingConfig:
    """Tunable constants of the track mapping pipeline."""

    # Live position cache
    staleness_ms: int = field(
        default_factory=lambda: _env_int("RACING_MAP_STALENESS_MS", 10_000)
    )

    # Racing line / map generation
    min_coordinates: int = field(
        default_factory=lambda: _env_int("RACING_MAP_MIN_COORDINATES", 10)
    )
    smoothing_window: int = field(
        default_factory=lambda: _env_int("RACING_MAP_SMOOTHING_WINDOW", 5)
    )

    # Segmentation
    target_sections: int = field(
        default_factory=lambda: _env_int("RACING_MAP_TARGET_SECTIONS", 20)
    )
    straight_threshold: float = 0.05
    slight_corner_threshold: float = 0.2

    # Feature detection
    corner_threshold: float = field(
        default_factory=lambda: _env_float("RACING_MAP_CORNER_THRESHOLD", 0.1)
    )
    cluster_distance: float = field(
        default_factory=lambda: _env_float("RACING_MAP_CLUSTER_DISTANCE", 50.0)
    )

    # Web adapter
    default_track_name: str = field(
        default_factory=lambda: os.getenv("RACING_MAP_TRACK_NAME", "Unknown Track")
    )
    broadcast_interval_s: float = field(
        default_factory=lambda: _env_float("RACING_MAP_BROADCAST_INTERVAL_S", 1.0)
    )
    log_level: str = field(
        default_factory=lambda: os.getenv("RACING_MAP_LOG_LEVEL", "INFO")
    )

    def __post_init__(self) -> None:
        if self.staleness_ms <= 0:
            raise ValueError("staleness_ms must be > 0")
        if self.min_coordinates < 1:
            raise ValueError("min_coordinates must be >= 1")
        if self.smoothing_window < 1:
            raise ValueError("smoothing_window must be >= 1")
        if self.target_sections < 1:
            raise ValueError("target_sections must be >= 1")
        if not 0.0 <= self.straight_threshold <= self.slight_corner_threshold:
            raise ValueError("expected 0 <= straight_threshold <= slight_corner_threshold")
        if self.corner_threshold < 0.0:
            raise ValueError("corner_threshold must be >= 0")
        if self.cluster_distance < 0.0:
            raise ValueError("cluster_distance must be >= 0")
        if self.broadcast_interval_s <= 0.0:
            raise ValueError("broadcast_interval_s must be > 0")

    @classmethod
    def from_env(cls) -> MappingConfig:
        """Build a config from the current environment."""
        return cls()


def configure_logging(level: str | int = "INFO") -> None:
    """Install a root handler once; later calls only adjust the level."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=_LOG_FORMAT)
    logging.getLogger("racing_map").setLevel(level)
