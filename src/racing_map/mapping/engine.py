"""TrackMappingEngine — per-session owner of all track reconstruction state.

Feed frames go in through :meth:`TrackMappingEngine.process_position_data`
and :meth:`TrackMappingEngine.process_timing_data`; maps and live positions
come out of the read methods.  No public method raises: malformed input,
insufficient data and unexpected failures are logged and turned into a
``None`` / empty result.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime

from racing_map.config import MappingConfig
from racing_map.errors import InsufficientDataError, MalformedFrameError
from racing_map.live.cache import LivePosition, LivePositionCache
from racing_map.mapping.exporter import MapExporter
from racing_map.mapping.lock import ReadWriteLock
from racing_map.mapping.models import MappingStats, TrackMapExport
from racing_map.telemetry.models import Position, utc_now
from racing_map.telemetry.parser import PositionParser, TimingParser
from racing_map.track.aggregator import CoordinateAggregator
from racing_map.track.bounds import BoundsTracker
from racing_map.track.detector import FeatureDetector
from racing_map.track.models import TrackBounds, TrackMap
from racing_map.track.racing_line import RacingLineBuilder
from racing_map.track.sectors import SectorMapper, current_sector
from racing_map.track.segmenter import TrackSegmenter

_logger = logging.getLogger(__name__)


class TrackMappingEngine:
    """Track reconstruction and live-position engine for one session.

    Mutating calls take the write side of an internal reader/writer lock;
    read calls take the read side and may overlap each other.

    Parameters
    ----------
    config:
        Pipeline constants.  Defaults to :class:`MappingConfig` from the
        environment.
    clock:
        Returns the current UTC time.  Injected in tests to control
        position timestamps and staleness.
    """

    def __init__(
        self,
        config: MappingConfig | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.config = config or MappingConfig()
        self._clock = clock
        self._lock = ReadWriteLock()

        self._position_parser = PositionParser()
        self._timing_parser = TimingParser()

        self._cache = LivePositionCache(staleness_ms=self.config.staleness_ms)
        self._bounds = BoundsTracker()
        self._aggregator = CoordinateAggregator()
        self._sectors = SectorMapper()

        self._exporter = MapExporter(
            aggregator=self._aggregator,
            bounds=self._bounds,
            sectors=self._sectors,
            builder=RacingLineBuilder(
                window=self.config.smoothing_window,
                min_points=self.config.min_coordinates,
            ),
            segmenter=TrackSegmenter(
                target_sections=self.config.target_sections,
                straight_threshold=self.config.straight_threshold,
                slight_corner_threshold=self.config.slight_corner_threshold,
            ),
            detector=FeatureDetector(
                threshold=self.config.corner_threshold,
                cluster_distance=self.config.cluster_distance,
            ),
        )

    # ------------------------------------------------------------------
    # State accessors
    # ------------------------------------------------------------------

    @property
    def track_bounds(self) -> TrackBounds | None:
        with self._lock.read():
            return self._bounds.snapshot()

    @property
    def coordinate_count(self) -> int:
        with self._lock.read():
            return len(self._aggregator)

    @property
    def driver_count(self) -> int:
        """Cached vehicles, stale ones included."""
        with self._lock.read():
            return len(self._cache)

    @property
    def sector_mapper(self) -> SectorMapper:
        return self._sectors

    # ------------------------------------------------------------------
    # Writers
    # ------------------------------------------------------------------

    def process_position_data(self, frame: object) -> dict[str, Position] | None:
        """Ingest a raw position frame.

        Returns copies of the accepted positions keyed by vehicle id
        (possibly empty), or ``None`` if the frame is malformed or processing failed.
        """
        try:
            with self._lock.write():
                positions = self._position_parser.parse(frame, self._clock())
                for vehicle_id, position in positions.items():
                    self._cache.put(vehicle_id, replace(position))
                    self._bounds.update(position)
                    self._aggregator.add(position)
        except MalformedFrameError as exc:
            _logger.warning("Ignoring position frame: %s", exc)
            return None
        except Exception:
            _logger.exception("Error processing position data")
            return None

        _logger.debug("Accepted %d positions", len(positions))
        return positions

    def process_timing_data(self, frame: object) -> None:
        """Enrich cached positions with sector, speed, lap and race position.

        Vehicles without a cached position are skipped, but every driver
        entry still reaches the sector mapper hook.
        """
        try:
            with self._lock.write():
                timings = self._timing_parser.parse(frame)
                for vehicle_id, timing in timings.items():
                    position = self._cache.get(vehicle_id)
                    if position is not None:
                        position.sector = current_sector(timing.sectors)
                        position.speed = timing.speed
                        position.lap_number = timing.lap_number
                        position.race_position = timing.race_position
                    self._sectors.update(vehicle_id, timing)
        except MalformedFrameError as exc:
            _logger.warning("Ignoring timing frame: %s", exc)
        except Exception:
            _logger.exception("Error processing timing data for track mapping")

    def clear(self) -> None:
        """Drop all collected data (session boundary)."""
        try:
            with self._lock.write():
                self._aggregator.clear()
                self._cache.clear()
                self._bounds.clear()
                self._sectors.clear()
        except Exception:
            _logger.exception("Error clearing track mapping data")
            return
        _logger.debug("Track mapping data cleared")

    # ------------------------------------------------------------------
    # Readers
    # ------------------------------------------------------------------

    def generate_track_map(self, track_name: str | None = None) -> TrackMap | None:
        """Build a track map, or return ``None`` until enough data exists."""
        with self._lock.read():
            return self._generate(track_name)

    def get_current_driver_positions(self) -> dict[str, LivePosition]:
        """Cached positions younger than the staleness window, with their age."""
        try:
            with self._lock.read():
                return self._cache.snapshot(self._clock())
        except Exception:
            _logger.exception("Error reading live driver positions")
            return {}

    def export_track_map(self) -> TrackMapExport:
        """Track map, live positions and readiness flags from one consistent read."""
        with self._lock.read():
            track_map = self._generate(None)
            now = self._clock()
            try:
                positions = self._cache.snapshot(now)
            except Exception:
                _logger.exception("Error reading live driver positions")
                positions = {}
            return TrackMapExport(
                track_map=track_map,
                driver_positions=positions,
                has_position_data=len(self._cache) > 0,
                has_track_data=len(self._aggregator) > 0,
                last_update=now,
            )

    def stats(self) -> MappingStats:
        with self._lock.read():
            return MappingStats(
                track_coordinates=len(self._aggregator),
                active_drivers=len(self._cache),
                track_bounds=self._bounds.snapshot(),
            )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _generate(self, track_name: str | None) -> TrackMap | None:
        """Caller must hold the lock."""
        name = track_name or self.config.default_track_name
        try:
            return self._exporter.generate(name, self._clock())
        except InsufficientDataError as exc:
            _logger.warning("Track map not ready: %s", exc)
            return None
        except Exception:
            _logger.exception("Error generating track map")
            return None
