"""MappingSession — owns the engine for the lifetime of a timing session."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import datetime

from racing_map.config import MappingConfig
from racing_map.mapping.engine import TrackMappingEngine
from racing_map.telemetry.models import utc_now

_logger = logging.getLogger(__name__)


class MappingSession:
    """Session context passed to every feed and transport handler.

    The engine is created once with the session object and is cleared, not
    replaced, at every session boundary, so handlers may keep a reference
    to :attr:`engine`.
    """

    def __init__(
        self,
        config: MappingConfig | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.config = config or MappingConfig()
        self._clock = clock
        self.engine = TrackMappingEngine(self.config, clock=clock)
        self._state_lock = threading.Lock()
        self.active = False
        self.track_name = self.config.default_track_name
        self.started_at: datetime | None = None

    def start(self, track_name: str | None = None) -> None:
        """Begin a new session, discarding anything collected before."""
        with self._state_lock:
            self.engine.clear()
            self.track_name = track_name or self.config.default_track_name
            self.started_at = self._clock()
            self.active = True
        _logger.info("Mapping session started for %s", self.track_name)

    def end(self) -> None:
        with self._state_lock:
            self.engine.clear()
            self.active = False
            self.started_at = None
        _logger.info("Mapping session ended")
