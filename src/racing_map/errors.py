"""Exceptions raised inside the track mapping pipeline.

None of these cross the public :class:`~racing_map.mapping.engine.TrackMappingEngine`
contract; the engine logs them and returns a neutral result instead.
"""

from __future__ import annotations


class RacingMapError(Exception):
    """Base class for all racing_map errors."""


class MalformedFrameError(RacingMapError, ValueError):
    """A raw feed frame does not have the expected shape."""


class InsufficientDataError(RacingMapError, ValueError):
    """Too few aggregated coordinates to build a racing line.

    This is the normal state early in a session, not a fault.
    """

    def __init__(self, available: int, required: int) -> None:
        super().__init__(
            f"Insufficient coordinate data: {available} of {required} required"
        )
        self.available = available
        self.required = required
