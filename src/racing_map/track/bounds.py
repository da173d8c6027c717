"""Running axis-aligned bounding box over observed positions."""

from __future__ import annotations

from racing_map.telemetry.models import Position
from racing_map.track.models import TrackBounds


class BoundsTracker:
    """Widens a :class:`TrackBounds` with every accepted position.

    The box only ever grows; :meth:`clear` is the only way to reset it.
    """

    def __init__(self) -> None:
        self._bounds: TrackBounds | None = None

    @property
    def bounds(self) -> TrackBounds | None:
        """Current extent, or ``None`` before the first update."""
        return self._bounds

    def update(self, position: Position) -> None:
        b = self._bounds
        if b is None:
            self._bounds = TrackBounds(
                min_x=position.x, max_x=position.x,
                min_y=position.y, max_y=position.y,
                min_z=position.z, max_z=position.z,
            )
            return

        b.min_x = min(b.min_x, position.x)
        b.max_x = max(b.max_x, position.x)
        b.min_y = min(b.min_y, position.y)
        b.max_y = max(b.max_y, position.y)
        b.min_z = min(b.min_z, position.z)
        b.max_z = max(b.max_z, position.z)

    def snapshot(self) -> TrackBounds | None:
        """Return a copy of the current bounds safe to hand to exporters."""
        b = self._bounds
        if b is None:
            return None
        return TrackBounds(b.min_x, b.max_x, b.min_y, b.max_y, b.min_z, b.max_z)

    def clear(self) -> None:
        self._bounds = None
