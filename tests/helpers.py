"""Shared builders for racing_map tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from racing_map.telemetry.models import Position
from racing_map.track.models import AggregatedCoordinate, RacingLinePoint

T0 = datetime(2026, 3, 8, 14, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced clock; ``tick_ms`` is added after every call when set."""

    def __init__(self, start: datetime = T0, tick_ms: int = 0) -> None:
        self.now = start
        self.tick = timedelta(milliseconds=tick_ms)

    def __call__(self) -> datetime:
        current = self.now
        self.now = current + self.tick
        return current

    def advance(self, ms: int) -> None:
        self.now += timedelta(milliseconds=ms)


def make_position(x: float, y: float, z: float = 0.0, at: datetime = T0) -> Position:
    return Position(x=x, y=y, z=z, timestamp=at)


def make_line(points: list[tuple[float, float]]) -> list[RacingLinePoint]:
    """Racing line points with indices but no distances."""
    return [RacingLinePoint(x=x, y=y, index=i, distance=0.0) for i, (x, y) in enumerate(points)]


def make_coords(points: list[tuple[float, float]]) -> list[AggregatedCoordinate]:
    """Aggregated coordinates one second apart, in list order."""
    return [
        AggregatedCoordinate(x=x, y=y, z=0.0, visits=1, timestamp=T0 + timedelta(seconds=i))
        for i, (x, y) in enumerate(points)
    ]


def position_frame(points: dict[str, tuple[float, float]]) -> dict:
    """``{"Position": {id: {"X", "Y", "Z"}}}`` with string-encoded values, like the feed."""
    return {
        "Position": {
            vid: {"X": str(x), "Y": str(y), "Z": "0", "Status": "OnTrack"}
            for vid, (x, y) in points.items()
        }
    }


STRAIGHT_12 = [(float(i), 0.0) for i in range(12)]
"""Twelve points one unit apart along the x axis."""

RIGHT_ANGLE_12 = [(float(i), 0.0) for i in range(6)] + [(5.0, float(j)) for j in range(1, 7)]
"""Six points along +x then six along +y: a 90° left turn at (5, 0)."""
