"""Latest-position-per-vehicle cache with a read-time staleness filter."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime

from racing_map.telemetry.models import Position


@dataclass
class LivePosition:
    """A cached :class:`Position` annotated with its age at query time."""

    position: Position
    age_ms: int

    def to_dict(self) -> dict:
        d = self.position.to_dict()
        d["ageMs"] = self.age_ms
        return d


def age_ms(position: Position, now: datetime) -> int:
    """Milliseconds between *position*'s timestamp and *now*."""
    return int((now - position.timestamp).total_seconds() * 1000)


class LivePositionCache:
    """Holds the most recent :class:`Position` of every vehicle.

    Nothing is ever evicted: stale entries stay in the backing map and are
    only filtered out by :meth:`snapshot`.  Memory is bounded by the number
    of vehicles seen in the session.

    Parameters
    ----------
    staleness_ms:
        Positions at least this old are excluded from :meth:`snapshot`.
    """

    def __init__(self, staleness_ms: int = 10_000) -> None:
        self.staleness_ms = staleness_ms
        self._positions: dict[str, Position] = {}

    def __len__(self) -> int:
        return len(self._positions)

    def put(self, vehicle_id: str, position: Position) -> None:
        self._positions[vehicle_id] = position

    def get(self, vehicle_id: str) -> Position | None:
        """Return the cached position (fresh or stale) of *vehicle_id*."""
        return self._positions.get(vehicle_id)

    def snapshot(self, now: datetime) -> dict[str, LivePosition]:
        """Copies of every position younger than :attr:`staleness_ms` at *now*."""
        live: dict[str, LivePosition] = {}
        for vehicle_id, position in self._positions.items():
            age = age_ms(position, now)
            if age < self.staleness_ms:
                live[vehicle_id] = LivePosition(position=replace(position), age_ms=age)
        return live

    def clear(self) -> None:
        self._positions.clear()
