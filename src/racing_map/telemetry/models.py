"""Telemetry data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


def utc_now() -> datetime:
    """Default engine clock: timezone-aware UTC ``datetime``."""
    return datetime.now(timezone.utc)


def to_iso(ts: datetime) -> str:
    """Format *ts* as ISO-8601 UTC with millisecond precision and a ``Z`` suffix."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class PositionStatus(str, Enum):
    """Car status flag carried by the position feed.

    The live feed reports ``OnTrack`` / ``OffTrack``; older recordings use
    upper-case flags such as ``PIT``.  Matching ignores case and underscores.
    """

    ON_TRACK = "OnTrack"
    OFF_TRACK = "OffTrack"
    ACTIVE = "ACTIVE"
    STOPPED = "STOPPED"
    PIT = "PIT"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, raw: object) -> PositionStatus:
        """Map a raw feed value to a status; missing → ACTIVE, unrecognised → UNKNOWN."""
        if raw is None or raw == "":
            return cls.ACTIVE
        key = _status_key(str(raw))
        for member in cls:
            if key in (_status_key(member.name), _status_key(member.value)):
                return member
        return cls.UNKNOWN


def _status_key(text: str) -> str:
    return text.replace("_", "").replace(" ", "").upper()


@dataclass
class Position:
    """One vehicle's instantaneous world coordinate.

    The timing fields stay ``None`` until a timing frame enriches the cached
    copy of this position.
    """

    x: float
    y: float
    z: float
    timestamp: datetime
    """Ingest time (UTC)."""

    status: PositionStatus = PositionStatus.ACTIVE

    sector: int | None = None
    """1-based sector the car is currently in."""

    speed: float | None = None
    lap_number: int | None = None
    race_position: int | None = None

    def to_dict(self) -> dict:
        return {
            "x": self.x,
            "y": self.y,
            "z": self.z,
            "timestamp": to_iso(self.timestamp),
            "status": self.status.value,
            "sector": self.sector,
            "speed": self.speed,
            "lapNumber": self.lap_number,
            "position": self.race_position,
        }


@dataclass
class DriverTiming:
    """Per-driver fields extracted from a timing frame."""

    sectors: list[dict] = field(default_factory=list)
    speed: float | None = None
    lap_number: int | None = None
    race_position: int | None = None
