"""Parsers that turn raw live-timing feed frames into typed records."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from datetime import datetime

from racing_map.errors import MalformedFrameError
from racing_map.telemetry.models import DriverTiming, Position, PositionStatus

_logger = logging.getLogger(__name__)


def _to_float(value: object) -> float | None:
    """Return *value* as a finite float, or None if it cannot be parsed."""
    if value is None or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    return result if math.isfinite(result) else None


def _to_int(value: object) -> int | None:
    f = _to_float(value)
    return int(f) if f is not None else None


class PositionParser:
    """Parses a ``Position.z`` style frame into per-vehicle :class:`Position` records.

    Expected shape::

        {"Position": {"44": {"X": "1204.5", "Y": "-88.1", "Z": "3", "Status": "ACTIVE"}}}

    Entries missing X or Y, or whose X/Y are not finite numbers, are dropped.
    A missing or unparsable Z becomes ``0.0``.
    """

    def parse(self, frame: object, timestamp: datetime) -> dict[str, Position]:
        """Convert *frame* into ``{vehicle_id: Position}`` stamped with *timestamp*.

        Raises:
            MalformedFrameError: If *frame* has no ``Position`` mapping.
        """
        if not isinstance(frame, Mapping):
            raise MalformedFrameError(f"position frame must be a mapping, got {type(frame).__name__}")
        entries = frame.get("Position")
        if not isinstance(entries, Mapping):
            raise MalformedFrameError("position frame has no 'Position' mapping")

        positions: dict[str, Position] = {}
        for vehicle_id, coords in entries.items():
            if not isinstance(coords, Mapping):
                _logger.debug("Skipping vehicle %s: entry is not a mapping", vehicle_id)
                continue
            if coords.get("X") is None or coords.get("Y") is None:
                continue

            x = _to_float(coords["X"])
            y = _to_float(coords["Y"])
            if x is None or y is None:
                _logger.debug(
                    "Skipping vehicle %s: unparsable coordinates X=%r Y=%r",
                    vehicle_id, coords["X"], coords["Y"],
                )
                continue
            z = _to_float(coords.get("Z"))

            positions[str(vehicle_id)] = Position(
                x=x,
                y=y,
                z=z if z is not None else 0.0,
                timestamp=timestamp,
                status=PositionStatus.parse(coords.get("Status")),
            )

        return positions


class TimingParser:
    """Parses a timing frame ``{"drivers": {id: {sectors, speed, lapNumber, position}}}``."""

    def parse(self, frame: object) -> dict[str, DriverTiming]:
        """Convert *frame* into ``{vehicle_id: DriverTiming}``.

        Raises:
            MalformedFrameError: If *frame* has no ``drivers`` mapping.
        """
        if not isinstance(frame, Mapping):
            raise MalformedFrameError(f"timing frame must be a mapping, got {type(frame).__name__}")
        drivers = frame.get("drivers")
        if not isinstance(drivers, Mapping):
            raise MalformedFrameError("timing frame has no 'drivers' mapping")

        timings: dict[str, DriverTiming] = {}
        for vehicle_id, data in drivers.items():
            if not isinstance(data, Mapping):
                _logger.debug("Skipping timing for vehicle %s: entry is not a mapping", vehicle_id)
                continue
            sectors = data.get("sectors")
            timings[str(vehicle_id)] = DriverTiming(
                sectors=[s for s in sectors if isinstance(s, Mapping)]
                if isinstance(sectors, list) else [],
                speed=_to_float(data.get("speed")),
                lap_number=_to_int(data.get("lapNumber")),
                race_position=_to_int(data.get("position")),
            )
        return timings
