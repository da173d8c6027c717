"""Sector boundary bookkeeping.

This is the extension point for mapping timing-sector transitions onto
racing line positions.  The baseline only stores boundaries that callers
register; :meth:`SectorMapper.update` is invoked for every driver on every
timing frame and does nothing else yet.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from racing_map.telemetry.models import DriverTiming
from racing_map.track.models import SectorBoundary

_logger = logging.getLogger(__name__)


def current_sector(sectors: Sequence[Mapping]) -> int:
    """1-based index of the first sector flagged ``current``; 1 if none is."""
    for i, sector in enumerate(sectors):
        if sector.get("current"):
            return i + 1
    return 1


class SectorMapper:
    def __init__(self) -> None:
        self._boundaries: dict[int, dict] = {}

    def __len__(self) -> int:
        return len(self._boundaries)

    def update(self, vehicle_id: str, timing: DriverTiming) -> None:
        """Per-driver timing hook."""
        _logger.debug(
            "Sector hook: vehicle=%s sector=%d", vehicle_id, current_sector(timing.sectors)
        )

    def set_boundary(self, sector: int, boundaries: Mapping) -> None:
        if sector < 1:
            raise ValueError("sector numbers are 1-based")
        self._boundaries[sector] = dict(boundaries)

    def export(self) -> list[SectorBoundary]:
        return [
            SectorBoundary(sector=sector, boundaries=dict(b))
            for sector, b in sorted(self._boundaries.items())
        ]

    def clear(self) -> None:
        self._boundaries.clear()
