"""Export payloads handed to the transport layer."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from racing_map.live.cache import LivePosition
from racing_map.telemetry.models import to_iso
from racing_map.track.models import TrackBounds, TrackMap

# Grid-cell counts at which the collected coordinate set is considered usable / good.
SUFFICIENT_COORDINATES = 100
EXCELLENT_COORDINATES = 500


@dataclass
class TrackMapExport:
    """Track map plus live positions and readiness flags."""

    track_map: TrackMap | None
    driver_positions: dict[str, LivePosition]
    has_position_data: bool
    has_track_data: bool
    last_update: datetime

    def to_dict(self) -> dict:
        return {
            "trackMap": self.track_map.to_dict() if self.track_map is not None else None,
            "driverPositions": {k: v.to_dict() for k, v in self.driver_positions.items()},
            "metadata": {
                "hasPositionData": self.has_position_data,
                "hasTrackData": self.has_track_data,
                "lastUpdate": to_iso(self.last_update),
            },
        }


@dataclass
class MappingStats:
    track_coordinates: int
    active_drivers: int
    track_bounds: TrackBounds | None

    @property
    def has_track_data(self) -> bool:
        return self.track_coordinates > 0

    @property
    def has_position_data(self) -> bool:
        return self.active_drivers > 0

    def to_dict(self) -> dict:
        return {
            "trackCoordinates": self.track_coordinates,
            "activeDrivers": self.active_drivers,
            "trackBounds": self.track_bounds.to_dict() if self.track_bounds else None,
            "hasTrackData": self.has_track_data,
            "hasPositionData": self.has_position_data,
            "dataQuality": {
                "sufficient": self.track_coordinates >= SUFFICIENT_COORDINATES,
                "excellent": self.track_coordinates >= EXCELLENT_COORDINATES,
            },
        }
