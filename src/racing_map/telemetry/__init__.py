"""Live-timing feed ingestion.

Public API
----------
Position        - one vehicle's instantaneous coordinate
PositionStatus  - car status flag from the feed
DriverTiming    - per-driver fields of a timing frame
PositionParser  - raw position frame → {vehicle_id: Position}
TimingParser    - raw timing frame → {vehicle_id: DriverTiming}
"""

from racing_map.telemetry.models import DriverTiming, Position, PositionStatus
from racing_map.telemetry.parser import PositionParser, TimingParser

__all__ = [
    "DriverTiming",
    "Position",
    "PositionParser",
    "PositionStatus",
    "TimingParser",
]
