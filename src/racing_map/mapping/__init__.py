"""Track mapping engine, exporter and session context."""

from racing_map.mapping.engine import TrackMappingEngine
from racing_map.mapping.exporter import MapExporter
from racing_map.mapping.lock import ReadWriteLock
from racing_map.mapping.models import MappingStats, TrackMapExport
from racing_map.mapping.session import MappingSession

__all__ = [
    "MapExporter",
    "MappingSession",
    "MappingStats",
    "ReadWriteLock",
    "TrackMapExport",
    "TrackMappingEngine",
]
