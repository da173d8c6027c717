"""Track modeling data structures.

Coordinates are in the feed's native units (decimetres for the F1 live
timing position feed).  Every type has a ``to_dict()`` that produces the
camelCase JSON shape consumed by visualization clients.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from racing_map.telemetry.models import to_iso


class SectionType(str, Enum):
    STRAIGHT = "straight"
    SLIGHT_CORNER = "slight_corner"
    SHARP_CORNER = "sharp_corner"


class FeatureType(str, Enum):
    LEFT_CORNER = "left_corner"
    RIGHT_CORNER = "right_corner"


@dataclass
class TrackBounds:
    """Axis-aligned bounding box over every observed coordinate."""

    min_x: float
    max_x: float
    min_y: float
    max_y: float
    min_z: float
    max_z: float

    def to_dict(self) -> dict:
        return {
            "minX": self.min_x,
            "maxX": self.max_x,
            "minY": self.min_y,
            "maxY": self.max_y,
            "minZ": self.min_z,
            "maxZ": self.max_z,
        }


@dataclass
class AggregatedCoordinate:
    """A grid cell of the coordinate aggregator.

    ``x``/``y``/``z`` are those of the first sample that landed in the cell;
    ``timestamp`` is always the latest visit.
    """

    x: float
    y: float
    z: float
    visits: int
    timestamp: datetime

    def to_dict(self) -> dict:
        return {
            "x": self.x,
            "y": self.y,
            "z": self.z,
            "visits": self.visits,
            "timestamp": to_iso(self.timestamp),
        }


@dataclass
class RacingLinePoint:
    """A smoothed point of the racing line."""

    x: float
    y: float
    index: int
    distance: float
    """Euclidean step from the previous smoothed point (0 for the first)."""

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "index": self.index, "distance": self.distance}


@dataclass
class TrackSection:
    id: int
    start_index: int
    end_index: int
    coordinates: list[RacingLinePoint]
    type: SectionType

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "startIndex": self.start_index,
            "endIndex": self.end_index,
            "coordinates": [p.to_dict() for p in self.coordinates],
            "type": self.type.value,
        }


@dataclass
class TrackFeature:
    """A racing line point whose turn angle exceeds the corner threshold."""

    type: FeatureType
    position: RacingLinePoint
    curvature: float
    """Signed turn angle in radians; positive = right, negative = left."""

    index: int


@dataclass
class FeatureGroup(TrackFeature):
    """A clustered corner: the anchor feature plus how many detections it absorbed."""

    count: int = 1

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "position": self.position.to_dict(),
            "curvature": self.curvature,
            "index": self.index,
            "count": self.count,
        }


@dataclass
class SectorBoundary:
    sector: int
    boundaries: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {"sector": self.sector, "boundaries": dict(self.boundaries)}


@dataclass
class TrackMapMetadata:
    coordinate_count: int
    generated_at: datetime
    track_length: int

    def to_dict(self) -> dict:
        return {
            "coordinateCount": self.coordinate_count,
            "generatedAt": to_iso(self.generated_at),
            "trackLength": self.track_length,
        }


@dataclass
class TrackMap:
    """A full track map snapshot; regenerated from scratch on every request."""

    track_name: str
    bounds: TrackBounds | None
    racing_line: list[RacingLinePoint]
    sections: list[TrackSection]
    features: list[FeatureGroup]
    sectors: list[SectorBoundary]
    metadata: TrackMapMetadata
    speed_traps: list[dict] = field(default_factory=list)
    """Reserved for speed trap locations; the feed does not report any yet."""

    def to_dict(self) -> dict:
        return {
            "trackName": self.track_name,
            "bounds": self.bounds.to_dict() if self.bounds is not None else None,
            "racingLine": [p.to_dict() for p in self.racing_line],
            "sections": [s.to_dict() for s in self.sections],
            "features": [f.to_dict() for f in self.features],
            "sectors": [s.to_dict() for s in self.sectors],
            "speedTraps": list(self.speed_traps),
            "metadata": self.metadata.to_dict(),
        }

