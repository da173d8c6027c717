"""Track reconstruction: aggregation, racing line, sections and corners."""

from racing_map.track.aggregator import CoordinateAggregator
from racing_map.track.bounds import BoundsTracker
from racing_map.track.detector import FeatureDetector
from racing_map.track.models import (
    AggregatedCoordinate,
    FeatureGroup,
    FeatureType,
    RacingLinePoint,
    SectionType,
    SectorBoundary,
    TrackBounds,
    TrackFeature,
    TrackMap,
    TrackSection,
)
from racing_map.track.racing_line import RacingLineBuilder
from racing_map.track.sectors import SectorMapper
from racing_map.track.segmenter import TrackSegmenter

__all__ = [
    "AggregatedCoordinate",
    "BoundsTracker",
    "CoordinateAggregator",
    "FeatureDetector",
    "FeatureGroup",
    "FeatureType",
    "RacingLineBuilder",
    "RacingLinePoint",
    "SectionType",
    "SectorBoundary",
    "SectorMapper",
    "TrackBounds",
    "TrackFeature",
    "TrackMap",
    "TrackSection",
    "TrackSegmenter",
]
