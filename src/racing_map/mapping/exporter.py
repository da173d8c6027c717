"""MapExporter — assembles a :class:`TrackMap` from the engine's collected state."""

from __future__ import annotations

from datetime import datetime

from racing_map.track.aggregator import CoordinateAggregator
from racing_map.track.bounds import BoundsTracker
from racing_map.track.detector import FeatureDetector
from racing_map.track.models import TrackMap, TrackMapMetadata
from racing_map.track.racing_line import RacingLineBuilder, track_length
from racing_map.track.sectors import SectorMapper
from racing_map.track.segmenter import TrackSegmenter


class MapExporter:
    """Runs the racing line → sections → features pipeline over current state.

    The map is rebuilt from scratch each call; nothing is cached between
    calls, so the cost is linear in the number of aggregated coordinates.

    Parameters
    ----------
    aggregator, bounds, sectors:
        Engine-owned state, read but never mutated here.
    builder, segmenter, detector:
        Pipeline stages.
    """

    def __init__(
        self,
        aggregator: CoordinateAggregator,
        bounds: BoundsTracker,
        sectors: SectorMapper,
        builder: RacingLineBuilder,
        segmenter: TrackSegmenter,
        detector: FeatureDetector,
    ) -> None:
        self._aggregator = aggregator
        self._bounds = bounds
        self._sectors = sectors
        self._builder = builder
        self._segmenter = segmenter
        self._detector = detector

    def generate(self, track_name: str, now: datetime) -> TrackMap:
        """Build a full :class:`TrackMap`.

        Raises
        ------
        InsufficientDataError
            If fewer aggregated coordinates exist than the builder requires.
        """
        coordinates = self._aggregator.coordinates()
        racing_line = self._builder.build(coordinates)

        return TrackMap(
            track_name=track_name,
            bounds=self._bounds.snapshot(),
            racing_line=racing_line,
            sections=self._segmenter.segment(racing_line),
            features=self._detector.detect(racing_line),
            sectors=self._sectors.export(),
            metadata=TrackMapMetadata(
                coordinate_count=len(coordinates),
                generated_at=now,
                track_length=track_length(racing_line),
            ),
        )
