"""Partition the racing line into classified sections."""

from __future__ import annotations

from collections.abc import Sequence

from racing_map.track.detector import LOOKAROUND, curvature_at
from racing_map.track.models import RacingLinePoint, SectionType, TrackSection


class TrackSegmenter:
    """Split a racing line into roughly *target_sections* equal-stride sections.

    Adjacent sections share their boundary point, so ``sections[k].end_index``
    equals ``sections[k + 1].start_index``.  The last section may be shorter.

    Args:
        target_sections: Desired number of sections; the stride is
            ``max(1, len(line) // target_sections)``.
        straight_threshold: Mean ``|turn angle|`` below which a section is straight.
        slight_corner_threshold: Mean ``|turn angle|`` below which a non-straight
            section is a slight corner; anything above is sharp.
    """

    def __init__(
        self,
        target_sections: int = 20,
        straight_threshold: float = 0.05,
        slight_corner_threshold: float = 0.2,
    ) -> None:
        if target_sections < 1:
            raise ValueError("target_sections must be >= 1")
        self.target_sections = target_sections
        self.straight_threshold = straight_threshold
        self.slight_corner_threshold = slight_corner_threshold

    def segment(self, line: Sequence[RacingLinePoint]) -> list[TrackSection]:
        n = len(line)
        stride = max(1, n // self.target_sections)
        sections: list[TrackSection] = []

        for start in range(0, n, stride):
            end = min(start + stride, n - 1)
            coords = list(line[start:end + 1])
            sections.append(TrackSection(
                id=len(sections),
                start_index=start,
                end_index=end,
                coordinates=coords,
                type=self.classify(coords),
            ))

        return sections

    def classify(self, coords: Sequence[RacingLinePoint]) -> SectionType:
        """Classify a run of points by its mean absolute turn angle.

        Sections with fewer than 5 points have no interior point and are
        therefore straight.
        """
        return self._type_for(self.mean_abs_curvature(coords))

    @staticmethod
    def mean_abs_curvature(coords: Sequence[RacingLinePoint]) -> float:
        n = len(coords)
        total = sum(
            abs(curvature_at(coords, i))
            for i in range(LOOKAROUND, n - LOOKAROUND)
        )
        return total / max(1, n - 2 * LOOKAROUND)

    def _type_for(self, mean_curvature: float) -> SectionType:
        if mean_curvature < self.straight_threshold:
            return SectionType.STRAIGHT
        if mean_curvature < self.slight_corner_threshold:
            return SectionType.SLIGHT_CORNER
        return SectionType.SHARP_CORNER
