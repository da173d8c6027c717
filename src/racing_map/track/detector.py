"""Corner detection on the racing line.

Curvature here is a discrete turn angle, not the geometric 1/R: at point
``i`` it is the signed angle between the chords ``p[i-2] → p[i]`` and
``p[i] → p[i+2]``.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from racing_map.track.models import FeatureGroup, FeatureType, RacingLinePoint, TrackFeature
from racing_map.track.racing_line import distance

# Points needed on each side of a point before its turn angle is defined.
LOOKAROUND = 2

# ---------------------------------------------------------------------------
# Geometry primitives
# ---------------------------------------------------------------------------


def turn_angle(p1: RacingLinePoint, p2: RacingLinePoint, p3: RacingLinePoint) -> float:
    """Signed turn angle at *p2* in radians, in ``(-π, π]``.

    Positive → right turn (clockwise), negative → left turn (counterclockwise),
    with ``y`` pointing up.  Collinear points give 0; a coincident pair gives 0.
    """
    ax, ay = p2.x - p1.x, p2.y - p1.y  # chord in
    bx, by = p3.x - p2.x, p3.y - p2.y  # chord out

    # z-component of cross(a, b) is positive for a CCW (left) turn, so negate it
    cross_z = ax * by - ay * bx
    dot = ax * bx + ay * by
    return math.atan2(-cross_z, dot)


def curvature_at(line: Sequence[RacingLinePoint], i: int) -> float:
    """Turn angle at interior index *i* (requires ``2 <= i <= len(line) - 3``)."""
    return turn_angle(line[i - LOOKAROUND], line[i], line[i + LOOKAROUND])


def curvature_profile(line: Sequence[RacingLinePoint]) -> list[tuple[int, float]]:
    """``(index, turn_angle)`` for every interior point of *line*."""
    return [
        (i, curvature_at(line, i))
        for i in range(LOOKAROUND, len(line) - LOOKAROUND)
    ]


# ---------------------------------------------------------------------------
# Feature detector
# ---------------------------------------------------------------------------


class FeatureDetector:
    """Flag high-curvature points and fold nearby flags into corner groups.

    Clustering is a greedy single pass in index order: the first flagged point
    anchors a group, later points join it while they stay within
    *cluster_distance* of that anchor (not of a running centroid).  A point
    farther away starts a new group.  The result depends on the order of
    the points.

    Args:
        threshold: Minimum ``|turn angle|`` (radians) for a point to be flagged.
        cluster_distance: Maximum anchor distance for a point to join a group.
    """

    def __init__(self, threshold: float = 0.1, cluster_distance: float = 50.0) -> None:
        self.threshold = threshold
        self.cluster_distance = cluster_distance

    def detect(self, line: Sequence[RacingLinePoint]) -> list[FeatureGroup]:
        """Detect and cluster corner features along *line*.

        Returns:
            Groups in index order.  Empty for a straight line or one with fewer
            than 5 points.
        """
        return self.group(self.raw_features(line))

    def raw_features(self, line: Sequence[RacingLinePoint]) -> list[TrackFeature]:
        """Every interior point whose ``|turn angle|`` exceeds the threshold."""
        features: list[TrackFeature] = []
        for i, k in curvature_profile(line):
            if abs(k) > self.threshold:
                features.append(TrackFeature(
                    type=FeatureType.RIGHT_CORNER if k > 0 else FeatureType.LEFT_CORNER,
                    position=line[i],
                    curvature=k,
                    index=i,
                ))
        return features

    def group(self, features: Sequence[TrackFeature]) -> list[FeatureGroup]:
        groups: list[FeatureGroup] = []
        current: FeatureGroup | None = None

        for f in features:
            if current is None or self._anchor_distance(current, f) > self.cluster_distance:
                current = FeatureGroup(
                    type=f.type,
                    position=f.position,
                    curvature=f.curvature,
                    index=f.index,
                    count=1,
                )
                groups.append(current)
            else:
                current.count += 1

        return groups

    @staticmethod
    def _anchor_distance(group: FeatureGroup, feature: TrackFeature) -> float:
        a, b = group.position, feature.position
        return distance(a.x, a.y, b.x, b.y)
