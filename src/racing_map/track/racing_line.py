"""Racing line construction from aggregated grid coordinates."""

from __future__ import annotations

import math
from collections.abc import Sequence

from racing_map.errors import InsufficientDataError
from racing_map.track.models import AggregatedCoordinate, RacingLinePoint


def distance(ax: float, ay: float, bx: float, by: float) -> float:
    """Euclidean distance between ``(ax, ay)`` and ``(bx, by)``."""
    return math.hypot(bx - ax, by - ay)


class RacingLineBuilder:
    """Build a smoothed polyline through aggregated coordinates.

    The input is taken in arrival order (ascending cell timestamp), not in
    spatial order: within a lap a car crosses the track cells in a consistent
    temporal sequence, which makes arrival order a usable stand-in for lap
    order.

    Algorithm:
    1. Symmetric moving average over ``x`` and ``y`` with *window* points.
       The window is clamped at both ends of the sequence (it shrinks rather
       than wraps, since the input is not known to be a closed loop).
    2. ``distance`` of each point is the step from the previous smoothed point.

    Args:
        window: Total kernel size; half-width is ``window // 2``.
        min_points: Minimum number of input coordinates.
    """

    def __init__(self, window: int = 5, min_points: int = 10) -> None:
        if window < 1:
            raise ValueError("window must be >= 1")
        self.window = window
        self.min_points = min_points

    def build(self, coordinates: Sequence[AggregatedCoordinate]) -> list[RacingLinePoint]:
        """Return one :class:`RacingLinePoint` per input coordinate.

        Raises:
            InsufficientDataError: If fewer than *min_points* coordinates are given.
        """
        n = len(coordinates)
        if n < self.min_points:
            raise InsufficientDataError(n, self.min_points)

        half = self.window // 2
        line: list[RacingLinePoint] = []

        for i in range(n):
            start = max(0, i - half)
            end = min(n - 1, i + half)
            count = end - start + 1
            x = sum(coordinates[j].x for j in range(start, end + 1)) / count
            y = sum(coordinates[j].y for j in range(start, end + 1)) / count

            step = 0.0
            if line:
                prev = line[-1]
                step = distance(prev.x, prev.y, x, y)
            line.append(RacingLinePoint(x=x, y=y, index=i, distance=step))

        return line


def track_length(line: Sequence[RacingLinePoint]) -> int:
    """Rounded total length of *line*."""
    return round(sum(p.distance for p in line))
