"""Spatial deduplication of observed coordinates onto an integer grid."""

from __future__ import annotations

from racing_map.telemetry.models import Position
from racing_map.track.models import AggregatedCoordinate

GridKey = tuple[int, int]


def grid_key(x: float, y: float) -> GridKey:
    """Integer grid cell for a coordinate.

    Two samples less than one unit apart may share a cell; the grid is lossy.
    """
    return round(x), round(y)


class CoordinateAggregator:
    """Counts visits per grid cell and keeps the latest visit time.

    The visit count acts as a proxy for "track surface" versus noise: cells on
    the racing line are crossed every lap, stray samples are crossed once.
    """

    def __init__(self) -> None:
        self._cells: dict[GridKey, AggregatedCoordinate] = {}

    def __len__(self) -> int:
        return len(self._cells)

    def add(self, position: Position) -> AggregatedCoordinate:
        """Record *position* and return the cell it landed in."""
        key = grid_key(position.x, position.y)
        cell = self._cells.get(key)
        if cell is None:
            cell = AggregatedCoordinate(
                x=position.x,
                y=position.y,
                z=position.z,
                visits=1,
                timestamp=position.timestamp,
            )
            self._cells[key] = cell
        else:
            cell.visits += 1
            cell.timestamp = position.timestamp
        return cell

    def get(self, x: float, y: float) -> AggregatedCoordinate | None:
        """Return the cell containing ``(x, y)``, if any sample landed there."""
        return self._cells.get(grid_key(x, y))

    def coordinates(self) -> list[AggregatedCoordinate]:
        """All cells ordered by latest visit time (stable on ties)."""
        return sorted(self._cells.values(), key=lambda c: c.timestamp)

    def clear(self) -> None:
        self._cells.clear()
