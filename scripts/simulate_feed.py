"""Drive a synthetic multi-car session through the mapping engine.

Cars lap a stadium-shaped circuit (two straights joined by half circles)
with a chicane on the back straight.  After the run the generated track
map is summarised on stdout.

Usage:
    uv run python scripts/simulate_feed.py
    uv run python scripts/simulate_feed.py --cars 10 --laps 3 --json map.json
"""

from __future__ import annotations

import argparse
import json
import math
from datetime import datetime, timedelta, timezone

from racing_map.config import MappingConfig, configure_logging
from racing_map.mapping.session import MappingSession

_STRAIGHT = 4000.0   # decimetres
_RADIUS = 1200.0
_STEP = 40.0         # distance covered per frame
_FRAME_DT = timedelta(milliseconds=250)


def _circuit_point(s: float) -> tuple[float, float]:
    """(x, y) at arc length *s* around the circuit (anticlockwise)."""
    arc = math.pi * _RADIUS
    lap = 2 * _STRAIGHT + 2 * arc
    s %= lap

    if s < _STRAIGHT:                       # bottom straight, heading +x
        return s, 0.0
    s -= _STRAIGHT
    if s < arc:                             # right hairpin
        a = -math.pi / 2 + s / _RADIUS
        return _STRAIGHT + _RADIUS * math.cos(a), _RADIUS + _RADIUS * math.sin(a)
    s -= arc
    if s < _STRAIGHT:                       # top straight with chicane, heading -x
        x = _STRAIGHT - s
        y = 2 * _RADIUS
        if 1500.0 < s < 2500.0:
            y -= 150.0 * math.sin(math.pi * (s - 1500.0) / 1000.0)
        return x, y
    s -= _STRAIGHT
    a = math.pi / 2 + s / _RADIUS           # left hairpin
    return _RADIUS * math.cos(a), _RADIUS + _RADIUS * math.sin(a)


def main() -> None:
    ap = argparse.ArgumentParser(description="Replay a synthetic position feed")
    ap.add_argument("--cars", type=int, default=5)
    ap.add_argument("--laps", type=float, default=2.0)
    ap.add_argument("--track", default="Synthetic Oval")
    ap.add_argument("--json", help="Write the exported map to this file")
    args = ap.parse_args()

    config = MappingConfig.from_env()
    configure_logging(config.log_level)

    now = datetime(2026, 1, 1, tzinfo=timezone.utc)

    def clock() -> datetime:
        return now

    session = MappingSession(config, clock=clock)
    session.start(args.track)
    engine = session.engine

    lap_len = 2 * _STRAIGHT + 2 * math.pi * _RADIUS
    frames = int(args.laps * lap_len / _STEP)
    gap = lap_len / max(1, args.cars) / 4

    for f in range(frames):
        frame = {"Position": {}}
        for car in range(args.cars):
            x, y = _circuit_point(f * _STEP - car * gap)
            frame["Position"][str(car + 1)] = {"X": f"{x:.1f}", "Y": f"{y:.1f}", "Z": "0"}
        engine.process_position_data(frame)
        now += _FRAME_DT

    engine.process_timing_data({
        "drivers": {
            str(car + 1): {
                "sectors": [{"current": False}, {"current": True}, {"current": False}],
                "lapNumber": int(args.laps),
                "position": car + 1,
            }
            for car in range(args.cars)
        }
    })

    export = engine.export_track_map()
    track_map = engine.generate_track_map(args.track)
    if track_map is None:
        print("Not enough data for a track map.")
        return

    print(f"Track       : {track_map.track_name}")
    print(f"Coordinates : {track_map.metadata.coordinate_count}")
    print(f"Length      : {track_map.metadata.track_length}")
    print(f"Sections    : {len(track_map.sections)}")
    for section in track_map.sections:
        print(f"  #{section.id:<3} {section.start_index:>5}-{section.end_index:<5} {section.type.value}")
    print(f"Corners     : {len(track_map.features)}")
    for feature in track_map.features:
        p = feature.position
        print(
            f"  {feature.type.value:<13} at ({p.x:8.1f}, {p.y:8.1f})"
            f"  k={feature.curvature:+.3f}  n={feature.count}"
        )
    print(f"Live cars   : {len(export.driver_positions)}")

    if args.json:
        with open(args.json, "w", encoding="utf-8") as fh:
            json.dump(export.to_dict(), fh, indent=2)
        print(f"Wrote {args.json}")


if __name__ == "__main__":
    main()
