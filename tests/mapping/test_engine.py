"""Tests for TrackMappingEngine — the public mapping contract."""

from __future__ import annotations

import logging

from racing_map.config import MappingConfig
from racing_map.mapping.engine import TrackMappingEngine
from racing_map.track.models import FeatureType, SectionType
from tests.helpers import RIGHT_ANGLE_12, STRAIGHT_12, FakeClock, position_frame

_ENGINE_LOGGER = "racing_map.mapping.engine"


def _engine(tick_ms: int = 100) -> tuple[TrackMappingEngine, FakeClock]:
    clock = FakeClock(tick_ms=tick_ms)
    return TrackMappingEngine(MappingConfig(), clock=clock), clock


def _drive(engine: TrackMappingEngine, points, vehicle: str = "1") -> None:
    for x, y in points:
        engine.process_position_data(position_frame({vehicle: (x, y)}))


# ---------------------------------------------------------------------------
# Position ingestion
# ---------------------------------------------------------------------------

class TestProcessPositionData:
    def test_returns_accepted_positions(self):
        engine, _ = _engine()
        result = engine.process_position_data(position_frame({"1": (10.0, 20.0), "44": (30.0, 40.0)}))
        assert set(result) == {"1", "44"}
        assert result["44"].x == 30.0

    def test_returned_positions_are_copies(self):
        engine, _ = _engine()
        result = engine.process_position_data(position_frame({"1": (10.0, 20.0)}))
        result["1"].x = 999.0
        assert engine.get_current_driver_positions()["1"].position.x == 10.0

    def test_updates_cache_bounds_and_aggregator(self):
        engine, _ = _engine()
        engine.process_position_data(position_frame({"1": (10.0, 20.0), "2": (-5.0, 3.0)}))
        b = engine.track_bounds
        assert (b.min_x, b.max_x, b.min_y, b.max_y) == (-5.0, 10.0, 3.0, 20.0)
        assert engine.coordinate_count == 2
        assert engine.driver_count == 2

    def test_frame_without_position_is_no_update(self, caplog):
        engine, _ = _engine()
        with caplog.at_level(logging.WARNING, logger=_ENGINE_LOGGER):
            assert engine.process_position_data({"Timing": {}}) is None
        assert "Ignoring position frame" in caplog.text
        assert engine.coordinate_count == 0

    def test_non_mapping_frame_returns_none(self):
        engine, _ = _engine()
        assert engine.process_position_data(None) is None
        assert engine.process_position_data("garbage") is None

    def test_invalid_entries_dropped_valid_kept(self):
        engine, _ = _engine()
        frame = {"Position": {"1": {"X": "bad", "Y": "1"}, "2": {"X": "1", "Y": "1"}}}
        assert list(engine.process_position_data(frame)) == ["2"]
        assert engine.driver_count == 1

    def test_repeat_cell_counts_visits(self):
        engine, _ = _engine()
        _drive(engine, [(5.0, 5.0), (5.2, 4.9), (4.8, 5.1)])
        assert engine.coordinate_count == 1

    def test_internal_failure_is_logged_and_returns_none(self, caplog, monkeypatch):
        engine, _ = _engine()

        def boom(position):
            raise RuntimeError("bounds exploded")

        monkeypatch.setattr(engine._bounds, "update", boom)
        with caplog.at_level(logging.ERROR, logger=_ENGINE_LOGGER):
            assert engine.process_position_data(position_frame({"1": (0.0, 0.0)})) is None
        assert "Error processing position data" in caplog.text


# ---------------------------------------------------------------------------
# Timing enrichment
# ---------------------------------------------------------------------------

class TestProcessTimingData:
    def test_enriches_cached_positions(self):
        engine, _ = _engine()
        engine.process_position_data(position_frame({"44": (1.0, 1.0)}))
        engine.process_timing_data({"drivers": {"44": {
            "sectors": [{"current": False}, {"current": False}, {"current": True}],
            "speed": 301.5,
            "lapNumber": 7,
            "position": 2,
        }}})
        live = engine.get_current_driver_positions()["44"]
        assert live.position.sector == 3
        assert live.position.speed == 301.5
        assert live.position.lap_number == 7
        assert live.position.race_position == 2

    def test_earlier_snapshot_unchanged_by_later_timing(self):
        engine, _ = _engine()
        engine.process_position_data(position_frame({"44": (1.0, 1.0)}))
        before = engine.get_current_driver_positions()
        engine.process_timing_data({"drivers": {"44": {"speed": 300}}})
        assert before["44"].position.speed is None
        assert engine.get_current_driver_positions()["44"].position.speed == 300.0

    def test_unknown_vehicle_is_silently_ignored(self):
        engine, _ = _engine()
        engine.process_position_data(position_frame({"1": (1.0, 1.0)}))
        engine.process_timing_data({"drivers": {"99": {"speed": 200}}})
        assert engine.driver_count == 1
        assert engine.get_current_driver_positions()["1"].position.speed is None

    def test_missing_fields_reset_to_none(self):
        engine, _ = _engine()
        engine.process_position_data(position_frame({"1": (1.0, 1.0)}))
        engine.process_timing_data({"drivers": {"1": {"speed": 250, "lapNumber": 3}}})
        engine.process_timing_data({"drivers": {"1": {}}})
        p = engine.get_current_driver_positions()["1"].position
        assert p.speed is None
        assert p.lap_number is None
        assert p.sector == 1

    def test_malformed_timing_frame_does_not_raise(self, caplog):
        engine, _ = _engine()
        with caplog.at_level(logging.WARNING, logger=_ENGINE_LOGGER):
            engine.process_timing_data({"nope": 1})
            engine.process_timing_data(None)
        assert "Ignoring timing frame" in caplog.text


# ---------------------------------------------------------------------------
# Map generation
# ---------------------------------------------------------------------------

class TestGenerateTrackMap:
    def test_none_until_ten_distinct_coordinates(self, caplog):
        engine, _ = _engine()
        points = [(float(i * 10), 0.0) for i in range(10)]
        with caplog.at_level(logging.WARNING, logger=_ENGINE_LOGGER):
            for p in points[:9]:
                _drive(engine, [p])
                assert engine.generate_track_map() is None
        assert "Track map not ready" in caplog.text

        _drive(engine, [points[9]])
        assert engine.generate_track_map() is not None

    def test_repeated_cells_do_not_count_towards_minimum(self):
        engine, _ = _engine()
        _drive(engine, [(1.0, 1.0)] * 20)
        assert engine.generate_track_map() is None

    def test_default_and_explicit_track_names(self):
        engine, _ = _engine()
        _drive(engine, STRAIGHT_12)
        assert engine.generate_track_map().track_name == "Unknown Track"
        assert engine.generate_track_map("Zandvoort").track_name == "Zandvoort"

    def test_racing_line_invariants(self):
        engine, _ = _engine()
        _drive(engine, RIGHT_ANGLE_12)
        track_map = engine.generate_track_map()
        line = track_map.racing_line
        assert len(line) == engine.coordinate_count == track_map.metadata.coordinate_count
        assert line[0].distance == 0
        assert track_map.metadata.track_length == round(sum(p.distance for p in line[1:]))

    def test_metadata_and_bounds(self):
        engine, clock = _engine(tick_ms=0)
        _drive(engine, STRAIGHT_12)
        track_map = engine.generate_track_map()
        assert track_map.metadata.generated_at == clock.now
        assert track_map.bounds.min_x == 0.0
        assert track_map.bounds.max_x == 11.0
        assert track_map.sectors == []

    def test_straight_line_end_to_end(self):
        engine, _ = _engine()
        _drive(engine, STRAIGHT_12)
        track_map = engine.generate_track_map()
        assert track_map is not None
        assert track_map.sections
        assert all(s.type == SectionType.STRAIGHT for s in track_map.sections)
        assert track_map.features == []
        assert track_map.metadata.track_length == 9

    def test_right_angle_end_to_end_has_corner(self):
        engine, _ = _engine()
        _drive(engine, RIGHT_ANGLE_12)
        track_map = engine.generate_track_map()
        assert track_map.features
        assert any(abs(f.curvature) > 0.1 for f in track_map.features)
        assert track_map.features[0].type == FeatureType.LEFT_CORNER

    def test_internal_failure_returns_none(self, caplog, monkeypatch):
        engine, _ = _engine()
        _drive(engine, STRAIGHT_12)

        def boom(line):
            raise ZeroDivisionError("bad")

        monkeypatch.setattr(engine._exporter._segmenter, "segment", boom)
        with caplog.at_level(logging.ERROR, logger=_ENGINE_LOGGER):
            assert engine.generate_track_map() is None
        assert "Error generating track map" in caplog.text

    def test_to_dict_wire_shape(self):
        engine, _ = _engine()
        _drive(engine, STRAIGHT_12)
        d = engine.generate_track_map("Monza").to_dict()
        assert d["trackName"] == "Monza"
        assert set(d) == {"trackName", "bounds", "racingLine", "sections", "features", "sectors", "speedTraps", "metadata"}
        assert set(d["metadata"]) == {"coordinateCount", "generatedAt", "trackLength"}
        assert d["speedTraps"] == []
        assert d["sections"][0]["type"] == "straight"


# ---------------------------------------------------------------------------
# Live positions / export / clear
# ---------------------------------------------------------------------------

class TestLivePositions:
    def test_staleness_window(self):
        engine, clock = _engine(tick_ms=0)
        engine.process_position_data(position_frame({"1": (0.0, 0.0)}))
        clock.advance(4_000)
        engine.process_position_data(position_frame({"2": (5.0, 5.0)}))

        clock.advance(5_999)
        live = engine.get_current_driver_positions()
        assert {k: v.age_ms for k, v in live.items()} == {"1": 9_999, "2": 5_999}

        clock.advance(1)
        live = engine.get_current_driver_positions()
        assert list(live) == ["2"]
        assert live["2"].age_ms == 6_000


class TestExportAndClear:
    def test_export_before_any_data(self):
        engine, _ = _engine()
        export = engine.export_track_map()
        assert export.track_map is None
        assert export.driver_positions == {}
        assert export.has_position_data is False
        assert export.has_track_data is False

    def test_export_flags_with_partial_data(self):
        engine, _ = _engine()
        _drive(engine, STRAIGHT_12[:3])
        export = engine.export_track_map()
        assert export.track_map is None
        assert export.has_position_data is True
        assert export.has_track_data is True
        assert set(export.driver_positions) == {"1"}

    def test_export_with_full_map(self):
        engine, _ = _engine()
        _drive(engine, STRAIGHT_12)
        d = engine.export_track_map().to_dict()
        assert d["trackMap"]["trackName"] == "Unknown Track"
        assert "ageMs" in d["driverPositions"]["1"]
        assert d["metadata"]["hasTrackData"] is True

    def test_clear_resets_everything(self):
        engine, _ = _engine()
        _drive(engine, STRAIGHT_12)
        engine.sector_mapper.set_boundary(1, {"startIndex": 0})
        assert engine.generate_track_map() is not None

        engine.clear()

        assert engine.coordinate_count == 0
        assert engine.driver_count == 0
        assert engine.track_bounds is None
        assert engine.sector_mapper.export() == []
        assert engine.generate_track_map() is None

    def test_stats(self):
        engine, _ = _engine()
        _drive(engine, STRAIGHT_12)
        stats = engine.stats().to_dict()
        assert stats["trackCoordinates"] == 12
        assert stats["activeDrivers"] == 1
        assert stats["dataQuality"] == {"sufficient": False, "excellent": False}
        assert stats["trackBounds"]["maxX"] == 11.0
