"""Unit tests for sensor stream and record log loading."""

import json
import math
from pathlib import Path

import pytest

from activity_tracker.analysis import SessionAggregator
from activity_tracker.data import RecordLogLoader
from activity_tracker.exceptions import DataLoadError
from activity_tracker.models import (
    AccelerationSample,
    ActivityState,
    LocationFix,
    SavedRoute,
    TotalStats,
)
from activity_tracker.services import RouteService, TrackingSession

EPOCH_MS = 1_700_000_000_000

SENSOR_CSV = f"""kind,timestamp,latitude,longitude,speed,x,y,z
location,{EPOCH_MS},0.0,0.0,1.5,,,
acceleration,{EPOCH_MS + 100},,,,0.0,0.0,0.35
location,{EPOCH_MS + 1000},0.0,0.001,,,,
acceleration,{EPOCH_MS + 1100},,,,0.3,0.4,0.0
"""


@pytest.fixture
def loader() -> RecordLogLoader:
    return RecordLogLoader()


@pytest.fixture
def sensor_file(tmp_path: Path) -> Path:
    path = tmp_path / "sensors.csv"
    path.write_text(SENSOR_CSV)
    return path


class TestSensorEvents:
    """Test reading merged sensor CSVs."""

    def test_events_in_file_order(self, loader, sensor_file):
        """Test that rows become typed events in delivery order."""
        events = loader.load_sensor_events(sensor_file)

        assert [type(e) for e in events] == [
            LocationFix,
            AccelerationSample,
            LocationFix,
            AccelerationSample,
        ]
        assert events[0].speed == 1.5
        assert events[1].magnitude == pytest.approx(0.35)
        assert events[3].magnitude == pytest.approx(0.5)
        assert [e.timestamp for e in events] == [
            EPOCH_MS,
            EPOCH_MS + 100,
            EPOCH_MS + 1000,
            EPOCH_MS + 1100,
        ]

    def test_missing_speed_is_none(self, loader, sensor_file):
        """Test that empty optional cells are read as missing."""
        fix = loader.load_sensor_events(sensor_file)[2]
        assert fix.speed is None
        assert fix.ground_speed == 0.0

    def test_missing_file(self, loader, tmp_path):
        """Test that a missing file raises DataLoadError."""
        with pytest.raises(DataLoadError):
            loader.load_sensor_events(tmp_path / "nope.csv")

    def test_missing_kind_column(self, loader, tmp_path):
        """Test that the kind column is required."""
        path = tmp_path / "bad.csv"
        path.write_text("timestamp,latitude,longitude\n1,0.0,0.0\n")
        with pytest.raises(DataLoadError, match="kind"):
            loader.load_sensor_events(path)

    @pytest.mark.parametrize(
        "row",
        [
            "location,1,,0.0,1.0,,,",
            "gyroscope,1,0.0,0.0,1.0,,,",
            "acceleration,1,,,,0.1,,0.2",
        ],
    )
    def test_malformed_rows(self, loader, tmp_path, row: str):
        """Test that incomplete or unknown rows are rejected."""
        path = tmp_path / "bad.csv"
        path.write_text("kind,timestamp,latitude,longitude,speed,x,y,z\n" + row + "\n")
        with pytest.raises(DataLoadError):
            loader.load_sensor_events(path)


class TestRecordLogs:
    """Test saving and loading routes and record logs."""

    def test_route_save_and_load(self, loader, walking_log, tmp_path):
        """Test that a saved route loads back equal."""
        stats = SessionAggregator().recompute(walking_log)
        route = RouteService().create_route(walking_log, stats, name="Walk")

        path = RecordLogLoader.save_route(route, tmp_path / "nested" / "route.json")
        loaded = loader.load_route(path)

        assert isinstance(loaded, SavedRoute)
        assert loaded == route

    def test_records_from_route(self, loader, walking_log, tmp_path):
        """Test that load_records accepts a route document."""
        stats = SessionAggregator().recompute(walking_log)
        route = RouteService().create_route(walking_log, stats)
        path = RecordLogLoader.save_route(route, tmp_path / "route.json")

        assert loader.load_records(path) == walking_log

    def test_bare_record_list(self, loader, walking_log, tmp_path):
        """Test that load_records accepts a plain JSON list."""
        path = tmp_path / "log.json"
        path.write_text(json.dumps([r.model_dump(mode="json") for r in walking_log]))

        assert loader.load_records(path) == walking_log

    def test_route_with_unknown_record_reloads(
        self, loader, clock, fix_factory, tmp_path
    ):
        """Test that a non-finite sample survives saving and batch replay."""
        session = TrackingSession(clock=clock)
        session.start("s1")
        session.ingest_location(fix_factory(speed=1.0))
        session.ingest_acceleration(
            AccelerationSample(x=math.inf, y=0.0, z=0.0, timestamp=EPOCH_MS)
        )
        clock.advance(1000)
        session.ingest_acceleration(
            AccelerationSample.from_axes(0.0, 0.0, 0.35, timestamp=EPOCH_MS + 1000)
        )
        route = RouteService().finalize(session.stop())
        assert [r.activity for r in route.records] == [
            ActivityState.UNKNOWN,
            ActivityState.WALKING,
        ]

        path = RecordLogLoader.save_route(route, tmp_path / "route.json")
        loaded = loader.load_route(path)

        assert loaded == route
        assert math.isinf(loaded.records[0].acceleration.x)
        assert loader.load_records(path) == list(route.records)
        assert RouteService().rederive(loaded).stats.steps == 0

    def test_invalid_json(self, loader, tmp_path):
        """Test that unparsable JSON raises DataLoadError."""
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(DataLoadError):
            loader.load_records(path)

    def test_invalid_route(self, loader, tmp_path):
        """Test that a document missing route fields is rejected."""
        path = tmp_path / "route.json"
        path.write_text(json.dumps({"id": "r"}))
        with pytest.raises(DataLoadError):
            loader.load_route(path)


class TestTotals:
    """Test persisting lifetime totals."""

    def test_missing_totals_file(self, loader, tmp_path):
        """Test that no totals file means nothing saved yet."""
        assert loader.load_totals(tmp_path / "totals.json") is None

    def test_totals_save_and_load(self, loader, tmp_path):
        """Test that saved totals load back equal."""
        totals = TotalStats(
            total_distance=1200.5,
            total_steps=300,
            total_calories=12.0,
            total_sessions=3,
            total_duration=900_000,
            last_updated=EPOCH_MS,
        )

        path = RecordLogLoader.save_totals(totals, tmp_path / "state" / "totals.json")

        assert loader.load_totals(path) == totals

    def test_invalid_totals(self, loader, tmp_path):
        """Test that a malformed totals document is rejected."""
        path = tmp_path / "totals.json"
        path.write_text(json.dumps({"total_steps": -1}))
        with pytest.raises(DataLoadError):
            loader.load_totals(path)
