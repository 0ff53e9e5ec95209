"""Unit tests for incremental and batch session aggregation."""

import math

import pytest

from activity_tracker.analysis.aggregator import SessionAggregator
from activity_tracker.metrics import haversine_distance
from activity_tracker.models import ActivityState, ClassifierConfig

START = 1_700_000_000_000


@pytest.fixture
def aggregator() -> SessionAggregator:
    """Provide an aggregator with default constants."""
    return SessionAggregator()


class TestIncrementalFold:
    """Test folding one record at a time."""

    def test_two_fix_walk(self, aggregator: SessionAggregator, record_factory):
        """Test 0.001 degrees of walking with one detected step."""
        stats = aggregator.empty_stats("s1", START)
        first = record_factory(0, ActivityState.WALKING, longitude=0.0, speed=1.2)
        second = record_factory(1, ActivityState.WALKING, longitude=0.001, speed=1.4)
        increment = haversine_distance(0.0, 0.0, 0.0, 0.001)

        stats = aggregator.fold(stats, first, 0.0, False, START + 1000)
        stats = aggregator.fold(stats, second, increment, True, START + 2000)

        assert stats.distance == pytest.approx(111.19, abs=0.01)
        assert stats.steps == 1
        assert stats.calories == pytest.approx(0.04)
        assert stats.max_speed == pytest.approx(1.4)
        assert stats.average_speed == pytest.approx(increment / 2.0)
        assert stats.duration == 2000
        assert stats.activities == {ActivityState.WALKING: 2}

    def test_running_step_adds_distance_calories(
        self, aggregator: SessionAggregator, record_factory
    ):
        """Test the per-km running bonus on a counted running step."""
        stats = aggregator.empty_stats("s1", START)
        record = record_factory(1, ActivityState.RUNNING, speed=5.5)

        stats = aggregator.fold(stats, record, 100.0, True, START + 1000)

        assert stats.steps == 1
        assert stats.calories == pytest.approx(0.04 + 0.1 * 62.0)

    @pytest.mark.parametrize(
        "activity",
        [ActivityState.IDLE, ActivityState.VEHICLE, ActivityState.UNKNOWN],
    )
    def test_no_steps_or_calories_off_foot(
        self, aggregator: SessionAggregator, record_factory, activity: ActivityState
    ):
        """Test that detector hits outside walking/running are ignored."""
        stats = aggregator.empty_stats("s1", START)
        stats = aggregator.fold(
            stats, record_factory(1, activity), 50.0, True, START + 1000
        )

        assert stats.steps == 0
        assert stats.calories == 0.0
        assert stats.distance == pytest.approx(50.0)

    @pytest.mark.parametrize("increment", [-5.0, math.nan, math.inf])
    def test_degenerate_increment_ignored(
        self, aggregator: SessionAggregator, record_factory, increment: float
    ):
        """Test that negative or non-finite increments never change distance."""
        stats = aggregator.empty_stats("s1", START)
        stats = aggregator.fold(
            stats, record_factory(1, ActivityState.WALKING), increment, True, START
        )

        assert stats.distance == 0.0
        assert stats.calories == pytest.approx(0.04)

    def test_zero_elapsed_time(self, aggregator: SessionAggregator, record_factory):
        """Test that average speed is 0 when no time has passed."""
        stats = aggregator.empty_stats("s1", START)
        stats = aggregator.fold(
            stats, record_factory(0, ActivityState.WALKING), 10.0, False, START
        )
        assert stats.average_speed == 0.0

    def test_input_stats_not_modified(
        self, aggregator: SessionAggregator, record_factory
    ):
        """Test that fold returns new stats."""
        before = aggregator.empty_stats("s1", START)
        aggregator.fold(
            before, record_factory(1, ActivityState.RUNNING), 10.0, True, START + 1000
        )
        assert before.distance == 0.0
        assert before.activities == {}

    def test_monotonic_over_sequence(
        self, aggregator: SessionAggregator, mixed_log
    ):
        """Test that distance, steps and calories never decrease."""
        stats = aggregator.empty_stats("s1", START)
        previous = None
        for i, record in enumerate(mixed_log):
            increment = 0.0
            if previous is not None:
                increment = haversine_distance(
                    previous.location.latitude,
                    previous.location.longitude,
                    record.location.latitude,
                    record.location.longitude,
                )
            folded = aggregator.fold(
                stats, record, increment, i % 2 == 0, record.timestamp
            )
            assert folded.distance >= stats.distance
            assert folded.steps >= stats.steps
            assert folded.calories >= stats.calories
            stats = folded
            previous = record

        assert stats.total_samples == len(mixed_log)

    def test_close(self, aggregator: SessionAggregator):
        """Test that closing sets end time and final duration."""
        stats = aggregator.empty_stats("s1", START).model_copy(
            update={"distance": 100.0}
        )
        closed = aggregator.close(stats, START + 50_000)

        assert closed.is_closed
        assert closed.end_time == START + 50_000
        assert closed.duration == 50_000
        assert closed.average_speed == pytest.approx(2.0)


class TestBatchRecompute:
    """Test recomputation from a complete record log."""

    def test_empty_log(self, aggregator: SessionAggregator):
        """Test that an empty log yields closed zero stats."""
        stats = aggregator.recompute([])

        assert stats.distance == 0.0
        assert stats.steps == 0
        assert stats.calories == 0.0
        assert stats.average_speed == 0.0
        assert stats.max_speed == 0.0
        assert stats.end_time is not None
        assert stats.activities == {}

    def test_walking_log(self, aggregator: SessionAggregator, walking_log):
        """Test distance, steps and speeds over a short walk."""
        stats = aggregator.recompute(walking_log, session_id="walk")

        step = haversine_distance(0.0, 0.0, 0.0, 0.0001)
        assert stats.session_id == "walk"
        assert stats.distance == pytest.approx(4 * step)
        assert stats.steps == 2
        assert stats.calories == pytest.approx(2 * 0.04)
        assert stats.average_speed == pytest.approx(1.5)
        assert stats.max_speed == pytest.approx(1.5)
        assert stats.activities == {ActivityState.WALKING: 5}
        assert stats.start_time == walking_log[0].timestamp
        assert stats.end_time == walking_log[-1].timestamp
        assert stats.duration == 4000

    def test_mixed_log(self, aggregator: SessionAggregator, mixed_log):
        """Test gating of steps and the running-distance calorie bonus."""
        stats = aggregator.recompute(mixed_log)

        leg = haversine_distance(0.0, 0.0, 0.0, 0.001)
        assert stats.distance == pytest.approx(6 * leg)
        # Peaks at the second walking and second running records; the vehicle
        # peak is not counted
        assert stats.steps == 2
        assert stats.calories == pytest.approx(2 * 0.04 + (2 * leg / 1000) * 62.0)
        assert stats.average_speed == pytest.approx(38.0 / 6)
        assert stats.max_speed == pytest.approx(12.0)
        assert stats.activities == {
            ActivityState.IDLE: 1,
            ActivityState.WALKING: 2,
            ActivityState.RUNNING: 2,
            ActivityState.VEHICLE: 2,
        }
        assert stats.total_samples == len(mixed_log)

    def test_idempotent(self, aggregator: SessionAggregator, mixed_log):
        """Test that recomputing twice yields identical stats."""
        first = aggregator.recompute(mixed_log)
        second = aggregator.recompute(mixed_log)

        assert first == second
        assert first.model_dump() == second.model_dump()

    def test_explicit_time_span(self, aggregator: SessionAggregator, walking_log):
        """Test that the caller can pin the session span."""
        stats = aggregator.recompute(
            walking_log, start_time=START - 10_000, end_time=START + 20_000
        )
        assert stats.start_time == START - 10_000
        assert stats.end_time == START + 20_000
        assert stats.duration == 30_000

    def test_custom_calorie_constants(self, mixed_log):
        """Test that config constants drive the batch calorie formula."""
        config = ClassifierConfig(calories_per_step=1.0, calories_per_km_running=0.0)
        stats = SessionAggregator(config).recompute(mixed_log)
        assert stats.calories == pytest.approx(2.0)
