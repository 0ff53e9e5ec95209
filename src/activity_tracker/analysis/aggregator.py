"""
Session statistics aggregation.

This module folds ActivityRecords into SessionStats in two modes sharing the
same rule constants:
- incremental: one record at a time while a session is live
- batch: recomputation from a complete, ordered record log (replay)

NOTE: Batch mode works from the persisted record sequence alone. Steps are
re-detected from the logged acceleration magnitudes, one candidate per record,
regardless of the original sensor sampling rate.
"""

import logging
import math
import time
from collections.abc import Iterable, Sequence

import pandas as pd

from ..constants import GeoConstants, IdPrefixes, TimeConstants
from ..metrics.base import BaseSignalComponent
from ..metrics.geo import haversine_increments
from ..metrics.history import SignalBuffer
from ..metrics.steps import StepDetector
from ..models import ActivityRecord, ActivityState, ClassifierConfig, SessionStats

logger = logging.getLogger(__name__)


def current_millis() -> int:
    """Wall-clock time in milliseconds since epoch."""
    return int(time.time() * TimeConstants.MILLISECONDS_PER_SECOND)


class SessionAggregator(BaseSignalComponent):
    """Folds classified records into running session statistics."""

    def __init__(self, config: ClassifierConfig | None = None):
        """
        Initialize the aggregator.

        Args:
            config: Calorie constants and step thresholds; defaults when omitted
        """
        super().__init__(config)
        self.step_detector = StepDetector(self.config)

    # ------------------------------------------------------------------
    # Incremental mode
    # ------------------------------------------------------------------

    @staticmethod
    def empty_stats(session_id: str, start_time: int) -> SessionStats:
        """Zero-valued stats for a session that has just started."""
        return SessionStats(session_id=session_id, start_time=start_time)

    def fold(
        self,
        stats: SessionStats,
        record: ActivityRecord,
        distance_increment: float,
        step_detected: bool,
        now: int,
    ) -> SessionStats:
        """
        Fold one record into the running stats.

        Args:
            stats: Stats after the previous record
            record: The new record
            distance_increment: Meters from the previously folded fix (0 for the
                first fix of the session)
            step_detected: Whether the step detector fired for this sample
            now: Current time in ms since epoch

        Returns:
            New SessionStats; the input is not modified
        """
        if not math.isfinite(distance_increment) or distance_increment < 0:
            distance_increment = 0.0

        distance = stats.distance + distance_increment
        steps = stats.steps
        calories = stats.calories

        if step_detected and record.activity.is_on_foot:
            steps += 1
            calories += self._step_calories(record.activity, distance_increment)

        activities = dict(stats.activities)
        activities[record.activity] = activities.get(record.activity, 0) + 1

        elapsed_ms = max(now - stats.start_time, 0)

        return stats.model_copy(
            update={
                "duration": elapsed_ms,
                "distance": distance,
                "steps": steps,
                "calories": calories,
                "average_speed": self._average_speed(distance, elapsed_ms),
                "max_speed": max(stats.max_speed, record.speed),
                "activities": activities,
            }
        )

    def close(self, stats: SessionStats, now: int) -> SessionStats:
        """Freeze the stats at session stop."""
        elapsed_ms = max(now - stats.start_time, 0)
        return stats.model_copy(
            update={
                "end_time": now,
                "duration": elapsed_ms,
                "average_speed": self._average_speed(stats.distance, elapsed_ms),
            }
        )

    def _step_calories(self, activity: ActivityState, distance_increment: float) -> float:
        """Calories for one counted step."""
        calories = self.config.calories_per_step
        if activity == ActivityState.RUNNING:
            calories += (
                distance_increment / GeoConstants.METERS_PER_KILOMETER
            ) * self.config.calories_per_km_running
        return calories

    @staticmethod
    def _average_speed(distance: float, elapsed_ms: int) -> float:
        """Cumulative distance over elapsed wall time, 0 for no elapsed time."""
        elapsed_seconds = elapsed_ms / TimeConstants.MILLISECONDS_PER_SECOND
        if elapsed_seconds <= 0:
            return 0.0
        return distance / elapsed_seconds

    # ------------------------------------------------------------------
    # Batch mode
    # ------------------------------------------------------------------

    def recompute(
        self,
        records: Iterable[ActivityRecord],
        session_id: str | None = None,
        start_time: int | None = None,
        end_time: int | None = None,
    ) -> SessionStats:
        """
        Recompute session stats from scratch over a complete record log.

        Args:
            records: Records in the order they were produced
            session_id: ID for the result; derived from the start time if omitted
            start_time: Session start; defaults to the first record's timestamp
            end_time: Session end; defaults to the last record's timestamp

        Returns:
            Closed SessionStats. Identical inputs give identical outputs.
        """
        records = list(records)

        if not records:
            now = end_time if end_time is not None else current_millis()
            start = start_time if start_time is not None else now
            logger.info("Recomputing stats over an empty log")
            return SessionStats(
                session_id=session_id or f"{IdPrefixes.SESSION}{start}",
                start_time=start,
                end_time=now,
            )

        df = self._records_to_frame(records)

        increments = haversine_increments(
            df["latitude"].to_numpy(), df["longitude"].to_numpy()
        )
        distance = float(increments.sum())

        running_mask = (df["activity"] == ActivityState.RUNNING.value).to_numpy()
        running_distance = float(increments[running_mask].sum())

        steps = self._count_steps(df)
        calories = (
            steps * self.config.calories_per_step
            + (running_distance / GeoConstants.METERS_PER_KILOMETER)
            * self.config.calories_per_km_running
        )

        moving_speeds = df["speed"][df["speed"] > 0]
        average_speed = float(moving_speeds.mean()) if not moving_speeds.empty else 0.0
        max_speed = float(moving_speeds.max()) if not moving_speeds.empty else 0.0

        counts = df.groupby("activity", sort=False).size()
        activities = {ActivityState(state): int(n) for state, n in counts.items()}

        start = start_time if start_time is not None else int(df["timestamp"].iloc[0])
        end = end_time if end_time is not None else int(df["timestamp"].iloc[-1])

        logger.info(
            f"Recomputed {len(df)} records: {distance:.1f} m, {steps} steps, "
            f"{calories:.2f} kcal"
        )

        return SessionStats(
            session_id=session_id or f"{IdPrefixes.SESSION}{start}",
            start_time=start,
            end_time=end,
            duration=max(end - start, 0),
            distance=distance,
            steps=steps,
            calories=calories,
            average_speed=average_speed,
            max_speed=max_speed,
            activities=activities,
        )

    def _count_steps(self, df: pd.DataFrame) -> int:
        """Replay magnitudes through a fresh window and count on-foot steps."""
        window = SignalBuffer(self.config.moving_average_window)
        steps = 0
        for magnitude, activity in zip(df["magnitude"], df["activity"], strict=True):
            # Samples the live classifier rejected never entered its history
            if not math.isfinite(magnitude):
                continue
            window.push(magnitude)
            if not ActivityState(activity).is_on_foot:
                continue
            if self.step_detector.is_step(window, magnitude):
                steps += 1
        return steps

    @staticmethod
    def _records_to_frame(records: Sequence[ActivityRecord]) -> pd.DataFrame:
        """Flatten records into the columns batch mode needs."""
        return pd.DataFrame(
            {
                "timestamp": [r.timestamp for r in records],
                "latitude": [r.location.latitude for r in records],
                "longitude": [r.location.longitude for r in records],
                "speed": [r.speed for r in records],
                "magnitude": [r.acceleration.magnitude for r in records],
                "activity": [r.activity.value for r in records],
            }
        )
