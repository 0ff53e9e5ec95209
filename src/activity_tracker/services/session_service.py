"""
Live tracking session.

A TrackingSession owns everything one tracking interval needs: its config,
its SignalHistory, its record log and its SessionStats. Nothing is shared
between sessions, so several can run side by side.

Lifecycle: idle -> start() -> active -> stop() -> closed result handed back,
session idle again.
"""

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..analysis import ActivityClassifier, SessionAggregator
from ..analysis.aggregator import current_millis
from ..constants import IdPrefixes
from ..exceptions import InvalidDataError, SessionStateError
from ..metrics import SignalHistory, StepDetector, haversine_distance
from ..models import (
    AccelerationSample,
    ActivityRecord,
    ClassificationResult,
    ClassifierConfig,
    LocationFix,
    SensorKind,
    SessionStats,
)
from ..settings import Settings

logger = logging.getLogger(__name__)


def generate_id(prefix: str, now: int) -> str:
    """Unique identifier of the form ``<prefix><ms>_<random>``."""
    return f"{prefix}{now}_{uuid.uuid4().hex[: IdPrefixes.RANDOM_SUFFIX_LENGTH]}"


class SessionState(str, Enum):
    """Lifecycle state of a TrackingSession."""

    IDLE = "idle"
    ACTIVE = "active"


@dataclass(frozen=True)
class SessionResult:
    """Closed session handed over to persistence."""

    records: tuple[ActivityRecord, ...]
    stats: SessionStats


class TrackingSession:
    """
    Stateful pipeline from raw sensor events to activity records.

    The session does not schedule anything itself; the caller invokes the
    ingest methods on every sensor event, in delivery order.
    """

    def __init__(
        self,
        config: ClassifierConfig | None = None,
        trigger: SensorKind = SensorKind.ACCELERATION,
        clock: Callable[[], int] | None = None,
    ):
        """
        Initialize an idle session.

        Args:
            config: Classifier thresholds and constants
            trigger: Stream whose ticks produce records
            clock: Returns the current time in ms since epoch
        """
        self.config = config if config is not None else ClassifierConfig()
        self.trigger = trigger
        self._clock = clock if clock is not None else current_millis
        self.logger = logging.getLogger(__name__)

        self._state = SessionState.IDLE
        self._history: SignalHistory | None = None
        self._classifier: ActivityClassifier | None = None
        self._step_detector: StepDetector | None = None
        self._aggregator: SessionAggregator | None = None
        self._stats: SessionStats | None = None
        self._records: list[ActivityRecord] = []
        self._latest_location: LocationFix | None = None
        self._latest_acceleration: AccelerationSample | None = None
        self._last_folded_fix: LocationFix | None = None
        self.last_result: ClassificationResult | None = None

    @classmethod
    def from_settings(
        cls, settings: Settings, clock: Callable[[], int] | None = None
    ) -> "TrackingSession":
        """Build an idle session from application settings."""
        return cls(
            config=settings.classifier,
            trigger=settings.classification_trigger,
            clock=clock,
        )

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state == SessionState.ACTIVE

    @property
    def stats(self) -> SessionStats | None:
        """Current stats of the active session, None when idle."""
        return self._stats

    @property
    def records(self) -> tuple[ActivityRecord, ...]:
        """Records produced so far, in creation order."""
        return tuple(self._records)

    @property
    def history(self) -> SignalHistory | None:
        return self._history

    def configure(self, **overrides: Any) -> ClassifierConfig:
        """
        Apply a partial config override before a session starts.

        Raises:
            SessionStateError: If a session is active
            ConfigurationError: If a field name is unknown
        """
        if self.is_active:
            raise SessionStateError("Cannot reconfigure while a session is active")
        self.config = self.config.with_overrides(**overrides)
        return self.config

    def _require_active(self, operation: str) -> None:
        if not self.is_active:
            raise SessionStateError(f"Cannot {operation}: no active session")

    def _monotonic_now(self) -> int:
        """Clock reading that never precedes the newest record."""
        now = self._clock()
        if self._records and now < self._records[-1].timestamp:
            latest = self._records[-1].timestamp
            self.logger.warning(f"Clock stepped back from {latest} to {now}; holding at {latest}")
            return latest
        return now

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self, session_id: str | None = None) -> SessionStats:
        """
        Begin a new session with fresh history and zeroed stats.

        Raises:
            SessionStateError: If a session is already active
        """
        if self.is_active:
            raise SessionStateError("Session already active; stop it before starting")

        now = self._clock()
        session_id = session_id or generate_id(IdPrefixes.SESSION, now)

        self._history = SignalHistory(self.config.moving_average_window)
        self._classifier = ActivityClassifier(self.config)
        self._step_detector = StepDetector(self.config)
        self._aggregator = SessionAggregator(self.config)
        self._stats = self._aggregator.empty_stats(session_id, now)
        self._records = []
        self._latest_location = None
        self._latest_acceleration = None
        self._last_folded_fix = None
        self.last_result = None
        self._state = SessionState.ACTIVE

        self.logger.info(f"Started session {session_id} (trigger: {self.trigger.value})")
        return self._stats

    def stop(self) -> SessionResult:
        """
        Close the session with whatever records were folded so far.

        Raises:
            SessionStateError: If no session is active
        """
        self._require_active("stop")

        stats = self._aggregator.close(self._stats, self._monotonic_now())
        result = SessionResult(records=tuple(self._records), stats=stats)

        self._history.reset()
        self._state = SessionState.IDLE
        self._stats = None
        self._records = []
        self._latest_location = None
        self._latest_acceleration = None
        self._last_folded_fix = None

        self.logger.info(
            f"Stopped session {stats.session_id}: {len(result.records)} records, "
            f"{stats.distance:.1f} m, {stats.steps} steps"
        )
        return result

    # ------------------------------------------------------------------
    # Sensor input
    # ------------------------------------------------------------------

    def ingest_location(self, fix: LocationFix) -> ActivityRecord | None:
        """
        Accept a location fix.

        Returns:
            A new record when location ticks trigger classification and an
            acceleration sample has been seen, otherwise None
        """
        self._require_active("ingest location")

        if (
            self._latest_location is not None
            and fix.timestamp < self._latest_location.timestamp
        ):
            self.logger.warning(
                f"Ignoring out-of-order fix at {fix.timestamp} "
                f"(latest {self._latest_location.timestamp})"
            )
            return None

        self._latest_location = fix
        if self.trigger != SensorKind.LOCATION or self._latest_acceleration is None:
            return None
        return self.process(fix, self._latest_acceleration, SensorKind.LOCATION)

    def ingest_acceleration(self, sample: AccelerationSample) -> ActivityRecord | None:
        """
        Accept an accelerometer sample.

        Returns:
            A new record when acceleration ticks trigger classification and a
            fix has been seen, otherwise None
        """
        self._require_active("ingest acceleration")

        self._latest_acceleration = sample
        if self.trigger != SensorKind.ACCELERATION or self._latest_location is None:
            return None
        return self.process(self._latest_location, sample, SensorKind.ACCELERATION)

    def process(
        self,
        location: LocationFix,
        acceleration: AccelerationSample,
        trigger: SensorKind | None = None,
    ) -> ActivityRecord:
        """
        Classify one fused (location, acceleration) pair and fold it.

        Args:
            location: Fix consumed by this classification
            acceleration: Sample consumed by this classification
            trigger: Stream whose tick caused the call, kept on the record

        Returns:
            The immutable record appended to the session log

        Raises:
            SessionStateError: If no session is active
        """
        self._require_active("classify")

        now = self._monotonic_now()
        speed = location.ground_speed

        try:
            result = self._classifier.observe(
                self._history, speed, acceleration.magnitude
            )
        except InvalidDataError as e:
            self.logger.warning(f"Recording sample as unknown: {e}")
            result = ClassificationResult.unknown()

        step_detected = result.activity.is_on_foot and self._step_detector.is_step(
            self._history.acceleration, acceleration.magnitude
        )

        increment = 0.0
        if self._last_folded_fix is not None:
            increment = haversine_distance(
                self._last_folded_fix.latitude,
                self._last_folded_fix.longitude,
                location.latitude,
                location.longitude,
            )

        record = ActivityRecord(
            id=generate_id(IdPrefixes.RECORD, now),
            activity=result.activity,
            confidence=result.confidence,
            location=location,
            acceleration=acceleration,
            timestamp=now,
            speed=speed,
            trigger=trigger,
            step_detected=step_detected,
        )

        self._records.append(record)
        self._stats = self._aggregator.fold(
            self._stats, record, increment, step_detected, now
        )
        self._last_folded_fix = location
        self.last_result = result

        return record
