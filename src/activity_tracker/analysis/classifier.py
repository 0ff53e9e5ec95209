"""
Rule-based activity classification.

This module maps an instantaneous (speed, acceleration magnitude) observation,
smoothed by the session's SignalHistory, to an ActivityState. Rules are
evaluated in a fixed order and the first match wins; later rules assume the
earlier ones did not fire.
"""

import logging

from ..metrics.base import BaseSignalComponent
from ..metrics.history import SignalBuffer, SignalHistory
from ..models import ActivityState, ClassificationResult, ClassifierConfig
from .confidence import ConfidenceEstimator

logger = logging.getLogger(__name__)


class ActivityClassifier(BaseSignalComponent):
    """Ordered threshold rules over smoothed speed and acceleration."""

    def __init__(self, config: ClassifierConfig | None = None):
        """
        Initialize the classifier.

        Args:
            config: Thresholds and constants; defaults are used when omitted
        """
        super().__init__(config)
        self.confidence = ConfidenceEstimator(self.config)

    def observe(
        self, history: SignalHistory, speed: float, acceleration: float
    ) -> ClassificationResult:
        """
        Push an observation into the history, then classify and score it.

        Args:
            history: Session history, mutated by exactly one push
            speed: Instantaneous speed in m/s
            acceleration: Instantaneous acceleration magnitude in g

        Returns:
            ClassificationResult for the observation

        Raises:
            InvalidDataError: If an input is missing or not finite; the history
                is left untouched in that case
        """
        speed = abs(self._require_finite("speed", speed))
        acceleration = self._require_finite("acceleration", acceleration)

        history.push(speed, acceleration)

        effective_speed = self._effective(history.speed, speed)
        effective_acceleration = self._effective(history.acceleration, acceleration)
        activity = self._decide(effective_speed, effective_acceleration)
        confidence = self.confidence.estimate(history, speed, acceleration, activity)

        logger.debug(
            f"Classified speed={speed:.2f} (eff {effective_speed:.2f}) "
            f"accel={acceleration:.3f} (eff {effective_acceleration:.3f}) "
            f"as {activity.value} @ {confidence:.2f}"
        )

        return ClassificationResult(
            activity=activity,
            confidence=confidence,
            effective_speed=effective_speed,
            effective_acceleration=effective_acceleration,
            is_reliable=confidence >= self.config.confidence_threshold,
        )

    def classify(
        self, history: SignalHistory, speed: float, acceleration: float
    ) -> ActivityState:
        """
        Classify an observation against the history as it currently stands.

        Unlike observe(), this does not push into the history.
        """
        effective_speed = self._effective(history.speed, speed)
        effective_acceleration = self._effective(history.acceleration, acceleration)
        return self._decide(effective_speed, effective_acceleration)

    @staticmethod
    def _effective(channel: SignalBuffer, raw: float) -> float:
        """Smoothed value when the window has a positive mean, else the raw one."""
        if len(channel) > 0:
            mean = channel.mean()
            if mean > 0:
                return mean
        return raw

    def _decide(self, speed: float, acceleration: float) -> ActivityState:
        """Apply the ordered decision rules to effective speed and acceleration."""
        cfg = self.config

        # Low displacement dominates regardless of jostle
        if speed < cfg.idle_speed_threshold:
            return ActivityState.IDLE

        if speed >= cfg.vehicle_speed_threshold:
            return ActivityState.VEHICLE

        # Fast but smooth motion is riding, not running
        if speed >= cfg.running_speed_threshold:
            if acceleration >= cfg.running_acceleration_threshold:
                return ActivityState.RUNNING
            return ActivityState.VEHICLE

        # Brisk cadence at walking speed is reclassified upward
        if speed >= cfg.walking_speed_threshold:
            if acceleration >= cfg.walking_acceleration_threshold:
                return ActivityState.RUNNING
            return ActivityState.WALKING

        # Slow but jostled, e.g. position noise while walking in place
        if acceleration >= cfg.walking_acceleration_threshold:
            return ActivityState.WALKING

        return ActivityState.IDLE
