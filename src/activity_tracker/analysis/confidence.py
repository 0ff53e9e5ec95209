"""
Confidence scoring for classifier output.

The score starts from a fixed base and adds terms for data sufficiency, for
raw inputs that independently satisfy the chosen activity's thresholds, and
for a stable speed window. The sum is clamped to [0, 1].
"""

import logging

from ..constants import ConfidenceWeights
from ..metrics.base import BaseSignalComponent
from ..metrics.history import SignalHistory
from ..models import ActivityState

logger = logging.getLogger(__name__)


class ConfidenceEstimator(BaseSignalComponent):
    """Scores an (observation, activity) pair against the current history."""

    def estimate(
        self,
        history: SignalHistory,
        speed: float,
        acceleration: float,
        activity: ActivityState,
    ) -> float:
        """
        Calculate the confidence of a classification.

        Args:
            history: Session history after the observation was pushed
            speed: Raw (non-averaged) speed in m/s
            acceleration: Raw (non-averaged) acceleration magnitude in g
            activity: Activity chosen by the classifier

        Returns:
            Confidence in [0, 1]
        """
        confidence = ConfidenceWeights.BASE
        confidence += self._history_term(history)
        confidence += self._consistency_term(speed, acceleration, activity)
        confidence += self._stability_term(history)

        return min(max(confidence, ConfidenceWeights.MIN), ConfidenceWeights.MAX)

    def _history_term(self, history: SignalHistory) -> float:
        """Reward for how much of the smoothing window is populated."""
        sufficiency = min(len(history.speed) / self.config.moving_average_window, 1.0)
        return sufficiency * ConfidenceWeights.HISTORY_SUFFICIENCY

    def _consistency_term(
        self, speed: float, acceleration: float, activity: ActivityState
    ) -> float:
        """Bonus when raw inputs alone satisfy the activity's defining thresholds."""
        cfg = self.config

        if activity == ActivityState.IDLE:
            if (
                speed < cfg.idle_speed_threshold
                and acceleration < cfg.idle_acceleration_threshold
            ):
                return ConfidenceWeights.IDLE_CONSISTENCY

        elif activity == ActivityState.WALKING:
            if (
                cfg.idle_speed_threshold <= speed < cfg.running_speed_threshold
                and acceleration >= cfg.walking_acceleration_threshold
            ):
                return ConfidenceWeights.WALKING_CONSISTENCY

        elif activity == ActivityState.RUNNING:
            if (
                speed >= cfg.running_speed_threshold
                and acceleration >= cfg.running_acceleration_threshold
            ):
                return ConfidenceWeights.RUNNING_CONSISTENCY

        elif activity == ActivityState.VEHICLE:
            if speed >= cfg.vehicle_speed_threshold:
                return ConfidenceWeights.VEHICLE_CONSISTENCY

        return 0.0

    def _stability_term(self, history: SignalHistory) -> float:
        """Bonus for a full, low-variance speed window."""
        if not history.speed.is_full:
            return 0.0
        if history.speed.variance() < ConfidenceWeights.STABILITY_MAX_VARIANCE:
            return ConfidenceWeights.STABILITY_BONUS
        return 0.0
