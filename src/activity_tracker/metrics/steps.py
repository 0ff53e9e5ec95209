"""
Footfall detection over the acceleration-magnitude stream.

A step is a rising edge: the newest magnitude jumps above the previous sample
by more than the configured delta while also exceeding the walking threshold.
Gating on the classified activity is left to the caller.
"""

import logging

from .base import BaseSignalComponent
from .history import SignalBuffer

logger = logging.getLogger(__name__)


class StepDetector(BaseSignalComponent):
    """Peak detector for the acceleration-magnitude channel."""

    def is_step(self, history: SignalBuffer, magnitude: float) -> bool:
        """
        Check whether the newest magnitude is a footfall.

        The history is expected to already contain ``magnitude`` as its newest
        value (the classifier pushes each observation exactly once); it is
        compared against the sample before it. The history is not modified.

        Args:
            history: Acceleration-magnitude window of the session
            magnitude: Newest acceleration magnitude in g

        Returns:
            True if a step was detected, False otherwise (including when the
            history holds fewer than 2 samples)
        """
        if len(history) < 2:
            return False

        previous = history.last(offset=1)
        if previous is None:
            return False

        detected = (
            magnitude > previous + self.config.step_detection_threshold
            and magnitude > self.config.walking_acceleration_threshold
        )
        if detected:
            logger.debug(f"Step detected: {previous:.3f}g -> {magnitude:.3f}g")
        return detected
