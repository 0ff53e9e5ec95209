"""
Bounded sliding windows over scalar sensor channels.

NOTE: A single SignalHistory is shared by the classifier, the confidence
estimator and the step detector. Only the classifier pushes into it, once per
observation.
"""

from collections import deque

import numpy as np


class SignalBuffer:
    """Fixed-capacity FIFO window over one scalar channel."""

    def __init__(self, window: int):
        """
        Initialize an empty buffer.

        Args:
            window: Maximum number of most recent values retained
        """
        if window < 1:
            raise ValueError(f"Window must be at least 1, got {window}")
        self.window = window
        self._values: deque[float] = deque(maxlen=window)

    def push(self, value: float) -> None:
        """Append a value, evicting the oldest one when full."""
        self._values.append(float(value))

    def mean(self) -> float:
        """Arithmetic mean of the window, 0 when empty."""
        if not self._values:
            return 0.0
        return float(np.mean(self._values))

    def variance(self) -> float:
        """Mean squared deviation from the mean, 0 when empty."""
        if not self._values:
            return 0.0
        return float(np.var(self._values))

    def last(self, offset: int = 0) -> float | None:
        """Value pushed ``offset`` pushes ago (0 is the newest), or None."""
        if offset >= len(self._values):
            return None
        return self._values[-1 - offset]

    @property
    def is_full(self) -> bool:
        return len(self._values) >= self.window

    def reset(self) -> None:
        self._values.clear()

    def __len__(self) -> int:
        return len(self._values)


class SignalHistory:
    """Speed and acceleration-magnitude windows of one session."""

    def __init__(self, window: int):
        self.speed = SignalBuffer(window)
        self.acceleration = SignalBuffer(window)

    @property
    def window(self) -> int:
        return self.speed.window

    def push(self, speed: float, acceleration: float) -> None:
        """Append one observation to both channels."""
        self.speed.push(speed)
        self.acceleration.push(acceleration)

    def reset(self) -> None:
        """Clear both channels; called at session start and stop."""
        self.speed.reset()
        self.acceleration.reset()

    def __len__(self) -> int:
        return len(self.speed)
