"""
Base class shared by the signal components.

Classifier, confidence estimator, step detector and aggregator all read the
same ClassifierConfig and validate raw observations the same way.
"""

import math

from ..exceptions import InvalidDataError
from ..models import ClassifierConfig


class BaseSignalComponent:
    """
    Base class for components driven by a ClassifierConfig.

    Provides common functionality and enforces interface consistency.
    """

    def __init__(self, config: ClassifierConfig | None = None):
        """
        Initialize component with configuration.

        Args:
            config: Thresholds and constants; defaults are used when omitted
        """
        self.config = config if config is not None else ClassifierConfig()

    @staticmethod
    def _require_finite(name: str, value: float | None) -> float:
        """
        Validate a raw scalar observation.

        Args:
            name: Channel name used in the error message
            value: Observed value

        Returns:
            The value as a float

        Raises:
            InvalidDataError: If the value is missing, non-numeric or not finite
        """
        if value is None:
            raise InvalidDataError(f"Missing {name} observation")
        try:
            number = float(value)
        except (TypeError, ValueError) as e:
            raise InvalidDataError(f"Non-numeric {name} observation: {value!r}") from e
        if not math.isfinite(number):
            raise InvalidDataError(f"Non-finite {name} observation: {number}")
        return number
