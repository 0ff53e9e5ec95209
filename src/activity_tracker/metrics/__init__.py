"""
Signal-level building blocks.

This package contains the leaf components of the classification pipeline:
- geo: Great-circle distance (scalar and vectorised)
- history: Bounded moving-average windows per sensor channel
- steps: Footfall detection over acceleration magnitudes
- base: Shared configuration-holding base class
"""

from .base import BaseSignalComponent
from .geo import haversine_distance, haversine_increments
from .history import SignalBuffer, SignalHistory
from .steps import StepDetector

__all__ = [
    "BaseSignalComponent",
    "SignalBuffer",
    "SignalHistory",
    "StepDetector",
    "haversine_distance",
    "haversine_increments",
]
