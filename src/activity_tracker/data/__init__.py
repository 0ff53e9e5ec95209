"""
Data access layer.

This package contains modules for loading recorded sensor streams and record
logs for replay.
"""

from .loader import RecordLogLoader, SensorEvent

__all__ = [
    "RecordLogLoader",
    "SensorEvent",
]
