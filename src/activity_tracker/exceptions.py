"""
Custom exceptions for the Activity Tracker package.

This module defines all custom exceptions used throughout the application,
providing clear error hierarchies and specific error types for different scenarios.
"""


class ActivityTrackerError(Exception):
    """Base exception for all Activity Tracker errors."""


class ConfigurationError(ActivityTrackerError):
    """Raised when there is an issue with configuration settings."""


class SessionStateError(ActivityTrackerError):
    """Raised when a session operation is invoked in the wrong lifecycle state."""


class ValidationError(ActivityTrackerError):
    """Raised when data validation fails."""


class InvalidDataError(ValidationError):
    """Raised when sensor input is non-finite or missing required fields."""


class DataLoadError(ActivityTrackerError):
    """Raised when there is an error loading recorded data files."""


class RouteError(ActivityTrackerError):
    """Raised when a saved route cannot be built from a session."""


class ProcessingError(ActivityTrackerError):
    """Raised when replaying a recorded session fails."""
