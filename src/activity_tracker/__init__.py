"""Activity Tracker - activity classification and session statistics from sensor streams."""

__version__ = "0.3.0"

from . import analysis, constants, data, exceptions, metrics, models, services
from .analysis import (
    ActivityClassifier,
    ConfidenceEstimator,
    RouteSummarizer,
    SessionAggregator,
    update_total_stats,
)
from .data import RecordLogLoader
from .metrics import SignalBuffer, SignalHistory, StepDetector, haversine_distance
from .models import (
    AccelerationSample,
    ActivityRecord,
    ActivityState,
    ClassificationResult,
    ClassifierConfig,
    LocationFix,
    SavedRoute,
    SensorKind,
    SessionStats,
    TotalStats,
)
from .pipeline import ReplayPipeline
from .services import RouteService, SessionResult, SessionState, TrackingSession
from .settings import Settings, load_settings


def get_version() -> str:
    """Get the current version of activity_tracker."""
    return __version__


def recompute_session_stats(
    records: list[ActivityRecord], config: ClassifierConfig | None = None
) -> SessionStats:
    """Batch-recompute session stats from an ordered record log."""
    return SessionAggregator(config).recompute(records)


__all__ = [
    "get_version",
    "recompute_session_stats",
    # Models
    "AccelerationSample",
    "ActivityRecord",
    "ActivityState",
    "ClassificationResult",
    "ClassifierConfig",
    "LocationFix",
    "SavedRoute",
    "SensorKind",
    "SessionStats",
    "TotalStats",
    # Signal components
    "SignalBuffer",
    "SignalHistory",
    "StepDetector",
    "haversine_distance",
    # Analysis Layer
    "ActivityClassifier",
    "ConfidenceEstimator",
    "RouteSummarizer",
    "SessionAggregator",
    "update_total_stats",
    # Data Layer
    "RecordLogLoader",
    # Services
    "RouteService",
    "SessionResult",
    "SessionState",
    "TrackingSession",
    # Pipeline & settings
    "ReplayPipeline",
    "Settings",
    "load_settings",
    # Modules
    "analysis",
    "constants",
    "data",
    "exceptions",
    "metrics",
    "models",
    "services",
]
