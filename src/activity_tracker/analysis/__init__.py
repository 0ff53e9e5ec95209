"""
Analysis layer for classification and session statistics.

This package contains the activity classifier, its confidence estimator, the
session aggregator (incremental and batch) and cross-session summaries.
"""

from .aggregator import SessionAggregator
from .classifier import ActivityClassifier
from .confidence import ConfidenceEstimator
from .summarizer import RouteSummarizer, update_total_stats

__all__ = [
    "ActivityClassifier",
    "ConfidenceEstimator",
    "RouteSummarizer",
    "SessionAggregator",
    "update_total_stats",
]
