"""
Service layer for coordinating business logic.

This package contains high-level services that coordinate multiple components
to accomplish business goals.
"""

from .route_service import RouteService
from .session_service import SessionResult, SessionState, TrackingSession

__all__ = [
    "RouteService",
    "SessionResult",
    "SessionState",
    "TrackingSession",
]
