"""
Saved-route construction and re-derivation.

A SavedRoute is the unit handed to persistence when a session closes. Routes
are immutable; corrections are made by recomputing stats from the record log.
"""

import logging
from collections.abc import Sequence
from datetime import datetime

from pydantic import ValidationError as PydanticValidationError

from ..analysis import SessionAggregator
from ..analysis.aggregator import current_millis
from ..constants import IdPrefixes, TimeConstants
from ..exceptions import RouteError
from ..models import ActivityRecord, ClassifierConfig, SavedRoute, SessionStats
from .session_service import SessionResult, generate_id

logger = logging.getLogger(__name__)


class RouteService:
    """Builds saved routes from closed sessions."""

    def __init__(self, config: ClassifierConfig | None = None):
        """
        Initialize the route service.

        Args:
            config: Constants used when stats are recomputed from the log
        """
        self.config = config if config is not None else ClassifierConfig()
        self.aggregator = SessionAggregator(self.config)
        self.logger = logging.getLogger(__name__)

    @staticmethod
    def default_name(start_time: int) -> str:
        """Human-readable route name derived from the session start."""
        started = datetime.fromtimestamp(
            start_time / TimeConstants.MILLISECONDS_PER_SECOND
        )
        return f"Route {started:%Y-%m-%d %H:%M:%S}"

    def create_route(
        self,
        records: Sequence[ActivityRecord],
        stats: SessionStats,
        name: str | None = None,
    ) -> SavedRoute:
        """
        Build a saved route from a record log and its closing stats.

        Raises:
            RouteError: If the log is empty or not in chronological order
        """
        if not records:
            raise RouteError(f"Session {stats.session_id} has no records to save")

        try:
            route = SavedRoute(
                id=generate_id(IdPrefixes.ROUTE, current_millis()),
                name=name or self.default_name(stats.start_time),
                date=stats.start_time,
                records=tuple(records),
                stats=stats,
            )
        except PydanticValidationError as e:
            raise RouteError(f"Session {stats.session_id} is not a valid route: {e}") from e
        self.logger.info(f"Created route {route.id} ({len(records)} records)")
        return route

    def finalize(
        self,
        result: SessionResult,
        name: str | None = None,
        recompute: bool = False,
    ) -> SavedRoute:
        """
        Turn a closed session into a saved route.

        Args:
            result: Output of TrackingSession.stop()
            name: Route name; derived from the start time when omitted
            recompute: Re-derive the stats from the record log in batch mode
                instead of keeping the live, incrementally folded ones
        """
        stats = result.stats
        if recompute:
            stats = self.recompute_stats(result.records, stats)
        return self.create_route(result.records, stats, name=name)

    def recompute_stats(
        self, records: Sequence[ActivityRecord], stats: SessionStats
    ) -> SessionStats:
        """Batch-recompute stats, keeping the session's identity and time span."""
        return self.aggregator.recompute(
            records,
            session_id=stats.session_id,
            start_time=stats.start_time,
            end_time=stats.end_time,
        )

    def rederive(self, route: SavedRoute) -> SavedRoute:
        """Return a copy of a route whose stats were recomputed from its log."""
        stats = self.recompute_stats(route.records, route.stats)
        return route.model_copy(update={"stats": stats})
