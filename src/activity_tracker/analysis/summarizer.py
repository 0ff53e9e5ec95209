"""
Cross-session totals.

This module folds closed session stats into lifetime totals, either one
session at a time as routes are saved or from a whole collection of routes.
"""

import logging
from collections.abc import Iterable

import pandas as pd

from ..models import SavedRoute, SessionStats, TotalStats

logger = logging.getLogger(__name__)


def update_total_stats(
    totals: TotalStats | None, stats: SessionStats, now: int | None = None
) -> TotalStats:
    """
    Add one session's stats to the running totals.

    Args:
        totals: Current totals, or None when nothing has been saved yet
        stats: Closed stats of the session being added
        now: Time of the update in ms; defaults to the session's end time

    Returns:
        New TotalStats
    """
    base = totals if totals is not None else TotalStats()
    return TotalStats(
        total_distance=base.total_distance + stats.distance,
        total_steps=base.total_steps + stats.steps,
        total_calories=base.total_calories + stats.calories,
        total_sessions=base.total_sessions + 1,
        total_duration=base.total_duration + stats.duration,
        last_updated=now if now is not None else stats.end_time,
    )


class RouteSummarizer:
    """Aggregates statistics over a collection of saved routes."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def to_frame(self, routes: Iterable[SavedRoute]) -> pd.DataFrame:
        """One row per route with its headline stats."""
        rows = [
            {
                "id": route.id,
                "name": route.name,
                "date": route.date,
                "end_time": (
                    route.stats.end_time
                    if route.stats.end_time is not None
                    else route.date + route.stats.duration
                ),
                "duration": route.stats.duration,
                "distance": route.stats.distance,
                "steps": route.stats.steps,
                "calories": route.stats.calories,
                "average_speed": route.stats.average_speed,
                "max_speed": route.stats.max_speed,
            }
            for route in routes
        ]
        columns = [
            "id",
            "name",
            "date",
            "end_time",
            "duration",
            "distance",
            "steps",
            "calories",
            "average_speed",
            "max_speed",
        ]
        return pd.DataFrame(rows, columns=columns)

    def summarize(self, routes: Iterable[SavedRoute]) -> TotalStats:
        """
        Compute lifetime totals from saved routes.

        Args:
            routes: Saved routes in any order

        Returns:
            TotalStats; last_updated is the latest route's end time
        """
        df = self.to_frame(routes)
        if df.empty:
            return TotalStats()

        totals = TotalStats(
            total_distance=float(df["distance"].sum()),
            total_steps=int(df["steps"].sum()),
            total_calories=float(df["calories"].sum()),
            total_sessions=len(df),
            total_duration=int(df["duration"].sum()),
            last_updated=int(df["end_time"].max()),
        )
        self.logger.info(
            f"Summarized {totals.total_sessions} routes: "
            f"{totals.total_distance / 1000:.2f} km"
        )
        return totals
