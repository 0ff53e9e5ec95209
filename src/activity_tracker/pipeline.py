"""
Replay pipeline using the service layer.

Drives a TrackingSession from a recorded sensor stream, in the order the
events were delivered, and hands the closed session to the RouteService. The
session clock follows the timestamps of the replayed events, so the output
matches what the live session would have produced.
"""

import logging
from collections.abc import Iterable
from pathlib import Path

from .data import RecordLogLoader, SensorEvent
from .exceptions import ActivityTrackerError, ProcessingError
from .models import LocationFix, SavedRoute
from .services import RouteService, SessionResult, TrackingSession
from .settings import Settings, load_settings

logger = logging.getLogger(__name__)


class ReplayPipeline:
    """
    Thin orchestration of loader, session and route service.

    This pipeline delegates all logic to the services, keeping itself focused
    on ordering events and wiring the clock.
    """

    def __init__(self, settings: Settings):
        """
        Initialize the pipeline.

        Args:
            settings: Application settings
        """
        self.settings = settings
        self.loader = RecordLogLoader()
        self.route_service = RouteService(settings.classifier)
        self.logger = logging.getLogger(__name__)
        self._now = 0

    def _clock(self) -> int:
        return self._now

    def replay(
        self, events: Iterable[SensorEvent], session_id: str | None = None
    ) -> SessionResult:
        """
        Feed events through a fresh session and close it.

        Args:
            events: Location fixes and acceleration samples in delivery order
            session_id: Optional explicit session ID

        Returns:
            The closed session
        """
        events = list(events)
        session = TrackingSession.from_settings(self.settings, clock=self._clock)

        self._now = events[0].timestamp if events else 0
        session.start(session_id)

        for event in events:
            self._now = max(self._now, event.timestamp)
            if isinstance(event, LocationFix):
                session.ingest_location(event)
            else:
                session.ingest_acceleration(event)

        return session.stop()

    def run(
        self,
        sensor_file: Path,
        name: str | None = None,
        recompute: bool = False,
    ) -> SavedRoute:
        """
        Replay a sensor CSV and build the saved route.

        Raises:
            ProcessingError: If loading, replay or route construction fails
        """
        try:
            self.logger.info("=" * 60)
            self.logger.info(f"Replaying {sensor_file}")
            self.logger.info("=" * 60)

            events = self.loader.load_sensor_events(sensor_file)
            result = self.replay(events)
            route = self.route_service.finalize(result, name=name, recompute=recompute)

            self.logger.info(f"Replay completed: {len(route.records)} records")
            return route

        except ActivityTrackerError as e:
            self.logger.error(f"Replay failed: {e}")
            raise ProcessingError(f"Replay of {sensor_file} failed: {e}") from e


def run_pipeline(sensor_file: str, config_path: str | None = None) -> SavedRoute:
    """
    Replay a sensor file with settings from an optional config file.

    Args:
        sensor_file: Path to the recorded sensor CSV
        config_path: Path to the configuration YAML file
    """
    settings = load_settings(Path(config_path) if config_path else None)
    pipeline = ReplayPipeline(settings)
    return pipeline.run(Path(sensor_file))
