"""
Command-line interface for the Activity Tracker package.

This module provides a command-line interface for classifying observations,
replaying recorded sensor streams into saved routes, and recomputing session
statistics from stored record logs.
"""

import logging
from pathlib import Path

import click

from .analysis import (
    ActivityClassifier,
    RouteSummarizer,
    SessionAggregator,
    update_total_stats,
)
from .constants import FileExtensions
from .data import RecordLogLoader
from .exceptions import ActivityTrackerError
from .metrics import SignalHistory
from .models import SessionStats
from .pipeline import ReplayPipeline
from .settings import load_settings


# Configure basic logging
def configure_logging(verbose: bool = False) -> None:
    """Configure logging with appropriate level."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


def _echo_stats(stats: SessionStats) -> None:
    click.echo("\nSession Summary")
    click.echo("=" * 40)
    click.echo(f"Session: {stats.session_id}")
    click.echo(f"Duration: {stats.duration / 1000:.0f} s")
    click.echo(f"Distance: {stats.distance / 1000:.2f} km")
    click.echo(f"Steps: {stats.steps}")
    click.echo(f"Calories: {stats.calories:.1f} kcal")
    click.echo(f"Average speed: {stats.average_speed:.2f} m/s")
    click.echo(f"Max speed: {stats.max_speed:.2f} m/s")
    for state, share in stats.activity_distribution().items():
        click.echo(f"  {state.value:<8} {share:6.1%}")


config_option = click.option(
    "--config",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file",
)
verbose_option = click.option(
    "--verbose/--quiet",
    default=False,
    help="Enable verbose output",
)


@click.group()
def main():
    """
    Classify physical activity from location and acceleration streams.

    This tool classifies sensor observations into idle, walking, running or
    in-vehicle states and derives session statistics from them.
    """


@main.command()
@config_option
@verbose_option
@click.option("--speed", type=float, required=True, help="Speed in m/s")
@click.option(
    "--acceleration", type=float, required=True, help="Acceleration magnitude in g"
)
def classify(
    config: Path | None, verbose: bool, speed: float, acceleration: float
) -> None:
    """Classify a single observation on an empty history."""
    configure_logging(verbose)
    logger = logging.getLogger(__name__)

    try:
        settings = load_settings(config)
        classifier = ActivityClassifier(settings.classifier)
        history = SignalHistory(settings.classifier.moving_average_window)
        result = classifier.observe(history, speed, acceleration)
    except ActivityTrackerError as e:
        logger.error(f"Classification failed: {e}")
        raise click.Abort() from e

    click.echo(f"Activity: {result.activity.value}")
    click.echo(f"Confidence: {result.confidence:.2f}")
    click.echo(f"Reliable: {'yes' if result.is_reliable else 'no'}")


@main.command()
@config_option
@verbose_option
@click.argument(
    "sensor_file", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Where to write the route JSON (defaults to the output directory)",
)
@click.option("--name", type=str, help="Route name")
@click.option(
    "--recompute/--no-recompute",
    default=False,
    help="Re-derive final stats from the record log in batch mode",
)
@click.option(
    "--totals",
    "totals_file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Lifetime totals JSON to fold the new route into",
)
def track(
    config: Path | None,
    verbose: bool,
    sensor_file: Path,
    output: Path | None,
    name: str | None,
    recompute: bool,
    totals_file: Path | None,
) -> None:
    """
    Replay a recorded sensor stream through a live session.

    The resulting saved route, records and closing stats, is written as JSON.
    With --totals the route is also added to the lifetime totals.
    """
    configure_logging(verbose)
    logger = logging.getLogger(__name__)

    try:
        settings = load_settings(config)
        pipeline = ReplayPipeline(settings)
        route = pipeline.run(sensor_file, name=name, recompute=recompute)

        destination = output or settings.output_dir / f"{route.id}{FileExtensions.JSON}"
        RecordLogLoader.save_route(route, destination)

        lifetime = None
        if totals_file is not None:
            lifetime = update_total_stats(
                pipeline.loader.load_totals(totals_file), route.stats
            )
            RecordLogLoader.save_totals(lifetime, totals_file)
    except ActivityTrackerError as e:
        logger.error(f"Tracking failed: {e}")
        raise click.Abort() from e

    _echo_stats(route.stats)
    click.echo(f"\nRoute written to {destination}")
    if lifetime is not None:
        click.echo(f"Lifetime sessions: {lifetime.total_sessions}")


@main.command()
@config_option
@verbose_option
@click.argument("log_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def recompute(config: Path | None, verbose: bool, log_file: Path) -> None:
    """Recompute session statistics from a saved route or record log."""
    configure_logging(verbose)
    logger = logging.getLogger(__name__)

    try:
        settings = load_settings(config)
        records = RecordLogLoader().load_records(log_file)
        stats = SessionAggregator(settings.classifier).recompute(records)
    except ActivityTrackerError as e:
        logger.error(f"Recomputation failed: {e}")
        raise click.Abort() from e

    _echo_stats(stats)


@main.command()
@verbose_option
@click.argument(
    "route_files",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
def totals(verbose: bool, route_files: tuple[Path, ...]) -> None:
    """Show lifetime totals across saved routes."""
    configure_logging(verbose)
    logger = logging.getLogger(__name__)

    try:
        loader = RecordLogLoader()
        routes = [loader.load_route(path) for path in route_files]
    except ActivityTrackerError as e:
        logger.error(f"Loading routes failed: {e}")
        raise click.Abort() from e

    summary = RouteSummarizer().summarize(routes)
    click.echo("\nTotals")
    click.echo("=" * 40)
    click.echo(f"Sessions: {summary.total_sessions}")
    click.echo(f"Distance: {summary.total_distance / 1000:.2f} km")
    click.echo(f"Steps: {summary.total_steps}")
    click.echo(f"Calories: {summary.total_calories:.1f} kcal")
    click.echo(f"Duration: {summary.total_duration / 1000:.0f} s")


if __name__ == "__main__":
    main()
