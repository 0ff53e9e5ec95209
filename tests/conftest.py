"""
Shared pytest fixtures for Activity Tracker tests.

This module provides reusable fixtures for:
- Classifier configurations
- Sensor observations (fixes, acceleration samples)
- Record logs
- Deterministic session clocks
- Temporary config files
"""

from pathlib import Path

import pytest
import yaml

from activity_tracker.metrics import SignalHistory
from activity_tracker.models import (
    AccelerationSample,
    ActivityRecord,
    ActivityState,
    ClassifierConfig,
    LocationFix,
    SensorKind,
)

EPOCH_MS = 1_700_000_000_000

# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def default_config() -> ClassifierConfig:
    """Provide the default classifier configuration."""
    return ClassifierConfig()


@pytest.fixture
def temp_config_file(tmp_path: Path) -> Path:
    """Create a temporary YAML config file path for testing."""
    return tmp_path / "config.yaml"


@pytest.fixture
def sample_config_file(tmp_path: Path) -> Path:
    """Create a temporary config file with overridden thresholds."""
    config_path = tmp_path / "config.yaml"
    with open(config_path, "w") as f:
        yaml.dump(
            {
                "classifier": {
                    "moving_average_window": 3,
                    "calories_per_step": 0.05,
                },
                "classification_trigger": "location",
                "output_dir": "out",
            },
            f,
        )
    return config_path


# ============================================================================
# Observation Fixtures
# ============================================================================


@pytest.fixture
def history(default_config: ClassifierConfig) -> SignalHistory:
    """Provide an empty history sized to the default window."""
    return SignalHistory(default_config.moving_average_window)


class FakeClock:
    """Deterministic millisecond clock for sessions."""

    def __init__(self, start: int = EPOCH_MS):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> int:
        self.now += ms
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    """Provide a controllable clock starting at a fixed epoch."""
    return FakeClock()


def make_fix(
    latitude: float = 0.0,
    longitude: float = 0.0,
    speed: float | None = 0.0,
    timestamp: int = EPOCH_MS,
) -> LocationFix:
    """Build a location fix with sensible defaults."""
    return LocationFix(
        latitude=latitude, longitude=longitude, speed=speed, timestamp=timestamp
    )


def make_sample(magnitude: float, timestamp: int = EPOCH_MS) -> AccelerationSample:
    """Build an acceleration sample whose magnitude lies on the z axis."""
    return AccelerationSample.from_axes(0.0, 0.0, magnitude, timestamp=timestamp)


def make_record(
    index: int,
    activity: ActivityState,
    latitude: float = 0.0,
    longitude: float = 0.0,
    speed: float = 0.0,
    magnitude: float = 0.0,
) -> ActivityRecord:
    """Build a record ``index`` seconds after the fixed epoch."""
    timestamp = EPOCH_MS + index * 1000
    return ActivityRecord(
        id=f"log_{index}",
        activity=activity,
        confidence=0.8,
        location=make_fix(latitude, longitude, speed, timestamp),
        acceleration=make_sample(magnitude, timestamp),
        timestamp=timestamp,
        speed=speed,
        trigger=SensorKind.ACCELERATION,
    )


@pytest.fixture
def walking_log() -> list[ActivityRecord]:
    """Five walking records heading east with alternating footfall peaks."""
    magnitudes = [0.2, 0.6, 0.2, 0.6, 0.2]
    return [
        make_record(
            i,
            ActivityState.WALKING,
            longitude=0.0001 * i,
            speed=1.5,
            magnitude=mag,
        )
        for i, mag in enumerate(magnitudes)
    ]


@pytest.fixture
def mixed_log() -> list[ActivityRecord]:
    """Idle, walking, running and vehicle records along the equator."""
    states = [
        (ActivityState.IDLE, 0.0, 0.05),
        (ActivityState.WALKING, 1.5, 0.2),
        (ActivityState.WALKING, 1.5, 0.7),
        (ActivityState.RUNNING, 5.5, 0.3),
        (ActivityState.RUNNING, 5.5, 0.9),
        (ActivityState.VEHICLE, 12.0, 0.1),
        (ActivityState.VEHICLE, 12.0, 0.8),
    ]
    return [
        make_record(i, state, longitude=0.001 * i, speed=speed, magnitude=mag)
        for i, (state, speed, mag) in enumerate(states)
    ]


@pytest.fixture
def fix_factory():
    """Provide the location fix builder."""
    return make_fix


@pytest.fixture
def sample_factory():
    """Provide the acceleration sample builder."""
    return make_sample


@pytest.fixture
def record_factory():
    """Provide the activity record builder."""
    return make_record
