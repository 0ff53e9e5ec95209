"""
Data models for the Activity Tracker package.

This module defines all the core data structures used throughout the application,
ensuring type safety and data validation using Pydantic models.
"""

import math
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .exceptions import ConfigurationError


class ActivityState(str, Enum):
    """Physical activity states produced by the classifier."""

    IDLE = "idle"
    WALKING = "walking"
    RUNNING = "running"
    VEHICLE = "vehicle"
    UNKNOWN = "unknown"

    @property
    def is_on_foot(self) -> bool:
        """True for the states in which footfalls are counted."""
        return self in (ActivityState.WALKING, ActivityState.RUNNING)


class SensorKind(str, Enum):
    """The two input streams feeding a session."""

    LOCATION = "location"
    ACCELERATION = "acceleration"


class ClassifierConfig(BaseModel):
    """Thresholds and constants for classification, step detection and calories."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    # Speed boundaries (m/s)
    idle_speed_threshold: float = Field(0.5, ge=0)
    walking_speed_threshold: float = Field(2.5, ge=0)
    running_speed_threshold: float = Field(5.0, ge=0)
    vehicle_speed_threshold: float = Field(8.0, ge=0)

    # Acceleration magnitude boundaries (g)
    idle_acceleration_threshold: float = Field(0.15, ge=0)
    walking_acceleration_threshold: float = Field(0.3, ge=0)
    running_acceleration_threshold: float = Field(0.6, ge=0)

    moving_average_window: int = Field(5, ge=1, description="Samples kept per channel")
    confidence_threshold: float = Field(0.7, ge=0, le=1)
    step_detection_threshold: float = Field(0.25, ge=0)

    calories_per_step: float = Field(0.04, ge=0, description="kcal per counted step")
    calories_per_km_running: float = Field(
        62.0, ge=0, description="kcal per km covered while running"
    )

    @model_validator(mode="after")
    def check_speed_ordering(self) -> "ClassifierConfig":
        """Validate that the speed boundaries are non-decreasing."""
        boundaries = [
            self.idle_speed_threshold,
            self.walking_speed_threshold,
            self.running_speed_threshold,
            self.vehicle_speed_threshold,
        ]
        if boundaries != sorted(boundaries):
            raise ValueError(
                "Speed thresholds must satisfy idle <= walking <= running <= vehicle"
            )
        return self

    def with_overrides(self, **overrides: Any) -> "ClassifierConfig":
        """Return a new config with the given fields replaced."""
        unknown = set(overrides) - set(type(self).model_fields)
        if unknown:
            raise ConfigurationError(
                f"Unknown classifier settings: {', '.join(sorted(unknown))}"
            )
        return type(self)(**{**self.model_dump(), **overrides})


class LocationFix(BaseModel):
    """One reported position sample."""

    model_config = ConfigDict(frozen=True, ser_json_inf_nan="constants")

    latitude: float = Field(..., ge=-90, le=90, description="Degrees")
    longitude: float = Field(..., ge=-180, le=180, description="Degrees")
    speed: float | None = Field(None, description="Instantaneous speed in m/s")
    timestamp: int = Field(..., description="Milliseconds since epoch")
    altitude: float | None = None
    accuracy: float | None = None
    heading: float | None = None

    @property
    def ground_speed(self) -> float:
        """Absolute speed, 0 when the receiver did not report one."""
        if self.speed is None or not math.isfinite(self.speed):
            return 0.0
        return abs(self.speed)


class AccelerationSample(BaseModel):
    """One tri-axial accelerometer sample in g-units."""

    # Non-finite axes are kept and written as Infinity/NaN so saved logs reload
    model_config = ConfigDict(frozen=True, ser_json_inf_nan="constants")

    x: float
    y: float
    z: float
    magnitude: float = Field(..., ge=0)
    timestamp: int = Field(..., description="Milliseconds since epoch")

    @model_validator(mode="before")
    @classmethod
    def fill_magnitude(cls, data: Any) -> Any:
        """Derive the magnitude from the axes when it was not supplied."""
        if isinstance(data, dict) and data.get("magnitude") is None:
            try:
                x, y, z = (float(data[axis]) for axis in ("x", "y", "z"))
            except (KeyError, TypeError, ValueError):
                return data
            data = {**data, "magnitude": math.sqrt(x * x + y * y + z * z)}
        return data

    @classmethod
    def from_axes(cls, x: float, y: float, z: float, timestamp: int) -> "AccelerationSample":
        """Build a sample, computing its Euclidean magnitude."""
        return cls(x=x, y=y, z=z, timestamp=timestamp)


class ClassificationResult(BaseModel):
    """Outcome of classifying one observation."""

    model_config = ConfigDict(frozen=True)

    activity: ActivityState
    confidence: float = Field(..., ge=0, le=1)
    effective_speed: float = 0.0
    effective_acceleration: float = 0.0
    is_reliable: bool = False

    @classmethod
    def unknown(cls) -> "ClassificationResult":
        """Result used when an observation could not be classified."""
        return cls(activity=ActivityState.UNKNOWN, confidence=0.0)


class ActivityRecord(BaseModel):
    """Immutable result of one fused sensor update."""

    model_config = ConfigDict(frozen=True, ser_json_inf_nan="constants")

    id: str = Field(..., description="Unique record ID")
    activity: ActivityState
    confidence: float = Field(..., ge=0, le=1)
    location: LocationFix
    acceleration: AccelerationSample
    timestamp: int = Field(..., description="Creation time in ms since epoch")
    speed: float = Field(..., ge=0, description="Absolute location speed in m/s")
    trigger: SensorKind | None = Field(
        None, description="Stream whose tick produced this record"
    )
    step_detected: bool = Field(
        False, description="Whether a footfall was counted for this record"
    )


class SessionStats(BaseModel):
    """Running statistics of one tracking session."""

    session_id: str
    start_time: int = Field(..., description="Milliseconds since epoch")
    end_time: int | None = None
    duration: int = Field(0, ge=0, description="Milliseconds")
    distance: float = Field(0.0, ge=0, description="Meters")
    steps: int = Field(0, ge=0)
    calories: float = Field(0.0, ge=0, description="kcal")
    average_speed: float = Field(0.0, ge=0, description="m/s")
    max_speed: float = Field(0.0, ge=0, description="m/s")
    activities: dict[ActivityState, int] = Field(default_factory=dict)

    @property
    def is_closed(self) -> bool:
        """Whether the session has been stopped."""
        return self.end_time is not None

    @property
    def total_samples(self) -> int:
        """Number of records folded into these stats."""
        return sum(self.activities.values())

    def activity_distribution(self) -> dict[ActivityState, float]:
        """Share of samples spent in each activity."""
        total = self.total_samples
        if total == 0:
            return {}
        return {state: count / total for state, count in self.activities.items()}


class SavedRoute(BaseModel):
    """Persisted unit of a completed session."""

    model_config = ConfigDict(frozen=True, ser_json_inf_nan="constants")

    id: str
    name: str
    date: int = Field(..., description="Session start in ms since epoch")
    records: tuple[ActivityRecord, ...]
    stats: SessionStats

    @field_validator("records")
    @classmethod
    def check_record_order(
        cls, v: tuple[ActivityRecord, ...]
    ) -> tuple[ActivityRecord, ...]:
        """Validate that records are in non-decreasing timestamp order."""
        timestamps = [record.timestamp for record in v]
        if timestamps != sorted(timestamps):
            raise ValueError("Route records must be in chronological order")
        return v


class TotalStats(BaseModel):
    """Totals accumulated across all saved sessions."""

    total_distance: float = Field(0.0, ge=0, description="Meters")
    total_steps: int = Field(0, ge=0)
    total_calories: float = Field(0.0, ge=0)
    total_sessions: int = Field(0, ge=0)
    total_duration: int = Field(0, ge=0, description="Milliseconds")
    last_updated: int | None = None
