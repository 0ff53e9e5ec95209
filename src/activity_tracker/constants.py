"""
Constants used throughout the Activity Tracker package.

This module centralizes all magic numbers and commonly used values to improve
maintainability and clarity.
"""

from typing import Final


# === Time Constants ===
class TimeConstants:
    """Time-related constants."""

    MILLISECONDS_PER_SECOND: Final[int] = 1000


# === Geodesy ===
class GeoConstants:
    """Constants for great-circle distance."""

    EARTH_RADIUS_M: Final[float] = 6_371_000.0
    METERS_PER_KILOMETER: Final[float] = 1000.0


# === Confidence Scoring ===
class ConfidenceWeights:
    """Terms of the additive confidence score."""

    BASE: Final[float] = 0.5
    HISTORY_SUFFICIENCY: Final[float] = 0.2
    STABILITY_BONUS: Final[float] = 0.1
    STABILITY_MAX_VARIANCE: Final[float] = 0.5  # (m/s)^2

    # Rule-consistency bonuses per activity
    IDLE_CONSISTENCY: Final[float] = 0.3
    WALKING_CONSISTENCY: Final[float] = 0.25
    RUNNING_CONSISTENCY: Final[float] = 0.3
    VEHICLE_CONSISTENCY: Final[float] = 0.3

    MIN: Final[float] = 0.0
    MAX: Final[float] = 1.0


# === Identifiers ===
class IdPrefixes:
    """Prefixes for generated identifiers."""

    SESSION: Final[str] = "session_"
    RECORD: Final[str] = "log_"
    ROUTE: Final[str] = "route_"

    RANDOM_SUFFIX_LENGTH: Final[int] = 9


# === Recorded Data ===
class SensorCSVColumns:
    """Column names of a recorded sensor stream CSV."""

    KIND: Final[str] = "kind"
    TIMESTAMP: Final[str] = "timestamp"
    LATITUDE: Final[str] = "latitude"
    LONGITUDE: Final[str] = "longitude"
    SPEED: Final[str] = "speed"
    ALTITUDE: Final[str] = "altitude"
    ACCURACY: Final[str] = "accuracy"
    HEADING: Final[str] = "heading"
    X: Final[str] = "x"
    Y: Final[str] = "y"
    Z: Final[str] = "z"

    LOCATION_REQUIRED: Final[tuple[str, ...]] = (TIMESTAMP, LATITUDE, LONGITUDE)
    ACCELERATION_REQUIRED: Final[tuple[str, ...]] = (TIMESTAMP, X, Y, Z)


class CSVConstants:
    """Constants for CSV file parsing."""

    DEFAULT_SEPARATOR: Final[str] = ","
    DEFAULT_ENCODING: Final[str] = "utf-8"


# === File Extensions ===
class FileExtensions:
    """File extensions of written outputs."""

    JSON: Final[str] = ".json"
