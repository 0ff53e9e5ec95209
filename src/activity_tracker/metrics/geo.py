"""
Great-circle distance between coordinates.

Scalar haversine for per-sample folding and a vectorised form used by batch
recomputation over a complete record log.
"""

import math

import numpy as np

from ..constants import GeoConstants


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Distance in meters between two points given in degrees.

    Args:
        lat1: Latitude of the first point
        lon1: Longitude of the first point
        lat2: Latitude of the second point
        lon2: Longitude of the second point

    Returns:
        Great-circle distance in meters (0 for coincident points)
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    # Rounding can push a marginally outside [0, 1] near antipodal points
    a = min(max(a, 0.0), 1.0)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return GeoConstants.EARTH_RADIUS_M * c


def haversine_increments(latitudes: np.ndarray, longitudes: np.ndarray) -> np.ndarray:
    """
    Distances between consecutive points of a track.

    Args:
        latitudes: Latitudes in degrees, in track order
        longitudes: Longitudes in degrees, in track order

    Returns:
        Array of the same length; element i is the distance from point i-1 to
        point i, and element 0 is 0.
    """
    lat = np.radians(np.asarray(latitudes, dtype=float))
    lon = np.radians(np.asarray(longitudes, dtype=float))

    increments = np.zeros(len(lat), dtype=float)
    if len(lat) < 2:
        return increments

    d_phi = np.diff(lat)
    d_lambda = np.diff(lon)
    a = (
        np.sin(d_phi / 2) ** 2
        + np.cos(lat[:-1]) * np.cos(lat[1:]) * np.sin(d_lambda / 2) ** 2
    )
    a = np.clip(a, 0.0, 1.0)
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))

    increments[1:] = GeoConstants.EARTH_RADIUS_M * c
    return increments
