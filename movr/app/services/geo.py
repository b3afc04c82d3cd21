"""
Geo calculations for trip summaries.

Pure functions: great-circle distance, elapsed minutes and average speed.
"""

import math
from datetime import datetime
from typing import NamedTuple

# Radius of Earth in kilometers
EARTH_RADIUS_KM = 6371.0


class TripSummary(NamedTuple):
    distance_km: float
    duration_minutes: float
    velocity_kmh: float


def distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate the great-circle distance between two points on Earth.

    Args:
        lat1, lon1: First point coordinates (degrees)
        lat2, lon2: Second point coordinates (degrees)

    Returns:
        Distance in kilometers
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    dlat = lat2_rad - lat1_rad
    dlon = math.radians(lon2 - lon1)

    # Haversine formula
    a = math.sin(dlat / 2) ** 2 + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon / 2) ** 2
    # Rounding can push a a hair above 1 for antipodal points
    a = min(1.0, a)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def duration_minutes(start: datetime, end: datetime) -> float:
    """
    Minutes elapsed between two timestamps.

    An ``end`` earlier than ``start`` (clock skew between writers) counts
    as zero elapsed time.
    """
    seconds = (end - start).total_seconds()
    return max(0.0, seconds / 60.0)


def velocity_kmh(distance: float, start: datetime, end: datetime) -> float:
    """
    Average speed over the interval, in km/h.

    Returns 0.0 for a zero-length interval.
    """
    hours = duration_minutes(start, end) / 60.0
    if hours == 0:
        return 0.0
    return distance / hours


def summarize_trip(
    start_lat: float,
    start_lon: float,
    start_time: datetime,
    end_lat: float,
    end_lon: float,
    end_time: datetime
) -> TripSummary:
    """Distance, duration and velocity between a start and an end fix."""
    distance = distance_km(start_lat, start_lon, end_lat, end_lon)
    return TripSummary(
        distance_km=distance,
        duration_minutes=duration_minutes(start_time, end_time),
        velocity_kmh=velocity_kmh(distance, start_time, end_time)
    )
