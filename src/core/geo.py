"""Geographic calculations - Pure functions.

This module provides distance and radius calculations for issue locations.
All functions are pure with no side effects.
"""

import math
from dataclasses import dataclass

from src.core.issue import Issue


# Earth's mean radius in kilometers
EARTH_RADIUS_KM = 6371.0


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in degrees.

    Attributes:
        latitude: Point latitude
        longitude: Point longitude
    """
    latitude: float
    longitude: float


def calculate_distance(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
) -> float:
    """Calculate distance between two points using Haversine formula.

    Pure function.

    Args:
        lat1: Latitude of first point
        lon1: Longitude of first point
        lat2: Latitude of second point
        lon2: Longitude of second point

    Returns:
        Distance in kilometers
    """
    # Convert to radians
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    # Haversine formula
    a = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def is_within_radius(
    origin: GeoPoint,
    point: GeoPoint,
    radius_km: float,
) -> bool:
    """Check if a point is within a radius of an origin.

    Pure function. The boundary is inclusive.

    Args:
        origin: Center point
        point: Point to check
        radius_km: Radius in kilometers

    Returns:
        True if point is within radius
    """
    distance = calculate_distance(
        origin.latitude,
        origin.longitude,
        point.latitude,
        point.longitude,
    )
    return distance <= radius_km


def issue_location(issue: Issue) -> GeoPoint:
    """Return the reported location of an issue."""
    return GeoPoint(latitude=issue.latitude, longitude=issue.longitude)


def distance_to_issue(issue: Issue, origin: GeoPoint) -> float:
    """Calculate distance from an origin to an issue.

    Pure function.

    Args:
        issue: The issue
        origin: Viewer location

    Returns:
        Distance in kilometers
    """
    return calculate_distance(
        origin.latitude,
        origin.longitude,
        issue.latitude,
        issue.longitude,
    )
