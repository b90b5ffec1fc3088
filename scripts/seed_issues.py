#!/usr/bin/env python3
"""Seed demo issues around a location.

Creates a demo user and a handful of issues scattered around a center
point, one per category, so the map and filters have something to show.

Usage:
    # Preview only, nothing is written
    python scripts/seed_issues.py --dry-run

    # Seed around a custom center
    python scripts/seed_issues.py --lat 30.7333 --lng 76.7794 --spread-km 4

Environment:
    CONFIG_PATH: Path to config file (default: environment variables)
    FIRESTORE_PROJECT / FIRESTORE_DATABASE: Target Firestore
"""

import argparse
import logging
import math
import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.core.geo import EARTH_RADIUS_KM, GeoPoint, calculate_distance
from src.core.issue import CATEGORIES, NewIssue
from src.issue_service import IssueService
from src.shell.config_loader import load_config, load_config_from_env

logger = logging.getLogger(__name__)


def offset_point(center: GeoPoint, distance_km: float, bearing_deg: float) -> GeoPoint:
    """Move a point by distance along a bearing on a spherical Earth."""
    lat1 = math.radians(center.latitude)
    lon1 = math.radians(center.longitude)
    bearing = math.radians(bearing_deg)
    angular = distance_km / EARTH_RADIUS_KM

    lat2 = math.asin(
        math.sin(lat1) * math.cos(angular)
        + math.cos(lat1) * math.sin(angular) * math.cos(bearing)
    )
    lon2 = lon1 + math.atan2(
        math.sin(bearing) * math.sin(angular) * math.cos(lat1),
        math.cos(angular) - math.sin(lat1) * math.sin(lat2),
    )
    return GeoPoint(math.degrees(lat2), math.degrees(lon2))


def build_demo_issues(
    center: GeoPoint,
    spread_km: float,
    user_id: str,
) -> list[NewIssue]:
    """Create one issue per category, fanned out around the center."""
    issues = []
    step = 360 / len(CATEGORIES)

    for i, category in enumerate(CATEGORIES):
        # Alternate between near and far so radius filters have an edge
        distance = spread_km * (0.5 if i % 2 == 0 else 1.5)
        point = offset_point(center, distance, i * step)
        issues.append(NewIssue(
            title=f"Demo {category.lower()} issue",
            description=f"Seeded {category} report {distance:.1f} km from center",
            category=category,
            latitude=point.latitude,
            longitude=point.longitude,
            user_id=user_id,
        ))

    return issues


def main():
    parser = argparse.ArgumentParser(
        description="Seed demo civic issues around a location",
    )
    parser.add_argument(
        "--lat",
        type=float,
        default=30.7333,
        help="Center latitude (default: 30.7333)",
    )
    parser.add_argument(
        "--lng",
        type=float,
        default=76.7794,
        help="Center longitude (default: 76.7794)",
    )
    parser.add_argument(
        "--spread-km",
        type=float,
        default=4.0,
        help="Typical distance from center in km (default: 4)",
    )
    parser.add_argument(
        "--username",
        default="demo_citizen",
        help="User that reports the demo issues",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the issues without writing them",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    config_path = os.environ.get("CONFIG_PATH")
    config = load_config(config_path) if config_path else load_config_from_env()

    center = GeoPoint(args.lat, args.lng)

    if args.dry_run:
        for issue in build_demo_issues(center, args.spread_km, "dry-run"):
            distance = calculate_distance(
                center.latitude, center.longitude, issue.latitude, issue.longitude,
            )
            print(f"{issue.category:<15} {issue.latitude:.5f},{issue.longitude:.5f}  {distance:.2f} km")
        return 0

    service = IssueService(config)
    service.bootstrap()
    user = service.login(args.username)

    for issue in build_demo_issues(center, args.spread_km, user.id):
        issue_id = service.report_issue(issue)
        logger.info("Seeded %s issue %s", issue.category, issue_id)

    return 0


if __name__ == "__main__":
    sys.exit(main())
