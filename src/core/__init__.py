"""Functional Core - Pure functions with no side effects.

This module contains all business logic as pure functions:
- Issue data parsing and validation
- Geo/distance calculations
- Visibility filtering and moderation threshold
- Category analytics

All functions here are deterministic and have no I/O.
"""

from src.core.issue import Issue, NewIssue, parse_issues
from src.core.geo import GeoPoint, calculate_distance, is_within_radius
from src.core.filters import (
    InvalidFilterValue,
    IssueFilter,
    category_counts,
    select_flagged,
    select_visible,
)
from src.core.user import User

__all__ = [
    # Issue
    "Issue",
    "NewIssue",
    "parse_issues",
    # Geo
    "GeoPoint",
    "calculate_distance",
    "is_within_radius",
    # Filters
    "InvalidFilterValue",
    "IssueFilter",
    "select_visible",
    "select_flagged",
    "category_counts",
    # Users
    "User",
]
