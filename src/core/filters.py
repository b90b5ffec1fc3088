"""Issue filtering and moderation threshold - Pure functions.

This module decides which issues end users see and which ones are held
back for moderation review. All functions are pure with no side effects.

Issues with fewer than FLAG_THRESHOLD flags are publicly visible; the rest
are flagged for admins. The two sets partition every input collection.
"""

from dataclasses import dataclass
from typing import Iterable

from src.core.geo import GeoPoint, is_within_radius, issue_location
from src.core.issue import CATEGORIES, STATUSES, Issue


# Flags needed before an issue is hidden and sent to moderation
FLAG_THRESHOLD = 3

DEFAULT_RADIUS_KM = 5.0

# Sentinel that disables the status or category predicate
ALL = "all"


class InvalidFilterValue(ValueError):
    """A status or category filter outside its enumerated set."""

    def __init__(self, field: str, value: str) -> None:
        self.field = field
        self.value = value
        super().__init__(f"Invalid {field}: {value!r}")


@dataclass(frozen=True)
class IssueFilter:
    """Optional predicates for the public issue listing.

    Attributes:
        status: Restrict to one status ("all" or None disables)
        category: Restrict to one category ("all" or None disables)
        origin_latitude: Viewer latitude
        origin_longitude: Viewer longitude
        radius_km: Maximum distance from origin, DEFAULT_RADIUS_KM if None
    """
    status: str | None = None
    category: str | None = None
    origin_latitude: float | None = None
    origin_longitude: float | None = None
    radius_km: float | None = None

    @property
    def origin(self) -> GeoPoint | None:
        """Viewer location, only when both coordinates are supplied."""
        if self.origin_latitude is None or self.origin_longitude is None:
            return None
        return GeoPoint(self.origin_latitude, self.origin_longitude)

    @property
    def effective_radius_km(self) -> float:
        """Radius to apply when an origin is supplied."""
        if self.radius_km is None:
            return DEFAULT_RADIUS_KM
        return self.radius_km


def _is_requested(value: str | None) -> bool:
    return value is not None and value != ALL


def is_publicly_visible(issue: Issue) -> bool:
    """Spam gate: True if the issue is below the flag threshold."""
    return issue.flag_count < FLAG_THRESHOLD


def is_flagged(issue: Issue) -> bool:
    """True if the issue has reached the flag threshold."""
    return issue.flag_count >= FLAG_THRESHOLD


def validate_filter(issue_filter: IssueFilter) -> None:
    """Reject status or category values outside their enumerated sets.

    Pure function.

    Raises:
        InvalidFilterValue: If a requested value is not a known member
    """
    if _is_requested(issue_filter.status) and issue_filter.status not in STATUSES:
        raise InvalidFilterValue("status", issue_filter.status)

    if _is_requested(issue_filter.category) and issue_filter.category not in CATEGORIES:
        raise InvalidFilterValue("category", issue_filter.category)


def select_visible(
    issues: Iterable[Issue],
    issue_filter: IssueFilter | None = None,
) -> list[Issue]:
    """Select the issues shown to end users.

    Pure function. Predicates are applied in order: spam gate, status,
    category, radius. Input order is preserved.

    Args:
        issues: Snapshot of stored issues
        issue_filter: Optional predicates

    Returns:
        Publicly visible issues matching the filter

    Raises:
        InvalidFilterValue: If status or category is not a known member
    """
    issue_filter = issue_filter or IssueFilter()
    validate_filter(issue_filter)

    result = [i for i in issues if is_publicly_visible(i)]

    if _is_requested(issue_filter.status):
        result = [i for i in result if i.status == issue_filter.status]

    if _is_requested(issue_filter.category):
        result = [i for i in result if i.category == issue_filter.category]

    origin = issue_filter.origin
    if origin is not None:
        radius_km = issue_filter.effective_radius_km
        result = [
            i for i in result
            if is_within_radius(origin, issue_location(i), radius_km)
        ]

    return result


def select_flagged(issues: Iterable[Issue]) -> list[Issue]:
    """Select issues awaiting moderation review.

    Pure function. No other predicate is applied.

    Args:
        issues: Snapshot of stored issues

    Returns:
        Issues at or above the flag threshold, in input order
    """
    return [i for i in issues if is_flagged(i)]


def category_counts(issues: Iterable[Issue]) -> dict[str, int]:
    """Tally all issues by category, flagged or not.

    Pure function. Only categories that occur get a key, in first-seen order.

    Args:
        issues: Snapshot of stored issues

    Returns:
        Mapping from category to count
    """
    counts: dict[str, int] = {}

    for issue in issues:
        counts[issue.category] = counts.get(issue.category, 0) + 1

    return counts
