"""Issue data models and parsing - Pure functions.

This module handles parsing stored issue records into typed Issue objects
and validating new submissions. All functions are pure with no side effects.

Stored records use the wire names of the public API:
    id, title, description, category, status, lat, lng, userId, flags, createdAt
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable

from src.core.config import ValidationError


CATEGORIES = (
    "Roads",
    "Lighting",
    "Water Supply",
    "Cleanliness",
    "Public Safety",
    "Obstructions",
)

STATUSES = ("Reported", "In Progress", "Resolved")

DEFAULT_STATUS = "Reported"


@dataclass(frozen=True)
class Issue:
    """Immutable civic issue data model.

    Attributes:
        id: Unique issue ID
        title: Short summary
        description: Free-text details
        category: One of CATEGORIES
        status: One of STATUSES
        latitude: Reported latitude
        longitude: Reported longitude
        user_id: ID of the reporting user
        flag_count: Number of spam/inappropriate flags received
        created_at: Submission timestamp (UTC), used for display only
    """
    id: str
    title: str
    description: str
    category: str
    status: str
    latitude: float
    longitude: float
    user_id: str = ""
    flag_count: int = 0
    created_at: datetime | None = None

    @property
    def coordinates(self) -> tuple[float, float]:
        """Return (latitude, longitude) tuple."""
        return (self.latitude, self.longitude)


@dataclass(frozen=True)
class NewIssue:
    """A citizen submission that has not been stored yet."""
    title: str
    description: str
    category: str
    latitude: float
    longitude: float
    user_id: str


def is_valid_category(value: str) -> bool:
    """Check membership in the fixed category set."""
    return value in CATEGORIES


def is_valid_status(value: str) -> bool:
    """Check membership in the fixed status set."""
    return value in STATUSES


def _parse_timestamp(value: Any) -> datetime | None:
    """Parse a stored timestamp into an aware UTC datetime."""
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)
    return None


def parse_issue(data: dict[str, Any]) -> Issue | None:
    """Parse a single stored record into an Issue.

    Pure function: takes raw dict, returns typed Issue or None if invalid.

    Args:
        data: Stored issue record

    Returns:
        Issue object or None if parsing fails
    """
    try:
        issue_id = data.get("id")
        category = data.get("category")
        status = data.get("status")
        if not issue_id or not category or not status:
            return None

        lat = data.get("lat")
        lng = data.get("lng")
        if lat is None or lng is None:
            return None

        return Issue(
            id=str(issue_id),
            title=data.get("title", ""),
            description=data.get("description", ""),
            category=category,
            status=status,
            latitude=float(lat),
            longitude=float(lng),
            user_id=data.get("userId", ""),
            flag_count=int(data.get("flags") or 0),
            created_at=_parse_timestamp(data.get("createdAt")),
        )
    except (TypeError, ValueError):
        return None


def parse_issues(records: Iterable[dict[str, Any]]) -> list[Issue]:
    """Parse stored records into a list of Issues.

    Pure function: drops invalid records, preserves input order.

    Args:
        records: Stored issue records

    Returns:
        List of valid Issue objects
    """
    issues = []

    for record in records:
        issue = parse_issue(record)
        if issue is not None:
            issues.append(issue)

    return issues


def issue_to_dict(issue: Issue) -> dict[str, Any]:
    """Convert Issue dataclass to JSON-serializable dict."""
    return {
        "id": issue.id,
        "title": issue.title,
        "description": issue.description,
        "category": issue.category,
        "status": issue.status,
        "lat": issue.latitude,
        "lng": issue.longitude,
        "userId": issue.user_id,
        "flags": issue.flag_count,
        "createdAt": issue.created_at.isoformat() if issue.created_at else None,
    }


def validate_new_issue(issue: NewIssue) -> list[ValidationError]:
    """Validate a submission before it is stored.

    Pure function.

    Args:
        issue: Submission to validate

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    for field_name in ("title", "description", "category", "user_id"):
        value = getattr(issue, field_name)
        if not isinstance(value, str) or not value.strip():
            errors.append(ValidationError(
                field=field_name,
                message=f"{field_name} is required",
            ))

    if issue.category and not is_valid_category(issue.category):
        errors.append(ValidationError(
            field="category",
            message=f"Invalid category. Must be one of: {', '.join(CATEGORIES)}",
        ))

    if not -90 <= issue.latitude <= 90:
        errors.append(ValidationError(
            field="lat",
            message=f"Latitude {issue.latitude} out of range [-90, 90]",
        ))

    if not -180 <= issue.longitude <= 180:
        errors.append(ValidationError(
            field="lng",
            message=f"Longitude {issue.longitude} out of range [-180, 180]",
        ))

    return errors
