"""User models - Pure data structures.

Login is username-only: an unknown username creates a regular user.
"""

from dataclasses import dataclass
from typing import Any

from src.core.config import ValidationError


ROLE_USER = "user"
ROLE_ADMIN = "admin"

MIN_USERNAME_LENGTH = 3


@dataclass(frozen=True)
class User:
    """A reporting user.

    Attributes:
        id: Unique user ID
        username: Login name
        role: ROLE_USER or ROLE_ADMIN
    """
    id: str
    username: str
    role: str = ROLE_USER

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def validate_username(value: Any) -> list[ValidationError]:
    """Validate a login username.

    Pure function.
    """
    if not isinstance(value, str) or len(value) < MIN_USERNAME_LENGTH:
        return [ValidationError(
            field="username",
            message=f"Username must be at least {MIN_USERNAME_LENGTH} characters",
        )]
    return []


def parse_user(data: dict[str, Any]) -> User | None:
    """Parse a stored user record, or None if it lacks an id or username."""
    user_id = data.get("id")
    username = data.get("username")
    if not user_id or not username:
        return None
    return User(id=user_id, username=username, role=data.get("role", ROLE_USER))


def user_to_dict(user: User) -> dict[str, Any]:
    """Convert User dataclass to JSON-serializable dict."""
    return {"id": user.id, "username": user.username, "role": user.role}
