"""Configuration models - Pure data structures.

These are domain models for configuration. The actual loading
(I/O) is handled by the shell layer.
"""

from dataclasses import dataclass, field


DEFAULT_ALLOWED_ORIGINS = ["http://localhost:3000"]


@dataclass
class Config:
    """Application configuration.

    This is a pure data structure - no I/O or side effects.

    Attributes:
        firestore_project: GCP project ID (None for default)
        firestore_database: Firestore database name (None for default)
        issues_collection: Firestore collection holding issues
        users_collection: Firestore collection holding users
        admin_username: Username of the admin account seeded at start-up
        admin_api_key: Key required on admin endpoints (None disables the check)
        allowed_origins: CORS origins for the web frontend
        log_level: Root logging level name
    """
    firestore_project: str | None = None
    firestore_database: str | None = None
    issues_collection: str = "issues"
    users_collection: str = "users"
    admin_username: str = "admin"
    admin_api_key: str | None = None
    allowed_origins: list[str] = field(
        default_factory=lambda: list(DEFAULT_ALLOWED_ORIGINS)
    )
    log_level: str = "INFO"


@dataclass
class ValidationError:
    """A validation error.

    Attributes:
        field: The field that has an error
        message: Human-readable error description
        severity: 'error' or 'warning'
    """
    field: str
    message: str
    severity: str = "error"


@dataclass
class ValidationResult:
    """Result of validating configuration.

    Attributes:
        valid: True if no errors (warnings are OK)
        errors: List of validation errors/warnings
    """
    valid: bool
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def warnings(self) -> list[ValidationError]:
        """Get only warnings."""
        return [e for e in self.errors if e.severity == "warning"]

    @property
    def critical_errors(self) -> list[ValidationError]:
        """Get only critical errors."""
        return [e for e in self.errors if e.severity == "error"]


def validate_config(config: Config) -> ValidationResult:
    """Validate configuration for errors and warnings.

    Pure function.

    Args:
        config: Configuration to validate

    Returns:
        ValidationResult with any errors/warnings found
    """
    errors: list[ValidationError] = []

    for name in ("issues_collection", "users_collection"):
        if not getattr(config, name):
            errors.append(ValidationError(
                field=name,
                message="Collection name must not be empty",
            ))

    if (
        config.issues_collection
        and config.issues_collection == config.users_collection
    ):
        errors.append(ValidationError(
            field="users_collection",
            message=f"Issues and users share collection '{config.issues_collection}'",
        ))

    if not config.admin_username:
        errors.append(ValidationError(
            field="admin_username",
            message="Admin username must not be empty",
        ))

    # Warn about an open admin surface
    if not config.admin_api_key:
        errors.append(ValidationError(
            field="admin_api_key",
            message="Admin API key not set; admin endpoints are unauthenticated",
            severity="warning",
        ))
    elif config.admin_api_key.startswith("${"):
        errors.append(ValidationError(
            field="admin_api_key",
            message="Admin API key not resolved (still contains placeholder)",
            severity="warning",
        ))

    if not config.allowed_origins:
        errors.append(ValidationError(
            field="allowed_origins",
            message="No CORS origins configured",
            severity="warning",
        ))

    has_critical = any(e.severity == "error" for e in errors)

    return ValidationResult(
        valid=not has_critical,
        errors=errors,
    )
