"""Issue Service - Wires Functional Core and Imperative Shell.

This module coordinates the flow of data between the pure functional
core and the Firestore shell. Every read takes a fresh snapshot of the
stored issues and hands it to the core filters.
"""

import logging

from src.core.config import Config, ValidationError
from src.core.filters import (
    IssueFilter,
    category_counts,
    select_flagged,
    select_visible,
    validate_filter,
)
from src.core.issue import Issue, NewIssue, is_valid_status, parse_issues, validate_new_issue
from src.core.user import ROLE_USER, User, parse_user, validate_username
from src.shell.firestore_client import FirestoreClient, FirestoreConfig, StorageError


logger = logging.getLogger(__name__)


class InvalidInput(ValueError):
    """A submission rejected by core validation.

    Attributes:
        errors: The validation errors found
    """

    def __init__(self, errors: list[ValidationError]) -> None:
        self.errors = errors
        super().__init__("; ".join(e.message for e in errors))


class IssueNotFound(LookupError):
    """The referenced issue does not exist."""


class IssueService:
    """Coordinates issue reporting, browsing and moderation.

    This class wires together:
    - Firestore client (issue and user storage)
    - Core functions (parsing, validation, filtering, analytics)
    """

    def __init__(
        self,
        config: Config,
        store: FirestoreClient | None = None,
    ) -> None:
        """Initialize service with configuration.

        Args:
            config: Application configuration
            store: Firestore client (created if not provided)
        """
        self.config = config
        self.store = store or FirestoreClient(
            FirestoreConfig(
                project_id=config.firestore_project,
                database=config.firestore_database,
                issues_collection=config.issues_collection,
                users_collection=config.users_collection,
            )
        )

    def _snapshot(self) -> list[Issue]:
        """Read and parse every stored issue."""
        records = self.store.list_issues()
        issues = parse_issues(records)

        skipped = len(records) - len(issues)
        if skipped:
            logger.warning("Skipped %d malformed issue records", skipped)

        return issues

    def bootstrap(self) -> None:
        """Seed the admin account."""
        self.store.ensure_admin_user(self.config.admin_username)

    def login(self, username: str) -> User:
        """Return the user for a username, creating a regular user if new.

        Raises:
            InvalidInput: If the username is too short
        """
        errors = validate_username(username)
        if errors:
            raise InvalidInput(errors)

        record = self.store.get_user_by_username(username)
        if record is None:
            record = self.store.create_user(username, role=ROLE_USER)

        user = parse_user(record)
        if user is None:
            raise StorageError(f"Stored user {username} is malformed")
        return user

    def report_issue(self, new_issue: NewIssue) -> str:
        """Validate and store a new issue.

        Raises:
            InvalidInput: If the submission is incomplete or invalid
        """
        errors = validate_new_issue(new_issue)
        if errors:
            raise InvalidInput(errors)

        return self.store.create_issue(new_issue)

    def list_visible(self, issue_filter: IssueFilter) -> list[Issue]:
        """List publicly visible issues matching a filter.

        Raises:
            InvalidFilterValue: If status or category is unknown
        """
        # Reject bad filters before touching storage
        validate_filter(issue_filter)

        issues = select_visible(self._snapshot(), issue_filter)

        logger.info("Listing %d visible issues for %s", len(issues), issue_filter)
        return issues

    def flag_issue(self, issue_id: str) -> None:
        """Record one spam/inappropriate flag.

        Raises:
            IssueNotFound: If the issue does not exist
        """
        if not self.store.flag_issue(issue_id):
            raise IssueNotFound(issue_id)

    def update_status(self, issue_id: str, status: str) -> None:
        """Move an issue to a new status.

        Raises:
            InvalidInput: If the status is unknown
            IssueNotFound: If the issue does not exist
        """
        if not is_valid_status(status):
            raise InvalidInput([ValidationError(
                field="status",
                message=f"Invalid status: {status}",
            )])

        if not self.store.update_status(issue_id, status):
            raise IssueNotFound(issue_id)

    def list_flagged(self) -> list[Issue]:
        """List issues awaiting moderation review."""
        issues = select_flagged(self._snapshot())

        logger.info("Listing %d flagged issues", len(issues))
        return issues

    def category_analytics(self) -> dict[str, int]:
        """Count all issues by category."""
        return category_counts(self._snapshot())
