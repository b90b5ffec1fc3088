"""Firestore Client - Imperative Shell.

This module handles persistence of issues and users. Uses Google Cloud
Firestore.

All I/O is contained here; filtering and moderation logic is in the core
module. Flag increments use a server-side transform so concurrent flags
are never lost.
"""

import hashlib
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from google.api_core import exceptions as google_exceptions
from google.cloud import firestore

from src.core.issue import DEFAULT_STATUS, NewIssue
from src.core.user import ROLE_ADMIN, ROLE_USER


logger = logging.getLogger(__name__)


DEFAULT_ISSUES_COLLECTION = "issues"

DEFAULT_USERS_COLLECTION = "users"


class StorageError(Exception):
    """Raised when Firestore cannot complete a request."""


def user_document_id(username: str) -> str:
    """Document ID for a username.

    Usernames may contain characters Firestore rejects in IDs (such as "/").
    """
    return hashlib.sha256(username.encode("utf-8")).hexdigest()


@dataclass
class FirestoreConfig:
    """Configuration for Firestore client.

    Attributes:
        project_id: GCP project ID (None for default)
        database: Firestore database name (None for default database)
        issues_collection: Collection holding issue documents
        users_collection: Collection holding user documents, keyed by username hash
    """
    project_id: str | None = None
    database: str | None = None
    issues_collection: str = DEFAULT_ISSUES_COLLECTION
    users_collection: str = DEFAULT_USERS_COLLECTION


class FirestoreClient:
    """Client for persisting issues and users to Firestore.

    This is part of the imperative shell - it handles database I/O.

    Issue document structure (document ID == "id"):
    {
        "id": "...", "title": "...", "description": "...",
        "category": "Roads", "status": "Reported",
        "lat": 12.34, "lng": 56.78, "userId": "...",
        "flags": 0, "createdAt": <timestamp>
    }

    User document structure (document ID == sha256 of username):
    {"id": "...", "username": "...", "role": "user"}
    """

    def __init__(self, config: FirestoreConfig | None = None) -> None:
        """Initialize Firestore client.

        Args:
            config: Firestore configuration
        """
        self.config = config or FirestoreConfig()
        self._client: firestore.Client | None = None

    @property
    def client(self) -> firestore.Client:
        """Lazy initialization of Firestore client."""
        if self._client is None:
            kwargs = {}
            if self.config.project_id:
                kwargs['project'] = self.config.project_id
            if self.config.database:
                kwargs['database'] = self.config.database
            self._client = firestore.Client(**kwargs)
        return self._client

    def _issues(self) -> Any:
        return self.client.collection(self.config.issues_collection)

    def _users(self) -> Any:
        return self.client.collection(self.config.users_collection)

    def list_issues(self) -> list[dict[str, Any]]:
        """Fetch a snapshot of every stored issue, oldest first.

        This method performs database I/O.

        Returns:
            Raw issue records

        Raises:
            StorageError: If the query fails
        """
        try:
            docs = self._issues().order_by("createdAt").stream()
            records = [{**doc.to_dict(), "id": doc.id} for doc in docs]
        except google_exceptions.GoogleAPICallError as e:
            logger.error("Failed to fetch issues: %s", str(e))
            raise StorageError("Failed to fetch issues") from e

        logger.info("Fetched %d issues from Firestore", len(records))
        return records

    def create_issue(self, new_issue: NewIssue) -> str:
        """Store a new issue with status Reported and no flags.

        Args:
            new_issue: Validated submission

        Returns:
            ID of the created issue

        Raises:
            StorageError: If the write fails
        """
        issue_id = str(uuid.uuid4())

        try:
            self._issues().document(issue_id).set({
                "id": issue_id,
                "title": new_issue.title,
                "description": new_issue.description,
                "category": new_issue.category,
                "status": DEFAULT_STATUS,
                "lat": new_issue.latitude,
                "lng": new_issue.longitude,
                "userId": new_issue.user_id,
                "flags": 0,
                "createdAt": datetime.now(timezone.utc),
            })
        except google_exceptions.GoogleAPICallError as e:
            logger.error("Failed to create issue: %s", str(e))
            raise StorageError("Failed to create issue") from e

        logger.info("Created issue %s (%s)", issue_id, new_issue.category)
        return issue_id

    def flag_issue(self, issue_id: str) -> bool:
        """Atomically increment the flag count of an issue.

        Args:
            issue_id: Issue to flag

        Returns:
            False if the issue does not exist

        Raises:
            StorageError: If the update fails
        """
        try:
            self._issues().document(issue_id).update({
                "flags": firestore.Increment(1),
            })
        except (google_exceptions.NotFound, ValueError):
            logger.warning("Cannot flag missing issue %s", issue_id)
            return False
        except google_exceptions.GoogleAPICallError as e:
            logger.error("Failed to flag issue %s: %s", issue_id, str(e))
            raise StorageError("Failed to flag issue") from e

        logger.info("Flagged issue %s", issue_id)
        return True

    def update_status(self, issue_id: str, status: str) -> bool:
        """Set the status of an issue.

        Args:
            issue_id: Issue to update
            status: New status (already validated)

        Returns:
            False if the issue does not exist

        Raises:
            StorageError: If the update fails
        """
        try:
            self._issues().document(issue_id).update({"status": status})
        except (google_exceptions.NotFound, ValueError):
            logger.warning("Cannot update status of missing issue %s", issue_id)
            return False
        except google_exceptions.GoogleAPICallError as e:
            logger.error("Failed to update issue %s: %s", issue_id, str(e))
            raise StorageError("Failed to update issue status") from e

        logger.info("Issue %s moved to %s", issue_id, status)
        return True

    def get_user_by_username(self, username: str) -> dict[str, Any] | None:
        """Fetch a user record by username.

        Raises:
            StorageError: If the read fails
        """
        try:
            doc = self._users().document(user_document_id(username)).get()
        except (google_exceptions.GoogleAPICallError, ValueError) as e:
            logger.error("Failed to fetch user %s: %s", username, str(e))
            raise StorageError("Failed to fetch user") from e

        if not doc.exists:
            return None
        return doc.to_dict()

    def create_user(self, username: str, role: str = ROLE_USER) -> dict[str, Any]:
        """Create a user, or return the existing one if the username is taken.

        Raises:
            StorageError: If the write fails
        """
        record = {"id": str(uuid.uuid4()), "username": username, "role": role}

        try:
            self._users().document(user_document_id(username)).create(record)
        except google_exceptions.AlreadyExists:
            # Lost a race with a concurrent login for the same username
            existing = self.get_user_by_username(username)
            if existing is not None:
                return existing
            raise StorageError(f"User {username} vanished after conflict")
        except (google_exceptions.GoogleAPICallError, ValueError) as e:
            logger.error("Failed to create user %s: %s", username, str(e))
            raise StorageError("Failed to create user") from e

        logger.info("Created %s user %s", role, username)
        return record

    def ensure_admin_user(self, username: str) -> dict[str, Any]:
        """Create the admin account if it does not exist yet."""
        existing = self.get_user_by_username(username)
        if existing is not None:
            return existing
        return self.create_user(username, role=ROLE_ADMIN)
