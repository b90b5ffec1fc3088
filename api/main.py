"""CivicTrack API - FastAPI service for civic issue reporting.

Citizens log in by username, report location-tagged issues, browse issues
near them and flag spam. Admins review flagged issues and category counts.

This module is the HTTP edge: it parses requests, calls the issue service
and maps its errors to status codes.
"""

import logging
import os
import threading

from fastapi import Depends, FastAPI, Header, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from src.core.config import Config, validate_config
from src.core.filters import InvalidFilterValue, IssueFilter
from src.core.issue import NewIssue, issue_to_dict
from src.core.user import user_to_dict
from src.issue_service import InvalidInput, IssueNotFound, IssueService
from src.shell.config_loader import load_config, load_config_from_env
from src.shell.firestore_client import StorageError


def _get_config():
    """Load configuration from file or environment."""
    config_path = os.environ.get("CONFIG_PATH")

    if config_path:
        return load_config(config_path)
    return load_config_from_env()


config = _get_config()

logging.basicConfig(
    level=getattr(logging, config.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _log_config_problems(config: Config) -> None:
    """Log configuration warnings and errors at startup."""
    result = validate_config(config)
    for problem in result.errors:
        if problem.severity == "warning":
            logger.warning("Config %s: %s", problem.field, problem.message)
        else:
            logger.error("Config %s: %s", problem.field, problem.message)


_log_config_problems(config)

app = FastAPI(
    title="CivicTrack API",
    description="Report, browse and moderate local civic issues",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "OPTIONS"],
    allow_headers=["*"],
)


# ===== Request Models =====

class LoginRequest(BaseModel):
    username: str | None = None


class IssueCreate(BaseModel):
    title: str | None = None
    description: str | None = None
    category: str | None = None
    lat: float | None = None
    lng: float | None = None
    userId: str | None = None


class StatusUpdate(BaseModel):
    status: str


# ===== Service =====

_service: IssueService | None = None
_service_lock = threading.Lock()


def get_service() -> IssueService:
    """Get or create the issue service, seeding the admin account once."""
    global _service
    if _service is None:
        with _service_lock:
            if _service is None:
                service = IssueService(config)
                try:
                    service.bootstrap()
                except StorageError:
                    logger.exception("Failed to seed admin user %s", config.admin_username)
                _service = service
    return _service


# ===== Helper Functions =====

def _optional_text(value: str | None) -> str | None:
    """Treat empty query parameters as absent."""
    if value is None or value.strip() == "":
        return None
    return value


def _optional_float(value: str | None, name: str) -> float | None:
    """Coerce a query parameter to float, treating empty as absent."""
    value = _optional_text(value)
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {name}")


def _verify_admin_key(service: IssueService, x_admin_key: str | None) -> None:
    """Verify admin API key when one is configured."""
    expected = service.config.admin_api_key
    if expected and expected.startswith("${"):
        # Unresolved placeholder, treated as unset
        expected = None
    if expected and x_admin_key != expected:
        raise HTTPException(status_code=401, detail="Invalid admin key")


# ===== Public Endpoints =====

@app.post("/api/login")
def login(body: LoginRequest, service: IssueService = Depends(get_service)):
    """Log in by username, creating the user on first login."""
    try:
        user = service.login(body.username)
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageError:
        logger.exception("Login failed for %s", body.username)
        raise HTTPException(status_code=500, detail="Internal server error")

    return user_to_dict(user)


@app.post("/api/issues")
def create_issue(body: IssueCreate, service: IssueService = Depends(get_service)):
    """Report a new issue."""
    required = (body.title, body.description, body.category, body.lat, body.lng, body.userId)
    if any(v is None for v in required):
        raise HTTPException(status_code=400, detail="All fields are required")

    new_issue = NewIssue(
        title=body.title,
        description=body.description,
        category=body.category,
        latitude=body.lat,
        longitude=body.lng,
        user_id=body.userId,
    )

    try:
        issue_id = service.report_issue(new_issue)
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageError:
        logger.exception("Issue creation failed")
        raise HTTPException(status_code=500, detail="Failed to create issue")

    return {"success": True, "id": issue_id}


@app.get("/api/issues")
def list_issues(
    status: str | None = Query(default=None),
    category: str | None = Query(default=None),
    lat: str | None = Query(default=None),
    lng: str | None = Query(default=None),
    distance: str | None = Query(default=None),
    service: IssueService = Depends(get_service),
):
    """List visible issues, optionally near a location."""
    issue_filter = IssueFilter(
        status=_optional_text(status),
        category=_optional_text(category),
        origin_latitude=_optional_float(lat, "lat"),
        origin_longitude=_optional_float(lng, "lng"),
        radius_km=_optional_float(distance, "distance"),
    )

    try:
        issues = service.list_visible(issue_filter)
    except InvalidFilterValue as e:
        raise HTTPException(status_code=400, detail=f"Invalid {e.field}")
    except StorageError:
        logger.exception("Fetch issues failed")
        raise HTTPException(status_code=500, detail="Failed to fetch issues")

    return [issue_to_dict(i) for i in issues]


@app.post("/api/issues/{issue_id}/flag")
def flag_issue(issue_id: str, service: IssueService = Depends(get_service)):
    """Flag an issue as spam or inappropriate."""
    try:
        service.flag_issue(issue_id)
    except IssueNotFound:
        raise HTTPException(status_code=404, detail=f"Issue '{issue_id}' not found")
    except StorageError:
        logger.exception("Flag issue failed for %s", issue_id)
        raise HTTPException(status_code=500, detail="Failed to flag issue")

    return {"success": True}


@app.put("/api/issues/{issue_id}/status")
def update_issue_status(
    issue_id: str,
    body: StatusUpdate,
    service: IssueService = Depends(get_service),
):
    """Move an issue to a new status."""
    try:
        service.update_status(issue_id, body.status)
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    except IssueNotFound:
        raise HTTPException(status_code=404, detail=f"Issue '{issue_id}' not found")
    except StorageError:
        logger.exception("Status update failed for %s", issue_id)
        raise HTTPException(status_code=500, detail="Failed to update issue status")

    return {"success": True}


@app.get("/health")
def health_check():
    """Health check endpoint for Cloud Run."""
    return {"status": "healthy"}


# ===== Admin Endpoints =====

@app.get("/api/admin/issues")
def admin_flagged_issues(
    x_admin_key: str | None = Header(default=None),
    service: IssueService = Depends(get_service),
):
    """List issues flagged for moderation."""
    _verify_admin_key(service, x_admin_key)

    try:
        issues = service.list_flagged()
    except StorageError:
        logger.exception("Fetch admin issues failed")
        raise HTTPException(status_code=500, detail="Failed to fetch flagged issues")

    return [issue_to_dict(i) for i in issues]


@app.get("/api/admin/analytics")
def admin_analytics(
    x_admin_key: str | None = Header(default=None),
    service: IssueService = Depends(get_service),
):
    """Count all issues by category."""
    _verify_admin_key(service, x_admin_key)

    try:
        counts = service.category_analytics()
    except StorageError:
        logger.exception("Analytics failed")
        raise HTTPException(status_code=500, detail="Failed to fetch analytics")

    return [{"category": category, "count": count} for category, count in counts.items()]
