"""Configuration Loader - Imperative Shell.

This module handles loading configuration from YAML files and
environment variables. All I/O is contained here.

The Config model is defined in src/core/config.py to avoid
information leakage between layers.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from src.core.config import Config, DEFAULT_ALLOWED_ORIGINS


logger = logging.getLogger(__name__)


def _resolve_value(value: Any) -> Any:
    """Resolve a value that may be a ${VAR} environment placeholder.

    Args:
        value: Value to resolve

    Returns:
        Resolved value, or the placeholder itself if the variable is unset
    """
    if not isinstance(value, str):
        return value

    if value.startswith("${") and value.endswith("}"):
        var_name = value[2:-1]
        env_value = os.environ.get(var_name)
        if env_value:
            return env_value
        logger.warning("Environment variable %s not set", var_name)

    return value


def _resolve_secret(value: Any) -> str | None:
    """Resolve a secret; an unresolved ${VAR} placeholder counts as unset."""
    value = _resolve_value(value)
    if isinstance(value, str) and value.startswith("${"):
        return None
    return value or None


def _parse_origins(value: Any) -> list[str]:
    """Parse CORS origins from a list or a comma-separated string."""
    if value is None:
        return list(DEFAULT_ALLOWED_ORIGINS)
    if isinstance(value, str):
        value = _resolve_value(value).split(",")
    return [str(_resolve_value(o)).strip() for o in value if str(o).strip()]


def load_config_from_dict(data: dict[str, Any]) -> Config:
    """Load configuration from a dictionary.

    This is a pure-ish function (only env var expansion has side effects).

    Args:
        data: Configuration dictionary

    Returns:
        Parsed Config object
    """
    firestore = data.get("firestore", {}) or {}
    admin = data.get("admin", {}) or {}

    return Config(
        firestore_project=_resolve_value(firestore.get("project")),
        firestore_database=_resolve_value(firestore.get("database")),
        issues_collection=firestore.get("issues_collection", "issues"),
        users_collection=firestore.get("users_collection", "users"),
        admin_username=admin.get("username", "admin"),
        admin_api_key=_resolve_secret(admin.get("api_key")),
        allowed_origins=_parse_origins(data.get("allowed_origins")),
        log_level=str(data.get("log_level", "INFO")).upper(),
    )


def load_config(config_path: str | Path | None = None) -> Config:
    """Load configuration from a YAML file.

    This method performs file I/O.

    Args:
        config_path: Path to YAML config file.
                    If None, uses CONFIG_PATH env var or default.

    Returns:
        Parsed Config object

    Raises:
        yaml.YAMLError: If config file is invalid YAML
    """
    if config_path is None:
        config_path = os.environ.get("CONFIG_PATH", "config/config.yaml")

    path = Path(config_path)

    logger.info("Loading configuration from %s", path)

    if not path.exists():
        logger.warning("Config file not found: %s, using defaults", path)
        return Config()

    with open(path, "r") as f:
        data = yaml.safe_load(f)

    if data is None:
        logger.warning("Config file is empty, using defaults")
        return Config()

    config = load_config_from_dict(data)

    logger.info(
        "Loaded config: issues=%s users=%s, %d allowed origins",
        config.issues_collection,
        config.users_collection,
        len(config.allowed_origins),
    )

    return config


def load_config_from_env() -> Config:
    """Load configuration from environment variables.

    Useful for simple deployments without a YAML file.

    Environment variables:
        FIRESTORE_PROJECT: GCP project ID
        FIRESTORE_DATABASE: Firestore database name
        ISSUES_COLLECTION: Collection for issues
        USERS_COLLECTION: Collection for users
        ADMIN_USERNAME: Seeded admin account
        ADMIN_API_KEY: Key required on admin endpoints
        ALLOWED_ORIGINS: Comma-separated CORS origins
        LOG_LEVEL: Logging level

    Returns:
        Config object from environment
    """
    origins = os.environ.get("ALLOWED_ORIGINS")

    return Config(
        firestore_project=os.environ.get("FIRESTORE_PROJECT"),
        firestore_database=os.environ.get("FIRESTORE_DATABASE"),
        issues_collection=os.environ.get("ISSUES_COLLECTION", "issues"),
        users_collection=os.environ.get("USERS_COLLECTION", "users"),
        admin_username=os.environ.get("ADMIN_USERNAME", "admin"),
        admin_api_key=os.environ.get("ADMIN_API_KEY") or None,
        allowed_origins=_parse_origins(origins),
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    )
