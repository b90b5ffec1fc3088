"""Imperative Shell - I/O and side effects.

This module contains all code that interacts with external systems:
- Firestore client (issue and user storage)
- Configuration loading (environment/files)

Keep this layer thin and simple. All business logic should be in core.
"""

from src.shell.firestore_client import FirestoreClient, FirestoreConfig, StorageError
from src.shell.config_loader import load_config, load_config_from_env

__all__ = [
    "FirestoreClient",
    "FirestoreConfig",
    "StorageError",
    "load_config",
    "load_config_from_env",
]
