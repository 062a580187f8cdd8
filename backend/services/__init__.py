"""Services module - Business logic layer"""

from .artifact_diff import ArtifactDiffService, get_artifact_service, set_artifact_service
from .config_manager import ConfigManager
from .content_cache import ContentCache
from .diff_generator import DiffGenerator
from .storage import (
    KeyValueStore,
    MemoryStore,
    SqliteStore,
    StorageError,
    StorageQuotaExceeded,
)

__all__ = [
    "ArtifactDiffService",
    "get_artifact_service",
    "set_artifact_service",
    "ConfigManager",
    "ContentCache",
    "DiffGenerator",
    "KeyValueStore",
    "MemoryStore",
    "SqliteStore",
    "StorageError",
    "StorageQuotaExceeded",
]
