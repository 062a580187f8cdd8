"""Models module - Pydantic data models"""

from .artifact import (
    CompareRequest,
    CompareResponse,
    DiffSinceViewRequest,
    MarkViewedRequest,
    MarkViewedResponse,
)
from .cache import CacheEntry, CacheStats
from .diff import ArtifactDiff, ChangeKind, DiffBlock, DiffSummary, LineChange

__all__ = [
    # Diff models
    "ChangeKind",
    "LineChange",
    "DiffBlock",
    "DiffSummary",
    "ArtifactDiff",
    # Cache models
    "CacheEntry",
    "CacheStats",
    # Artifact viewer models
    "DiffSinceViewRequest",
    "MarkViewedRequest",
    "MarkViewedResponse",
    "CompareRequest",
    "CompareResponse",
]
