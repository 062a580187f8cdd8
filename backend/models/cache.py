"""Content cache data models"""

from __future__ import annotations

from pydantic import AwareDatetime, BaseModel, Field


class CacheEntry(BaseModel):
    """A persisted "last viewed" snapshot of a file"""

    file_path: str = Field(min_length=1)
    session_id: str = Field(min_length=1)
    content: str  # may be empty, but must be present
    viewed_at: AwareDatetime


class CacheStats(BaseModel):
    """Cache usage, recomputed on demand by scanning storage"""

    total_entries: int = 0
    session_entries: int = 0
    estimated_bytes: int = 0
