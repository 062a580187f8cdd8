"""Content cache diagnostics and cleanup endpoints"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from models.cache import CacheEntry, CacheStats
from services.artifact_diff import ArtifactDiffService, get_artifact_service

router = APIRouter()


@router.get("/{session_id}/stats", response_model=CacheStats)
async def get_stats(
    session_id: str,
    service: ArtifactDiffService = Depends(get_artifact_service),
) -> CacheStats:
    """Recompute cache usage for a session"""
    return service.cache.update_stats(session_id)


@router.get("/{session_id}/entry", response_model=CacheEntry)
async def get_entry(
    session_id: str,
    file_path: str,
    service: ArtifactDiffService = Depends(get_artifact_service),
) -> CacheEntry:
    """Get the last viewed snapshot of a file"""
    entry = service.cache.get_cached_content(session_id, file_path)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"No snapshot cached for {file_path}")
    return entry


@router.delete("/{session_id}")
async def clear_session(
    session_id: str,
    file_path: str | None = None,
    service: ArtifactDiffService = Depends(get_artifact_service),
) -> dict[str, Any]:
    """Clear one file's snapshot, or all snapshots of the session"""
    service.forget(session_id, file_path)
    return {"status": "success", "sessionId": session_id, "filePath": file_path}


@router.delete("")
async def clear_all(
    service: ArtifactDiffService = Depends(get_artifact_service),
) -> dict[str, Any]:
    """Clear every cached snapshot across all sessions"""
    service.cache.clear_all_cache()
    return {"status": "success"}
