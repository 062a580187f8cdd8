"""Artifact viewer API endpoints"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from models.artifact import (
    CompareRequest,
    CompareResponse,
    DiffSinceViewRequest,
    MarkViewedRequest,
    MarkViewedResponse,
)
from models.diff import ArtifactDiff
from services.artifact_diff import ArtifactDiffService, get_artifact_service

router = APIRouter()


@router.post("/compare", response_model=CompareResponse)
async def compare(
    request: CompareRequest,
    service: ArtifactDiffService = Depends(get_artifact_service),
) -> CompareResponse:
    """Diff two contents without touching the cache"""
    generator = service.diff_generator
    changes = generator.compute_diff(request.old_content, request.new_content)
    summary = generator.summarize(changes)

    if generator.contents_equal(request.old_content, request.new_content):
        return CompareResponse(identical=True, summary=summary)

    context_lines = request.context_lines
    if context_lines is None:
        context_lines = service.context_lines
    blocks = generator.group_into_blocks(changes, context_lines)

    return CompareResponse(
        identical=False,
        summary=summary,
        blocks=blocks,
        hidden_lines=generator.hidden_line_counts(blocks),
    )


@router.post("/{session_id}/diff", response_model=ArtifactDiff)
async def diff_since_last_view(
    session_id: str,
    request: DiffSinceViewRequest,
    service: ArtifactDiffService = Depends(get_artifact_service),
) -> ArtifactDiff:
    """Diff the current content against what the user last viewed"""
    return service.diff_since_last_view(
        session_id,
        request.file_path,
        request.content,
        context_lines=request.context_lines,
    )


@router.post("/{session_id}/viewed", response_model=MarkViewedResponse)
async def mark_viewed(
    session_id: str,
    request: MarkViewedRequest,
    service: ArtifactDiffService = Depends(get_artifact_service),
) -> MarkViewedResponse:
    """Record the content the user is leaving as the new snapshot"""
    success = service.mark_viewed(session_id, request.file_path, request.content)
    return MarkViewedResponse(success=success)
