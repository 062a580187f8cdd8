"""Artifact viewer request/response models"""

from __future__ import annotations

from pydantic import BaseModel, Field

from .diff import DiffBlock, DiffSummary


class DiffSinceViewRequest(BaseModel):
    """Request a diff of the current content against the last viewed snapshot"""

    file_path: str = Field(min_length=1)
    content: str
    context_lines: int | None = Field(default=None, ge=0)


class MarkViewedRequest(BaseModel):
    """Record the content the user is leaving as the new snapshot"""

    file_path: str = Field(min_length=1)
    content: str


class MarkViewedResponse(BaseModel):
    success: bool


class CompareRequest(BaseModel):
    """Diff two arbitrary contents"""

    old_content: str
    new_content: str
    context_lines: int | None = Field(default=None, ge=0)


class CompareResponse(BaseModel):
    identical: bool
    summary: DiffSummary
    blocks: list[DiffBlock] = []
    hidden_lines: list[int] = []
