"""Diff-related data models"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class ChangeKind(str, Enum):
    """Classification of a single line in a diff"""

    ADDED = "add"
    DELETED = "delete"
    UNCHANGED = "unchanged"


class LineChange(BaseModel):
    """A single line in the computed diff"""

    kind: ChangeKind
    text: str  # no trailing newline
    line_number: int = 0  # position in the new document, 0 when numbering is off
    count: int = 1


class DiffBlock(BaseModel):
    """A contiguous run of changes plus surrounding context"""

    changes: list[LineChange]
    start_line: int
    end_line: int  # inclusive
    has_changes: bool


class DiffSummary(BaseModel):
    """Line counts by kind over a full change list"""

    additions: int = 0
    deletions: int = 0
    unchanged: int = 0

    @property
    def has_changes(self) -> bool:
        return self.additions > 0 or self.deletions > 0


class ArtifactDiff(BaseModel):
    """What changed in an artifact since it was last viewed"""

    session_id: str
    file_path: str
    has_snapshot: bool
    identical: bool
    last_viewed_at: datetime | None = None
    summary: DiffSummary
    blocks: list[DiffBlock] = []
    hidden_lines: list[int] = []  # lines skipped after each block
    unified_diff: str = ""
