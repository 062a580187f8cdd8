"""
Artifact Diff Service - "What changed since I last viewed this file"
"""

from __future__ import annotations

from typing import Any

from models.diff import ArtifactDiff, DiffSummary
from services.config_manager import ConfigManager
from services.content_cache import ContentCache
from services.diff_generator import DEFAULT_CONTEXT_LINES, DiffGenerator, split_lines
from services.storage import MemoryStore, SqliteStore


class ArtifactDiffService:
    """Diff artifacts against the snapshot recorded when they were last viewed"""

    def __init__(
        self,
        cache: ContentCache,
        diff_generator: DiffGenerator | None = None,
        context_lines: int = DEFAULT_CONTEXT_LINES,
    ):
        self.cache = cache
        self.diff_generator = diff_generator or DiffGenerator()
        self.context_lines = context_lines

    @classmethod
    def from_config(cls, config_manager: ConfigManager) -> "ArtifactDiffService":
        """Build the service and its storage from ConfigManager settings"""
        cache_cfg: dict[str, Any] = config_manager.cache_settings()
        diff_cfg: dict[str, Any] = config_manager.diff_settings()

        if cache_cfg["backend"] == "memory":
            storage = MemoryStore(max_bytes=cache_cfg["maxBytes"])
        else:
            storage = SqliteStore(cache_cfg["path"], max_bytes=cache_cfg["maxBytes"])

        cache = ContentCache(
            storage,
            max_entries_per_session=cache_cfg["maxEntriesPerSession"],
            eviction_batch=cache_cfg["evictionBatch"],
        )
        return cls(cache, context_lines=diff_cfg["contextLines"])

    def diff_since_last_view(
        self,
        session_id: str,
        file_path: str,
        current_content: str,
        context_lines: int | None = None,
    ) -> ArtifactDiff:
        """Compare current content with the last viewed snapshot"""
        if context_lines is None:
            context_lines = self.context_lines

        entry = self.cache.get_cached_content(session_id, file_path)
        if entry is None:
            return ArtifactDiff(
                session_id=session_id,
                file_path=file_path,
                has_snapshot=False,
                identical=False,
                summary=DiffSummary(unchanged=len(split_lines(current_content))),
            )

        if self.diff_generator.contents_equal(entry.content, current_content):
            return ArtifactDiff(
                session_id=session_id,
                file_path=file_path,
                has_snapshot=True,
                identical=True,
                last_viewed_at=entry.viewed_at,
                summary=DiffSummary(unchanged=len(split_lines(current_content))),
            )

        changes = self.diff_generator.compute_diff(entry.content, current_content)
        blocks = self.diff_generator.group_into_blocks(changes, context_lines)

        return ArtifactDiff(
            session_id=session_id,
            file_path=file_path,
            has_snapshot=True,
            identical=False,
            last_viewed_at=entry.viewed_at,
            summary=self.diff_generator.summarize(changes),
            blocks=blocks,
            hidden_lines=self.diff_generator.hidden_line_counts(blocks),
            unified_diff=self.diff_generator.unified_diff(
                entry.content, current_content, file_path, context_lines
            ),
        )

    def mark_viewed(self, session_id: str, file_path: str, content: str) -> bool:
        """Record `content` as what the user last saw"""
        return self.cache.set_cached_content(session_id, file_path, content)

    def forget(self, session_id: str, file_path: str | None = None) -> None:
        self.cache.clear_cache(session_id, file_path)


_service: ArtifactDiffService | None = None


def set_artifact_service(service: ArtifactDiffService | None):
    """Install the process-wide service instance"""
    global _service
    _service = service


def get_artifact_service() -> ArtifactDiffService:
    """Process-wide service, built from configuration on first use"""
    global _service
    if _service is None:
        _service = ArtifactDiffService.from_config(ConfigManager.get_instance())
    return _service
