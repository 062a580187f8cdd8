"""
Content Cache Service - Per-session "last viewed" snapshots of artifacts

Entries live in an injected key-value store under
``diff-cache:<session>:<file path>``. Reads purge corrupt entries, writes
evict the least recently viewed entries of the session when storage is full
or the session holds too many snapshots. Storage failures never propagate
to callers; caching is best-effort.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable
from urllib.parse import quote

from pydantic import ValidationError

from models.cache import CacheEntry, CacheStats
from services.storage import KeyValueStore

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "diff-cache:"
MAX_ENTRIES_PER_SESSION = 50
EVICTION_BATCH = 10


def session_prefix(session_id: str) -> str:
    """Key prefix shared by every entry of a session"""
    # Quoting keeps ':' out of the session part so prefixes never overlap
    return f"{CACHE_KEY_PREFIX}{quote(session_id, safe='')}:"


def cache_key(session_id: str, file_path: str) -> str:
    return f"{session_prefix(session_id)}{file_path}"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ContentCache:
    """Session-scoped cache of the content a user last viewed for each file"""

    def __init__(
        self,
        storage: KeyValueStore,
        max_entries_per_session: int = MAX_ENTRIES_PER_SESSION,
        eviction_batch: int = EVICTION_BATCH,
        clock: Callable[[], datetime] | None = None,
    ):
        self.storage = storage
        self.max_entries_per_session = max_entries_per_session
        self.eviction_batch = eviction_batch
        self._clock = clock or _utc_now
        self.stats = CacheStats()

    # ========== Storage Helpers ==========

    def _read(self, key: str) -> str | None:
        try:
            return self.storage.get(key)
        except Exception as e:
            logger.error("Failed to read cache key %s: %s", key, e)
            return None

    def _write(self, key: str, value: str) -> bool:
        try:
            return bool(self.storage.set(key, value))
        except Exception as e:
            logger.warning("Failed to write cache key %s: %s", key, e)
            return False

    def _remove(self, key: str) -> bool:
        try:
            self.storage.remove(key)
            return True
        except Exception as e:
            logger.error("Failed to remove cache key %s: %s", key, e)
            return False

    def _keys(self, prefix: str) -> list[str]:
        try:
            return [key for key in self.storage.keys() if key.startswith(prefix)]
        except Exception as e:
            logger.error("Failed to enumerate cache keys: %s", e)
            return []

    def _parse(self, raw: str) -> CacheEntry | None:
        try:
            return CacheEntry.model_validate_json(raw)
        except ValidationError:
            return None

    # ========== Public API ==========

    def get_cached_content(self, session_id: str, file_path: str) -> CacheEntry | None:
        """Return the last viewed snapshot, purging it if it is corrupt"""
        key = cache_key(session_id, file_path)
        raw = self._read(key)
        if raw is None:
            return None

        entry = self._parse(raw)
        if entry is None:
            logger.warning("Removing corrupt cache entry %s", key)
            self._remove(key)
            return None

        return entry

    def set_cached_content(self, session_id: str, file_path: str, content: str) -> bool:
        """Store `content` as the last viewed snapshot. Returns False if it could not be saved."""
        key = cache_key(session_id, file_path)
        try:
            entry = CacheEntry(
                file_path=file_path,
                session_id=session_id,
                content=content,
                viewed_at=self._clock(),
            )
        except ValidationError as e:
            logger.warning("Not caching %r for session %r: %s", file_path, session_id, e)
            return False
        payload = entry.model_dump_json()

        if not self._write(key, payload):
            evicted = self.evict_oldest(session_id, self.eviction_batch)
            logger.info("Evicted %d cache entries for session %s, retrying write", evicted, session_id)
            if not self._write(key, payload):
                logger.warning("Giving up caching %s for session %s", file_path, session_id)
                return False

        if len(self._keys(session_prefix(session_id))) > self.max_entries_per_session:
            # Corrupt keys are purged by the scan, so only valid entries count
            entries = self._session_entries(session_id)
            self._evict(entries, len(entries) - self.max_entries_per_session)

        return True

    def clear_cache(self, session_id: str, file_path: str | None = None) -> None:
        """Remove one file's snapshot, or every snapshot of the session"""
        if file_path is not None:
            self._remove(cache_key(session_id, file_path))
            return

        for key in self._keys(session_prefix(session_id)):
            self._remove(key)

    def evict_oldest(self, session_id: str, count: int) -> int:
        """Remove the `count` least recently viewed entries of a session.

        Corrupt entries met during the scan are purged but not counted.
        """
        if count <= 0:
            return 0
        return self._evict(self._session_entries(session_id), count)

    def _session_entries(self, session_id: str) -> list[tuple[datetime, str]]:
        """(viewed_at, key) of every valid entry of a session, oldest first"""
        entries: list[tuple[datetime, str]] = []
        for key in self._keys(session_prefix(session_id)):
            raw = self._read(key)
            if raw is None:
                continue
            entry = self._parse(raw)
            if entry is None:
                logger.warning("Removing corrupt cache entry %s", key)
                self._remove(key)
                continue
            entries.append((entry.viewed_at, key))

        entries.sort()
        return entries

    def _evict(self, entries: list[tuple[datetime, str]], count: int) -> int:
        if count <= 0:
            return 0

        evicted = 0
        for _, key in entries[:count]:
            if self._remove(key):
                evicted += 1
        return evicted

    def update_stats(self, session_id: str) -> CacheStats:
        """Scan storage and recompute usage figures"""
        prefix = session_prefix(session_id)
        stats = CacheStats()
        for key in self._keys(CACHE_KEY_PREFIX):
            stats.total_entries += 1
            if key.startswith(prefix):
                stats.session_entries += 1
            raw = self._read(key)
            if raw:
                stats.estimated_bytes += len(raw.encode("utf-8"))

        self.stats = stats
        return stats

    def clear_all_cache(self) -> None:
        """Remove every cache entry of every session, leaving other keys alone"""
        keys = self._keys(CACHE_KEY_PREFIX)
        removed = sum(1 for key in keys if self._remove(key))
        logger.info("Cleared %d diff cache entries", removed)
