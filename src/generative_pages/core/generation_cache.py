"""Short-lived cache of generation state per target path.

Used to spot a duplicate request for a path that is still generating.
Entries expire after a TTL and are swept whenever a new generation is
recorded. Nothing here serializes concurrent requests, so a
check-then-create race between two callers remains possible.
"""

import time
from dataclasses import dataclass, field
from typing import Literal

from generative_pages.utils.logging import get_logger


logger = get_logger(__name__)

GenerationStatus = Literal["in_progress", "complete", "failed"]


@dataclass
class GenerationEntry:
    """Cached status for one target path."""

    path: str
    status: GenerationStatus
    query: str = ""
    page_url: str | None = None
    created_at: float = field(default_factory=time.monotonic)


class GenerationCache:
    """In-memory TTL cache keyed by ``generation:{path}``."""

    def __init__(self, ttl_seconds: float = 300.0):
        self._ttl = ttl_seconds
        self._entries: dict[str, GenerationEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    @staticmethod
    def _key(path: str) -> str:
        return f"generation:{path}"

    def _is_expired(self, entry: GenerationEntry) -> bool:
        age = time.monotonic() - entry.created_at
        return age > self._ttl

    def get(self, path: str) -> GenerationEntry | None:
        """Return the live entry for a path, dropping it if expired."""
        key = self._key(path)
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._is_expired(entry):
            del self._entries[key]
            return None
        return entry

    def is_in_progress(self, path: str) -> bool:
        entry = self.get(path)
        return entry is not None and entry.status == "in_progress"

    def mark_in_progress(self, path: str, query: str) -> None:
        """Record a new generation, first dropping every expired entry."""
        self.purge_expired()
        self._entries[self._key(path)] = GenerationEntry(
            path=path, status="in_progress", query=query
        )

    def mark_complete(self, path: str, page_url: str | None = None) -> None:
        entry = self.get(path)
        query = entry.query if entry else ""
        self._entries[self._key(path)] = GenerationEntry(
            path=path, status="complete", query=query, page_url=page_url
        )

    def mark_failed(self, path: str) -> None:
        entry = self.get(path)
        query = entry.query if entry else ""
        self._entries[self._key(path)] = GenerationEntry(
            path=path, status="failed", query=query
        )

    def purge_expired(self) -> int:
        """Remove expired entries. Returns the number removed."""
        expired = [k for k, v in self._entries.items() if self._is_expired(v)]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("Purged expired generation entries", count=len(expired))
        return len(expired)
