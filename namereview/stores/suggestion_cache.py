"""In-memory TTL cache for naming suggestions."""

from __future__ import annotations

import hashlib
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Dict, Optional

from ..logging import get_logger
from ..models import SymbolContext

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from ..llm.schema import NamingSuggestion

DEFAULT_TTL_SECONDS = 3600.0

logger = get_logger("stores.suggestions")


@dataclass(frozen=True)
class CacheEntry:
    """A cached suggestion with its creation time and lifetime in seconds."""

    suggestion: "NamingSuggestion"
    created_at: float
    ttl: float

    def expired(self, now: float) -> bool:
        return now - self.created_at > self.ttl


def fingerprint(context: SymbolContext) -> str:
    """Return the cache key for a symbol context."""
    data = f"{context.file}:{context.old_name}:{context.declaration_text}"
    return hashlib.sha256(data.encode("utf-8")).hexdigest()


class SuggestionCache:
    """Stores suggestions keyed by context fingerprint; expired entries are evicted on lookup."""

    def __init__(
        self,
        ttl: float = DEFAULT_TTL_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, key: str) -> Optional["NamingSuggestion"]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expired(self._clock()):
            del self._entries[key]
            return None
        logger.debug("Cache hit for key: %s", key[:8])
        return entry.suggestion

    def store(self, key: str, suggestion: "NamingSuggestion", *, ttl: float | None = None) -> None:
        self._entries[key] = CacheEntry(
            suggestion=suggestion,
            created_at=self._clock(),
            ttl=self.ttl if ttl is None else ttl,
        )

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["CacheEntry", "DEFAULT_TTL_SECONDS", "SuggestionCache", "fingerprint"]
