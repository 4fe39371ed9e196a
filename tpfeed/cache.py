from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from .config import DEFAULT_CACHE_TTL_SECONDS
from .models import WorkoutResult


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CacheEntry:
    data: WorkoutResult
    captured_at: datetime

    def age_seconds(self, now: datetime | None = None) -> float:
        current = now or _utc_now()
        return max((current - self.captured_at).total_seconds(), 0.0)


class WorkoutCache:
    """Latest merged result per account key, valid for ``ttl_seconds``.

    Entries are overwritten in place by ``put`` and never evicted. The guard
    only protects the mapping itself; two requests that both see a stale
    entry will both capture, and the last ``put`` wins.
    """

    def __init__(self, ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS):
        self.ttl = timedelta(seconds=ttl_seconds)
        self._entries: dict[str, CacheEntry] = {}
        self._guard = threading.Lock()

    def lookup(self, account: str) -> CacheEntry | None:
        with self._guard:
            return self._entries.get(account)

    def is_fresh(self, entry: CacheEntry, now: datetime | None = None) -> bool:
        current = now or _utc_now()
        return (current - entry.captured_at) < self.ttl

    def get(self, account: str, now: datetime | None = None) -> tuple[WorkoutResult | None, bool]:
        entry = self.lookup(account)
        if entry is None:
            return None, False
        return entry.data, self.is_fresh(entry, now)

    def put(self, account: str, result: WorkoutResult, at: datetime | None = None) -> None:
        entry = CacheEntry(data=result, captured_at=at or _utc_now())
        with self._guard:
            self._entries[account] = entry

    def age_seconds(self, account: str, now: datetime | None = None) -> float | None:
        entry = self.lookup(account)
        if entry is None:
            return None
        return entry.age_seconds(now)
