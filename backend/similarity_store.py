"""Per-user reading history: recency, exact-combination and similarity checks."""

import threading
from collections import defaultdict
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

from config import GuardConfig
from simhash import similarity


@dataclass(frozen=True)
class ReadingEntry:
    created_at: int  # epoch ms
    text_hash: int
    symbol_perm: str


class _UserLock:
    __slots__ = ("lock", "users")

    def __init__(self):
        self.lock = threading.Lock()
        # holders plus waiters
        self.users = 0


class SimilarityStore:
    """Append-only, in-memory reading history keyed by user id.

    Histories are never trimmed on write; every read only looks at a bounded
    tail. Callers that check-then-record must hold ``user_lock(user_id)`` for
    the whole cycle so two requests for one user cannot both pass the check.
    """

    def __init__(self, config: GuardConfig):
        self.config = config
        self._readings: dict[str, list[ReadingEntry]] = defaultdict(list)
        self._user_locks: dict[str, _UserLock] = {}
        self._registry_lock = threading.Lock()

    @contextmanager
    def user_lock(self, user_id: str) -> Iterator[None]:
        """Hold the user's lock; it is dropped once no caller holds or awaits it."""
        with self._registry_lock:
            entry = self._user_locks.get(user_id)
            if entry is None:
                entry = self._user_locks[user_id] = _UserLock()
            entry.users += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._registry_lock:
                entry.users -= 1
                if entry.users == 0:
                    del self._user_locks[user_id]

    def active_lock_count(self) -> int:
        with self._registry_lock:
            return len(self._user_locks)

    def record_reading(self, user_id: str, entry: ReadingEntry) -> None:
        self._readings[user_id].append(entry)

    def recent_entries(self, user_id: str, limit: Optional[int] = None) -> list[ReadingEntry]:
        """Last *limit* entries for the user, oldest first."""
        n = self.config.max_recent if limit is None else limit
        if n <= 0:
            return []
        history = self._readings.get(user_id)
        if not history:
            return []
        return history[-n:]

    def is_exact_combo_recent(self, user_id: str, permutation_key: str, now: int) -> bool:
        cutoff = now - self.config.exact_combo_block_ms
        return any(
            e.created_at >= cutoff and e.symbol_perm == permutation_key
            for e in self.recent_entries(user_id, self.config.exact_combo_lookback)
        )

    def is_too_similar(self, user_id: str, text_hash: int) -> bool:
        threshold = self.config.simhash_sim_threshold
        return any(
            similarity(text_hash, e.text_hash) >= threshold
            for e in self.recent_entries(user_id)
        )

    def history_size(self, user_id: str) -> int:
        return len(self._readings.get(user_id) or ())
