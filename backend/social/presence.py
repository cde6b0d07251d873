"""
Process-local "last active" tracker.

Every authenticated action stamps the acting user with the current wall-clock
time in milliseconds; a user counts as online while that stamp is younger than
the online window (5 s by default). Nothing is persisted and nothing is
evicted, so the map grows with the number of distinct users seen by this
process.

Writes are a single dict item assignment and reads a single ``dict.get``.
Both are atomic in CPython (and per-object locked on free-threaded builds), so
concurrent ``touch``/``is_online`` callers need no tracker-wide lock. Two
touches of the same key race as last-writer-wins, and a reader may see the
value from just before a concurrent write.
"""

import time
from typing import Callable, Dict, Optional

DEFAULT_ONLINE_WINDOW_MS = 5000


def now_ms() -> int:
    return time.time_ns() // 1_000_000


class PresenceTracker:
    def __init__(
        self,
        window_ms: int = DEFAULT_ONLINE_WINDOW_MS,
        clock: Callable[[], int] = now_ms,
    ):
        self.window_ms = window_ms
        self.clock = clock
        self._last_seen: Dict[str, int] = {}

    def touch(self, username: str) -> None:
        self._last_seen[username] = self.clock()

    def last_seen(self, username: str) -> Optional[int]:
        return self._last_seen.get(username)

    def is_online(self, username: str, now: Optional[int] = None) -> bool:
        seen = self._last_seen.get(username)
        if seen is None:
            return False
        if now is None:
            now = self.clock()
        return now - seen < self.window_ms

    def __len__(self) -> int:
        return len(self._last_seen)
