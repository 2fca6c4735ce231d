"""Per-aggregate mutual exclusion for league and team mutations."""

import threading
from contextlib import contextmanager
from typing import Iterator


class AggregateLocks:
    """Hands out one lock per aggregate key (e.g. ``"league:abc"``).

    Locks are created lazily and kept for the process lifetime; the number
    of leagues and teams in a hobby deployment is small.
    """

    def __init__(self):
        self._locks: dict[str, threading.RLock] = {}
        self._registry_lock = threading.Lock()

    def get(self, key: str) -> threading.RLock:
        with self._registry_lock:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
        return lock

    @contextmanager
    def hold(self, *keys: str) -> Iterator[None]:
        """Acquire several aggregate locks in a stable order."""
        locks = [self.get(key) for key in sorted(set(keys))]
        for lock in locks:
            lock.acquire()
        try:
            yield
        finally:
            for lock in reversed(locks):
                lock.release()


def league_key(league_id: str) -> str:
    return f"league:{league_id}"


def team_key(team_id: str) -> str:
    return f"team:{team_id}"
