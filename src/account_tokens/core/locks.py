# src/account_tokens/core/locks.py
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List


class AccountLocks:
    """One lock per account name, kept only while someone holds or waits on it."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        # username -> [lock, number of holders and waiters]
        self._entries: Dict[str, List] = {}

    def _acquire_entry(self, username: str) -> threading.Lock:
        with self._guard:
            entry = self._entries.get(username)
            if entry is None:
                entry = self._entries[username] = [threading.Lock(), 0]
            entry[1] += 1
            return entry[0]

    def _release_entry(self, username: str) -> None:
        with self._guard:
            entry = self._entries[username]
            entry[1] -= 1
            if entry[1] == 0:
                del self._entries[username]

    @contextmanager
    def hold(self, username: str) -> Iterator[None]:
        lock = self._acquire_entry(username)
        try:
            with lock:
                yield
        finally:
            self._release_entry(username)

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)
