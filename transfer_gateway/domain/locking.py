"""Per-account exclusive locks acquired in a fixed global order"""

import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List


class _AccountLock:
    __slots__ = ("lock", "holders")

    def __init__(self):
        self.lock = threading.Lock()
        self.holders = 0  # Threads holding or waiting on this lock


class AccountLockManager:
    """
    Hands out one lock per account id.

    Locks are always taken in ascending id order, so two transfers over the
    same pair in opposite directions cannot deadlock. Duplicate ids collapse
    to a single lock. An id's entry lives only while some thread holds or
    waits on it, so the map stays bounded by in-flight transfers.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[int, _AccountLock] = {}

    def _checkout(self, account_id: int) -> _AccountLock:
        with self._guard:
            entry = self._locks.get(account_id)
            if entry is None:
                entry = self._locks[account_id] = _AccountLock()
            entry.holders += 1
            return entry

    def _checkin(self, account_id: int) -> None:
        with self._guard:
            entry = self._locks[account_id]
            entry.holders -= 1
            if entry.holders == 0:
                del self._locks[account_id]

    @contextmanager
    def acquire(self, *account_ids: int) -> Iterator[List[int]]:
        """Hold the locks for all given accounts; yields the ordered ids"""
        ordered = sorted(set(account_ids))
        checked_out: List[int] = []
        held: List[_AccountLock] = []
        try:
            for account_id in ordered:
                entry = self._checkout(account_id)
                checked_out.append(account_id)
                entry.lock.acquire()
                held.append(entry)
            yield ordered
        finally:
            for entry in reversed(held):
                entry.lock.release()
            for account_id in reversed(checked_out):
                self._checkin(account_id)

    def active_count(self) -> int:
        """Number of accounts currently locked or awaited"""
        with self._guard:
            return len(self._locks)
