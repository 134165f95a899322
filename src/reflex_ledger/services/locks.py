"""Per-key mutual exclusion for read-compare-write sequences."""

from __future__ import annotations

from collections.abc import Hashable, Iterator
from contextlib import contextmanager
from threading import Lock


class KeyedLock:
    """A family of locks addressed by key.

    Locks are created on first use and dropped once no thread holds or waits
    on them, so the table only grows with the number of contended keys.
    """

    def __init__(self) -> None:
        self._guard = Lock()
        self._locks: dict[Hashable, tuple[Lock, int]] = {}

    @contextmanager
    def hold(self, *key: Hashable) -> Iterator[None]:
        """Hold the lock for ``key`` for the duration of the block."""
        with self._guard:
            lock, users = self._locks.get(key, (None, 0))
            if lock is None:
                lock = Lock()
            self._locks[key] = (lock, users + 1)

        lock.acquire()
        try:
            yield
        finally:
            lock.release()
            with self._guard:
                _, users = self._locks[key]
                if users <= 1:
                    del self._locks[key]
                else:
                    self._locks[key] = (lock, users - 1)

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


_LEDGER_LOCKS = KeyedLock()


def get_ledger_locks() -> KeyedLock:
    """Return the process-wide ledger lock table."""
    return _LEDGER_LOCKS
