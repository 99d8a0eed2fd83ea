"""Per-address locks that exist only while someone holds or awaits them."""
from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Generic, Hashable, Iterator, TypeVar

_K = TypeVar("_K", bound=Hashable)


class _Entry:
    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.users = 0


class KeyedLocks(Generic[_K]):
    """A registry of mutexes keyed by address.

    Every thread that holds or waits for a key shares one lock. The entry is
    dropped when its last user leaves, so the registry never outgrows the
    number of in-flight operations.

    Example
    -------
    ::

        locks = KeyedLocks()
        with locks.hold(address):
            ...
    """

    def __init__(self) -> None:
        self._entries: dict[_K, _Entry] = {}
        self._guard = threading.Lock()

    @contextmanager
    def hold(self, key: _K) -> Iterator[None]:
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = _Entry()
                self._entries[key] = entry
            entry.users += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._guard:
                entry.users -= 1
                if entry.users == 0:
                    del self._entries[key]

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["KeyedLocks"]
