"""
Keyed Lock Arena

Serializes coroutines working on the same key without serializing
unrelated keys. Locks are created on first use and dropped as soon as no
coroutine holds or waits on them, so the arena only ever holds entries for
keys with operations in flight.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Hashable


class _Entry:
    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = asyncio.Lock()
        self.users = 0


class KeyedLockArena:
    """
    Per-key asyncio locks with reference-counted cleanup.

    Must be used from a single event loop. Entry bookkeeping happens
    between awaits, so no guard lock is needed around the dict.

    Example:
        >>> arena = KeyedLockArena()
        >>> async with arena.hold(("json", "app1")):
        ...     ...  # exclusive for this key
    """

    def __init__(self) -> None:
        self._entries: Dict[Hashable, _Entry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._entries

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        """Acquire the lock for `key` for the duration of the block."""
        entry = self._entries.get(key)
        if entry is None:
            entry = self._entries[key] = _Entry()
        entry.users += 1

        try:
            async with entry.lock:
                yield
        finally:
            entry.users -= 1
            if entry.users == 0:
                del self._entries[key]
