"""
Unit Tests: Keyed Lock Arena
"""

import asyncio

import pytest

from config_server.data.storage import KeyedLockArena


@pytest.mark.unit
class TestKeyedLockArena:
    """Test per-key serialization and cleanup."""

    @pytest.mark.asyncio
    async def test_same_key_is_serialized(self):
        arena = KeyedLockArena()
        events = []

        async def worker(name: str):
            async with arena.hold("k"):
                events.append(f"{name}-start")
                await asyncio.sleep(0.01)
                events.append(f"{name}-end")

        await asyncio.gather(worker("a"), worker("b"), worker("c"))

        for i in range(0, len(events), 2):
            assert events[i].endswith("-start")
            assert events[i + 1] == events[i].replace("-start", "-end")

    @pytest.mark.asyncio
    async def test_different_keys_run_concurrently(self):
        arena = KeyedLockArena()
        inside = asyncio.Event()
        release = asyncio.Event()

        async def holder():
            async with arena.hold("first"):
                inside.set()
                await release.wait()

        task = asyncio.create_task(holder())
        await inside.wait()

        # Would deadlock if "second" shared a lock with "first"
        async with arena.hold("second"):
            assert "first" in arena
            assert "second" in arena

        release.set()
        await task

    @pytest.mark.asyncio
    async def test_entries_dropped_when_uncontended(self):
        arena = KeyedLockArena()

        async with arena.hold(("json", "a")):
            assert len(arena) == 1

        assert len(arena) == 0

    @pytest.mark.asyncio
    async def test_entry_dropped_after_error(self):
        arena = KeyedLockArena()

        with pytest.raises(RuntimeError):
            async with arena.hold("k"):
                raise RuntimeError("boom")

        assert "k" not in arena

    @pytest.mark.asyncio
    async def test_entry_kept_while_waiters_remain(self):
        arena = KeyedLockArena()
        release = asyncio.Event()
        release_waiter = asyncio.Event()
        acquired = asyncio.Event()

        async def holder():
            async with arena.hold("k"):
                acquired.set()
                await release.wait()

        async def waiter():
            async with arena.hold("k"):
                await release_waiter.wait()

        first = asyncio.create_task(holder())
        await acquired.wait()
        second = asyncio.create_task(waiter())
        await asyncio.sleep(0)

        release.set()
        await first
        assert "k" in arena

        release_waiter.set()
        await second
        assert "k" not in arena
