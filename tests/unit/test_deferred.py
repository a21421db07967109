"""DeferredWriter 테스트 (fire-and-forget 쓰기)"""
import asyncio

import pytest

from src.engine import DeferredWriter, get_deferred_writer


class TestDeferredWriter:
    """백그라운드 쓰기 테스트"""

    @pytest.mark.asyncio
    async def test_spawn_and_drain(self):
        writer = DeferredWriter()
        done = []

        async def write():
            await asyncio.sleep(0)
            done.append(1)

        writer.spawn(write(), label="test")
        assert writer.pending == 1

        cancelled = await writer.drain(timeout=1.0)

        assert cancelled == 0
        assert done == [1]
        assert writer.pending == 0

    @pytest.mark.asyncio
    async def test_failure_is_logged_not_raised(self):
        writer = DeferredWriter()

        async def broken():
            raise RuntimeError("redis down")

        task = writer.spawn(broken(), label="broken")
        cancelled = await writer.drain(timeout=1.0)

        assert cancelled == 0
        assert task.done()
        assert task.exception() is None

    @pytest.mark.asyncio
    async def test_drain_timeout_cancels(self):
        writer = DeferredWriter()
        writer.spawn(asyncio.sleep(10), label="slow")

        cancelled = await writer.drain(timeout=0.01)

        assert cancelled == 1
        assert writer.pending == 0

    @pytest.mark.asyncio
    async def test_drain_empty(self):
        assert await DeferredWriter().drain(timeout=0.01) == 0

    def test_singleton(self):
        assert get_deferred_writer() is get_deferred_writer()
