import asyncio

import pytest

from kubeapi.tools.streams import AsyncStream


class Source:
    def __init__(self, items, error=None) -> None:
        self.items = items
        self.error = error
        self.pulled = 0
        self.finalized = False

    async def gen(self):
        try:
            for item in self.items:
                self.pulled += 1
                yield item

            if self.error is not None:
                raise self.error
        finally:
            self.finalized = True


@pytest.mark.asyncio
async def test_items_are_produced_lazily():
    source = Source([1, 2, 3])
    stream = AsyncStream(source.gen(), name="numbers")

    assert source.pulled == 0
    assert await stream.__anext__() == 1
    assert source.pulled == 1

    assert await stream.collect() == [2, 3]
    assert stream.closed
    assert source.finalized


@pytest.mark.asyncio
async def test_error_ends_the_stream():
    source = Source([1], error=RuntimeError("boom"))
    stream = AsyncStream(source.gen())

    assert await stream.__anext__() == 1
    with pytest.raises(RuntimeError):
        await stream.__anext__()

    assert stream.closed
    assert [item async for item in stream] == []


@pytest.mark.asyncio
async def test_context_manager_closes_on_break():
    source = Source([1, 2, 3])

    async with AsyncStream(source.gen()) as stream:
        async for item in stream:
            break

    assert item == 1
    assert stream.closed
    assert source.finalized
    assert source.pulled == 1


@pytest.mark.asyncio
async def test_aclose_is_idempotent():
    source = Source([1])
    stream = AsyncStream(source.gen())

    await stream.aclose()
    await stream.aclose()

    assert stream.closed
    assert repr(stream) == "<AsyncStream name=None, closed=True>"


@pytest.mark.asyncio
async def test_cancelling_the_consumer_finalizes_the_source():
    started = asyncio.Event()
    finalized = asyncio.Event()

    async def forever():
        try:
            yield 1
            started.set()
            await asyncio.sleep(3600)
            yield 2
        finally:
            finalized.set()

    stream = AsyncStream(forever())

    async def consume():
        async for _ in stream:
            pass

    task = asyncio.ensure_future(consume())
    await started.wait()
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task

    assert finalized.is_set()
    assert stream.closed
