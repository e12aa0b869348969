from typing import AsyncGenerator, AsyncIterator, Generic, Optional, TypeVar

T = TypeVar("T")


class AsyncStream(AsyncIterator[T], Generic[T]):
    """
    A lazy, closable sequence backed by an async generator.

    Items are produced only when the consumer pulls them. A terminal error is
    raised from the pull that would have produced the next item, after which
    the stream is exhausted.

    Leaving the stream early must release whatever the generator holds (an
    open HTTP response for instance), so use it as a context manager:

        async with client.watch(scope) as stream:
            async for event in stream:
                if done(event):
                    break  # __aexit__ calls aclose()

    Cancelling the consuming task has the same effect.
    """

    def __init__(self, gen: AsyncGenerator[T, None], *, name: Optional[str] = None):
        self._gen = gen
        self._closed = False
        self.name = name

    def __repr__(self) -> str:
        return "<%s name=%r, closed=%r>" % (
            self.__class__.__name__,
            self.name,
            self._closed,
        )

    @property
    def closed(self) -> bool:
        return self._closed

    def __aiter__(self) -> "AsyncStream[T]":
        return self

    async def __anext__(self) -> T:
        if self._closed:
            raise StopAsyncIteration

        try:
            return await self._gen.__anext__()
        except BaseException:
            # exhausted, failed or cancelled: there is nothing more to pull
            self._closed = True
            raise

    async def aclose(self) -> None:
        if self._closed:
            return

        self._closed = True
        await self._gen.aclose()

    async def __aenter__(self) -> "AsyncStream[T]":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def collect(self):
        "Drains the stream into a list"

        async with self:
            return [item async for item in self]
