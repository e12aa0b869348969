from typing import AsyncIterable, AsyncIterator, Callable

Predicate = Callable[[int], bool]


def is_newline(byte: int) -> bool:
    return byte == 0x0A


async def resplit(
    chunks: AsyncIterable[bytes], predicate: Predicate
) -> AsyncIterator[bytes]:
    """
    Reframes a stream of arbitrarily sized byte chunks into records.

    Every record ends with (and includes) a byte matching `predicate`, except
    possibly the last one: whatever is left in the buffer when the upstream
    ends is emitted as a final, undelimited record. If the upstream fails the
    leftover is emitted first and the error is raised on the following pull.

        "ab", "c\\nde", "f"  ->  "abc\\n", "def"
    """

    buf = bytearray()
    # bytes before this offset are known not to match, each byte is tested once
    scanned = 0

    try:
        async for chunk in chunks:
            buf.extend(chunk)

            start = 0
            for pos in range(scanned, len(buf)):
                if predicate(buf[pos]):
                    yield bytes(buf[start : pos + 1])
                    start = pos + 1

            del buf[:start]
            scanned = len(buf)

    except Exception:
        if buf:
            leftover = bytes(buf)
            buf.clear()
            yield leftover
        raise

    if buf:
        yield bytes(buf)


def split_lines(chunks: AsyncIterable[bytes]) -> AsyncIterator[bytes]:
    return resplit(chunks, is_newline)
