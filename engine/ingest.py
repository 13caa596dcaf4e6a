"""Ingest counter: drain an uploaded byte stream, counting but never buffering it."""

import time
from typing import AsyncIterable, Callable, Optional

from common.logging_config import get_logger
from common.types import Direction, IngestResult, SessionState
from engine.exceptions import NoBodyError, PayloadTooLargeError, StreamReadFailedError
from engine.session import TransferSession

logger = get_logger(__name__)


async def _close_source(chunks) -> None:
    aclose = getattr(chunks, "aclose", None)
    if aclose is None:
        return
    try:
        await aclose()
    except Exception as e:
        logger.debug(f"Ignoring error while closing ingest source: {e}")


async def ingest(
    source: Optional[AsyncIterable[bytes]],
    cap: int,
    clock: Callable[[], float] = time.monotonic,
) -> IngestResult:
    """
    Consume `source` to end-of-stream and count its bytes.

    Only the current chunk is held in memory. Reading stops the moment the
    running total crosses `cap`, so a hostile client cannot make the server
    read an unbounded body. There are no retries: one call is one drain.

    Args:
        source: Async iterable of byte chunks, or None when the request has no body
        cap: Maximum number of bytes accepted
        clock: Monotonic time source in seconds

    Returns:
        IngestResult with the byte count and elapsed milliseconds

    Raises:
        NoBodyError: source is None (raised before timing starts)
        PayloadTooLargeError: more than `cap` bytes were received
        StreamReadFailedError: the source failed mid-read
    """
    if source is None:
        raise NoBodyError()

    session = TransferSession(direction=Direction.INGEST, started_at=clock(), cap=cap)
    chunks = source.__aiter__()

    while True:
        try:
            chunk = await chunks.__anext__()
        except StopAsyncIteration:
            break
        except Exception as e:
            session.finish(SessionState.FAILED)
            logger.warning(f"Ingest stream failed after {session.bytes_seen} bytes: {e}")
            raise StreamReadFailedError(session.bytes_seen, str(e)) from e

        session.record(len(chunk))
        if session.over_cap():
            session.finish(SessionState.CAP_EXCEEDED)
            logger.info(f"Ingest cap exceeded: read {session.bytes_seen} bytes, cap {cap}")
            await _close_source(chunks)
            raise PayloadTooLargeError(session.bytes_seen, cap)

    session.finish(SessionState.COMPLETED)
    result = IngestResult(bytes_received=session.bytes_seen, elapsed_ms=session.elapsed_ms(clock()))
    logger.debug(f"Ingest completed: {result.bytes_received} bytes in {result.elapsed_ms:.1f}ms")
    return result
