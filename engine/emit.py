"""Emit generators: paced byte streams built from a single reused slab.

An emitter is an explicit state machine. Each call to `produce_next(sink)`
runs one production cycle: it writes at most `batch` chunks into the sink,
stops early when the sink reports no spare capacity, and returns
ProduceStep.DONE once the session has ended. `stream_chunks` drives an
emitter for an ASGI response body, draining the sink through `yield` (which
suspends until the server accepted the previous chunk) and yielding to the
event loop after every cycle.

Sinks are duck-typed: `desired_size` (chunks the sink can still accept),
`cancelled` (consumer went away) and `write(chunk)`.
"""

import asyncio
import time
from collections import deque
from enum import Enum
from typing import AsyncIterator, Callable, Optional

from common.logging_config import get_logger
from common.types import Direction, SessionState
from engine.exceptions import ProductionFault
from engine.limits import LimitsPolicy
from engine.session import TransferSession
from engine.slab import Slab, build_slab

logger = get_logger(__name__)


class ProduceStep(str, Enum):
    """Result of one production cycle."""
    CONTINUE = "continue"
    DONE = "done"


class ChunkBuffer:
    """
    Bounded in-memory sink holding references to pending chunks.

    Holds at most `high_water_mark` chunks; since every full chunk is the
    same slab object, memory stays O(slab size) whatever the mark is.
    """

    def __init__(self, high_water_mark: int):
        if high_water_mark < 1:
            raise ValueError("high_water_mark must be at least 1")
        self.high_water_mark = high_water_mark
        self.cancelled = False
        self._chunks: deque = deque()

    @property
    def desired_size(self) -> int:
        return self.high_water_mark - len(self._chunks)

    def write(self, chunk: bytes) -> None:
        if self.cancelled:
            raise RuntimeError("Write to a cancelled sink")
        if self.desired_size <= 0:
            raise RuntimeError("Write to a full sink")
        self._chunks.append(chunk)

    def take(self) -> bytes:
        return self._chunks.popleft()

    def discard(self) -> int:
        """Drop pending chunks, returning how many bytes were dropped."""
        dropped = sum(len(chunk) for chunk in self._chunks)
        self._chunks.clear()
        return dropped

    def cancel(self) -> None:
        self.cancelled = True
        self._chunks.clear()

    def __len__(self) -> int:
        return len(self._chunks)


class Emitter:
    """
    Common production loop shared by the timed and bounded emitters.

    Subclasses decide the next chunk and when the session is over.
    """

    def __init__(self, slab: Slab, batch: int, session: TransferSession, clock: Callable[[], float]):
        if batch < 1:
            raise ValueError("batch must be at least 1")
        self.slab: Optional[Slab] = slab
        self.batch = batch
        self.session = session
        self.clock = clock

    @property
    def state(self) -> SessionState:
        return self.session.state

    @property
    def is_open(self) -> bool:
        return self.session.is_open

    @property
    def bytes_emitted(self) -> int:
        return self.session.bytes_seen

    def _next_chunk(self) -> bytes:
        raise NotImplementedError

    def _should_stop(self) -> bool:
        raise NotImplementedError

    def release(self) -> None:
        """Drop the slab reference so the buffer can be reclaimed."""
        self.slab = None

    def cancel(self) -> None:
        """Consumer went away: a normal termination, not an error."""
        self.session.finish(SessionState.CANCELLED)
        self.release()

    def fail(self) -> None:
        self.session.finish(SessionState.FAILED)
        self.release()

    def _complete(self) -> ProduceStep:
        self.session.finish(SessionState.COMPLETED)
        self.release()
        return ProduceStep.DONE

    def check_deadline(self) -> bool:
        """
        End the session if its deadline has passed.

        Returns:
            True when the session is (now) over because of the deadline
        """
        if self.is_open and self.session.expired(self.clock()):
            self._complete()
            return True
        return False

    def produce_next(self, sink) -> ProduceStep:
        """
        Run one production cycle against `sink`.

        Args:
            sink: Object exposing desired_size, cancelled and write(chunk)

        Returns:
            ProduceStep.CONTINUE when more cycles are needed, ProduceStep.DONE otherwise

        Raises:
            ProductionFault: the sink rejected a write
        """
        if not self.is_open:
            return ProduceStep.DONE
        if sink.cancelled:
            self.cancel()
            return ProduceStep.DONE
        if self._should_stop():
            return self._complete()

        for _ in range(self.batch):
            if sink.desired_size <= 0:
                return ProduceStep.CONTINUE
            chunk = self._next_chunk()
            try:
                sink.write(chunk)
            except Exception as e:
                self.fail()
                raise ProductionFault(self.bytes_emitted, str(e)) from e
            self.session.record(len(chunk))
            if self._should_stop():
                return self._complete()

        return ProduceStep.CONTINUE


class TimedEmitter(Emitter):
    """
    Emits the slab repeatedly until `duration` seconds have passed.

    The deadline is fixed at construction from the monotonic clock, so a
    slow scheduler cannot stretch the session. `max_bytes` is an optional
    hard ceiling on top of the deadline.
    """

    def __init__(
        self,
        slab: Slab,
        duration: float,
        batch: int,
        clock: Callable[[], float] = time.monotonic,
        max_bytes: Optional[int] = None,
    ):
        started_at = clock()
        session = TransferSession(
            direction=Direction.EMIT,
            started_at=started_at,
            deadline=started_at + duration,
            byte_target=max_bytes,
        )
        super().__init__(slab, batch, session, clock)
        self.duration = duration

    def _next_chunk(self) -> bytes:
        if self.session.byte_target is None:
            return self.slab.data
        return self.slab.head(self.session.byte_target - self.session.bytes_seen)

    def _should_stop(self) -> bool:
        return self.session.expired(self.clock()) or self.session.target_reached()


class BoundedEmitter(Emitter):
    """
    Emits exactly `byte_target` bytes, the last chunk cut to the remainder.
    """

    def __init__(
        self,
        slab: Slab,
        byte_target: int,
        batch: int = 16,
        clock: Callable[[], float] = time.monotonic,
    ):
        if byte_target < 0:
            raise ValueError("byte_target cannot be negative")
        session = TransferSession(
            direction=Direction.EMIT,
            started_at=clock(),
            byte_target=byte_target,
        )
        super().__init__(slab, batch, session, clock)

    def _next_chunk(self) -> bytes:
        return self.slab.head(self.session.byte_target - self.session.bytes_seen)

    def _should_stop(self) -> bool:
        return self.session.target_reached()


async def stream_chunks(emitter: Emitter, yield_interval: float = 0.0) -> AsyncIterator[bytes]:
    """
    Drive `emitter` as an async byte iterator suitable for a streaming response.

    Emit never raises to the consumer once streaming started: cancellation
    propagates as the consumer expects, and any fault just ends the stream.

    Args:
        emitter: A fresh TimedEmitter or BoundedEmitter
        yield_interval: Seconds to sleep after every production cycle

    Yields:
        Chunks in production order
    """
    buffer = ChunkBuffer(high_water_mark=emitter.batch)
    sent = 0
    cycles = 0
    try:
        while True:
            step = emitter.produce_next(buffer)
            cycles += 1
            while len(buffer):
                chunk = buffer.take()
                yield chunk
                sent += len(chunk)
                if emitter.check_deadline():
                    buffer.discard()
            if step is ProduceStep.DONE or not emitter.is_open:
                break
            await asyncio.sleep(yield_interval)
        logger.debug(f"Emit finished: state={emitter.state.value} sent={sent} cycles={cycles}")
    except (GeneratorExit, asyncio.CancelledError):
        buffer.cancel()
        emitter.cancel()
        logger.info(f"Emit cancelled by consumer after {sent} bytes")
        raise
    except Exception as e:
        emitter.fail()
        logger.error(f"Emit stream closed early after {sent} bytes: {e}", exc_info=True)
    finally:
        emitter.release()


def open_timed_stream(
    limits: LimitsPolicy,
    duration,
    slab_bytes,
    batch,
    clock: Callable[[], float] = time.monotonic,
) -> AsyncIterator[bytes]:
    """
    Build a timed emit session from raw request parameters.

    Every parameter is clamped by `limits`; the deadline starts now.
    """
    emitter = TimedEmitter(
        slab=build_slab(slab_bytes, limits),
        duration=limits.duration(duration),
        batch=limits.batch(batch),
        clock=clock,
        max_bytes=limits.timed_emit_byte_ceiling,
    )
    logger.debug(
        f"Timed emit opened: duration={emitter.duration}s slab={emitter.slab.size} batch={emitter.batch}"
    )
    return stream_chunks(emitter, limits.yield_interval)


def open_bounded_stream(limits: LimitsPolicy, byte_target: int, chunk_bytes=None) -> AsyncIterator[bytes]:
    """
    Build a size-bounded emit session of exactly `byte_target` bytes.

    `byte_target` must already be clamped (callers also need it for Content-Length).
    """
    slab = build_slab(chunk_bytes if chunk_bytes is not None else limits.legacy_chunk_bytes, limits)
    emitter = BoundedEmitter(slab=slab, byte_target=byte_target, batch=limits.default_batch)
    return stream_chunks(emitter, limits.yield_interval)
