"""Per-request transfer session bookkeeping."""

from dataclasses import dataclass
from typing import Optional

from common.types import Direction, SessionState


@dataclass
class TransferSession:
    """
    Mutable state of a single ingest or emit transfer.

    Owned by the request handler that created it and discarded when the
    handler returns; never shared between requests.
    """
    direction: Direction
    started_at: float
    cap: Optional[int] = None
    deadline: Optional[float] = None
    byte_target: Optional[int] = None
    bytes_seen: int = 0
    state: SessionState = SessionState.OPEN

    @property
    def is_open(self) -> bool:
        return self.state is SessionState.OPEN

    def record(self, count: int) -> int:
        """Add `count` transferred bytes and return the running total."""
        if count < 0:
            raise ValueError("Byte count cannot be negative")
        self.bytes_seen += count
        return self.bytes_seen

    def over_cap(self) -> bool:
        return self.cap is not None and self.bytes_seen > self.cap

    def target_reached(self) -> bool:
        return self.byte_target is not None and self.bytes_seen >= self.byte_target

    def expired(self, now: float) -> bool:
        return self.deadline is not None and now >= self.deadline

    def finish(self, state: SessionState) -> None:
        """Move to a terminal state. The first terminal state wins."""
        if self.state is SessionState.OPEN:
            self.state = state

    def elapsed_ms(self, now: float) -> float:
        return max(0.0, (now - self.started_at) * 1000.0)
