"""Shared data type definitions (transfer directions, session states, results)."""

from dataclasses import dataclass
from enum import Enum


class Direction(str, Enum):
    """Data-plane direction of a transfer session."""
    INGEST = "ingest"
    EMIT = "emit"


class SessionState(str, Enum):
    """Lifecycle state of a transfer session."""
    OPEN = "open"
    COMPLETED = "completed"
    CAP_EXCEEDED = "cap_exceeded"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class IngestResult:
    """
    Outcome of a successful ingest drain.
    """
    bytes_received: int
    elapsed_ms: float
