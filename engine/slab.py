"""Reusable filler buffer written repeatedly by emitters."""

from dataclasses import dataclass, field
from typing import Optional

from engine.limits import LimitsPolicy

_RAMP = bytes(range(256))


def _fill(size: int, pattern: str) -> bytes:
    if pattern == "alternating":
        repeats, remainder = divmod(size, len(_RAMP))
        return _RAMP * repeats + _RAMP[:remainder]
    return bytes(size)


@dataclass(frozen=True)
class Slab:
    """
    Immutable block of filler bytes.

    Content carries no information; it only has to be cheap to build.
    Emitters hand out `data` itself for full chunks, never a copy.
    """
    size: int
    pattern: str = "zeros"
    data: bytes = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if self.size <= 0:
            raise ValueError(f"Slab size must be positive, got {self.size}")
        object.__setattr__(self, "data", _fill(self.size, self.pattern))

    def head(self, length: int) -> bytes:
        """Return the first `length` bytes; the whole slab object when length covers it."""
        if length >= self.size:
            return self.data
        return self.data[:length]


def build_slab(size, limits: LimitsPolicy, pattern: Optional[str] = None) -> Slab:
    """
    Clamp `size` to the policy's slab range, then allocate.

    Args:
        size: Requested slab size in bytes (raw values are clamped, never rejected)
        limits: Active limits policy
        pattern: Fill pattern override; defaults to limits.slab_pattern

    Returns:
        A new Slab owned by one emit session
    """
    return Slab(size=limits.slab_bytes(size), pattern=pattern or limits.slab_pattern)
