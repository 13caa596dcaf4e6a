"""Process-wide limits policy and request parameter clamping.

Request parameters are never rejected: a missing or malformed value falls
back to its default and an out-of-range value is pulled to the nearest bound.
"""

import math
import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from common import constants
from common.constants import MIB


def _parse_number(raw: Any) -> Optional[float]:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        value = float(str(raw).strip())
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def clamp_float(raw: Any, default: float, low: float, high: float) -> float:
    """
    Parse raw as a number and clamp it to [low, high].

    Args:
        raw: Query string value, number, or None
        default: Used when raw is missing, non-numeric, or not finite
        low: Lower bound (inclusive)
        high: Upper bound (inclusive)

    Returns:
        Clamped float value
    """
    value = _parse_number(raw)
    if value is None:
        value = default
    return min(max(value, low), high)


def clamp_int(raw: Any, default: int, low: int, high: int) -> int:
    """
    Integer variant of clamp_float. Fractional input is truncated toward zero.
    """
    value = _parse_number(raw)
    if value is None:
        value = default
    return int(min(max(int(value), low), high))


@dataclass(frozen=True)
class LimitsPolicy:
    """
    Read-only resource limits shared by every transfer session.

    Built once at process start and passed by reference into each request.
    """
    max_ingest_bytes: int = constants.MAX_INGEST_BYTES
    legacy_ingest_bytes: int = constants.LEGACY_INGEST_BYTES
    default_duration: float = constants.DEFAULT_DURATION_SECONDS
    min_duration: float = constants.MIN_DURATION_SECONDS
    max_duration: float = constants.MAX_DURATION_SECONDS
    min_slab_bytes: int = constants.MIN_SLAB_BYTES
    max_slab_bytes: int = constants.MAX_SLAB_BYTES
    default_slab_bytes: int = constants.DEFAULT_SLAB_BYTES
    default_batch: int = constants.DEFAULT_BATCH
    max_batch: int = constants.MAX_BATCH
    legacy_chunk_bytes: int = constants.LEGACY_CHUNK_BYTES
    default_byte_target: int = constants.DEFAULT_BYTE_TARGET
    max_byte_target: int = constants.MAX_BYTE_TARGET
    timed_emit_byte_ceiling: Optional[int] = None
    yield_interval: float = 0.0
    slab_pattern: str = "zeros"

    def duration(self, raw: Any) -> float:
        """Timed session length in seconds, within [min_duration, max_duration]."""
        return clamp_float(raw, self.default_duration, self.min_duration, self.max_duration)

    def slab_bytes(self, raw: Any) -> int:
        return clamp_int(raw, self.default_slab_bytes, self.min_slab_bytes, self.max_slab_bytes)

    def slab_bytes_from_mib(self, raw: Any) -> int:
        """Slab size given in whole MiB (the download route's slabMiB parameter)."""
        low = max(1, self.min_slab_bytes // MIB)
        high = max(low, self.max_slab_bytes // MIB)
        mib = clamp_int(raw, self.default_slab_bytes // MIB, low, high)
        return self.slab_bytes(mib * MIB)

    def batch(self, raw: Any) -> int:
        return clamp_int(raw, self.default_batch, 1, self.max_batch)

    def byte_target(self, raw: Any) -> int:
        return clamp_int(raw, self.default_byte_target, 0, self.max_byte_target)

    def ingest_cap(self, raw: Any = None) -> int:
        """Per-request ingest cap; a caller may lower it but never raise it."""
        return clamp_int(raw, self.max_ingest_bytes, 0, self.max_ingest_bytes)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "LimitsPolicy":
        """
        Build the policy from PROBE_* environment variables.

        Malformed values fall back to the built-in defaults.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            LimitsPolicy instance
        """
        env = os.environ if environ is None else environ
        base = cls()

        def int_var(name: str, default: int, low: int = 0, high: int = constants.MAX_BYTE_TARGET * 4) -> int:
            return clamp_int(env.get(name), default, low, high)

        def float_var(name: str, default: float, low: float = 0.0, high: float = 3600.0) -> float:
            return clamp_float(env.get(name), default, low, high)

        min_slab = int_var("PROBE_MIN_SLAB_BYTES", base.min_slab_bytes, 1)
        max_slab = int_var("PROBE_MAX_SLAB_BYTES", base.max_slab_bytes, min_slab)
        min_duration = float_var("PROBE_MIN_DURATION", base.min_duration, 0.0)
        max_duration = float_var("PROBE_MAX_DURATION", base.max_duration, max(min_duration, 1.0))
        max_batch = int_var("PROBE_MAX_BATCH", base.max_batch, 1, 4096)
        max_byte_target = int_var("PROBE_MAX_BYTE_TARGET", base.max_byte_target)

        ceiling = None
        if env.get("PROBE_TIMED_EMIT_BYTE_CEILING"):
            ceiling = int_var("PROBE_TIMED_EMIT_BYTE_CEILING", 0) or None

        pattern = env.get("PROBE_SLAB_PATTERN", base.slab_pattern).strip().lower()
        if pattern not in ("zeros", "alternating"):
            pattern = base.slab_pattern

        return cls(
            max_ingest_bytes=int_var("PROBE_MAX_INGEST_BYTES", base.max_ingest_bytes),
            legacy_ingest_bytes=int_var("PROBE_LEGACY_INGEST_BYTES", base.legacy_ingest_bytes),
            default_duration=float_var("PROBE_DEFAULT_DURATION", base.default_duration, min_duration, max_duration),
            min_duration=min_duration,
            max_duration=max_duration,
            min_slab_bytes=min_slab,
            max_slab_bytes=max_slab,
            default_slab_bytes=int_var("PROBE_DEFAULT_SLAB_BYTES", base.default_slab_bytes, min_slab, max_slab),
            default_batch=int_var("PROBE_DEFAULT_BATCH", base.default_batch, 1, max_batch),
            max_batch=max_batch,
            legacy_chunk_bytes=int_var("PROBE_LEGACY_CHUNK_BYTES", base.legacy_chunk_bytes, min_slab, max_slab),
            default_byte_target=int_var("PROBE_DEFAULT_BYTE_TARGET", base.default_byte_target, 0, max_byte_target),
            max_byte_target=max_byte_target,
            timed_emit_byte_ceiling=ceiling,
            yield_interval=float_var("PROBE_YIELD_INTERVAL", base.yield_interval, 0.0, 1.0),
            slab_pattern=pattern,
        )
