"""Utility functions for CLI operations."""

from common.constants import MIB


def to_mib(byte_count: float) -> float:
    """Convert bytes to binary mebibytes (2^20)."""
    return byte_count / MIB


def to_mbps(byte_count: float, seconds: float) -> float:
    """
    Convert a transfer to decimal megabits per second (10^6 bits).

    Args:
        byte_count: Bytes transferred
        seconds: Elapsed time; values under a microsecond are treated as one microsecond

    Returns:
        Throughput in Mbit/s
    """
    return (byte_count * 8 / 1e6) / max(seconds, 1e-6)


def format_file_size(size_bytes: int) -> str:
    """
    Format a byte count to human-readable format with appropriate unit.

    Uses binary units (1024-based) and automatically selects the most
    appropriate unit (B, KiB, MiB, GiB, TiB).

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted string with size and unit (e.g., "1.50 MiB", "512 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"

    units = ['KiB', 'MiB', 'GiB', 'TiB']
    size = size_bytes / 1024.0

    for unit in units:
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0

    return f"{size:.2f} PiB"


def format_rate(byte_count: int, seconds: float) -> str:
    """Format a transfer as '<size> in <s>s (<Mbit/s>)'."""
    return f"{format_file_size(byte_count)} in {seconds:.2f}s ({to_mbps(byte_count, seconds):.2f} Mbit/s)"
