"""Tests for CLI unit conversion helpers."""

import pytest

from cli.utils import format_file_size, format_rate, to_mbps, to_mib


def test_to_mib():
    assert to_mib(1048576) == 1.0
    assert to_mib(0) == 0.0


def test_to_mbps_is_decimal():
    assert to_mbps(125000, 1.0) == pytest.approx(1.0)
    assert to_mbps(250_000_000, 1.0) == pytest.approx(2000.0)


def test_to_mbps_zero_seconds():
    assert to_mbps(1, 0) == pytest.approx(8.0)


def test_format_file_size():
    assert format_file_size(512) == "512 B"
    assert format_file_size(1536) == "1.50 KiB"
    assert format_file_size(8 * 1048576) == "8.00 MiB"


def test_format_rate():
    assert format_rate(1250000, 2.0) == "1.19 MiB in 2.00s (5.00 Mbit/s)"
