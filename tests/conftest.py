"""Shared pytest fixtures for all tests."""

import pytest
from cli.config import Config
from common.constants import KIB, MIB
from engine.limits import LimitsPolicy


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    """
    Create a fake clock starting at t=100s.

    Returns:
        FakeClock instance, callable like time.monotonic
    """
    return FakeClock()


@pytest.fixture
def small_limits():
    """
    Limits small enough to keep in-memory test responses tiny and fast.

    Returns:
        LimitsPolicy with sub-second durations and MiB-scale caps
    """
    return LimitsPolicy(
        max_ingest_bytes=1 * MIB,
        legacy_ingest_bytes=512 * KIB,
        default_duration=0.1,
        min_duration=0.05,
        max_duration=0.2,
        min_slab_bytes=1 * KIB,
        max_slab_bytes=2 * MIB,
        default_slab_bytes=1 * MIB,
        default_batch=4,
        max_batch=8,
        legacy_chunk_bytes=64 * KIB,
        default_byte_target=256 * KIB,
        max_byte_target=4 * MIB,
        timed_emit_byte_ceiling=4 * MIB,
    )


@pytest.fixture
def temp_config_dir(tmp_path):
    """
    Create temporary config directory.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to temporary .probe directory
    """
    config_dir = tmp_path / '.probe'
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def temp_config(temp_config_dir):
    """
    Create temporary config instance.

    Args:
        temp_config_dir: Temporary config directory fixture

    Returns:
        Config instance with temp config file
    """
    return Config(temp_config_dir / 'config.json')
