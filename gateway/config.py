"""Configuration settings for the gateway server."""

import os

from common.constants import DEFAULT_GATEWAY_PORT
from engine.limits import LimitsPolicy


GATEWAY_HOST = os.environ.get("PROBE_HOST", "0.0.0.0")

GATEWAY_PORT = int(os.environ.get("PROBE_PORT", str(DEFAULT_GATEWAY_PORT)))

GATEWAY_RELOAD = os.environ.get("PROBE_RELOAD", "").lower() in ("1", "true", "yes")


def load_limits() -> LimitsPolicy:
    """Read the limits policy once, at process start."""
    return LimitsPolicy.from_env()
