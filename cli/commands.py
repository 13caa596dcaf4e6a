"""Command handler functions for CLI operations."""

from pathlib import Path
from typing import Optional

from common.logging_config import get_logger
from cli.config import Config
from cli.models import (
    DownloadCommand,
    FetchCommand,
    HealthCommand,
    PushCommand,
    TargetsCommand,
    UploadCommand,
)
from cli.probe_client import ProbeClient

logger = get_logger(__name__)


_client: Optional[ProbeClient] = None


def get_client() -> ProbeClient:
    """
    Get or create global ProbeClient instance.

    Returns:
        ProbeClient instance
    """
    global _client
    if _client is None:
        logger.debug("Creating new ProbeClient instance")
        config = Config(Path.home() / '.probe' / 'config.json')
        _client = ProbeClient(config)
    return _client


def handle_download(cmd: DownloadCommand, client: Optional[ProbeClient] = None) -> str:
    """
    Handle 'download' command, filling unset parameters from config.

    Args:
        cmd: DownloadCommand with optional seconds, slab_mib and batch
        client: Optional ProbeClient for dependency injection (testing)

    Returns:
        Measurement or error message
    """
    if client is None:
        client = get_client()
    defaults = client.config.get_measurement_defaults()
    return client.download(
        cmd.seconds if cmd.seconds is not None else defaults['duration'],
        cmd.slab_mib if cmd.slab_mib is not None else defaults['slab_mib'],
        cmd.batch if cmd.batch is not None else defaults['batch'],
    )


def handle_upload(cmd: UploadCommand, client: Optional[ProbeClient] = None) -> str:
    """
    Handle 'upload' command, filling unset parameters from config.
    """
    if client is None:
        client = get_client()
    defaults = client.config.get_measurement_defaults()
    return client.upload(
        cmd.size_mib if cmd.size_mib is not None else defaults['upload_mib'],
        cmd.seconds if cmd.seconds is not None else defaults['duration'],
    )


def handle_fetch(cmd: FetchCommand, client: Optional[ProbeClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.legacy_download(cmd.byte_count)


def handle_push(cmd: PushCommand, client: Optional[ProbeClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.legacy_upload(cmd.size_mib)


def handle_health(cmd: HealthCommand, client: Optional[ProbeClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.health()


def handle_targets(cmd: TargetsCommand, client: Optional[ProbeClient] = None) -> str:
    """
    Handle 'targets' command: list targets, or replace them when given.

    Returns:
        Numbered target list, primary first
    """
    if client is None:
        client = get_client()
    if cmd.targets:
        client.config.set_targets(list(cmd.targets))
        logger.info(f"Targets updated: {list(cmd.targets)}")

    targets = client.config.get_targets()
    if not targets:
        return "No targets configured. Run: targets <url> [fallback-url ...]"
    lines = [f"  {index}. {target}" for index, target in enumerate(targets, start=1)]
    return "Targets (tried in order):\n" + "\n".join(lines)
