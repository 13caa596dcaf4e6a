"""Command request data types for CLI."""

from dataclasses import dataclass
from typing import Literal, Optional, Union


@dataclass(frozen=True)
class DownloadCommand:
    """Timed download measurement."""

    seconds: Optional[float] = None
    slab_mib: Optional[int] = None
    batch: Optional[int] = None
    command: Literal["download"] = "download"


@dataclass(frozen=True)
class UploadCommand:
    """Timed upload measurement."""

    size_mib: Optional[float] = None
    seconds: Optional[float] = None
    command: Literal["upload"] = "upload"


@dataclass(frozen=True)
class FetchCommand:
    """Legacy size-bounded download."""

    byte_count: int
    command: Literal["fetch"] = "fetch"


@dataclass(frozen=True)
class PushCommand:
    """Legacy size-bounded upload."""

    size_mib: float
    command: Literal["push"] = "push"


@dataclass(frozen=True)
class HealthCommand:
    """Gateway health check."""

    command: Literal["health"] = "health"


@dataclass(frozen=True)
class TargetsCommand:
    """Show or replace the ordered target list."""

    targets: tuple[str, ...] = ()
    command: Literal["targets"] = "targets"


CommandRequest = Union[
    DownloadCommand,
    UploadCommand,
    FetchCommand,
    PushCommand,
    HealthCommand,
    TargetsCommand,
]
