"""Command parser for CLI input."""

import shlex

from cli.models import (
    CommandRequest,
    DownloadCommand,
    FetchCommand,
    HealthCommand,
    PushCommand,
    TargetsCommand,
    UploadCommand,
)


class ParseError(Exception):
    """Raised when command parsing fails."""

    pass


def parse_command(input_line: str) -> CommandRequest:
    """Parse user input into a CommandRequest object.

    Args:
        input_line: Raw user input from REPL

    Returns:
        CommandRequest object (one of Download/Upload/Fetch/Push/Health/Targets)

    Raises:
        ParseError: If command syntax is invalid
    """
    if not input_line.strip():
        raise ParseError("Empty command")

    try:
        tokens = shlex.split(input_line)
    except ValueError as e:
        raise ParseError(f"Invalid syntax: {e}")

    if not tokens:
        raise ParseError("Empty command")

    command_name = tokens[0]

    if command_name == "download":
        return _parse_download(tokens[1:])
    elif command_name == "upload":
        return _parse_upload(tokens[1:])
    elif command_name == "fetch":
        return _parse_fetch(tokens[1:])
    elif command_name == "push":
        return _parse_push(tokens[1:])
    elif command_name == "health":
        return HealthCommand()
    elif command_name == "targets":
        return TargetsCommand(targets=tuple(tokens[1:]))
    else:
        raise ParseError(f"Unknown command: {command_name}")


def _number(value: str, name: str, kind=float):
    try:
        number = kind(value)
    except ValueError:
        raise ParseError(f"{name} must be a number, got '{value}'")
    if number <= 0:
        raise ParseError(f"{name} must be positive")
    return number


def _parse_download(args: list[str]) -> DownloadCommand:
    """Parse 'download [seconds] [slab_mib] [batch]' command."""
    if len(args) > 3:
        raise ParseError("download takes at most 3 arguments: [seconds] [slab_mib] [batch]")

    seconds = _number(args[0], "seconds") if len(args) > 0 else None
    slab_mib = _number(args[1], "slab_mib", int) if len(args) > 1 else None
    batch = _number(args[2], "batch", int) if len(args) > 2 else None
    return DownloadCommand(seconds=seconds, slab_mib=slab_mib, batch=batch)


def _parse_upload(args: list[str]) -> UploadCommand:
    """Parse 'upload [mib] [seconds]' command."""
    if len(args) > 2:
        raise ParseError("upload takes at most 2 arguments: [mib] [seconds]")

    size_mib = _number(args[0], "mib") if len(args) > 0 else None
    seconds = _number(args[1], "seconds") if len(args) > 1 else None
    return UploadCommand(size_mib=size_mib, seconds=seconds)


def _parse_fetch(args: list[str]) -> FetchCommand:
    """Parse 'fetch <bytes>' command."""
    if len(args) != 1:
        raise ParseError("fetch requires exactly 1 argument: <bytes>")

    return FetchCommand(byte_count=_number(args[0], "bytes", int))


def _parse_push(args: list[str]) -> PushCommand:
    """Parse 'push <mib>' command."""
    if len(args) != 1:
        raise ParseError("push requires exactly 1 argument: <mib>")

    return PushCommand(size_mib=_number(args[0], "mib"))
