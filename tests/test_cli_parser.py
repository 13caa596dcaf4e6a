"""Tests for the CLI command parser."""

import pytest

from cli.models import (
    DownloadCommand,
    FetchCommand,
    HealthCommand,
    PushCommand,
    TargetsCommand,
    UploadCommand,
)
from cli.parser import ParseError, parse_command


def test_parse_download_no_args():
    assert parse_command("download") == DownloadCommand()


def test_parse_download_all_args():
    cmd = parse_command("download 2.5 16 32")

    assert cmd == DownloadCommand(seconds=2.5, slab_mib=16, batch=32)


def test_parse_download_too_many_args():
    with pytest.raises(ParseError, match="at most 3"):
        parse_command("download 1 2 3 4")


def test_parse_download_rejects_non_numeric():
    with pytest.raises(ParseError, match="seconds must be a number"):
        parse_command("download soon")


def test_parse_download_rejects_fractional_slab():
    with pytest.raises(ParseError, match="slab_mib must be a number"):
        parse_command("download 5 1.5")


def test_parse_upload():
    assert parse_command("upload 32 5") == UploadCommand(size_mib=32.0, seconds=5.0)
    assert parse_command("upload") == UploadCommand()


def test_parse_upload_rejects_zero():
    with pytest.raises(ParseError, match="mib must be positive"):
        parse_command("upload 0")


def test_parse_fetch():
    assert parse_command("fetch 1048576") == FetchCommand(byte_count=1048576)


def test_parse_fetch_requires_argument():
    with pytest.raises(ParseError, match="exactly 1 argument"):
        parse_command("fetch")


def test_parse_push():
    assert parse_command("push 0.5") == PushCommand(size_mib=0.5)


def test_parse_push_rejects_negative():
    with pytest.raises(ParseError, match="positive"):
        parse_command("push -1")


def test_parse_health():
    assert parse_command("health") == HealthCommand()


def test_parse_targets():
    cmd = parse_command("targets http://a.test 'http://b.test'")

    assert cmd == TargetsCommand(targets=('http://a.test', 'http://b.test'))
    assert parse_command("targets") == TargetsCommand()


def test_parse_unknown_command():
    with pytest.raises(ParseError, match="Unknown command: speed"):
        parse_command("speed 10")


def test_parse_empty_input():
    with pytest.raises(ParseError, match="Empty command"):
        parse_command("   ")


def test_parse_unbalanced_quotes():
    with pytest.raises(ParseError, match="Invalid syntax"):
        parse_command("targets 'http://a.test")
