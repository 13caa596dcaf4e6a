"""Tests for the CLI entry point and single-line execution."""

import json
from unittest.mock import Mock

import pytest

from cli import commands
from cli.main import main
from cli.parser import ParseError
from cli.probe_client import ProbeClient
from cli.repl import run_line


@pytest.fixture
def mock_client(temp_config, monkeypatch):
    """
    Install a mocked ProbeClient as the CLI's shared client.

    Returns:
        Mock with the ProbeClient interface and a temp config attached
    """
    client = Mock(spec=ProbeClient)
    client.config = temp_config
    monkeypatch.setattr(commands, '_client', client)
    return client


def test_run_line_dispatches_to_handler(mock_client):
    """Test a parsed line reaches the matching client method."""
    mock_client.legacy_download.return_value = "Fetch: 100 B"

    assert run_line("fetch 100") == "Fetch: 100 B"
    mock_client.legacy_download.assert_called_once_with(100)


def test_run_line_rejects_unknown_command(mock_client):
    with pytest.raises(ParseError):
        run_line("speed")


def test_main_one_shot_command(mock_client, capsys):
    """Test a command given on the command line runs once and exits 0."""
    mock_client.download.return_value = "Download: 8.00 MiB in 1.00s (67.11 Mbit/s)"

    exit_code = main(['download', '1', '4', '8'])

    assert exit_code == 0
    assert "Download: 8.00 MiB" in capsys.readouterr().out
    mock_client.download.assert_called_once_with(1.0, 4, 8)


def test_main_one_shot_parse_error(mock_client, capsys):
    """Test an invalid one-shot command exits 2 with the parse error."""
    exit_code = main(['upload', 'lots'])

    assert exit_code == 2
    assert "mib must be a number" in capsys.readouterr().err


def test_main_target_override_not_saved(mock_client, temp_config):
    """Test --target applies to this run without rewriting the config file."""
    mock_client.health.return_value = "Healthy: http://a.test (ts=1)"

    exit_code = main(['--target', 'http://a.test/', '--target', 'http://b.test', 'health'])

    assert exit_code == 0
    assert temp_config.get_targets() == ['http://a.test', 'http://b.test']
    with open(temp_config.config_path) as f:
        assert json.load(f)['targets'] != ['http://a.test', 'http://b.test']
