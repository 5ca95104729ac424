"""
Unit tests for the command-line entry point.
"""

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from portfolio_tracker import __main__ as cli
from portfolio_tracker.server import DEFAULT_DATA_PATH


@pytest.mark.unit
def test_default_data_path(monkeypatch):
    """Test falling back to the home-directory data file."""
    monkeypatch.delenv(cli.DATA_PATH_ENV, raising=False)
    args = cli.build_parser().parse_args([])
    assert Path(args.data_path) == DEFAULT_DATA_PATH
    assert args.verbose is False


@pytest.mark.unit
def test_data_path_from_environment(monkeypatch, tmp_path):
    """Test that the environment variable overrides the default."""
    monkeypatch.setenv(cli.DATA_PATH_ENV, str(tmp_path / "env.json"))
    args = cli.build_parser().parse_args([])
    assert Path(args.data_path) == tmp_path / "env.json"


@pytest.mark.unit
def test_data_path_option_wins(monkeypatch, tmp_path):
    """Test that --data-path overrides the environment variable."""
    monkeypatch.setenv(cli.DATA_PATH_ENV, str(tmp_path / "env.json"))
    args = cli.build_parser().parse_args(["--data-path", str(tmp_path / "cli.json"), "-v"])
    assert args.data_path == tmp_path / "cli.json"
    assert args.verbose is True


@pytest.mark.unit
def test_main_runs_server_with_data_path(tmp_path):
    """Test that main hands the chosen data file to the server."""
    with patch.object(cli, "run_server", new=AsyncMock()) as run_server:
        cli.main(["--data-path", str(tmp_path / "data.json")])
    run_server.assert_awaited_once_with(data_path=tmp_path / "data.json")


@pytest.mark.unit
def test_main_exits_nonzero_on_error(tmp_path):
    """Test that a crashing server exits with status 1."""
    failing = AsyncMock(side_effect=RuntimeError("boom"))
    with patch.object(cli, "run_server", new=failing), pytest.raises(SystemExit) as exc_info:
        cli.main(["--data-path", str(tmp_path / "data.json")])
    assert exc_info.value.code == 1
