"""CLI behaviour tests using click's CliRunner."""

from unittest.mock import patch

import pytest
from click.testing import CliRunner

from df_installer import __version__
from df_installer.cli import cli
from df_installer.exceptions import HostAppNotFoundError, WebAppSetupError
from df_installer.outcome import Outcome


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def environment(ctx):
    with patch("df_installer.cli.configure_logging") as configure, patch(
        "df_installer.cli.InstallerContext.from_environment", return_value=ctx
    ):
        yield configure


def test_version(runner):
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output
    assert "create-df-mcp" in result.output


def test_help_lists_options(runner):
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    for option in ("--uninstall", "--skip-demo-api", "--log-level", "--version"):
        assert option in result.output


@patch("df_installer.cli.run_uninstall")
@patch("df_installer.cli.run_install", return_value=Outcome.COMPLETED)
def test_install_is_default(mock_install, mock_uninstall, runner, ctx):
    result = runner.invoke(cli, [])

    assert result.exit_code == 0
    mock_install.assert_called_once_with(ctx, offer_demo_api=True)
    mock_uninstall.assert_not_called()


@patch("df_installer.cli.run_install", return_value=Outcome.DECLINED)
def test_declined_exits_zero(mock_install, runner):
    assert runner.invoke(cli, []).exit_code == 0


@patch("df_installer.cli.run_install", return_value=Outcome.ABORTED)
def test_aborted_exits_one(mock_install, runner):
    assert runner.invoke(cli, []).exit_code == 1


@patch("df_installer.cli.run_install", return_value=Outcome.COMPLETED)
def test_skip_demo_api(mock_install, runner, ctx):
    runner.invoke(cli, ["--skip-demo-api"])

    mock_install.assert_called_once_with(ctx, offer_demo_api=False)


@patch("df_installer.cli.run_uninstall", return_value=Outcome.COMPLETED)
@patch("df_installer.cli.run_install")
def test_uninstall_route(mock_install, mock_uninstall, runner, ctx):
    result = runner.invoke(cli, ["--uninstall"])

    assert result.exit_code == 0
    mock_uninstall.assert_called_once_with(ctx)
    mock_install.assert_not_called()


@patch("df_installer.cli.run_install", side_effect=WebAppSetupError("Local DreamFactory setup failed: boom"))
def test_fatal_error_reports_and_exits_one(mock_install, runner):
    result = runner.invoke(cli, [])

    assert result.exit_code == 1
    assert "Installation failed: Local DreamFactory setup failed: boom" in result.output


@patch("df_installer.cli.run_install", side_effect=HostAppNotFoundError())
def test_fatal_error_shows_recovery_suggestion(mock_install, runner):
    result = runner.invoke(cli, [])

    assert result.exit_code == 1
    assert "Claude Desktop not found" in result.output
    assert "https://claude.ai/download" in result.output


@patch("df_installer.cli.run_uninstall", side_effect=RuntimeError("unexpected"))
def test_unexpected_error_exits_one(mock_uninstall, runner):
    result = runner.invoke(cli, ["--uninstall"])

    assert result.exit_code == 1
    assert "Uninstall failed: unexpected" in result.output


@patch("df_installer.cli.run_install", return_value=Outcome.COMPLETED)
def test_log_level_is_passed_to_logging(mock_install, runner, environment):
    runner.invoke(cli, ["--log-level", "DEBUG"])

    environment.assert_called_once_with("DEBUG")
