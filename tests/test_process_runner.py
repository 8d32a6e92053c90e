import subprocess
from unittest.mock import patch

import pytest

from df_installer.exceptions import CommandFailedError
from df_installer.process_runner import command_succeeds, run_command


def _completed(returncode=0, stdout="", stderr=""):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


@patch("df_installer.process_runner.subprocess.run")
def test_returns_captured_output(mock_run, tmp_path):
    mock_run.return_value = _completed(stdout="ok\n")

    result = run_command(["git", "clone", "repo"], cwd=tmp_path, timeout=5)

    assert result.stdout == "ok\n"
    assert result.args == ["git", "clone", "repo"]
    mock_run.assert_called_once_with(
        ["git", "clone", "repo"],
        cwd=str(tmp_path),
        capture_output=True,
        text=True,
        timeout=5,
        check=False,
    )


@patch("df_installer.process_runner.subprocess.run")
def test_non_zero_exit_carries_stderr(mock_run):
    mock_run.return_value = _completed(returncode=128, stderr="fatal: destination exists\n")

    with pytest.raises(CommandFailedError) as exc_info:
        run_command(["git", "clone", "repo"])

    error = exc_info.value
    assert error.returncode == 128
    assert error.stderr == "fatal: destination exists"
    assert "fatal: destination exists" in error.message
    assert error.message.startswith("Command failed: git clone repo")


@patch("df_installer.process_runner.subprocess.run", side_effect=FileNotFoundError("npm"))
def test_missing_executable(mock_run):
    with pytest.raises(CommandFailedError, match="Command not found: npm"):
        run_command(["npm", "install"])


@patch(
    "df_installer.process_runner.subprocess.run",
    side_effect=subprocess.TimeoutExpired(cmd=["npm", "run", "build"], timeout=1),
)
def test_timeout(mock_run):
    with pytest.raises(CommandFailedError, match="timed out after 1s"):
        run_command(["npm", "run", "build"], timeout=1)


@patch("df_installer.process_runner.subprocess.run")
def test_command_succeeds(mock_run):
    mock_run.side_effect = [_completed(), _completed(returncode=1), FileNotFoundError("brew")]

    assert command_succeeds(["docker", "info"]) is True
    assert command_succeeds(["docker", "info"]) is False
    assert command_succeeds(["brew", "--version"]) is False
