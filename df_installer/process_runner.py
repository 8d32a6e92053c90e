"""Run external commands (git, npm, docker, brew) and capture their output."""

import subprocess  # nosec B404
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Union

import structlog

from df_installer.exceptions import CommandFailedError

logger = structlog.get_logger(__name__)


@dataclass
class CommandResult:
    args: Sequence[str]
    returncode: int
    stdout: str
    stderr: str


def run_command(
    args: Sequence[str],
    cwd: Optional[Union[str, Path]] = None,
    timeout: Optional[int] = None,
) -> CommandResult:
    """
    Run a command and return its captured output.

    Raises:
        CommandFailedError: if the executable is missing, the command times
            out, or it exits with a non-zero status.
    """
    cmd = list(args)
    logger.debug(event="Running command", command=" ".join(cmd), cwd=str(cwd) if cwd else None)
    try:
        result = subprocess.run(  # nosec B603
            cmd,
            cwd=str(cwd) if cwd else None,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except FileNotFoundError as e:
        raise CommandFailedError(
            f"Command not found: {cmd[0]}", command=cmd, cause=e
        ) from e
    except subprocess.TimeoutExpired as e:
        raise CommandFailedError(
            f"Command timed out after {timeout}s: {' '.join(cmd)}",
            command=cmd,
            cause=e,
        ) from e

    if result.returncode != 0:
        stderr = (result.stderr or "").strip()
        logger.debug(
            event="Command failed",
            command=" ".join(cmd),
            returncode=result.returncode,
            stderr=stderr,
        )
        message = f"Command failed: {' '.join(cmd)}"
        if stderr:
            message += f"\n{stderr}"
        raise CommandFailedError(
            message, command=cmd, returncode=result.returncode, stderr=stderr
        )

    return CommandResult(
        args=cmd,
        returncode=result.returncode,
        stdout=result.stdout or "",
        stderr=result.stderr or "",
    )


def command_succeeds(
    args: Sequence[str],
    cwd: Optional[Union[str, Path]] = None,
    timeout: Optional[int] = None,
) -> bool:
    """Return True if the command runs and exits with status 0."""
    try:
        run_command(args, cwd=cwd, timeout=timeout)
        return True
    except CommandFailedError:
        return False
