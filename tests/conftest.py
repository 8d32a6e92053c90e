from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple
from unittest.mock import Mock

import click
import pytest

from df_installer.config import InstallerContext
from df_installer.container_runtime import CleanupResult, ContainerRuntime
from df_installer.prompts import Prompter, Validator


class ScriptedPrompter(Prompter):
    """Answers prompts from a fixed script, in order.

    Text answers that fail validation are recorded and the next scripted
    answer is used, like a user retyping. Running out of answers raises
    ``click.Abort`` as Ctrl-C at a real prompt would.
    """

    def __init__(self, answers: Sequence[Any]):
        self.answers: List[Any] = list(answers)
        self.asked: List[Tuple[str, str]] = []
        self.rejected: List[str] = []

    def _next(self, kind: str, message: str) -> Any:
        self.asked.append((kind, message))
        if not self.answers:
            raise click.Abort()
        return self.answers.pop(0)

    def confirm(self, message: str, default: bool = True) -> bool:
        return bool(self._next("confirm", message))

    def _validated(
        self, kind: str, message: str, validate: Optional[Validator], strip: bool = False
    ) -> str:
        while True:
            value = self._next(kind, message)
            if strip:
                value = value.strip()
            if validate is None or not validate(value):
                return value
            self.rejected.append(value)

    def text(
        self,
        message: str,
        default: Optional[str] = None,
        validate: Optional[Validator] = None,
        strip: bool = True,
    ) -> str:
        return self._validated("text", message, validate, strip=strip)

    def password(self, message: str, validate: Optional[Validator] = None) -> str:
        return self._validated("password", message, validate)

    def choice(self, message: str, choices: Sequence[str], default: Optional[str] = None) -> str:
        value = self._next("choice", message)
        assert value in choices
        return value

    def messages(self, kind: Optional[str] = None) -> List[str]:
        return [m for k, m in self.asked if kind is None or k == kind]


@pytest.fixture
def ctx(tmp_path: Path) -> InstallerContext:
    """Installer context rooted in a temporary home directory."""
    home = tmp_path / "home"
    home.mkdir()
    return InstallerContext(
        home_dir=home,
        system="Linux",
        debug_http=False,
        host_config_path=tmp_path / "Claude" / "claude_desktop_config.json",
    )


@pytest.fixture
def runtime() -> Mock:
    """Container runtime double with Docker running and nothing to clean up."""
    mock_runtime = Mock(spec=ContainerRuntime)
    mock_runtime.is_available.return_value = True
    mock_runtime.has_homebrew.return_value = False
    mock_runtime.is_web_app_running.return_value = False
    mock_runtime.docker_install_command.return_value = "brew install --cask docker"
    mock_runtime.remove_containers.return_value = CleanupResult(resource="containers")
    mock_runtime.remove_images.return_value = CleanupResult(resource="images")
    mock_runtime.remove_volumes.return_value = CleanupResult(resource="volumes")
    return mock_runtime


@pytest.fixture
def prompter_factory():
    return ScriptedPrompter
