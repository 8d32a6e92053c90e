"""
Docker operations used by the installer.

The docker CLI is used for diagnostics and compose lifecycle commands; the
docker SDK is used to enumerate and remove containers, images and volumes
during uninstall.
"""

import platform
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterable, List, Optional, Sequence

import docker
import structlog

from df_installer.exceptions import CommandFailedError
from df_installer.process_runner import CommandResult, command_succeeds, run_command
from df_installer.timeout_config import Timeouts

logger = structlog.get_logger(__name__)

# Containers started by df-docker's compose file
WEB_APP_CONTAINERS = ("df-mysql", "df-redis", "df-web")
WEB_CONTAINER_MARKER = "df-web"
CONTAINER_NAME_PREFIX = "df-"
RESOURCE_MARKERS = ("df-docker", "dreamfactory", "df-mysql", "df-redis", "df-web")


@dataclass
class CleanupResult:
    """Outcome of one best-effort cleanup sub-step."""

    resource: str
    removed: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _matches_any(name: str, markers: Iterable[str]) -> bool:
    return any(marker in name for marker in markers)


class ContainerRuntime:
    """Docker CLI and SDK access for the DreamFactory containers."""

    def __init__(self, client_factory: Callable[[], Any] = docker.from_env) -> None:
        self._client_factory = client_factory
        self._client: Optional[Any] = None
        self._compose_cmd: Optional[List[str]] = None

    # -- diagnostics -------------------------------------------------------

    def is_available(self) -> bool:
        """Docker is installed and its daemon answers."""
        return command_succeeds(
            ["docker", "--version"], timeout=Timeouts.VERSION_CHECK
        ) and command_succeeds(["docker", "info"], timeout=Timeouts.DOCKER_COMMAND)

    def has_homebrew(self) -> bool:
        return command_succeeds(["brew", "--version"], timeout=Timeouts.VERSION_CHECK)

    def docker_install_command(self) -> str:
        """Homebrew command that installs Docker Desktop on this Mac."""
        if platform.machine() == "arm64":
            return "arch -arm64 brew install --cask docker"
        return "brew install --cask docker"

    # -- compose -----------------------------------------------------------

    def get_compose_command(self) -> List[str]:
        """Get the appropriate docker compose command."""
        if self._compose_cmd is None:
            if command_succeeds(
                ["docker", "compose", "version"], timeout=Timeouts.VERSION_CHECK
            ):
                self._compose_cmd = ["docker", "compose"]
            else:
                self._compose_cmd = ["docker-compose"]
        return self._compose_cmd

    def compose(
        self, args: Sequence[str], project_dir: Path, timeout: Optional[int] = None
    ) -> CommandResult:
        return run_command(
            [*self.get_compose_command(), *args],
            cwd=project_dir,
            timeout=timeout or Timeouts.DOCKER_COMMAND,
        )

    def build(self, project_dir: Path) -> CommandResult:
        return self.compose(["build"], project_dir, timeout=Timeouts.DOCKER_BUILD)

    def up(self, project_dir: Path) -> CommandResult:
        return self.compose(["up", "-d"], project_dir, timeout=Timeouts.DOCKER_BUILD)

    def down(self, project_dir: Path) -> CommandResult:
        return self.compose(["down", "-v"], project_dir)

    # -- inspection --------------------------------------------------------

    def running_container_names(self) -> List[str]:
        """Names of running containers, empty if docker cannot be queried."""
        try:
            result = run_command(
                ["docker", "ps", "--format", "{{.Names}}"],
                timeout=Timeouts.DOCKER_COMMAND,
            )
        except CommandFailedError as e:
            logger.debug(event="Could not list running containers", error=str(e))
            return []
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    def is_web_app_running(self) -> bool:
        names = self.running_container_names()
        running = any(WEB_CONTAINER_MARKER in name for name in names)
        logger.debug(event="Checked DreamFactory containers", names=names, running=running)
        return running

    # -- cleanup -----------------------------------------------------------

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = self._client_factory()
        return self._client

    def remove_containers(self, prefix: str = CONTAINER_NAME_PREFIX) -> CleanupResult:
        result = CleanupResult(resource="containers")
        try:
            containers = self.client.containers.list(all=True)
        except Exception as e:
            logger.warning(event=f"Could not list containers: {e}")
            result.errors.append(str(e))
            return result
        for c in containers:
            if not c.name.startswith(prefix):
                continue
            try:
                c.remove(force=True)
                logger.info(event=f"Removed container {c.name}")
                result.removed.append(c.name)
            except Exception as e:
                logger.warning(event=f"Failed to remove container {c.name}: {e}")
                result.errors.append(f"{c.name}: {e}")
        return result

    def remove_images(self, markers: Sequence[str] = RESOURCE_MARKERS) -> CleanupResult:
        result = CleanupResult(resource="images")
        try:
            images = self.client.images.list()
        except Exception as e:
            logger.warning(event=f"Could not list images: {e}")
            result.errors.append(str(e))
            return result
        for image in images:
            tags = list(image.tags or [])
            matching = [tag for tag in tags if _matches_any(tag, markers)]
            if not matching:
                continue
            label = matching[0]
            try:
                self.client.images.remove(image.id, force=True)
                logger.info(event=f"Removed image {label}")
                result.removed.append(label)
            except Exception as e:
                logger.warning(event=f"Failed to remove image {label}: {e}")
                result.errors.append(f"{label}: {e}")
        return result

    def remove_volumes(self, markers: Sequence[str] = RESOURCE_MARKERS) -> CleanupResult:
        result = CleanupResult(resource="volumes")
        try:
            volumes = self.client.volumes.list()
        except Exception as e:
            logger.warning(event=f"Could not list volumes: {e}")
            result.errors.append(str(e))
            return result
        for v in volumes:
            if not _matches_any(v.name, markers):
                continue
            try:
                v.remove(force=True)
                logger.info(event=f"Removed volume {v.name}")
                result.removed.append(v.name)
            except Exception as e:
                logger.warning(event=f"Failed to remove volume {v.name}: {e}")
                result.errors.append(f"{v.name}: {e}")
        return result
