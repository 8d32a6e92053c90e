"""
Configuration for the DreamFactory MCP installer.

All paths and URLs used by the install and uninstall flows live in one
immutable ``InstallerContext`` that is built once and passed to every step.
"""

import os
import platform
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv

DF_DOCKER_REPO = "https://github.com/dreamfactorysoftware/df-docker.git"
DF_MCP_REPO = "https://github.com/dreamfactorysoftware/df-mcp.git"

WEB_APP_DIR_NAME = "df-docker"
INTEGRATION_DIR_NAME = "df-mcp"

MCP_SERVER_KEY = "df-mcp"
MCP_SERVER_COMMAND = "node"
DEFAULT_SERVICE_NAME = "db"

DEBUG_ENV_VAR = "DEBUG_DF_INSTALLER"

DEFAULT_WEB_APP_URL = "http://127.0.0.1"

CLAUDE_CONFIG_FILE = "claude_desktop_config.json"


def load_environment() -> bool:
    """
    Load a `.env` file found from the current working directory upwards.

    Variables already set in the environment win over the file.
    """
    return load_dotenv(find_dotenv(usecwd=True))


def _debug_http_enabled() -> bool:
    return os.environ.get(DEBUG_ENV_VAR) == "true"


def default_host_config_path(system: str, home: Path) -> Path:
    """Return the Claude Desktop config file location for the given OS."""
    if system == "Darwin":
        return home / "Library" / "Application Support" / "Claude" / CLAUDE_CONFIG_FILE
    if system == "Windows":
        appdata = os.environ.get("APPDATA")
        base = Path(appdata) if appdata else home / "AppData" / "Roaming"
        return base / "Claude" / CLAUDE_CONFIG_FILE
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else home / ".config"
    return base / "Claude" / CLAUDE_CONFIG_FILE


@dataclass(frozen=True)
class InstallerContext:
    """Paths and endpoints shared by every installer step."""

    home_dir: Path
    system: str = field(default_factory=platform.system)
    web_app_url: str = DEFAULT_WEB_APP_URL
    debug_http: bool = field(default_factory=_debug_http_enabled)
    host_config_path: Optional[Path] = None

    def __post_init__(self) -> None:
        if self.host_config_path is None:
            object.__setattr__(
                self,
                "host_config_path",
                default_host_config_path(self.system, self.home_dir),
            )

    @property
    def web_app_dir(self) -> Path:
        return self.home_dir / WEB_APP_DIR_NAME

    @property
    def integration_dir(self) -> Path:
        return self.home_dir / INTEGRATION_DIR_NAME

    @property
    def integration_entry_point(self) -> Path:
        return self.integration_dir / "build" / "index.js"

    @property
    def readiness_url(self) -> str:
        return f"{self.web_app_url.rstrip('/')}/"

    @property
    def api_base_url(self) -> str:
        return f"{self.web_app_url.rstrip('/')}/api/v2"

    def service_url(self, service_name: str) -> str:
        """URL the MCP server uses to reach one DreamFactory service."""
        return f"{self.api_base_url}/{service_name}"

    @classmethod
    def from_environment(cls) -> "InstallerContext":
        """Build the context from the current user, OS and environment."""
        load_environment()
        return cls(home_dir=Path.home())
