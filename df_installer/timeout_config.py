"""
Centralized timeout configuration for external operations.

Usage:
    from df_installer.timeout_config import Timeouts

    run_command(["git", "clone", url, dest], timeout=Timeouts.GIT_CLONE)

Environment Variables:
    - DF_INSTALLER_TIMEOUT_QUICK: Version checks (default: 30s)
    - DF_INSTALLER_TIMEOUT_DOCKER: Docker queries and compose up/down (default: 60s)
    - DF_INSTALLER_TIMEOUT_GIT_CLONE: Repository checkout (default: 300s)
    - DF_INSTALLER_TIMEOUT_NPM_INSTALL: npm install (default: 600s)
    - DF_INSTALLER_TIMEOUT_BUILD: Image builds and npm builds (default: 1800s)
    - DF_INSTALLER_TIMEOUT_READINESS: Single readiness probe (default: 5s)
    - DF_INSTALLER_TIMEOUT_API: DreamFactory REST calls (default: 30s)
"""

import logging
import os
from typing import Final

logger = logging.getLogger(__name__)


def _get_timeout(env_var: str, default: int) -> int:
    """Get timeout value from environment variable or use default.

    Args:
        env_var: Environment variable name
        default: Default timeout in seconds

    Returns:
        Timeout value in seconds
    """
    value = os.environ.get(env_var)
    if value is not None:
        try:
            timeout = int(value)
            if timeout <= 0:
                logger.warning(
                    f"Invalid timeout value for {env_var}: {value}. "
                    f"Must be positive. Using default: {default}s"
                )
                return default
            return timeout
        except ValueError:
            logger.warning(
                f"Invalid timeout value for {env_var}: {value}. "
                f"Must be integer. Using default: {default}s"
            )
            return default
    return default


class Timeouts:
    """Timeout constants in seconds, configurable via environment variables."""

    QUICK: Final[int] = _get_timeout("DF_INSTALLER_TIMEOUT_QUICK", 30)
    VERSION_CHECK: Final[int] = QUICK

    DOCKER_COMMAND: Final[int] = _get_timeout("DF_INSTALLER_TIMEOUT_DOCKER", 60)

    GIT_CLONE: Final[int] = _get_timeout("DF_INSTALLER_TIMEOUT_GIT_CLONE", 300)
    NPM_INSTALL: Final[int] = _get_timeout("DF_INSTALLER_TIMEOUT_NPM_INSTALL", 600)

    BUILD: Final[int] = _get_timeout("DF_INSTALLER_TIMEOUT_BUILD", 1800)
    DOCKER_BUILD: Final[int] = BUILD
    NPM_BUILD: Final[int] = BUILD

    READINESS_PROBE: Final[int] = _get_timeout("DF_INSTALLER_TIMEOUT_READINESS", 5)
    API_REQUEST: Final[int] = _get_timeout("DF_INSTALLER_TIMEOUT_API", 30)
