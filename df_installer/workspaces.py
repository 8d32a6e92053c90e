"""
Provisioning of the two workspaces under the user's home directory.

``~/df-docker`` holds the DreamFactory compose project and ``~/df-mcp`` the
MCP server. Both steps are safe to re-run: an existing workspace is offered
for reuse before anything is removed.
"""

import shutil
from typing import Callable

import structlog

from df_installer import console
from df_installer.config import DF_DOCKER_REPO, DF_MCP_REPO, InstallerContext
from df_installer.container_runtime import ContainerRuntime
from df_installer.exceptions import (
    CommandFailedError,
    IntegrationServerSetupError,
    WebAppSetupError,
)
from df_installer.outcome import Outcome
from df_installer.process_runner import run_command
from df_installer.prompts import Prompter
from df_installer.readiness import wait_for_web_app
from df_installer.timeout_config import Timeouts

logger = structlog.get_logger(__name__)

USE_EXISTING = "use"
REINSTALL = "reinstall"
CANCEL = "cancel"


def ensure_web_app(
    ctx: InstallerContext,
    runtime: ContainerRuntime,
    prompter: Prompter,
    wait: Callable[[InstallerContext], None] = wait_for_web_app,
) -> Outcome:
    """Get DreamFactory running from ``ctx.web_app_dir``, cloning it if needed."""
    if ctx.web_app_dir.exists():
        console.info(f"Directory {ctx.web_app_dir} already exists.")
        console.detail("  use       - Use existing installation")
        console.detail("  reinstall - Remove and reinstall")
        console.detail("  cancel    - Cancel")
        action = prompter.choice(
            "What would you like to do?",
            [USE_EXISTING, REINSTALL, CANCEL],
            default=USE_EXISTING,
        )
        if action == CANCEL:
            console.failure("Installation cancelled")
            return Outcome.ABORTED
        if action == REINSTALL:
            with console.spinner("Removing existing directory..."):
                shutil.rmtree(ctx.web_app_dir)
        else:
            return _reuse_web_app(ctx, runtime, wait)

    try:
        with console.spinner("Cloning DreamFactory Docker repository..."):
            run_command(
                ["git", "clone", DF_DOCKER_REPO, str(ctx.web_app_dir)],
                timeout=Timeouts.GIT_CLONE,
            )
        console.hint("Building containers, please be patient...")
        with console.spinner(
            "Building Docker images (this may take 5-10 minutes on first run)..."
        ):
            runtime.build(ctx.web_app_dir)
        with console.spinner("Starting DreamFactory containers..."):
            runtime.up(ctx.web_app_dir)
    except CommandFailedError as e:
        console.failure("Failed to set up local DreamFactory")
        raise WebAppSetupError(
            f"Local DreamFactory setup failed: {e.message}", cause=e
        ) from e

    wait(ctx)
    console.success("Local DreamFactory setup complete")
    return Outcome.COMPLETED


def _reuse_web_app(
    ctx: InstallerContext,
    runtime: ContainerRuntime,
    wait: Callable[[InstallerContext], None],
) -> Outcome:
    with console.spinner("Checking DreamFactory containers..."):
        running = runtime.is_web_app_running()
    if running:
        console.success("DreamFactory containers are already running")
        return Outcome.COMPLETED

    try:
        with console.spinner("Starting DreamFactory containers..."):
            runtime.up(ctx.web_app_dir)
    except CommandFailedError as e:
        console.failure("Failed to start DreamFactory containers")
        raise WebAppSetupError(
            f"Local DreamFactory setup failed: {e.message}", cause=e
        ) from e
    wait(ctx)
    console.success("DreamFactory is running")
    return Outcome.COMPLETED


def ensure_integration_server(ctx: InstallerContext, prompter: Prompter) -> None:
    """Clone and build the MCP server into ``ctx.integration_dir``."""
    target = ctx.integration_dir
    if target.exists():
        overwrite = prompter.confirm(
            f"Directory {target} already exists. Overwrite?", default=False
        )
        if not overwrite:
            console.info("Using existing installation")
            return
        with console.spinner("Removing existing directory..."):
            shutil.rmtree(target)

    try:
        with console.spinner("Cloning DreamFactory MCP repository..."):
            run_command(["git", "clone", DF_MCP_REPO, str(target)], timeout=Timeouts.GIT_CLONE)
        with console.spinner("Installing dependencies..."):
            run_command(["npm", "install"], cwd=target, timeout=Timeouts.NPM_INSTALL)
        with console.spinner("Building project..."):
            run_command(["npm", "run", "build"], cwd=target, timeout=Timeouts.NPM_BUILD)
    except CommandFailedError as e:
        console.failure("Failed to clone and build repository")
        raise IntegrationServerSetupError(
            f"Repository setup failed: {e.message}", cause=e
        ) from e
    console.success("Repository cloned and built successfully")
