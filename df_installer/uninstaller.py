"""
Uninstall flow.

Removes everything the installer created: the DreamFactory containers,
images and volumes, the df-mcp entry in the Claude Desktop config, and both
workspace directories. Once the user has typed the confirmation word every
stage runs, and a failure in one stage is reported without stopping the rest.
"""

import shutil
from typing import List, Optional

import structlog

from df_installer import console
from df_installer.config import InstallerContext
from df_installer.container_runtime import CleanupResult, ContainerRuntime
from df_installer.exceptions import CommandFailedError, HostConfigError
from df_installer.host_config import load_host_config, remove_integration_entry, write_host_config
from df_installer.outcome import Outcome
from df_installer.prompts import Prompter, exact_match

logger = structlog.get_logger(__name__)

CONFIRMATION_WORD = "delete"


def print_warning_box(lines: List[str]) -> None:
    width = max(len(line) for line in lines) + 4
    border = "═" * width

    console.detail("")
    console.console.print(f"╔{border}╗", style="red")
    for line in lines:
        padding = width - len(line) - 2
        console.console.print(f"║  {line}{' ' * padding}║", style="red", markup=False)
    console.console.print(f"╚{border}╝", style="red")
    console.detail("")


def confirm_uninstall(ctx: InstallerContext, prompter: Prompter) -> None:
    """Block until the user types the confirmation word exactly."""
    print_warning_box(
        [
            "WARNING: This will permanently remove:",
            "",
            "- DreamFactory containers, images and volumes (all data)",
            f"- {ctx.web_app_dir}",
            f"- {ctx.integration_dir}",
            "- The df-mcp entry in the Claude Desktop config",
        ]
    )
    prompter.text(
        f"Type '{CONFIRMATION_WORD}' to confirm",
        validate=exact_match(CONFIRMATION_WORD),
        strip=False,
    )


def stop_web_app(ctx: InstallerContext, runtime: ContainerRuntime) -> List[str]:
    """Tear down the compose project, then sweep leftovers. Returns failed stage names."""
    failures: List[str] = []

    if ctx.web_app_dir.exists():
        try:
            with console.spinner("Stopping DreamFactory containers..."):
                runtime.down(ctx.web_app_dir)
            console.success("Stopped DreamFactory containers")
        except CommandFailedError as e:
            logger.warning(event="docker compose down failed", error=str(e))
            console.warning(f"Could not stop containers with docker compose: {e.message}")
            failures.append("docker compose down")
    else:
        console.info(f"{ctx.web_app_dir} not found, skipping docker compose down")

    sweeps = (
        ("Removing DreamFactory containers...", runtime.remove_containers),
        ("Removing DreamFactory images...", runtime.remove_images),
        ("Removing DreamFactory volumes...", runtime.remove_volumes),
    )
    for message, sweep in sweeps:
        with console.spinner(message):
            result: CleanupResult = sweep()
        _report_cleanup(result)
        if not result.ok:
            failures.append(result.resource)
    return failures


def _report_cleanup(result: CleanupResult) -> None:
    if result.removed:
        console.success(f"Removed {len(result.removed)} {result.resource}: {', '.join(result.removed)}")
    elif result.ok:
        console.info(f"No DreamFactory {result.resource} found")
    for error in result.errors:
        console.warning(f"Could not remove {result.resource}: {error}")


def remove_host_config_entry(ctx: InstallerContext) -> Optional[bool]:
    """
    Drop the df-mcp entry from the Claude Desktop config.

    Returns:
        True if an entry was removed, False if there was nothing to remove,
        None if the file could not be written.
    """
    path = ctx.host_config_path
    document, corrupt = load_host_config(path)
    if corrupt:
        # Same reading as install: an unreadable file has no df-mcp entry.
        # It is left on disk as-is.
        console.warning(f"Could not parse {path}; leaving it unchanged")
        return False
    if not remove_integration_entry(document):
        console.info("No DreamFactory MCP entry in the Claude Desktop config")
        return False
    try:
        write_host_config(path, document)
    except HostConfigError as e:
        logger.warning(event="Could not update Claude Desktop config", error=str(e))
        console.warning(f"Could not update Claude Desktop config: {e.message}")
        return None
    console.success("Removed DreamFactory MCP from the Claude Desktop config")
    return True


def remove_workspaces(ctx: InstallerContext) -> List[str]:
    failures: List[str] = []
    for directory in (ctx.web_app_dir, ctx.integration_dir):
        if not directory.exists():
            console.info(f"{directory} not found")
            continue
        try:
            with console.spinner(f"Removing {directory}..."):
                shutil.rmtree(directory)
            console.success(f"Removed {directory}")
        except OSError as e:
            logger.warning(event="Could not remove directory", path=str(directory), error=str(e))
            console.warning(f"Could not remove {directory}: {e}")
            failures.append(str(directory))
    return failures


def run_uninstall(
    ctx: InstallerContext,
    prompter: Optional[Prompter] = None,
    runtime: Optional[ContainerRuntime] = None,
) -> Outcome:
    """Run the uninstall flow. Stages after confirmation never stop each other."""
    if prompter is None:
        prompter = Prompter()
    if runtime is None:
        runtime = ContainerRuntime()

    console.console.print("\n[bold blue]🧹 DreamFactory Uninstaller[/bold blue]\n")
    confirm_uninstall(ctx, prompter)

    failures: List[str] = []
    console.heading("Removing Docker resources")
    failures.extend(stop_web_app(ctx, runtime))

    console.heading("Updating Claude Desktop configuration")
    if remove_host_config_entry(ctx) is None:
        failures.append("Claude Desktop config")

    console.heading("Removing installation directories")
    failures.extend(remove_workspaces(ctx))

    if failures:
        console.warning(f"Uninstall finished with problems: {', '.join(failures)}")
    else:
        console.success("DreamFactory and the MCP server have been uninstalled.")
    console.warning("Please restart Claude Desktop if it is running.")
    return Outcome.COMPLETED
