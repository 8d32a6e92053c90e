"""
Install flow.

Runs DreamFactory locally in Docker, optionally creates a demo database API,
and registers the DreamFactory MCP server with Claude Desktop. Each step
either returns normally, returns an ``Outcome`` that ends the flow early, or
raises an ``InstallerError`` that the CLI reports.
"""

import time
from dataclasses import dataclass
from typing import Callable, Optional

import structlog

from df_installer import console
from df_installer.config import DEFAULT_SERVICE_NAME, InstallerContext
from df_installer.container_runtime import ContainerRuntime
from df_installer.demo_api import DemoApiCredentials, provision_demo_api
from df_installer.exceptions import ContainerRuntimeUnavailableError, HostAppNotFoundError
from df_installer.host_app import claude_candidate_paths, detect_host_app
from df_installer.host_config import (
    backup_corrupt_config,
    build_integration_entry,
    has_integration_entry,
    load_host_config,
    merge_integration_entry,
    write_host_config,
)
from df_installer.outcome import Outcome
from df_installer.prompts import Prompter, require_non_empty, validate_email
from df_installer.readiness import wait_for_web_app
from df_installer.retry import DOCKER_RECHECK, RetryPolicy, poll_until
from df_installer.workspaces import ensure_integration_server, ensure_web_app

logger = structlog.get_logger(__name__)

DOCKER_DOWNLOAD_URL = "https://www.docker.com/get-started"
CLAUDE_DOWNLOAD_URL = "https://claude.ai/download"


@dataclass(frozen=True)
class McpCredentials:
    api_key: str
    service_name: str


def _print_docker_manual_install() -> None:
    console.link("Please install Docker from:", DOCKER_DOWNLOAD_URL)
    console.warning("After installing Docker, make sure it is running and try again.")


def ensure_container_runtime(
    ctx: InstallerContext,
    runtime: ContainerRuntime,
    prompter: Prompter,
    policy: RetryPolicy = DOCKER_RECHECK,
    sleep: Callable[[float], None] = time.sleep,
) -> Outcome:
    """Make sure Docker is installed and running, guiding a Homebrew install on macOS."""
    with console.spinner("Checking Docker installation..."):
        available = runtime.is_available()
    if available:
        console.success("Docker is installed and running")
        return Outcome.COMPLETED

    console.failure("Docker is not installed or not running")
    console.failure("Docker is required for local DreamFactory installation.")

    if ctx.system != "Darwin" or not runtime.has_homebrew():
        _print_docker_manual_install()
        raise ContainerRuntimeUnavailableError()

    console.warning("Homebrew is installed on your system.")
    if not prompter.confirm("Would you like to install Docker using Homebrew?", default=True):
        _print_docker_manual_install()
        raise ContainerRuntimeUnavailableError()

    console.detail("Note: You may be prompted for your admin password during installation.")
    console.detail("Please run the following command in a new terminal:")
    console.command(runtime.docker_install_command())
    console.detail("After Docker is installed:")
    console.detail("  1. Open Docker from Applications or Launchpad")
    console.detail("  2. Accept the terms and conditions")
    console.detail("  3. Wait for Docker to start completely (icon appears in menu bar)")
    console.detail("  4. Return to this installer\n")

    if not prompter.confirm("Have you completed the Docker installation?", default=False):
        console.warning("Please install Docker and run this installer again.")
        return Outcome.DECLINED

    declined = False

    def retry_again(attempt: int) -> bool:
        nonlocal declined
        if not prompter.confirm(
            "Docker does not appear to be running yet. Would you like to check again?",
            default=True,
        ):
            declined = True
            return False
        console.hint("Waiting a moment for Docker to start...")
        return True

    if poll_until(policy, lambda attempt: runtime.is_available(), on_retry=retry_again, sleep=sleep):
        console.success("Docker is now installed and running!")
        return Outcome.COMPLETED

    if declined:
        console.warning("Please ensure Docker is running and restart the installer.")
    else:
        console.warning("Docker is still not running.")
        console.detail(
            "Please ensure Docker Desktop is open and running, then restart the installer."
        )
    return Outcome.DECLINED


def collect_demo_api_credentials(
    ctx: InstallerContext,
    prompter: Prompter,
    provision: Callable[..., Optional[DemoApiCredentials]] = provision_demo_api,
) -> Optional[McpCredentials]:
    """Offer to create a demo database API; None if skipped or it failed."""
    if not prompter.confirm(
        "Would you like to automatically create a demo database API?", default=True
    ):
        return None

    console.detail("Enter the DreamFactory administrator account for the local instance.")
    email = prompter.text("Admin email", validate=validate_email)
    password = prompter.password("Admin password", validate=require_non_empty("Password"))

    created = provision(ctx, email, password)
    if created is None:
        console.warning("Continuing without a demo API. You can enter an API key manually.")
        return None
    return McpCredentials(api_key=created.api_key, service_name=created.service_name)


def collect_manual_credentials(prompter: Prompter) -> Optional[McpCredentials]:
    """Walk the user through creating an API key by hand; None if they are not ready."""
    console.warning("Before installing the MCP server, you need to create an API key in DreamFactory:")
    console.detail("   1. Go to http://127.0.0.1")
    console.detail("   2. Create a System Administrator account")
    console.detail("   3. Add a local database service")
    console.detail("   4. Create a Role with appropriate permissions (RBAC)")
    console.detail("   5. Create an App and generate an API key")
    console.detail("   6. Copy the API key to paste below")

    if not prompter.confirm("Have you completed the setup and created an API key?", default=False):
        return None

    api_key = prompter.text(
        "Enter your DreamFactory API key", validate=require_non_empty("API key")
    )
    service_name = prompter.text(
        "Enter your DreamFactory service name",
        default=DEFAULT_SERVICE_NAME,
        validate=require_non_empty("Service name"),
    )
    return McpCredentials(api_key=api_key, service_name=service_name)


def ensure_host_app(ctx: InstallerContext) -> None:
    with console.spinner("Checking for Claude Desktop..."):
        found = detect_host_app(ctx.system, ctx.home_dir)
    if found is None:
        console.warning("Claude Desktop not detected.")
        console.detail("Please install Claude Desktop before continuing.")
        console.link("Download from:", CLAUDE_DOWNLOAD_URL)
        raise HostAppNotFoundError(
            searched=[str(p) for p in claude_candidate_paths(ctx.system, ctx.home_dir)]
        )
    console.info("Found Claude Desktop")


def update_host_config(
    ctx: InstallerContext, prompter: Prompter, credentials: McpCredentials
) -> bool:
    """
    Add or update the df-mcp entry in the Claude Desktop config.

    Returns:
        False if the user kept an existing entry, True if the file was written.
    """
    path = ctx.host_config_path
    document, corrupt = load_host_config(path)
    if corrupt:
        console.warning("Could not parse existing config, creating new one")
        backup = backup_corrupt_config(path)
        console.hint(f"Previous file saved to {backup}")

    if has_integration_entry(document):
        if not prompter.confirm(
            "DreamFactory MCP is already configured. Update configuration?", default=True
        ):
            console.info("Configuration unchanged")
            return False

    entry = build_integration_entry(
        ctx, ctx.service_url(credentials.service_name), credentials.api_key
    )
    merge_integration_entry(document, entry)
    with console.spinner("Updating Claude Desktop configuration..."):
        write_host_config(path, document)
    console.success("Claude Desktop configuration updated")
    logger.info(
        event="Registered MCP server",
        service=credentials.service_name,
        api_key=console.mask_secret(credentials.api_key),
    )
    return True


def _report_web_app(ctx: InstallerContext) -> None:
    console.link("You can access DreamFactory at:", ctx.web_app_url)


def run_install(
    ctx: InstallerContext,
    prompter: Optional[Prompter] = None,
    runtime: Optional[ContainerRuntime] = None,
    offer_demo_api: bool = True,
    wait: Callable[[InstallerContext], None] = wait_for_web_app,
    provision: Callable[..., Optional[DemoApiCredentials]] = provision_demo_api,
    sleep: Callable[[float], None] = time.sleep,
) -> Outcome:
    """Run the interactive install flow end to end."""
    if prompter is None:
        prompter = Prompter()
    if runtime is None:
        runtime = ContainerRuntime()

    console.console.print("\n[bold blue]🚀 Welcome to the DreamFactory Installer[/bold blue]\n")
    console.detail("This installer will:")
    console.detail("  1. Install DreamFactory locally using Docker")
    console.detail("  2. Optionally install the DreamFactory MCP server for Claude Desktop\n")

    if not prompter.confirm("Would you like to proceed with the installation?", default=True):
        console.info("Installation cancelled by user.")
        return Outcome.DECLINED

    console.heading("📦 Step 1: Installing DreamFactory")
    outcome = ensure_container_runtime(ctx, runtime, prompter, sleep=sleep)
    if outcome is not Outcome.COMPLETED:
        return outcome
    outcome = ensure_web_app(ctx, runtime, prompter, wait=wait)
    if outcome is not Outcome.COMPLETED:
        return outcome

    console.success("DreamFactory is running locally!")
    _report_web_app(ctx)

    console.heading("📦 Step 2: DreamFactory MCP Server (Optional)")
    # Without the demo offer the MCP install question below is the only decision
    if offer_demo_api and not prompter.confirm(
        "Would you like to continue with the optional MCP setup for Claude Desktop?",
        default=True,
    ):
        console.success("DreamFactory installation complete!")
        _report_web_app(ctx)
        return Outcome.COMPLETED

    credentials = None
    if offer_demo_api:
        credentials = collect_demo_api_credentials(ctx, prompter, provision=provision)

    if not prompter.confirm(
        "Would you like to install the DreamFactory MCP server for Claude Desktop?",
        default=True,
    ):
        console.success("DreamFactory installation complete!")
        _report_web_app(ctx)
        return Outcome.COMPLETED

    if credentials is None:
        credentials = collect_manual_credentials(prompter)
        if credentials is None:
            console.warning("MCP server installation skipped.")
            console.detail("You can run this installer again later to set up the MCP server.")
            console.success("DreamFactory installation complete!")
            return Outcome.COMPLETED

    ensure_integration_server(ctx, prompter)
    ensure_host_app(ctx)
    update_host_config(ctx, prompter, credentials)

    console.success("Installation complete!")
    console.warning("Please restart Claude Desktop to start using DreamFactory MCP.")
    return Outcome.COMPLETED
