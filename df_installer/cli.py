#!/usr/bin/env python3
"""
Command-line entry point for the DreamFactory MCP installer.

    create-df-mcp              install DreamFactory and optionally the MCP server
    create-df-mcp --uninstall  remove everything the installer created
"""

import sys
from typing import Optional

import click
import structlog

from df_installer.config import InstallerContext, load_environment

# Timeouts are read when their module is imported, so .env goes first
load_environment()

from df_installer import __version__, console  # noqa: E402
from df_installer.exceptions import InstallerError  # noqa: E402
from df_installer.installer import run_install  # noqa: E402
from df_installer.logging_config import configure_logging  # noqa: E402
from df_installer.outcome import Outcome  # noqa: E402
from df_installer.uninstaller import run_uninstall  # noqa: E402

logger = structlog.get_logger(__name__)


def _report_failure(label: str, error: Exception) -> None:
    message = error.message if isinstance(error, InstallerError) else str(error)
    console.failure(f"{label} failed: {message}")
    suggestion: Optional[str] = getattr(error, "recovery_suggestion", None)
    if suggestion:
        console.hint(suggestion)


@click.command(name="create-df-mcp")
@click.option(
    "--uninstall",
    is_flag=True,
    default=False,
    help="Remove DreamFactory, the MCP server and the Claude Desktop entry",
)
@click.option(
    "--skip-demo-api",
    is_flag=True,
    default=False,
    help="Do not offer to create a demo database API",
)
@click.option(
    "--log-level",
    default="WARNING",
    show_default=True,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Diagnostic logging level",
)
@click.version_option(__version__, prog_name="create-df-mcp")
def cli(uninstall: bool, skip_demo_api: bool, log_level: str) -> None:
    """Install and configure DreamFactory MCP for Claude Desktop."""
    configure_logging(log_level)
    ctx = InstallerContext.from_environment()
    logger.debug(event="Starting", uninstall=uninstall, home=str(ctx.home_dir), system=ctx.system)

    label = "Uninstall" if uninstall else "Installation"
    try:
        if uninstall:
            outcome = run_uninstall(ctx)
        else:
            outcome = run_install(ctx, offer_demo_api=not skip_demo_api)
    except InstallerError as e:
        logger.debug(event="Flow failed", **e.to_dict())
        _report_failure(label, e)
        sys.exit(1)
    except (click.Abort, click.exceptions.Exit):
        raise
    except Exception as e:
        logger.exception(event="Unexpected error")
        _report_failure(label, e)
        sys.exit(1)

    if outcome is not Outcome.COMPLETED:
        logger.debug(event="Flow ended early", outcome=outcome.value)
    sys.exit(outcome.exit_code)


def main() -> None:
    """Main entry point."""
    cli()  # type: ignore[call-arg]


if __name__ == "__main__":
    main()
