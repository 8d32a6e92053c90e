"""User-facing console output for the installer."""

from contextlib import contextmanager
from typing import Iterator

from rich.console import Console
from rich.markup import escape
from rich.status import Status

console = Console()


def heading(message: str) -> None:
    console.print(f"\n[bold yellow]{escape(message)}[/bold yellow]\n")


def info(message: str) -> None:
    console.print(f"[blue]ℹ {escape(message)}[/blue]")


def detail(message: str) -> None:
    console.print(escape(message))


def hint(message: str) -> None:
    console.print(f"[dim]{escape(message)}[/dim]")


def success(message: str) -> None:
    console.print(f"[green]✅ {escape(message)}[/green]")


def warning(message: str) -> None:
    console.print(f"[yellow]⚠️  {escape(message)}[/yellow]")


def failure(message: str) -> None:
    console.print(f"[bold red]❌ {escape(message)}[/bold red]")


def link(label: str, url: str) -> None:
    console.print(f"[blue]{escape(label)}[/blue] [cyan underline]{escape(url)}[/cyan underline]")


def command(cmd: str) -> None:
    console.print(f"\n  [bold white]{escape(cmd)}[/bold white]\n")


@contextmanager
def spinner(message: str) -> Iterator[Status]:
    """Show a spinner while a blocking step runs.

    Prompts must not be issued inside this block; the spinner would redraw
    over them.
    """
    with console.status(f"[bold green]{escape(message)}") as status:
        yield status


def mask_secret(value: str) -> str:
    if len(value) <= 8:
        return "*" * len(value)
    return f"{value[:4]}...{value[-4:]}"
