"""
Interactive prompts.

``Prompter`` is the only place the installer talks to the terminal for
input. Validation failures are reported by click and the question is asked
again, so a rejected answer never leaves this module.
"""

from typing import Callable, Optional, Sequence

import click

Validator = Callable[[str], Optional[str]]


def _value_proc(validate: Optional[Validator], strip: bool = True) -> Callable[[str], str]:
    def process(value: str) -> str:
        if strip:
            value = value.strip()
        if validate is not None:
            error = validate(value)
            if error:
                raise click.BadParameter(error)
        return value

    return process


def require_non_empty(label: str) -> Validator:
    def validate(value: str) -> Optional[str]:
        return None if value else f"{label} is required"

    return validate


def validate_email(value: str) -> Optional[str]:
    if "@" not in value:
        return "Please enter a valid email address"
    return None


def exact_match(expected: str) -> Validator:
    def validate(value: str) -> Optional[str]:
        if value != expected:
            return f"Type '{expected}' to confirm"
        return None

    return validate


class Prompter:
    """Terminal prompts backed by click."""

    def confirm(self, message: str, default: bool = True) -> bool:
        return click.confirm(message, default=default)

    def text(
        self,
        message: str,
        default: Optional[str] = None,
        validate: Optional[Validator] = None,
        strip: bool = True,
    ) -> str:
        return click.prompt(
            message,
            default=default,
            type=str,
            value_proc=_value_proc(validate, strip=strip),
        )

    def password(self, message: str, validate: Optional[Validator] = None) -> str:
        return click.prompt(
            message,
            hide_input=True,
            type=str,
            value_proc=_value_proc(validate, strip=False),
        )

    def choice(self, message: str, choices: Sequence[str], default: Optional[str] = None) -> str:
        return click.prompt(
            message,
            type=click.Choice(list(choices)),
            default=default,
            show_choices=True,
        )
