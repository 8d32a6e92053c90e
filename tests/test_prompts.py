"""Prompter behaviour against real click prompts fed by CliRunner input."""

import click
from click.testing import CliRunner

from df_installer.prompts import (
    Prompter,
    exact_match,
    require_non_empty,
    validate_email,
)


def _ask(ask, user_input):
    """Run ``ask(prompter)`` inside a click command and echo its answer."""

    @click.command()
    def command():
        click.echo(f"ANSWER={ask(Prompter())!r}")

    return CliRunner().invoke(command, [], input=user_input)


def test_text_reprompts_on_validation_error():
    result = _ask(lambda p: p.text("Email", validate=validate_email), "nope\nadmin@example.com\n")

    assert result.exit_code == 0
    assert "Please enter a valid email address" in result.output
    assert "ANSWER='admin@example.com'" in result.output


def test_text_default_and_strip():
    assert "ANSWER='db'" in _ask(lambda p: p.text("Service", default="db"), "\n").output
    assert "ANSWER='db2'" in _ask(lambda p: p.text("Service", default="db"), "  db2  \n").output


def test_exact_match_is_case_sensitive():
    result = _ask(lambda p: p.text("Confirm", validate=exact_match("delete")), "DELETE\ndelete\n")

    assert "Type 'delete' to confirm" in result.output
    assert "ANSWER='delete'" in result.output


def test_text_without_strip_rejects_padded_answer():
    result = _ask(
        lambda p: p.text("Confirm", validate=exact_match("delete"), strip=False),
        " delete \ndelete\n",
    )

    assert "Type 'delete' to confirm" in result.output
    assert "ANSWER='delete'" in result.output


def test_password_keeps_surrounding_whitespace():
    result = _ask(lambda p: p.password("Password", validate=require_non_empty("Password")), " pw \n")

    assert "ANSWER=' pw '" in result.output


def test_confirm_default():
    assert "ANSWER=False" in _ask(lambda p: p.confirm("Overwrite?", default=False), "\n").output
    assert "ANSWER=True" in _ask(lambda p: p.confirm("Proceed?"), "y\n").output


def test_choice_rejects_unknown_option():
    result = _ask(
        lambda p: p.choice("Action", ["use", "reinstall", "cancel"], default="use"),
        "maybe\nreinstall\n",
    )

    assert "ANSWER='reinstall'" in result.output


def test_validators():
    assert require_non_empty("API key")("") == "API key is required"
    assert require_non_empty("API key")("x") is None
    assert validate_email("a@b") is None
    assert exact_match("delete")("delete") is None
