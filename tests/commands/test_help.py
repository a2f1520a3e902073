"""Parametrized help tests for all CLI commands."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from notereap.cli import cli

# (CLI args, expected keywords in output)
HELP_COMMANDS: list[tuple[list[str], list[str]]] = [
    (["--help"], ["plan", "delete", "backlinks", "index", "--vault", "--json", "--no-interact"]),
    (["plan", "--help"], ["ROOT", "--scope", "--recursive / --no-recursive"]),
    (["delete", "--help"], ["ROOT", "--yes", "--cleanup", "--policy", "--backup-to"]),
    (["backlinks", "--help"], ["PATH"]),
    (["index", "--help"], ["--rebuild"]),
]


@pytest.mark.parametrize(
    ("args", "expected"),
    HELP_COMMANDS,
    ids=[" ".join(args) for args, _ in HELP_COMMANDS],
)
def test_help(cli_runner: CliRunner, args: list[str], expected: list[str]) -> None:
    result = cli_runner.invoke(cli, args)
    assert result.exit_code == 0
    for keyword in expected:
        assert keyword in result.output
