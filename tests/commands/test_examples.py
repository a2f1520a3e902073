"""Tests for --examples flag on CLI commands."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from notereap.cli import cli

# (CLI args, expected keywords in output)
EXAMPLES_COMMANDS: list[tuple[list[str], list[str]]] = [
    (["--examples"], ["notereap plan", "notereap index --rebuild"]),
    (["plan", "--examples"], ["--scope attachments-only", "--no-recursive"]),
    (["delete", "--examples"], ["--policy keep-label", "--backup-to"]),
    (["backlinks", "--examples"], ["notereap backlinks"]),
    (["index", "--examples"], ["notereap index --rebuild"]),
]


@pytest.mark.parametrize(
    ("args", "expected"),
    EXAMPLES_COMMANDS,
    ids=[" ".join(args) for args, _ in EXAMPLES_COMMANDS],
)
def test_examples(cli_runner: CliRunner, args: list[str], expected: list[str]) -> None:
    result = cli_runner.invoke(cli, args)
    assert result.exit_code == 0, result.output
    assert "Examples for" in result.output
    for keyword in expected:
        assert keyword in result.output
