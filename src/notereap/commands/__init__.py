"""Subcommand modules for notereap.

Provides register_commands() which uses deferred imports to keep
``notereap --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all commands on the root CLI group."""
    from notereap.commands.delete import delete, plan
    from notereap.commands.index_cmd import backlinks, index_cmd

    cli.add_command(plan)
    cli.add_command(delete)
    cli.add_command(backlinks)
    cli.add_command(index_cmd)
