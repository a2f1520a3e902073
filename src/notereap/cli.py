"""The ``notereap`` command line: global flags, then one subcommand."""

from __future__ import annotations

from pathlib import Path

import click

from notereap import __version__
from notereap.commands import register_commands
from notereap.commands._base import NrGroup
from notereap.commands._context import AppContext
from notereap.config.settings import NotereapSettings


@click.group(
    cls=NrGroup,
    invoke_without_command=True,
    examples="""\
  notereap plan Projects/Apollo.md
  notereap delete Projects/Apollo.md --cleanup
  notereap --vault ~/notes --json backlinks Crew.md
  notereap index --rebuild""",
)
@click.version_option(version=__version__, prog_name="notereap")
@click.option(
    "--vault",
    "vault_root",
    type=click.Path(exists=True, file_okay=False, resolve_path=True, path_type=Path),
    default=None,
    help="Vault directory (default: where notereap.toml is found, else CWD).",
)
@click.option("-c", "--config", "config_path", default=None, help="Read this notereap.toml.")
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Print bare paths; log errors only.")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logs.")
@click.option("--log-json", is_flag=True, help="Write logs to stderr as JSON lines.")
@click.option("--no-interact", is_flag=True, help="Never prompt; fail instead.")
@click.pass_context
def cli(
    ctx: click.Context,
    vault_root: Path | None,
    config_path: str | None,
    **flags: bool,
) -> None:
    """notereap — delete a note's linked notes and attachments, recursively."""
    settings = NotereapSettings.from_cli(config_path=config_path, vault_root=vault_root, **flags)
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
