"""Commands: index and backlinks — link index maintenance and inspection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from notereap.commands._base import NrCommand
from notereap.services.index import IndexService

if TYPE_CHECKING:
    from notereap.commands._context import AppContext


@click.command(
    name="index",
    cls=NrCommand,
    examples="""\
  notereap index
  notereap index --rebuild
  notereap -v index""",
)
@click.option("--rebuild", is_flag=True, help="Discard the index and re-read every file.")
@click.pass_obj
def index_cmd(app: AppContext, rebuild: bool) -> None:
    """Refresh the link index and summarize the vault's link graph."""
    app.emit(IndexService(app.vault, app.settings).refresh(rebuild=rebuild))


@click.command(
    cls=NrCommand,
    examples="""\
  notereap backlinks Projects/Apollo.md
  notereap --json backlinks assets/diagram.png""",
)
@click.argument("path")
@click.pass_obj
def backlinks(app: AppContext, path: str) -> None:
    """List the documents that link to or embed PATH."""
    app.emit(IndexService(app.vault, app.settings).backlinks(path))
