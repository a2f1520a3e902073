"""Commands: plan and delete — recursive deletion from a root note."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from notereap.commands._base import NrCommand
from notereap.domain.documents import Document
from notereap.domain.filters import DeletionScope
from notereap.domain.rewrite import RewritePolicy
from notereap.output.renderers import render_candidates
from notereap.services.deletion import DeletionService
from notereap.services.result import ErrorCode, ServiceResult

if TYPE_CHECKING:
    from collections.abc import Callable

    from notereap.commands._context import AppContext
    from notereap.config.settings import NotereapSettings


def _scope_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Shared --scope / --recursive options for plan and delete."""
    func = click.option(
        "--recursive/--no-recursive",
        default=None,
        help="Follow links of linked notes (default from config).",
    )(func)
    func = click.option(
        "--scope",
        type=click.Choice([s.value for s in DeletionScope]),
        default=None,
        help="Which linked documents to delete (default from config).",
    )(func)
    return func


def _settings_for(
    app: AppContext,
    *,
    scope: str | None,
    recursive: bool | None,
    **extra: dict[str, Any],
) -> NotereapSettings:
    return app.settings.with_overrides(delete={"scope": scope, "recursive": recursive}, **extra)


@click.command(
    cls=NrCommand,
    examples="""\
  notereap plan Projects/Apollo.md
  notereap plan Projects/Apollo.md --scope attachments-only
  notereap plan Projects/Apollo.md --no-recursive
  notereap --json plan Projects/Apollo.md""",
)
@click.argument("root")
@_scope_options
@click.pass_obj
def plan(app: AppContext, root: str, scope: str | None, recursive: bool | None) -> None:
    """List the notes and attachments that deleting ROOT's links would remove."""
    settings = _settings_for(app, scope=scope, recursive=recursive)
    app.emit(DeletionService(app.vault, settings).compute_deletion_set(root))


@click.command(
    cls=NrCommand,
    examples="""\
  notereap delete Projects/Apollo.md
  notereap delete Projects/Apollo.md --yes --scope text-only
  notereap delete Projects/Apollo.md --cleanup --policy keep-label
  notereap delete Projects/Apollo.md --backup-to ~/vault-backups
  notereap --json --no-interact delete Projects/Apollo.md --yes""",
)
@click.argument("root")
@_scope_options
@click.option("-y", "--yes", is_flag=True, help="Skip the confirmation prompt.")
@click.option(
    "--cleanup/--no-cleanup",
    default=None,
    help="Remove or rewrite references to deleted files (default from config).",
)
@click.option(
    "--policy",
    type=click.Choice([p.value for p in RewritePolicy]),
    default=None,
    help="How inline references are rewritten during cleanup.",
)
@click.option(
    "--backup-to",
    "backup_to",
    type=click.Path(file_okay=False),
    default=None,
    help="Copy files here before deleting them (enables backup).",
)
@click.pass_obj
def delete(
    app: AppContext,
    root: str,
    scope: str | None,
    recursive: bool | None,
    yes: bool,
    cleanup: bool | None,
    policy: str | None,
    backup_to: str | None,
) -> None:
    """Delete every note and attachment linked from ROOT (ROOT itself is kept)."""
    backup: dict[str, Any] = {}
    if backup_to:
        backup = {"enabled": True, "destination": backup_to}
    settings = _settings_for(
        app,
        scope=scope,
        recursive=recursive,
        backlinks={"cleanup": cleanup, "policy": policy},
        backup=backup,
    )
    svc = DeletionService(app.vault, settings)

    planned = svc.compute_deletion_set(root)
    if not planned.ok or planned.data["count"] == 0:
        app.emit(planned)
        return

    if settings.delete.confirm and not yes:
        if not app.interactive:
            app.emit(
                ServiceResult.failure(
                    "delete",
                    ErrorCode.CONFIRMATION_REQUIRED,
                    "Confirmation required: pass --yes to delete without prompting.",
                    data=planned.data,
                )
            )
            return
        click.echo(render_candidates(planned.data["items"]), err=True)
        count = planned.data["count"]
        if not click.confirm(f"DELETE {count} FILES?", default=False, err=True):
            app.emit(
                ServiceResult.failure("delete", ErrorCode.CANCELLED, "Deletion cancelled.")
            )
            return

    candidates = [Document(item["path"]) for item in planned.data["items"]]
    app.emit(svc.execute_deletion(candidates))
