"""Click command classes for notereap.

Every notereap command and the root group take an ``examples`` string,
shown by an eager ``--examples`` flag instead of cluttering ``--help``.
"""

from __future__ import annotations

from typing import Any

import click


class _ExamplesMixin:
    """Adds an eager ``--examples`` option when *examples* text is given."""

    params: list[click.Parameter]

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._print_examples,
                    help="Show usage examples and exit.",
                )
            )

    def _print_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n\n{self.examples}")
        ctx.exit(0)


class NrCommand(_ExamplesMixin, click.Command):
    """A notereap subcommand."""


class NrGroup(_ExamplesMixin, click.Group):
    """The notereap root group; its subcommands default to :class:`NrCommand`."""

    command_class = NrCommand
