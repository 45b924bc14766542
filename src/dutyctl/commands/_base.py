"""Click classes that add an eager ``--examples`` flag.

``--help`` stays short; worked invocations live behind ``--examples``
and are printed without touching the roster.
"""

from __future__ import annotations

import inspect
from typing import Any

import click


class _ExamplesMixin:
    """Shared ``examples=`` handling for commands and groups."""

    examples: str | None

    def _init_examples(self, examples: str | None) -> None:
        self.examples = inspect.cleandoc(examples) if examples else None
        if self.examples is None:
            return
        params: list[click.Parameter] = self.params  # type: ignore[attr-defined]
        params.append(
            click.Option(
                ["--examples"],
                is_flag=True,
                expose_value=False,
                is_eager=True,
                callback=self._print_examples,
                help="Show usage examples.",
            )
        )

    def _print_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if value:
            click.echo(f"Examples for '{ctx.command_path}':\n\n{self.examples}")
            ctx.exit(0)


class DutyCommand(_ExamplesMixin, click.Command):
    """Command accepting ``examples=`` in its decorator."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)


class DutyGroup(_ExamplesMixin, click.Group):
    """Group accepting ``examples=``; its subcommands are DutyCommands."""

    command_class = DutyCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)
