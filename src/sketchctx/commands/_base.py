"""Click base classes that add an on-demand ``--examples`` flag.

``--help`` stays short; ``--examples`` prints copy-pasteable invocations
and exits before any argument validation runs.
"""

from __future__ import annotations

from typing import Any

import click


class _ExamplesMixin:
    """Shared ``examples=`` handling for commands and groups."""

    examples: str | None

    def _install_examples(self, examples: str | None) -> None:
        self.examples = examples
        if not examples:
            return

        def _print(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
            if value and not ctx.resilient_parsing:
                click.echo(f"Examples for '{ctx.command_path}':\n")
                click.echo(examples)
                ctx.exit(0)

        params: list[click.Parameter] = self.params  # type: ignore[attr-defined]
        params.append(
            click.Option(
                ["--examples"],
                is_flag=True,
                expose_value=False,
                is_eager=True,
                callback=_print,
                help="Show usage examples.",
            )
        )


class SketchCommand(_ExamplesMixin, click.Command):
    """Command accepting ``examples=``."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._install_examples(examples)


class SketchGroup(_ExamplesMixin, click.Group):
    """Group accepting ``examples=``; subcommands default to :class:`SketchCommand`."""

    command_class = SketchCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._install_examples(examples)
