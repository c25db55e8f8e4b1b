"""Custom Click base classes with --examples support and exit code 1 on misuse.

Provides GwCommand and GwGroup that accept an ``examples`` parameter.
When ``--examples`` is passed, the command prints usage examples and exits.
This keeps ``--help`` concise while making examples available on demand.

Both classes report usage errors (bad option values, missing arguments,
unknown options) with exit code 1 instead of Click's default 2.
"""

from __future__ import annotations

from typing import Any

import click

USAGE_ERROR_EXIT_CODE = 1


def _add_examples_option(cmd: click.Command | click.Group, examples: str) -> None:
    """Attach an eager ``--examples`` flag to a Click command or group."""

    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=show_examples,
            help="Show usage examples.",
        )
    )


def _parse_with_usage_exit(
    parse: Any,
    ctx: click.Context,
    args: list[str],
) -> list[str]:
    try:
        return parse(ctx, args)
    except click.UsageError as exc:
        exc.exit_code = USAGE_ERROR_EXIT_CODE
        raise


class GwCommand(click.Command):
    """Click Command subclass with ``--examples`` and exit code 1 on misuse."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        return _parse_with_usage_exit(super().parse_args, ctx, args)


class GwGroup(click.Group):
    """Click Group subclass with ``--examples`` and exit code 1 on misuse.

    Sets ``command_class = GwCommand`` so all subcommands automatically
    accept the ``examples`` parameter without explicit ``cls=`` each time.

    With ``default_command`` set, arguments that do not start with a
    registered command name are handed to that command, so
    ``graphwalk -l 2 vertices edges`` runs ``graphwalk traverse -l 2
    vertices edges``.  Options the group does not know are passed
    through to the default command rather than rejected here.
    """

    command_class = GwCommand

    def __init__(
        self,
        *args: Any,
        examples: str | None = None,
        default_command: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        self.default_command = default_command
        if default_command:
            self.context_settings.setdefault("ignore_unknown_options", True)
        if examples:
            _add_examples_option(self, examples)

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        return _parse_with_usage_exit(super().parse_args, ctx, args)

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str | None, click.Command | None, list[str]]:
        if self.default_command and args and self.get_command(ctx, args[0]) is None:
            args = [self.default_command, *args]
        try:
            return super().resolve_command(ctx, args)
        except click.UsageError as exc:
            exc.exit_code = USAGE_ERROR_EXIT_CODE
            raise
