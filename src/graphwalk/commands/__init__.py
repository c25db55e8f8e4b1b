"""Subcommand modules for graphwalk.

Provides register_commands() which uses deferred imports to keep
``graphwalk --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from graphwalk.commands.generate import generate
    from graphwalk.commands.traverse import traverse

    cli.add_command(traverse)
    cli.add_command(generate)
