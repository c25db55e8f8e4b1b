"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy GraphStore initialization and
centralized result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from graphwalk.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from collections.abc import Callable

    from graphwalk.config.settings import GraphWalkSettings
    from graphwalk.infrastructure.store import GraphStore
    from graphwalk.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Subcommands access it via ``@click.pass_obj``.  The store is lazily
    initialized on first use so ``--help``, ``--version`` and usage
    errors never touch the database.
    """

    def __init__(self, settings: GraphWalkSettings) -> None:
        self.settings = settings
        self._store: GraphStore | None = None

        from graphwalk.config.logging import configure_logging
        from graphwalk.services.telemetry import set_telemetry

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)
        set_telemetry(settings.verbose)

    @property
    def store(self) -> GraphStore:
        """The graph store (created lazily on first access)."""
        if self._store is None:
            from graphwalk.infrastructure.store import GraphStore

            self._store = GraphStore(self.settings)
        return self._store

    def close(self) -> None:
        """Dispose of the store if it was ever opened."""
        if self._store is not None:
            self._store.close()
            self._store = None

    def run(self, operation: Callable[[GraphStore], ServiceResult]) -> None:
        """Run *operation* against the store and emit its result.

        Store failures surface as a :class:`click.ClickException` (exit 1).
        """
        from graphwalk.errors import GraphWalkError

        try:
            result = operation(self.store)
        except GraphWalkError as exc:
            raise click.ClickException(exc.message) from exc
        finally:
            self.close()
        self.emit(result)

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
