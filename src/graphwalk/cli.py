"""Root CLI group for graphwalk with global flags and command registration."""

from __future__ import annotations

import click

from graphwalk import __version__
from graphwalk.commands import register_commands
from graphwalk.commands._base import GwGroup
from graphwalk.commands._context import AppContext
from graphwalk.config.settings import GraphWalkSettings

_ROOT_EXAMPLES = """\
  graphwalk -l 4 -i <start-vertex-id> vertices edges
  graphwalk generate -n 500 vertices edges
  graphwalk traverse vertices edges
  graphwalk traverse -l 4 -i <start-vertex-id> vertices edges
  graphwalk --json --db-url sqlite:///graph.db traverse vertices edges"""


@click.group(
    cls=GwGroup,
    examples=_ROOT_EXAMPLES,
    default_command="traverse",
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.version_option(version=__version__, prog_name="graphwalk")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option("--db-url", default=None, help="SQLAlchemy URL of the graph store.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    db_url: str | None,
) -> None:
    """graphwalk — breadth-first inspection of graphs stored in vertex/edge tables.

    Without a command name the arguments go to traverse, so
    `graphwalk -l 2 -i ID VERTEX_TABLE EDGE_TABLE` walks two levels.
    Global flags come first.
    """
    settings = GraphWalkSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
        db_url=db_url,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
