"""Command: breadth-first traversal from one vertex."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from graphwalk.commands._base import GwCommand
from graphwalk.config.models import DEFAULT_LEVEL_TO_TRAVERSE
from graphwalk.services.traverse import TraverseService

if TYPE_CHECKING:
    from graphwalk.commands._context import AppContext

_TRAVERSE_EXAMPLES = """\
  graphwalk traverse vertices edges
  graphwalk traverse -l 5 vertices edges
  graphwalk traverse -i 2f1c9a3e-0b7d-4c55-9e0a-51f0d3b6a7c2 vertices edges
  graphwalk --json traverse --seed 7 vertices edges
  graphwalk --db-url postgresql://host/graphs traverse -l 2 test.vertex.1 test.edge.1"""


@click.command("traverse", cls=GwCommand, examples=_TRAVERSE_EXAMPLES)
@click.argument("vertex_table_name")
@click.argument("edge_table_name")
@click.option(
    "-l",
    "--levels",
    "levels",
    type=click.IntRange(min=1),
    default=None,
    help=f"Levels to traverse, start vertex included (default: {DEFAULT_LEVEL_TO_TRAVERSE}).",
)
@click.option(
    "-i",
    "--start-vertex-id",
    "start_vertex_id",
    default=None,
    help="Vertex id to start from (default: a random row key from the vertex table).",
)
@click.option("--seed", type=int, default=None, help="Seed for start vertex sampling.")
@click.pass_obj
def traverse(
    app: AppContext,
    vertex_table_name: str,
    edge_table_name: str,
    levels: int | None,
    start_vertex_id: str | None,
    seed: int | None,
) -> None:
    """Print the vertices found at each level of a breadth-first walk."""
    if levels is None:
        levels = app.settings.traverse.default_levels
    app.run(
        lambda store: TraverseService(store).traverse(
            vertex_table_name,
            edge_table_name,
            levels=levels,
            start_vertex_id=start_vertex_id,
            seed=seed,
        )
    )
