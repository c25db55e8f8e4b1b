"""Command: generate a random sample graph into a vertex/edge table pair."""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

import click

from graphwalk.commands._base import GwCommand
from graphwalk.services.generate import GenerateService

if TYPE_CHECKING:
    from collections.abc import Callable

    from graphwalk.commands._context import AppContext

_GENERATE_EXAMPLES = """\
  graphwalk generate vertices edges
  graphwalk generate -n 500 test.vertex.1 test.edge.1
  graphwalk generate -n 100 -d -e 1,2,3,4,5 -p 0.2,0.2,0.2,0.2,0.2 test.vertex.2 test.edge.2
  graphwalk -q generate --seed 42 vertices edges
  graphwalk generate --vertices 100 -ev 1,2 vertices edges"""

_T = TypeVar("_T")


def _split(param: click.Parameter, value: str, convert: Callable[[str], _T], kind: str) -> list[_T]:
    try:
        items = [convert(part) for part in value.split(",") if part.strip()]
    except ValueError:
        items = []
    if not items:
        msg = f"{param.opts[0]} needs comma-separated {kind}, got '{value}'."
        raise click.BadParameter(msg)
    return items


def _int_list(_ctx: click.Context, param: click.Parameter, value: str | None) -> list[int] | None:
    return None if value is None else _split(param, value, int, "integers")


def _float_list(
    _ctx: click.Context, param: click.Parameter, value: str | None
) -> list[float] | None:
    return None if value is None else _split(param, value, float, "numbers")


@click.command("generate", cls=GwCommand, examples=_GENERATE_EXAMPLES)
@click.argument("vertex_table_name")
@click.argument("edge_table_name")
@click.option(
    "-n",
    "--vertices",
    type=click.IntRange(min=1),
    default=None,
    help=(
        "Number of vertices (default from [generate] default_vertices). "
        "Spelled -n because -v is the global --verbose flag."
    ),
)
@click.option(
    "-e",
    "-ev",
    "--edge-counts",
    callback=_int_list,
    default=None,
    help="Comma-separated out-degrees to draw from (default: 1).",
)
@click.option(
    "-p",
    "--probabilities",
    callback=_float_list,
    default=None,
    help="Comma-separated weights for --edge-counts, summing to 1.",
)
@click.option(
    "-d",
    "--distributed",
    is_flag=True,
    help="One root vertex per --edge-counts entry instead of one overall.",
)
@click.option("--seed", type=int, default=None, help="Seed for reproducible output.")
@click.pass_obj
def generate(
    app: AppContext,
    vertex_table_name: str,
    edge_table_name: str,
    vertices: int | None,
    edge_counts: list[int] | None,
    probabilities: list[float] | None,
    distributed: bool,
    seed: int | None,
) -> None:
    """Fill a vertex/edge table pair with a random directed graph."""
    cfg = app.settings.generate
    app.run(
        lambda store: GenerateService(store).generate(
            vertex_table_name,
            edge_table_name,
            vertices=vertices or cfg.default_vertices,
            edge_counts=[1] if edge_counts is None else edge_counts,
            probabilities=probabilities,
            distributed=distributed,
            seed=seed,
            label=cfg.edge_label,
        )
    )
