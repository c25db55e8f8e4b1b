"""GraphHandle — vertex and adjacency lookups over two named tables.

The handle holds a single connection for its lifetime and never writes.
Adjacency is read on demand (one keyed read per vertex), so opening a
handle costs nothing regardless of how large the stored graph is.

Open handles through :func:`open_graph`, which guarantees the connection
is released on every exit path.
"""

from __future__ import annotations

import json
import logging
import random
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from sqlalchemy import MetaData, func, inspect, select
from sqlalchemy.exc import SQLAlchemyError

from graphwalk.errors import GraphStoreError, NoSampleRowError, TableNotFoundError
from graphwalk.infrastructure.database.schema import (
    DEFAULT_EDGE_LABEL,
    edge_table,
    require_distinct_tables,
    vertex_table,
)

if TYPE_CHECKING:
    from sqlalchemy import Connection, Table
    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)


class Direction(StrEnum):
    """Edge endpoint selector.

    ``OUT`` is the vertex an edge leaves, ``IN`` the vertex it enters.
    """

    OUT = "out"
    IN = "in"


@dataclass(frozen=True)
class Edge:
    """A directed edge row."""

    id: str
    out_vertex_id: str
    in_vertex_id: str
    label: str = DEFAULT_EDGE_LABEL
    properties: dict[str, Any] = field(default_factory=dict, compare=False)

    def vertex_id(self, direction: Direction) -> str:
        """Return the id of the endpoint selected by *direction*."""
        if direction is Direction.OUT:
            return self.out_vertex_id
        return self.in_vertex_id


@dataclass(frozen=True)
class Vertex:
    """A vertex row bound to the handle that loaded it.

    Equality and hashing use the row key only.
    """

    id: str
    properties: dict[str, Any] = field(default_factory=dict, compare=False)
    _graph: GraphHandle | None = field(default=None, repr=False, compare=False)

    def out_edges(self) -> list[Edge]:
        """Edges leaving this vertex, ordered by edge id."""
        if self._graph is None:
            msg = f"Vertex '{self.id}' is not bound to a graph handle"
            raise RuntimeError(msg)
        return self._graph.out_edges(self.id)

    def __str__(self) -> str:
        return self.id


@contextmanager
def _store_errors(operation: str, table: str) -> Iterator[None]:
    """Log and re-raise SQLAlchemy failures as GraphStoreError."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception("%s failed on table %s", operation, table)
        raise GraphStoreError(
            f"{operation} failed on table '{table}': {exc}",
            details={"operation": operation, "table": table},
            cause=exc,
        ) from exc


def _load_properties(raw: str | None, *, table: str, row_id: str) -> dict[str, Any]:
    """Parse a JSON ``properties`` cell; non-JSON text is kept under ``value``."""
    if not raw:
        return {}
    try:
        loaded = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Row %s in %s has non-JSON properties; keeping raw text", row_id, table)
        return {"value": raw}
    return loaded if isinstance(loaded, dict) else {"value": loaded}


class GraphHandle:
    """Read-only view of the graph stored in *vertices* and *edges*."""

    def __init__(self, conn: Connection, vertices: Table, edges: Table) -> None:
        self._conn = conn
        self._vertices = vertices
        self._edges = edges

    @property
    def vertex_table_name(self) -> str:
        return self._vertices.name

    @property
    def edge_table_name(self) -> str:
        return self._edges.name

    # ------------------------------------------------------------------
    # Vertices
    # ------------------------------------------------------------------

    def get_vertex(self, vertex_id: str) -> Vertex | None:
        """Return the vertex with row key *vertex_id*, or None."""
        v = self._vertices
        with _store_errors("get_vertex", v.name):
            row = self._conn.execute(
                select(v.c.id, v.c.properties).where(v.c.id == vertex_id)
            ).first()
        if row is None:
            return None
        return self._vertex(row)

    def get_vertices(self, vertex_ids: Iterable[str]) -> dict[str, Vertex]:
        """Batch lookup. Unknown ids are simply absent from the result."""
        wanted = list(dict.fromkeys(vertex_ids))
        if not wanted:
            return {}
        v = self._vertices
        with _store_errors("get_vertices", v.name):
            rows = self._conn.execute(
                select(v.c.id, v.c.properties).where(v.c.id.in_(wanted))
            ).all()
        return {row.id: self._vertex(row) for row in rows}

    def _vertex(self, row: Any) -> Vertex:
        properties = _load_properties(row.properties, table=self._vertices.name, row_id=row.id)
        return Vertex(id=row.id, properties=properties, _graph=self)

    def count_vertices(self) -> int:
        v = self._vertices
        with _store_errors("count_vertices", v.name):
            return int(self._conn.execute(select(func.count()).select_from(v)).scalar_one())

    def sample_vertex_id(self, rng: random.Random | None = None) -> str:
        """Pick a random row key from the vertex table.

        Raises:
            NoSampleRowError: The vertex table is empty.
        """
        rng = rng or random.Random()
        total = self.count_vertices()
        if total == 0:
            raise NoSampleRowError(
                f"No sample data row key found in '{self._vertices.name}'",
                details={"table": self._vertices.name},
            )

        v = self._vertices
        offset = rng.randrange(total)
        with _store_errors("sample_vertex_id", v.name):
            row = self._conn.execute(
                select(v.c.id).order_by(v.c.id).offset(offset).limit(1)
            ).first()
        if row is None:
            raise NoSampleRowError(
                f"No sample data row key found in '{v.name}'",
                details={"table": v.name, "offset": offset},
            )
        logger.debug("Sampled row key %s at offset %d of %d", row.id, offset, total)
        return str(row.id)

    # ------------------------------------------------------------------
    # Edges
    # ------------------------------------------------------------------

    def out_edges(self, vertex_id: str) -> list[Edge]:
        """Edges whose out-vertex is *vertex_id*, ordered by edge id."""
        e = self._edges
        with _store_errors("out_edges", e.name):
            rows = self._conn.execute(
                select(e).where(e.c.out_vertex_id == vertex_id).order_by(e.c.id)
            ).all()
        return [
            Edge(
                id=row.id,
                out_vertex_id=row.out_vertex_id,
                in_vertex_id=row.in_vertex_id,
                label=row.label,
                properties=_load_properties(row.properties, table=e.name, row_id=row.id),
            )
            for row in rows
        ]


def _require_tables(conn: Connection, *names: str) -> None:
    for name in names:
        with _store_errors("has_table", name):
            exists = inspect(conn).has_table(name)
        if not exists:
            raise TableNotFoundError(f"Table '{name}' does not exist", details={"table": name})


@contextmanager
def open_graph(
    engine: Engine,
    vertex_table_name: str,
    edge_table_name: str,
) -> Iterator[GraphHandle]:
    """Open a :class:`GraphHandle`; the connection is closed on exit.

    Raises:
        TableNameConflictError: Both names are the same.
        TableNotFoundError: Either table is missing from the store.
        GraphStoreError: The store could not be reached.
    """
    require_distinct_tables(vertex_table_name, edge_table_name)
    with _store_errors("connect", vertex_table_name):
        conn = engine.connect()
    try:
        _require_tables(conn, vertex_table_name, edge_table_name)
        metadata = MetaData()
        handle = GraphHandle(
            conn,
            vertex_table(metadata, vertex_table_name),
            edge_table(metadata, edge_table_name),
        )
        logger.debug("Opened graph %s/%s", vertex_table_name, edge_table_name)
        yield handle
    finally:
        conn.close()
