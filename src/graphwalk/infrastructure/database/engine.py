"""Database engine setup for the graph store.

Any SQLAlchemy URL works; SQLite is the default and the one the test
suite runs against.  SQLAlchemy Core (not ORM) is used because
graphwalk is a short-lived CLI process — no benefit from session
management or identity maps.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import MetaData, create_engine, event
from sqlalchemy.engine import Engine, make_url

from graphwalk.infrastructure.database.schema import (
    edge_table,
    require_distinct_tables,
    vertex_table,
)


def create_store_engine(url: str, *, echo: bool = False) -> Engine:
    """Create an engine for *url*; file-backed SQLite gets WAL mode."""
    engine = create_engine(url, echo=echo)

    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite" and parsed.database not in (None, "", ":memory:"):

        @event.listens_for(engine, "connect")
        def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.close()

    return engine


def init_graph_tables(engine: Engine, vertex_table_name: str, edge_table_name: str) -> MetaData:
    """Create the vertex and edge tables if they don't exist.

    Idempotent — safe to call on a store that already holds the graph.

    Returns the metadata carrying both tables.

    Raises:
        TableNameConflictError: Both names are the same.
    """
    require_distinct_tables(vertex_table_name, edge_table_name)
    metadata = MetaData()
    vertex_table(metadata, vertex_table_name)
    edge_table(metadata, edge_table_name)
    metadata.create_all(engine)
    return metadata
