"""SQLAlchemy Core table factories for vertex and edge tables.

A graph lives in two tables whose names are chosen on the command line,
so tables are built per name rather than declared once at import time.
Each factory call registers the table on the given :class:`MetaData`;
asking twice for the same name returns the already-registered table.
"""

from __future__ import annotations

from sqlalchemy import Column, Index, MetaData, Table, Text

from graphwalk.errors import TableNameConflictError

DEFAULT_EDGE_LABEL = "links"


def require_distinct_tables(vertex_table_name: str, edge_table_name: str) -> None:
    """Raise TableNameConflictError if both names point at one table."""
    if vertex_table_name == edge_table_name:
        raise TableNameConflictError(
            f"Vertex and edge tables must differ, both are '{vertex_table_name}'",
            details={"table": vertex_table_name},
        )


def vertex_table(metadata: MetaData, name: str) -> Table:
    """Return the vertex table *name*: one row per vertex, keyed by row key."""
    if name in metadata.tables:
        return metadata.tables[name]
    return Table(
        name,
        metadata,
        Column("id", Text, primary_key=True),  # row key
        Column("properties", Text),  # JSON object
        Column("created", Text, nullable=False),
    )


def edge_table(metadata: MetaData, name: str) -> Table:
    """Return the edge table *name*: one row per directed edge.

    ``out_vertex_id`` is the vertex the edge leaves, ``in_vertex_id`` the
    vertex it enters.  Outgoing-edge lookups read by ``out_vertex_id``.
    """
    if name in metadata.tables:
        return metadata.tables[name]
    table = Table(
        name,
        metadata,
        Column("id", Text, primary_key=True),
        Column("out_vertex_id", Text, nullable=False),
        Column("in_vertex_id", Text, nullable=False),
        Column("label", Text, default=DEFAULT_EDGE_LABEL, server_default=DEFAULT_EDGE_LABEL),
        Column("properties", Text),  # JSON object
        Column("created", Text, nullable=False),
    )
    Index(f"ix_{name}_out_vertex_id", table.c.out_vertex_id)
    return table
