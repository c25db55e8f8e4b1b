"""Graph store engine and vertex/edge table factories via SQLAlchemy Core."""

from graphwalk.infrastructure.database.engine import create_store_engine, init_graph_tables
from graphwalk.infrastructure.database.schema import edge_table, vertex_table

__all__ = [
    "create_store_engine",
    "edge_table",
    "init_graph_tables",
    "vertex_table",
]
