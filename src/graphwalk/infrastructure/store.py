"""GraphStore — the single dependency injected into every service.

Owns the SQLAlchemy engine built from settings and hands out graph
handles for a (vertex table, edge table) pair.  Reads go through
:meth:`open_graph`; the generator's bulk load goes through
:meth:`transaction`.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

from sqlalchemy import MetaData
from sqlalchemy.exc import SQLAlchemyError

from graphwalk.errors import GraphStoreError
from graphwalk.infrastructure.database.engine import create_store_engine, init_graph_tables
from graphwalk.infrastructure.graph.handle import open_graph

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy import Connection
    from sqlalchemy.engine import Engine

    from graphwalk.config.settings import GraphWalkSettings
    from graphwalk.infrastructure.graph.handle import GraphHandle

logger = logging.getLogger(__name__)


class GraphStore:
    """Entry point to the graph store configured in settings."""

    def __init__(self, settings: GraphWalkSettings) -> None:
        self._settings = settings
        self._engine = create_store_engine(settings.store_url, echo=settings.store.echo)

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def settings(self) -> GraphWalkSettings:
        return self._settings

    @contextmanager
    def open_graph(self, vertex_table_name: str, edge_table_name: str) -> Iterator[GraphHandle]:
        """Open a read-only handle on the graph held in the two tables."""
        with open_graph(self._engine, vertex_table_name, edge_table_name) as graph:
            yield graph

    def init_tables(self, vertex_table_name: str, edge_table_name: str) -> MetaData:
        """Create the vertex/edge tables if needed; return their metadata."""
        try:
            return init_graph_tables(self._engine, vertex_table_name, edge_table_name)
        except SQLAlchemyError as exc:
            logger.exception("init_tables failed for %s/%s", vertex_table_name, edge_table_name)
            raise GraphStoreError(
                f"Could not create tables '{vertex_table_name}'/'{edge_table_name}': {exc}",
                details={"vertex_table": vertex_table_name, "edge_table": edge_table_name},
                cause=exc,
            ) from exc

    @contextmanager
    def transaction(self) -> Iterator[Connection]:
        """Yield a connection inside ``engine.begin()`` (commit or rollback)."""
        try:
            with self._engine.begin() as conn:
                yield conn
        except SQLAlchemyError as exc:
            logger.exception("Store transaction failed")
            raise GraphStoreError(f"Store transaction failed: {exc}", cause=exc) from exc

    def close(self) -> None:
        """Release pooled connections."""
        self._engine.dispose()
