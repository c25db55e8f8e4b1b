"""BaseService — foundation for graphwalk services.

Every service receives a :class:`GraphStore` at construction time and
reaches the store only through it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from graphwalk.infrastructure.store import GraphStore


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class TraverseService(BaseService):
            def traverse(self, vertex_table: str, edge_table: str) -> ServiceResult:
                with self._store.open_graph(vertex_table, edge_table) as graph:
                    ...
    """

    def __init__(self, store: GraphStore) -> None:
        self._store = store
