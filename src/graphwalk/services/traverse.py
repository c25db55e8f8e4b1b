"""TraverseService — level-by-level breadth-first expansion.

Level 1 is the start vertex alone.  Every later level replaces the
frontier with the in-vertices of the outgoing edges of every vertex in
the previous frontier.  There is no visited set: a vertex reached along
two edges is reported twice, and cycles are walked again on each pass.
The walk stops after a fixed number of levels.
"""

from __future__ import annotations

import random
import time
from typing import TYPE_CHECKING, Any

import structlog

from graphwalk.config.models import DEFAULT_LEVEL_TO_TRAVERSE
from graphwalk.errors import NoSampleRowError, TableNameConflictError, TableNotFoundError
from graphwalk.infrastructure.graph.handle import Direction
from graphwalk.services.base import BaseService
from graphwalk.services.result import ServiceResult
from graphwalk.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from graphwalk.infrastructure.graph.handle import GraphHandle, Vertex

log = structlog.get_logger(__name__)


def _elapsed_ms(since: float) -> float:
    return round((time.perf_counter() - since) * 1000, 2)


class TraverseService(BaseService):
    """Walks a stored graph outward from one vertex."""

    @traced
    def traverse(
        self,
        vertex_table: str,
        edge_table: str,
        *,
        levels: int = DEFAULT_LEVEL_TO_TRAVERSE,
        start_vertex_id: str | None = None,
        seed: int | None = None,
    ) -> ServiceResult:
        """Report the frontier at each of *levels* depths.

        Args:
            vertex_table: Name of the table holding vertex rows.
            edge_table: Name of the table holding edge rows.
            levels: Number of levels to report, counting the start vertex
                as level 1.
            start_vertex_id: Row key to start from.  When missing or empty,
                a row key is sampled at random from *vertex_table*.
            seed: Seed for the sampler, for reproducible runs.
        """
        levels = max(1, levels)
        warnings: list[str] = []
        sampled = not start_vertex_id

        try:
            with self._store.open_graph(vertex_table, edge_table) as graph:
                if not start_vertex_id:
                    with trace_span("sample_vertex"):
                        start_vertex_id = graph.sample_vertex_id(random.Random(seed))

                log.info(
                    "traverse.start",
                    levels=levels,
                    start_vertex_id=start_vertex_id,
                    sampled=sampled,
                    vertex_table=vertex_table,
                    edge_table=edge_table,
                )

                started = time.perf_counter()
                start = graph.get_vertex(start_vertex_id)
                if start is None:
                    return ServiceResult.failure(
                        "traverse",
                        "NOT_FOUND",
                        f"Vertex '{start_vertex_id}' not found in '{vertex_table}'",
                        vertex_id=start_vertex_id,
                        table=vertex_table,
                    )
                reports = self._walk(graph, start, levels, warnings)
                elapsed = _elapsed_ms(started)
        except (TableNameConflictError, TableNotFoundError, NoSampleRowError) as exc:
            return ServiceResult.failure("traverse", exc.error_code, exc.message, **exc.details)

        total = sum(r["count"] for r in reports)
        log.info(
            "traverse.complete",
            elapsed_ms=elapsed,
            total_vertex_count=total,
            levels=levels,
        )

        return ServiceResult(
            ok=True,
            op="traverse",
            data={
                "vertex_table": vertex_table,
                "edge_table": edge_table,
                "start_vertex_id": start_vertex_id,
                "sampled": sampled,
                "levels_requested": levels,
                "levels": reports,
                "total_vertex_count": total,
                "elapsed_ms": elapsed,
            },
            warnings=list(dict.fromkeys(warnings)),
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _walk(
        self,
        graph: GraphHandle,
        start: Vertex,
        levels: int,
        warnings: list[str],
    ) -> list[dict[str, Any]]:
        # Adjacency is fixed for the duration of one read-only walk.
        adjacency: dict[str, list[Vertex]] = {}
        frontier: list[Vertex] = []
        reports: list[dict[str, Any]] = []

        for level in range(1, levels + 1):
            level_started = time.perf_counter()
            with trace_span(f"level_{level}") as span:
                if level == 1:
                    frontier = [start]
                else:
                    frontier = self._expand(graph, frontier, adjacency, warnings)
                if span:
                    span.annotate("vertices", len(frontier))

            elapsed = _elapsed_ms(level_started)
            vertex_ids = [v.id for v in frontier]
            log.info("traverse.level", depth=level, count=len(frontier), elapsed_ms=elapsed)
            log.debug("traverse.level.vertices", depth=level, vertices=vertex_ids)
            reports.append(
                {
                    "level": level,
                    "count": len(frontier),
                    "vertices": vertex_ids,
                    "elapsed_ms": elapsed,
                }
            )
        return reports

    @staticmethod
    def _expand(
        graph: GraphHandle,
        frontier: list[Vertex],
        adjacency: dict[str, list[Vertex]],
        warnings: list[str],
    ) -> list[Vertex]:
        """Return the out-neighbours of every vertex in *frontier*, in order."""
        next_frontier: list[Vertex] = []
        for vertex in frontier:
            neighbours = adjacency.get(vertex.id)
            if neighbours is None:
                neighbours = []
                out = vertex.out_edges()
                targets = graph.get_vertices(edge.vertex_id(Direction.IN) for edge in out)
                for edge in out:
                    target_id = edge.vertex_id(Direction.IN)
                    target = targets.get(target_id)
                    if target is None:
                        warnings.append(f"Edge '{edge.id}' points at missing vertex '{target_id}'")
                        continue
                    neighbours.append(target)
                adjacency[vertex.id] = neighbours
            next_frontier.extend(neighbours)
        return next_frontier
