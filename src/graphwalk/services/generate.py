"""GenerateService — seed a store with a random directed graph.

The generated graph is built in memory as a NetworkX ``DiGraph`` and
written to the vertex and edge tables in one transaction.  Each vertex
draws an out-degree from ``edge_counts`` (weighted by ``probabilities``)
and links to vertices that have no incoming edge yet, so every
component is a tree hanging off one root.  Roots ("first vertices")
have no incoming edges and make good traversal starting points.
"""

from __future__ import annotations

import json
import math
import random
import uuid
from collections import deque
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any

import networkx as nx
from sqlalchemy import insert

from graphwalk.errors import TableNameConflictError
from graphwalk.infrastructure.database.schema import DEFAULT_EDGE_LABEL
from graphwalk.services.base import BaseService
from graphwalk.services.result import ServiceResult
from graphwalk.services.telemetry import trace_span, traced


def _new_id(rng: random.Random) -> str:
    return str(uuid.UUID(int=rng.getrandbits(128), version=4))


def build_random_graph(
    vertices: int,
    edge_counts: Sequence[int],
    weights: Sequence[float] | None = None,
    *,
    roots: int = 1,
    rng: random.Random | None = None,
) -> nx.DiGraph:
    """Build a random forest of *roots* trees over *vertices* vertices.

    Vertices are expanded breadth-first.  Each draws its out-degree from
    *edge_counts* and links to fresh, not-yet-linked vertices.  If every
    expanded vertex drew zero while fresh vertices remain, the next fresh
    vertex is hung off a random linked vertex so the root count holds.
    """
    rng = rng or random.Random()
    roots = max(1, min(roots, vertices))

    g: nx.DiGraph = nx.DiGraph()
    ids = [_new_id(rng) for _ in range(vertices)]
    for index, vertex_id in enumerate(ids):
        g.add_node(vertex_id, index=index)

    queue: deque[str] = deque(ids[:roots])
    linked: list[str] = list(ids[:roots])
    fresh: deque[str] = deque(ids[roots:])

    while fresh:
        if not queue:
            parent = rng.choice(linked)
            child = fresh.popleft()
            g.add_edge(parent, child, id=_new_id(rng))
            linked.append(child)
            queue.append(child)
            continue

        vertex_id = queue.popleft()
        (degree,) = rng.choices(edge_counts, weights=weights)
        for _ in range(degree):
            if not fresh:
                break
            child = fresh.popleft()
            g.add_edge(vertex_id, child, id=_new_id(rng))
            linked.append(child)
            queue.append(child)

    return g


def first_vertices(g: nx.DiGraph) -> list[str]:
    """Vertices with no incoming edge, in insertion order."""
    return [node for node, degree in g.in_degree() if degree == 0]


class GenerateService(BaseService):
    """Writes generated sample graphs into the store."""

    @staticmethod
    def _validate(
        vertices: int,
        edge_counts: Sequence[int],
        probabilities: Sequence[float] | None,
    ) -> str | None:
        """Return an error message for bad arguments, or None."""
        if vertices < 1:
            return "vertices must be at least 1"
        if not edge_counts:
            return "edge_counts must not be empty"
        if any(c < 0 for c in edge_counts):
            return "edge_counts must not be negative"
        if probabilities is None:
            return None
        if len(probabilities) != len(edge_counts):
            return (
                f"probabilities has {len(probabilities)} values "
                f"but edge_counts has {len(edge_counts)}"
            )
        if any(p < 0 for p in probabilities):
            return "probabilities must not be negative"
        if not math.isclose(sum(probabilities), 1.0, abs_tol=1e-6):
            return f"probabilities must sum to 1 (got {sum(probabilities):g})"
        return None

    @traced
    def generate(
        self,
        vertex_table: str,
        edge_table: str,
        *,
        vertices: int = 100,
        edge_counts: Sequence[int] = (1,),
        probabilities: Sequence[float] | None = None,
        distributed: bool = False,
        seed: int | None = None,
        label: str = DEFAULT_EDGE_LABEL,
    ) -> ServiceResult:
        """Generate and store a random graph.

        Args:
            vertex_table: Vertex table to write (created if missing).
            edge_table: Edge table to write (created if missing).
            vertices: Number of vertices to generate.
            edge_counts: Candidate out-degrees per vertex.
            probabilities: Weight of each entry in *edge_counts*;
                uniform when omitted.
            distributed: Grow one tree per entry in *edge_counts* instead
                of a single tree.
            seed: Seed for reproducible ids and shape.
            label: Label stored on every edge.
        """
        problem = self._validate(vertices, edge_counts, probabilities)
        if problem:
            return ServiceResult.failure(
                "generate",
                "INVALID_ARGUMENT",
                problem,
                vertices=vertices,
                edge_counts=list(edge_counts),
                probabilities=list(probabilities) if probabilities is not None else None,
            )

        try:
            metadata = self._store.init_tables(vertex_table, edge_table)
        except TableNameConflictError as exc:
            return ServiceResult.failure("generate", exc.error_code, exc.message, **exc.details)
        vt = metadata.tables[vertex_table]
        et = metadata.tables[edge_table]

        rng = random.Random(seed)
        roots = len(edge_counts) if distributed else 1
        warnings: list[str] = []
        if roots > vertices:
            warnings.append(f"Only {vertices} vertices available for {roots} roots")

        with trace_span("build_graph") as span:
            g = build_random_graph(vertices, edge_counts, probabilities, roots=roots, rng=rng)
            if span:
                span.annotate("vertices", g.number_of_nodes())
                span.annotate("edges", g.number_of_edges())

        now = datetime.now(UTC).isoformat()

        vertex_rows: list[dict[str, Any]] = [
            {"id": node, "properties": json.dumps(attrs), "created": now}
            for node, attrs in g.nodes(data=True)
        ]
        edge_rows: list[dict[str, Any]] = [
            {
                "id": attrs["id"],
                "out_vertex_id": source,
                "in_vertex_id": target,
                "label": label,
                "properties": None,
                "created": now,
            }
            for source, target, attrs in g.edges(data=True)
        ]

        with trace_span("write_rows"), self._store.transaction() as conn:
            conn.execute(insert(vt), vertex_rows)
            if edge_rows:
                conn.execute(insert(et), edge_rows)

        return ServiceResult(
            ok=True,
            op="generate",
            data={
                "vertex_table": vertex_table,
                "edge_table": edge_table,
                "vertex_count": g.number_of_nodes(),
                "edge_count": g.number_of_edges(),
                "first_vertices": first_vertices(g),
                "seed": seed,
            },
            warnings=warnings,
        )
