"""Tests for GraphHandle lookups and open_graph lifecycle."""

from __future__ import annotations

import json
import logging
import random

import pytest
from sqlalchemy import update

from graphwalk.errors import NoSampleRowError, TableNameConflictError, TableNotFoundError
from graphwalk.infrastructure.graph.handle import Direction, Edge, Vertex, open_graph
from graphwalk.infrastructure.store import GraphStore
from tests.conftest import EDGE_TABLE, VERTEX_TABLE, seed_graph


class TestVertices:
    def test_get_vertex(self, store: GraphStore) -> None:
        seed_graph(store, [("A", "B")])
        vt = store.init_tables(VERTEX_TABLE, EDGE_TABLE).tables[VERTEX_TABLE]
        with store.engine.begin() as conn:
            conn.execute(
                update(vt).where(vt.c.id == "A").values(properties=json.dumps({"name": "alpha"}))
            )
        with store.open_graph(VERTEX_TABLE, EDGE_TABLE) as graph:
            vertex = graph.get_vertex("A")
        assert vertex is not None
        assert vertex.id == "A"
        assert vertex.properties == {"name": "alpha"}
        assert str(vertex) == "A"

    def test_get_vertex_missing(self, store: GraphStore) -> None:
        seed_graph(store, [("A", "B")])
        with store.open_graph(VERTEX_TABLE, EDGE_TABLE) as graph:
            assert graph.get_vertex("Z") is None

    def test_get_vertices_skips_unknown(self, store: GraphStore) -> None:
        seed_graph(store, [("A", "B")])
        with store.open_graph(VERTEX_TABLE, EDGE_TABLE) as graph:
            found = graph.get_vertices(["A", "A", "Z"])
            assert set(found) == {"A"}
            assert graph.get_vertices([]) == {}

    def test_count_vertices(self, store: GraphStore) -> None:
        seed_graph(store, [("A", "B"), ("B", "C")], vertices=["D"])
        with store.open_graph(VERTEX_TABLE, EDGE_TABLE) as graph:
            assert graph.count_vertices() == 4

    def test_equality_by_id(self) -> None:
        assert Vertex(id="A", properties={"x": 1}) == Vertex(id="A")
        assert len({Vertex(id="A"), Vertex(id="A", properties={"y": 2})}) == 1

    def test_unbound_vertex_has_no_edges(self) -> None:
        with pytest.raises(RuntimeError, match="not bound"):
            Vertex(id="A").out_edges()


class TestEdges:
    def test_out_edges_in_id_order(self, store: GraphStore) -> None:
        seed_graph(store, [("A", "C"), ("A", "B"), ("B", "A")])
        with store.open_graph(VERTEX_TABLE, EDGE_TABLE) as graph:
            edges = graph.out_edges("A")
        assert [e.in_vertex_id for e in edges] == ["C", "B"]
        assert all(e.out_vertex_id == "A" for e in edges)
        assert edges[0].label == "links"
        assert edges[0].properties == {}

    def test_vertex_out_edges(self, store: GraphStore) -> None:
        seed_graph(store, [("A", "B")])
        with store.open_graph(VERTEX_TABLE, EDGE_TABLE) as graph:
            vertex = graph.get_vertex("A")
            assert vertex is not None
            assert [e.in_vertex_id for e in vertex.out_edges()] == ["B"]

    def test_no_out_edges(self, store: GraphStore) -> None:
        seed_graph(store, [("A", "B")])
        with store.open_graph(VERTEX_TABLE, EDGE_TABLE) as graph:
            assert graph.out_edges("B") == []

    def test_direction(self) -> None:
        edge = Edge(id="e1", out_vertex_id="A", in_vertex_id="B")
        assert edge.vertex_id(Direction.OUT) == "A"
        assert edge.vertex_id(Direction.IN) == "B"


class TestSampling:
    def test_sample_returns_existing_key(self, store: GraphStore) -> None:
        seed_graph(store, [("A", "B"), ("B", "C")])
        with store.open_graph(VERTEX_TABLE, EDGE_TABLE) as graph:
            assert graph.sample_vertex_id() in {"A", "B", "C"}

    def test_sample_seeded(self, store: GraphStore) -> None:
        seed_graph(store, [], vertices=[f"v{i:02d}" for i in range(30)])
        with store.open_graph(VERTEX_TABLE, EDGE_TABLE) as graph:
            first = graph.sample_vertex_id(random.Random(3))
            second = graph.sample_vertex_id(random.Random(3))
        assert first == second

    def test_sample_empty_table(self, store: GraphStore) -> None:
        seed_graph(store, [])
        with store.open_graph(VERTEX_TABLE, EDGE_TABLE) as graph:
            with pytest.raises(NoSampleRowError) as exc_info:
                graph.sample_vertex_id()
        assert exc_info.value.error_code == "NO_SAMPLE_ROW"
        assert exc_info.value.details["table"] == VERTEX_TABLE


class TestOpenGraph:
    def test_missing_vertex_table(self, store: GraphStore) -> None:
        with pytest.raises(TableNotFoundError) as exc_info:
            with open_graph(store.engine, VERTEX_TABLE, EDGE_TABLE):
                pass
        assert exc_info.value.details["table"] == VERTEX_TABLE

    def test_missing_edge_table(self, store: GraphStore) -> None:
        store.init_tables(VERTEX_TABLE, EDGE_TABLE)
        with pytest.raises(TableNotFoundError) as exc_info:
            with open_graph(store.engine, VERTEX_TABLE, "no.such.edges"):
                pass
        assert exc_info.value.details["table"] == "no.such.edges"

    def test_table_names(self, store: GraphStore) -> None:
        seed_graph(store, [("A", "B")])
        with store.open_graph(VERTEX_TABLE, EDGE_TABLE) as graph:
            assert graph.vertex_table_name == VERTEX_TABLE
            assert graph.edge_table_name == EDGE_TABLE

    def test_connection_released_on_error(self, store: GraphStore) -> None:
        seed_graph(store, [("A", "B")])
        with pytest.raises(KeyError):
            with store.open_graph(VERTEX_TABLE, EDGE_TABLE):
                raise KeyError("boom")
        assert store.engine.pool.checkedout() == 0  # type: ignore[attr-defined]

    def test_connection_released_when_table_missing(self, store: GraphStore) -> None:
        with pytest.raises(TableNotFoundError):
            with store.open_graph(VERTEX_TABLE, EDGE_TABLE):
                pass
        assert store.engine.pool.checkedout() == 0  # type: ignore[attr-defined]


class TestRawProperties:
    def _set_properties(self, store: GraphStore, vertex_id: str, raw: str) -> None:
        vt = store.init_tables(VERTEX_TABLE, EDGE_TABLE).tables[VERTEX_TABLE]
        with store.engine.begin() as conn:
            conn.execute(update(vt).where(vt.c.id == vertex_id).values(properties=raw))

    def test_non_json_kept_as_value(
        self, store: GraphStore, caplog: pytest.LogCaptureFixture
    ) -> None:
        seed_graph(store, [("A", "B")])
        self._set_properties(store, "A", "not json")
        with caplog.at_level(logging.WARNING), store.open_graph(VERTEX_TABLE, EDGE_TABLE) as graph:
            vertex = graph.get_vertex("A")
        assert vertex is not None
        assert vertex.properties == {"value": "not json"}
        assert "non-JSON properties" in caplog.text

    def test_non_json_in_batch_lookup(self, store: GraphStore) -> None:
        seed_graph(store, [("A", "B")])
        self._set_properties(store, "B", "{broken")
        with store.open_graph(VERTEX_TABLE, EDGE_TABLE) as graph:
            found = graph.get_vertices(["A", "B"])
        assert found["B"].properties == {"value": "{broken"}
        assert found["A"].properties == {}

    def test_json_scalar_wrapped(self, store: GraphStore) -> None:
        seed_graph(store, [("A", "B")])
        self._set_properties(store, "A", "[1, 2]")
        with store.open_graph(VERTEX_TABLE, EDGE_TABLE) as graph:
            vertex = graph.get_vertex("A")
        assert vertex is not None
        assert vertex.properties == {"value": [1, 2]}

    def test_non_json_edge_properties(self, store: GraphStore) -> None:
        seed_graph(store, [("A", "B")])
        et = store.init_tables(VERTEX_TABLE, EDGE_TABLE).tables[EDGE_TABLE]
        with store.engine.begin() as conn:
            conn.execute(update(et).values(properties="weight=3"))
        with store.open_graph(VERTEX_TABLE, EDGE_TABLE) as graph:
            (edge,) = graph.out_edges("A")
        assert edge.properties == {"value": "weight=3"}


class TestTableNameConflict:
    def test_same_names_rejected(self, store: GraphStore) -> None:
        seed_graph(store, [("A", "B")])
        with pytest.raises(TableNameConflictError) as exc_info:
            with open_graph(store.engine, VERTEX_TABLE, VERTEX_TABLE):
                pass
        assert exc_info.value.details["table"] == VERTEX_TABLE

    def test_rejected_before_connecting(self, store: GraphStore) -> None:
        with pytest.raises(TableNameConflictError):
            with store.open_graph(EDGE_TABLE, EDGE_TABLE):
                pass
        assert store.engine.pool.checkedout() == 0  # type: ignore[attr-defined]
