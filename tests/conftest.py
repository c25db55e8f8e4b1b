"""Shared pytest fixtures and test helpers for graphwalk tests."""

from __future__ import annotations

import logging
from collections.abc import Generator, Iterable
from datetime import UTC, datetime
from pathlib import Path

import pytest
from click.testing import CliRunner
from sqlalchemy import insert

from graphwalk.config.settings import GraphWalkSettings
from graphwalk.infrastructure.store import GraphStore
from graphwalk.services.telemetry import set_telemetry

VERTEX_TABLE = "test.vertex.1"
EDGE_TABLE = "test.edge.1"

_NOW = datetime.now(UTC).isoformat()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_url(tmp_path: Path) -> str:
    """SQLAlchemy URL of a file-backed SQLite store in the temp dir."""
    return f"sqlite:///{tmp_path / 'graph.db'}"


@pytest.fixture
def settings(tmp_path: Path, db_url: str, monkeypatch: pytest.MonkeyPatch) -> GraphWalkSettings:
    """Settings isolated from any graphwalk.toml or GRAPHWALK_* env vars."""
    monkeypatch.delenv("GRAPHWALK_CONFIG", raising=False)
    monkeypatch.delenv("GRAPHWALK_DB_URL", raising=False)
    return GraphWalkSettings.from_cli(start_dir=tmp_path, db_url=db_url)


@pytest.fixture
def store(settings: GraphWalkSettings) -> Generator[GraphStore]:
    """Graph store on the temp SQLite database; tables are not created."""
    s = GraphStore(settings)
    try:
        yield s
    finally:
        s.close()


@pytest.fixture(autouse=True)
def _reset_cli_state() -> Generator[None]:
    """Undo the telemetry flag and log handlers a ``-v`` CLI run leaves behind."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    yield
    set_telemetry(False)
    root.handlers = handlers


@pytest.fixture
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run CLI tests from the temp dir so no stray graphwalk.toml is found."""
    monkeypatch.delenv("GRAPHWALK_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def seed_graph(
    store: GraphStore,
    edges: Iterable[tuple[str, str]],
    *,
    vertices: Iterable[str] = (),
    vertex_table: str = VERTEX_TABLE,
    edge_table: str = EDGE_TABLE,
) -> None:
    """Insert vertices and directed edges straight into the store.

    Every endpoint of *edges* gets a vertex row, plus any extra
    *vertices*.  Edge ids follow insertion order so out-edges come back
    in the order they were given.
    """
    edge_list = list(edges)
    ids: dict[str, None] = dict.fromkeys(vertices)
    for source, target in edge_list:
        ids.setdefault(source)
        ids.setdefault(target)

    metadata = store.init_tables(vertex_table, edge_table)
    vt = metadata.tables[vertex_table]
    et = metadata.tables[edge_table]
    with store.engine.begin() as conn:
        if ids:
            conn.execute(
                insert(vt),
                [{"id": vid, "properties": None, "created": _NOW} for vid in ids],
            )
        if edge_list:
            conn.execute(
                insert(et),
                [
                    {
                        "id": f"e{index:05d}",
                        "out_vertex_id": source,
                        "in_vertex_id": target,
                        "created": _NOW,
                    }
                    for index, (source, target) in enumerate(edge_list)
                ],
            )
