"""Tests for GraphWalkSettings — unified settings with TOML source."""

from pathlib import Path

import click
import pytest

from graphwalk.config.settings import GraphWalkSettings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("GRAPHWALK_CONFIG", "GRAPHWALK_DB_URL", "GRAPHWALK_QUIET"):
        monkeypatch.delenv(name, raising=False)


class TestDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        settings = GraphWalkSettings.from_cli(start_dir=tmp_path)
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.verbose is False
        assert settings.db_url is None
        assert settings.store_url == "sqlite:///graphwalk.db"
        assert settings.traverse.default_levels == 3

    def test_frozen(self, tmp_path: Path) -> None:
        settings = GraphWalkSettings.from_cli(start_dir=tmp_path)
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        (tmp_path / "graphwalk.toml").write_text(
            '[store]\nurl = "sqlite:///other.db"\n[traverse]\ndefault_levels = 5\n'
        )
        settings = GraphWalkSettings.from_cli(start_dir=tmp_path)
        assert settings.store_url == "sqlite:///other.db"
        assert settings.traverse.default_levels == 5
        assert settings.generate.default_vertices == 100

    def test_found_from_subdirectory(self, tmp_path: Path) -> None:
        (tmp_path / "graphwalk.toml").write_text("[traverse]\ndefault_levels = 2\n")
        sub = tmp_path / "a" / "b"
        sub.mkdir(parents=True)
        settings = GraphWalkSettings.from_cli(start_dir=sub)
        assert settings.traverse.default_levels == 2
        assert settings.config_path == tmp_path / "graphwalk.toml"

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom" / "my.toml"
        custom.parent.mkdir(parents=True)
        custom.write_text('[generate]\nedge_label = "knows"\n')
        settings = GraphWalkSettings.from_cli(config_path=str(custom), start_dir=tmp_path)
        assert settings.generate.edge_label == "knows"
        assert settings.config_path == custom

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "graphwalk.toml").write_text("[store\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            GraphWalkSettings.from_cli(start_dir=tmp_path)


class TestOverrides:
    def test_db_url_wins_over_toml(self, tmp_path: Path) -> None:
        (tmp_path / "graphwalk.toml").write_text('[store]\nurl = "sqlite:///toml.db"\n')
        settings = GraphWalkSettings.from_cli(start_dir=tmp_path, db_url="sqlite:///cli.db")
        assert settings.store_url == "sqlite:///cli.db"

    def test_none_flags_dropped(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GRAPHWALK_DB_URL", "sqlite:///env.db")
        settings = GraphWalkSettings.from_cli(start_dir=tmp_path, db_url=None)
        assert settings.store_url == "sqlite:///env.db"

    def test_env_var_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GRAPHWALK_QUIET", "true")
        assert GraphWalkSettings.from_cli(start_dir=tmp_path).quiet is True

    def test_nested_env_var(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GRAPHWALK_TRAVERSE__DEFAULT_LEVELS", "7")
        assert GraphWalkSettings.from_cli(start_dir=tmp_path).traverse.default_levels == 7
