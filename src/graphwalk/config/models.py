"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, graphwalk.toml only contains
overrides. Running without any config file is the common case.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

DEFAULT_LEVEL_TO_TRAVERSE = 3


class StoreConfig(BaseModel):
    """[store] section."""

    model_config = {"frozen": True}

    url: str = "sqlite:///graphwalk.db"
    echo: bool = False


class TraverseConfig(BaseModel):
    """[traverse] section."""

    model_config = {"frozen": True}

    default_levels: int = Field(default=DEFAULT_LEVEL_TO_TRAVERSE, ge=1)


class GenerateConfig(BaseModel):
    """[generate] section."""

    model_config = {"frozen": True}

    default_vertices: int = Field(default=100, ge=1)
    edge_label: str = "links"
