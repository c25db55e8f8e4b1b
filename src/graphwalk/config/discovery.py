"""Locate the ``graphwalk.toml`` that applies to a run.

``GRAPHWALK_CONFIG`` names the file outright.  Otherwise the nearest
``graphwalk.toml`` in the start directory or one of its parents wins, so
a store URL set at a project root covers every subdirectory.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "graphwalk.toml"
CONFIG_ENV_VAR = "GRAPHWALK_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file for *start* (default: cwd), or None."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
