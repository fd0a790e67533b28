"""Config file discovery.

The project configuration lives in ``bach.toml`` at the project base.
Supports the ``BACH_CONFIG`` env var and the ``--config`` CLI flag as
overrides.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "bach.toml"
CONFIG_ENV_VAR = "BACH_CONFIG"


def find_config(base: Path | None = None, explicit: str | Path | None = None) -> Path | None:
    """Locate the config file for the project rooted at *base* (default: cwd).

    Resolution order: *explicit* path, ``BACH_CONFIG`` env var, then
    ``<base>/bach.toml``.  Returns None when the chosen candidate is not a
    file.
    """
    if explicit:
        p = Path(explicit)
        return p if p.is_file() else None

    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    candidate = (base or Path.cwd()) / CONFIG_FILENAME
    return candidate if candidate.is_file() else None
