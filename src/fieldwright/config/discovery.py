"""Locate the fieldwright.toml that declares a directory's field catalogue.

FIELDWRIGHT_CONFIG wins when set, even if it names a missing file.
Otherwise the search climbs from the working directory to the
filesystem root and takes the nearest match.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "fieldwright.toml"
CONFIG_ENV_VAR = "FIELDWRIGHT_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for fieldwright.toml.

    Returns the path to the config file, or None if not found.
    Checks FIELDWRIGHT_CONFIG env var first.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        if p.is_file():
            return p
        return None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None
