"""Locate and load ``cmdgate.toml``.

Lookup order: the file named by ``CMDGATE_CONFIG`` (if set, it is the only
candidate), then ``cmdgate.toml`` in the start directory or the nearest
ancestor. ``--config`` bypasses discovery in
:meth:`cmdgate.config.settings.GateSettings.from_cli`.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path

from cmdgate.config.models import CmdgateConfig

CONFIG_FILENAME = "cmdgate.toml"
CONFIG_ENV_VAR = "CMDGATE_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file that applies to *start* (default: cwd), if any.

    A ``CMDGATE_CONFIG`` pointing at a missing file yields None rather than
    falling back to discovery.
    """
    pinned = os.environ.get(CONFIG_ENV_VAR)
    if pinned:
        path = Path(pinned)
        return path if path.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path | None = None, cwd: Path | None = None) -> CmdgateConfig:
    """Parse *path* (or the discovered file) into a validated config.

    With no file anywhere, every section keeps its code default.
    """
    path = path or find_config(cwd)
    if path is None:
        return CmdgateConfig()
    with path.open("rb") as fh:
        return CmdgateConfig.model_validate(tomllib.load(fh))
