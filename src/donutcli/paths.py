from __future__ import annotations

"""Per-user directories for donut-cli.

Everything lives under ~/.donut:
- logs/: log output (when file logging is enabled)
- configs/: auxiliary YAML configs
"""

import os
from pathlib import Path
from typing import Tuple


def data_dir() -> Path:
    override = os.getenv("DONUT_HOME")
    if override:
        return Path(override).expanduser()
    return Path(os.path.expanduser("~/.donut"))


def subdirs() -> Tuple[Path, Path]:
    base = data_dir()
    return (
        base / "logs",
        base / "configs",
    )


def ensure_dirs() -> None:
    base = data_dir()
    base.mkdir(parents=True, exist_ok=True)
    for d in subdirs():
        d.mkdir(parents=True, exist_ok=True)


def default_user_config_path() -> Path:
    return data_dir() / "donut.yaml"
