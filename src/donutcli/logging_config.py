"""Logging configuration for donut-cli.

Provides JSON or text logging. The interactive shell redraws menus by cursor
arithmetic, so log output goes to a file when one is configured and to stderr
otherwise. Configure via ShellSettings (DONUT_LOG_LEVEL, DONUT_LOG_FORMAT,
DONUT_LOG_FILE).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from pythonjsonlogger import jsonlogger


def _build_json_formatter() -> logging.Formatter:
    fields = [
        "asctime",
        "levelname",
        "name",
        "message",
        "module",
        "funcName",
        "lineno",
    ]
    fmt = " ".join([f"{f}=%({f})s" for f in fields])
    return jsonlogger.JsonFormatter(fmt=fmt)


def configure_logging(
    level: str = "WARNING",
    fmt: str = "text",
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Handler:
    level_upper = level.upper()
    log_level = getattr(logging, level_upper, logging.WARNING)

    root = logging.getLogger()
    root.setLevel(log_level)

    # Remove default handlers to avoid duplicate logs
    for h in list(root.handlers):
        root.removeHandler(h)

    if log_file:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(path, encoding="utf-8")
    else:
        handler = logging.StreamHandler()

    if fmt.lower() == "json":
        handler.setFormatter(_build_json_formatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S%z",
            )
        )
    root.addHandler(handler)
    return handler
