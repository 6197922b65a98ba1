"""Logging setup and small formatting helpers."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence


LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(log_file: Path | None = None, verbose: bool = False) -> None:
    """Configure root logging to console and optionally a file."""
    level = logging.DEBUG if verbose else logging.INFO
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)


def format_name_list(values: Sequence[str], limit: int = 12) -> str:
    if len(values) <= limit:
        return ", ".join(values)
    shown = ", ".join(values[:limit])
    return f"{shown}, ... (+{len(values) - limit} more)"


def normalize_name(name: str) -> str:
    """Canonical lowercase form used for every country and region lookup."""
    return name.strip().lower()
