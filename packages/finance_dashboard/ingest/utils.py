"""Ingest utilities shared by CLI commands.

Currently exposes a single helper that reads a JSON document from disk.
"""

from __future__ import annotations

import json
from os import PathLike
from pathlib import Path
from typing import Any

from ..errors import DataError


def load_json(path: str | PathLike[str]) -> Any:
    """Read and parse a UTF-8 JSON file.

    ``FileNotFoundError``/``PermissionError`` propagate unchanged; malformed
    JSON raises :class:`DataError`.
    """

    p = Path(path)
    with p.open(encoding="utf-8") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as exc:
            raise DataError(f"invalid JSON in {p}: {exc}") from exc


__all__ = ["load_json"]
