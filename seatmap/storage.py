from __future__ import annotations

import json
from pathlib import Path

from .schemas import Catalog, CatalogError


def load_catalog(path: str | Path) -> Catalog:
    """Read a ``{"sections": [...], "seats": [...]}`` catalog document."""
    p = Path(path)
    if not p.exists():
        raise CatalogError(f"catalog file not found: {p}")

    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise CatalogError(f"failed to read catalog JSON: {e}") from e

    if not isinstance(data, dict):
        raise CatalogError(f"catalog must be a JSON object, got {type(data).__name__}")
    return Catalog.from_dict(data)


def dump_json(data: object) -> str:
    return json.dumps(data, indent=2, sort_keys=True) + "\n"


def write_json(data: object, path: str | Path) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(dump_json(data), encoding="utf-8")


def write_text(text: str, path: str | Path) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding="utf-8")
