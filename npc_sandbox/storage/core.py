"""Storage initialization, collection file helpers, and slug utilities."""

import json
import re
import unicodedata
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

_data_dir: Path | None = None


def slugify(name: str) -> str:
    """Convert a name to a filesystem- and URL-safe id.

    "Old Man Jenkins" → "old-man-jenkins"
    """
    text = unicodedata.normalize("NFKD", name)
    text = text.encode("ascii", "ignore").decode("ascii")
    text = text.lower()
    text = re.sub(r"['\"]", "", text)  # strip apostrophes/quotes before hyphenation
    text = re.sub(r"[^a-z0-9]+", "-", text)
    text = text.strip("-")
    return text or "unnamed"


def init_storage(data_dir: Path) -> None:
    global _data_dir
    _data_dir = data_dir
    _data_dir.mkdir(parents=True, exist_ok=True)


def data_dir() -> Path:
    assert _data_dir is not None, "Call init_storage() before using storage"
    return _data_dir


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def collection_path(name: str) -> Path:
    return data_dir() / f"{name}.json"


def read_collection(name: str) -> list[dict[str, Any]]:
    """Load a JSON list collection. Returns [] if the file is missing."""
    path = collection_path(name)
    if not path.is_file():
        return []
    return json.loads(path.read_text())


def write_collection(name: str, rows: list[dict[str, Any]]) -> None:
    collection_path(name).write_text(json.dumps(rows, indent=2, ensure_ascii=False))


def next_id(rows: list[dict[str, Any]]) -> int:
    """Next integer id for an append-style collection."""
    return max((r["id"] for r in rows if isinstance(r.get("id"), int)), default=0) + 1
