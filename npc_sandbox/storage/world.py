"""World-state singleton and the append-only game log."""

import json
from typing import Any

from .core import collection_path, next_id, now_iso, read_collection, write_collection

DEFAULT_WORLD: dict[str, Any] = {
    "id": 1,
    "turn_count": 1,
    "weather": "clear",
    "construction_progress": 0,
}


def get_world() -> dict[str, Any]:
    """Read the singleton, falling back to defaults for missing keys."""
    world = dict(DEFAULT_WORLD)
    path = collection_path("world_state")
    if path.is_file():
        world.update(json.loads(path.read_text()))
    return world


def save_world(world: dict[str, Any]) -> None:
    collection_path("world_state").write_text(json.dumps(world, indent=2))


def update_world(fields: dict[str, Any]) -> dict[str, Any]:
    world = get_world()
    world.update(fields)
    save_world(world)
    return world


def advance_world(construction: int = 0) -> dict[str, Any]:
    """Add construction progress and move the clock forward by one turn.

    Read and write happen in one synchronous call, so within a single
    process no other coroutine can interleave between them.
    """
    world = get_world()
    world["construction_progress"] += construction
    world["turn_count"] += 1
    save_world(world)
    return world


# ── Game log ─────────────────────────────────────────────


def append_log(event_type: str, content: str | dict[str, Any]) -> dict[str, Any]:
    """Append one event. Dict payloads are stored as JSON strings."""
    logs = read_collection("game_logs")
    if not isinstance(content, str):
        content = json.dumps(content, ensure_ascii=False)
    entry = {
        "id": next_id(logs),
        "event_type": event_type,
        "content": content,
        "created_at": now_iso(),
    }
    logs.append(entry)
    write_collection("game_logs", logs)
    return entry


def get_logs(limit: int = 50, event_type: str | None = None) -> list[dict[str, Any]]:
    """Most recent entries, newest first."""
    logs = read_collection("game_logs")
    if event_type is not None:
        logs = [e for e in logs if e["event_type"] == event_type]
    return list(reversed(logs))[:limit]
