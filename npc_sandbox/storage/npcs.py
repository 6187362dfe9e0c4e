"""NPC roster storage."""

from typing import Any

from .core import read_collection, slugify, write_collection

DEFAULT_STATUS = {"hp": 100, "hunger": 0, "sanity": 100}


def get_npcs(alive_only: bool = False) -> list[dict[str, Any]]:
    """Load the roster. Returns [] if missing."""
    npcs = read_collection("npcs")
    if alive_only:
        return [n for n in npcs if n.get("is_alive", True)]
    return npcs


def save_npcs(npcs: list[dict[str, Any]]) -> None:
    write_collection("npcs", npcs)


def get_npc(npc_id: str) -> dict[str, Any] | None:
    """Find a single NPC by id. Returns None if not found."""
    for npc in get_npcs():
        if npc["id"] == npc_id:
            return npc
    return None


def create_npc(
    name: str,
    role: str,
    personality: str,
    location_id: str,
    status: dict[str, int] | None = None,
    relationships: dict[str, int] | None = None,
) -> dict[str, Any]:
    """Add an NPC to the roster. The id is the slugified name."""
    npcs = get_npcs()
    npc_id = slugify(name)
    if any(n["id"] == npc_id for n in npcs):
        raise ValueError(f"NPC '{npc_id}' already exists")
    npc = {
        "id": npc_id,
        "name": name,
        "role": role,
        "personality": personality,
        "status": {**DEFAULT_STATUS, **(status or {})},
        "location_id": location_id,
        "relationships": dict(relationships or {}),
        "is_alive": True,
    }
    npcs.append(npc)
    save_npcs(npcs)
    return npc


def update_npc(npc_id: str, fields: dict[str, Any]) -> dict[str, Any] | None:
    """Overwrite top-level fields of one NPC in a single write.

    Returns the updated NPC, or None if the id is unknown.
    """
    npcs = get_npcs()
    for npc in npcs:
        if npc["id"] == npc_id:
            npc.update(fields)
            save_npcs(npcs)
            return npc
    return None
