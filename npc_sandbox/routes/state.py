"""Read-only state surface polled by the dashboard."""

from fastapi import APIRouter, HTTPException

from npc_sandbox import storage

router = APIRouter()


@router.get("/world")
async def get_world():
    """World singleton: turn counter, weather, construction progress."""
    return storage.get_world()


@router.get("/npcs")
async def list_npcs(alive_only: bool = False):
    """NPC roster, including the dead unless alive_only is set."""
    return storage.get_npcs(alive_only=alive_only)


@router.get("/npcs/{npc_id}")
async def get_npc(npc_id: str):
    npc = storage.get_npc(npc_id)
    if not npc:
        raise HTTPException(404, "NPC not found")
    return npc


@router.get("/npcs/{npc_id}/memories")
async def get_npc_memories(npc_id: str):
    """All memories of one NPC, highest importance first."""
    npc = storage.get_npc(npc_id)
    if not npc:
        raise HTTPException(404, "NPC not found")
    return storage.top_memories(npc["name"], limit=len(storage.get_memories(npc["name"])))


@router.get("/locations")
async def list_locations():
    return storage.get_locations()


@router.get("/items")
async def list_items(owner_id: str | None = None):
    """All items, or one owner's inventory when owner_id is given."""
    if owner_id is not None:
        return storage.get_owned_items(owner_id)
    return storage.get_items()


@router.get("/logs")
async def list_logs(limit: int | None = None, event_type: str | None = None):
    """Most recent game log entries, newest first."""
    if limit is None:
        limit = storage.get_config()["log_limit"]
    return storage.get_logs(limit=max(0, limit), event_type=event_type)
