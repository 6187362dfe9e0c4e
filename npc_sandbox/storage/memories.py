"""NPC memories (append-only, ranked by importance)."""

from typing import Any

from .core import next_id, now_iso, read_collection, write_collection

MAX_IMPORTANCE = 10


def get_memories(npc_name: str | None = None) -> list[dict[str, Any]]:
    memories = read_collection("memories")
    if npc_name is None:
        return memories
    return [m for m in memories if m["npc_name"] == npc_name]


def top_memories(npc_name: str, limit: int = 3) -> list[dict[str, Any]]:
    """Highest-importance memories first; ties go to the most recent."""
    ranked = sorted(
        get_memories(npc_name),
        key=lambda m: (m["importance"], m["id"]),
        reverse=True,
    )
    return ranked[:limit]


def add_memory(npc_name: str, memory_text: str, importance: int = 1) -> dict[str, Any]:
    memories = read_collection("memories")
    memory = {
        "id": next_id(memories),
        "npc_name": npc_name,
        "memory_text": memory_text,
        "importance": max(1, min(MAX_IMPORTANCE, importance)),
        "created_at": now_iso(),
    }
    memories.append(memory)
    write_collection("memories", memories)
    return memory


def add_whisper(npc_name: str, message: str) -> dict[str, Any]:
    """Plant a maximum-importance memory: an outside voice nudging the NPC."""
    text = f'A commanding voice echoes in your mind: "{message}"'
    return add_memory(npc_name, text, importance=MAX_IMPORTANCE)
