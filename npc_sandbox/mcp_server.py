"""FastMCP server exposing the sandbox state and whispers as MCP tools.

Tools:
  - get_world_state()            - turn counter, weather, construction progress
  - list_npcs(alive_only)        - NPC roster
  - recent_logs(limit)           - newest game log entries first
  - whisper(npc_id, message)     - plant a maximum-importance memory

Reads and writes go through the same JSON store as the HTTP API. Tests call
storage.init_storage() first; __main__ uses DATA_DIR or ./data.

Usage:
    uv run python -m npc_sandbox.mcp_server
"""

from mcp.server.fastmcp import FastMCP

from npc_sandbox import storage

mcp = FastMCP("npc-sandbox")


@mcp.tool()
def get_world_state() -> dict:
    """Return the world singleton."""
    return storage.get_world()


@mcp.tool()
def list_npcs(alive_only: bool = True) -> list[dict]:
    """Return the NPC roster with stats, location and relationships."""
    return storage.get_npcs(alive_only=alive_only)


@mcp.tool()
def recent_logs(limit: int = 20) -> list[dict]:
    """Return the most recent game log entries, newest first."""
    return storage.get_logs(limit=limit)


@mcp.tool()
def whisper(npc_id: str, message: str) -> dict:
    """Whisper to an NPC. The message is recalled on its next turn."""
    if not npc_id or not message.strip():
        raise ValueError("npc_id and message are required")
    npc = storage.get_npc(npc_id)
    if npc is None:
        raise ValueError(f"Unknown NPC: {npc_id}")
    return storage.add_whisper(npc["name"], message.strip())


if __name__ == "__main__":
    import os
    from pathlib import Path

    storage.init_storage(Path(os.getenv("DATA_DIR", Path(__file__).parent.parent / "data")))
    mcp.run()
