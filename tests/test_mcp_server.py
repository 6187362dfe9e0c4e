"""MCP tool tests using the FastMCP in-process test client."""

import json

from mcp.shared.memory import create_connected_server_and_client_session

import npc_sandbox.mcp_server as mcp_server
from npc_sandbox import storage


def _payload(result):
    """Decode the JSON text content of a tool result."""
    return [json.loads(block.text) for block in result.content]


async def test_get_world_state():
    storage.update_world({"turn_count": 4, "weather": "fog"})
    async with create_connected_server_and_client_session(mcp_server.mcp) as client:
        result = await client.call_tool("get_world_state", {})
    assert not result.isError
    world = _payload(result)[0]
    assert world["turn_count"] == 4
    assert world["weather"] == "fog"


async def test_list_npcs_alive_only_by_default():
    storage.create_npc("Ada", "Engineer", "Stubborn.", "camp")
    storage.create_npc("Marco", "Fisherman", "Easygoing.", "lake")
    storage.update_npc("marco", {"is_alive": False})
    async with create_connected_server_and_client_session(mcp_server.mcp) as client:
        alive = await client.call_tool("list_npcs", {})
        everyone = await client.call_tool("list_npcs", {"alive_only": False})
    assert [n["id"] for n in _payload(alive)] == ["ada"]
    assert len(_payload(everyone)) == 2


async def test_recent_logs():
    storage.append_log("action", {"n": 1})
    storage.append_log("turn_summary", "Dusk.")
    async with create_connected_server_and_client_session(mcp_server.mcp) as client:
        result = await client.call_tool("recent_logs", {"limit": 1})
    logs = _payload(result)
    assert len(logs) == 1
    assert logs[0]["content"] == "Dusk."


async def test_whisper_tool_stores_memory():
    storage.create_npc("Ada", "Engineer", "Stubborn.", "camp")
    async with create_connected_server_and_client_session(mcp_server.mcp) as client:
        result = await client.call_tool("whisper", {"npc_id": "ada", "message": " Hide the metal "})
    assert not result.isError
    memories = storage.get_memories("Ada")
    assert len(memories) == 1
    assert memories[0]["importance"] == 10
    assert "Hide the metal" in memories[0]["memory_text"]


async def test_whisper_tool_unknown_npc():
    async with create_connected_server_and_client_session(mcp_server.mcp) as client:
        result = await client.call_tool("whisper", {"npc_id": "ghost", "message": "boo"})
    assert result.isError
    assert storage.get_memories() == []
