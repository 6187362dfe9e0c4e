"""HTTP API tests: turn advance, whisper, state surface and settings."""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from npc_sandbox import storage
from npc_sandbox.app import create_app
from npc_sandbox.routes import game

LOCATIONS = [
    {"id": "camp", "name": "Core Camp", "resource_type": "none", "danger_level": 0},
    {"id": "lake", "name": "Mirror Lake", "resource_type": "food", "danger_level": 0},
]

REST = json.dumps({
    "thought": "Tired.", "move_to": "camp", "action_type": "REST",
    "target": "Self", "speech": "I need a break.",
})


@pytest.fixture
def app(clean_test_data):
    app = create_app(storage.data_dir())
    storage.save_locations(LOCATIONS)
    storage.update_config({"narrate_turns": False})
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


# ── Whisper ──────────────────────────────────────────────────


def test_whisper_plants_one_max_importance_memory(client):
    storage.create_npc("Ada", "Engineer", "Stubborn.", "camp")
    resp = client.post("/api/whisper", json={"npc_id": "ada", "npc_name": "Ada", "message": "Go to the lake"})
    assert resp.status_code == 200
    assert resp.json() == {"success": True}
    memories = storage.get_memories("Ada")
    assert len(memories) == 1
    assert memories[0]["importance"] == 10
    assert "Go to the lake" in memories[0]["memory_text"]


def test_whisper_uses_stored_name(client):
    storage.create_npc("Ada", "Engineer", "Stubborn.", "camp")
    client.post("/api/whisper", json={"npc_id": "ada", "npc_name": "Someone Else", "message": "hi"})
    assert storage.get_memories("Someone Else") == []
    assert len(storage.get_memories("Ada")) == 1


@pytest.mark.parametrize("body", [
    {"npc_name": "Ada", "message": "hello"},
    {"npc_id": "ada", "npc_name": "Ada"},
    {"npc_id": "ada", "message": "   "},
    {},
])
def test_whisper_missing_parameters(client, body):
    storage.create_npc("Ada", "Engineer", "Stubborn.", "camp")
    resp = client.post("/api/whisper", json=body)
    assert resp.status_code == 400
    assert storage.get_memories() == []


def test_whisper_unknown_npc(client):
    resp = client.post("/api/whisper", json={"npc_id": "ghost", "message": "boo"})
    assert resp.status_code == 404
    assert storage.get_memories() == []


# ── Turn ─────────────────────────────────────────────────────


def test_turn_advances_world(app, client):
    storage.create_npc("Ada", "Engineer", "Stubborn.", "camp", status={"hp": 50})
    app.state.llm = AsyncMock(return_value=REST)

    resp = client.post("/api/turn")

    assert resp.status_code == 200
    data = resp.json()
    assert data["success"] is True
    assert data["turn"] == 2
    assert data["actions"][0]["name"] == "Ada"
    assert storage.get_npc("ada")["status"]["hp"] == 55
    assert client.get("/api/world").json()["turn_count"] == 2


def test_turn_game_over(app, client):
    npc = storage.create_npc("Ada", "Engineer", "Stubborn.", "camp")
    storage.update_npc(npc["id"], {"is_alive": False})
    app.state.llm = AsyncMock()

    resp = client.post("/api/turn")

    assert resp.status_code == 200
    assert resp.json() == {"message": "Game Over"}


def test_turn_rejected_while_another_runs(client, monkeypatch):
    busy = MagicMock()
    busy.locked.return_value = True
    monkeypatch.setattr(game, "_turn_lock", busy)
    assert client.post("/api/turn").status_code == 409


def test_turn_timeout(app, client):
    storage.create_npc("Ada", "Engineer", "Stubborn.", "camp")
    storage.update_config({"turn_timeout": 0.05})

    async def slow(prompt, system_prompt, tier="fast"):
        await asyncio.sleep(5)
        return REST

    app.state.llm = slow
    resp = client.post("/api/turn")
    assert resp.status_code == 504
    assert storage.get_world()["turn_count"] == 1


def test_turn_unexpected_error(app, client):
    storage.create_npc("Ada", "Engineer", "Stubborn.", "camp")
    app.state.llm = AsyncMock(side_effect=RuntimeError("boom"))
    resp = client.post("/api/turn")
    assert resp.status_code == 500


# ── State surface ────────────────────────────────────────────


def test_npcs_endpoints(client):
    storage.create_npc("Ada", "Engineer", "Stubborn.", "camp")
    storage.create_npc("Marco", "Fisherman", "Easygoing.", "lake")
    storage.update_npc("marco", {"is_alive": False})

    assert len(client.get("/api/npcs").json()) == 2
    assert [n["id"] for n in client.get("/api/npcs", params={"alive_only": True}).json()] == ["ada"]
    assert client.get("/api/npcs/ada").json()["role"] == "Engineer"
    assert client.get("/api/npcs/ghost").status_code == 404


def test_npc_memories_endpoint(client):
    storage.create_npc("Ada", "Engineer", "Stubborn.", "camp")
    storage.add_memory("Ada", "low", importance=1)
    storage.add_memory("Ada", "high", importance=8)
    storage.add_memory("Ada", "mid", importance=4)
    texts = [m["memory_text"] for m in client.get("/api/npcs/ada/memories").json()]
    assert texts == ["high", "mid", "low"]
    assert client.get("/api/npcs/ghost/memories").status_code == 404


def test_locations_and_items(client):
    storage.add_item("wood", "resource", "ada", quantity=2)
    storage.add_item("food", "resource", None, quantity=3)
    assert [l["id"] for l in client.get("/api/locations").json()] == ["camp", "lake"]
    assert len(client.get("/api/items").json()) == 2
    owned = client.get("/api/items", params={"owner_id": "ada"}).json()
    assert [(i["name"], i["quantity"]) for i in owned] == [("wood", 2)]


def test_logs_newest_first(client):
    for n in range(4):
        storage.append_log("action", {"n": n})
    storage.append_log("turn_summary", "Quiet night.")

    logs = client.get("/api/logs", params={"limit": 3}).json()
    assert [e["id"] for e in logs] == [5, 4, 3]

    summaries = client.get("/api/logs", params={"event_type": "turn_summary"}).json()
    assert [e["content"] for e in summaries] == ["Quiet night."]


# ── Settings ─────────────────────────────────────────────────


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok"}


def test_settings_never_expose_keys(client, monkeypatch):
    monkeypatch.setenv("FAST_KEYS", "secret-key")
    body = client.get("/api/settings").text
    assert "secret-key" not in body


def test_patch_settings_reconfigures_gateway(app, client):
    resp = client.patch("/api/settings", json={
        "tiers": {"fast": {"model": "llama-3.1-8b-instant"}},
        "decision_fallback": "defaults",
    })
    assert resp.status_code == 200
    config = resp.json()
    assert config["tiers"]["fast"]["model"] == "llama-3.1-8b-instant"
    assert config["tiers"]["fast"]["max_tokens"] == 800
    assert config["decision_fallback"] == "defaults"
    assert app.state.llm.tiers["fast"]["model"] == "llama-3.1-8b-instant"


def test_patch_settings_rejects_bad_fallback(client):
    resp = client.patch("/api/settings", json={"decision_fallback": "shrug"})
    assert resp.status_code == 422
