"""Turn loop: gather context, ask every NPC concurrently, then settle in order."""

import asyncio
import logging
import random
from typing import Any

from npc_sandbox import storage
from npc_sandbox.llm import LLM
from npc_sandbox.models import Decision
from npc_sandbox.prompts import (
    DECISION_SYSTEM_PROMPT,
    DECISION_USER_PROMPT,
    SUMMARY_PROMPT,
    SUMMARY_SYSTEM_PROMPT,
    PromptError,
    build_decision_context,
    render_prompt,
)

from .actions import apply_deltas, resolve_action
from .decisions import default_decision, parse_decision

logger = logging.getLogger(__name__)

SUMMARY_PLACEHOLDER = "The day passes. Nobody wrote down what happened."


def _placeholder_location(location_id: str) -> dict[str, Any]:
    return {"id": location_id, "name": location_id, "resource_type": "none", "danger_level": 0}


def _find_location(ref: str | None, locations: dict[str, dict]) -> dict[str, Any] | None:
    """Match a destination by id, then by case-insensitive name."""
    if not ref:
        return None
    ref = ref.strip()
    if ref in locations:
        return locations[ref]
    lowered = ref.lower()
    for loc in locations.values():
        if loc["id"].lower() == lowered or loc["name"].lower() == lowered:
            return loc
    return None


async def _decide(
    llm: LLM,
    npc: dict[str, Any],
    location: dict[str, Any],
    world: dict[str, Any],
    communal_inventory: str,
    location_ids: list[str],
    config: dict[str, Any],
) -> Decision:
    """Build one NPC's prompt, call the fast tier, parse the reply."""
    memories = storage.top_memories(npc["name"], config.get("memory_limit", 3))
    personal = storage.format_inventory(storage.get_owned_items(npc["id"]), empty="nothing")
    ctx = build_decision_context(
        npc, location, world, personal, communal_inventory, memories, location_ids,
    )
    try:
        system_prompt = render_prompt(DECISION_SYSTEM_PROMPT, ctx)
        user_prompt = render_prompt(DECISION_USER_PROMPT, ctx)
    except PromptError as e:
        logger.warning("Decision prompt for %s failed to render: %s", npc["name"], e)
        decision = default_decision(npc["location_id"])
        decision.parsed = False
        return decision

    raw = await llm(user_prompt, system_prompt, "fast")
    return parse_decision(raw, npc["location_id"], config.get("decision_fallback", "passthrough"))


def _settle(
    npc: dict[str, Any],
    decision: Decision,
    locations: dict[str, dict],
    config: dict[str, Any],
    rng: random.Random,
) -> dict[str, Any]:
    """Apply one decision to the store. Returns the action log payload."""
    current = storage.get_npc(npc["id"]) or npc
    origin = locations.get(current["location_id"]) or _placeholder_location(current["location_id"])
    parts: list[str] = []

    destination = origin
    if decision.move_to and decision.move_to != origin["id"]:
        found = _find_location(decision.move_to, locations)
        if found is None:
            parts.append(f"wanted to go to {decision.move_to} but no such place exists.")
        elif found["id"] != origin["id"]:
            destination = found
            parts.append(f"left {origin['name']}, heading to {found['name']}.")

    # Actions resolve where the NPC started the turn.
    outcome = resolve_action(current, decision, origin, config.get("base_location", "camp"), rng)
    parts.append(outcome["text"])

    status = apply_deltas(
        current["status"], hp=outcome["hp"], hunger=outcome["hunger"], sanity=outcome["sanity"],
    )
    fields: dict[str, Any] = {"status": status, "location_id": destination["id"]}
    if status["hp"] <= 0:
        fields["is_alive"] = False
    storage.update_npc(current["id"], fields)

    entry = {
        "name": current["name"],
        "role": current.get("role", ""),
        "location": destination["id"],
        "action": " ".join(p for p in parts if p),
        "speech": decision.speech,
        "thought": decision.thought,
        "action_type": decision.action_name,
        "effect": outcome["effect"],
        "parsed": decision.parsed,
        "construction": outcome["construction"],
    }
    storage.append_log("action", entry)
    if not fields.get("is_alive", True):
        logger.info("%s died", current["name"])
        storage.append_log("death", {"name": current["name"], "location": destination["id"]})
    return entry


async def _narrate(llm: LLM, world: dict[str, Any], entries: list[dict[str, Any]]) -> str:
    """Ask the deep tier for a short passage covering the whole turn and log it."""
    try:
        prompt = render_prompt(SUMMARY_PROMPT, {"world": world, "entries": entries})
    except PromptError as e:
        logger.warning("Summary prompt failed to render: %s", e)
        prompt = None
    text = await llm(prompt, SUMMARY_SYSTEM_PROMPT, "deep") if prompt else None
    summary = text.strip() if text and text.strip() else SUMMARY_PLACEHOLDER
    storage.append_log("turn_summary", summary)
    return summary


async def run_turn(
    llm: LLM,
    config: dict[str, Any] | None = None,
    rng: random.Random | None = None,
) -> dict[str, Any]:
    """Resolve one full turn.

    Returns {"success": True, "turn": <new turn>, "actions": [...], "summary"?}
    or {"message": "Game Over"} (clock not advanced) when nobody is alive.
    """
    config = config or storage.get_config()
    rng = rng or random.Random()

    world = storage.get_world()
    npcs = storage.get_npcs(alive_only=True)
    if not npcs:
        return {"message": "Game Over"}

    locations = {loc["id"]: loc for loc in storage.get_locations()}
    communal = storage.format_inventory(storage.get_communal_items(), empty="empty")
    logger.info("turn %d start npcs=%d", world["turn_count"], len(npcs))

    decisions = await asyncio.gather(*(
        _decide(
            llm,
            npc,
            locations.get(npc["location_id"]) or _placeholder_location(npc["location_id"]),
            world,
            communal,
            list(locations),
            config,
        )
        for npc in npcs
    ))

    entries: list[dict[str, Any]] = []
    construction = 0
    for npc, decision in zip(npcs, decisions):
        entry = _settle(npc, decision, locations, config, rng)
        construction += entry["construction"]
        entries.append(entry)

    turn = world["turn_count"]
    world = storage.advance_world(construction)
    logger.info("turn %d done construction+%d", turn, construction)

    result: dict[str, Any] = {"success": True, "turn": world["turn_count"], "actions": entries}
    if config.get("narrate_turns", True):
        result["summary"] = await _narrate(llm, {**world, "turn_count": turn}, entries)
    return result
