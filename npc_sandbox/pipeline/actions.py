"""Action settlement: turns a Decision into stat deltas and store writes.

Per-turn rates:
  every NPC    hunger +5
  GATHER       success when rng.random() >= danger_level * 0.1
               success: +1 resource item, hunger +5; failure: hp -5
               (a location producing "none" always fails)
  BUILD        base location only, needs wood or metal; consumes one unit
               and adds 5 construction progress
  REST         hp +5, sanity +5
  ATTACK, CRAFT, STEAL, SOCIAL, and actions outside the vocabulary
               logged in character only (see FLAVOR_ONLY_ACTIONS)

All stats are clamped to [0, 100] after deltas are applied.
"""

import random
from typing import Any

from npc_sandbox import storage
from npc_sandbox.models import FLAVOR_ONLY_ACTIONS, Decision

STAT_MIN = 0
STAT_MAX = 100

BASE_HUNGER = 5
GATHER_HUNGER = 5
GATHER_INJURY = 5
REST_RECOVERY = 5
BUILD_PROGRESS = 5
BUILD_MATERIALS = ("wood", "metal")
DANGER_STEP = 0.1


def clamp(value: int | float) -> int:
    return int(max(STAT_MIN, min(STAT_MAX, value)))


def apply_deltas(status: dict[str, int], hp: int = 0, hunger: int = 0, sanity: int = 0) -> dict[str, int]:
    """Return a new status dict with deltas applied and every stat clamped."""
    return {
        "hp": clamp(status.get("hp", STAT_MAX) + hp),
        "hunger": clamp(status.get("hunger", STAT_MIN) + hunger),
        "sanity": clamp(status.get("sanity", STAT_MAX) + sanity),
    }


def gather_succeeds(danger_level: int, rng: random.Random) -> bool:
    """Uniform draw in [0, 1) against the location's failure chance."""
    return rng.random() >= danger_level * DANGER_STEP


def _new_outcome() -> dict[str, Any]:
    return {
        "hp": 0,
        "hunger": BASE_HUNGER,
        "sanity": 0,
        "construction": 0,
        "text": "",
        "effect": "applied",
    }


def _gather(npc: dict, location: dict, outcome: dict, rng: random.Random) -> None:
    resource = location.get("resource_type", "none")
    succeeded = gather_succeeds(int(location.get("danger_level", 0)), rng)
    if succeeded and resource != "none":
        storage.add_item(resource, "resource", npc["id"])
        outcome["text"] = f"gathered {resource} at {location['name']}."
        outcome["hunger"] += GATHER_HUNGER
    else:
        outcome["text"] = f"failed to gather at {location['name']} and got hurt."
        outcome["hp"] -= GATHER_INJURY


def _build(npc: dict, location: dict, base_location: str, outcome: dict) -> None:
    if location["id"] != base_location:
        outcome["text"] = "wanted to work on the signal tower but is not at the camp."
        outcome["effect"] = "noop"
        return
    materials = [
        i for i in storage.get_owned_items(npc["id"]) if i["name"] in BUILD_MATERIALS
    ]
    if not materials:
        outcome["text"] = "wanted to repair the signal tower but has no materials."
        outcome["effect"] = "noop"
        return
    used = materials[0]
    storage.consume_item(used["id"])
    outcome["construction"] = BUILD_PROGRESS
    outcome["text"] = f"used {used['name']} to repair the signal tower. Progress rises."


def resolve_action(
    npc: dict[str, Any],
    decision: Decision,
    location: dict[str, Any],
    base_location: str,
    rng: random.Random,
) -> dict[str, Any]:
    """Settle one action at `location` and return its outcome.

    Outcome keys: hp/hunger/sanity deltas (hunger includes the base cost),
    construction added, human-readable text, and effect ("applied", "noop"
    or "flavor").
    """
    outcome = _new_outcome()
    action = decision.action_type

    if action == "GATHER":
        _gather(npc, location, outcome, rng)
    elif action == "BUILD":
        _build(npc, location, base_location, outcome)
    elif action == "REST":
        outcome["hp"] += REST_RECOVERY
        outcome["sanity"] += REST_RECOVERY
        outcome["text"] = "rested in place and recovered."
    elif action == "ATTACK":
        outcome["text"] = f"suddenly lashed out and attacked {decision.target}!"
    else:
        target = f" {decision.target}" if decision.target else ""
        outcome["text"] = f"is doing {decision.action_name}{target}."

    if action in FLAVOR_ONLY_ACTIONS:
        outcome["effect"] = "flavor"
    return outcome
