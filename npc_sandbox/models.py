"""Core domain models.

Store records (NPCs, locations, items, memories, logs) are plain dicts; the
Decision is the one value that crosses the LLM boundary, so Pydantic
validates it field by field.
"""

from __future__ import annotations

from typing import Any, Literal, get_args

from pydantic import BaseModel, field_validator, model_validator

ActionType = Literal[
    "GATHER",
    "CRAFT",
    "BUILD",
    "STEAL",
    "ATTACK",
    "REST",
    "SOCIAL",
    "UNKNOWN",
]

ACTION_TYPES: tuple[str, ...] = get_args(ActionType)

# Stands in for any action the model names outside the vocabulary below;
# the name it asked for is kept in Decision.requested_action.
UNKNOWN_ACTION = "UNKNOWN"

# One-line effect descriptions shown to the model in the decision prompt.
ACTION_EFFECTS: dict[str, str] = {
    "GATHER": "Search the current location for its resource (forest gives wood, "
              "lake gives food, ruins give metal). Dangerous places can hurt you.",
    "CRAFT": "Turn wood or metal into tools or weapons.",
    "BUILD": "At the camp, spend wood or metal to repair the signal tower.",
    "STEAL": "Take a private item from someone nearby.",
    "ATTACK": "Attack someone.",
    "REST": "Recover health and sanity. Hunger still grows.",
    "SOCIAL": "Talk to someone at the same location to change how they feel about you.",
}

# Actions whose mechanics are not applied: they are logged in character but
# do not move items, health or relationships.
FLAVOR_ONLY_ACTIONS: frozenset[str] = frozenset(
    {"CRAFT", "STEAL", "ATTACK", "SOCIAL", UNKNOWN_ACTION}
)


class Decision(BaseModel):
    """One NPC's choice for the turn. Every field has a safe default."""

    thought: str = "..."
    move_to: str | None = None  # location id; None or current location means stay
    action_type: ActionType = "REST"
    requested_action: str | None = None  # set only when action_type is UNKNOWN
    target: str = "Self"
    speech: str = "..."
    parsed: bool = True  # False when the model output could not be used

    @model_validator(mode="before")
    @classmethod
    def _normalize_action(cls, data: Any) -> Any:
        if not isinstance(data, dict) or not isinstance(data.get("action_type"), str):
            return data
        data = dict(data)
        action = data["action_type"].strip().upper()
        if not action:
            data.pop("action_type")
        elif action in ACTION_EFFECTS:
            data["action_type"] = action
        elif action != UNKNOWN_ACTION:
            data["action_type"] = UNKNOWN_ACTION
            data["requested_action"] = action
        return data

    @field_validator("move_to", mode="before")
    @classmethod
    def _blank_is_stay(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def action_name(self) -> str:
        """The action as the model named it."""
        return self.requested_action or self.action_type
