"""Decision parser: model text → Decision, never raising.

Usable JSON objects are shallow-merged over the default Decision; a field
that fails validation keeps its default instead of sinking the whole reply.
Unusable output yields a REST decision with parsed=False. Under the
"passthrough" fallback the raw text is kept as the NPC's thought so the
player sees what the model actually said; under "defaults" it is dropped.
"""

import json
import logging
from typing import Any

from pydantic import ValidationError

from npc_sandbox.models import Decision

from .sanitize import has_object, sanitize

logger = logging.getLogger(__name__)

_MERGEABLE_FIELDS = ("thought", "move_to", "action_type", "target", "speech")


def default_decision(current_location: str) -> Decision:
    return Decision(move_to=current_location)


def _fallback(raw: str, current_location: str, policy: str) -> Decision:
    decision = Decision(move_to=current_location, parsed=False)
    if policy == "passthrough":
        decision.thought = raw.strip()
    return decision


def _merge(data: dict[str, Any], current_location: str) -> Decision:
    candidate: dict[str, Any] = {"move_to": current_location}
    candidate.update({k: data[k] for k in _MERGEABLE_FIELDS if k in data})
    try:
        decision = Decision.model_validate(candidate)
    except ValidationError as e:
        bad = {err["loc"][0] for err in e.errors() if err["loc"]}
        logger.warning("Decision fields %s invalid, keeping defaults for them", sorted(bad))
        decision = Decision.model_validate(
            {k: v for k, v in candidate.items() if k not in bad}
        )
    if decision.move_to is None:
        decision.move_to = current_location
    return decision


def parse_decision(
    raw: str | None, current_location: str, policy: str = "passthrough"
) -> Decision:
    """Turn raw model output into a complete Decision.

    `raw` of None or "" means the gateway failed: the NPC gets the default
    decision (rest in place). Text with no brace pair in it counts as a
    parse failure even though sanitize() maps it to "{}"; an empty object
    the model actually wrote merges as all defaults.
    """
    if not raw or not raw.strip():
        decision = default_decision(current_location)
        decision.parsed = False
        return decision

    if not has_object(raw):
        logger.warning("Decision output has no JSON object: %.80r", raw)
        return _fallback(raw, current_location, policy)

    cleaned = sanitize(raw)

    try:
        data = json.loads(cleaned)
    except ValueError:
        logger.warning("Decision output is not valid JSON: %.80r", raw)
        return _fallback(raw, current_location, policy)

    if not isinstance(data, dict):
        logger.warning("Decision output is %s, expected an object", type(data).__name__)
        return _fallback(raw, current_location, policy)

    return _merge(data, current_location)
