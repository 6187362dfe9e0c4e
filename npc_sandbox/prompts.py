"""Handlebars prompt rendering for NPC decisions and turn summaries."""

import json
from collections.abc import Callable
from typing import Any

import pybars

from npc_sandbox.models import ACTION_EFFECTS

_compiler = pybars.Compiler()
_cache: dict[str, Callable] = {}


class PromptError(Exception):
    """Raised when a Handlebars template fails to compile or render."""


# ── Templates ────────────────────────────────────────────

DECISION_SYSTEM_PROMPT = """\
This is a brutal survival strategy game.
Character: {{npc.name}} ({{npc.role}}) | Personality: {{npc.personality}}
Status: HP={{npc.status.hp}}, Hunger={{npc.status.hunger}}, Sanity={{npc.status.sanity}}
Location: {{location.name}} (produces: {{location.resource_type}}, danger: {{location.danger_level}})
Your backpack: {{inventory.personal}}
Communal stock: {{inventory.communal}}
Relationships: {{{relationships}}}
{{#if memories}}
Things you remember:
{{#each memories}}
- {{{memory_text}}}
{{/each}}
{{/if}}

World goal: gather materials (wood/metal) to repair the signal tower (BUILD), \
or hoard food to stay alive.

Available actions:
{{#each actions}}
- {{name}}: {{effect}}
{{/each}}
- Moving: set move_to to another location id ({{{location_ids}}}).

Reply with a JSON decision:
{
  "thought": "inner struggle shaped by personality and status",
  "move_to": "destination location id (your current one if staying)",
  "action_type": "one of the actions above",
  "target": "specific target (e.g. wood, Old Man, Signal Tower)",
  "speech": "what you say out loud"
}\
"""

DECISION_USER_PROMPT = """\
Turn {{world.turn_count}}. Weather: {{world.weather}}. \
If hunger is above 80 you must look for food first. \
If sanity is below 30 you may snap and attack someone. Act now.\
"""

SUMMARY_SYSTEM_PROMPT = """\
You are the chronicler of a small band of survivors waiting for rescue. \
Write vivid, concise prose. No lists, no headings.\
"""

SUMMARY_PROMPT = """\
Turn {{world.turn_count}}. Weather: {{world.weather}}. \
Signal tower progress: {{world.construction_progress}}.

What each survivor did this turn:
{{#each entries}}
- {{name}} ({{role}}) at {{location}}: {{{action}}} They said: "{{{speech}}}" They thought: "{{{thought}}}"
{{/each}}

Write a short narrative passage (under 150 words) describing this turn.\
"""


# ── Rendering ────────────────────────────────────────────


def render_prompt(template_str: str, context: dict[str, Any]) -> str:
    """Compile and render a Handlebars template with the given context.

    Templates are cached by source string to avoid recompilation.
    """
    try:
        compiled = _cache.get(template_str)
        if compiled is None:
            compiled = _compiler.compile(template_str)
            _cache[template_str] = compiled
        return str(compiled(context))
    except Exception as e:
        raise PromptError(f"Template error: {e}") from e


def build_decision_context(
    npc: dict[str, Any],
    location: dict[str, Any],
    world: dict[str, Any],
    personal_inventory: str,
    communal_inventory: str,
    memories: list[dict[str, Any]],
    location_ids: list[str],
) -> dict[str, Any]:
    """Assemble template variables for one NPC's decision prompt."""
    return {
        "npc": npc,
        "location": location,
        "world": world,
        "inventory": {"personal": personal_inventory, "communal": communal_inventory},
        "relationships": json.dumps(npc.get("relationships", {}), ensure_ascii=False),
        "memories": memories,
        "actions": [{"name": name, "effect": effect} for name, effect in ACTION_EFFECTS.items()],
        "location_ids": "/".join(location_ids),
    }
