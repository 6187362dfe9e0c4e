"""Turn-resolution pipeline.

Executes one world turn:
  1. Load the alive roster, locations, communal stock and the world singleton.
  2. Decide (concurrently, one fast-tier call per NPC):
     a. Recall the NPC's top memories by importance, personal inventory,
        current location.
     b. Render the decision prompt (identity, stats, inventories,
        relationships, action vocabulary, JSON schema).
     c. Sanitize + parse the reply into a Decision (never raises).
  3. Settle (sequentially, after every decision is in):
     a. Movement to a known location.
     b. Action effects at the starting location (GATHER, BUILD, REST; the
        rest are flavor-only).
     c. Base hunger, clamp stats to [0, 100], flag death at 0 hp.
     d. One write per NPC, one "action" log entry per NPC.
  4. Advance the world: construction progress += this turn's builds,
     turn_count += 1.
  5. Optional deep-tier narrative summary logged as "turn_summary".

Decision JSON (fast tier):
  {"thought": "...", "move_to": "<location id>", "action_type": "GATHER|...",
   "target": "...", "speech": "..."}
"""

from .actions import (  # noqa: F401
    BASE_HUNGER,
    BUILD_MATERIALS,
    BUILD_PROGRESS,
    apply_deltas,
    clamp,
    gather_succeeds,
    resolve_action,
)
from .core import run_turn  # noqa: F401
from .decisions import default_decision, parse_decision  # noqa: F401
from .sanitize import sanitize  # noqa: F401
