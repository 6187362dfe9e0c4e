"""File-based JSON document store for the sandbox world.

Data layout:
  data/
    npcs.json          Survivor roster (stats, location, relationships, alive flag)
    locations.json     Static places (resource produced, danger level)
    items.json         Item stacks; owner_id null means communal stock
    memories.json      Append-only NPC memories ranked by importance
    world_state.json   Singleton: turn counter, weather, construction progress
    game_logs.json     Append-only event log read by the dashboard
    config.json        LLM tier settings and turn policy

Every write rewrites one collection file. There is no locking: callers are
expected to run a single turn at a time (the turn route enforces this within
one process). Reads always go to disk, so there is no cache to invalidate.
"""

# Re-export all public symbols so `from npc_sandbox import storage` keeps working.

from .core import (  # noqa: F401
    data_dir,
    init_storage,
    slugify,
)

from .npcs import (  # noqa: F401
    DEFAULT_STATUS,
    create_npc,
    get_npc,
    get_npcs,
    save_npcs,
    update_npc,
)

from .locations import (  # noqa: F401
    RESOURCE_TYPES,
    get_location,
    get_locations,
    save_locations,
)

from .items import (  # noqa: F401
    add_item,
    consume_item,
    format_inventory,
    get_communal_items,
    get_items,
    get_owned_items,
)

from .memories import (  # noqa: F401
    MAX_IMPORTANCE,
    add_memory,
    add_whisper,
    get_memories,
    top_memories,
)

from .world import (  # noqa: F401
    DEFAULT_WORLD,
    advance_world,
    append_log,
    get_logs,
    get_world,
    save_world,
    update_world,
)

from .config import (  # noqa: F401
    get_config,
    update_config,
)
