"""Create a demo world for development/testing."""

from npc_sandbox import storage

DEMO_LOCATIONS = [
    {"id": "camp", "name": "Core Camp", "resource_type": "none", "danger_level": 0},
    {"id": "forest", "name": "Black Forest", "resource_type": "wood", "danger_level": 2},
    {"id": "ruins", "name": "Factory Ruins", "resource_type": "metal", "danger_level": 4},
    {"id": "lake", "name": "Mirror Lake", "resource_type": "food", "danger_level": 1},
]

DEMO_NPCS = [
    {
        "name": "Ada",
        "role": "Engineer",
        "personality": "Methodical and stubborn. Believes the signal tower is the only way out.",
        "location_id": "camp",
        "relationships": {"Marco": 20, "Old Man Jenkins": -10, "Lena": 30},
    },
    {
        "name": "Marco",
        "role": "Fisherman",
        "personality": "Easygoing, generous with food, quietly terrified of the forest.",
        "location_id": "lake",
        "relationships": {"Ada": 15, "Lena": 10},
    },
    {
        "name": "Old Man Jenkins",
        "role": "Hermit",
        "personality": "Paranoid hoarder. Trusts no one and hides whatever he finds.",
        "location_id": "ruins",
        "status": {"hp": 70, "hunger": 40, "sanity": 45},
        "relationships": {"Ada": -20},
    },
    {
        "name": "Lena",
        "role": "Medic",
        "personality": "Calm under pressure, keeps everyone talking, hates violence.",
        "location_id": "camp",
        "relationships": {"Ada": 25, "Marco": 10, "Old Man Jenkins": 5},
    },
]

DEMO_COMMUNAL_STOCK = [("food", 3), ("wood", 2)]


def create_demo_data() -> None:
    """Wipe the world and seed locations, survivors, communal stock and turn 1."""
    for name in ("npcs", "items", "memories", "game_logs"):
        path = storage.data_dir() / f"{name}.json"
        if path.exists():
            path.unlink()

    storage.save_locations(DEMO_LOCATIONS)
    for npc in DEMO_NPCS:
        storage.create_npc(**npc)
    for item_name, quantity in DEMO_COMMUNAL_STOCK:
        storage.add_item(item_name, "resource", None, quantity=quantity)
    storage.add_item("wood", "resource", "ada")
    storage.save_world(dict(storage.DEFAULT_WORLD))
    storage.append_log("system", "The survivors wake up at the camp. The signal tower is silent.")

    print(
        f"Created {len(DEMO_LOCATIONS)} locations + {len(DEMO_NPCS)} survivors "
        f"+ {len(DEMO_COMMUNAL_STOCK)} communal stacks."
    )
