"""Location reference data (read-only during a turn)."""

from typing import Any

from .core import read_collection, write_collection

RESOURCE_TYPES = ("wood", "metal", "food", "none")


def get_locations() -> list[dict[str, Any]]:
    return read_collection("locations")


def get_location(location_id: str) -> dict[str, Any] | None:
    for loc in get_locations():
        if loc["id"] == location_id:
            return loc
    return None


def save_locations(locations: list[dict[str, Any]]) -> None:
    for loc in locations:
        if loc.get("resource_type", "none") not in RESOURCE_TYPES:
            raise ValueError(f"Unknown resource type: {loc['resource_type']!r}")
    write_collection("locations", locations)
