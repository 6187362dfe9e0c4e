"""Item storage: personal inventories and communal stock (owner_id is None)."""

from typing import Any

from .core import next_id, read_collection, write_collection


def get_items() -> list[dict[str, Any]]:
    return read_collection("items")


def get_owned_items(owner_id: str) -> list[dict[str, Any]]:
    return [i for i in get_items() if i.get("owner_id") == owner_id]


def get_communal_items() -> list[dict[str, Any]]:
    return [i for i in get_items() if i.get("owner_id") is None]


def add_item(
    name: str, item_type: str, owner_id: str | None, quantity: int = 1
) -> dict[str, Any]:
    """Add quantity to an owner's stack of `name`, creating the stack if needed."""
    items = get_items()
    for item in items:
        if item["name"] == name and item.get("owner_id") == owner_id:
            item["quantity"] += quantity
            write_collection("items", items)
            return item
    item = {
        "id": next_id(items),
        "name": name,
        "quantity": quantity,
        "type": item_type,
        "owner_id": owner_id,
    }
    items.append(item)
    write_collection("items", items)
    return item


def consume_item(item_id: int, quantity: int = 1) -> dict[str, Any] | None:
    """Take quantity from a stack; the row is deleted when it reaches zero.

    Returns the remaining stack, or None if the item is gone (or never existed).
    """
    items = get_items()
    for idx, item in enumerate(items):
        if item["id"] == item_id:
            item["quantity"] -= quantity
            if item["quantity"] <= 0:
                items.pop(idx)
                write_collection("items", items)
                return None
            write_collection("items", items)
            return item
    return None


def format_inventory(items: list[dict[str, Any]], empty: str = "nothing") -> str:
    """Render items as "wood x2, metal x1" for prompts."""
    if not items:
        return empty
    return ", ".join(f"{i['name']} x{i['quantity']}" for i in items)
