# backend/services/cart_lines.py
"""Pure helpers over a cart item map.

The cart store only ever replaces the whole map, so every merge rule lives
here: adding an existing product bumps its quantity, a quantity of zero or
less removes the line, and totals are computed from the price snapshot held
in each line.
"""
from typing import Any, Dict, Mapping

ItemMap = Dict[str, Dict[str, Any]]


def _key(product_id) -> str:
    return str(product_id)


def normalize(items: Mapping[str, Mapping[str, Any]]) -> ItemMap:
    """Copy of ``items`` without lines whose quantity is not positive."""
    return {
        key: dict(line)
        for key, line in items.items()
        if int(line.get("quantity", 0)) > 0
    }


def add_line(items: Mapping[str, Mapping[str, Any]], line: Mapping[str, Any]) -> ItemMap:
    updated = normalize(items)
    key = _key(line["id"])
    existing = updated.get(key)
    if existing:
        existing["quantity"] = int(existing["quantity"]) + int(line["quantity"])
    else:
        updated[key] = dict(line)
    return normalize(updated)


def set_quantity(items: Mapping[str, Mapping[str, Any]], product_id, quantity: int) -> ItemMap:
    updated = normalize(items)
    key = _key(product_id)
    if key not in updated:
        raise KeyError(key)
    if quantity <= 0:
        del updated[key]
    else:
        updated[key]["quantity"] = int(quantity)
    return updated


def remove_line(items: Mapping[str, Mapping[str, Any]], product_id) -> ItemMap:
    updated = normalize(items)
    key = _key(product_id)
    if key not in updated:
        raise KeyError(key)
    del updated[key]
    return updated


def cart_subtotal(items: Mapping[str, Mapping[str, Any]]) -> float:
    return round(sum(float(line["price"]) * int(line["quantity"]) for line in items.values()), 2)


def item_count(items: Mapping[str, Mapping[str, Any]]) -> int:
    return sum(int(line["quantity"]) for line in items.values())
