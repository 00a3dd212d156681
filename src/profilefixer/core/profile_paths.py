"""
Profile Paths - presence-checked access into the profile document.

Every optional sub-structure of a profile may be missing. Fixers use these
helpers to look a branch up and return early when it is absent, instead of
catching KeyError/TypeError around each access.
"""

import math
from typing import Any, Dict, List, Optional


def dig(node: Any, *path: Any) -> Any:
    """
    Walk a path of keys / list indices.

    Returns None as soon as a step is missing or the current node has the
    wrong shape for the step.
    """
    for key in path:
        if isinstance(node, dict):
            node = node.get(key)
        elif isinstance(node, list) and isinstance(key, int):
            if not -len(node) <= key < len(node):
                return None
            node = node[key]
        else:
            return None
        if node is None:
            return None
    return node


def dig_dict(node: Any, *path: Any) -> Optional[Dict]:
    """dig() that only accepts a dict at the end of the path."""
    value = dig(node, *path)
    return value if isinstance(value, dict) else None


def dig_list(node: Any, *path: Any) -> Optional[List]:
    """dig() that only accepts a list at the end of the path."""
    value = dig(node, *path)
    return value if isinstance(value, list) else None


# ─────────────────────────────────────────────────────────────────────────────
# PROFILE SHORTCUTS
# ─────────────────────────────────────────────────────────────────────────────

def get_pmc(profile: Any) -> Optional[Dict]:
    """The player character record, or None."""
    return dig_dict(profile, "characters", "pmc")


def get_inventory(profile: Any) -> Optional[Dict]:
    return dig_dict(profile, "characters", "pmc", "Inventory")


def get_inventory_items(profile: Any) -> Optional[List]:
    return dig_list(profile, "characters", "pmc", "Inventory", "items")


def get_profile_version(profile: Any) -> str:
    """
    Declared profile format version.

    Newer servers write it under `spt`, older ones under `aki`.
    """
    for section in ("spt", "aki"):
        version = dig(profile, section, "version")
        if isinstance(version, str):
            return version
    return ""


def is_profile(document: Any) -> bool:
    """Minimal recognizable shape: a pmc record carrying Info."""
    return dig_dict(document, "characters", "pmc", "Info") is not None


def find_item(items: List[Dict], item_id: Any) -> Optional[Dict]:
    """First item in a flat item list with the given _id."""
    for item in items:
        if isinstance(item, dict) and item.get("_id") == item_id:
            return item
    return None


def is_number(value: Any) -> bool:
    """True for finite ints/floats. JSON null, strings and bools are not numbers."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)
