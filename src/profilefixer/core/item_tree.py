"""
Item Tree - operations over the flat item list.

An inventory (or a mail attachment) is stored as a flat list of items. The
tree is implied by `parentId` + `slotId`: an item sits in slot `slotId` of
the item whose `_id` equals its `parentId`. Items without a `parentId` are
roots (equipment, stash, sorting table, ...).
"""

import logging
from collections import defaultdict
from typing import Any, Dict, List

from profilefixer.core.constants import SLOT_HIDEOUT

logger = logging.getLogger(__name__)


def item_ids(items: List[Dict]) -> set:
    """All _id values present in an item list."""
    return {item.get("_id") for item in items if isinstance(item, dict)}


def group_by_parent(items: List[Dict], slot_id: str = None) -> Dict[Any, List[Dict]]:
    """
    Group items by parentId, keeping list order inside each group.

    If slot_id is given only items in that slot are grouped.
    """
    groups: Dict[Any, List[Dict]] = defaultdict(list)
    for item in items:
        if not isinstance(item, dict):
            continue
        if slot_id is not None and item.get("slotId") != slot_id:
            continue
        groups[item.get("parentId")].append(item)
    return dict(groups)


def find_orphans(root_id: str, items: List[Dict]) -> List[Dict]:
    """
    Items whose declared parent is missing from the collection.

    Items already parented to root_id or already sitting in the hideout slot
    are not reported; roots (no parentId) never are.
    """
    known = item_ids(items)
    orphans = []
    for item in items:
        if not isinstance(item, dict):
            continue
        parent_id = item.get("parentId")
        if parent_id is None or parent_id in known:
            continue
        if parent_id == root_id or item.get("slotId") == SLOT_HIDEOUT:
            continue
        orphans.append(item)
    return orphans


def reparent_orphans(root_id: str, items: List[Dict]) -> List[Dict]:
    """
    Move every orphan into the hideout slot of root_id.

    Orphans are re-rooted, never deleted. The list is mutated in place and
    returned.
    """
    for item in find_orphans(root_id, items):
        logger.debug(f"Re-rooting {item.get('_id')} from missing parent {item.get('parentId')} to {root_id}")
        item["parentId"] = root_id
        item["slotId"] = SLOT_HIDEOUT
        item.pop("location", None)
    return items
