"""
Structural Fixers - corrections over whole collections.

These rules group, sort or deduplicate lists inside the profile (items,
build presets, flea offers, mail attachments, quest records). Like the
scalar fixers they mutate the profile in place, log what they changed and
do nothing when the collection they work on is absent.

Signature: fixer(profile, log) -> None, except fix_duplicate_items which
also takes the caller's remove_duplicates preference.
"""

import logging
from typing import Any, Dict, List

from profilefixer.core.change_log import ChangeLog
from profilefixer.core.constants import (
    SLOT_CARTRIDGES, SLOT_HIDEOUT, SLOT_MAIN, BOOTSTRAP_CONTAINERS,
)
from profilefixer.core.id_generator import generate_id
from profilefixer.core.item_tree import group_by_parent, find_orphans, reparent_orphans, item_ids
from profilefixer.core.profile_paths import (
    dig, dig_dict, dig_list, get_pmc, get_inventory, get_inventory_items,
    find_item, is_number,
)

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# MAGAZINES
# ═══════════════════════════════════════════════════════════════════════════════

def _location_key(item: Dict):
    location = item.get("location")
    return location if is_number(location) else 0


def fix_cartridge_locations(profile: Dict, log: ChangeLog):
    """
    Re-index cartridge stacks inside every magazine.

    Locations become 0..n-1 in the order of their current location (missing
    counts as 0, ties keep list order). A stack with no location that ends up
    first keeps no location: ammo boxes store their single stack that way.
    """
    items = get_inventory_items(profile)
    if items is None:
        return

    for parent_id, group in group_by_parent(items, SLOT_CARTRIDGES).items():
        changed = False
        for rank, item in enumerate(sorted(group, key=_location_key)):
            if item.get("location") is None and rank == 0:
                continue
            if item.get("location") != rank:
                logger.debug(f"{item.get('_id')} in {parent_id}: location {item.get('location')} -> {rank}")
                item["location"] = rank
                changed = True

        if changed:
            log.fixed(f"Re-indexed {len(group)} cartridge stack(s) in magazine {parent_id}")


# ═══════════════════════════════════════════════════════════════════════════════
# BUILD PRESETS
# ═══════════════════════════════════════════════════════════════════════════════

BUILD_FIELD_ALIASES = (("Id", "id"), ("Name", "name"), ("Root", "root"))


def _canonicalize_build(build: Dict) -> bool:
    """Move lowercase aliases onto the capitalized keys. Returns True if changed."""
    changed = False
    for canonical, alias in BUILD_FIELD_ALIASES:
        if alias not in build:
            continue
        value = build.pop(alias)
        if canonical not in build:
            build[canonical] = value
        changed = True
    return changed


def fix_duplicate_builds(profile: Dict, log: ChangeLog):
    """
    Canonicalize build preset fields and drop duplicated presets.

    Per category, the last preset with a given Id (by list position) is the
    one kept.
    """
    userbuilds = dig_dict(profile, "userbuilds")
    if userbuilds is None:
        return

    for category, builds in userbuilds.items():
        if not isinstance(builds, list):
            continue

        for build in builds:
            if isinstance(build, dict) and _canonicalize_build(build):
                log.fixed(
                    f"Normalized field names of {category} build "
                    f"'{build.get('Name')}' ({build.get('Id')})"
                )

        seen = set()
        removed = set()
        for position in range(len(builds) - 1, -1, -1):
            build = builds[position]
            if not isinstance(build, dict) or build.get("Id") is None:
                continue
            build_id = build["Id"]
            if build_id in seen:
                removed.add(position)
                log.fixed(
                    f"Removed duplicate {category} build '{build.get('Name')}' "
                    f"({build_id}) at position {position}"
                )
            else:
                seen.add(build_id)

        if removed:
            builds[:] = [b for i, b in enumerate(builds) if i not in removed]


# ═══════════════════════════════════════════════════════════════════════════════
# INVENTORY
# ═══════════════════════════════════════════════════════════════════════════════

def find_duplicate_positions(items: List[Dict]) -> List[int]:
    """List positions of items whose _id already appeared earlier."""
    seen = set()
    duplicates = []
    for position, item in enumerate(items):
        if not isinstance(item, dict) or item.get("_id") is None:
            continue
        if item["_id"] in seen:
            duplicates.append(position)
        else:
            seen.add(item["_id"])
    return duplicates


def fix_duplicate_items(profile: Dict, log: ChangeLog, remove_duplicates: bool = False):
    """
    Items sharing an _id.

    Only removed when the caller allows it; otherwise the finding is logged
    as a failure and the inventory is left untouched.
    """
    items = get_inventory_items(profile)
    if items is None:
        return

    duplicates = find_duplicate_positions(items)
    if not duplicates:
        return

    # ids may be any JSON scalar
    id_list = ", ".join(sorted({str(items[i]["_id"]) for i in duplicates}))
    if not remove_duplicates:
        log.failed(
            f"Found {len(duplicates)} duplicate inventory item(s) ({id_list}). "
            f"Enable 'Remove duplicate items' to remove them"
        )
        return

    message = f"Removed {len(duplicates)} duplicate inventory item(s) ({id_list})"
    flagged = set(duplicates)
    items[:] = [item for i, item in enumerate(items) if i not in flagged]
    log.fixed(message)


def _stranded_hideout_items(items: List[Dict]) -> List[Dict]:
    """Hideout-slot items whose parent is gone; find_orphans leaves these alone."""
    known = item_ids(items)
    return [
        item for item in items
        if isinstance(item, dict)
        and item.get("slotId") == SLOT_HIDEOUT
        and item.get("parentId") is not None
        and item.get("parentId") not in known
    ]


def fix_orphaned_inventory_items(profile: Dict, log: ChangeLog):
    """
    Items whose parent no longer exists are moved into the stash.

    This also covers items already in a hideout slot of a container that
    is gone, e.g. after the stash id changed.
    """
    inventory = get_inventory(profile)
    items = get_inventory_items(profile)
    if inventory is None or items is None:
        return

    stash_id = inventory.get("stash")
    if stash_id is None or find_item(items, stash_id) is None:
        return

    orphans = find_orphans(stash_id, items)
    stranded = _stranded_hideout_items(items)
    if not orphans and not stranded:
        return

    reparent_orphans(stash_id, items)
    for item in stranded:
        item["parentId"] = stash_id
        item.pop("location", None)
    log.fixed(f"Moved {len(orphans) + len(stranded)} orphaned item(s) into the stash")


def fix_missing_stash_containers(profile: Dict, log: ChangeLog):
    """
    Create the customization stash and its sibling containers.

    Only runs when the customization stash id is missing. Existing container
    ids are reused; an item is added only when no item with that id exists.
    """
    inventory = get_inventory(profile)
    items = get_inventory_items(profile)
    if inventory is None or items is None:
        return
    if inventory.get(BOOTSTRAP_CONTAINERS[0][0]):
        return

    existing = item_ids(items)
    for key, template in BOOTSTRAP_CONTAINERS:
        container_id = inventory.get(key) or generate_id()
        inventory[key] = container_id
        if container_id in existing:
            continue

        items.append({"_id": container_id, "_tpl": template})
        existing.add(container_id)
        log.fixed(f"Created missing {key} container ({container_id})")


# ═══════════════════════════════════════════════════════════════════════════════
# FLEA MARKET
# ═══════════════════════════════════════════════════════════════════════════════

def _is_invalid_offer(offer: Any) -> bool:
    if not isinstance(offer, dict):
        return False
    if "quantity" in offer and offer["quantity"] is None:
        return True
    for item in offer.get("items") or []:
        upd = item.get("upd") if isinstance(item, dict) else None
        if isinstance(upd, dict) and "StackObjectsCount" in upd and upd["StackObjectsCount"] is None:
            return True
    return False


def fix_invalid_ragfair_offers(profile: Dict, log: ChangeLog):
    """Drop flea offers with a null quantity or a null stack count."""
    offers = dig_list(get_pmc(profile), "RagfairInfo", "offers")
    if offers is None:
        return

    kept = [offer for offer in offers if not _is_invalid_offer(offer)]
    removed = len(offers) - len(kept)
    if removed:
        offers[:] = kept
        log.fixed(f"Removed {removed} invalid flea market offer(s)")


# ═══════════════════════════════════════════════════════════════════════════════
# MAIL
# ═══════════════════════════════════════════════════════════════════════════════

def fix_orphaned_mail_attachments(profile: Dict, log: ChangeLog):
    """
    Mail attachments stored against the live equipment container.

    The attachment gets its own container id, its sub-items are re-rooted
    under it and placed in the main slot.
    """
    dialogues = dig_dict(profile, "dialogues")
    equipment_id = dig(get_inventory(profile), "equipment")
    if dialogues is None or equipment_id is None:
        return

    for dialogue_id, dialogue in dialogues.items():
        for message in dig_list(dialogue, "messages") or []:
            attachment = dig_dict(message, "items")
            if attachment is None or attachment.get("stash") != equipment_id:
                continue

            data = attachment.get("data")
            if not isinstance(data, list):
                data = []

            new_stash = generate_id()
            attachment["stash"] = new_stash
            reparent_orphans(new_stash, data)
            for item in data:
                if isinstance(item, dict) and item.get("slotId") == SLOT_HIDEOUT:
                    item["slotId"] = SLOT_MAIN

            log.fixed(
                f"Re-rooted {len(data)} attachment item(s) of message {message.get('_id')} "
                f"in dialogue {dialogue_id} to new container {new_stash}"
            )


# ═══════════════════════════════════════════════════════════════════════════════
# QUESTS
# ═══════════════════════════════════════════════════════════════════════════════

def _missing_change_requirement(repeatable: Dict) -> bool:
    requirements = repeatable.get("changeRequirement")
    if not requirements:
        return True
    for quest in repeatable.get("activeQuests") or []:
        if isinstance(quest, dict) and quest.get("_id") not in requirements:
            return True
    return False


def fix_stale_repeatable_quests(profile: Dict, log: ChangeLog):
    """
    Repeatable quests left half-generated.

    A nonzero endTime without change requirements means generation failed;
    zeroing endTime makes the server regenerate them.
    """
    repeatables = dig_list(get_pmc(profile), "RepeatableQuests")
    if repeatables is None:
        return

    for repeatable in repeatables:
        if not isinstance(repeatable, dict) or not repeatable.get("endTime"):
            continue
        if _missing_change_requirement(repeatable):
            repeatable["endTime"] = 0
            log.fixed(f"Reset {repeatable.get('name', 'unknown')} repeatable quests (missing change requirement)")


def fix_stale_dropped_items(profile: Dict, log: ChangeLog):
    """Dropped-item records for quests the profile no longer has."""
    pmc = get_pmc(profile)
    dropped = dig_list(pmc, "Stats", "Eft", "DroppedItems")
    if dropped is None:
        return

    quest_ids = {q.get("qid") for q in dig_list(pmc, "Quests") or [] if isinstance(q, dict)}
    stale_quests = {
        record.get("QuestId") for record in dropped
        if isinstance(record, dict)
        and record.get("QuestId") is not None
        and record.get("QuestId") not in quest_ids
    }
    if not stale_quests:
        return

    kept = [r for r in dropped if not (isinstance(r, dict) and r.get("QuestId") in stale_quests)]
    removed = len(dropped) - len(kept)
    dropped[:] = kept
    log.fixed(f"Removed {removed} dropped item record(s) for {len(stale_quests)} unknown quest(s)")
