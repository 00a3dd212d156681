"""
ProfileFixer Suite - core utility tests

Id generator, presence-checked paths, item tree helpers and the change log.
No profile files required.

Can be run standalone: python test_core_utils.py
Or via main runner: python tests.py
"""

import json

from profile_fixtures import make_profile, STASH_ID

from profilefixer.core.change_log import ChangeLog, EntryKind
from profilefixer.core.id_generator import generate_id, is_valid_id, ID_LENGTH
from profilefixer.core.item_tree import find_orphans, reparent_orphans, group_by_parent
from profilefixer.core.profile_paths import (
    dig, dig_dict, dig_list, get_profile_version, is_profile, is_number,
)


# ═══════════════════════════════════════════════════════════════════════════════
# ID GENERATOR
# ═══════════════════════════════════════════════════════════════════════════════

def test_generated_id_is_24_lowercase_hex():
    new_id = generate_id()
    assert len(new_id) == ID_LENGTH
    assert is_valid_id(new_id)


def test_generated_id_starts_with_hex_timestamp():
    new_id = generate_id(now=1700000000.75)
    assert new_id.startswith(format(1700000000, "x"))


def test_generated_ids_differ():
    assert len({generate_id(now=1700000000) for _ in range(50)}) > 1


def test_is_valid_id_rejects_other_values():
    assert not is_valid_id("ABCDEF0123456789abcdef01")
    assert not is_valid_id("abc")
    assert not is_valid_id(None)


# ═══════════════════════════════════════════════════════════════════════════════
# PATHS
# ═══════════════════════════════════════════════════════════════════════════════

def test_dig_returns_none_on_missing_steps():
    doc = {"a": {"b": [1, {"c": 2}]}}
    assert dig(doc, "a", "b", 1, "c") == 2
    assert dig(doc, "a", "x", "c") is None
    assert dig(doc, "a", "b", 5) is None
    assert dig(doc, "a", "b", "c") is None
    assert dig_dict(doc, "a", "b") is None
    assert dig_list(doc, "a", "b") == [1, {"c": 2}]


def test_profile_version_prefers_spt_over_aki():
    assert get_profile_version({"spt": {"version": "3.10.1"}, "aki": {"version": "3.7.0"}}) == "3.10.1"
    assert get_profile_version({"aki": {"version": "3.8.3"}}) == "3.8.3"
    assert get_profile_version({}) == ""


def test_is_profile_requires_pmc_info():
    assert is_profile(make_profile())
    assert not is_profile({"characters": {"pmc": {}}})
    assert not is_profile([1, 2, 3])
    assert not is_profile(None)


def test_is_number():
    assert is_number(0)
    assert is_number(1.5)
    assert not is_number(None)
    assert not is_number("12")
    assert not is_number(True)
    assert not is_number(float("nan"))


# ═══════════════════════════════════════════════════════════════════════════════
# ITEM TREE
# ═══════════════════════════════════════════════════════════════════════════════

def _tree():
    return [
        {"_id": "root"},
        {"_id": "a", "parentId": "root", "slotId": "main"},
        {"_id": "b", "parentId": "gone", "slotId": "mod_scope", "location": 3},
        {"_id": "c", "parentId": "b", "slotId": "mod_mount"},
        {"_id": "d", "parentId": "gone", "slotId": "hideout"},
        {"_id": "e", "parentId": "new_root", "slotId": "main"},
    ]


def test_find_orphans_skips_roots_hideout_and_target():
    orphans = find_orphans("new_root", _tree())
    assert [item["_id"] for item in orphans] == ["b"]


def test_reparent_orphans_reroots_without_deleting():
    items = _tree()
    result = reparent_orphans("new_root", items)
    assert result is items
    assert len(items) == 6
    moved = items[2]
    assert moved["parentId"] == "new_root"
    assert moved["slotId"] == "hideout"
    assert "location" not in moved
    # children of the re-rooted item follow it
    assert items[3]["parentId"] == "b"


def test_reparent_orphans_is_stable():
    items = reparent_orphans("new_root", _tree())
    assert find_orphans("new_root", items) == []


def test_group_by_parent_keeps_list_order():
    items = [
        {"_id": "1", "parentId": "m", "slotId": "cartridges"},
        {"_id": "2", "parentId": "n", "slotId": "cartridges"},
        {"_id": "3", "parentId": "m", "slotId": "patron_in_weapon"},
        {"_id": "4", "parentId": "m", "slotId": "cartridges"},
    ]
    groups = group_by_parent(items, "cartridges")
    assert [i["_id"] for i in groups["m"]] == ["1", "4"]
    assert [i["_id"] for i in groups["n"]] == ["2"]


def test_stash_root_is_not_an_orphan():
    items = make_profile()["characters"]["pmc"]["Inventory"]["items"]
    assert find_orphans(STASH_ID, items) == []


# ═══════════════════════════════════════════════════════════════════════════════
# CHANGE LOG
# ═══════════════════════════════════════════════════════════════════════════════

def test_change_log_kinds_and_contract():
    log = ChangeLog()
    log.fixed("changed something")
    log.failed("could not change something")
    log.info("note")

    assert len(log) == 3
    assert log.has_changes
    assert log.has_failures
    assert log.count(EntryKind.INFO) == 1
    assert log.to_list() == [
        {"message": "changed something", "success": True},
        {"message": "could not change something", "success": False},
        {"message": "note", "success": True},
    ]


def test_change_log_without_fixes_has_no_changes():
    log = ChangeLog()
    log.failed("x")
    assert not log.has_changes
    log.clear()
    assert not log


def test_change_log_export_json():
    log = ChangeLog()
    log.fixed("one")
    records = json.loads(log.export_json())
    assert records[0]["kind"] == "fixed"
    assert records[0]["message"] == "one"
    assert "timestamp" in records[0]


if __name__ == "__main__":
    import sys
    from tests import run_module
    raise SystemExit(0 if run_module(sys.modules[__name__]) else 1)
