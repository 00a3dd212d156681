"""
Scalar Fixers - single-field corrections.

Each fixer looks at one field (or a small group of sibling fields), and when
the value is one of the known-bad values writes the corrected value and adds
one entry to the change log. A missing ancestor means there is nothing to
check: the fixer returns without logging.

Signature of every fixer: fixer(profile, log) -> None
"""

import logging
from typing import Dict

from profilefixer.core.change_log import ChangeLog
from profilefixer.core.constants import (
    BITCOIN_FARM_RECIPE, BITCOIN_PRODUCTION_TIME,
    ROUBLES_TPL, REF_TRADER_ID,
    STASH_AREA_TYPE, STASH_TEMPLATES, UNHEARD_EDITION, UNHEARD_STASH_TPL,
    HIDEOUT_AREA_MAX_LEVELS, HIDEOUT_AREA_NAMES,
)
from profilefixer.core.profile_paths import (
    dig, dig_dict, dig_list, get_pmc, get_inventory, get_inventory_items,
    find_item, is_number,
)

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# HIDEOUT PRODUCTION
# ═══════════════════════════════════════════════════════════════════════════════

def fix_bitcoin_production_time(profile: Dict, log: ChangeLog):
    """Bitcoin Farm production must run for the fixed duration."""
    production = dig_dict(get_pmc(profile), "Hideout", "Production", BITCOIN_FARM_RECIPE)
    if production is None:
        return

    if "ProductionTime" not in production:
        return
    current = production["ProductionTime"]
    if current == BITCOIN_PRODUCTION_TIME:
        return

    production["ProductionTime"] = BITCOIN_PRODUCTION_TIME
    log.fixed(f"Bitcoin Farm production time changed from {current} to {BITCOIN_PRODUCTION_TIME}")


def fix_production_progress(profile: Dict, log: ChangeLog):
    """A null production progress counter is reset to 0."""
    productions = dig_dict(get_pmc(profile), "Hideout", "Production")
    if productions is None:
        return

    for recipe_id, production in productions.items():
        if not isinstance(production, dict):
            continue
        if "Progress" in production and production["Progress"] is None:
            production["Progress"] = 0
            log.fixed(f"Production {recipe_id} had null progress, reset to 0")


# ═══════════════════════════════════════════════════════════════════════════════
# FLEA MARKET
# ═══════════════════════════════════════════════════════════════════════════════

def fix_ragfair_rating(profile: Dict, log: ChangeLog):
    """Flea market reputation must be a number."""
    ragfair = dig_dict(get_pmc(profile), "RagfairInfo")
    if ragfair is None:
        return

    if ragfair.get("rating") is None:
        ragfair["rating"] = 0.0
        log.fixed("Flea market rating was missing, set to 0")


def fix_offer_user_rating(profile: Dict, log: ChangeLog):
    """Null submitter rating on our own flea offers."""
    offers = dig_list(get_pmc(profile), "RagfairInfo", "offers")
    if offers is None:
        return

    for offer in offers:
        user = dig_dict(offer, "user")
        if user is None:
            continue
        if "rating" in user and user["rating"] is None:
            user["rating"] = 0
            log.fixed(f"Flea offer {offer.get('_id')} had a null user rating, set to 0")


# ═══════════════════════════════════════════════════════════════════════════════
# STASH / PROFILE INFO
# ═══════════════════════════════════════════════════════════════════════════════

def expected_stash_template(stash_level, edition) -> str:
    """Stash template implied by the stash area level, or None if unknown."""
    if edition == UNHEARD_EDITION and stash_level == max(STASH_TEMPLATES):
        return UNHEARD_STASH_TPL
    return STASH_TEMPLATES.get(stash_level)


def fix_stash_template(profile: Dict, log: ChangeLog):
    """The stash container's template has to match the stash area level."""
    pmc = get_pmc(profile)
    inventory = get_inventory(profile)
    items = get_inventory_items(profile)
    areas = dig_list(pmc, "Hideout", "Areas")
    if inventory is None or items is None or areas is None:
        return

    stash_area = next(
        (a for a in areas if isinstance(a, dict) and a.get("type") == STASH_AREA_TYPE),
        None,
    )
    if stash_area is None:
        return

    expected = expected_stash_template(stash_area.get("level"), dig(profile, "info", "edition"))
    if expected is None:
        logger.debug(f"No stash template known for stash level {stash_area.get('level')!r}")
        return

    stash_item = find_item(items, inventory.get("stash"))
    if stash_item is None or stash_item.get("_tpl") == expected:
        return

    old_tpl = stash_item.get("_tpl")
    stash_item["_tpl"] = expected
    log.fixed(
        f"Stash template changed from {old_tpl} to {expected} "
        f"to match stash level {stash_area.get('level')}"
    )


def fix_wipe_flag(profile: Dict, log: ChangeLog):
    """A profile flagged for wipe would be reset on next login."""
    info = dig_dict(profile, "info")
    if info is None:
        return

    if info.get("wipe") is True:
        info["wipe"] = False
        log.fixed("Profile was flagged for wipe, flag cleared")


# ═══════════════════════════════════════════════════════════════════════════════
# SKILLS
# ═══════════════════════════════════════════════════════════════════════════════

SKILL_NUMBER_FIELDS = ("Progress", "PointsEarnedDuringSession")


def check_skill_points(profile: Dict, log: ChangeLog):
    """
    Report skills whose progress counters are not numbers.

    Detection only: there is no safe value to restore, so the entry is a
    failure and the document is left alone.
    """
    skills = dig_list(get_pmc(profile), "Skills", "Common")
    if skills is None:
        return

    for skill in skills:
        if not isinstance(skill, dict):
            continue
        for field_name in SKILL_NUMBER_FIELDS:
            if field_name in skill and not is_number(skill[field_name]):
                log.failed(
                    f"Skill {skill.get('Id')} has an invalid {field_name} value "
                    f"({skill[field_name]!r})"
                )


# ═══════════════════════════════════════════════════════════════════════════════
# ITEMS
# ═══════════════════════════════════════════════════════════════════════════════

def fix_currency_metadata(profile: Dict, log: ChangeLog):
    """Rouble stacks without an upd block get a stack of one."""
    items = get_inventory_items(profile)
    if items is None:
        return

    fixed = 0
    for item in items:
        if not isinstance(item, dict) or item.get("_tpl") != ROUBLES_TPL:
            continue
        if "upd" not in item:
            item["upd"] = {"StackObjectsCount": 1}
            fixed += 1

    if fixed:
        log.fixed(f"Added missing stack data to {fixed} rouble stack(s)")


# ═══════════════════════════════════════════════════════════════════════════════
# HIDEOUT AREAS / TRADERS
# ═══════════════════════════════════════════════════════════════════════════════

def fix_hideout_area_levels(profile: Dict, log: ChangeLog):
    """Clamp hideout areas built past their maximum level."""
    areas = dig_list(get_pmc(profile), "Hideout", "Areas")
    if areas is None:
        return

    for area in areas:
        if not isinstance(area, dict):
            continue
        area_type = area.get("type")
        max_level = HIDEOUT_AREA_MAX_LEVELS.get(area_type)
        level = area.get("level")
        if max_level is None or not is_number(level) or level <= max_level:
            continue

        area["level"] = max_level
        name = HIDEOUT_AREA_NAMES.get(area_type, f"type {area_type}")
        log.fixed(f"Hideout area {name} was level {level}, capped to {max_level}")


def fix_locked_trader(profile: Dict, log: ChangeLog):
    """Ref must be unlocked once present in the trader list."""
    trader = dig_dict(get_pmc(profile), "TradersInfo", REF_TRADER_ID)
    if trader is None:
        return

    if not trader.get("unlocked"):
        trader["unlocked"] = True
        log.fixed(f"Trader {REF_TRADER_ID} (Ref) was locked, unlocked")
