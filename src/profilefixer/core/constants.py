"""
Game constants used by the fixers.

Template ids, recipe ids and the hideout tables come from the server's
database dumps. They only cover what a fixer needs to compare against.
"""

# Production recipe id of the Bitcoin Farm and its expected duration
BITCOIN_FARM_RECIPE = "5d5c205bd582a50d042a3c0e"
BITCOIN_PRODUCTION_TIME = 145000

# Roubles - the server drops `upd` on some stacks
ROUBLES_TPL = "5449016a4bdc2d6f028b456f"

# Ref (Arena trader) ships locked on older profiles
REF_TRADER_ID = "6617beeaa9cfa777ca915b7c"

# Slot ids
SLOT_CARTRIDGES = "cartridges"
SLOT_HIDEOUT = "hideout"
SLOT_MAIN = "main"

# ─────────────────────────────────────────────────────────────────────────────
# STASH
# ─────────────────────────────────────────────────────────────────────────────

STASH_AREA_TYPE = 3

# Stash container template by stash area level
STASH_TEMPLATES = {
    1: "566abbc34bdc2d92178b4576",  # Standard
    2: "5811ce572459770cba1a34ea",  # Left Behind
    3: "5811ce662459770f6b2f5e09",  # Prepare For Escape
    4: "5811ce772459770e9e5f9532",  # Edge Of Darkness
}

UNHEARD_EDITION = "Unheard"
UNHEARD_STASH_TPL = "6602bcf19cc643f44a04274b"

# Inventory container key -> template, created when the customization stash
# is missing (profiles migrated from before 3.11)
BOOTSTRAP_CONTAINERS = [
    ("hideoutCustomizationStashId", "673c7b00cbf4b984b5099181"),
    ("sortingTable", "602543c13fee350cd564d032"),
    ("questRaidItems", "5963866286f7747bf429b572"),
    ("questStashItems", "5963866b86f7747bfa1c4462"),
]

# ─────────────────────────────────────────────────────────────────────────────
# HIDEOUT
# ─────────────────────────────────────────────────────────────────────────────

HIDEOUT_AREA_NAMES = {
    0: "Vents",
    1: "Security",
    2: "Lavatory",
    3: "Stash",
    4: "Generator",
    5: "Heating",
    6: "Water Collector",
    7: "Medstation",
    8: "Nutrition Unit",
    9: "Rest Space",
    10: "Workbench",
    11: "Intelligence Center",
    12: "Shooting Range",
    13: "Library",
    14: "Scav Case",
    15: "Illumination",
    16: "Hall of Fame",
    17: "Air Filtering Unit",
    18: "Solar Power",
    19: "Booze Generator",
    20: "Bitcoin Farm",
    21: "Christmas Tree",
    22: "Defective Wall",
    23: "Gym",
    24: "Weapon Rack",
    25: "Weapon Rack (Secondary)",
    26: "Gear Rack",
    27: "Cultist Circle",
}

# Highest constructible level per area type
HIDEOUT_AREA_MAX_LEVELS = {
    0: 3,
    1: 3,
    2: 3,
    3: 4,
    4: 3,
    5: 3,
    6: 3,
    7: 3,
    8: 3,
    9: 3,
    10: 3,
    11: 3,
    12: 3,
    13: 1,
    14: 1,
    15: 3,
    16: 3,
    17: 1,
    18: 1,
    19: 1,
    20: 3,
    21: 1,
    22: 6,
    23: 1,
    24: 3,
    25: 3,
    26: 3,
    27: 1,
}
