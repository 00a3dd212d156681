"""
Core repair modules for ProfileFixer.

- id_generator: ids for synthesized containers
- profile_paths: presence-checked access into the profile
- constants: template ids and hideout tables
- item_tree: orphan detection / re-rooting over flat item lists
- scalar_fixers: single-field corrections
- structural_fixers: collection-level corrections
- change_log: ordered record of findings
- repair_pipeline: runs the fixers in order
- preferences: persisted user settings
"""

from .change_log import ChangeLog, ChangeEntry, EntryKind
from .id_generator import generate_id
from .item_tree import find_orphans, reparent_orphans
from .repair_pipeline import (
    ProfileRepairPipeline, RepairResult, RepairStep,
    VERSION_FIXERS, repair_profile,
)
from .preferences import FixerPreferences, PreferencesManager

__all__ = [
    'ChangeLog', 'ChangeEntry', 'EntryKind',
    'generate_id', 'find_orphans', 'reparent_orphans',
    'ProfileRepairPipeline', 'RepairResult', 'RepairStep',
    'VERSION_FIXERS', 'repair_profile',
    'FixerPreferences', 'PreferencesManager',
]
