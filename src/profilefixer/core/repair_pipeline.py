"""
Repair Pipeline - runs the fixers over one profile.

One pass is linear:
  1. start from an empty change log
  2. parse / recognize the document (anything else is passed through)
  3. fixed-order fixers
  4. fixers gated on the declared profile version
  5. duplicate item removal (caller preference)
  6. trailing fixers
  7. "no issues" note when nothing was logged

The pipeline holds no state between passes: document and preference go in,
a RepairResult comes out.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from profilefixer.core.change_log import ChangeLog, EntryKind
from profilefixer.core.profile_paths import get_profile_version, is_profile
from profilefixer.core import scalar_fixers as scalar
from profilefixer.core import structural_fixers as structural

logger = logging.getLogger(__name__)

NO_ISSUES_MESSAGE = "No issues found in profile"


@dataclass
class RepairStep:
    """A named fixer."""
    name: str
    fixer: Callable
    description: str = ""


# ─────────────────────────────────────────────────────────────────────────────
# STEP TABLES
# ─────────────────────────────────────────────────────────────────────────────

LEADING_STEPS: List[RepairStep] = [
    RepairStep("cartridge_locations", structural.fix_cartridge_locations,
               "Re-index cartridge stacks inside magazines"),
    RepairStep("duplicate_builds", structural.fix_duplicate_builds,
               "Normalize build presets and drop duplicates"),
    RepairStep("bitcoin_production", scalar.fix_bitcoin_production_time,
               "Bitcoin Farm production time"),
    RepairStep("production_progress", scalar.fix_production_progress,
               "Null hideout production progress"),
    RepairStep("ragfair_rating", scalar.fix_ragfair_rating,
               "Missing flea market rating"),
    RepairStep("stash_template", scalar.fix_stash_template,
               "Stash template vs stash level"),
    RepairStep("wipe_flag", scalar.fix_wipe_flag,
               "Profile wipe flag"),
    RepairStep("skill_points", scalar.check_skill_points,
               "Invalid skill progress values (report only)"),
    RepairStep("currency_metadata", scalar.fix_currency_metadata,
               "Rouble stacks without stack data"),
]

# Declared version prefix -> fixers for that profile format
VERSION_FIXERS: Dict[str, List[RepairStep]] = {
    "3.9.": [
        RepairStep("invalid_ragfair_offers", structural.fix_invalid_ragfair_offers,
                   "Flea offers with null quantity / stack count"),
        RepairStep("offer_user_rating", scalar.fix_offer_user_rating,
                   "Null submitter rating on flea offers"),
        RepairStep("mail_attachments", structural.fix_orphaned_mail_attachments,
                   "Mail attachments stored against equipment"),
    ],
    "3.10.": [
        RepairStep("invalid_ragfair_offers", structural.fix_invalid_ragfair_offers,
                   "Flea offers with null quantity / stack count"),
        RepairStep("mail_attachments", structural.fix_orphaned_mail_attachments,
                   "Mail attachments stored against equipment"),
        RepairStep("hideout_area_levels", scalar.fix_hideout_area_levels,
                   "Hideout areas above their max level"),
    ],
    "3.11.": [
        RepairStep("stash_containers", structural.fix_missing_stash_containers,
                   "Missing customization stash and sibling containers"),
        RepairStep("mail_attachments", structural.fix_orphaned_mail_attachments,
                   "Mail attachments stored against equipment"),
        RepairStep("hideout_area_levels", scalar.fix_hideout_area_levels,
                   "Hideout areas above their max level"),
    ],
}

DUPLICATE_ITEMS_STEP = RepairStep(
    "duplicate_items", structural.fix_duplicate_items,
    "Inventory items sharing an id (removed only when enabled)",
)

TRAILING_STEPS: List[RepairStep] = [
    RepairStep("orphaned_items", structural.fix_orphaned_inventory_items,
               "Items whose parent is missing"),
    RepairStep("repeatable_quests", structural.fix_stale_repeatable_quests,
               "Half-generated repeatable quests"),
    RepairStep("dropped_items", structural.fix_stale_dropped_items,
               "Dropped item records for unknown quests"),
    RepairStep("locked_trader", scalar.fix_locked_trader,
               "Ref locked"),
]


def version_steps(version: str) -> List[RepairStep]:
    """Version-gated steps applying to a declared version, in table order."""
    steps = []
    for prefix, prefix_steps in VERSION_FIXERS.items():
        if version.startswith(prefix):
            steps.extend(prefix_steps)
    return steps


# ═══════════════════════════════════════════════════════════════════════════════
# RESULT
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass
class RepairResult:
    """Outcome of one pass."""
    profile: Any
    log: ChangeLog = field(default_factory=ChangeLog)
    skipped: bool = False
    version: str = ""

    @property
    def modified(self) -> bool:
        """True iff the log holds at least one non-informational entry."""
        return any(entry.kind != EntryKind.INFO for entry in self.log)

    @property
    def changed(self) -> bool:
        """At least one fixer rewrote part of the document."""
        return self.log.has_changes

    def summary(self) -> str:
        if self.skipped:
            return "Nothing to do"
        if not self.modified:
            return "No changes"
        fixed = self.log.count(EntryKind.FIXED)
        failed = self.log.count(EntryKind.FAILED)
        return f"{fixed} fixed, {failed} left as-is"


# ═══════════════════════════════════════════════════════════════════════════════
# PIPELINE
# ═══════════════════════════════════════════════════════════════════════════════

class ProfileRepairPipeline:
    """Runs the repair steps in their fixed order over one document."""

    def parse(self, source: Any) -> Tuple[Optional[Any], str]:
        """
        Turn the input into a document.

        Returns (document, error). Text is parsed as JSON; anything else is
        taken as already parsed.
        """
        if isinstance(source, (bytes, bytearray)):
            try:
                source = source.decode("utf-8-sig")
            except UnicodeDecodeError as e:
                return None, f"Profile is not UTF-8 text: {e}"

        if isinstance(source, str):
            try:
                return json.loads(source), ""
            except json.JSONDecodeError as e:
                return None, f"Profile is not valid JSON: {e}"

        return source, ""

    def steps_for(self, version: str) -> List[RepairStep]:
        """Every step a pass would run for a declared version."""
        return LEADING_STEPS + version_steps(version) + [DUPLICATE_ITEMS_STEP] + TRAILING_STEPS

    def run(self, source: Any, remove_duplicates: bool = False) -> RepairResult:
        """Run one pass. Never raises for bad input."""
        log = ChangeLog()

        profile, error = self.parse(source)
        if error:
            log.info(f"Nothing to do: {error}")
            return RepairResult(profile=None, log=log, skipped=True)

        if not is_profile(profile):
            log.info("Nothing to do: document has no player character info")
            return RepairResult(profile=profile, log=log, skipped=True)

        version = get_profile_version(profile)
        logger.debug(f"Repairing profile, declared version {version!r}")

        for step in LEADING_STEPS + version_steps(version):
            self._run_step(step, profile, log)

        self._run_step(DUPLICATE_ITEMS_STEP, profile, log, remove_duplicates=remove_duplicates)

        for step in TRAILING_STEPS:
            self._run_step(step, profile, log)

        if not log:
            log.info(NO_ISSUES_MESSAGE)

        return RepairResult(profile=profile, log=log, version=version)

    def _run_step(self, step: RepairStep, profile: Any, log: ChangeLog, **kwargs):
        """Run one fixer; an exception only fails that fixer."""
        try:
            step.fixer(profile, log, **kwargs)
        except Exception as e:
            logger.exception(f"Fixer {step.name} failed")
            log.failed(f"Fixer {step.name} could not run: {e}")


def repair_profile(source: Any, remove_duplicates: bool = False) -> RepairResult:
    """Convenience function to run one pass."""
    return ProfileRepairPipeline().run(source, remove_duplicates=remove_duplicates)
