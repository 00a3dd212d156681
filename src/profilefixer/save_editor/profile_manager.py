"""
Profile Manager - file round-trip around the repair pipeline.

Loads a profile file, runs the repair pipeline on it with the caller's
duplicate-removal preference and writes the corrected document back under
the original filename. The loaded text is kept so that every repair pass
starts from the file as it was read.
"""

import json
import logging
import shutil
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from profilefixer.core.repair_pipeline import ProfileRepairPipeline, RepairResult

logger = logging.getLogger(__name__)

PROFILE_INDENT = "\t"


def dump_profile(profile: Any) -> str:
    """Serialize a profile: input key order, tab indented."""
    return json.dumps(profile, indent=PROFILE_INDENT, ensure_ascii=False)


@dataclass
class ProfileOpResult:
    """Result of a profile file operation."""
    success: bool
    message: str
    path: Optional[str] = None
    backup_path: Optional[str] = None


class ProfileManager:
    """
    One profile file.

    Usage:
        mgr = ProfileManager("profiles/abc123.json")
        if mgr.load():
            result = mgr.repair(remove_duplicates=True)
            if result.changed:
                mgr.save()
    """

    def __init__(self, filepath: str):
        self.filepath = Path(filepath)
        self.raw_text: Optional[str] = None
        self.result: Optional[RepairResult] = None
        self.pipeline = ProfileRepairPipeline()

    @property
    def filename(self) -> str:
        return self.filepath.name

    @property
    def is_loaded(self) -> bool:
        return self.raw_text is not None

    @property
    def can_save(self) -> bool:
        """A repaired, recognized profile is ready to be written."""
        return self.result is not None and not self.result.skipped

    # ─────────────────────────────────────────────────────────────
    # LOAD / REPAIR
    # ─────────────────────────────────────────────────────────────

    def load(self) -> bool:
        """Read the profile text."""
        self.raw_text = None
        self.result = None
        try:
            with open(self.filepath, 'r', encoding='utf-8-sig') as f:
                self.raw_text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Error loading profile {self.filepath}: {e}")
            return False

        logger.debug(f"Loaded {self.filepath} ({len(self.raw_text):,} chars)")
        return True

    def repair(self, remove_duplicates: bool = False) -> RepairResult:
        """
        Run one repair pass over the loaded text.

        Can be called again (e.g. after the preference changed); each call
        re-parses the original text.
        """
        if self.raw_text is None:
            raise RuntimeError("No profile loaded")

        self.result = self.pipeline.run(self.raw_text, remove_duplicates=remove_duplicates)
        return self.result

    def render(self) -> str:
        """Corrected document as text."""
        if not self.can_save:
            raise RuntimeError("No repaired profile to render")
        return dump_profile(self.result.profile)

    # ─────────────────────────────────────────────────────────────
    # SAVE
    # ─────────────────────────────────────────────────────────────

    def output_path(self, output: str = None) -> Path:
        """
        Where save() writes.

        No output: overwrite the original. A directory: the original filename
        inside it. Anything else is used as the file path.
        """
        if not output:
            return self.filepath
        target = Path(output)
        if target.is_dir():
            return target / self.filename
        return target

    def backup(self) -> ProfileOpResult:
        """Copy the original file to <name>.<timestamp>.bak."""
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        backup_path = self.filepath.with_suffix(f"{self.filepath.suffix}.{timestamp}.bak")
        try:
            shutil.copy2(self.filepath, backup_path)
        except OSError as e:
            logger.error(f"Backup of {self.filepath} failed: {e}")
            return ProfileOpResult(False, f"Backup failed: {e}", str(self.filepath))

        logger.info(f"Backup saved to {backup_path}")
        return ProfileOpResult(True, "Backup created", str(self.filepath), str(backup_path))

    def save(self, output: str = None, backup: bool = True) -> ProfileOpResult:
        """Write the corrected profile."""
        if not self.can_save:
            return ProfileOpResult(False, "Nothing to save: no repaired profile")

        target = self.output_path(output)
        backup_path = None
        if backup and target.exists() and target.resolve() == self.filepath.resolve():
            backup_result = self.backup()
            if not backup_result.success:
                return backup_result
            backup_path = backup_result.backup_path

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(target, 'w', encoding='utf-8') as f:
                f.write(self.render())
        except OSError as e:
            logger.error(f"Error saving profile {target}: {e}")
            return ProfileOpResult(False, f"Save failed: {e}", str(target), backup_path)

        logger.info(f"Saved {target}")
        return ProfileOpResult(True, f"Saved {target.name}", str(target), backup_path)

    # ─────────────────────────────────────────────────────────────
    # REPORTING
    # ─────────────────────────────────────────────────────────────

    def format_report(self) -> str:
        """Human-readable change report of the last repair."""
        lines = [f"{'=' * 60}", f"Profile: {self.filepath}", f"{'=' * 60}"]
        if self.result is None:
            lines.append("  (not repaired yet)")
            return "\n".join(lines)

        if self.result.version:
            lines.append(f"Version: {self.result.version}")
        for entry in self.result.log:
            lines.append(f"  {entry.icon()} {entry.message}")
        lines.append("-" * 60)
        lines.append(f"Result: {self.result.summary()}")
        return "\n".join(lines)
