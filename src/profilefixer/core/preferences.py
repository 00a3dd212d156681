"""
Preferences - persisted user settings.

Holds the settings the front-ends carry between runs: whether duplicate
items are removed, whether a backup is taken before overwriting a profile,
and the last directory a profile was loaded from. Stored as JSON in the
user's home directory.
"""

import json
import logging
from dataclasses import dataclass, field, asdict, fields
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class PreferencesResult:
    """Result of a preferences operation."""
    success: bool
    message: str
    path: Optional[str] = None


@dataclass
class FixerPreferences:
    """User settings for the front-ends."""
    version: str = "1.0"
    remove_duplicates: bool = False
    create_backup: bool = True
    output_dir: str = ""
    last_directory: str = ""
    last_saved: str = field(default_factory=lambda: datetime.now().isoformat())

    def to_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict) -> "FixerPreferences":
        """Create from a dict; unknown keys are ignored, missing keys defaulted."""
        prefs = cls()
        known = {f.name for f in fields(cls)}
        for key, value in data.items():
            if key in known:
                setattr(prefs, key, value)
        return prefs


class PreferencesManager:
    """Load and save FixerPreferences."""

    DEFAULT_FILENAME = ".profilefixer.json"

    def __init__(self, path: str = None):
        self.path = Path(path) if path else Path.home() / self.DEFAULT_FILENAME
        self._prefs = FixerPreferences()

    @property
    def prefs(self) -> FixerPreferences:
        return self._prefs

    def load(self) -> PreferencesResult:
        """Load from disk. A missing file means defaults."""
        if not self.path.exists():
            self._prefs = FixerPreferences()
            return PreferencesResult(True, "No preferences file found, using defaults", str(self.path))

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Invalid preferences file {self.path}: {e}")
            return PreferencesResult(False, f"Invalid JSON: {e}", str(self.path))
        except OSError as e:
            logger.error(f"Could not read preferences {self.path}: {e}")
            return PreferencesResult(False, f"Load failed: {e}", str(self.path))

        if not isinstance(data, dict):
            return PreferencesResult(False, "Preferences file is not a JSON object", str(self.path))

        self._prefs = FixerPreferences.from_dict(data)
        return PreferencesResult(True, f"Loaded preferences from {self.path.name}", str(self.path))

    def save(self) -> PreferencesResult:
        """Write to disk."""
        self._prefs.last_saved = datetime.now().isoformat()
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, 'w', encoding='utf-8') as f:
                json.dump(self._prefs.to_dict(), f, indent=2)
        except OSError as e:
            logger.error(f"Could not write preferences {self.path}: {e}")
            return PreferencesResult(False, f"Save failed: {e}", str(self.path))

        return PreferencesResult(True, f"Saved preferences to {self.path.name}", str(self.path))
