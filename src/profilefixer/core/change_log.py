"""
Change Log - ordered record of what a repair pass found and did.

Append-only within one pass. Each entry carries a human-readable message and
a success flag; the kind separates real corrections from failures that need
user action and from purely informational notes.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Iterator, List

logger = logging.getLogger(__name__)


class EntryKind(Enum):
    """What an entry records."""
    FIXED = "fixed"     # Document was changed
    FAILED = "failed"   # Problem found, left as-is
    INFO = "info"       # Nothing to act on


@dataclass
class ChangeEntry:
    """One finding."""
    message: str
    success: bool
    kind: EntryKind = EntryKind.FIXED
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict:
        return {"message": self.message, "success": self.success}

    def icon(self) -> str:
        return {
            EntryKind.FIXED: "✓",
            EntryKind.FAILED: "✗",
            EntryKind.INFO: "•",
        }.get(self.kind, "?")


class ChangeLog:
    """Append-only list of ChangeEntry."""

    def __init__(self):
        self._entries: List[ChangeEntry] = []

    # ─────────────────────────────────────────────────────────────
    # APPEND
    # ─────────────────────────────────────────────────────────────

    def fixed(self, message: str) -> ChangeEntry:
        """Record a correction."""
        logger.info(message)
        return self._append(ChangeEntry(message, True, EntryKind.FIXED))

    def failed(self, message: str) -> ChangeEntry:
        """Record a problem that was detected but not corrected."""
        logger.warning(message)
        return self._append(ChangeEntry(message, False, EntryKind.FAILED))

    def info(self, message: str) -> ChangeEntry:
        """Record an informational note."""
        logger.info(message)
        return self._append(ChangeEntry(message, True, EntryKind.INFO))

    def _append(self, entry: ChangeEntry) -> ChangeEntry:
        self._entries.append(entry)
        return entry

    def clear(self):
        self._entries.clear()

    # ─────────────────────────────────────────────────────────────
    # QUERY
    # ─────────────────────────────────────────────────────────────

    @property
    def entries(self) -> List[ChangeEntry]:
        return list(self._entries)

    @property
    def has_changes(self) -> bool:
        """Did any entry change the document?"""
        return any(e.kind == EntryKind.FIXED for e in self._entries)

    @property
    def has_failures(self) -> bool:
        return any(e.kind == EntryKind.FAILED for e in self._entries)

    def count(self, kind: EntryKind) -> int:
        return sum(1 for e in self._entries if e.kind == kind)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ChangeEntry]:
        return iter(list(self._entries))

    def __bool__(self) -> bool:
        return bool(self._entries)

    # ─────────────────────────────────────────────────────────────
    # EXPORT
    # ─────────────────────────────────────────────────────────────

    def to_list(self) -> List[Dict]:
        """Entries as {message, success} dicts."""
        return [e.to_dict() for e in self._entries]

    def export_json(self) -> str:
        """Export the log as JSON, with kind and time for each entry."""
        records = []
        for entry in self._entries:
            records.append({
                'timestamp': entry.timestamp.isoformat(),
                'kind': entry.kind.value,
                'success': entry.success,
                'message': entry.message,
            })
        return json.dumps(records, indent=2)
