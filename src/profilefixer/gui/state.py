"""
Application state shared by the panels.

Holds the profile being worked on, the result of its last repair pass and
the settings mirrored from the preferences file.
"""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

LOG_LIMIT = 1000


@dataclass
class AppState:
    """What the UI currently shows."""
    
    current_file: Optional[Path] = None
    manager: Optional[Any] = None       # ProfileManager
    last_result: Optional[Any] = None   # RepairResult
    
    remove_duplicates: bool = False
    create_backup: bool = True
    last_directory: str = ""
    
    # oldest entries drop off past LOG_LIMIT
    logs: deque = field(default_factory=lambda: deque(maxlen=LOG_LIMIT))
    
    @property
    def can_save(self) -> bool:
        """A recognized profile has been repaired and can be written."""
        return self.manager is not None and self.manager.can_save
    
    def set_profile(self, file_path: Path, manager: Any):
        self.current_file = file_path
        self.manager = manager
        self.last_result = None
        self.last_directory = str(file_path.parent)
    
    def set_result(self, result: Any):
        self.last_result = result
    
    def log(self, message: str, level: str = "INFO"):
        self.logs.append({
            "time": datetime.now().strftime("%H:%M:%S"),
            "level": level,
            "message": message,
        })
    
    def clear(self):
        """Forget the loaded profile; settings and log are kept."""
        self.current_file = None
        self.manager = None
        self.last_result = None


STATE = AppState()
