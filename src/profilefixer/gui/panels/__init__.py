"""GUI panels."""

from .profile_fixer_panel import ProfileFixerPanel
from .log_panel import LogPanel

__all__ = ["ProfileFixerPanel", "LogPanel"]
