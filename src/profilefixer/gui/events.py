"""
Event bus between the main frame and the panels.

Panels never call each other; they publish and subscribe by event name.
"""

import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)


class EventBus:
    """Process-wide pub/sub registry."""
    
    _handlers: Dict[str, List[Callable]] = defaultdict(list)
    
    @classmethod
    def subscribe(cls, event: str, handler: Callable) -> Callable:
        """Register a handler; returns it so it can be kept for unsubscribe."""
        cls._handlers[event].append(handler)
        return handler
    
    @classmethod
    def unsubscribe(cls, event: str, handler: Callable):
        handlers = cls._handlers.get(event, [])
        if handler in handlers:
            handlers.remove(handler)
    
    @classmethod
    def publish(cls, event: str, data: Any = None) -> int:
        """
        Call every handler of an event with data.
        
        A failing handler is logged and skipped. Returns how many handlers
        ran without raising.
        """
        delivered = 0
        for handler in list(cls._handlers.get(event, [])):
            try:
                handler(data)
            except Exception:
                logger.exception(f"Handler for '{event}' failed")
                continue
            delivered += 1
        return delivered
    
    @classmethod
    def clear(cls):
        cls._handlers.clear()


class Events:
    """Event names."""
    PROFILE_LOADED = "profile.loaded"       # data: {"file_path": Path}
    PROFILE_CLEARED = "profile.cleared"
    PROFILE_REPAIRED = "profile.repaired"   # data: RepairResult
    PROFILE_SAVED = "profile.saved"         # data: ProfileOpResult
    PREFERENCE_CHANGED = "preference.changed"
    STATUS_UPDATE = "status.update"         # data: str
