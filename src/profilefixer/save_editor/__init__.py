# Profile file round-trip for the repair pipeline

from .profile_manager import ProfileManager, ProfileOpResult, dump_profile

__all__ = [
    'ProfileManager', 'ProfileOpResult', 'dump_profile'
]
