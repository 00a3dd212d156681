"""
ProfileFixer Suite - SPT profile repair toolkit.

Packages:
- core: repair pipeline, fixers, change log, preferences
- save_editor: profile file load / repair / save round-trip
- gui: Dear PyGui front-end
"""

__version__ = "1.0.0"
