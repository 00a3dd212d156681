"""
Profile Fixer Panel - Entry Point

Pick a profile, read the change report, save the fixed profile under its
original filename. Toggling "Remove duplicate items" re-runs the repair on
the file as it was loaded.
"""

import logging
from pathlib import Path

import dearpygui.dearpygui as dpg

from ...save_editor.profile_manager import ProfileManager
from ..events import EventBus, Events
from ..state import STATE
from ..theme import Colors, entry_color

logger = logging.getLogger(__name__)


class ProfileFixerPanel:
    """Load, repair and save one SPT profile."""
    
    TAG = "profile_fixer"
    OPEN_DIALOG_TAG = "profile_fixer_open_dialog"
    SAVE_DIALOG_TAG = "profile_fixer_save_dialog"
    DUPLICATES_TAG = "profile_fixer_remove_duplicates"
    BACKUP_TAG = "profile_fixer_backup"
    REPORT_TAG = "profile_fixer_report"
    SAVE_BUTTON_TAG = "profile_fixer_save"
    SAVE_AS_BUTTON_TAG = "profile_fixer_save_as"
    STATUS_TAG = "profile_fixer_status"
    
    def __init__(self, width: int = 640, height: int = 560, pos: tuple = (10, 30)):
        self.width = width
        self.height = height
        self.pos = pos
        self._create_file_dialogs()
        self._create_panel()
        self._subscribe_events()
        self._update_buttons()
    
    def _create_file_dialogs(self):
        """Profile picker and output directory picker."""
        with dpg.file_dialog(
            directory_selector=False,
            show=False,
            callback=self._on_profile_selected,
            tag=self.OPEN_DIALOG_TAG,
            width=700,
            height=450,
            default_path=STATE.last_directory,
            modal=True
        ):
            dpg.add_file_extension(".json", color=Colors.ACCENT_BLUE)
            dpg.add_file_extension(".*")
        
        with dpg.file_dialog(
            directory_selector=True,
            show=False,
            callback=self._on_output_selected,
            tag=self.SAVE_DIALOG_TAG,
            width=700,
            height=450,
            default_path=STATE.last_directory,
            modal=True
        ):
            pass
    
    def _create_panel(self):
        """Create the fixer panel."""
        with dpg.window(
            label="Profile Fixer",
            tag=self.TAG,
            width=self.width,
            height=self.height,
            pos=self.pos,
            no_close=True
        ):
            dpg.add_text("Current: [None]", tag="profile_fixer_current", color=Colors.TEXT_BRIGHT)
            dpg.add_text("Version: -", tag="profile_fixer_version", color=Colors.TEXT_DIM)
            
            dpg.add_separator()
            
            with dpg.group(horizontal=True):
                dpg.add_button(
                    label="Load Profile",
                    width=150,
                    height=35,
                    callback=lambda: dpg.show_item(self.OPEN_DIALOG_TAG)
                )
                dpg.add_button(
                    label="Save Fixed Profile",
                    tag=self.SAVE_BUTTON_TAG,
                    width=170,
                    height=35,
                    callback=self._on_save
                )
                dpg.add_button(
                    label="Save To...",
                    tag=self.SAVE_AS_BUTTON_TAG,
                    width=110,
                    height=35,
                    callback=lambda: dpg.show_item(self.SAVE_DIALOG_TAG)
                )
            
            with dpg.group(horizontal=True):
                dpg.add_checkbox(
                    label="Remove duplicate items",
                    tag=self.DUPLICATES_TAG,
                    default_value=STATE.remove_duplicates,
                    callback=self._on_duplicates_toggled
                )
                dpg.add_checkbox(
                    label="Back up before overwriting",
                    tag=self.BACKUP_TAG,
                    default_value=STATE.create_backup,
                    callback=self._on_backup_toggled
                )
            
            dpg.add_separator()
            
            dpg.add_text("Changes", color=Colors.ACCENT_BLUE)
            with dpg.child_window(tag=self.REPORT_TAG, height=-30, border=True):
                dpg.add_text("Load a profile to see what will be fixed.", color=Colors.TEXT_DIM)
            
            dpg.add_text("", tag=self.STATUS_TAG, color=Colors.TEXT_DIM)
    
    def _subscribe_events(self):
        EventBus.subscribe(Events.PROFILE_REPAIRED, self._on_profile_repaired)
        EventBus.subscribe(Events.PROFILE_CLEARED, self._on_profile_cleared)
    
    # ─────────────────────────────────────────────────────────────
    # CALLBACKS
    # ─────────────────────────────────────────────────────────────
    
    def _on_profile_selected(self, sender, app_data):
        """Handle profile file selection."""
        self.load_profile(Path(app_data["file_path_name"]))
    
    def _on_output_selected(self, sender, app_data):
        """Save into the chosen directory under the original filename."""
        self.save_profile(app_data["file_path_name"])
    
    def _on_save(self):
        self.save_profile(None)
    
    def _on_duplicates_toggled(self, sender, value):
        STATE.remove_duplicates = bool(value)
        EventBus.publish(Events.PREFERENCE_CHANGED, {"remove_duplicates": STATE.remove_duplicates})
        if STATE.manager is not None:
            self.repair()
    
    def _on_backup_toggled(self, sender, value):
        STATE.create_backup = bool(value)
        EventBus.publish(Events.PREFERENCE_CHANGED, {"create_backup": STATE.create_backup})
    
    # ─────────────────────────────────────────────────────────────
    # ACTIONS
    # ─────────────────────────────────────────────────────────────
    
    def load_profile(self, file_path: Path):
        """Load a profile file and repair it straight away."""
        manager = ProfileManager(file_path)
        if not manager.load():
            logger.error(f"Could not read {file_path}")
            self._set_status(f"Could not read {file_path.name}", Colors.ACCENT_RED)
            return
        
        STATE.set_profile(file_path, manager)
        EventBus.publish(Events.PROFILE_LOADED, {"file_path": file_path})
        logger.info(f"Loaded {file_path.name}")
        self.repair()
    
    def repair(self):
        """Run one repair pass with the current duplicate setting."""
        result = STATE.manager.repair(remove_duplicates=STATE.remove_duplicates)
        STATE.set_result(result)
        EventBus.publish(Events.PROFILE_REPAIRED, result)
    
    def save_profile(self, output):
        """Write the fixed profile; output None overwrites the original."""
        if not STATE.can_save:
            return
        
        result = STATE.manager.save(output, backup=STATE.create_backup)
        if not result.success:
            logger.error(result.message)
            self._set_status(result.message, Colors.ACCENT_RED)
            return
        
        logger.info(f"Saved {result.path}")
        if result.backup_path:
            logger.info(f"Backup saved to {result.backup_path}")
        self._set_status(f"Saved to {result.path}", Colors.ACCENT_GREEN)
        EventBus.publish(Events.PROFILE_SAVED, result)
    
    # ─────────────────────────────────────────────────────────────
    # DISPLAY
    # ─────────────────────────────────────────────────────────────
    
    def _on_profile_repaired(self, result):
        """Render the change report."""
        dpg.set_value("profile_fixer_current", f"Current: {STATE.current_file.name}")
        dpg.set_value("profile_fixer_version", f"Version: {result.version or '-'}")
        
        dpg.delete_item(self.REPORT_TAG, children_only=True)
        for entry in result.log:
            dpg.add_text(
                f"{entry.icon()} {entry.message}",
                parent=self.REPORT_TAG,
                color=entry_color(entry),
                wrap=self.width - 60
            )
        
        color = Colors.ACCENT_YELLOW if result.log.has_failures else Colors.TEXT_DIM
        self._set_status(result.summary(), color)
        logger.info(f"{STATE.current_file.name}: {result.summary()}")
        self._update_buttons()
    
    def _on_profile_cleared(self, data=None):
        STATE.clear()
        dpg.delete_item(self.REPORT_TAG, children_only=True)
        dpg.set_value("profile_fixer_current", "Current: [None]")
        dpg.set_value("profile_fixer_version", "Version: -")
        self._set_status("")
        self._update_buttons()
    
    def _update_buttons(self):
        """Saving is only possible once a profile was repaired."""
        for tag in (self.SAVE_BUTTON_TAG, self.SAVE_AS_BUTTON_TAG):
            dpg.configure_item(tag, enabled=STATE.can_save)
    
    def _set_status(self, message: str, color: tuple = Colors.TEXT_DIM):
        dpg.set_value(self.STATUS_TAG, message)
        dpg.configure_item(self.STATUS_TAG, color=color)
        EventBus.publish(Events.STATUS_UPDATE, message)
