"""
ProfileFixer Main Application Frame

DearPyGUI window setup, menu bar, preferences and panel initialization.
"""

import logging

import dearpygui.dearpygui as dpg

from profilefixer import __version__
from profilefixer.core.preferences import PreferencesManager
from profilefixer.gui.events import EventBus, Events
from profilefixer.gui.panels import ProfileFixerPanel, LogPanel
from profilefixer.gui.panels.log_panel import GuiLogHandler
from profilefixer.gui.state import STATE
from profilefixer.gui.theme import Colors, setup_theme

logger = logging.getLogger(__name__)


class MainApp:
    """Main application frame and window manager."""
    
    ABOUT_TAG = "about_window"
    
    def __init__(self, width: int = 680, height: int = 860, prefs_path: str = None):
        self.width = width
        self.height = height
        self.panels = {}
        self.prefs = PreferencesManager(prefs_path)
        self._load_preferences()
        
        # Setup DearPyGUI
        dpg.create_context()
        self._attach_log_handler()
        setup_theme()
        
        dpg.create_viewport(
            title=f"ProfileFixer Suite {__version__} - SPT Profile Repair",
            width=width,
            height=height,
        )
        
        self._create_menu_bar()
        self._init_panels()
        
        EventBus.subscribe(Events.PREFERENCE_CHANGED, self._on_preferences_changed)
        EventBus.subscribe(Events.PROFILE_LOADED, self._on_preferences_changed)
    
    # ─────────────────────────────────────────────────────────────
    # PREFERENCES
    # ─────────────────────────────────────────────────────────────
    
    def _load_preferences(self):
        result = self.prefs.load()
        if not result.success:
            logger.warning(f"{result.message} - using defaults")
        prefs = self.prefs.prefs
        STATE.remove_duplicates = prefs.remove_duplicates
        STATE.create_backup = prefs.create_backup
        STATE.last_directory = prefs.last_directory
    
    def _on_preferences_changed(self, data=None):
        """Persist the UI settings."""
        prefs = self.prefs.prefs
        prefs.remove_duplicates = STATE.remove_duplicates
        prefs.create_backup = STATE.create_backup
        prefs.last_directory = STATE.last_directory
        result = self.prefs.save()
        if not result.success:
            logger.warning(result.message)
    
    def _attach_log_handler(self):
        handler = GuiLogHandler(level=logging.INFO)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logging.getLogger("profilefixer").addHandler(handler)
        self._log_handler = handler
    
    # ─────────────────────────────────────────────────────────────
    # WINDOW
    # ─────────────────────────────────────────────────────────────
    
    def _create_menu_bar(self):
        """Create the main menu bar."""
        with dpg.viewport_menu_bar():
            with dpg.menu(label="File"):
                dpg.add_menu_item(
                    label="Open Profile...",
                    callback=lambda: dpg.show_item(ProfileFixerPanel.OPEN_DIALOG_TAG)
                )
                dpg.add_menu_item(
                    label="Save Fixed Profile",
                    callback=lambda: self.panels["profile_fixer"].save_profile(None)
                )
                dpg.add_menu_item(
                    label="Close Profile",
                    callback=lambda: EventBus.publish(Events.PROFILE_CLEARED)
                )
                dpg.add_separator()
                dpg.add_menu_item(label="Exit", callback=lambda: dpg.stop_dearpygui())
            
            with dpg.menu(label="View"):
                dpg.add_menu_item(label="Log", callback=lambda: self._show_panel("log"))
            
            with dpg.menu(label="Help"):
                dpg.add_menu_item(label="About", callback=self._show_about)
    
    def _show_panel(self, panel_name: str):
        """Show a panel by name."""
        panel = self.panels.get(panel_name)
        if panel and dpg.does_item_exist(panel.TAG):
            dpg.configure_item(panel.TAG, show=True)
            dpg.focus_item(panel.TAG)
    
    def _show_about(self):
        """Show about dialog."""
        if dpg.does_item_exist(self.ABOUT_TAG):
            dpg.delete_item(self.ABOUT_TAG)
        with dpg.window(label="About ProfileFixer", tag=self.ABOUT_TAG, modal=True, width=350, height=180):
            dpg.add_text("ProfileFixer Suite", color=Colors.ACCENT_BLUE)
            dpg.add_text("Repairs SPT player profiles")
            dpg.add_separator()
            dpg.add_text(f"Version {__version__}")
            dpg.add_spacer(height=10)
            dpg.add_button(label="Close", callback=lambda: dpg.delete_item(self.ABOUT_TAG))
    
    def _init_panels(self):
        """Initialize all panels."""
        self.panels["profile_fixer"] = ProfileFixerPanel(
            width=self.width - 40,
            height=560,
            pos=(10, 30)
        )
        self.panels["log"] = LogPanel(
            width=self.width - 40,
            height=200,
            pos=(10, 600)
        )
    
    def show(self):
        """Show the main window."""
        dpg.setup_dearpygui()
        dpg.show_viewport()
    
    def run(self):
        """Run the main event loop."""
        while dpg.is_dearpygui_running():
            dpg.render_dearpygui_frame()
    
    def shutdown(self):
        """Shutdown the application."""
        logging.getLogger("profilefixer").removeHandler(self._log_handler)
        EventBus.clear()
        dpg.destroy_context()


def main():
    """Entry point."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    app = MainApp()
    try:
        app.show()
        app.run()
    finally:
        app.shutdown()


if __name__ == "__main__":
    main()
