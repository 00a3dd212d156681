"""
Colours and the Dear PyGui theme of the fixer window.

Report lines are coloured by entry kind: green for fixes, red for problems
left in place, blue for notes.
"""

import dearpygui.dearpygui as dpg


class Colors:
    """RGBA palette (0-255)."""
    WINDOW = (24, 26, 30, 255)
    CHILD = (32, 35, 41, 255)
    HEADER = (38, 44, 52, 255)
    HEADER_ACTIVE = (52, 64, 78, 255)
    FRAME = (44, 48, 56, 255)
    FRAME_HOVER = (54, 60, 70, 255)
    BUTTON = (58, 84, 72, 255)
    BUTTON_HOVER = (72, 108, 92, 255)
    BUTTON_DISABLED = (44, 46, 50, 255)
    TEXT_BRIGHT = (224, 226, 230, 255)
    TEXT_DIM = (136, 140, 148, 255)
    ACCENT_GREEN = (110, 200, 130, 255)
    ACCENT_BLUE = (110, 160, 225, 255)
    ACCENT_YELLOW = (225, 200, 110, 255)
    ACCENT_RED = (225, 105, 105, 255)


ENTRY_COLORS = {
    "fixed": Colors.ACCENT_GREEN,
    "failed": Colors.ACCENT_RED,
    "info": Colors.ACCENT_BLUE,
}


def entry_color(entry) -> tuple:
    """Report line colour for a change log entry."""
    return ENTRY_COLORS.get(entry.kind.value, Colors.TEXT_BRIGHT)


def setup_theme():
    """Build and bind the global theme."""
    colors = [
        (dpg.mvThemeCol_WindowBg, Colors.WINDOW),
        (dpg.mvThemeCol_PopupBg, Colors.WINDOW),
        (dpg.mvThemeCol_ChildBg, Colors.CHILD),
        (dpg.mvThemeCol_MenuBarBg, Colors.HEADER),
        (dpg.mvThemeCol_TitleBg, Colors.HEADER),
        (dpg.mvThemeCol_TitleBgActive, Colors.HEADER_ACTIVE),
        (dpg.mvThemeCol_FrameBg, Colors.FRAME),
        (dpg.mvThemeCol_FrameBgHovered, Colors.FRAME_HOVER),
        (dpg.mvThemeCol_CheckMark, Colors.ACCENT_GREEN),
        (dpg.mvThemeCol_Button, Colors.BUTTON),
        (dpg.mvThemeCol_ButtonHovered, Colors.BUTTON_HOVER),
        (dpg.mvThemeCol_ButtonActive, Colors.BUTTON_HOVER),
        (dpg.mvThemeCol_Text, Colors.TEXT_BRIGHT),
        (dpg.mvThemeCol_TextDisabled, Colors.TEXT_DIM),
    ]
    styles = [
        (dpg.mvStyleVar_WindowRounding, 6),
        (dpg.mvStyleVar_ChildRounding, 4),
        (dpg.mvStyleVar_FrameRounding, 4),
    ]
    
    with dpg.theme() as app_theme:
        with dpg.theme_component(dpg.mvAll):
            for target, value in colors:
                dpg.add_theme_color(target, value)
            for target, value in styles:
                dpg.add_theme_style(target, value)
            dpg.add_theme_style(dpg.mvStyleVar_FramePadding, 8, 5)
            dpg.add_theme_style(dpg.mvStyleVar_ItemSpacing, 8, 6)
        
        # Save buttons stay greyed out until a profile is repaired
        with dpg.theme_component(dpg.mvButton, enabled_state=False):
            for target in (dpg.mvThemeCol_Button, dpg.mvThemeCol_ButtonHovered, dpg.mvThemeCol_ButtonActive):
                dpg.add_theme_color(target, Colors.BUTTON_DISABLED)
            dpg.add_theme_color(dpg.mvThemeCol_Text, Colors.TEXT_DIM)
    
    dpg.bind_theme(app_theme)
    return app_theme
