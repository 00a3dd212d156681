"""
Log Panel - application log inside the GUI.

GuiLogHandler forwards records from the standard logging tree into
STATE.logs; the panel shows them.
"""

import logging
from pathlib import Path

import dearpygui.dearpygui as dpg

from ..state import STATE


class GuiLogHandler(logging.Handler):
    """Forward log records to the application state."""
    
    def emit(self, record):
        try:
            STATE.log(self.format(record), record.levelname)
        except Exception:
            self.handleError(record)
        LogPanel.refresh()


class LogPanel:
    """Log / diagnostics panel."""
    
    TAG = "log_panel"
    LOG_OUTPUT_TAG = "log_output"
    EXPORT_FILENAME = "profilefixer_log.txt"
    
    def __init__(self, width: int = 640, height: int = 200, pos: tuple = (10, 600)):
        self.width = width
        self.height = height
        self.pos = pos
        self._create_panel()
        self.refresh()
    
    def _create_panel(self):
        """Create the log panel."""
        with dpg.window(
            label="Log",
            tag=self.TAG,
            width=self.width,
            height=self.height,
            pos=self.pos,
            show=False,
            on_close=self._on_close
        ):
            with dpg.group(horizontal=True):
                dpg.add_button(label="Clear", width=60, callback=self._on_clear)
                dpg.add_button(label="Export", width=60, callback=self._on_export)
            
            dpg.add_separator()
            
            dpg.add_input_text(
                tag=self.LOG_OUTPUT_TAG,
                multiline=True,
                readonly=True,
                width=-1,
                height=-1,
                default_value=""
            )
    
    @staticmethod
    def format_logs() -> str:
        return "\n".join(f"{e['time']} [{e['level']}] {e['message']}" for e in STATE.logs)
    
    @classmethod
    def refresh(cls):
        if dpg.does_item_exist(cls.LOG_OUTPUT_TAG):
            dpg.set_value(cls.LOG_OUTPUT_TAG, cls.format_logs())
    
    def _on_clear(self):
        STATE.logs.clear()
        self.refresh()
    
    def _on_export(self):
        """Export log to file."""
        log_file = Path(STATE.last_directory or ".") / self.EXPORT_FILENAME
        try:
            with open(log_file, 'w', encoding='utf-8') as f:
                f.write(self.format_logs())
        except OSError as e:
            STATE.log(f"Log export failed: {e}", "ERROR")
        else:
            STATE.log(f"Log exported to {log_file}")
        self.refresh()
    
    def _on_close(self):
        dpg.configure_item(self.TAG, show=False)
    
    @classmethod
    def show(cls):
        if dpg.does_item_exist(cls.TAG):
            dpg.configure_item(cls.TAG, show=True)
            dpg.focus_item(cls.TAG)
