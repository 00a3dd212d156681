"""
ProfileFixer Suite - GUI state and event bus tests

Covers the parts of the GUI that do not need a window.

Can be run standalone: python test_gui_state.py
Or via main runner: python tests.py
"""

import json
import tempfile
from pathlib import Path

from profile_fixtures import make_profile

from profilefixer.gui.events import EventBus, Events
from profilefixer.gui.state import AppState
from profilefixer.save_editor.profile_manager import ProfileManager


def test_event_bus_publish_and_unsubscribe():
    EventBus.clear()
    received = []
    handler = received.append

    EventBus.subscribe(Events.PROFILE_REPAIRED, handler)
    EventBus.publish(Events.PROFILE_REPAIRED, "first")
    EventBus.unsubscribe(Events.PROFILE_REPAIRED, handler)
    EventBus.publish(Events.PROFILE_REPAIRED, "second")

    assert received == ["first"]
    EventBus.clear()


def test_event_bus_isolates_failing_subscribers():
    EventBus.clear()
    received = []

    def broken(data):
        raise RuntimeError("panel went away")

    EventBus.subscribe(Events.STATUS_UPDATE, broken)
    EventBus.subscribe(Events.STATUS_UPDATE, received.append)
    EventBus.publish(Events.STATUS_UPDATE, "ok")

    assert received == ["ok"]
    EventBus.clear()


def test_state_save_enabled_only_after_repair():
    state = AppState()
    assert not state.can_save

    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "profile.json"
        path.write_text(json.dumps(make_profile()), encoding="utf-8")
        mgr = ProfileManager(path)
        mgr.load()

        state.set_profile(path, mgr)
        assert state.last_directory == tmp
        assert not state.can_save

        state.set_result(mgr.repair())
        assert state.can_save

        state.clear()
        assert state.current_file is None
        assert not state.can_save


def test_state_log_is_capped():
    state = AppState()
    for n in range(1100):
        state.log(f"message {n}")
    assert len(state.logs) == 1000
    assert state.logs[-1]["message"] == "message 1099"
    assert state.logs[0]["level"] == "INFO"


if __name__ == "__main__":
    import sys
    from tests import run_module
    raise SystemExit(0 if run_module(sys.modules[__name__]) else 1)
