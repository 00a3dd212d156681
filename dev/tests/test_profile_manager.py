"""
ProfileFixer Suite - file round-trip tests

ProfileManager load / repair / save, backups, preferences and the command
line front-end. Uses temporary directories only.

Can be run standalone: python test_profile_manager.py
Or via main runner: python tests.py
"""

import io
import json
import tempfile
from contextlib import redirect_stdout
from pathlib import Path

from profile_fixtures import make_profile, pmc, inventory_items, SUITE_DIR, STASH_ID

from profilefixer.core.constants import BITCOIN_FARM_RECIPE
from profilefixer.core.preferences import FixerPreferences, PreferencesManager
from profilefixer.save_editor.profile_manager import ProfileManager, dump_profile


def _write_profile(directory: Path, profile=None, name="5fe49a0e2694b0755a504875.json") -> Path:
    path = directory / name
    path.write_text(json.dumps(profile or make_profile(), indent=2), encoding="utf-8")
    return path


def _broken():
    profile = make_profile()
    pmc(profile)["Hideout"]["Production"][BITCOIN_FARM_RECIPE]["ProductionTime"] = 99999
    return profile


# ═══════════════════════════════════════════════════════════════════════════════
# PROFILE MANAGER
# ═══════════════════════════════════════════════════════════════════════════════

def test_load_missing_file_fails():
    with tempfile.TemporaryDirectory() as tmp:
        mgr = ProfileManager(Path(tmp) / "missing.json")
        assert not mgr.load()
        assert not mgr.is_loaded
        assert not mgr.can_save


def test_repair_requires_load():
    mgr = ProfileManager("never_loaded.json")
    try:
        mgr.repair()
    except RuntimeError:
        pass
    else:
        raise AssertionError("repair() without load() should raise")


def test_save_overwrites_with_backup_and_tabs():
    with tempfile.TemporaryDirectory() as tmp:
        path = _write_profile(Path(tmp), _broken())
        original = path.read_text(encoding="utf-8")

        mgr = ProfileManager(path)
        assert mgr.load()
        result = mgr.repair()
        assert result.modified

        saved = mgr.save()
        assert saved.success
        assert Path(saved.path) == path
        assert saved.backup_path is not None
        assert Path(saved.backup_path).read_text(encoding="utf-8") == original

        text = path.read_text(encoding="utf-8")
        assert text == dump_profile(result.profile)
        assert '\n\t"info": {' in text
        data = json.loads(text)
        assert pmc(data)["Hideout"]["Production"][BITCOIN_FARM_RECIPE]["ProductionTime"] == 145000
        assert list(data) == list(make_profile())


def test_save_into_directory_keeps_filename_and_skips_backup():
    with tempfile.TemporaryDirectory() as tmp:
        tmp = Path(tmp)
        path = _write_profile(tmp, _broken())
        out_dir = tmp / "fixed"
        out_dir.mkdir()

        mgr = ProfileManager(path)
        mgr.load()
        mgr.repair()
        saved = mgr.save(str(out_dir))

        assert saved.success
        assert Path(saved.path) == out_dir / path.name
        assert saved.backup_path is None
        assert list(tmp.glob("*.bak")) == []


def test_save_without_backup():
    with tempfile.TemporaryDirectory() as tmp:
        path = _write_profile(Path(tmp), _broken())
        mgr = ProfileManager(path)
        mgr.load()
        mgr.repair()
        assert mgr.save(backup=False).success
        assert list(Path(tmp).glob("*.bak")) == []


def test_repair_reparses_original_text():
    with tempfile.TemporaryDirectory() as tmp:
        profile = make_profile()
        inventory_items(profile).append({"_id": "x1", "parentId": STASH_ID, "slotId": "hideout"})
        inventory_items(profile).append({"_id": "x1", "parentId": STASH_ID, "slotId": "hideout"})
        path = _write_profile(Path(tmp), profile)

        mgr = ProfileManager(path)
        mgr.load()
        assert mgr.repair(remove_duplicates=True).modified
        # toggling back starts from the file as loaded, duplicates included
        kept = mgr.repair(remove_duplicates=False)
        assert kept.modified
        assert not kept.changed
        assert kept.log.has_failures
        assert [i["_id"] for i in inventory_items(kept.profile)].count("x1") == 2


def test_not_a_profile_cannot_be_saved():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "settings.json"
        path.write_text('{"hello": "world"}', encoding="utf-8")
        mgr = ProfileManager(path)
        assert mgr.load()
        assert mgr.repair().skipped
        assert not mgr.can_save
        assert not mgr.save().success
        assert path.read_text(encoding="utf-8") == '{"hello": "world"}'


def test_format_report_lists_entries():
    with tempfile.TemporaryDirectory() as tmp:
        mgr = ProfileManager(_write_profile(Path(tmp), _broken()))
        mgr.load()
        mgr.repair()
        report = mgr.format_report()
        assert "Bitcoin Farm production time changed from 99999 to 145000" in report
        assert "Version: 3.10.5" in report


# ═══════════════════════════════════════════════════════════════════════════════
# PREFERENCES
# ═══════════════════════════════════════════════════════════════════════════════

def test_preferences_default_when_missing():
    with tempfile.TemporaryDirectory() as tmp:
        prefs = PreferencesManager(str(Path(tmp) / "prefs.json"))
        result = prefs.load()
        assert result.success
        assert prefs.prefs.remove_duplicates is False
        assert prefs.prefs.create_backup is True


def test_preferences_round_trip():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "prefs.json"
        prefs = PreferencesManager(str(path))
        prefs.prefs.remove_duplicates = True
        prefs.prefs.last_directory = "/profiles"
        assert prefs.save().success

        reloaded = PreferencesManager(str(path))
        assert reloaded.load().success
        assert reloaded.prefs.remove_duplicates is True
        assert reloaded.prefs.last_directory == "/profiles"


def test_preferences_tolerate_unknown_keys_and_bad_files():
    prefs = FixerPreferences.from_dict({"remove_duplicates": True, "theme": "dark"})
    assert prefs.remove_duplicates is True
    assert not hasattr(prefs, "theme")

    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "prefs.json"
        path.write_text("{broken", encoding="utf-8")
        manager = PreferencesManager(str(path))
        assert not manager.load().success
        assert manager.prefs.remove_duplicates is False

        path.write_text("[1, 2]", encoding="utf-8")
        assert not manager.load().success


# ═══════════════════════════════════════════════════════════════════════════════
# COMMAND LINE
# ═══════════════════════════════════════════════════════════════════════════════

def _cli():
    import importlib.util
    spec = importlib.util.spec_from_file_location("fix_profile", SUITE_DIR / "fix_profile.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _run_cli(argv):
    cli = _cli()
    args = cli.build_parser().parse_args(argv)
    out = io.StringIO()
    with redirect_stdout(out):
        {"check": cli.cmd_check, "fix": cli.cmd_fix, "rules": cli.cmd_rules}[args.command](args)
    return out.getvalue()


def test_cli_check_does_not_write():
    with tempfile.TemporaryDirectory() as tmp:
        path = _write_profile(Path(tmp), _broken())
        before = path.read_text(encoding="utf-8")
        prefs = str(Path(tmp) / "prefs.json")

        output = _run_cli(["--format", "json", "--prefs", prefs, "check", str(path)])

        data = json.loads(output)
        assert data["modified"] is True
        assert data["log"][0]["success"] is True
        assert path.read_text(encoding="utf-8") == before


def test_cli_fix_writes_output_and_remembers_preference():
    with tempfile.TemporaryDirectory() as tmp:
        tmp = Path(tmp)
        path = _write_profile(tmp, _broken())
        out_dir = tmp / "out"
        out_dir.mkdir()
        prefs = tmp / "prefs.json"

        output = _run_cli([
            "--format", "json", "--prefs", str(prefs),
            "fix", str(path), "--output", str(out_dir), "--remove-duplicates", "--remember",
        ])

        data = json.loads(output)
        assert Path(data["saved_to"]) == out_dir / path.name
        assert (out_dir / path.name).exists()
        assert json.loads(prefs.read_text(encoding="utf-8"))["remove_duplicates"] is True


def test_cli_fix_leaves_file_alone_when_only_failures_found():
    with tempfile.TemporaryDirectory() as tmp:
        tmp = Path(tmp)
        profile = make_profile()
        inventory_items(profile).append({"_id": "x1", "parentId": STASH_ID, "slotId": "hideout"})
        inventory_items(profile).append({"_id": "x1", "parentId": STASH_ID, "slotId": "hideout"})
        path = _write_profile(tmp, profile)
        before = path.read_text(encoding="utf-8")

        output = _run_cli([
            "--format", "json", "--prefs", str(tmp / "prefs.json"),
            "fix", str(path), "--keep-duplicates",
        ])

        data = json.loads(output)
        assert data["modified"] is True
        assert data["changed"] is False
        assert "saved_to" not in data
        assert path.read_text(encoding="utf-8") == before
        assert list(tmp.glob("*.bak")) == []


def test_cli_duplicate_flags_default_to_preferences():
    cli = _cli()
    parser = cli.build_parser()
    assert parser.parse_args(["check", "x.json"]).remove_duplicates is None
    assert parser.parse_args(["check", "x.json", "--remove-duplicates"]).remove_duplicates is True
    assert parser.parse_args(["check", "x.json", "--keep-duplicates"]).remove_duplicates is False


def test_cli_rules_lists_version_steps():
    steps = json.loads(_run_cli(["--format", "json", "rules", "--version", "3.11.1"]))
    names = [s["name"] for s in steps]
    assert "stash_containers" in names
    assert "offer_user_rating" not in names


if __name__ == "__main__":
    import sys
    from tests import run_module
    raise SystemExit(0 if run_module(sys.modules[__name__]) else 1)
