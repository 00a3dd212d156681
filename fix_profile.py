#!/usr/bin/env python3
"""fix_profile.py - command line front-end for ProfileFixer Suite.

Checks and repairs SPT profile files.

Usage:
    python fix_profile.py check <profile.json>
    python fix_profile.py fix <profile.json> [--output <dir-or-file>] [--remove-duplicates]
    python fix_profile.py rules [--version 3.10.5]

Output formats (append to any command):
    --format table    (default, human-readable)
    --format json     (machine-readable)

The duplicate-removal and backup defaults come from ~/.profilefixer.json and
can be overridden per run.
"""

import sys
import json
import logging
import argparse
from pathlib import Path

# Add ProfileFixer src to path
_src_dir = Path(__file__).parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

from profilefixer.core.preferences import PreferencesManager
from profilefixer.core.repair_pipeline import ProfileRepairPipeline
from profilefixer.save_editor.profile_manager import ProfileManager


def load_profile(path: str) -> ProfileManager:
    """Load a profile file. Exits on failure."""
    mgr = ProfileManager(path)
    if not mgr.load():
        print(f"ERROR: Failed to load {path}", file=sys.stderr)
        sys.exit(1)
    return mgr


def load_preferences(args) -> PreferencesManager:
    prefs = PreferencesManager(args.prefs)
    result = prefs.load()
    if not result.success:
        print(f"WARNING: {result.message} - using defaults", file=sys.stderr)
    return prefs


def resolve_remove_duplicates(args, prefs: PreferencesManager) -> bool:
    if args.remove_duplicates is None:
        return prefs.prefs.remove_duplicates
    return args.remove_duplicates


def format_result_json(mgr: ProfileManager, saved_to: str = None) -> str:
    """Format a repair result as JSON."""
    result = mgr.result
    data = {
        "file": str(mgr.filepath),
        "version": result.version,
        "skipped": result.skipped,
        "modified": result.modified,
        "changed": result.changed,
        "log": result.log.to_list(),
    }
    if saved_to:
        data["saved_to"] = saved_to
    return json.dumps(data, indent=2)


def cmd_check(args):
    """Report what would be fixed, without writing anything."""
    prefs = load_preferences(args)
    mgr = load_profile(args.file)
    mgr.repair(remove_duplicates=resolve_remove_duplicates(args, prefs))

    if args.format == "json":
        print(format_result_json(mgr))
    else:
        print(mgr.format_report())


def cmd_fix(args):
    """Repair a profile and write it."""
    prefs = load_preferences(args)
    remove_duplicates = resolve_remove_duplicates(args, prefs)
    mgr = load_profile(args.file)
    result = mgr.repair(remove_duplicates=remove_duplicates)

    saved_to = None
    if result.skipped:
        print(f"Nothing to do for {args.file}", file=sys.stderr)
    elif result.changed or args.output:
        backup = prefs.prefs.create_backup and not args.no_backup
        save_result = mgr.save(args.output or prefs.prefs.output_dir or None, backup=backup)
        if not save_result.success:
            print(f"ERROR: {save_result.message}", file=sys.stderr)
            sys.exit(1)
        saved_to = save_result.path
        if save_result.backup_path and args.format != "json":
            print(f"Backup saved to {save_result.backup_path}")

    if args.remember:
        prefs.prefs.remove_duplicates = remove_duplicates
        prefs.prefs.last_directory = str(Path(args.file).resolve().parent)
        prefs.save()

    if args.format == "json":
        print(format_result_json(mgr, saved_to))
    else:
        print(mgr.format_report())
        if saved_to:
            print(f"Saved to {saved_to}")


def cmd_rules(args):
    """List the repair steps for a profile version."""
    steps = ProfileRepairPipeline().steps_for(args.version)

    if args.format == "json":
        print(json.dumps([{"name": s.name, "description": s.description} for s in steps], indent=2))
        return

    label = args.version or "(no version)"
    print(f"Repair steps for {label}")
    print("─" * 50)
    for i, step in enumerate(steps, 1):
        print(f"  {i:>2}. {step.name:<24} {step.description}")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="fix_profile",
        description="Check and repair SPT profile files.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--format", choices=["table", "json"],
                        default="table", help="Output format (default: table)")
    parser.add_argument("--prefs", help="Preferences file (default: ~/.profilefixer.json)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command", help="Command to run")

    def add_duplicate_flags(p):
        group = p.add_mutually_exclusive_group()
        group.add_argument("--remove-duplicates", dest="remove_duplicates",
                           action="store_true", default=None,
                           help="Remove inventory items with duplicated ids")
        group.add_argument("--keep-duplicates", dest="remove_duplicates",
                           action="store_false",
                           help="Only report duplicated items")
        p.set_defaults(remove_duplicates=None)

    # check
    p = sub.add_parser("check", help="Report problems without writing")
    p.add_argument("file", help="Path to profile .json")
    add_duplicate_flags(p)

    # fix
    p = sub.add_parser("fix", help="Repair and write the profile")
    p.add_argument("file", help="Path to profile .json")
    p.add_argument("--output", "-o", help="Output directory or file (default: overwrite)")
    p.add_argument("--no-backup", action="store_true", help="Do not back up the original")
    p.add_argument("--remember", action="store_true",
                   help="Store the duplicate setting in the preferences file")
    add_duplicate_flags(p)

    # rules
    p = sub.add_parser("rules", help="List repair steps")
    p.add_argument("--version", default="", help="Declared profile version, e.g. 3.10.5")

    return parser


def main():
    parser = build_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        sys.exit(0)

    commands = {
        "check": cmd_check,
        "fix": cmd_fix,
        "rules": cmd_rules,
    }

    cmd_func = commands.get(args.command)
    if cmd_func:
        cmd_func(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
