#!/usr/bin/env python3
"""
ProfileFixer Suite - SPT Profile Repair

Desktop front-end: open a profile, review the changes, save the fixed file.

Usage:
    python launch.py [--prefs PATH]
"""

import sys
import logging
import argparse
from pathlib import Path

# Setup paths
root_dir = Path(__file__).parent
src_dir = root_dir / "src"
if str(src_dir) not in sys.path:
    sys.path.insert(0, str(src_dir))

from profilefixer import __version__

APP_NAME = "ProfileFixer Suite"


def show_splash():
    """Show splash screen info."""
    banner = f"""
╔══════════════════════════════════════════════════════╗
║                                                      ║
║   {APP_NAME:<50} ║
║   SPT profile repair                                 ║
║   Version {__version__:<42} ║
║                                                      ║
╚══════════════════════════════════════════════════════╝
"""
    print(banner)


def check_dependencies():
    """Check that required dependencies are available."""
    missing = []
    
    try:
        import dearpygui  # noqa: F401
    except ImportError:
        missing.append("dearpygui")
    
    if missing:
        print("\n⚠️  Missing dependencies:")
        for dep in missing:
            print(f"   - {dep}")
        print("\n   Install with: pip install -e .\n")
        return False
    
    return True


def main():
    """Launch the application."""
    parser = argparse.ArgumentParser(prog="launch", description=APP_NAME)
    parser.add_argument("--prefs", help="Preferences file (default: ~/.profilefixer.json)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()
    
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    
    show_splash()
    
    if not check_dependencies():
        return 1
    
    from profilefixer.main_app import MainApp
    
    print("Starting application...")
    app = MainApp(prefs_path=args.prefs)
    try:
        app.show()
        print("Application ready.\n")
        app.run()
    except Exception as e:
        print(f"\n❌ Error: {e}")
        import traceback
        traceback.print_exc()
        return 1
    finally:
        app.shutdown()
    
    print("\nApplication closed.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
