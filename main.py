#!/usr/bin/env python3
"""
Edge / Safari Favorites Bar Sync

Copy the favorites bar from Microsoft Edge to Safari or back, keeping every
other bookmark of the destination browser as it is.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from barsync import (
    Browser,
    Colors,
    SAFARI_BOOKMARKS,
    RestoreFailed,
    SyncDirection,
    SyncEngine,
    SyncError,
    find_edge_bookmarks,
    is_browser_running,
    list_backups,
    restore_backup,
    setup_logging,
)
from barsync.backup import backup_timestamp
from barsync.errors import BackupError


def wait_for_browser_closed(browser: Browser):
    """Check if the browser is running and wait for user to close it."""
    while is_browser_running(browser):
        print(f"\n{Colors.RED}{browser.display_name} is currently running!{Colors.RESET}")
        print(f"Please quit {browser.display_name} and press Enter to continue...")
        input()
    print(f"{Colors.GREEN}{browser.display_name} is closed.{Colors.RESET}")


def print_header():
    """Print application header."""
    print()
    print("=" * 60)
    print(f"{Colors.BOLD}Edge / Safari Favorites Bar Sync{Colors.RESET}")
    print("=" * 60)


def print_menu():
    """Print main menu."""
    print()
    print("Choose an option:")
    print()
    print(f"  {Colors.CYAN}1{Colors.RESET}. Sync favorites bar Edge -> Safari")
    print(f"  {Colors.CYAN}2{Colors.RESET}. Sync favorites bar Safari -> Edge")
    print()
    print(f"  {Colors.YELLOW}3{Colors.RESET}. Restore Safari bookmarks from backup")
    print(f"  {Colors.YELLOW}4{Colors.RESET}. Restore Edge bookmarks from backup")
    print()
    print(f"  {Colors.GREY}0{Colors.RESET}. Exit")
    print()


def run_sync(engine: SyncEngine, direction: SyncDirection) -> bool:
    """Run one sync and report the outcome. Returns True on success."""
    print()
    print("-" * 60)
    print(f"Sync {direction.label}")
    print("-" * 60)

    try:
        result = engine.sync(direction)
    except RestoreFailed as e:
        print(f"\n{Colors.RED}{Colors.BOLD}Critical error:{Colors.RESET} {e}")
        print(f"Your previous bookmarks are saved in: {e.backup_path}")
        return False
    except SyncError as e:
        print(f"\n{Colors.RED}Error:{Colors.RESET} {e}")
        if e.backup_path:
            print(f"The original file was restored. Backup kept at: {e.backup_path}")
        return False
    except Exception as e:
        print(f"\n{Colors.RED}Unexpected error:{Colors.RESET} {e}")
        return False

    print()
    print(f"{Colors.GREEN}Sync completed!{Colors.RESET}")
    print(f"  Bookmarks: {result.bookmarks}")
    print(f"  Folders: {result.folders}")
    print(f"  Backup: {result.backup_path}")
    return True


def format_backup(path: Path) -> str:
    taken = backup_timestamp(path)
    if taken is None:
        return f"{path.name} (first backup)"
    return f"{path.name} ({taken:%Y-%m-%d %H:%M:%S})"


def restore_backup_menu(browser: Browser, store_path: Path) -> bool:
    """Let the user pick a backup of ``store_path`` and restore it."""
    print()
    print("-" * 60)
    print(f"Restore {browser.display_name} from Backup")
    print("-" * 60)

    backups: List[Path] = list_backups(store_path)
    if not backups:
        print(f"\n{Colors.YELLOW}No backups found.{Colors.RESET}")
        return False

    print(f"\nAvailable backups ({len(backups)}):")
    for i, backup in enumerate(backups, 1):
        marker = f"{Colors.GREEN}(latest){Colors.RESET}" if i == 1 else ""
        print(f"  {Colors.CYAN}{i}{Colors.RESET}. {format_backup(backup)} {marker}")

    print()
    choice = input("Select backup number (Enter for latest): ").strip()

    if choice == "":
        selected = backups[0]
    else:
        try:
            idx = int(choice) - 1
        except ValueError:
            print(f"{Colors.RED}Invalid input.{Colors.RESET}")
            return False
        if not 0 <= idx < len(backups):
            print(f"{Colors.RED}Invalid number.{Colors.RESET}")
            return False
        selected = backups[idx]

    wait_for_browser_closed(browser)

    print(f"\nRestoring from {selected.name}...")
    try:
        restore_backup(selected, store_path)
    except BackupError as e:
        print(f"\n{Colors.RED}Restore failed:{Colors.RESET} {e}")
        return False

    print(f"\n{Colors.GREEN}Restore completed!{Colors.RESET}")
    print(f"You can now open {browser.display_name}.")
    return True


def check_macos():
    """Check if running on macOS, exit if not."""
    if sys.platform != "darwin":
        print(f"\n{Colors.RED}Error: Default bookmark locations are only known on macOS.{Colors.RESET}")
        print(f"Current platform: {sys.platform}")
        print("Pass --edge and --safari to use explicit files.")
        sys.exit(1)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Sync the favorites bar between Microsoft Edge and Safari.",
    )
    parser.add_argument(
        "-d", "--direction",
        choices=[d.value for d in SyncDirection],
        help="sync direction; without it an interactive menu is shown",
    )
    parser.add_argument(
        "--restore",
        choices=[b.value for b in Browser],
        help=(
            "restore a browser's bookmarks from its latest backup; for Edge this "
            "may be Chromium's own Bookmarks.bak when no sync has run yet"
        ),
    )
    parser.add_argument("--edge", type=Path, help="Edge Bookmarks JSON file")
    parser.add_argument("--safari", type=Path, help="Safari Bookmarks.plist file")
    parser.add_argument(
        "--strict", action="store_true",
        help="fail when no favorites bar folder is found instead of syncing all root folders",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="show debug output")
    parser.add_argument("-q", "--quiet", action="store_true", help="disable log output")
    return parser.parse_args(argv)


def restore_latest(browser: Browser, store_path: Path) -> bool:
    """Restore ``store_path`` from its newest backup without prompting."""
    backups = list_backups(store_path)
    if not backups:
        print(f"{Colors.YELLOW}No backups found for {store_path}.{Colors.RESET}")
        return False
    if is_browser_running(browser):
        print(f"{Colors.RED}Please quit {browser.display_name} first.{Colors.RESET}")
        return False
    try:
        restore_backup(backups[0], store_path)
    except BackupError as e:
        print(f"{Colors.RED}Restore failed:{Colors.RESET} {e}")
        return False
    print(f"{Colors.GREEN}Restored {store_path.name} from {backups[0].name}.{Colors.RESET}")
    return True


def interactive(engine: SyncEngine):
    """Main menu loop."""
    print_header()
    print(f"  Edge:   {engine.paths[Browser.EDGE]}")
    print(f"  Safari: {engine.paths[Browser.SAFARI]}")

    while True:
        print_menu()

        choice = input("Select option: ").strip()

        if choice in ("1", "2"):
            direction = SyncDirection.EDGE_TO_SAFARI if choice == "1" else SyncDirection.SAFARI_TO_EDGE
            wait_for_browser_closed(direction.destination)
            if run_sync(engine, direction):
                sys.exit(0)
        elif choice == "3":
            if restore_backup_menu(Browser.SAFARI, engine.paths[Browser.SAFARI]):
                sys.exit(0)
        elif choice == "4":
            if restore_backup_menu(Browser.EDGE, engine.paths[Browser.EDGE]):
                sys.exit(0)
        elif choice == "0" or choice.lower() == "q":
            print("\nBye!")
            sys.exit(0)
        else:
            print(f"\n{Colors.RED}Invalid option.{Colors.RESET}")


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(verbose=args.verbose, silent=args.quiet)

    if args.edge is None or args.safari is None:
        check_macos()
    edge_path = args.edge or find_edge_bookmarks()
    safari_path = args.safari or SAFARI_BOOKMARKS

    engine = SyncEngine(edge_path, safari_path, strict_bar_match=args.strict)

    if args.restore:
        browser = Browser(args.restore)
        sys.exit(0 if restore_latest(browser, engine.paths[browser]) else 1)

    if args.direction:
        sys.exit(0 if run_sync(engine, SyncDirection(args.direction)) else 1)

    interactive(engine)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\n\nBye!")
        sys.exit(0)
