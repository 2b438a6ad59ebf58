"""CLI interface for Scanner Pro."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import ScannerProConfig
from .exceptions import ScannerProError
from .history import (
    filter_records,
    format_timestamp,
    group_by_date,
    recent_records,
    saved_records,
)
from .payload import FILTER_CHOICES, ScanPayloadType, action_target, classify
from .persistence import ScanStore
from .persistence.settings import SETTINGS_KEYS
from .scanner import ScanHandler


def _read_text(value: str) -> str:
    """Return the argument, or stdin when it is '-'."""
    if value == "-":
        return sys.stdin.read()
    return value


def _parse_bool(value: str) -> bool:
    value_lower = value.lower().strip()
    if value_lower in ('true', '1', 'yes', 'on'):
        return True
    if value_lower in ('false', '0', 'no', 'off'):
        return False
    raise argparse.ArgumentTypeError(f"Invalid boolean value '{value}'")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scanner-pro",
        description="Classify scanned QR/barcode payloads and manage scan history",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--db", type=Path, default=None, help="Path to the scan store database"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Show detailed progress"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    classify_parser = subparsers.add_parser("classify", help="Classify a payload without storing it")
    classify_parser.add_argument("text", help="Decoded payload text ('-' reads stdin)")
    classify_parser.add_argument("--json", action="store_true", help="Print the result as JSON")

    scan_parser = subparsers.add_parser("scan", help="Classify a payload and add it to history")
    scan_parser.add_argument("text", help="Decoded payload text ('-' reads stdin)")

    history_parser = subparsers.add_parser("history", help="Show scan history grouped by date")
    history_parser.add_argument(
        "--type", default="All", choices=FILTER_CHOICES, help="Only show this payload type"
    )
    history_parser.add_argument("--search", default="", help="Filter by text")
    history_parser.add_argument("--saved", action="store_true", help="Only show saved scans")
    history_parser.add_argument("--recent", action="store_true", help="Only show the most recent scans")

    save_parser = subparsers.add_parser("save", help="Toggle the saved flag of a scan")
    save_parser.add_argument("id", help="Scan ID")

    delete_parser = subparsers.add_parser("delete", help="Delete scans")
    delete_parser.add_argument("ids", nargs="+", help="Scan IDs")

    subparsers.add_parser("clear", help="Clear history, keeping saved scans")

    settings_parser = subparsers.add_parser("settings", help="Show or change settings")
    settings_parser.add_argument(
        "--set",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help=f"Change a setting ({', '.join(SETTINGS_KEYS.values())})",
    )

    return parser


def _print_history(store: ScanStore, args, recent_limit: int) -> None:
    records = store.load_history()
    if args.recent:
        records = recent_records(records, recent_limit)
    if args.saved:
        records = saved_records(records)
    records = filter_records(records, args.type, args.search)

    if not records:
        print("No results found" if args.search else "No scan history")
        return

    for group in group_by_date(records):
        print(group.label)
        for record in group.records:
            marker = "*" if record.is_saved else " "
            print(
                f" {marker} {format_timestamp(record.timestamp):>9}  "
                f"[{record.type.value}] {record.title} ({record.id})"
            )


def _apply_settings(store: ScanStore, assignments: List[str]) -> int:
    settings = store.load_settings()
    for assignment in assignments:
        key, sep, value = assignment.partition("=")
        if not sep:
            print(f"Error: Expected KEY=VALUE, got '{assignment}'", file=sys.stderr)
            return 1
        try:
            settings = settings.updated(key.strip(), _parse_bool(value))
        except (KeyError, argparse.ArgumentTypeError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    if assignments and not store.save_settings(settings):
        print("Error: Failed to save settings", file=sys.stderr)
        return 1

    for key, value in settings.to_dict().items():
        print(f"{key}: {'on' if value else 'off'}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    # Configure logging
    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(levelname)s: %(message)s',
            stream=sys.stderr,
        )
    else:
        logging.basicConfig(level=logging.WARNING)

    try:
        if args.command == "classify":
            payload = classify(_read_text(args.text))
            if args.json:
                print(json.dumps({
                    "type": payload.type.value,
                    "title": payload.title,
                    "subtitle": payload.subtitle,
                    "fields": payload.fields,
                }, indent=2, ensure_ascii=False))
            else:
                print(f"{payload.label}: {payload.title}")
                print(payload.subtitle)
                for key, value in payload.fields.items():
                    print(f"  {key}: {value}")
            return 0

        config = ScannerProConfig.load()
        store = ScanStore(db_path=args.db or config.storage.db_path)

        if args.command == "scan":
            handler = ScanHandler(store, cooldown_ms=config.scanner.cooldown_ms)
            record = handler.handle(_read_text(args.text))
            print(f"{record.id} [{record.type.value}] {record.title}")
            if handler.settings.auto_open_urls and record.type is ScanPayloadType.URL:
                print(f"Open: {action_target(record.payload, record.raw_data)}")
            return 0

        if args.command == "history":
            _print_history(store, args, config.scanner.recent_limit)
            return 0

        if args.command == "save":
            record = store.toggle_saved(args.id)
            if record is None:
                print(f"Error: Scan not found: {args.id}", file=sys.stderr)
                return 1
            print(f"{record.id} {'saved' if record.is_saved else 'unsaved'}")
            return 0

        if args.command == "delete":
            before = len(store.load_history())
            remaining = store.delete_records(args.ids)
            print(f"Deleted {before - len(remaining)} scans")
            return 0

        if args.command == "clear":
            kept = store.clear_history()
            print(f"History cleared, {len(kept)} saved scans kept")
            return 0

        if args.command == "settings":
            return _apply_settings(store, args.set)

        parser.error(f"Unknown command {args.command}")
        return 2

    except ScannerProError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
