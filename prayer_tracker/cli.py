#!/usr/bin/env python3
"""
Prayer Tracker CLI
──────────────────
Command-line front end for tracking a small group's prayer requests.

Usage:
    prayer-tracker add "Jane Doe" "Surgery on Friday" --category health
    prayer-tracker list --tab this-week --search surgery
    prayer-tracker edit <id> --status answered --notes "Went well"
    prayer-tracker delete <id>
    prayer-tracker export --format text -o ~/Desktop
    prayer-tracker import backup.json
    prayer-tracker stats
    prayer-tracker members
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .backends import JsonFileStore
from .config import Config, ConfigError
from .export import export_filename, format_long_date
from .schema import PrayerCategory, PrayerRequest, PrayerStatus, category_icon, status_icon
from .store import PrayerStorage
from .validation import ValidationError, validate_request_form
from .views import (
    ALL,
    TAB_EMPTY_MESSAGES,
    TAB_TITLES,
    RequestFilter,
    Tab,
    filter_requests,
    get_stats,
    group_requests,
)

logger = logging.getLogger(__name__)

CATEGORY_CHOICES = [c.value for c in PrayerCategory]
STATUS_CHOICES = [s.value for s in PrayerStatus]
TAB_CHOICES = [t.value for t in Tab] + [ALL]


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Formatting
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def format_request(request: PrayerRequest) -> str:
    """Render one request as a compact card."""
    star = " ⭐" if request.highlight else ""
    lines = [
        f"{category_icon(request.category)} {request.member_name} "
        f"[{status_icon(request.status)} {request.status.value}]{star}",
        f"   {request.details}",
    ]
    if request.notes:
        lines.append(f"   📝 {request.notes}")
    dates = f"   Added {format_long_date(request.date_added)}"
    if request.answer_date:
        dates += f" · Answered {format_long_date(request.answer_date)}"
    lines.append(dates)
    lines.append(f"   id: {request.id}")
    return "\n".join(lines)


def _result_count(n: int) -> str:
    return f"{n} result{'' if n == 1 else 's'}"


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Commands
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def cmd_add(storage: PrayerStorage, cfg: Config, args) -> int:
    member_name, details, notes = validate_request_form(args.member, args.details, args.notes)
    request = storage.add_request(
        member_name=member_name,
        details=details,
        category=PrayerCategory(args.category),
        notes=notes,
    )
    print(f"Prayer request for {member_name} has been added. ({request.id})")
    return 0


def cmd_list(storage: PrayerStorage, cfg: Config, args) -> int:
    flt = RequestFilter(search=args.search, category=args.category, member=args.member)
    filtered = filter_requests(storage.list_requests(), flt)
    grouped = group_requests(filtered, first_weekday=cfg.first_weekday)

    counts = grouped.counts()
    tabs = list(Tab) if args.tab == ALL else [Tab(args.tab)]
    print(_result_count(len(filtered)))
    print("  ".join(f"{TAB_TITLES[t]}: {counts[t]}" for t in Tab))
    for tab in tabs:
        requests = grouped.for_tab(tab)
        print(f"\n── {TAB_TITLES[tab]} ({counts[tab]}) ──")
        if not requests:
            print(f"   {TAB_EMPTY_MESSAGES[tab]}")
            continue
        for request in requests:
            print(format_request(request))
    return 0


def cmd_edit(storage: PrayerStorage, cfg: Config, args) -> int:
    request = storage.get_request(args.id)
    if request is None:
        print(f"No prayer request with id {args.id}", file=sys.stderr)
        return 1

    updates = {}
    if args.member is not None:
        updates["member_name"] = args.member.strip()
    if args.category is not None:
        updates["category"] = PrayerCategory(args.category)
    if args.details is not None:
        updates["details"] = args.details.strip()
    if args.notes is not None:
        updates["notes"] = args.notes.strip() or None
    if args.highlight is not None:
        updates["highlight"] = args.highlight

    if not updates.get("member_name", request.member_name) or not updates.get("details", request.details):
        raise ValidationError("Please provide both member name and prayer details.")

    if updates:
        storage.update_request(args.id, **updates)
    if args.status is not None:
        storage.set_status(args.id, PrayerStatus(args.status))

    print(f"Updated prayer request {args.id}")
    return 0


def cmd_delete(storage: PrayerStorage, cfg: Config, args) -> int:
    request = storage.get_request(args.id)
    if request is None:
        print(f"No prayer request with id {args.id}", file=sys.stderr)
        return 1

    if not args.yes:
        answer = input("Are you sure you want to delete this prayer request? [y/N] ")
        if answer.strip().lower() not in ("y", "yes"):
            print("Cancelled.")
            return 0

    storage.delete_request(args.id)
    print(f"Deleted prayer request for {request.member_name}")
    return 0


def cmd_export(storage: PrayerStorage, cfg: Config, args) -> int:
    content = storage.export_data() if args.format == "json" else storage.export_as_text()

    if not args.output:
        sys.stdout.write(content)
        if not content.endswith("\n"):
            sys.stdout.write("\n")
        return 0

    target = Path(args.output).expanduser()
    if target.is_dir():
        target = target / export_filename(args.format)
    try:
        target.write_text(content, encoding="utf-8")
    except OSError as e:
        logger.error(f"Export failed: {e}")
        print("Export Failed: There was an error exporting your data.", file=sys.stderr)
        return 1

    print(f"Prayer data exported as {args.format.upper()} to {target}")
    return 0


def cmd_import(storage: PrayerStorage, cfg: Config, args) -> int:
    try:
        if args.path == "-":
            text = sys.stdin.read()
        else:
            text = Path(args.path).expanduser().read_text(encoding="utf-8")
    except OSError as e:
        print(f"Import Failed: {e}", file=sys.stderr)
        return 1

    if not text.strip():
        print("Import Failed: No data provided.", file=sys.stderr)
        return 1

    result = storage.import_data(text)
    if not result.ok:
        print("Import Failed: Please check your data format and try again.", file=sys.stderr)
        print(f"  {result.error}", file=sys.stderr)
        return 1

    print("Prayer data has been imported successfully.")
    return 0


def cmd_stats(storage: PrayerStorage, cfg: Config, args) -> int:
    requests = storage.list_requests()
    stats = get_stats(requests, group_requests(requests, first_weekday=cfg.first_weekday))
    print(f"Total Requests:   {stats.total}")
    print(f"Actively Praying: {stats.praying}")
    print(f"Answered:         {stats.answered}")
    print(f"This Week:        {stats.this_week}")
    return 0


def cmd_members(storage: PrayerStorage, cfg: Config, args) -> int:
    members = storage.list_members()
    if not members:
        print("No members yet.")
    for member in members:
        print(member)
    return 0


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Entry point
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="prayer-tracker",
        description="Prayer Tracker: supporting your group through prayer",
    )
    ap.add_argument("--config", default=None, help="Path to config.yaml")
    ap.add_argument("--data", default=None, help="Storage file (overrides config data_path)")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("add", help="Add a prayer request")
    p.add_argument("member", help="Member name")
    p.add_argument("details", help="Prayer details")
    p.add_argument("--category", choices=CATEGORY_CHOICES, default="other")
    p.add_argument("--notes", default=None)
    p.set_defaults(func=cmd_add)

    p = sub.add_parser("list", help="List requests by tab")
    p.add_argument("--tab", choices=TAB_CHOICES, default=Tab.THIS_WEEK.value)
    p.add_argument("--search", default="")
    p.add_argument("--category", choices=CATEGORY_CHOICES + [ALL], default=ALL)
    p.add_argument("--member", default=ALL)
    p.set_defaults(func=cmd_list)

    p = sub.add_parser("edit", help="Edit a request")
    p.add_argument("id")
    p.add_argument("--member", default=None)
    p.add_argument("--category", choices=CATEGORY_CHOICES, default=None)
    p.add_argument("--details", default=None)
    p.add_argument("--notes", default=None)
    p.add_argument("--status", choices=STATUS_CHOICES, default=None)
    p.add_argument("--highlight", action=argparse.BooleanOptionalAction, default=None)
    p.set_defaults(func=cmd_edit)

    p = sub.add_parser("delete", help="Delete a request")
    p.add_argument("id")
    p.add_argument("-y", "--yes", action="store_true", help="Skip confirmation")
    p.set_defaults(func=cmd_delete)

    p = sub.add_parser("export", help="Export all data")
    p.add_argument("--format", choices=["json", "text"], default="json")
    p.add_argument("-o", "--output", default=None, help="File or directory (default: stdout)")
    p.set_defaults(func=cmd_export)

    p = sub.add_parser("import", help="Replace all data from an export")
    p.add_argument("path", help="JSON export file, or - for stdin")
    p.set_defaults(func=cmd_import)

    p = sub.add_parser("stats", help="Show request counts")
    p.set_defaults(func=cmd_stats)

    p = sub.add_parser("members", help="List known member names")
    p.set_defaults(func=cmd_members)

    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        cfg = Config.load(args.config)
    except ConfigError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1
    if args.data:
        cfg.data_path = str(Path(args.data).expanduser())

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else cfg.log_level,
        format="%(asctime)s [prayer-tracker] %(levelname)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    storage = PrayerStorage(JsonFileStore(cfg.data_path), key=cfg.storage_key)
    try:
        return args.func(storage, cfg, args)
    except ValidationError as e:
        print(f"Missing Information: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
