#!/usr/bin/env python
"""CLI to inspect or reset the persisted Glass & Rubber day.

Usage:
    python scripts/day_status.py                 # show today's record
    python scripts/day_status.py --json          # raw stored record
    python scripts/day_status.py --reset --yes   # delete the locked day
    python scripts/day_status.py --clear-recents --yes

Reads the same store the Streamlit app uses (GR_STORE_BACKEND, DATABASE_URL,
GR_JSON_STORE_PATH). Destructive actions require --yes.
"""
import argparse
import json
import sys
from pathlib import Path

# Add parent directory to path so 'glassrubber' imports work
sys.path.insert(0, str(Path(__file__).parent.parent))

from glassrubber.config import get_settings
from glassrubber.database import PlanStorage, build_store
from glassrubber.day import locked_checklist, today_key
from glassrubber.utils.logger import setup_logging


def describe_day(storage: PlanStorage, today: str) -> str:
    record = storage.load_day()
    lines = []
    if record is None:
        lines.append("No locked day stored.")
    else:
        stale = "" if record.date == today else " (stale, ignored on startup)"
        lines.append(f"Locked day: {record.date}{stale}")
        checklist = locked_checklist(record.items)
        if not checklist:
            lines.append("  No glass balls actively carried. Rest well.")
        for item in checklist:
            mark = "x" if item.is_handled else " "
            lines.append(f"  [{mark}] {item.action}  ({item.text})")
        rubber = [i for i in record.items if not i.is_glass]
        lines.append(f"  Rubber container: {len(rubber)}")

    recents = storage.load_recents()
    lines.append(f"Recents ({len(recents)}): {', '.join(recents) if recents else '-'}")
    lines.append(f"Intro seen: {'yes' if storage.intro_seen() else 'no'}")
    return "\n".join(lines)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Inspect or reset the persisted Glass & Rubber day"
    )
    parser.add_argument("--json", action="store_true", help="Print the stored record as JSON")
    parser.add_argument("--reset", action="store_true", help="Delete the stored locked day")
    parser.add_argument("--clear-recents", action="store_true", help="Forget recent glass texts")
    parser.add_argument("--yes", action="store_true", help="Confirm destructive actions")
    args = parser.parse_args(argv)

    settings = get_settings()
    setup_logging(settings.effective_log_level)
    storage = PlanStorage(build_store(settings))

    if (args.reset or args.clear_recents) and not args.yes:
        print("Refusing to modify stored state without --yes", file=sys.stderr)
        return 2

    if args.reset:
        storage.clear_day()
        print("Locked day deleted.")
    if args.clear_recents:
        storage.clear_recents()
        print("Recents cleared.")
    if args.reset or args.clear_recents:
        return 0

    if args.json:
        record = storage.load_day()
        print(json.dumps(record.to_dict() if record else None, indent=2))
        return 0

    print(describe_day(storage, today_key()))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
