from __future__ import annotations

import argparse
import json
import logging
from datetime import date
from pathlib import Path

from timesheets.db import session_scope
from timesheets.exceptions import TimesheetError
from timesheets.service import DayEntry, TimesheetService

logger = logging.getLogger(__name__)

# Field names of the legacy export.
LEGACY_FIELDS = {"date_type": "category", "working_hour": "hours"}


def load_json(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


def normalize_day(raw: dict) -> dict:
    return {LEGACY_FIELDS.get(key, key): value for key, value in raw.items()}


def entries_from_payload(payload: dict) -> tuple[int, list[DayEntry]]:
    year = payload.get("year")
    days = payload.get("days")
    if not isinstance(year, int):
        raise ValueError("payload.year must be an integer")
    if not isinstance(days, list):
        raise ValueError("payload.days must be a list")

    entries = []
    for raw in days:
        day = normalize_day(raw)
        entries.append(
            DayEntry(
                day=date.fromisoformat(day["date"]),
                category=day["category"],
                hours=float(day.get("hours") or 0.0),
            )
        )
    return year, entries


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Import a yearly timesheet from a JSON file."
    )
    parser.add_argument(
        "paths",
        type=Path,
        nargs="+",
        help='JSON files shaped like {"year": 2024, "days": [{"date", "category", "hours"}]}.',
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Parse and validate only; roll back instead of committing.",
    )
    return parser


def main() -> int:
    logging.basicConfig(level=logging.INFO)
    args = build_parser().parse_args()

    for path in args.paths:
        year, entries = entries_from_payload(load_json(path))
        try:
            with session_scope() as db:
                added = TimesheetService(db).add_timesheet(year, entries)
                if args.dry_run:
                    db.rollback()
        except TimesheetError as exc:
            logger.error("%s: %s", path, exc.message)
            return 1

        logger.info(
            "%s: %d day(s) for %d (working=%.2fh vacation=%d sick=%d)%s",
            path,
            len(added.days),
            added.year,
            added.totals.working_hours,
            added.totals.vacation_days,
            added.totals.sick_days,
            " [dry run]" if args.dry_run else "",
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
