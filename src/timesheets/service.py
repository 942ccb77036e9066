from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from . import crud
from .aggregation import (
    DayCategory,
    DayFacts,
    Totals,
    YearSummary,
    adjust_totals,
    contribution,
    group_by_year,
    parse_category,
    summarize_year,
    total_of,
    totals_equal,
)
from .exceptions import ConflictError, InvalidInputError, NotFoundError
from .models import Day, YearRollup

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DayEntry:
    day: date
    category: DayCategory | str
    hours: float = 0.0


@dataclass(frozen=True)
class DayPatch:
    day: date
    category: DayCategory | str | None = None
    hours: float | None = None


@dataclass(frozen=True)
class AddedTimesheet:
    year: int
    totals: Totals
    days: list[DayFacts]


@dataclass(frozen=True)
class RollupDrift:
    year: int
    persisted: Totals | None
    recomputed: Totals


class TimesheetService:
    """
    Sole writer of days and year rollups.

    Every mutation runs inside the caller's transaction: the rollup row of
    each touched year is locked first, then the day rows, then both are
    written together. Nothing is committed here; errors leave the session
    for the caller to roll back, and no write happens before validation.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    # -----------------------------------------------------------------------
    # Writes
    # -----------------------------------------------------------------------

    def add_timesheet(self, year: int, days: Iterable[DayEntry]) -> AddedTimesheet:
        entries = list(days)

        seen: set[date] = set()
        for entry in entries:
            if entry.day.year != year:
                raise InvalidInputError(
                    f"Date {entry.day.isoformat()} is not in year {year}",
                    day=entry.day,
                    year=year,
                )
            if entry.day in seen:
                raise ConflictError(
                    f"Date {entry.day.isoformat()} is submitted more than once",
                    day=entry.day,
                )
            seen.add(entry.day)
            self._contribution(entry.category, entry.hours, entry.day)

        rollup = crud.find_rollup(self.db, year, for_update=True)

        existing = crud.find_by_dates(self.db, seen, for_update=True)
        for entry in entries:
            if entry.day in existing:
                raise ConflictError(
                    f"Timesheet entry for date {entry.day.isoformat()} already exists",
                    day=entry.day,
                )

        if rollup is None:
            rollup = self._restore_rollup(year)

        totals = rollup.totals
        created: list[Day] = []
        for entry in entries:
            category = parse_category(entry.category)
            totals = totals + contribution(category, entry.hours)
            created.append(
                crud.create_day(self.db, day=entry.day, category=category, hours=entry.hours)
            )

        rollup.totals = totals
        crud.save_rollup(self.db, rollup)
        try:
            self.db.flush()
        except IntegrityError as exc:
            # Another transaction recorded one of these dates after our lookup.
            dates = ", ".join(e.day.isoformat() for e in entries)
            raise ConflictError(
                f"Timesheet entries for {dates} were added concurrently",
                day=entries[0].day if len(entries) == 1 else None,
                year=year,
            ) from exc

        logger.info("Added %d day(s) to timesheet %d", len(created), year)
        return AddedTimesheet(year=year, totals=totals, days=[d.facts() for d in created])

    def update_timesheet_day(
        self,
        day: date,
        *,
        category: DayCategory | str | None = None,
        hours: float | None = None,
    ) -> DayFacts:
        patch = DayPatch(day=day, category=category, hours=hours)

        rollup = crud.find_rollup(self.db, day.year, for_update=True)
        row = crud.find_by_date(self.db, day, for_update=True)
        if row is None:
            raise NotFoundError(f"Timesheet entry for date {day.isoformat()} not found", day=day)
        self._validate_patch(row, patch)

        if rollup is None:
            rollup = self._restore_rollup(row.year)

        old, new = self._apply_patch(row, patch)
        rollup.totals = adjust_totals(rollup.totals, old, new)
        crud.save_day(self.db, row)
        crud.save_rollup(self.db, rollup)
        self.db.flush()

        logger.info("Updated timesheet entry %s", day.isoformat())
        return new

    def bulk_update_timesheet_days(self, patches: Iterable[DayPatch]) -> int:
        """
        All-or-nothing: every date is resolved and every patch validated
        before the first row changes. Repeated dates apply in input order.
        """
        batch = list(patches)
        if not batch:
            return 0

        years = sorted({p.day.year for p in batch})
        rollups: dict[int, YearRollup | None] = {
            year: crud.find_rollup(self.db, year, for_update=True) for year in years
        }
        rows = crud.find_by_dates(self.db, (p.day for p in batch), for_update=True)

        for patch in batch:
            row = rows.get(patch.day)
            if row is None:
                raise NotFoundError(
                    f"Timesheet entry for date {patch.day.isoformat()} not found",
                    day=patch.day,
                )
            self._validate_patch(row, patch)

        for year in years:
            if rollups[year] is None:
                rollups[year] = self._restore_rollup(year)

        for patch in batch:
            row = rows[patch.day]
            rollup = rollups[row.year]
            old, new = self._apply_patch(row, patch)
            rollup.totals = adjust_totals(rollup.totals, old, new)
            logger.debug("Adjusted timesheet %d for %s", row.year, patch.day.isoformat())

        crud.save_days(self.db, rows.values())
        for rollup in rollups.values():
            crud.save_rollup(self.db, rollup)
        self.db.flush()

        logger.info("Bulk updated %d timesheet entries across %d year(s)", len(batch), len(years))
        return len(batch)

    # -----------------------------------------------------------------------
    # Reads
    # -----------------------------------------------------------------------

    def get_timesheet_by_year(self, year: int) -> YearSummary:
        rows = crud.find_by_year(self.db, year)
        if not rows:
            raise NotFoundError(f"Timesheet for year {year} not found", year=year)
        return self._summarize(year, [r.facts() for r in rows], crud.find_rollup(self.db, year))

    def get_all_timesheets(self) -> list[YearSummary]:
        rows = crud.list_days(self.db)
        if not rows:
            raise NotFoundError("No timesheets found")

        rollups = {r.year: r for r in crud.list_rollups(self.db)}
        grouped = group_by_year(r.facts() for r in rows)
        return [
            self._summarize(year, grouped[year], rollups.get(year))
            for year in sorted(grouped)
        ]

    # -----------------------------------------------------------------------
    # Consistency
    # -----------------------------------------------------------------------

    def verify_rollups(self) -> list[RollupDrift]:
        recomputed = {
            year: total_of(days)
            for year, days in group_by_year(d.facts() for d in crud.list_days(self.db)).items()
        }
        persisted = {r.year: r.totals for r in crud.list_rollups(self.db)}

        drifts = []
        for year in sorted(set(recomputed) | set(persisted)):
            expected = recomputed.get(year, Totals())
            stored = persisted.get(year)
            if stored is None or not totals_equal(stored, expected):
                drifts.append(RollupDrift(year=year, persisted=stored, recomputed=expected))
        return drifts

    def rebuild_rollups(self, years: Sequence[int] | None = None) -> int:
        if years is None:
            years = sorted(set(crud.list_years(self.db)) | {r.year for r in crud.list_rollups(self.db)})

        for year in years:
            rollup = crud.lock_rollup(self.db, year)
            rollup.totals = total_of(d.facts() for d in crud.find_by_year(self.db, year))
            crud.save_rollup(self.db, rollup)
        self.db.flush()

        logger.info("Rebuilt %d timesheet rollup(s)", len(years))
        return len(years)

    # -----------------------------------------------------------------------
    # Helpers
    # -----------------------------------------------------------------------

    def _contribution(self, category: DayCategory | str, hours: float, day: date) -> Totals:
        try:
            return contribution(category, hours)
        except ValueError as exc:
            raise InvalidInputError(f"{exc} for date {day.isoformat()}", day=day) from exc

    def _validate_patch(self, row: Day, patch: DayPatch) -> None:
        category = row.category if patch.category is None else patch.category
        hours = row.hours if patch.hours is None else patch.hours
        self._contribution(category, hours, patch.day)

    def _apply_patch(self, row: Day, patch: DayPatch) -> tuple[DayFacts, DayFacts]:
        old = row.facts()
        if patch.category is not None:
            row.category = parse_category(patch.category)
        if patch.hours is not None:
            row.hours = patch.hours
        return old, row.facts()

    def _restore_rollup(self, year: int) -> YearRollup:
        try:
            rollup = crud.lock_rollup(self.db, year)
        except IntegrityError as exc:
            raise ConflictError(f"Timesheet {year} was created concurrently", year=year) from exc
        days = crud.find_by_year(self.db, year)
        if days:
            logger.warning("Timesheet %d has days but no rollup; recomputing", year)
            rollup.totals = total_of(d.facts() for d in days)
        return rollup

    def _summarize(self, year: int, days: list[DayFacts], rollup: YearRollup | None) -> YearSummary:
        try:
            summary = summarize_year(year, days)
        except ValueError as exc:
            raise InvalidInputError(str(exc), year=year) from exc

        if rollup is None:
            logger.warning("Timesheet %d has no rollup; serving recomputed totals", year)
            return summary

        if not totals_equal(rollup.totals, summary.totals):
            logger.warning(
                "Timesheet %d rollup drift: stored=%s recomputed=%s",
                year,
                rollup.totals,
                summary.totals,
            )
        summary.totals = rollup.totals
        return summary
