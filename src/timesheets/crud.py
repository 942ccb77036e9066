from __future__ import annotations

from datetime import date
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from .aggregation import DayCategory
from .models import Day, YearRollup

# ---------------------------------------------------------------------------
# Days
# ---------------------------------------------------------------------------

def find_by_date(db: Session, day: date, *, for_update: bool = False) -> Day | None:
    stmt = select(Day).where(Day.date == day)
    if for_update:
        stmt = stmt.with_for_update()
    return db.scalar(stmt)


def find_by_dates(db: Session, days: Iterable[date], *, for_update: bool = False) -> dict[date, Day]:
    wanted = set(days)
    if not wanted:
        return {}
    stmt = select(Day).where(Day.date.in_(wanted)).order_by(Day.date.asc())
    if for_update:
        stmt = stmt.with_for_update()
    return {d.date: d for d in db.scalars(stmt).all()}


def find_by_year(db: Session, year: int) -> list[Day]:
    stmt = select(Day).where(Day.year == year).order_by(Day.date.asc())
    return list(db.scalars(stmt).all())


def list_days(db: Session) -> list[Day]:
    stmt = select(Day).order_by(Day.date.asc())
    return list(db.scalars(stmt).all())


def list_years(db: Session) -> list[int]:
    stmt = select(Day.year).distinct().order_by(Day.year.asc())
    return list(db.scalars(stmt).all())


def create_day(
    db: Session,
    *,
    day: date,
    category: DayCategory,
    hours: float,
) -> Day:
    wd = Day(date=day, year=day.year, category=category, hours=hours)
    db.add(wd)
    return wd


def save_day(db: Session, day: Day) -> Day:
    day.year = day.date.year
    db.add(day)
    return day


def save_days(db: Session, days: Iterable[Day]) -> list[Day]:
    return [save_day(db, d) for d in days]


# ---------------------------------------------------------------------------
# Year rollups
# ---------------------------------------------------------------------------

def find_rollup(db: Session, year: int, *, for_update: bool = False) -> YearRollup | None:
    stmt = select(YearRollup).where(YearRollup.year == year)
    if for_update:
        stmt = stmt.with_for_update()
    return db.scalar(stmt)


def lock_rollup(db: Session, year: int) -> YearRollup:
    """
    Rollup row for `year`, locked for the rest of the transaction.
    Created with zero totals when the year has none yet.
    """
    rollup = find_rollup(db, year, for_update=True)
    if rollup:
        return rollup

    rollup = YearRollup(
        year=year,
        total_vacation_days=0,
        total_sick_days=0,
        total_working_hours=0.0,
    )
    db.add(rollup)
    db.flush()
    return rollup


def save_rollup(db: Session, rollup: YearRollup) -> YearRollup:
    db.add(rollup)
    return rollup


def list_rollups(db: Session) -> list[YearRollup]:
    stmt = select(YearRollup).order_by(YearRollup.year.asc())
    return list(db.scalars(stmt).all())
