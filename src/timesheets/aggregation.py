from __future__ import annotations

import calendar
import math
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Iterable


class DayCategory(str, Enum):
    WORKING = "working"
    SICK = "sick"
    VACATION = "vacation"


@dataclass(frozen=True)
class DayFacts:
    day: date
    category: DayCategory
    hours: float = 0.0
    id: int | None = None


@dataclass(frozen=True)
class Totals:
    working_hours: float = 0.0
    vacation_days: int = 0
    sick_days: int = 0

    def __add__(self, other: Totals) -> Totals:
        return Totals(
            working_hours=self.working_hours + other.working_hours,
            vacation_days=self.vacation_days + other.vacation_days,
            sick_days=self.sick_days + other.sick_days,
        )

    def __sub__(self, other: Totals) -> Totals:
        return Totals(
            working_hours=self.working_hours - other.working_hours,
            vacation_days=self.vacation_days - other.vacation_days,
            sick_days=self.sick_days - other.sick_days,
        )


@dataclass
class MonthBucket:
    year: int
    month: int
    totals: Totals = field(default_factory=Totals)
    days: list[DayFacts] = field(default_factory=list)

    @property
    def name(self) -> str:
        return calendar.month_name[self.month]


@dataclass
class YearSummary:
    year: int
    totals: Totals = field(default_factory=Totals)
    months: list[MonthBucket] = field(default_factory=list)


def parse_category(value: DayCategory | str) -> DayCategory:
    """
    Closed set: anything outside working / sick / vacation is rejected.
    """
    try:
        return DayCategory(value)
    except ValueError:
        raise ValueError(f"Unknown day category: {value!r}") from None


def contribution(category: DayCategory | str, hours: float) -> Totals:
    """
    What a single day adds to a rollup. Exactly one counter moves:
    - working: hours
    - vacation: one vacation day
    - sick: one sick day
    """
    category = parse_category(category)
    if not math.isfinite(hours) or hours < 0:
        raise ValueError(f"hours must be a finite number >= 0 (got {hours})")

    if category == DayCategory.WORKING:
        return Totals(working_hours=hours)
    if category == DayCategory.VACATION:
        return Totals(vacation_days=1)
    if category == DayCategory.SICK:
        return Totals(sick_days=1)

    raise ValueError(f"Unknown day category: {category!r}")


def day_contribution(day: DayFacts) -> Totals:
    return contribution(day.category, day.hours)


def total_of(days: Iterable[DayFacts]) -> Totals:
    total = Totals()
    for d in days:
        total = total + day_contribution(d)
    return total


def summarize_year(year: int, days: Iterable[DayFacts]) -> YearSummary:
    """
    Single pass over date-ascending days of one year.

    Each day is folded into the year totals and into the bucket of its
    calendar month; bucket day lists keep the input order.
    No DB access; no hidden state.
    """
    summary = YearSummary(year=year)
    buckets: dict[int, MonthBucket] = {}
    previous: date | None = None

    for d in days:
        if d.day.year != year:
            raise ValueError(f"Day {d.day.isoformat()} does not belong to year {year}")
        if previous is not None and d.day < previous:
            raise ValueError(
                f"Days must be sorted by date ({d.day.isoformat()} after {previous.isoformat()})"
            )
        previous = d.day

        delta = day_contribution(d)
        summary.totals = summary.totals + delta

        bucket = buckets.get(d.day.month)
        if bucket is None:
            bucket = MonthBucket(year=year, month=d.day.month)
            buckets[d.day.month] = bucket
        bucket.totals = bucket.totals + delta
        bucket.days.append(d)

    summary.months = [buckets[m] for m in sorted(buckets)]
    return summary


def group_by_year(days: Iterable[DayFacts]) -> dict[int, list[DayFacts]]:
    grouped: dict[int, list[DayFacts]] = {}
    for d in days:
        grouped.setdefault(d.day.year, []).append(d)
    return grouped


def summarize_years(days: Iterable[DayFacts]) -> list[YearSummary]:
    """
    Summaries for every year present in `days`, oldest year first.
    """
    grouped = group_by_year(days)
    return [summarize_year(year, grouped[year]) for year in sorted(grouped)]


def adjust_totals(totals: Totals, old: DayFacts, new: DayFacts) -> Totals:
    """
    Incremental rollup update for one day changing from `old` to `new`:
        totals - contribution(old) + contribution(new)

    The old contribution is always removed, even when only hours changed.
    """
    if old.day != new.day:
        raise ValueError(
            f"Cannot adjust across days ({old.day.isoformat()} -> {new.day.isoformat()})"
        )
    return totals - day_contribution(old) + day_contribution(new)


def totals_equal(a: Totals, b: Totals, *, abs_tol: float = 1e-9) -> bool:
    """
    Day counts must match exactly; hours within float tolerance.
    """
    return (
        a.vacation_days == b.vacation_days
        and a.sick_days == b.sick_days
        and math.isclose(a.working_hours, b.working_hours, rel_tol=1e-9, abs_tol=abs_tol)
    )
