from __future__ import annotations

from datetime import date

from pydantic import AliasChoices, BaseModel, Field

from .aggregation import DayCategory, DayFacts, MonthBucket, Totals, YearSummary


class DayIn(BaseModel):
    date: date
    category: DayCategory = Field(validation_alias=AliasChoices("category", "date_type"))
    hours: float = Field(
        default=0.0,
        ge=0,
        allow_inf_nan=False,
        validation_alias=AliasChoices("hours", "working_hour"),
    )


class TimesheetIn(BaseModel):
    year: int
    days: list[DayIn]


class DayPatchIn(BaseModel):
    category: DayCategory | None = Field(
        default=None,
        validation_alias=AliasChoices("category", "date_type"),
    )
    hours: float | None = Field(
        default=None,
        ge=0,
        allow_inf_nan=False,
        validation_alias=AliasChoices("hours", "working_hour"),
    )


class BulkDayPatchIn(DayPatchIn):
    date: date


class BulkUpdateIn(BaseModel):
    updates: list[BulkDayPatchIn]


class DayOut(BaseModel):
    id: int | None = None
    date: date
    year: int
    category: DayCategory
    hours: float

    @classmethod
    def from_facts(cls, facts: DayFacts) -> DayOut:
        return cls(
            id=facts.id,
            date=facts.day,
            year=facts.day.year,
            category=facts.category,
            hours=facts.hours,
        )


class TotalsOut(BaseModel):
    total_working_hours: float
    total_vacation_days: int
    total_sick_days: int

    @classmethod
    def from_totals(cls, totals: Totals) -> TotalsOut:
        return cls(
            total_working_hours=totals.working_hours,
            total_vacation_days=totals.vacation_days,
            total_sick_days=totals.sick_days,
        )


class MonthOut(TotalsOut):
    month: int
    name: str
    days: list[DayOut]

    @classmethod
    def from_bucket(cls, bucket: MonthBucket) -> MonthOut:
        return cls(
            month=bucket.month,
            name=bucket.name,
            total_working_hours=bucket.totals.working_hours,
            total_vacation_days=bucket.totals.vacation_days,
            total_sick_days=bucket.totals.sick_days,
            days=[DayOut.from_facts(d) for d in bucket.days],
        )


class YearOut(TotalsOut):
    year: int
    months: list[MonthOut]

    @classmethod
    def from_summary(cls, summary: YearSummary) -> YearOut:
        return cls(
            year=summary.year,
            total_working_hours=summary.totals.working_hours,
            total_vacation_days=summary.totals.vacation_days,
            total_sick_days=summary.totals.sick_days,
            months=[MonthOut.from_bucket(b) for b in summary.months],
        )


class TimesheetAddedOut(TotalsOut):
    year: int
    days: list[DayOut]


class BulkUpdateOut(BaseModel):
    updated_entries: int
