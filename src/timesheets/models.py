from datetime import date, datetime

from sqlalchemy import Date, DateTime
from sqlalchemy import Enum as SQLEnum
from sqlalchemy import Float, Integer, UniqueConstraint, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from .aggregation import DayCategory, DayFacts, Totals

# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------

class Base(DeclarativeBase):
    pass


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

class Day(Base):
    __tablename__ = "timesheet_day"
    __table_args__ = (
        UniqueConstraint("date", name="uq_timesheet_day_date"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    date: Mapped[date] = mapped_column(Date, nullable=False)
    # Always date.year; kept as a column for year filtering.
    year: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    category: Mapped[DayCategory] = mapped_column(
        SQLEnum(DayCategory), nullable=False
    )
    hours: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)

    def facts(self) -> DayFacts:
        return DayFacts(
            id=self.id,
            day=self.date,
            category=DayCategory(self.category),
            hours=self.hours,
        )


class YearRollup(Base):
    __tablename__ = "timesheet_year"
    __table_args__ = (
        UniqueConstraint("year", name="uq_timesheet_year_year"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    year: Mapped[int] = mapped_column(Integer, nullable=False)

    total_vacation_days: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_sick_days: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_working_hours: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now(), nullable=False
    )

    @property
    def totals(self) -> Totals:
        return Totals(
            working_hours=self.total_working_hours,
            vacation_days=self.total_vacation_days,
            sick_days=self.total_sick_days,
        )

    @totals.setter
    def totals(self, value: Totals) -> None:
        self.total_working_hours = value.working_hours
        self.total_vacation_days = value.vacation_days
        self.total_sick_days = value.sick_days
