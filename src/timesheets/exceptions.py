from __future__ import annotations

from datetime import date


class TimesheetError(Exception):
    """Base exception for timesheet rule violations."""

    def __init__(self, message: str, *, day: date | None = None, year: int | None = None):
        super().__init__(message)
        self.message = message
        self.day = day
        self.year = year

    def context(self) -> dict:
        ctx = {}
        if self.day is not None:
            ctx["date"] = self.day.isoformat()
        if self.year is not None:
            ctx["year"] = self.year
        return ctx


class NotFoundError(TimesheetError):
    """Raised when no day exists for a date, or no days exist for a year."""


class InvalidInputError(TimesheetError):
    """Raised when a category, hour count or date is not acceptable."""


class ConflictError(TimesheetError):
    """Raised when adding a day for a date that is already recorded."""
