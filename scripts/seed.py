from datetime import date

from timesheets.db import init_db, session_scope
from timesheets.service import DayEntry, TimesheetService

init_db()

with session_scope() as db:
    added = TimesheetService(db).add_timesheet(
        2024,
        [
            DayEntry(day=date(2024, 1, 1), category="working", hours=8.0),
            DayEntry(day=date(2024, 1, 2), category="vacation"),
            DayEntry(day=date(2024, 1, 3), category="sick"),
            DayEntry(day=date(2024, 2, 1), category="working", hours=7.5),
        ],
    )

    print("year=", added.year, "days=", len(added.days), "totals=", added.totals)
