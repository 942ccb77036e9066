from __future__ import annotations

import logging
from datetime import date

from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from .config import settings
from .db import get_db
from .exceptions import ConflictError, InvalidInputError, NotFoundError, TimesheetError
from .schemas import (
    BulkUpdateIn,
    BulkUpdateOut,
    DayOut,
    DayPatchIn,
    TimesheetAddedOut,
    TimesheetIn,
    YearOut,
)
from .service import DayEntry, DayPatch, TimesheetService

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, debug=settings.debug)

ERROR_STATUS = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    InvalidInputError: status.HTTP_400_BAD_REQUEST,
    ConflictError: status.HTTP_409_CONFLICT,
}


@app.exception_handler(TimesheetError)
async def timesheet_error_handler(request: Request, exc: TimesheetError) -> JSONResponse:
    status_code = ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
    logger.info("%s %s -> %d: %s", request.method, request.url.path, status_code, exc.message)
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, **exc.context()},
    )


def get_service(db: Session = Depends(get_db)) -> TimesheetService:
    return TimesheetService(db)


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/timesheet", response_model=TimesheetAddedOut, status_code=status.HTTP_201_CREATED)
def add_timesheet(payload: TimesheetIn, service: TimesheetService = Depends(get_service)):
    added = service.add_timesheet(
        payload.year,
        [DayEntry(day=d.date, category=d.category, hours=d.hours) for d in payload.days],
    )
    service.db.commit()

    return TimesheetAddedOut(
        year=added.year,
        total_working_hours=added.totals.working_hours,
        total_vacation_days=added.totals.vacation_days,
        total_sick_days=added.totals.sick_days,
        days=[DayOut.from_facts(d) for d in added.days],
    )


@app.get("/timesheet", response_model=list[YearOut])
def get_all_timesheets(service: TimesheetService = Depends(get_service)):
    return [YearOut.from_summary(s) for s in service.get_all_timesheets()]


@app.put("/timesheet/bulk-update", response_model=BulkUpdateOut)
def bulk_update_timesheet_days(payload: BulkUpdateIn, service: TimesheetService = Depends(get_service)):
    updated = service.bulk_update_timesheet_days(
        DayPatch(day=u.date, category=u.category, hours=u.hours) for u in payload.updates
    )
    service.db.commit()
    return BulkUpdateOut(updated_entries=updated)


@app.get("/timesheet/{year}", response_model=YearOut)
def get_timesheet_by_year(year: int, service: TimesheetService = Depends(get_service)):
    return YearOut.from_summary(service.get_timesheet_by_year(year))


@app.put("/timesheet/day/{day}", response_model=DayOut)
def update_timesheet_day(
    day: date,
    payload: DayPatchIn,
    service: TimesheetService = Depends(get_service),
):
    updated = service.update_timesheet_day(day, category=payload.category, hours=payload.hours)
    service.db.commit()
    return DayOut.from_facts(updated)
