# barbershop/routers/schedules_routes.py

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from barbershop.auth import get_current_user
from barbershop.core import parse_date
from barbershop.db import get_session
from barbershop.deps import require_role
from barbershop.models import GLOBAL_OWNER, ScheduleExceptionRecord, WeeklySchedule
from barbershop.schemas import (
    ExceptionIn,
    ExceptionPublic,
    WeeklyScheduleIn,
    WeeklySchedulePublic,
)
from barbershop.snapshots import exception_records, global_days

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/schedules",
    tags=["schedules"],
)


def save_weekly_schedule(session: Session, owner: str, schedule: WeeklyScheduleIn) -> dict:
    # one template per owner, replaced as a whole
    db_schedule = session.get(WeeklySchedule, owner)
    if db_schedule is None:
        db_schedule = WeeklySchedule(owner=owner, days=schedule.days())
    else:
        db_schedule.days = schedule.days()
    session.add(db_schedule)
    session.commit()
    session.refresh(db_schedule)

    logger.info("Weekly schedule saved for %s", owner)
    return {"owner": db_schedule.owner, "days": db_schedule.days}


def exception_to_dict(record: ScheduleExceptionRecord) -> dict:
    return {
        "owner": record.owner,
        "date": record.date,
        "status": record.status,
        "message": record.message,
        "open": record.open,
        "close": record.close,
        "break_start": record.break_start,
        "break_end": record.break_end,
    }


def _check_date(date: str) -> str:
    try:
        parse_date(date)
    except ValueError:
        raise HTTPException(status_code=422, detail="date must be YYYY-MM-DD")
    return date


def upsert_exception(session: Session, owner: str, date: str, payload: ExceptionIn) -> dict:
    _check_date(date)
    record = session.exec(
        select(ScheduleExceptionRecord)
        .where(ScheduleExceptionRecord.owner == owner)
        .where(ScheduleExceptionRecord.date == date)
    ).first()
    if record is None:
        record = ScheduleExceptionRecord(owner=owner, date=date, status=payload.status.value)

    record.status = payload.status.value
    record.message = payload.message
    record.open = payload.open
    record.close = payload.close
    record.break_start = payload.break_start
    record.break_end = payload.break_end

    session.add(record)
    session.commit()
    session.refresh(record)

    logger.info("Exception %s on %s saved for %s", record.status, date, owner)
    return exception_to_dict(record)


def remove_exception(session: Session, owner: str, date: str):
    _check_date(date)
    record = session.exec(
        select(ScheduleExceptionRecord)
        .where(ScheduleExceptionRecord.owner == owner)
        .where(ScheduleExceptionRecord.date == date)
    ).first()
    if record is None:
        raise HTTPException(status_code=404, detail="Exception not found")
    session.delete(record)
    session.commit()
    logger.info("Exception on %s removed for %s", date, owner)


@router.get("/global", response_model=WeeklySchedulePublic)
def get_global_schedule(session: Session = Depends(get_session)):
    return {"owner": GLOBAL_OWNER, "days": global_days(session)}


@router.put("/global", response_model=WeeklySchedulePublic)
def put_global_schedule(
    schedule: WeeklyScheduleIn,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "admin")
    return save_weekly_schedule(session, GLOBAL_OWNER, schedule)


@router.get("/global/exceptions", response_model=List[ExceptionPublic])
def list_global_exceptions(session: Session = Depends(get_session)):
    return [exception_to_dict(r) for r in exception_records(session, GLOBAL_OWNER)]


@router.put("/global/exceptions/{date}", response_model=ExceptionPublic)
def put_global_exception(
    date: str,
    payload: ExceptionIn,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "admin")
    return upsert_exception(session, GLOBAL_OWNER, date, payload)


@router.delete("/global/exceptions/{date}", status_code=204)
def delete_global_exception(
    date: str,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "admin")
    remove_exception(session, GLOBAL_OWNER, date)
