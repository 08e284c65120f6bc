# barbershop/routers/barbers_routes.py

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from barbershop.auth import get_current_user
from barbershop.db import get_session
from barbershop.deps import require_role
from barbershop.models import User, WeeklySchedule, barber_owner
from barbershop.schemas import (
    BarberPublic,
    ExceptionIn,
    ExceptionPublic,
    WeeklyScheduleIn,
    WeeklySchedulePublic,
)
from barbershop.snapshots import exception_records, list_barbers
from barbershop.routers.schedules_routes import (
    exception_to_dict,
    remove_exception,
    save_weekly_schedule,
    upsert_exception,
)

router = APIRouter(
    prefix="/barbers",
    tags=["barbers"],
)


@router.get("", response_model=List[BarberPublic])
def get_barbers(session: Session = Depends(get_session)):
    return [{"id": b.id, "name": b.name} for b in list_barbers(session)]


@router.put("/me/schedule", response_model=WeeklySchedulePublic)
def put_my_schedule(
    schedule: WeeklyScheduleIn,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "barber")
    return save_weekly_schedule(session, barber_owner(current_user["id"]), schedule)


@router.get("/me/schedule", response_model=WeeklySchedulePublic)
def get_my_schedule(
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "barber")
    return get_barber_schedule(current_user["id"], session)


@router.get("/me/exceptions", response_model=List[ExceptionPublic])
def list_my_exceptions(
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "barber")
    owner = barber_owner(current_user["id"])
    return [exception_to_dict(r) for r in exception_records(session, owner)]


@router.put("/me/exceptions/{date}", response_model=ExceptionPublic)
def put_my_exception(
    date: str,
    payload: ExceptionIn,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "barber")
    return upsert_exception(session, barber_owner(current_user["id"]), date, payload)


@router.delete("/me/exceptions/{date}", status_code=204)
def delete_my_exception(
    date: str,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "barber")
    remove_exception(session, barber_owner(current_user["id"]), date)


@router.get("/{barber_id}/schedule", response_model=WeeklySchedulePublic)
def get_barber_schedule(barber_id: int, session: Session = Depends(get_session)):
    barber = session.get(User, barber_id)
    if barber is None or barber.role != "barber":
        raise HTTPException(status_code=404, detail="Barber Not Found")

    db_schedule = session.get(WeeklySchedule, barber_owner(barber_id))
    if db_schedule is None:
        raise HTTPException(status_code=404, detail="Schedule not set")
    return {"owner": db_schedule.owner, "days": db_schedule.days}
