# barbershop/routers/availability_routes.py

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from barbershop.config import get_settings
from barbershop.core import (
    BookingFailure,
    SpecificBarber,
    available_slots_for,
    parse_date,
    parse_selection,
)
from barbershop.core.availability import DAY_UNAVAILABLE, FULLY_BOOKED, NO_BARBER_SELECTED
from barbershop.db import get_session
from barbershop.models import User
from barbershop.schemas import AvailabilityResponse
from barbershop.snapshots import load_day_snapshot

router = APIRouter(
    tags=["availability"],
)

REASON_MESSAGES = {
    NO_BARBER_SELECTED: BookingFailure.no_barber_selected.message,
    DAY_UNAVAILABLE: BookingFailure.day_unavailable.message,
    FULLY_BOOKED: "There are no available times on the selected date.",
}


@router.get("/availability", response_model=AvailabilityResponse)
def get_availability(
    date: str,
    barber: Optional[str] = None,
    session: Session = Depends(get_session),
):
    # 1) Validate query
    try:
        parse_date(date)
        selection = parse_selection(barber)
    except ValueError:
        raise HTTPException(status_code=422, detail="date must be YYYY-MM-DD and barber an id or 'any'")

    barber_ids = None
    if isinstance(selection, SpecificBarber):
        db_barber = session.get(User, selection.barber_id)
        if db_barber is None or db_barber.role != "barber":
            raise HTTPException(status_code=404, detail="Barber Not Found")
        barber_ids = [selection.barber_id]

    # 2) Fresh snapshot of schedules and bookings for the day
    granularity = get_settings().slot_minutes
    snapshot = load_day_snapshot(session, date, granularity, barber_ids=barber_ids)

    # 3) Compute
    view = available_slots_for(
        selection,
        date,
        snapshot.agendas,
        snapshot.global_template,
        snapshot.global_exceptions,
        snapshot.booked_by_barber,
        granularity,
    )

    return {
        "date": date,
        "barber": barber or None,
        "slots": view.slots,
        "groups": view.groups,
        "reason": view.reason,
        "message": REASON_MESSAGES.get(view.reason),
    }
