# barbershop/routers/appointments_routes.py

import logging
from datetime import datetime
from typing import List, Optional
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from barbershop.auth import get_current_user
from barbershop.config import get_settings
from barbershop.core import (
    AnyBarber,
    BookingFailure,
    RunResult,
    SpecificBarber,
    slots_needed,
    to_minutes,
    validate_selection,
)
from barbershop.db import get_session
from barbershop.deps import require_role
from barbershop.models import Appointment, ReservedSlot, Service, User
from barbershop.schemas import (
    AppointmentCreate,
    AppointmentPublic,
    AppointmentStatus,
    AppointmentUpdate,
    BarberAppointmentCreate,
)
from barbershop.snapshots import RELEASED_STATUSES, load_day_snapshot

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["appointments"],
)

STATUS_FILTERS = tuple(s.value for s in AppointmentStatus) + ("all",)


def _get_service(session: Session, service_id: int) -> Service:
    service = session.get(Service, service_id)
    if service is None:
        raise HTTPException(status_code=404, detail="Service not found")
    return service


def _get_barber(session: Session, barber_id: int) -> User:
    barber = session.get(User, barber_id)
    if barber is None or barber.role != "barber":
        raise HTTPException(status_code=404, detail="Barber Not Found")
    return barber


def _reject_past(date: str, start: str):
    now = datetime.now(ZoneInfo(get_settings().timezone))
    today = now.strftime("%Y-%m-%d")
    if date < today or (date == today and to_minutes(start) <= now.hour * 60 + now.minute):
        raise HTTPException(status_code=422, detail="Cannot book an appointment in the past")


def _booking_conflict(failure: BookingFailure) -> HTTPException:
    return HTTPException(
        status_code=409,
        detail={"code": failure.value, "message": failure.message},
    )


def _run_booking(
    session: Session,
    selection,
    date: str,
    start: str,
    service: Service,
    exclude_appointment_id: Optional[int] = None,
) -> RunResult:
    granularity = get_settings().slot_minutes

    barber_ids = None
    if isinstance(selection, SpecificBarber):
        barber_ids = [selection.barber_id]

    # Fresh read right before the write; the unique slot key covers the race
    snapshot = load_day_snapshot(
        session, date, granularity, barber_ids=barber_ids,
        exclude_appointment_id=exclude_appointment_id,
    )
    return validate_selection(
        selection,
        date,
        start,
        slots_needed(service.duration, granularity),
        snapshot.agendas,
        snapshot.global_template,
        snapshot.global_exceptions,
        snapshot.booked_by_barber,
        granularity,
    )


def _reserve(session: Session, appt: Appointment):
    for slot in appt.time_slots:
        session.add(ReservedSlot(
            appointment_id=appt.id,
            barber_id=appt.barber_id,
            date=appt.date,
            slot=slot,
        ))


def _release(session: Session, appt_id: int):
    session.exec(delete(ReservedSlot).where(ReservedSlot.appointment_id == appt_id))


def _commit_booking(session: Session, appt: Appointment):
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        logger.warning(
            "Slot race lost for barber %s on %s at %s", appt.barber_id, appt.date, appt.start
        )
        raise _booking_conflict(BookingFailure.slot_not_available)
    session.refresh(appt)


def _book(
    session: Session,
    result: RunResult,
    date: str,
    service: Service,
    client_id: Optional[int],
    client_name: str,
    client_email: Optional[str],
) -> Appointment:
    db_appt = Appointment(
        date=date,
        start=result.slots[0],
        time_slots=list(result.slots),
        duration=service.duration,
        service_id=service.id,
        service_name=service.name,
        barber_id=result.barber_id,
        client_id=client_id,
        client_name=client_name,
        client_email=client_email,
        status=AppointmentStatus.confirmed.value,
    )
    session.add(db_appt)
    session.flush()  # fills db_appt.id
    _reserve(session, db_appt)
    _commit_booking(session, db_appt)

    logger.info(
        "Booked appointment %s: barber %s on %s %s",
        db_appt.id, db_appt.barber_id, db_appt.date, ",".join(db_appt.time_slots),
    )
    return db_appt


def _can_touch(current_user: dict, appt: Appointment) -> bool:
    return (
        current_user["role"] == "admin"
        or current_user["id"] == appt.barber_id
        or (appt.client_id is not None and current_user["id"] == appt.client_id)
    )


def _check_status_filter(status: str):
    if status not in STATUS_FILTERS:
        raise HTTPException(
            status_code=422,
            detail=f"status must be one of: {', '.join(STATUS_FILTERS)}",
        )


def _list(session: Session, stmt, status: str, on_date: Optional[str]):
    _check_status_filter(status)
    if on_date is not None:
        stmt = stmt.where(Appointment.date == on_date)
    if status != "all":
        stmt = stmt.where(Appointment.status == status)
    stmt = stmt.order_by(Appointment.date, Appointment.start)
    return session.exec(stmt).all()


@router.post("/appointments", response_model=AppointmentPublic, status_code=201)
def create_appointment(
    appt: AppointmentCreate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "user", "admin")

    # 1) Validate service, barber and date
    service = _get_service(session, appt.service_id)
    if appt.barber_id == "any":
        selection = AnyBarber()
    else:
        _get_barber(session, appt.barber_id)
        selection = SpecificBarber(barber_id=appt.barber_id)
    _reject_past(appt.date, appt.start)

    # 2) Find the run of slots (and the barber, in "any" mode)
    result = _run_booking(session, selection, appt.date, appt.start, service)
    if not result.ok:
        logger.info(
            "Booking rejected (%s) for %s on %s at %s",
            result.failure.value, current_user["email"], appt.date, appt.start,
        )
        raise _booking_conflict(result.failure)

    # 3) Persist appointment and reserved slots together
    return _book(
        session,
        result,
        appt.date,
        service,
        client_id=current_user["id"],
        client_name=current_user["name"],
        client_email=current_user["email"],
    )


@router.post("/barbers/me/appointments", response_model=AppointmentPublic, status_code=201)
def barber_create_appointment(
    appt: BarberAppointmentCreate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "barber")

    service = _get_service(session, appt.service_id)
    _reject_past(appt.date, appt.start)

    selection = SpecificBarber(barber_id=current_user["id"])
    result = _run_booking(session, selection, appt.date, appt.start, service)
    if not result.ok:
        logger.info(
            "Walk-in booking rejected (%s) for barber %s on %s at %s",
            result.failure.value, current_user["id"], appt.date, appt.start,
        )
        raise _booking_conflict(result.failure)

    return _book(
        session,
        result,
        appt.date,
        service,
        client_id=None,
        client_name=appt.client_name.strip(),
        client_email=appt.client_email,
    )


@router.patch("/appointments/{appt_id}", response_model=AppointmentPublic)
def update_appointment(
    appt_id: int,
    changes: AppointmentUpdate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    # 1) Find and authorize
    target = session.get(Appointment, appt_id)
    if target is None:
        raise HTTPException(status_code=404, detail="Appointment not found")
    if not _can_touch(current_user, target):
        raise HTTPException(status_code=403, detail="Forbidden")
    if target.status in RELEASED_STATUSES:
        raise HTTPException(status_code=409, detail="Appointment already canceled")

    # 2) Cancellation goes through the same path as /cancel
    if changes.status == AppointmentStatus.canceled:
        return _cancel(session, target)

    # 3) Reschedule: date, start, service or barber changed
    new_date = changes.date or target.date
    new_start = changes.start or target.start
    service_id = changes.service_id if changes.service_id is not None else target.service_id
    if changes.barber_id == "any":
        selection = AnyBarber()
    elif changes.barber_id is not None and changes.barber_id != target.barber_id:
        _get_barber(session, changes.barber_id)
        selection = SpecificBarber(barber_id=changes.barber_id)
    else:
        selection = SpecificBarber(barber_id=target.barber_id)
    moved = (
        new_date != target.date
        or new_start != target.start
        or service_id != target.service_id
        or selection != SpecificBarber(barber_id=target.barber_id)
    )

    if moved:
        if service_id is None:
            raise HTTPException(status_code=422, detail="service_id is required")
        service = _get_service(session, service_id)
        _reject_past(new_date, new_start)

        result = _run_booking(
            session, selection, new_date, new_start, service, exclude_appointment_id=target.id
        )
        if not result.ok:
            logger.info("Reschedule of %s rejected (%s)", target.id, result.failure.value)
            raise _booking_conflict(result.failure)

        # old slots must be gone before the new ones hit the unique key
        _release(session, target.id)
        session.flush()

        target.date = new_date
        target.start = result.slots[0]
        target.time_slots = list(result.slots)
        target.duration = service.duration
        target.service_id = service.id
        target.service_name = service.name
        target.barber_id = result.barber_id
        _reserve(session, target)

    if changes.status is not None:
        target.status = changes.status.value

    session.add(target)
    _commit_booking(session, target)

    logger.info("Appointment %s updated by %s", target.id, current_user["email"])
    return target


def _cancel(session: Session, target: Appointment) -> Appointment:
    target.status = AppointmentStatus.canceled.value
    _release(session, target.id)
    session.add(target)
    session.commit()
    session.refresh(target)
    logger.info("Appointment %s canceled", target.id)
    return target


@router.patch("/appointments/{appt_id}/cancel", response_model=AppointmentPublic)
def cancel_appointment(
    appt_id: int,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    # 1) Find the appointment
    target = session.get(Appointment, appt_id)
    if target is None:
        raise HTTPException(status_code=404, detail="Appointment not found")

    # 2) Already canceled?
    if target.status == AppointmentStatus.canceled.value:
        raise HTTPException(status_code=409, detail="Appointment already canceled")

    # 3) Client who booked, the barber, or an admin
    if not _can_touch(current_user, target):
        raise HTTPException(status_code=403, detail="Forbidden")

    # 4) Cancel and free the slots
    return _cancel(session, target)


@router.delete("/appointments/{appt_id}", status_code=204)
def delete_appointment(
    appt_id: int,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "admin")

    target = session.get(Appointment, appt_id)
    if target is None:
        raise HTTPException(status_code=404, detail="Appointment not found")

    _release(session, target.id)
    session.delete(target)
    session.commit()
    logger.info("Appointment %s deleted by %s", appt_id, current_user["email"])


@router.get("/clients/me/appointments", response_model=List[AppointmentPublic])
def list_my_appointments(
    status: str = "all",
    on_date: Optional[str] = None,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "user", "admin")
    stmt = select(Appointment).where(Appointment.client_id == current_user["id"])
    return _list(session, stmt, status, on_date)


@router.get("/barbers/me/appointments", response_model=List[AppointmentPublic])
def list_barber_appointments(
    status: str = "all",
    on_date: Optional[str] = None,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "barber")
    stmt = select(Appointment).where(Appointment.barber_id == current_user["id"])
    return _list(session, stmt, status, on_date)


@router.get("/admin/appointments", response_model=List[AppointmentPublic])
def list_all_appointments(
    status: str = "all",
    on_date: Optional[str] = None,
    barber_id: Optional[int] = None,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "admin")
    stmt = select(Appointment)
    if barber_id is not None:
        stmt = stmt.where(Appointment.barber_id == barber_id)
    return _list(session, stmt, status, on_date)
