# barbershop/snapshots.py
"""
Read-side helpers: load schedules, exceptions and bookings from the database
and hand them to the engine as plain values.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Set, Tuple

from sqlmodel import Session, select

from barbershop.core import (
    BarberAgenda,
    DayConfig,
    ExceptionStatus,
    ScheduleException,
    WeeklyTemplate,
    required_run,
    slots_needed,
)
from barbershop.data import DEFAULT_OPERATING_HOURS
from barbershop.models import (
    GLOBAL_OWNER,
    Appointment,
    ScheduleExceptionRecord,
    User,
    WeeklySchedule,
    barber_owner,
)

RELEASED_STATUSES = ("canceled",)


@dataclass(frozen=True)
class DaySnapshot:
    date: str
    global_template: WeeklyTemplate
    global_exceptions: Tuple[ScheduleException, ...]
    agendas: List[BarberAgenda]
    booked_by_barber: Dict[int, Set[str]]


def template_from_days(days: dict) -> WeeklyTemplate:
    return {
        day: DayConfig(
            active=bool(cfg.get("active")),
            open=cfg.get("open"),
            close=cfg.get("close"),
            break_start=cfg.get("break_start"),
            break_end=cfg.get("break_end"),
        )
        for day, cfg in (days or {}).items()
    }


def exception_from_record(record: ScheduleExceptionRecord) -> ScheduleException:
    return ScheduleException(
        date=record.date,
        status=ExceptionStatus(record.status),
        open=record.open,
        close=record.close,
        break_start=record.break_start,
        break_end=record.break_end,
        message=record.message,
    )


def global_days(session: Session) -> dict:
    stored = session.get(WeeklySchedule, GLOBAL_OWNER)
    return stored.days if stored is not None else DEFAULT_OPERATING_HOURS


def load_global_template(session: Session) -> WeeklyTemplate:
    return template_from_days(global_days(session))


def load_barber_template(session: Session, barber_id: int) -> Optional[WeeklyTemplate]:
    stored = session.get(WeeklySchedule, barber_owner(barber_id))
    if stored is None:
        return None
    return template_from_days(stored.days)


def exception_records(session: Session, owner: str) -> List[ScheduleExceptionRecord]:
    return session.exec(
        select(ScheduleExceptionRecord)
        .where(ScheduleExceptionRecord.owner == owner)
        .order_by(ScheduleExceptionRecord.date)
    ).all()


def load_exceptions(session: Session, owner: str) -> Tuple[ScheduleException, ...]:
    return tuple(exception_from_record(r) for r in exception_records(session, owner))


def list_barbers(session: Session) -> List[User]:
    return session.exec(
        select(User).where(User.role == "barber").order_by(User.id)
    ).all()


def load_agenda(session: Session, barber_id: int) -> BarberAgenda:
    return BarberAgenda(
        barber_id=barber_id,
        template=load_barber_template(session, barber_id),
        exceptions=load_exceptions(session, barber_owner(barber_id)),
    )


def appointment_slots(appt: Appointment, granularity: int) -> List[str]:
    if appt.time_slots:
        return list(appt.time_slots)
    # stored with a start and a duration only
    return required_run(appt.start, slots_needed(appt.duration, granularity), granularity)


def load_booked_slots(
    session: Session,
    barber_id: int,
    date: str,
    granularity: int,
    exclude_appointment_id: Optional[int] = None,
) -> Set[str]:
    appts = session.exec(
        select(Appointment)
        .where(Appointment.barber_id == barber_id)
        .where(Appointment.date == date)
    ).all()

    booked = set()
    for a in appts:
        if a.status in RELEASED_STATUSES:
            continue
        if exclude_appointment_id is not None and a.id == exclude_appointment_id:
            continue
        booked.update(appointment_slots(a, granularity))
    return booked


def load_day_snapshot(
    session: Session,
    date: str,
    granularity: int,
    barber_ids: Optional[Iterable[int]] = None,
    exclude_appointment_id: Optional[int] = None,
) -> DaySnapshot:
    if barber_ids is None:
        barber_ids = [b.id for b in list_barbers(session)]
    barber_ids = list(barber_ids)

    return DaySnapshot(
        date=date,
        global_template=load_global_template(session),
        global_exceptions=load_exceptions(session, GLOBAL_OWNER),
        agendas=[load_agenda(session, barber_id) for barber_id in barber_ids],
        booked_by_barber={
            barber_id: load_booked_slots(
                session, barber_id, date, granularity, exclude_appointment_id
            )
            for barber_id in barber_ids
        },
    )
