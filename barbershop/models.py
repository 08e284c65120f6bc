# barbershop/models.py

from typing import Optional, List, Dict
from datetime import datetime, timezone

from sqlalchemy import UniqueConstraint
from sqlalchemy.types import JSON
from sqlmodel import SQLModel, Field, Column

GLOBAL_OWNER = "global"


def barber_owner(barber_id: int) -> str:
    return str(barber_id)


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    email: str = Field(index=True, unique=True)
    password_hash: str
    role: str = "user"  # admin, barber or user


class Service(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, unique=True)
    duration: int  # minutes
    price: float = 0


class WeeklySchedule(SQLModel, table=True):
    # "global" for the shop hours, the barber's user id otherwise
    owner: str = Field(primary_key=True)
    days: Dict[str, dict] = Field(sa_column=Column(JSON))


class ScheduleExceptionRecord(SQLModel, table=True):
    __tablename__ = "schedule_exception"
    __table_args__ = (
        UniqueConstraint("owner", "date", name="uq_exception_owner_date"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    owner: str = Field(index=True)
    date: str = Field(index=True)  # YYYY-MM-DD
    status: str  # blocked or available
    message: Optional[str] = None
    open: Optional[str] = None
    close: Optional[str] = None
    break_start: Optional[str] = None
    break_end: Optional[str] = None


class Appointment(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    date: str = Field(index=True)  # YYYY-MM-DD
    start: str  # first slot, HH:MM
    time_slots: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    duration: int

    service_id: Optional[int] = Field(default=None, foreign_key="service.id")
    service_name: str

    barber_id: int = Field(index=True, foreign_key="user.id")
    client_id: Optional[int] = Field(default=None, index=True, foreign_key="user.id")
    client_name: str
    client_email: Optional[str] = None

    status: str = "confirmed"
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ReservedSlot(SQLModel, table=True):
    """One row per slot held by a live appointment; the unique key stops double-booking."""

    __tablename__ = "reserved_slot"
    __table_args__ = (
        UniqueConstraint("barber_id", "date", "slot", name="uq_barber_date_slot"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    appointment_id: int = Field(index=True, foreign_key="appointment.id")
    barber_id: int
    date: str
    slot: str
