# barbershop/schemas.py

from pydantic import BaseModel, Field, field_validator, model_validator
from enum import Enum
from datetime import datetime
from typing import List, Optional, Union

from barbershop.core import WEEKDAYS, ExceptionStatus, parse_date, to_minutes


def _check_time(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    to_minutes(value, allow_end_of_day=True)
    return value


def _check_window(open_, close, break_start, break_end):
    if not open_ or not close:
        raise ValueError("open and close are required")
    start = to_minutes(open_)
    end = to_minutes(close, allow_end_of_day=True)
    if start >= end:
        raise ValueError("open must be before close")
    if bool(break_start) != bool(break_end):
        raise ValueError("break_start and break_end must be given together")
    if break_start and break_end:
        bs = to_minutes(break_start)
        be = to_minutes(break_end, allow_end_of_day=True)
        if not (start <= bs < be <= end):
            raise ValueError("break must sit inside the opening hours")


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserRole(str, Enum):
    admin = "admin"
    barber = "barber"
    user = "user"


class SignupRole(str, Enum):
    barber = "barber"
    user = "user"


class UserPublic(BaseModel):
    id: int
    name: str
    email: str
    role: UserRole


class UserCreate(BaseModel):
    name: str = Field(min_length=1)
    email: str
    password: str = Field(min_length=8, max_length=72)
    role: SignupRole = SignupRole.user


class BarberPublic(BaseModel):
    id: int
    name: str


class ServiceCreate(BaseModel):
    name: str = Field(min_length=1)
    duration: int = Field(gt=0)
    price: float = Field(default=0, ge=0)


class ServiceUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    duration: Optional[int] = Field(default=None, gt=0)
    price: Optional[float] = Field(default=None, ge=0)


class ServicePublic(BaseModel):
    id: int
    name: str
    duration: int
    price: float


class DayConfigIn(BaseModel):
    active: bool
    open: Optional[str] = None
    close: Optional[str] = None
    break_start: Optional[str] = None
    break_end: Optional[str] = None

    check_times = field_validator("open", "close", "break_start", "break_end")(_check_time)

    @model_validator(mode="after")
    def check_hours(self):
        if self.active:
            _check_window(self.open, self.close, self.break_start, self.break_end)
        return self


class WeeklyScheduleIn(BaseModel):
    # every weekday must be present
    monday: DayConfigIn
    tuesday: DayConfigIn
    wednesday: DayConfigIn
    thursday: DayConfigIn
    friday: DayConfigIn
    saturday: DayConfigIn
    sunday: DayConfigIn

    def days(self) -> dict:
        return {day: getattr(self, day).model_dump() for day in WEEKDAYS}


class WeeklySchedulePublic(BaseModel):
    owner: str
    days: dict


class ExceptionIn(BaseModel):
    status: ExceptionStatus
    message: Optional[str] = None
    open: Optional[str] = None
    close: Optional[str] = None
    break_start: Optional[str] = None
    break_end: Optional[str] = None

    check_times = field_validator("open", "close", "break_start", "break_end")(_check_time)

    @model_validator(mode="after")
    def check_hours(self):
        if self.status == ExceptionStatus.available:
            _check_window(self.open, self.close, self.break_start, self.break_end)
        else:
            self.open = self.close = self.break_start = self.break_end = None
        return self


class ExceptionPublic(BaseModel):
    owner: str
    date: str
    status: ExceptionStatus
    message: Optional[str] = None
    open: Optional[str] = None
    close: Optional[str] = None
    break_start: Optional[str] = None
    break_end: Optional[str] = None


class SlotGroupsOut(BaseModel):
    morning: List[str]
    afternoon: List[str]
    evening: List[str]


class AvailabilityResponse(BaseModel):
    date: str
    barber: Optional[str] = None
    slots: List[str]
    groups: SlotGroupsOut
    reason: Optional[str] = None
    message: Optional[str] = None


class AppointmentStatus(str, Enum):
    confirmed = "confirmed"
    pending = "pending"
    canceled = "canceled"
    completed = "completed"


class _BookingFields(BaseModel):
    date: str
    start: str
    service_id: int

    @field_validator("date")
    @classmethod
    def check_date(cls, value: str) -> str:
        parse_date(value)
        return value

    @field_validator("start")
    @classmethod
    def check_start(cls, value: str) -> str:
        to_minutes(value)
        return value


def _check_barber(value):
    if isinstance(value, str):
        if value.strip().lower() == "any":
            return "any"
        if not value.isdigit():
            raise ValueError("barber_id must be a barber id or 'any'")
        return int(value)
    return value


class AppointmentCreate(_BookingFields):
    # barber id, or "any" to let the shop pick the first free barber
    barber_id: Union[int, str]

    check_barber = field_validator("barber_id")(_check_barber)


class BarberAppointmentCreate(_BookingFields):
    client_name: str = Field(min_length=1)
    client_email: Optional[str] = None


class AppointmentUpdate(BaseModel):
    date: Optional[str] = None
    start: Optional[str] = None
    service_id: Optional[int] = None
    barber_id: Optional[Union[int, str]] = None
    status: Optional[AppointmentStatus] = None

    check_barber = field_validator("barber_id")(_check_barber)

    @field_validator("date")
    @classmethod
    def check_date(cls, value):
        if value is not None:
            parse_date(value)
        return value

    @field_validator("start")
    @classmethod
    def check_start(cls, value):
        if value is not None:
            to_minutes(value)
        return value


class AppointmentPublic(BaseModel):
    id: int
    date: str
    start: str
    time_slots: List[str]
    duration: int
    service_id: Optional[int] = None
    service_name: str
    barber_id: int
    client_id: Optional[int] = None
    client_name: str
    client_email: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None
