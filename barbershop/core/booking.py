# barbershop/core/booking.py

from dataclasses import dataclass
from enum import Enum
from typing import Collection, Iterable, List, Mapping, Optional, Sequence, Tuple

from .availability import (
    AnyBarber,
    BarberAgenda,
    BarberSelection,
    SpecificBarber,
    Unselected,
    barber_day_config,
    free_slots,
)
from .resolver import ScheduleException, WeeklyTemplate
from .timegrid import from_minutes, to_minutes


class BookingFailure(str, Enum):
    slot_not_available = "slot_not_available"
    insufficient_trailing_slots = "insufficient_trailing_slots"
    non_contiguous_run = "non_contiguous_run"
    no_barber_available = "no_barber_available"
    day_unavailable = "day_unavailable"
    no_barber_selected = "no_barber_selected"

    @property
    def message(self) -> str:
        return FAILURE_MESSAGES[self]


FAILURE_MESSAGES = {
    BookingFailure.slot_not_available: "The selected time is not available.",
    BookingFailure.insufficient_trailing_slots: (
        "The selected time does not leave enough room to finish the service before closing."
    ),
    BookingFailure.non_contiguous_run: (
        "The service cannot be booked because it crosses a break or an occupied slot."
    ),
    BookingFailure.no_barber_available: (
        "No barber is free for every slot this service needs. Please pick another time."
    ),
    BookingFailure.day_unavailable: "Booking is not available on the selected date.",
    BookingFailure.no_barber_selected: "Please select a barber.",
}


@dataclass(frozen=True)
class RunResult:
    ok: bool
    slots: Tuple[str, ...] = ()
    failure: Optional[BookingFailure] = None
    barber_id: Optional[int] = None

    @classmethod
    def success(cls, slots: Sequence[str], barber_id: Optional[int] = None) -> "RunResult":
        return cls(ok=True, slots=tuple(slots), barber_id=barber_id)

    @classmethod
    def fail(cls, failure: BookingFailure, barber_id: Optional[int] = None) -> "RunResult":
        return cls(ok=False, failure=failure, barber_id=barber_id)

    def for_barber(self, barber_id: int) -> "RunResult":
        return RunResult(ok=self.ok, slots=self.slots, failure=self.failure, barber_id=barber_id)


def validate_and_build_run(
    requested_start: str,
    slots_needed: int,
    available_sorted: Sequence[str],
    granularity: int = 30,
) -> RunResult:
    """
    Pick the run of `slots_needed` consecutive slots starting at
    `requested_start` out of an ascending list of free slots.

    The list never reaches past closing time, so running off its end means
    the service would finish after closing.
    """
    # 1) Start must be free
    try:
        index = list(available_sorted).index(requested_start)
    except ValueError:
        return RunResult.fail(BookingFailure.slot_not_available)

    # 2) Enough slots left before the list ends
    if index + slots_needed > len(available_sorted):
        return RunResult.fail(BookingFailure.insufficient_trailing_slots)

    # 3) Take the run
    required = list(available_sorted[index:index + slots_needed])

    # 4) No holes (break or booked slot) inside the run
    for prev, curr in zip(required, required[1:]):
        if to_minutes(curr) - to_minutes(prev) != granularity:
            return RunResult.fail(BookingFailure.non_contiguous_run)

    return RunResult.success(required)


def validate_for_barber(
    date: str,
    requested_start: str,
    slots_needed: int,
    agenda: BarberAgenda,
    global_template: Optional[WeeklyTemplate],
    global_exceptions: Iterable[ScheduleException],
    booked: Collection[str],
    granularity: int = 30,
) -> RunResult:
    config = barber_day_config(date, agenda, global_template, global_exceptions)
    if config is None:
        return RunResult.fail(BookingFailure.day_unavailable, barber_id=agenda.barber_id)
    available = free_slots(config, booked, granularity)
    result = validate_and_build_run(requested_start, slots_needed, available, granularity)
    return result.for_barber(agenda.barber_id)


def resolve_any_barber(
    date: str,
    requested_start: str,
    slots_needed: int,
    agendas: Sequence[BarberAgenda],
    global_template: Optional[WeeklyTemplate],
    global_exceptions: Iterable[ScheduleException],
    booked_by_barber: Mapping[int, Collection[str]],
    granularity: int = 30,
) -> RunResult:
    """First barber, in list order, whose own grid fits the whole run."""
    global_exceptions = tuple(global_exceptions or ())
    for agenda in agendas:
        result = validate_for_barber(
            date,
            requested_start,
            slots_needed,
            agenda,
            global_template,
            global_exceptions,
            booked_by_barber.get(agenda.barber_id, ()),
            granularity,
        )
        if result.ok:
            return result
    return RunResult.fail(BookingFailure.no_barber_available)


def validate_selection(
    selection: BarberSelection,
    date: str,
    requested_start: str,
    slots_needed: int,
    agendas: Sequence[BarberAgenda],
    global_template: Optional[WeeklyTemplate],
    global_exceptions: Iterable[ScheduleException],
    booked_by_barber: Mapping[int, Collection[str]],
    granularity: int = 30,
) -> RunResult:
    if isinstance(selection, Unselected):
        return RunResult.fail(BookingFailure.no_barber_selected)

    if isinstance(selection, AnyBarber):
        return resolve_any_barber(
            date,
            requested_start,
            slots_needed,
            agendas,
            global_template,
            global_exceptions,
            booked_by_barber,
            granularity,
        )

    if isinstance(selection, SpecificBarber):
        for agenda in agendas:
            if agenda.barber_id == selection.barber_id:
                return validate_for_barber(
                    date,
                    requested_start,
                    slots_needed,
                    agenda,
                    global_template,
                    global_exceptions,
                    booked_by_barber.get(agenda.barber_id, ()),
                    granularity,
                )
        return RunResult.fail(BookingFailure.no_barber_available)

    raise TypeError(f"Unknown barber selection: {selection!r}")


def required_run(start: str, count: int, granularity: int = 30) -> List[str]:
    """The `count` grid slots from `start`, used for appointments stored before slot runs."""
    first = to_minutes(start)
    return [from_minutes(first + i * granularity) for i in range(count)]
