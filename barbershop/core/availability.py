# barbershop/core/availability.py

from dataclasses import dataclass
from typing import Collection, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from .resolver import DayConfig, ScheduleException, WeeklyTemplate, resolve_day_config
from .timegrid import SlotGroups, generate_slots, group_slots

ANY_BARBER = "any"

# Feedback reasons for an empty slot list
NO_BARBER_SELECTED = "no_barber_selected"
DAY_UNAVAILABLE = "day_unavailable"
FULLY_BOOKED = "fully_booked"


@dataclass(frozen=True)
class BarberAgenda:
    """Everything the engine needs to know about one barber for a given date."""

    barber_id: int
    template: Optional[WeeklyTemplate] = None
    exceptions: Tuple[ScheduleException, ...] = ()


@dataclass(frozen=True)
class Unselected:
    pass


@dataclass(frozen=True)
class AnyBarber:
    pass


@dataclass(frozen=True)
class SpecificBarber:
    barber_id: int


BarberSelection = Union[Unselected, AnyBarber, SpecificBarber]


def parse_selection(raw) -> BarberSelection:
    if raw is None or raw == "":
        return Unselected()
    if isinstance(raw, str) and raw.strip().lower() == ANY_BARBER:
        return AnyBarber()
    return SpecificBarber(barber_id=int(raw))


@dataclass(frozen=True)
class AvailabilityView:
    slots: List[str]
    groups: SlotGroups
    reason: Optional[str] = None


def free_slots(
    config: Optional[DayConfig],
    booked: Collection[str],
    granularity: int = 30,
) -> List[str]:
    if config is None or not config.is_actionable:
        return []
    booked = set(booked)
    grid = generate_slots(
        config.open, config.break_start, config.break_end, config.close, granularity
    )
    return [slot for slot in grid if slot not in booked]


def barber_day_config(
    date: str,
    agenda: BarberAgenda,
    global_template: Optional[WeeklyTemplate],
    global_exceptions: Iterable[ScheduleException],
) -> Optional[DayConfig]:
    return resolve_day_config(
        date, agenda.template, agenda.exceptions, global_template, global_exceptions
    )


def union_free_slots(
    date: str,
    agendas: Sequence[BarberAgenda],
    global_template: Optional[WeeklyTemplate],
    global_exceptions: Iterable[ScheduleException],
    booked_by_barber: Mapping[int, Collection[str]],
    granularity: int = 30,
) -> List[str]:
    """
    Slots at least one barber can start.

    This does not promise a single barber can cover a multi-slot service;
    the booking validator checks that against one concrete barber.
    """
    global_exceptions = tuple(global_exceptions or ())
    union = set()
    for agenda in agendas:
        config = barber_day_config(date, agenda, global_template, global_exceptions)
        union.update(
            free_slots(config, booked_by_barber.get(agenda.barber_id, ()), granularity)
        )
    return sorted(union)


def available_slots_for(
    selection: BarberSelection,
    date: str,
    agendas: Sequence[BarberAgenda],
    global_template: Optional[WeeklyTemplate],
    global_exceptions: Iterable[ScheduleException],
    booked_by_barber: Mapping[int, Collection[str]],
    granularity: int = 30,
) -> AvailabilityView:
    global_exceptions = tuple(global_exceptions or ())

    if isinstance(selection, Unselected):
        return AvailabilityView(slots=[], groups=group_slots([]), reason=NO_BARBER_SELECTED)

    if isinstance(selection, AnyBarber):
        candidates = list(agendas)
    elif isinstance(selection, SpecificBarber):
        candidates = [a for a in agendas if a.barber_id == selection.barber_id]
    else:
        raise TypeError(f"Unknown barber selection: {selection!r}")

    configs = {
        a.barber_id: barber_day_config(date, a, global_template, global_exceptions)
        for a in candidates
    }
    if all(config is None for config in configs.values()):
        return AvailabilityView(slots=[], groups=group_slots([]), reason=DAY_UNAVAILABLE)

    if isinstance(selection, AnyBarber):
        slots = union_free_slots(
            date, candidates, global_template, global_exceptions, booked_by_barber, granularity
        )
    else:
        slots = free_slots(
            configs[selection.barber_id],
            booked_by_barber.get(selection.barber_id, ()),
            granularity,
        )

    reason = FULLY_BOOKED if not slots else None
    return AvailabilityView(slots=slots, groups=group_slots(slots), reason=reason)
