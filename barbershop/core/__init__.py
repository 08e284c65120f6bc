# barbershop/core/__init__.py
"""
Availability engine.

Pure functions over plain snapshots: no database, no clock, no logging.
Callers load templates, exceptions and booked slots and re-run the engine
whenever that data changes.
"""

from .timegrid import (
    WEEKDAYS,
    ParseError,
    SlotGroups,
    from_minutes,
    generate_slots,
    group_slots,
    overlaps,
    parse_date,
    slots_needed,
    to_minutes,
    weekday_name,
)
from .resolver import (
    DayConfig,
    ExceptionStatus,
    ScheduleException,
    WeeklyTemplate,
    find_exception,
    resolve_day_config,
)
from .availability import (
    ANY_BARBER,
    AnyBarber,
    AvailabilityView,
    BarberAgenda,
    BarberSelection,
    SpecificBarber,
    Unselected,
    available_slots_for,
    free_slots,
    parse_selection,
    union_free_slots,
)
from .booking import (
    BookingFailure,
    RunResult,
    required_run,
    resolve_any_barber,
    validate_and_build_run,
    validate_for_barber,
    validate_selection,
)

__all__ = [
    "WEEKDAYS",
    "ParseError",
    "SlotGroups",
    "from_minutes",
    "generate_slots",
    "group_slots",
    "overlaps",
    "parse_date",
    "slots_needed",
    "to_minutes",
    "weekday_name",
    "DayConfig",
    "ExceptionStatus",
    "ScheduleException",
    "WeeklyTemplate",
    "find_exception",
    "resolve_day_config",
    "ANY_BARBER",
    "AnyBarber",
    "AvailabilityView",
    "BarberAgenda",
    "BarberSelection",
    "SpecificBarber",
    "Unselected",
    "available_slots_for",
    "free_slots",
    "parse_selection",
    "union_free_slots",
    "BookingFailure",
    "RunResult",
    "required_run",
    "resolve_any_barber",
    "validate_and_build_run",
    "validate_for_barber",
    "validate_selection",
]
