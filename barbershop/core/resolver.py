# barbershop/core/resolver.py

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Mapping, Optional, Tuple

from .timegrid import weekday_name


class ExceptionStatus(str, Enum):
    blocked = "blocked"
    available = "available"


@dataclass(frozen=True)
class DayConfig:
    active: bool
    open: Optional[str] = None
    close: Optional[str] = None
    break_start: Optional[str] = None
    break_end: Optional[str] = None

    @property
    def is_actionable(self) -> bool:
        return self.active and bool(self.open) and bool(self.close)


@dataclass(frozen=True)
class ScheduleException:
    date: str
    status: ExceptionStatus
    open: Optional[str] = None
    close: Optional[str] = None
    break_start: Optional[str] = None
    break_end: Optional[str] = None
    message: Optional[str] = None


WeeklyTemplate = Mapping[str, DayConfig]

UNAVAILABLE = DayConfig(active=False)


@dataclass(frozen=True)
class ResolverInput:
    date: str
    weekday: str
    barber_template: Optional[WeeklyTemplate]
    barber_exceptions: Tuple[ScheduleException, ...]
    global_template: Optional[WeeklyTemplate]
    global_exceptions: Tuple[ScheduleException, ...]


# A strategy returns a DayConfig to stop the search (inactive = unavailable)
# or None to let the next source decide.
Strategy = Callable[[ResolverInput], Optional[DayConfig]]


def find_exception(
    exceptions: Optional[Iterable[ScheduleException]], date: str
) -> Optional[ScheduleException]:
    for exc in exceptions or ():
        if exc.date == date:
            return exc
    return None


def _from_exception(exc: Optional[ScheduleException]) -> Optional[DayConfig]:
    if exc is None:
        return None
    if exc.status == ExceptionStatus.blocked:
        return UNAVAILABLE
    if exc.open and exc.close:
        return DayConfig(
            active=True,
            open=exc.open,
            close=exc.close,
            break_start=exc.break_start,
            break_end=exc.break_end,
        )
    return None


def from_barber_exception(ctx: ResolverInput) -> Optional[DayConfig]:
    return _from_exception(find_exception(ctx.barber_exceptions, ctx.date))


def from_global_exception(ctx: ResolverInput) -> Optional[DayConfig]:
    return _from_exception(find_exception(ctx.global_exceptions, ctx.date))


def from_barber_template(ctx: ResolverInput) -> Optional[DayConfig]:
    if not ctx.barber_template:
        return None
    entry = ctx.barber_template.get(ctx.weekday)
    if entry is None:
        return None
    if not entry.active:
        # a day the barber explicitly closed beats the shop default
        return UNAVAILABLE
    return entry if entry.is_actionable else None


def from_global_template(ctx: ResolverInput) -> Optional[DayConfig]:
    if not ctx.global_template:
        return None
    entry = ctx.global_template.get(ctx.weekday)
    if entry is not None and entry.is_actionable:
        return entry
    return UNAVAILABLE


RESOLUTION_ORDER: Tuple[Strategy, ...] = (
    from_barber_exception,
    from_global_exception,
    from_barber_template,
    from_global_template,
)


def resolve_day_config(
    date: str,
    barber_template: Optional[WeeklyTemplate],
    barber_exceptions: Optional[Iterable[ScheduleException]],
    global_template: Optional[WeeklyTemplate],
    global_exceptions: Optional[Iterable[ScheduleException]],
) -> Optional[DayConfig]:
    """
    Effective working window for `date`, or None when nobody works that day.

    Sources are consulted in RESOLUTION_ORDER and the first one with an
    opinion wins: barber exception, global exception, barber weekly
    template, global weekly template.
    """
    ctx = ResolverInput(
        date=date,
        weekday=weekday_name(date),
        barber_template=barber_template,
        barber_exceptions=tuple(barber_exceptions or ()),
        global_template=global_template,
        global_exceptions=tuple(global_exceptions or ()),
    )
    for strategy in RESOLUTION_ORDER:
        config = strategy(ctx)
        if config is not None:
            return config if config.is_actionable else None
    return None
