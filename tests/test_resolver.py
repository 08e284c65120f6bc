"""
Unit tests for working-day resolution.

Precedence: barber exception, global exception, barber weekly template,
global weekly template.
"""

from barbershop.core import DayConfig, ExceptionStatus, ScheduleException, resolve_day_config
from barbershop.core.resolver import UNAVAILABLE, find_exception

MONDAY = "2030-01-07"
SUNDAY = "2030-01-13"

SHOP = {
    "monday": DayConfig(active=True, open="08:00", close="18:00", break_start="12:00", break_end="13:00"),
    "sunday": DayConfig(active=False),
}
BARBER = {
    "monday": DayConfig(active=True, open="10:00", close="16:00"),
}


def blocked(date):
    return ScheduleException(date=date, status=ExceptionStatus.blocked, message="Holiday")


def special(date, open_="09:00", close="12:00"):
    return ScheduleException(date=date, status=ExceptionStatus.available, open=open_, close=close)


class TestPrecedence:
    def test_global_template_only(self):
        config = resolve_day_config(MONDAY, None, (), SHOP, ())
        assert config == SHOP["monday"]

    def test_barber_template_beats_global(self):
        config = resolve_day_config(MONDAY, BARBER, (), SHOP, ())
        assert config.open == "10:00"
        assert config.close == "16:00"

    def test_global_exception_beats_barber_template(self):
        config = resolve_day_config(MONDAY, BARBER, (), SHOP, (special(MONDAY),))
        assert (config.open, config.close) == ("09:00", "12:00")

    def test_barber_exception_beats_everything(self):
        config = resolve_day_config(
            MONDAY, BARBER, (special(MONDAY, "14:00", "20:00"),), SHOP, (blocked(MONDAY),)
        )
        assert (config.open, config.close) == ("14:00", "20:00")

    def test_global_block_closes_the_shop(self):
        assert resolve_day_config(MONDAY, BARBER, (), SHOP, (blocked(MONDAY),)) is None

    def test_barber_block(self):
        assert resolve_day_config(MONDAY, None, (blocked(MONDAY),), SHOP, ()) is None

    def test_exception_can_open_a_closed_day(self):
        config = resolve_day_config(SUNDAY, None, (), SHOP, (special(SUNDAY),))
        assert config.active
        assert config.open == "09:00"

    def test_exception_for_another_date_is_ignored(self):
        config = resolve_day_config(MONDAY, None, (), SHOP, (blocked("2030-01-08"),))
        assert config == SHOP["monday"]


class TestFallThrough:
    def test_inactive_barber_day_is_final(self):
        """A day the barber closed is not reopened by the shop hours."""
        barber = {"monday": DayConfig(active=False)}
        assert resolve_day_config(MONDAY, barber, (), SHOP, ()) is None

    def test_incomplete_barber_day_falls_through(self):
        barber = {"monday": DayConfig(active=True, open="10:00")}
        assert resolve_day_config(MONDAY, barber, (), SHOP, ()) == SHOP["monday"]

    def test_missing_barber_weekday_falls_through(self):
        barber = {"tuesday": DayConfig(active=True, open="10:00", close="12:00")}
        assert resolve_day_config(MONDAY, barber, (), SHOP, ()) == SHOP["monday"]

    def test_available_exception_without_hours_falls_through(self):
        broken = ScheduleException(date=MONDAY, status=ExceptionStatus.available)
        assert resolve_day_config(MONDAY, None, (broken,), SHOP, ()) == SHOP["monday"]

    def test_closed_global_day(self):
        assert resolve_day_config(SUNDAY, None, (), SHOP, ()) is None

    def test_weekday_missing_from_global_template(self):
        assert resolve_day_config("2030-01-08", None, (), SHOP, ()) is None

    def test_no_data_at_all(self):
        assert resolve_day_config(MONDAY, None, None, None, None) is None


class TestResultShape:
    def test_result_is_actionable_or_none(self):
        for date in (MONDAY, "2030-01-08", SUNDAY):
            config = resolve_day_config(date, BARBER, (), SHOP, ())
            assert config is None or config.is_actionable

    def test_unavailable_is_not_actionable(self):
        assert not UNAVAILABLE.is_actionable

    def test_find_exception(self):
        exc = blocked(MONDAY)
        assert find_exception([blocked("2030-01-01"), exc], MONDAY) is exc
        assert find_exception(None, MONDAY) is None
