"""
API tests for GET /availability.
"""

from barbershop.models import Appointment

from conftest import MONDAY, SATURDAY, SUNDAY, service_id


def availability(client, date, barber=None):
    params = {"date": date}
    if barber is not None:
        params["barber"] = barber
    return client.get("/availability", params=params)


class TestAvailability:
    def test_no_barber_selected(self, client, barber):
        res = availability(client, MONDAY)
        assert res.status_code == 200
        body = res.json()
        assert body["slots"] == []
        assert body["reason"] == "no_barber_selected"
        assert body["message"]

    def test_default_hours_for_barber(self, client, barber):
        body = availability(client, MONDAY, barber["id"]).json()
        assert body["slots"][0] == "08:00"
        assert body["slots"][-1] == "17:30"
        assert body["groups"]["morning"][0] == "08:00"
        assert "17:00" in body["groups"]["evening"]
        assert body["reason"] is None

    def test_saturday_short_day(self, client, barber):
        body = availability(client, SATURDAY, barber["id"]).json()
        assert body["slots"][-1] == "12:30"

    def test_sunday_closed(self, client, barber):
        body = availability(client, SUNDAY, "any").json()
        assert body["slots"] == []
        assert body["reason"] == "day_unavailable"

    def test_barber_schedule_with_break(self, client, barber):
        days = {
            day: {"active": True, "open": "09:00", "close": "15:00",
                  "break_start": "12:00", "break_end": "13:00"}
            for day in ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday")
        }
        days["sunday"] = {"active": False}
        client.put("/barbers/me/schedule", json=days, headers=barber["headers"])

        slots = availability(client, MONDAY, barber["id"]).json()["slots"]
        assert slots[0] == "09:00"
        assert "11:30" in slots and "13:00" in slots
        assert "12:00" not in slots and "12:30" not in slots

    def test_global_exception_blocks_day(self, client, admin, barber):
        client.put(
            f"/schedules/global/exceptions/{MONDAY}",
            json={"status": "blocked", "message": "Holiday"},
            headers=admin["headers"],
        )
        body = availability(client, MONDAY, "any").json()
        assert body["reason"] == "day_unavailable"

    def test_barber_exception_opens_sunday(self, client, barber):
        client.put(
            f"/barbers/me/exceptions/{SUNDAY}",
            json={"status": "available", "open": "10:00", "close": "12:00"},
            headers=barber["headers"],
        )
        body = availability(client, SUNDAY, barber["id"]).json()
        assert body["slots"] == ["10:00", "10:30", "11:00", "11:30"]

    def test_booked_slots_disappear(self, client, barber, customer):
        res = client.post(
            "/appointments",
            json={"date": MONDAY, "start": "09:00", "service_id": service_id(client, "cut_and_beard"),
                  "barber_id": barber["id"]},
            headers=customer["headers"],
        )
        assert res.status_code == 201

        slots = availability(client, MONDAY, barber["id"]).json()["slots"]
        assert "09:00" not in slots
        assert "09:30" not in slots
        assert "10:00" in slots

    def test_any_is_union(self, client, barber, second_barber, customer):
        client.post(
            "/appointments",
            json={"date": MONDAY, "start": "09:00", "service_id": service_id(client),
                  "barber_id": barber["id"]},
            headers=customer["headers"],
        )
        assert "09:00" not in availability(client, MONDAY, barber["id"]).json()["slots"]
        assert "09:00" in availability(client, MONDAY, "any").json()["slots"]

    def test_unknown_barber(self, client, customer):
        assert availability(client, MONDAY, customer["id"]).status_code == 404

    def test_bad_query(self, client):
        assert availability(client, "07-01-2030", "any").status_code == 422
        assert availability(client, MONDAY, "someone").status_code == 422

    def test_appointment_without_stored_slots(self, client, session, barber):
        """Rows that only carry a start and a duration still hold their whole run."""
        session.add(Appointment(
            date=MONDAY,
            start="09:00",
            time_slots=[],
            duration=60,
            service_name="cut_and_beard",
            barber_id=barber["id"],
            client_name="Legacy client",
        ))
        session.commit()

        slots = availability(client, MONDAY, barber["id"]).json()["slots"]
        assert "09:00" not in slots
        assert "09:30" not in slots
        assert "10:00" in slots
