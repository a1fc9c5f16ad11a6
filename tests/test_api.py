"""Test HTTP endpoints."""
from datetime import date, timedelta

from .conftest import ANA_ID, BEA_ID, COLOR_ID, HAIRCUT_ID, SPA_COMBO_ID, next_weekday

NEXT_TUESDAY = next_weekday(date.today(), 1)
NEXT_SUNDAY = next_weekday(date.today(), 6)


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"redis": True}


class TestCatalogEndpoints:

    def test_list_items(self, client):
        response = client.get("/catalog/items")

        assert response.status_code == 200
        names = [i["name"] for i in response.json()]
        assert names == ["Color", "Haircut", "Manicure", "Spa Day"]

    def test_get_combo(self, client):
        response = client.get(f"/catalog/items/combo/{SPA_COMBO_ID}")

        assert response.status_code == 200
        data = response.json()
        assert data["duration_minutes"] == 120
        assert data["component_service_ids"] == [HAIRCUT_ID, 3]

    def test_missing_item(self, client):
        assert client.get("/catalog/items/service/999").status_code == 404

    def test_employees_for_service(self, client):
        response = client.get("/employees/", params={"service_id": COLOR_ID})

        assert response.status_code == 200
        assert [e["id"] for e in response.json()] == [ANA_ID]


class TestSlotsEndpoint:

    def test_day_slots(self, client):
        response = client.get("/slots/day", params={
            "item_id": HAIRCUT_ID,
            "date": NEXT_TUESDAY.isoformat(),
        })

        assert response.status_code == 200
        data = response.json()
        assert data["duration_minutes"] == 60
        assert data["open_hour"] == 9
        assert len(data["slots"]) == 36
        assert data["slots"][0] == {
            "start_time": "09:00",
            "end_time": "10:00",
            "employee_id": ANA_ID,
            "employee_name": "Ana Mora",
        }

    def test_employee_filter(self, client):
        response = client.get("/slots/day", params={
            "item_id": HAIRCUT_ID,
            "date": NEXT_TUESDAY.isoformat(),
            "employee_id": BEA_ID,
        })

        assert {s["employee_id"] for s in response.json()["slots"]} == {BEA_ID}

    def test_sunday_is_empty(self, client):
        response = client.get("/slots/day", params={
            "item_id": HAIRCUT_ID,
            "date": NEXT_SUNDAY.isoformat(),
        })

        assert response.status_code == 200
        assert response.json()["slots"] == []

    def test_past_date_rejected(self, client):
        response = client.get("/slots/day", params={
            "item_id": HAIRCUT_ID,
            "date": (date.today() - timedelta(days=1)).isoformat(),
        })

        assert response.status_code == 400

    def test_beyond_horizon_rejected(self, client):
        response = client.get("/slots/day", params={
            "item_id": HAIRCUT_ID,
            "date": (date.today() + timedelta(days=365)).isoformat(),
        })

        assert response.status_code == 400

    def test_unknown_item(self, client):
        response = client.get("/slots/day", params={
            "item_id": 999,
            "date": NEXT_TUESDAY.isoformat(),
        })

        assert response.status_code == 404

    def test_unknown_item_type(self, client):
        response = client.get("/slots/day", params={
            "item_id": HAIRCUT_ID,
            "item_type": "package",
            "date": NEXT_TUESDAY.isoformat(),
        })

        assert response.status_code == 400


class TestReservationEndpoints:

    def payload(self, **overrides):
        data = {
            "item_id": HAIRCUT_ID,
            "item_type": "service",
            "date": NEXT_TUESDAY.isoformat(),
            "start_time": "10:00",
            "employee_id": ANA_ID,
            "customer_name": "Guest",
            "customer_email": "guest@example.com",
        }
        data.update(overrides)
        return data

    def test_book_then_conflict(self, client):
        first = client.post("/reservations/", json=self.payload())

        assert first.status_code == 201
        assert first.json()["status"] == "pending"
        assert first.json()["end_time"] == "11:00"

        second = client.post("/reservations/", json=self.payload(start_time="10:30"))

        assert second.status_code == 409
        assert "just taken" in second.json()["detail"]

    def test_cancel_frees_slot(self, client):
        booked = client.post("/reservations/", json=self.payload()).json()

        cancelled = client.post(f"/reservations/{booked['id']}/cancel")
        assert cancelled.status_code == 200
        assert cancelled.json()["status"] == "cancelled"

        again = client.post("/reservations/", json=self.payload())
        assert again.status_code == 201

    def test_unqualified_employee_not_offered_or_booked(self, client):
        slots = client.get("/slots/day", params={
            "item_id": COLOR_ID,
            "date": NEXT_TUESDAY.isoformat(),
            "employee_id": BEA_ID,
        })
        booked = client.post("/reservations/", json=self.payload(item_id=COLOR_ID, employee_id=BEA_ID))

        assert slots.json()["slots"] == []
        assert booked.status_code == 409

    def test_bad_time_format(self, client):
        response = client.post("/reservations/", json=self.payload(start_time="10am"))

        assert response.status_code == 422

    def test_out_of_range_time(self, client):
        response = client.post("/reservations/", json=self.payload(start_time="25:00"))

        assert response.status_code == 400

    def test_unknown_reservation(self, client):
        assert client.get("/reservations/999").status_code == 404


class TestDraftEndpoints:

    def test_draft_lifecycle(self, client):
        created = client.post("/drafts/", json={
            "item_id": HAIRCUT_ID,
            "date": NEXT_TUESDAY.isoformat(),
            "start_time": "11:00",
            "employee_id": BEA_ID,
            "notes": "window seat",
        })
        assert created.status_code == 201
        draft_id = created.json()["id"]
        assert created.json()["employee_name"] == "Bea Solis"

        fetched = client.get(f"/drafts/{draft_id}")
        assert fetched.status_code == 200
        assert fetched.json()["start_time"] == "11:00"

        resumed = client.post(f"/drafts/{draft_id}/resume", json={
            "client_id": 42,
            "full_name": "Carla Ruiz",
            "email": "carla@example.com",
        })
        assert resumed.status_code == 201
        assert resumed.json()["client_id"] == 42
        assert resumed.json()["status"] == "confirmed"
        assert resumed.json()["notes"] == "window seat"

        assert client.get(f"/drafts/{draft_id}").status_code == 410

    def test_delete_draft(self, client):
        draft_id = client.post("/drafts/", json={
            "item_id": HAIRCUT_ID,
            "date": NEXT_TUESDAY.isoformat(),
            "start_time": "11:00",
            "employee_id": ANA_ID,
        }).json()["id"]

        assert client.delete(f"/drafts/{draft_id}").status_code == 204
        assert client.delete(f"/drafts/{draft_id}").status_code == 404

    def test_resume_unknown_draft(self, client):
        response = client.post("/drafts/missing/resume", json={"client_id": 1, "full_name": "X"})

        assert response.status_code == 410

    def draft_payload(self, **overrides):
        data = {
            "item_id": HAIRCUT_ID,
            "date": NEXT_TUESDAY.isoformat(),
            "start_time": "11:00",
            "employee_id": ANA_ID,
        }
        data.update(overrides)
        return data

    def test_draft_for_past_date_rejected(self, client, fake_redis):
        response = client.post("/drafts/", json=self.draft_payload(
            date=(date.today() - timedelta(days=1)).isoformat(),
        ))

        assert response.status_code == 400
        assert fake_redis.data == {}

    def test_draft_beyond_horizon_rejected(self, client, fake_redis):
        response = client.post("/drafts/", json=self.draft_payload(
            date=(date.today() + timedelta(days=365)).isoformat(),
        ))

        assert response.status_code == 400
        assert fake_redis.data == {}

    def test_draft_needs_an_offered_slot(self, client, fake_redis):
        closed_day = client.post("/drafts/", json=self.draft_payload(date=NEXT_SUNDAY.isoformat()))
        off_grid = client.post("/drafts/", json=self.draft_payload(start_time="11:10"))
        unqualified = client.post("/drafts/", json=self.draft_payload(item_id=COLOR_ID, employee_id=BEA_ID))

        assert closed_day.status_code == 409
        assert off_grid.status_code == 409
        assert unqualified.status_code == 409
        assert fake_redis.data == {}

    def test_draft_for_taken_slot_rejected(self, client, fake_redis):
        booked = client.post("/reservations/", json={
            "item_id": HAIRCUT_ID,
            "date": NEXT_TUESDAY.isoformat(),
            "start_time": "11:00",
            "employee_id": ANA_ID,
            "customer_name": "Guest",
        })
        assert booked.status_code == 201

        response = client.post("/drafts/", json=self.draft_payload())

        assert response.status_code == 409
        assert fake_redis.data == {}
