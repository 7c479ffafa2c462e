from datetime import timedelta

from catalog_api.models import Company
from catalog_api.services.delivery import repository
from factories import MONDAY

TUESDAY = MONDAY + timedelta(days=1)

WEEKDAYS = [
    {
        "weekday": weekday,
        "enabled": True,
        "morning_start": "09:00",
        "morning_end": "13:00",
        "afternoon_start": "14:00",
        "afternoon_end": "18:00",
    }
    for weekday in range(5)
]


def _create_settings(client, company_id, **fields):
    payload = {
        "company_id": company_id,
        "min_slots_ahead": 0,
        "max_capacity_morning": 2,
        "max_capacity_afternoon": 2,
        "weekdays": WEEKDAYS,
    }
    payload.update(fields)
    return client.post("/delivery/backoffice/settings", json=payload)


# ── Backoffice: settings ─────────────────────────────────────────────────


def test_settings_create_get_update(client, company_id):
    created = _create_settings(client, company_id)
    assert created.status_code == 201
    body = created.json()
    assert len(body["weekdays"]) == 7
    assert body["weekdays"][0]["morning_start"] == "09:00:00"
    assert body["weekdays"][6]["enabled"] is False

    assert _create_settings(client, company_id).status_code == 409

    updated = client.put(
        f"/delivery/backoffice/settings/{company_id}",
        json={"min_slots_ahead": 3, "max_capacity_morning": 5, "max_capacity_afternoon": 1},
    )
    assert updated.status_code == 200
    assert updated.json()["min_slots_ahead"] == 3
    # Weekdays left untouched when not sent
    assert updated.json()["weekdays"][0]["enabled"] is True

    fetched = client.get(f"/delivery/backoffice/settings/{company_id}")
    assert fetched.json()["max_capacity_morning"] == 5


def test_settings_defaults_when_weekdays_omitted(client, company_id):
    response = client.post("/delivery/backoffice/settings", json={"company_id": company_id})

    assert response.status_code == 201
    body = response.json()
    assert body["min_slots_ahead"] == 2
    assert [wd["enabled"] for wd in body["weekdays"]] == [True] * 5 + [False, False]


def test_settings_validation(client, company_id):
    bad_window = [{"weekday": 0, "enabled": True, "morning_start": "13:00", "morning_end": "09:00"}]
    enabled_without_window = [{"weekday": 0, "enabled": True}]

    assert _create_settings(client, company_id, weekdays=bad_window).status_code == 422
    assert _create_settings(client, company_id, weekdays=enabled_without_window).status_code == 422
    assert _create_settings(client, company_id, max_capacity_morning=-1).status_code == 422


def test_settings_not_found(client, company_id):
    assert client.get(f"/delivery/backoffice/settings/{company_id}").status_code == 404
    assert client.get("/delivery/backoffice/settings/999").json()["detail"] == "Company not found"
    update = client.put(f"/delivery/backoffice/settings/{company_id}", json={})
    assert update.status_code == 404


# ── Backoffice: date overrides ───────────────────────────────────────────


def test_schedule_crud(client, company_id):
    _create_settings(client, company_id)
    payload = {
        "company_id": company_id,
        "date": MONDAY.isoformat(),
        "afternoon_enabled": False,
        "custom_max_capacity_morning": 1,
    }

    created = client.post("/delivery/backoffice/schedules", json=payload)
    assert created.status_code == 201
    schedule_id = created.json()["id"]

    assert client.post("/delivery/backoffice/schedules", json=payload).status_code == 409

    listed = client.get(f"/delivery/backoffice/schedules/{company_id}")
    assert [item["id"] for item in listed.json()] == [schedule_id]

    moved = client.put(
        f"/delivery/backoffice/schedules/{schedule_id}",
        json={"date": TUESDAY.isoformat(), "morning_enabled": False},
    )
    assert moved.status_code == 200
    assert moved.json()["date"] == TUESDAY.isoformat()
    assert moved.json()["custom_max_capacity_morning"] is None

    assert client.delete(f"/delivery/backoffice/schedules/{schedule_id}").status_code == 204
    assert client.delete(f"/delivery/backoffice/schedules/{schedule_id}").status_code == 404
    assert client.put(
        f"/delivery/backoffice/schedules/{schedule_id}", json={"date": MONDAY.isoformat()}
    ).status_code == 404


def test_schedule_rejects_half_set_window(client, company_id):
    response = client.post(
        "/delivery/backoffice/schedules",
        json={
            "company_id": company_id,
            "date": MONDAY.isoformat(),
            "custom_morning_start": "10:00",
        },
    )

    assert response.status_code == 422


def test_admin_slots_show_full_half_days(client, company_id):
    _create_settings(client, company_id, min_slots_ahead=4, max_capacity_morning=1)
    reserve = {"company_id": company_id, "date": MONDAY.isoformat(), "slot_type": "morning"}
    assert client.post("/delivery/slots/reserve", json=reserve).status_code == 200

    response = client.get(
        f"/delivery/backoffice/slots/{company_id}",
        params={"start_date": MONDAY.isoformat(), "end_date": MONDAY.isoformat()},
    )

    slots = response.json()[0]["slots"]
    assert [slot["slot_type"] for slot in slots] == ["morning", "afternoon"]
    assert slots[0]["is_available"] is False
    assert slots[0]["remaining_capacity"] == 0


# ── Client flow ──────────────────────────────────────────────────────────


def test_list_slots(client, company_id):
    _create_settings(client, company_id)

    response = client.get(
        "/delivery/slots",
        params={
            "company_id": company_id,
            "start_date": MONDAY.isoformat(),
            "end_date": TUESDAY.isoformat(),
        },
    )

    assert response.status_code == 200
    days = response.json()
    assert [day["date"] for day in days] == [MONDAY.isoformat(), TUESDAY.isoformat()]
    morning = days[0]["slots"][0]
    assert morning["slot_type_name"] == "Morning"
    assert morning["time_range"] == "09:00 - 13:00"
    assert morning["remaining_capacity"] == 2


def test_list_slots_unknown_company(client):
    response = client.get("/delivery/slots", params={"company_id": 999})

    assert response.status_code == 404


def test_list_slots_without_settings_is_empty(client, company_id):
    response = client.get("/delivery/slots", params={"company_id": company_id})

    assert response.status_code == 200
    assert response.json() == []


def test_reserve_release_and_check(client, company_id):
    _create_settings(client, company_id)
    request = {"company_id": company_id, "date": MONDAY.isoformat(), "slot_type": "afternoon"}

    for order_id in (1, 2):
        response = client.post("/delivery/slots/reserve", json={**request, "order_id": order_id})
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Slot reserved"}

    assert client.post("/delivery/slots/reserve", json=request).status_code == 409

    check = client.post("/delivery/slots/check", json=request).json()
    assert check["is_available"] is False
    assert check["message"] == "Slot fully booked"

    assert client.post("/delivery/slots/release", json=request).status_code == 204

    check = client.post("/delivery/slots/check", json=request).json()
    assert check["is_available"] is True
    assert check["remaining_capacity"] == 1
    assert check["max_capacity"] == 2


def test_check_closed_date(client, company_id):
    _create_settings(client, company_id)
    sunday = MONDAY + timedelta(days=6)

    check = client.post(
        "/delivery/slots/check",
        json={"company_id": company_id, "date": sunday.isoformat(), "slot_type": "morning"},
    ).json()

    assert check == {
        "is_available": False,
        "remaining_capacity": 0,
        "max_capacity": 0,
        "message": "No delivery slots for the selected date",
    }


def test_reserve_rejects_unknown_slot_type(client, company_id):
    response = client.post(
        "/delivery/slots/reserve",
        json={"company_id": company_id, "date": MONDAY.isoformat(), "slot_type": "evening"},
    )

    assert response.status_code == 422


def test_settings_update_keeps_omitted_fields(client, company_id):
    _create_settings(client, company_id, min_slots_ahead=0, max_capacity_afternoon=3)

    updated = client.put(
        f"/delivery/backoffice/settings/{company_id}",
        json={"max_capacity_morning": 5},
    ).json()

    assert updated["max_capacity_morning"] == 5
    assert updated["min_slots_ahead"] == 0
    assert updated["max_capacity_afternoon"] == 3
    assert updated["weekdays"][0]["enabled"] is True


def test_settings_update_rejects_negative_values(client, company_id):
    _create_settings(client, company_id)

    response = client.put(
        f"/delivery/backoffice/settings/{company_id}",
        json={"min_slots_ahead": -1},
    )

    assert response.status_code == 422


def test_inactive_company_overrides_are_locked(client, db, company_id):
    _create_settings(client, company_id)
    created = client.post(
        "/delivery/backoffice/schedules",
        json={"company_id": company_id, "date": MONDAY.isoformat()},
    )
    schedule_id = created.json()["id"]

    db.query(Company).filter(Company.id == company_id).update({"is_active": 0})
    db.commit()

    moved = client.put(
        f"/delivery/backoffice/schedules/{schedule_id}",
        json={"date": TUESDAY.isoformat()},
    )
    deleted = client.delete(f"/delivery/backoffice/schedules/{schedule_id}")

    assert moved.status_code == 404
    assert moved.json()["detail"] == "Company not found"
    assert deleted.status_code == 404
    assert repository.get_override_by_id(db, schedule_id).date == MONDAY
