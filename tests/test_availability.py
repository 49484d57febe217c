# tests/test_availability.py
from datetime import date, time

from app.system_services.availability_service import calculate_available_slots
from tests.conftest import future_date


async def test_capacity_from_time_per_patient(client, make_user, add_window, book):
    """09:00-12:00 at 30 minutes per patient holds six bookings."""
    doctor = await make_user(role="doctor", timePerPatient=30)
    day = future_date()
    await add_window(doctor, day, "09:00", "12:00")

    for _ in range(6):
        student = await make_user()
        response = await book(student, doctor["id"], day, "09:00")
        assert response.status_code == 201, response.text

    seventh = await make_user()
    response = await book(seventh, doctor["id"], day, "09:00")
    assert response.status_code == 400
    assert "Doctor not available" in response.json()["message"]
    assert "fully booked" in response.json()["message"]


async def test_full_slot_rejection_keeps_the_envelope(client, make_user, add_window, book):
    doctor = await make_user(role="doctor")
    day = future_date()
    await add_window(doctor, day, "09:00", "10:00", max_patients=1)
    first = await make_user()
    assert (await book(first, doctor["id"], day, "09:00")).status_code == 201

    second = await make_user()
    response = await book(second, doctor["id"], day, "09:00")
    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "message": "Doctor not available at this time: this slot is fully booked",
    }

    # The rejected student is still usable afterwards
    listing = await client.get("/appointments/student", headers=second["headers"])
    assert listing.status_code == 200
    assert listing.json()["count"] == 0


async def test_adjacent_windows_end_is_exclusive(client, make_user, add_window, book):
    doctor = await make_user(role="doctor")
    day = future_date()
    await add_window(doctor, day, "17:00", "18:00", max_patients=1)
    await add_window(doctor, day, "18:00", "19:00", max_patients=1)

    first = await make_user()
    assert (await book(first, doctor["id"], day, "18:00")).status_code == 201

    second = await make_user()
    response = await book(second, doctor["id"], day, "18:00")
    assert response.status_code == 400
    assert "Doctor not available" in response.json()["message"]

    # The earlier window is untouched
    third = await make_user()
    assert (await book(third, doctor["id"], day, "17:00")).status_code == 201


async def test_no_window_means_not_available(client, make_user, book):
    doctor = await make_user(role="doctor")
    student = await make_user()
    response = await book(student, doctor["id"], future_date(), "10:00")
    assert response.status_code == 400
    assert response.json()["message"] == "Doctor is not available at this time"


async def test_round_trip_resolves_null_capacity(client, make_user, add_window):
    doctor = await make_user(role="doctor", timePerPatient=20)
    day = future_date(10)
    await add_window(doctor, day, "10:00", "11:00")

    response = await client.get(
        f"/availability/{doctor['id']}",
        params={"startDate": day, "endDate": day},
        headers=doctor["headers"],
    )
    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 1
    window = body["data"][0]
    assert (window["doctor_id"], window["date"], window["start_time"], window["end_time"]) == (
        doctor["id"], day, "10:00", "11:00"
    )
    assert window["max_patients"] == 3
    assert window["max_patients_set"] is False
    assert window["booked_appointments"] == 0


async def test_time_per_patient_change_flows_into_capacity(client, make_user, add_window):
    doctor = await make_user(role="doctor", timePerPatient=20)
    day = future_date()
    await add_window(doctor, day, "10:00", "11:00")

    response = await client.put(
        "/users/doctor/time-per-patient", json={"timePerPatient": 30}, headers=doctor["headers"]
    )
    assert response.status_code == 200

    listing = await client.get("/availability", headers=doctor["headers"])
    assert listing.json()["data"][0]["max_patients"] == 2


async def test_default_time_per_patient_is_fifteen(client, make_user, add_window):
    doctor = await make_user(role="doctor")
    window = await add_window(doctor, future_date(), "09:00", "10:00")
    assert window["time_per_patient"] == 15
    assert window["max_patients"] == 4


async def test_posting_same_window_updates_max_patients(client, make_user, add_window):
    doctor = await make_user(role="doctor")
    day = future_date()
    first = await add_window(doctor, day, "09:00", "10:00", max_patients=2)
    second = await add_window(doctor, day, "09:00", "10:00", max_patients=5)

    assert first["id"] == second["id"]
    assert second["max_patients"] == 5
    listing = await client.get("/availability", headers=doctor["headers"])
    assert listing.json()["count"] == 1


async def test_snake_case_keys_are_accepted(client, make_user):
    doctor = await make_user(role="doctor")
    response = await client.post(
        "/availability",
        json={"date": future_date(), "start_time": "13:00", "end_time": "14:00", "max_patients": 2},
        headers=doctor["headers"],
    )
    assert response.status_code == 201
    assert response.json()["data"]["max_patients"] == 2


async def test_window_validation_messages(client, make_user):
    doctor = await make_user(role="doctor")
    cases = [
        ({"startTime": "09:00", "endTime": "10:00"}, "Date, start time, and end time are required"),
        ({"date": "01-01-2030", "startTime": "09:00", "endTime": "10:00"}, "Invalid date format. Use YYYY-MM-DD"),
        ({"date": future_date(), "startTime": "9am", "endTime": "10:00"}, "Invalid time format. Use HH:mm (24-hour format)"),
        ({"date": future_date(), "startTime": "11:00", "endTime": "10:00"}, "Start time must be before end time"),
        ({"date": future_date(), "startTime": "09:00", "endTime": "10:00", "maxPatients": 0}, "max_patients must be greater than 0"),
    ]
    for body, message in cases:
        response = await client.post("/availability", json=body, headers=doctor["headers"])
        assert response.status_code == 400, body
        assert response.json()["message"] == message


async def test_listing_requires_doctor_for_non_doctors(client, make_user, add_window):
    doctor = await make_user(role="doctor")
    await add_window(doctor, future_date(), "09:00", "10:00")
    student = await make_user()

    missing = await client.get("/availability", headers=student["headers"])
    assert missing.status_code == 400

    listing = await client.get("/availability", params={"doctor_id": doctor["id"]}, headers=student["headers"])
    assert listing.json()["count"] == 1


async def test_bad_range_bound_is_rejected(client, make_user):
    doctor = await make_user(role="doctor")
    response = await client.get(
        f"/availability/{doctor['id']}", params={"startDate": "tomorrow"}, headers=doctor["headers"]
    )
    assert response.status_code == 400


async def test_calculate_available_slots_directly(database, make_user, add_window, book):
    doctor = await make_user(role="doctor", timePerPatient=30)
    day = future_date()
    await add_window(doctor, day, "09:00", "10:00")
    student = await make_user()
    await book(student, doctor["id"], day, "09:30")

    async with database.session() as db:
        slot = await calculate_available_slots(db, doctor["id"], date.fromisoformat(day), time(9, 30))
        assert slot.available is True
        assert slot.max_patients == 2
        assert slot.current_bookings == 1
        assert slot.time_per_patient == 30

        outside = await calculate_available_slots(db, doctor["id"], date.fromisoformat(day), "10:00")
        assert outside.available is False
        assert outside.message == "Doctor is not available at this time"
