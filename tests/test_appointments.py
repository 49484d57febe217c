# tests/test_appointments.py
from tests.conftest import future_date


async def _doctor_with_window(make_user, add_window, max_patients=None, **fields):
    doctor = await make_user(role="doctor", name="Dr House", **fields)
    day = future_date()
    await add_window(doctor, day, "09:00", "12:00", max_patients=max_patients)
    return doctor, day


async def test_booking_snapshots_names(client, make_user, add_window, book):
    doctor, day = await _doctor_with_window(make_user, add_window)
    student = await make_user(name="Ada")

    response = await book(student, doctor["id"], day, "09:15", reason="Headache")
    assert response.status_code == 201
    appointment = response.json()["data"]
    assert appointment["status"] == "scheduled"
    assert appointment["student_name"] == "Ada"
    assert appointment["doctor_name"] == "Dr House"
    assert appointment["time"] == "09:15"
    assert appointment["reason"] == "Headache"


async def test_duplicate_booking_is_rejected(client, make_user, add_window, book):
    doctor, day = await _doctor_with_window(make_user, add_window, max_patients=3)
    student = await make_user()

    assert (await book(student, doctor["id"], day, "10:00")).status_code == 201
    response = await book(student, doctor["id"], day, "10:00")
    assert response.status_code == 400
    assert "already has an appointment" in response.json()["message"]


async def test_cancelled_booking_does_not_block_rebooking(client, make_user, add_window, book):
    doctor, day = await _doctor_with_window(make_user, add_window, max_patients=1)
    student = await make_user()

    first = await book(student, doctor["id"], day, "10:00")
    cancel = await client.delete(f"/appointments/{first.json()['data']['id']}", headers=student["headers"])
    assert cancel.json() == {"success": True, "message": "Appointment cancelled"}

    assert (await book(student, doctor["id"], day, "10:00")).status_code == 201


async def test_booking_validation_messages(client, make_user, add_window, book):
    doctor, day = await _doctor_with_window(make_user, add_window)
    student = await make_user()

    cases = [
        ({"date": day, "time": "10:00"}, "doctor_id, date, and time are required"),
        ({"doctor_id": doctor["id"], "date": "2030/01/01", "time": "10:00"}, "Invalid date format. Use YYYY-MM-DD"),
        ({"doctor_id": doctor["id"], "date": "2030-02-30", "time": "10:00"}, "Invalid date format. Use YYYY-MM-DD"),
        ({"doctor_id": doctor["id"], "date": day, "time": "9:00"}, "Invalid time format. Use HH:mm (24-hour format)"),
        ({"doctor_id": doctor["id"], "date": day, "time": "24:00"}, "Invalid time format. Use HH:mm (24-hour format)"),
        ({"doctor_id": doctor["id"], "date": day, "time": "09:00\n"}, "Invalid time format. Use HH:mm (24-hour format)"),
        ({"doctor_id": doctor["id"], "date": day + "\n", "time": "10:00"}, "Invalid date format. Use YYYY-MM-DD"),
        ({"doctor_id": str(doctor["id"]), "date": day, "time": "10:00"}, "Invalid doctor_id. Must be a positive integer"),
        ({"doctor_id": True, "date": day, "time": "10:00"}, "Invalid doctor_id. Must be a positive integer"),
        ({"doctor_id": -4, "date": day, "time": "10:00"}, "Invalid doctor_id. Must be a positive integer"),
    ]
    for body, message in cases:
        response = await client.post("/appointments", json=body, headers=student["headers"])
        assert response.status_code == 400, body
        assert response.json()["message"] == message, body


async def test_booking_with_non_doctor_is_404(client, make_user, book):
    student = await make_user()
    other = await make_user()
    response = await book(student, other["id"], future_date(), "10:00")
    assert response.status_code == 404
    assert response.json()["message"] == "Doctor not found"


async def test_only_students_book(client, make_user, add_window, book):
    doctor, day = await _doctor_with_window(make_user, add_window)
    response = await book(doctor, doctor["id"], day, "10:00")
    assert response.status_code == 403


async def test_public_doctor_list(client, make_user):
    await make_user(role="doctor", name="Dr Who", specialization="general", timePerPatient=25)
    await make_user()
    response = await client.get("/doctors")
    assert response.status_code == 200
    doctors = response.json()["data"]
    assert len(doctors) == 1
    assert doctors[0]["name"] == "Dr Who"
    assert doctors[0]["time_per_patient"] == 25


async def test_student_and_doctor_listings(client, make_user, add_window, book):
    doctor, day = await _doctor_with_window(make_user, add_window)
    student = await make_user()
    await book(student, doctor["id"], day, "11:00")
    await book(student, doctor["id"], day, "09:30")

    mine = await client.get("/appointments/student", headers=student["headers"])
    assert [a["time"] for a in mine.json()["data"]] == ["09:30", "11:00"]

    doctors_view = await client.get("/appointments/doctor", headers=doctor["headers"])
    assert doctors_view.json()["count"] == 2


async def test_doctor_listing_scope(client, make_user, make_admin):
    doctor = await make_user(role="doctor")
    other = await make_user(role="doctor")
    admin = await make_admin()

    forbidden = await client.get(
        "/appointments/doctor", params={"doctor_id": other["id"]}, headers=doctor["headers"]
    )
    assert forbidden.status_code == 403

    missing = await client.get("/appointments/doctor", headers=admin["headers"])
    assert missing.status_code == 400
    assert missing.json()["message"] == "Doctor id is required"

    allowed = await client.get(
        "/appointments/doctor", params={"doctor_id": other["id"]}, headers=admin["headers"]
    )
    assert allowed.status_code == 200


async def test_reschedule_accepts_both_body_shapes(client, make_user, add_window, book):
    doctor, day = await _doctor_with_window(make_user, add_window)
    student = await make_user()
    appointment = (await book(student, doctor["id"], day, "09:00")).json()["data"]
    new_day = future_date(8)

    response = await client.put(
        f"/appointments/{appointment['id']}",
        json={"new_date": new_day, "new_time": "10:30"},
        headers=student["headers"],
    )
    assert response.status_code == 200
    assert (response.json()["data"]["date"], response.json()["data"]["time"]) == (new_day, "10:30")

    response = await client.put(
        f"/appointments/{appointment['id']}", json={"date": day, "time": "11:00"}, headers=doctor["headers"]
    )
    assert response.status_code == 200
    assert response.json()["data"]["time"] == "11:00"


async def test_reschedule_rules(client, make_user, add_window, book):
    doctor, day = await _doctor_with_window(make_user, add_window)
    student = await make_user()
    other = await make_user()
    mine = (await book(student, doctor["id"], day, "09:00")).json()["data"]
    await book(other, doctor["id"], day, "10:00")

    missing = await client.put(f"/appointments/{mine['id']}", json={"date": day}, headers=student["headers"])
    assert missing.status_code == 400
    assert missing.json()["message"].startswith("Both date and time are required for rescheduling")

    bad_time = await client.put(
        f"/appointments/{mine['id']}", json={"date": day, "time": "7pm"}, headers=student["headers"]
    )
    assert bad_time.json()["message"] == "Invalid time format. Use HH:mm (24-hour format)"

    conflict = await client.put(
        f"/appointments/{mine['id']}", json={"date": day, "time": "10:00"}, headers=student["headers"]
    )
    assert conflict.status_code == 400
    assert conflict.json()["message"] == "Doctor not available at this slot"

    await client.delete(f"/appointments/{mine['id']}", headers=student["headers"])
    cancelled = await client.put(
        f"/appointments/{mine['id']}", json={"date": day, "time": "11:00"}, headers=student["headers"]
    )
    assert cancelled.status_code == 400
    assert cancelled.json()["message"] == "Can only reschedule appointments that are currently scheduled"


async def test_ownership_is_enforced(client, make_user, make_admin, add_window, book):
    doctor, day = await _doctor_with_window(make_user, add_window)
    student = await make_user()
    stranger = await make_user()
    admin = await make_admin()
    appointment = (await book(student, doctor["id"], day, "09:00")).json()["data"]

    denied = await client.delete(f"/appointments/{appointment['id']}", headers=stranger["headers"])
    assert denied.status_code == 403
    assert denied.json()["message"] == "Forbidden: Access denied"

    missing = await client.delete("/appointments/9999", headers=student["headers"])
    assert missing.status_code == 404
    assert missing.json()["message"] == "Appointment not found"

    by_admin = await client.delete(f"/appointments/{appointment['id']}", headers=admin["headers"])
    assert by_admin.status_code == 200
