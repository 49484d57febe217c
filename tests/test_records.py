# tests/test_records.py
import pytest


@pytest.fixture
async def clinic(make_user):
    return {
        "author": await make_user(role="doctor", name="Dr Heart", specialization="cardiology"),
        "colleague": await make_user(role="doctor", name="Dr Pulse", specialization="cardiology"),
        "outsider": await make_user(role="doctor", name="Dr Skin", specialization="dermatology"),
        "student": await make_user(name="Sam"),
    }


async def _write(client, doctor, student_id, **fields):
    body = {"student_id": student_id, "diagnosis": "Arrhythmia", **fields}
    response = await client.post("/records", json=body, headers=doctor["headers"])
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def test_category_defaults_to_specialized(client, clinic):
    record = await _write(client, clinic["author"], clinic["student"]["id"])
    assert record["category"] == "specialized"
    assert record["doctor_name"] == "Dr Heart"


async def test_specialization_visibility(client, clinic):
    student_id = clinic["student"]["id"]
    specialized = await _write(client, clinic["author"], student_id, medicines="Beta blockers")
    general = await _write(client, clinic["author"], student_id, diagnosis="Flu", category="general")

    async def visible_to(doctor):
        response = await client.get(f"/records/doctor/{student_id}", headers=doctor["headers"])
        assert response.status_code == 200
        return {r["id"] for r in response.json()["data"]}

    assert await visible_to(clinic["author"]) == {specialized["id"], general["id"]}
    assert await visible_to(clinic["colleague"]) == {specialized["id"], general["id"]}
    assert await visible_to(clinic["outsider"]) == {general["id"]}

    own = await client.get("/records/student", headers=clinic["student"]["headers"])
    assert {r["id"] for r in own.json()["data"]} == {specialized["id"], general["id"]}


async def test_same_name_different_doctor_does_not_leak(client, make_user, clinic):
    """Visibility follows the author's id, not a doctor who shares the name."""
    namesake = await make_user(role="doctor", name="Dr Heart", specialization="dermatology")
    record = await _write(client, namesake, clinic["student"]["id"])

    response = await client.get(f"/records/doctor/{clinic['student']['id']}", headers=clinic["colleague"]["headers"])
    assert record["id"] not in {r["id"] for r in response.json()["data"]}


async def test_single_record_access(client, make_user, make_admin, clinic):
    record = await _write(client, clinic["author"], clinic["student"]["id"])
    path = f"/records/prescriptions/{record['id']}"

    assert (await client.get(path, headers=clinic["student"]["headers"])).status_code == 200
    assert (await client.get(path, headers=clinic["colleague"]["headers"])).status_code == 200
    assert (await client.get(path, headers=(await make_admin())["headers"])).status_code == 200
    assert (await client.get(path, headers=clinic["outsider"]["headers"])).status_code == 403

    other_student = await make_user()
    assert (await client.get(path, headers=other_student["headers"])).status_code == 403
    assert (await client.get("/records/prescriptions/999", headers=clinic["author"]["headers"])).status_code == 404


async def test_update_prescription(client, clinic):
    record = await _write(client, clinic["author"], clinic["student"]["id"])
    response = await client.put(
        f"/records/prescriptions/{record['id']}",
        json={"medicines": "Aspirin"},
        headers=clinic["author"]["headers"],
    )
    assert response.status_code == 200
    assert response.json()["data"]["medicines"] == "Aspirin"
    assert response.json()["data"]["diagnosis"] == "Arrhythmia"

    missing = await client.put("/records/prescriptions/999", json={"notes": "x"}, headers=clinic["author"]["headers"])
    assert missing.status_code == 404


async def test_record_requires_existing_student(client, clinic):
    response = await client.post(
        "/records",
        json={"student_id": clinic["colleague"]["id"], "diagnosis": "n/a"},
        headers=clinic["author"]["headers"],
    )
    assert response.status_code == 404
    assert response.json()["message"] == "Student not found"
