# tests/test_concerns_referrals.py


async def test_concern_flow_keeps_student_anonymous(client, make_user):
    student = await make_user()
    doctor = await make_user(role="doctor")

    created = await client.post(
        "/concerns", json={"category": "stress", "message": "Exams are too much"}, headers=student["headers"]
    )
    assert created.status_code == 201
    concern_id = created.json()["data"]["id"]

    pending = await client.get("/concerns/doctor", headers=doctor["headers"])
    assert pending.json()["count"] == 1
    assert "student_id" not in pending.json()["data"][0]

    reply = await client.post(
        f"/concerns/{concern_id}/reply", json={"reply": "Come see us"}, headers=doctor["headers"]
    )
    assert reply.status_code == 200
    assert reply.json()["data"]["status"] == "responded"
    assert reply.json()["data"]["responded_by"] == doctor["id"]

    mine = await client.get("/concerns/student", headers=student["headers"])
    concern = mine.json()["data"][0]
    assert concern["response"] == "Come see us"
    assert concern["responded_at"] is not None


async def test_doctor_sees_pending_and_own_replies_only(client, make_user):
    student = await make_user()
    first = await make_user(role="doctor")
    second = await make_user(role="doctor")
    for message in ("one", "two"):
        await client.post("/concerns", json={"category": "general", "message": message}, headers=student["headers"])

    concerns = (await client.get("/concerns/doctor", headers=first["headers"])).json()["data"]
    await client.post(f"/concerns/{concerns[0]['id']}/reply", json={"reply": "ok"}, headers=first["headers"])

    assert (await client.get("/concerns/doctor", headers=first["headers"])).json()["count"] == 2
    assert (await client.get("/concerns/doctor", headers=second["headers"])).json()["count"] == 1


async def test_concern_validation(client, make_user):
    student = await make_user()
    doctor = await make_user(role="doctor")

    missing = await client.post("/concerns", json={"category": "stress"}, headers=student["headers"])
    assert missing.status_code == 400

    empty_reply = await client.post("/concerns/1/reply", json={}, headers=doctor["headers"])
    assert empty_reply.status_code == 400

    unknown = await client.post("/concerns/999/reply", json={"reply": "hi"}, headers=doctor["headers"])
    assert unknown.status_code == 404


async def test_referral_approval(client, make_user):
    student = await make_user(name="Riley")
    doctor = await make_user(role="doctor", name="Dr Quinn")

    created = await client.post("/referrals/request", json={"reason": "Knee pain"}, headers=student["headers"])
    assert created.status_code == 201
    referral = created.json()["data"]
    assert (referral["status"], referral["student_name"]) == ("pending", "Riley")

    pending = await client.get("/referrals/doctor", headers=doctor["headers"])
    assert pending.json()["count"] == 1

    approved = await client.put(
        f"/referrals/{referral['id']}/approve", json={"status": "approved"}, headers=doctor["headers"]
    )
    assert approved.json()["data"]["status"] == "approved"
    assert approved.json()["data"]["doctor_notes"] == "Reviewed by Dr Quinn"

    assert (await client.get("/referrals/doctor", headers=doctor["headers"])).json()["count"] == 0
    mine = await client.get("/referrals/student", headers=student["headers"])
    assert mine.json()["data"][0]["status"] == "approved"


async def test_anything_but_approved_rejects(client, make_user):
    student = await make_user()
    doctor = await make_user(role="doctor")
    referral = (
        await client.post("/referrals/request", json={"reason": "Back pain"}, headers=student["headers"])
    ).json()["data"]

    response = await client.put(
        f"/referrals/{referral['id']}/approve", json={"status": "maybe"}, headers=doctor["headers"]
    )
    assert response.json()["data"]["status"] == "rejected"

    missing = await client.put("/referrals/999/approve", json={"status": "approved"}, headers=doctor["headers"])
    assert missing.status_code == 404
