# tests/test_pharmacy.py
import pytest


@pytest.fixture
async def pharmacy(client, make_user):
    pharmacist = await make_user(role="pharmacy")
    response = await client.post(
        "/pharmacy/inventory",
        json={"name": "Paracetamol", "stock": 5, "price": 2.5, "category": "analgesic"},
        headers=pharmacist["headers"],
    )
    assert response.status_code == 201
    return {"pharmacist": pharmacist, "medicine": response.json()["data"]}


async def test_order_decrements_stock(client, make_user, pharmacy):
    student = await make_user(name="Kim")
    medicine_id = pharmacy["medicine"]["id"]

    response = await client.post(
        "/pharmacy/orders", json={"medicine_id": medicine_id, "quantity": 2}, headers=student["headers"]
    )
    assert response.status_code == 201
    order_id = response.json()["order_id"]

    inventory = await client.get("/pharmacy/inventory", headers=student["headers"])
    assert inventory.json()["data"][0]["stock"] == 3

    orders = await client.get("/pharmacy/orders/student", headers=student["headers"])
    order = orders.json()["data"][0]
    assert order["id"] == order_id
    assert order["total"] == 5.0
    assert order["status"] == "pending"
    assert order["items"] == [{"medicine_id": medicine_id, "medicine_name": "Paracetamol", "quantity": 2}]


async def test_order_rejections(client, make_user, pharmacy):
    student = await make_user()
    medicine_id = pharmacy["medicine"]["id"]

    too_many = await client.post(
        "/pharmacy/orders", json={"medicine_id": medicine_id, "quantity": 6}, headers=student["headers"]
    )
    assert too_many.status_code == 400
    assert too_many.json()["message"] == "Not enough stock available"

    unknown = await client.post(
        "/pharmacy/orders", json={"medicine_id": 999, "quantity": 1}, headers=student["headers"]
    )
    assert unknown.status_code == 404

    zero = await client.post(
        "/pharmacy/orders", json={"medicine_id": medicine_id, "quantity": 0}, headers=student["headers"]
    )
    assert zero.status_code == 400


async def test_order_status_updates(client, make_user, pharmacy):
    student = await make_user()
    headers = pharmacy["pharmacist"]["headers"]
    order_id = (
        await client.post(
            "/pharmacy/orders",
            json={"medicine_id": pharmacy["medicine"]["id"], "quantity": 1},
            headers=student["headers"],
        )
    ).json()["order_id"]

    ready = await client.put(f"/pharmacy/orders/{order_id}/status", json={"status": "ready"}, headers=headers)
    assert ready.status_code == 200
    assert ready.json()["data"]["status"] == "ready"

    bogus = await client.put(f"/pharmacy/orders/{order_id}/status", json={"status": "shipped"}, headers=headers)
    assert bogus.status_code == 400

    missing = await client.put("/pharmacy/orders/999/status", json={"status": "ready"}, headers=headers)
    assert missing.status_code == 404

    all_orders = await client.get("/pharmacy/orders", headers=headers)
    assert all_orders.json()["count"] == 1


async def test_stock_update_and_roles(client, make_user, pharmacy):
    student = await make_user()
    medicine_id = pharmacy["medicine"]["id"]

    forbidden = await client.put(
        f"/pharmacy/inventory/{medicine_id}", json={"quantity": 50}, headers=student["headers"]
    )
    assert forbidden.status_code == 403

    updated = await client.put(
        f"/pharmacy/inventory/{medicine_id}", json={"quantity": 50}, headers=pharmacy["pharmacist"]["headers"]
    )
    assert updated.json()["data"]["stock"] == 50

    negative = await client.put(
        f"/pharmacy/inventory/{medicine_id}", json={"quantity": -1}, headers=pharmacy["pharmacist"]["headers"]
    )
    assert negative.status_code == 400

    missing = await client.put(
        "/pharmacy/inventory/999", json={"quantity": 1}, headers=pharmacy["pharmacist"]["headers"]
    )
    assert missing.status_code == 404
