from datetime import datetime, timezone

from fastapi.testclient import TestClient

from restaurant_orders.config import Settings
from restaurant_orders.main import create_app
from restaurant_orders.store import MemoryOrderStore


def _create(client, payload):
    resp = client.post("/orders", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["orders"] == 0
    assert body["persisted"] is True


def test_create_order(client, naan_order):
    body = _create(client, {**naan_order, "specialInstructions": "Crispy"})
    assert body["id"].startswith("ORD")
    assert body["status"] == "pending"
    assert body["paymentStatus"] == "pending"
    assert body["amount"] == 80
    assert body["specialInstructions"] == "Crispy"
    assert body["createdAt"] == body["updatedAt"]
    assert body["items"][0] == {
        "id": "i1", "name": "Naan", "quantity": 2, "price": 40, "category": "Breads", "description": None,
    }


def test_create_validation_errors(client, naan_order):
    assert client.post("/orders", json={**naan_order, "table": ""}).status_code == 422
    assert client.post("/orders", json={**naan_order, "amount": -5}).status_code == 422
    assert client.post("/orders", json={**naan_order, "items": []}).status_code == 422
    assert client.post("/orders", json={**naan_order, "status": "ready"}).status_code == 422
    assert client.get("/orders").json() == []


def test_get_and_missing_order(client, naan_order):
    created = _create(client, naan_order)
    assert client.get(f"/orders/{created['id']}").json() == created
    assert client.get("/orders/ORDNOPE").status_code == 404


def test_patch_flow(client, naan_order):
    created = _create(client, naan_order)
    url = f"/orders/{created['id']}"

    resp = client.patch(url, json={"status": "in-progress"})
    assert resp.status_code == 200
    assert resp.json()["status"] == "in-progress"

    resp = client.patch(url, json={"status": "pending", "paymentStatus": "paid"})
    assert resp.status_code == 409
    detail = resp.json()["detail"]
    assert detail["from"] == "in-progress"
    assert detail["to"] == "pending"
    assert detail["allowed"] == ["cancelled", "completed"]
    assert client.get(url).json()["paymentStatus"] == "pending"

    resp = client.patch(url, json={"paymentStatus": "paid"})
    assert resp.status_code == 200
    assert resp.json()["paymentStatus"] == "paid"

    assert client.patch("/orders/ORDNOPE", json={"paymentStatus": "paid"}).status_code == 404
    assert client.patch(url, json={"table": "9"}).status_code == 422
    assert client.patch(url, json={"items": []}).status_code == 422


def test_delete_always_204(client, naan_order):
    created = _create(client, naan_order)
    assert client.delete(f"/orders/{created['id']}").status_code == 204
    assert client.delete(f"/orders/{created['id']}").status_code == 204
    assert client.get(f"/orders/{created['id']}").status_code == 404


def test_list_filters(client, naan_order):
    first = _create(client, naan_order)
    second = _create(client, {**naan_order, "table": "9", "amount": 120, "customerName": "Ravi"})
    client.patch(f"/orders/{second['id']}", json={"paymentStatus": "paid"})

    ids = lambda resp: [o["id"] for o in resp.json()]  # noqa: E731
    assert ids(client.get("/orders")) == [second["id"], first["id"]]
    assert ids(client.get("/orders", params={"paymentStatus": "paid"})) == [second["id"]]
    assert ids(client.get("/orders", params={"status": "pending"})) == [second["id"], first["id"]]
    assert ids(client.get("/orders", params={"search": "ravi"})) == [second["id"]]
    assert ids(client.get("/orders", params={"sortBy": "lowest"})) == [first["id"], second["id"]]
    assert ids(client.get("/orders", params={"date": first["createdAt"][:10]})) == [second["id"], first["id"]]
    assert first["id"] in ids(client.get("/orders", params={"date": first["createdAt"]}))
    assert ids(client.get("/orders", params={"date": "1999-01-01"})) == []
    assert client.get("/orders", params={"status": "ready"}).status_code == 422


def test_sales_and_stats(client, naan_order):
    paid = _create(client, naan_order)
    _create(client, {**naan_order, "amount": 500})
    client.patch(f"/orders/{paid['id']}", json={"paymentStatus": "paid"})
    today = paid["createdAt"][:10]

    sales = client.get("/orders/sales", params={"date": today}).json()
    assert sales == {"date": today, "dailySales": 80, "totalSales": 80}

    stats = client.get("/orders/stats", params={"date": today}).json()
    assert stats["totalOrders"] == 2
    assert stats["pendingOrders"] == 2
    assert stats["totalSales"] == 80
    assert stats["averageOrderValue"] == 80
    assert stats["growthPercentage"] == 100.0

    assert client.get("/orders/stats", params={"date": "not-a-date"}).status_code == 422


def test_persistence_warning_header(client, store, naan_order):
    created = _create(client, naan_order)
    store.fail_writes = True
    resp = client.patch(f"/orders/{created['id']}", json={"paymentStatus": "paid"})
    assert resp.status_code == 200
    assert resp.headers["Warning"] == '199 - "order state not persisted"'
    assert client.get("/health").json()["persisted"] is False

    store.fail_writes = False
    resp = client.patch(f"/orders/{created['id']}", json={"status": "in-progress"})
    assert "Warning" not in resp.headers


def test_seeded_app_restores_state_across_restarts(naan_order):
    slots = {}
    settings = Settings(SEED_DEMO_ORDERS=True)

    with TestClient(create_app(settings, store=MemoryOrderStore(slots=slots))) as client:
        seeded = client.get("/orders").json()
        assert [o["id"] for o in seeded][:3] == ["ORD001", "ORD002", "ORD003"]
        created = _create(client, naan_order)

    with TestClient(create_app(settings, store=MemoryOrderStore(slots=slots))) as client:
        restored = client.get("/orders").json()
        assert restored[0] == created
        assert len(restored) == len(seeded) + 1


def test_timestamps_are_utc_iso(client, naan_order):
    created = _create(client, naan_order)
    parsed = datetime.fromisoformat(created["createdAt"].replace("Z", "+00:00"))
    assert parsed.tzinfo is not None
    assert parsed.utcoffset() == timezone.utc.utcoffset(None)
