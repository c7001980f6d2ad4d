def _quote(client, **body):
    body.setdefault("customer_name", "Acme")
    return client.post("/api/quotes", json=body).json()["quote"]


def test_create_list_get(client):
    r = client.post("/api/sales-orders", json={"customer_name": "Acme", "po_number": "PO-77"})
    assert r.status_code == 201
    order = r.json()["order"]
    assert order["order_no"] == "SCM-S001"
    assert order["status"] == "Draft"
    assert order["description"] == ""

    client.post("/api/sales-orders", json={"customer_name": "Beta"})
    orders = client.get("/api/sales-orders").json()["orders"]
    assert [o["customer_name"] for o in orders] == ["Beta", "Acme"]

    r = client.get(f"/api/sales-orders/{order['id']}")
    assert r.json()["order"]["po_number"] == "PO-77"
    assert client.get("/api/sales-orders/999").status_code == 404


def test_create_requires_customer_and_unique_number(client):
    assert client.post("/api/sales-orders", json={}).status_code == 400

    client.post("/api/sales-orders", json={"customer_name": "Acme", "order_no": "SO-1"})
    r = client.post("/api/sales-orders", json={"customer_name": "Acme", "order_no": "SO-1"})
    assert r.status_code == 409


def test_from_quote_accepts_the_quote(client):
    q = _quote(client, description="Handrail")
    r = client.post(f"/api/sales-orders/from-quote/{q['id']}")
    assert r.status_code == 201
    order = r.json()["order"]
    assert order["quote_id"] == q["id"]
    assert order["customer_name"] == "Acme"
    assert order["description"] == "Handrail"

    quote = client.get(f"/api/quotes/{q['id']}").json()["quote"]
    assert quote["status"] == "Accepted"
    assert quote["sales_order_no"] == order["order_no"]

    again = client.post(f"/api/sales-orders/from-quote/{q['id']}")
    assert again.status_code == 409


def test_from_missing_quote(client):
    assert client.post("/api/sales-orders/from-quote/4040").status_code == 404


def test_patch_and_archive(client):
    order = client.post("/api/sales-orders", json={"customer_name": "Acme"}).json()["order"]

    r = client.patch(f"/api/sales-orders/{order['id']}", json={"status": "In Production", "po_number": "PO-9"})
    assert r.json()["order"]["status"] == "In Production"
    assert r.json()["order"]["po_number"] == "PO-9"
    assert r.json()["order"]["description"] == ""

    r = client.post(f"/api/sales-orders/{order['id']}/archive")
    assert r.json()["order"]["status"] == "Archived"


def test_production_router_batches(client):
    q1 = _quote(client)
    q2 = _quote(client, customer_name="Beta")
    client.post(f"/api/quotes/{q1['id']}/bom/accept", json={"rows": [{"material": "Angle"}, {"material": ""}]})
    client.post(f"/api/quotes/{q2['id']}/bom/accept", json={"rows": [{"material": "ANGLE"}, {"material": "Plate"}]})
    o1 = client.post(f"/api/sales-orders/from-quote/{q1['id']}").json()["order"]
    o2 = client.post(f"/api/sales-orders/from-quote/{q2['id']}").json()["order"]

    r = client.post(
        "/api/sales-orders/production-router",
        json={"order_ids": [o1["id"], o2["id"], 999], "options": {"batch_by_material": True}},
    )
    body = r.json()
    assert body["scanned"] == 4
    sizes = {b["key"]: len(b["items"]) for b in body["batches"]}
    assert sizes == {"angle": 2, "misc": 1, "plate": 1}

    r = client.post("/api/sales-orders/production-router", json={"order_ids": [o1["id"]]})
    batches = r.json()["batches"]
    assert [b["key"] for b in batches] == ["ALL"]
    assert batches[0]["items"][0]["order_no"] == o1["order_no"]


def test_production_router_requires_orders(client):
    r = client.post("/api/sales-orders/production-router", json={"order_ids": []})
    assert r.status_code == 400


def test_create_with_unknown_quote(client):
    r = client.post("/api/sales-orders", json={"customer_name": "Acme", "quote_id": 999})
    assert r.status_code == 404
    assert client.get("/api/sales-orders").json()["orders"] == []


def test_create_with_quote_links_it_once(client):
    q = _quote(client)
    r = client.post("/api/sales-orders", json={"customer_name": "Acme", "quote_id": q["id"]})
    assert r.status_code == 201
    order = r.json()["order"]

    quote = client.get(f"/api/quotes/{q['id']}").json()["quote"]
    assert quote["status"] == "Accepted"
    assert quote["sales_order_no"] == order["order_no"]

    assert client.post(f"/api/sales-orders/from-quote/{q['id']}").status_code == 409
    r = client.post("/api/sales-orders", json={"customer_name": "Acme", "quote_id": q["id"]})
    assert r.status_code == 409
