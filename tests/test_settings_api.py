def test_get_settings_creates_defaults(client):
    r = client.get("/api/settings")
    s = r.json()["settings"]
    assert s["id"] == 1
    assert s["next_quote_seq"] == 1


def test_quote_seed_continues_numbering(client):
    r = client.post("/api/settings/quote-seed", json={"start_from": "SCM-Q0123"})
    assert r.status_code == 200
    assert r.json()["settings"]["next_quote_seq"] == 124

    q = client.post("/api/quotes", json={"customer_name": "Acme"}).json()["quote"]
    assert q["quote_no"] == "SCM-Q0124"


def test_quote_seed_errors(client):
    r = client.post("/api/settings/quote-seed", json={})
    assert r.status_code == 400
    assert r.json()["ok"] is False

    r = client.post("/api/settings/quote-seed", json={"start_from": "no digits"})
    assert r.status_code == 400


def test_sales_seed(client):
    client.post("/api/settings/sales-seed", json={"start_from": "SCM-S0099", "sales_series": "SO"})
    order = client.post("/api/sales-orders", json={"customer_name": "Acme"}).json()["order"]
    assert order["order_no"] == "SCM-SO0100"
