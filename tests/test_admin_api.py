def _quote(client, **body):
    body.setdefault("customer_name", "Acme")
    return client.post("/api/quotes", json=body).json()["quote"]


def test_stats(client):
    q = _quote(client)
    _quote(client)
    client.delete(f"/api/quotes/{q['id']}")
    client.post("/api/materials", json={"family": "Angle", "size": "2 x 2 x 1/4"})

    stats = client.get("/api/admin/stats").json()
    assert stats == {"ok": True, "quotes": 2, "active_quotes": 1, "materials": 1, "sales_orders": 0}


def test_settings_and_system_status(client):
    s = client.get("/api/admin/settings").json()["settings"]
    assert s["org_prefix"] == "SCM"

    status = client.get("/api/admin/system-status").json()
    assert status["ok"] is True
    assert status["database"]["ok"] is True


def test_restore_soft_deleted_quote(client):
    q = _quote(client, quote_no="SCM-Q0042")
    client.delete(f"/api/quotes/{q['id']}")

    deleted = client.get("/api/admin/deleted/quotes").json()["quotes"]
    assert [d["quote_no"] for d in deleted] == ["SCM-Q0042"]

    r = client.post("/api/admin/quotes/SCM-Q0042/restore")
    assert r.status_code == 200
    assert client.get(f"/api/quotes/{q['id']}").status_code == 200
    assert client.get("/api/admin/deleted/quotes").json()["quotes"] == []


def test_permanent_delete_removes_bom(client, session):
    from sqlmodel import select

    from src.server.models import QuoteBOM

    q = _quote(client, quote_no="SCM-Q0050")
    client.post(f"/api/quotes/{q['id']}/bom/accept", json={"rows": [{}, {}]})

    r = client.delete("/api/admin/quotes/SCM-Q0050/permanent")
    assert r.json() == {"ok": True, "deleted": True}
    assert session.exec(select(QuoteBOM)).all() == []
    assert client.post("/api/admin/quotes/SCM-Q0050/restore").status_code == 404


def test_deleted_customers_and_restore(client):
    _quote(client, customer_name="Gone Co")
    _quote(client, customer_name="Half Co")
    half = _quote(client, customer_name="Half Co")
    client.delete("/api/quotes/customers/Gone Co")
    client.delete(f"/api/quotes/{half['id']}")

    deleted = client.get("/api/admin/deleted/customers").json()["customers"]
    assert [c["name"] for c in deleted] == ["Gone Co"]

    r = client.post("/api/admin/customers/Gone Co/restore")
    assert r.json()["restored"] == 1
    names = {c["name"] for c in client.get("/api/quotes/customers").json()["customers"]}
    assert names == {"Gone Co", "Half Co"}


def test_api_key_rotation(client, session):
    from src.services.api_keys import get_active_api_key

    r = client.post("/api/admin/api-keys", json={"provider": "openai", "key_value": "sk-first-123"})
    assert r.json()["rotated"] == 0
    r = client.post("/api/admin/api-keys", json={"provider": "openai", "key_value": "sk-second-456"})
    assert r.json()["rotated"] == 1
    new_id = r.json()["inserted"]

    keys = client.get("/api/admin/api-keys").json()["keys"]
    assert {k["key_preview"] for k in keys} == {"sk-f••••", "sk-s••••"}
    assert all("key_value" not in k for k in keys)
    assert [k["id"] for k in keys if k["active"]] == [new_id]

    assert get_active_api_key(session, "openai") == "sk-second-456"

    r = client.patch(f"/api/admin/api-keys/{new_id}", json={"active": False})
    assert r.json()["key"]["active"] is False
    session.expire_all()
    assert get_active_api_key(session, "openai") is None


def test_api_key_missing_fields(client):
    r = client.post("/api/admin/api-keys", json={"provider": "openai"})
    assert r.status_code == 400
    assert r.json() == {"ok": False, "error": "missing_fields"}
