import pytest


@pytest.fixture
def quote_id(client):
    r = client.post("/api/quotes", json={"customer_name": "Acme"})
    return r.json()["quote"]["id"]


def test_accept_rows_with_defaults_and_units(client, quote_id):
    rows = [
        {"material": "Angle", "size": "2 x 2 x 1/4", "length_value": 24, "length_unit": "in", "qty": 4,
         "tol_plus": "0.0625", "tol_minus": ""},
        {"material": "Plate", "length": 2, "length_unit": "m"},
        {},
    ]
    r = client.post(f"/api/quotes/{quote_id}/bom/accept", json={"rows": rows})
    assert r.json() == {"ok": True, "added": 3}

    saved = client.get(f"/api/quotes/{quote_id}/bom").json()["rows"]
    first, second, third = saved

    assert first["length"] == pytest.approx(2.0)
    assert first["length_value"] == 24
    assert first["qty"] == 4
    assert first["tol_plus"] == 0.0625
    assert first["tol_minus"] is None
    assert first["tol_unit"] == "in"

    assert second["length"] == pytest.approx(2 * 3.28084)
    assert second["length_value"] == 2

    assert third["unit"] == "Each"
    assert third["qty"] == 1
    assert third["length_unit"] == "ft"
    assert third["material"] == ""
    assert third["length"] is None


def test_accept_without_rows_adds_nothing(client, quote_id):
    r = client.post(f"/api/quotes/{quote_id}/bom/accept", json={})
    assert r.json() == {"ok": True, "added": 0}


def test_accept_unknown_quote(client):
    r = client.post("/api/quotes/777/bom/accept", json={"rows": [{}]})
    assert r.status_code == 404


VALID_ROW = {
    "material": "HSS",
    "size": "4 x 4 x 1/4",
    "grade": "A500 Gr B",
    "thickness_or_wall": "1/4",
    "length": 20,
    "qty": 3,
    "unit": "Per Foot",
}


def test_add_valid_row(client, quote_id):
    r = client.post(f"/api/quotes/{quote_id}/bom", json=VALID_ROW)
    assert r.status_code == 201
    row = r.json()["row"]
    assert row["length"] == 20
    assert row["notes"] == ""


@pytest.mark.parametrize(
    "change",
    [
        {"material": ""},
        {"grade": ""},
        {"length": 0},
        {"qty": 0},
        {"qty": 1.5},
        {"unit": ""},
    ],
)
def test_add_invalid_row(client, quote_id, change):
    r = client.post(f"/api/quotes/{quote_id}/bom", json={**VALID_ROW, **change})
    assert r.status_code == 422
    body = r.json()
    assert body["ok"] is False
    assert "detail" in body


def test_delete_row(client, quote_id):
    row_id = client.post(f"/api/quotes/{quote_id}/bom", json=VALID_ROW).json()["row"]["id"]
    assert client.delete(f"/api/quotes/{quote_id}/bom/{row_id}").status_code == 200
    assert client.get(f"/api/quotes/{quote_id}/bom").json()["rows"] == []
    assert client.delete(f"/api/quotes/{quote_id}/bom/{row_id}").status_code == 404
