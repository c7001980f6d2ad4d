import pytest

from src.services.price_history import (
    get_pipe_weight,
    last_price,
    remember_price,
    remember_row_prices,
    store_pipe_weight,
)


def test_remember_and_recall(session):
    assert last_price(session, "Plate", '1/2"', "Sq In", "A36") is None

    remember_price(session, "Plate", '1/2"', "Sq In", "a36", False, {"price_per_lb": 0.62})
    prices = last_price(session, "plate", '1/2"', "Sq In", "A36")
    assert prices["price_per_lb"] == 0.62
    assert "updated_at" in prices

    # upsert keeps one row per key
    remember_price(session, "Plate", '1/2"', "Sq In", "A36", False, {"price_per_lb": 0.7})
    assert last_price(session, "Plate", '1/2"', "Sq In", "A36")["price_per_lb"] == 0.7

    # domestic is a separate key
    assert last_price(session, "Plate", '1/2"', "Sq In", "A36", domestic=True) is None


def test_empty_payload_is_ignored(session):
    assert remember_price(session, "Angle", "2 x 2 x 1/4", "Per Foot", None, False, {}) is None


def test_remember_row_prices(session):
    rows = [
        {"unit_type": "Per Foot", "price_per_ft": 4.1, "material": {"family": "Angle", "size": "2 x 2 x 1/4"}},
        {"unit_type": "Each", "material": {"family": "Hardware", "size": "bolt"}},
    ]
    assert remember_row_prices(session, rows) == 1
    assert last_price(session, "Angle", "2 x 2 x 1/4", "Per Foot")["price_per_ft"] == 4.1
    assert last_price(session, "Hardware", "bolt", "Each") is None


def test_pipe_weight_estimate_then_override(session):
    est = get_pipe_weight(session, "2", "sch40")
    assert est["source"] == "estimate"
    assert est["schedule"] == "SCH 40"
    assert est["weight_per_ft"] == pytest.approx(4.8)

    store_pipe_weight(session, "2", "SCH 40", 3.653)
    stored = get_pipe_weight(session, "2", "SCH 40")
    assert stored == {"size": "2", "schedule": "SCH 40", "weight_per_ft": 3.653, "source": "override"}

    store_pipe_weight(session, "2", "SCH 40", 3.66)
    assert get_pipe_weight(session, "2", "SCH 40")["weight_per_ft"] == 3.66


@pytest.mark.parametrize("weight", [0, -1, "heavy"])
def test_store_pipe_weight_rejects_bad_weight(session, weight):
    with pytest.raises(ValueError):
        store_pipe_weight(session, "2", "SCH 40", weight)


def test_remember_row_prices_uses_quote_domestic_flag(session):
    rows = [
        {"unit_type": "Sq In", "price_per_lb": 0.9, "material": {"family": "Plate", "size": '3/8"'}},
        {"unit_type": "Each", "price_each": 5, "material": "Plate"},
    ]
    assert remember_row_prices(session, rows, {"domestic_only": True}) == 1
    assert last_price(session, "Plate", '3/8"', "Sq In", domestic=True)["price_per_lb"] == 0.9
    assert last_price(session, "Plate", '3/8"', "Sq In") is None
