import pytest

from src.services.pricing import (
    QuoteMeta,
    length_in_feet,
    normalize_unit_type,
    price_line,
    price_memory_key,
    price_payload,
    price_quote,
    roll_up,
)


def test_length_in_feet_prefers_legacy_length_ft():
    assert length_in_feet({"length_ft": 10, "length_value": 99, "length_unit": "in"}) == 10


@pytest.mark.parametrize(
    "value, unit, expected",
    [
        (24, "in", 2.0),
        (24, '"', 2.0),
        (6, "ft", 6.0),
        (6, "'", 6.0),
        (2, "m", 2 * 3.28084),
        (2, "metre", 2 * 3.28084),
        (5, "yards", 5.0),
    ],
)
def test_length_in_feet_units(value, unit, expected):
    assert length_in_feet({"length_value": value, "length_unit": unit}) == pytest.approx(expected)


def test_length_in_feet_defaults_to_inches_and_zero():
    assert length_in_feet({"length_value": 36}) == 3.0
    assert length_in_feet({"length_value": ""}) == 0
    assert length_in_feet({}) == 0


def test_unit_type_defaults_by_family():
    assert normalize_unit_type(None, "plate") == "Sq In"
    assert normalize_unit_type("", "Angle") == "Per Foot"
    assert normalize_unit_type("per_foot") == "Per Foot"
    assert normalize_unit_type("EA") == "Each"


def test_per_foot_with_price_per_lb():
    line = price_line(
        {
            "unit_type": "Per Foot",
            "qty": 4,
            "length_ft": 20,
            "material": {"family": "Angle", "size": "2 x 2 x 1/4", "weight_per_ft": 3.19},
            "price_per_lb": 0.85,
        }
    )
    # 20 ft * 3.19 = 63.8 lb each
    assert line["total_weight"] == pytest.approx(255.2)
    assert line["cost_each"] == pytest.approx(54.23)
    assert line["material_cost"] == pytest.approx(216.92)


def test_per_foot_price_per_ft_wins_over_price_per_lb():
    line = price_line(
        {
            "unit_type": "Per Foot",
            "qty": 2,
            "length_value": 120,
            "length_unit": "in",
            "material": {"weight_per_ft": 2},
            "price_per_ft": 3.5,
            "price_per_lb": 100,
        }
    )
    assert line["length_ft"] == 10
    assert line["total_weight"] == 40
    assert line["cost_each"] == 35
    assert line["material_cost"] == 70


def test_material_price_per_lb_wins_over_row():
    line = price_line(
        {
            "unit_type": "Per Foot",
            "qty": 1,
            "length_ft": 1,
            "material": {"weight_per_ft": 10, "price_per_lb": 2},
            "price_per_lb": 5,
        }
    )
    assert line["cost_each"] == 20


def test_each_has_no_weight():
    line = price_line({"unit_type": "Each", "qty": 10, "price_each": 3.5, "material": {"weight_per_ft": 9}})
    assert line["total_weight"] == 0
    assert line["cost_each"] == 3.5
    assert line["material_cost"] == 35


def test_sq_in_plain_and_padded():
    base = {
        "unit_type": "Sq In",
        "qty": 2,
        "length_in": 24,
        "width_in": 12,
        "material": {"family": "Plate", "thickness_in": 0.5, "density": 0.283},
        "price_per_lb": 0.62,
    }
    plain = price_line(base)
    # 288 sq in * 0.1415 = 40.752 lb each
    assert plain["total_weight"] == pytest.approx(81.5, abs=0.01)
    assert plain["cost_each"] == pytest.approx(25.27)

    padded = price_line({**base, "pad_conventional": True})
    # 25 * 13 = 325 sq in
    assert padded["area_sqin"] == 325
    assert padded["total_weight"] == pytest.approx(round(325 * 0.1415 * 2, 2))


def test_sq_in_uses_stored_weight_per_sqin():
    line = price_line(
        {
            "unit_type": "Sq In",
            "qty": 1,
            "length_in": 10,
            "width_in": 10,
            "material": {"weight_per_sqin": 0.2, "thickness_in": 1, "density": 0.283},
            "price_per_lb": 1,
        }
    )
    assert line["total_weight"] == 20
    assert line["cost_each"] == 20


def test_pipe_weight_from_lookup_or_estimate():
    row = {
        "unit_type": "Per Foot",
        "qty": 1,
        "length_ft": 10,
        "schedule": "SCH 40",
        "material": {"family": "Pipe", "size": "2", "weight_per_ft": 1},
        "price_per_lb": 1,
    }
    estimated = price_line(row)
    assert estimated["weight_per_ft"] == pytest.approx(4.8)
    assert estimated["total_weight"] == pytest.approx(48)

    overridden = price_line(row, pipe_weight_lookup=lambda size, schedule: 3.65)
    assert overridden["weight_per_ft"] == 3.65
    assert overridden["total_weight"] == pytest.approx(36.5)


def test_negative_qty_and_garbage_numbers():
    line = price_line({"unit_type": "Each", "qty": -3, "price_each": "abc"})
    assert line["qty"] == 0
    assert line["material_cost"] == 0


def test_processes_and_outsourcing():
    line = price_line(
        {
            "unit_type": "Each",
            "qty": 1,
            "price_each": 0,
            "processes": [
                {"name": "Saw", "hours": 0, "minutes": 30, "rate": 95},
                {"name": "Weld", "hours": 2, "minutes": "", "rate": 110},
            ],
            "outsourcing": [{"name": "Galvanize", "cost": 120}, {"name": "Paint", "cost": "30.5"}],
        }
    )
    assert [p["cost"] for p in line["processes"]] == [47.5, 220]
    assert line["process_cost"] == pytest.approx(267.5)
    assert line["outsource_cost"] == pytest.approx(150.5)


def test_roll_up_totals():
    rows = [
        {"material_cost": 100, "markup_pct": 20, "total_weight": 50, "process_cost": 30, "outsource_cost": 20},
        {"material_cost": 50, "markup_pct": 0, "total_weight": 50, "process_cost": 0, "outsource_cost": 0},
    ]
    meta = QuoteMeta.from_dict(
        {
            "receiving_labor_hours": 1,
            "receiving_rate": 50,
            "break_in_fee": 25,
            "freight_method": "Delivery",
            "freight_amount": 75,
            "commission_pct": 10,
            "sales_tax_pct": 5,
        }
    )
    t = roll_up(rows, meta)

    assert t["material_base"] == 150
    assert t["material_with_markup"] == 170
    assert t["receiving"] == 50
    # 170 + 30 + 20 + 50
    assert t["subtotal_after_markup"] == 270
    assert t["commission"] == 27
    # 270 + 25 + 75 + 27
    assert t["subtotal_before_tax"] == 397
    assert t["sales_tax"] == pytest.approx(19.85)
    assert t["grand"] == pytest.approx(416.85)
    assert t["total_weight"] == 100
    assert t["price_per_lb"] == pytest.approx(4.1685)


def test_will_call_means_no_freight():
    meta = QuoteMeta.from_dict({"freight_method": "Will Call", "freight_amount": 200})
    t = roll_up([{"material_cost": 10}], meta)
    assert t["freight"] == 0
    assert t["grand"] == 10


def test_price_per_lb_zero_without_weight():
    t = roll_up([{"material_cost": 10}], QuoteMeta())
    assert t["price_per_lb"] == 0


def test_price_quote_end_to_end():
    result = price_quote(
        [
            {"unit_type": "Each", "qty": 2, "price_each": 10, "markup_pct": 50},
            "not a row",
        ],
        {"sales_tax_pct": 10},
    )
    assert len(result["rows"]) == 1
    assert result["totals"]["material_with_markup"] == 30
    assert result["totals"]["grand"] == 33


def test_price_memory_key_and_payload():
    key = price_memory_key("Plate", '1/2"', "Sq In", "a36", False)
    assert key == 'PLATE|1/2"|Sq In|A36|ANY'
    assert price_memory_key("pipe", "2", "Per Foot", None, True) == "PIPE|2|Per Foot||DOM"

    assert price_payload({"unit_type": "Per Foot", "price_per_ft": 3.5, "price_per_lb": 0.8}) == {
        "price_per_ft": 3.5,
        "price_per_lb": 0.8,
    }
    assert price_payload({"unit_type": "Each", "price_each": 4}) == {"price_each": 4}
    assert price_payload({"unit_type": "Each"}) == {}


def test_price_payload_prefers_material_price_per_lb():
    row = {"unit_type": "Sq In", "price_per_lb": 0.5, "material": {"family": "Plate", "price_per_lb": 0.75}}
    assert price_payload(row) == {"price_per_lb": 0.75}
    # a plain-text material (BOM shape) falls back to the row
    assert price_payload({"unit_type": "Each", "price_each": 5, "material": "Plate"}) == {"price_each": 5}


def test_quote_meta_domestic_only():
    assert QuoteMeta.from_dict({"domestic_only": True}).domestic_only is True
    assert QuoteMeta.from_dict(None).domestic_only is False
