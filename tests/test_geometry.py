import math

import pytest

from src.services.geometry import (
    augment_material,
    build_plate_options,
    build_sheet_options,
    estimate_pipe_weight,
    extract_dims,
    infer_weight_per_ft,
    normalize_family,
    parse_inches,
    plate_thicknesses,
    to_fraction,
    weight_per_sqin,
    wpf_from_area,
)


def test_normalize_family_aliases_and_fallback():
    assert normalize_family("angle iron") == "Angle"
    assert normalize_family("  Sq Tube ") == "HSS"
    assert normalize_family("diamond plate") == "Plate"
    assert normalize_family("expanded   metal") == "Expanded Metal"
    assert normalize_family("") == ""
    assert normalize_family(None) == ""


def test_parse_inches():
    assert parse_inches("1/4") == 0.25
    assert parse_inches('2"') == 2.0
    assert parse_inches("2.5 in") == 2.5
    assert math.isnan(parse_inches("abc"))


def test_extract_dims():
    assert extract_dims("2 x 2 x 1/4") == [2.0, 2.0, 0.25]
    assert extract_dims("1-1/2 x 3/16") == [1.5, 0.1875]
    assert extract_dims("4 SCH 40") == [4.0]
    assert extract_dims("") == []


def test_weight_per_ft_by_shape():
    # FlatBar 2 x 1/4: area 0.5 -> 0.5 * 12 * 0.283
    assert infer_weight_per_ft("flat bar", "2 x 1/4") == pytest.approx(1.698)
    # Angle 2 x 2 x 1/4: 0.25 * (2 + 2 - 0.25) = 0.9375
    assert infer_weight_per_ft("Angle", "2 x 2 x 1/4") == wpf_from_area(0.9375)
    # RoundBar 1": pi/4
    assert infer_weight_per_ft("round bar", "1") == wpf_from_area(math.pi / 4)
    # HSS 4 x 4 x 1/4: 16 - 3.5^2 = 3.75
    assert infer_weight_per_ft("HSS", "4 x 4 x 1/4") == wpf_from_area(3.75)
    # Tube 2 OD x 0.125 wall
    assert infer_weight_per_ft("tube", "2 x 0.125") == wpf_from_area(math.pi / 4 * (4 - 1.75 ** 2))


def test_weight_per_ft_unknown_or_short():
    assert infer_weight_per_ft("Beam", "W8 x 31") == 0
    assert infer_weight_per_ft("Angle", "2 x 2") == 0
    assert wpf_from_area(0) == 0


def test_weight_per_sqin():
    assert weight_per_sqin(0.5, 0.283) == 0.1415
    assert weight_per_sqin(0, 0.283) == 0
    assert weight_per_sqin("x", 0.283) == 0


def test_estimate_pipe_weight():
    assert estimate_pipe_weight(2, "SCH 40") == pytest.approx(4.8)
    assert estimate_pipe_weight("2", "sch80") == pytest.approx(8.0)
    assert estimate_pipe_weight("1-1/2", "XS") == pytest.approx(4.5)
    # unknown schedule falls back to 1.5
    assert estimate_pipe_weight(1, "SCH 999") == pytest.approx(1.2)
    assert estimate_pipe_weight("n/a") is None


def test_augment_material_fills_missing_weights():
    out = augment_material({"family": "Angle", "size": "2 x 2 x 1/4"})
    assert out["weight_per_ft"] == wpf_from_area(0.9375)

    plate = augment_material({"family": "Plate", "size": '1/2"', "thickness_in": 0.5, "density": 0.283})
    assert plate["weight_per_sqin"] == 0.1415

    kept = augment_material({"family": "Angle", "size": "2 x 2 x 1/4", "weight_per_ft": 3.19})
    assert kept["weight_per_ft"] == 3.19


def test_to_fraction():
    assert to_fraction(0.25) == '1/4"'
    assert to_fraction(1.5) == '1-1/2"'
    assert to_fraction(2) == '2"'
    assert to_fraction(0.0625) == '1/16"'


def test_plate_and_sheet_catalogs():
    thicknesses = plate_thicknesses()
    assert thicknesses[0] == 0.125
    assert thicknesses[-1] == 8.0
    assert 1.25 in thicknesses

    plates = build_plate_options()
    assert plates[0]["size"] == '1/8"'
    assert all(p["unit_type"] == "Sq In" and p["weight_per_sqin"] > 0 for p in plates)

    sheets = build_sheet_options()
    assert sheets[0]["size"].startswith("24 GA")
    assert len(sheets) == 17


def test_augment_material_uses_given_density():
    alu = augment_material({"family": "FlatBar", "size": "2 x 1/4", "density": 0.098})
    assert alu["weight_per_ft"] == pytest.approx(0.5 * 12 * 0.098, abs=1e-4)
