import pytest

from src.services.units import normalize_tol, to_feet, to_iso_date


def test_to_feet_conversions():
    assert to_feet(24, "in") == 2
    assert to_feet(304.8, "mm") == pytest.approx(1.0)
    assert to_feet(1, "m") == pytest.approx(3.28084)
    assert to_feet(7, "ft") == 7
    assert to_feet("5", "furlong") == 5


def test_to_feet_empty_or_garbage():
    assert to_feet(None, "ft") is None
    assert to_feet("", "in") is None
    assert to_feet("abc", "in") is None


def test_normalize_tol():
    assert normalize_tol("", "0.5", " IN ") == {"tol_plus": None, "tol_minus": 0.5, "tol_unit": "in"}
    assert normalize_tol() == {"tol_plus": None, "tol_minus": None, "tol_unit": None}


def test_to_iso_date():
    assert to_iso_date("2024-03-05") == "2024-03-05"
    assert to_iso_date("03/05/2024") == "2024-03-05"
    assert to_iso_date("2024-03-05T14:30:00Z") == "2024-03-05"
    assert to_iso_date("next tuesday") is None
    assert to_iso_date(None) is None
