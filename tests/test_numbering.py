import pytest

from src.server.models import Quote
from src.services.numbering import (
    format_number,
    get_settings_row,
    next_quote_no,
    next_sales_no,
    peek_quote_no,
    seed_quote_sequence,
    seed_sales_sequence,
)


def test_format_number_drops_empty_parts():
    assert format_number("SCM", None, "Q", 4, 1) == "SCM-Q0001"
    assert format_number("SCM", "AI", "S", 3, 12) == "SCM-AI-S012"
    assert format_number("", "", "Q", 2, 7) == "Q07"


def test_settings_row_is_created_with_defaults(session):
    s = get_settings_row(session)
    assert s.id == 1
    assert (s.org_prefix, s.quote_series, s.quote_pad, s.next_quote_seq) == ("SCM", "Q", 4, 1)
    assert (s.sales_series, s.sales_pad, s.next_sales_seq) == ("S", 3, 1)


def test_next_numbers_increment(session):
    assert peek_quote_no(session) == "SCM-Q0001"
    assert next_quote_no(session) == "SCM-Q0001"
    assert next_quote_no(session) == "SCM-Q0002"
    assert next_sales_no(session) == "SCM-S001"
    assert get_settings_row(session).next_quote_seq == 3


def test_next_quote_no_skips_numbers_in_use(session):
    session.add(Quote(quote_no="SCM-Q0001", customer_name="Acme"))
    session.commit()
    assert next_quote_no(session) == "SCM-Q0002"


def test_seed_quote_sequence(session):
    s = seed_quote_sequence(session, "SCM-Q0123", system_abbr="AI")
    assert s.next_quote_seq == 124
    assert s.quote_pad == 4
    assert next_quote_no(session) == "SCM-AI-Q0124"


def test_seed_quote_sequence_explicit_pad(session):
    seed_quote_sequence(session, "Q-9", quote_pad=5, quote_series="E")
    assert next_quote_no(session) == "SCM-E00010"


def test_seed_sales_sequence(session):
    seed_sales_sequence(session, "SCM-S041")
    assert next_sales_no(session) == "SCM-S042"


@pytest.mark.parametrize("bad", [None, "", "SCM-Q"])
def test_seed_requires_trailing_number(session, bad):
    with pytest.raises(ValueError):
        seed_quote_sequence(session, bad)
