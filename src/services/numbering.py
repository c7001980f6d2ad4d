# fil: src/services/numbering.py
"""
Quote / sales-order numbering.

Numbers are built from the singleton settings row:

    [org_prefix, system_abbr, series + zero-padded sequence]

Empty parts are dropped and the rest joined with "-", e.g. SCM-Q0001
or SCM-AI-S001.
"""

from __future__ import annotations

import re
from typing import Optional

from sqlmodel import Session, select

from src.server.models import AppSettings, Quote, SalesOrder

_TRAILING_NUMBER = re.compile(r"(\d+)\s*$")


def format_number(
    org_prefix: Optional[str],
    system_abbr: Optional[str],
    series: Optional[str],
    pad: int,
    seq: int,
) -> str:
    padded = str(int(seq)).zfill(int(pad or 0))
    parts = [org_prefix, system_abbr, f"{series or ''}{padded}"]
    return "-".join(p for p in parts if p)


def get_settings_row(session: Session) -> AppSettings:
    """
    Returns the settings row (id=1), creating it with defaults when missing.
    """
    row = session.get(AppSettings, 1)
    if row is None:
        row = AppSettings(id=1)
        session.add(row)
        session.commit()
        session.refresh(row)
    return row


def _quote_no_taken(session: Session, quote_no: str) -> bool:
    return session.exec(select(Quote.id).where(Quote.quote_no == quote_no)).first() is not None


def _order_no_taken(session: Session, order_no: str) -> bool:
    return session.exec(select(SalesOrder.id).where(SalesOrder.order_no == order_no)).first() is not None


def next_quote_no(session: Session) -> str:
    """
    Produces the next free quote number and advances next_quote_seq.
    Numbers already used (e.g. typed in by hand) are skipped.
    """
    s = get_settings_row(session)
    seq = int(s.next_quote_seq or 1)
    while True:
        quote_no = format_number(s.org_prefix, s.system_abbr, s.quote_series, s.quote_pad or 4, seq)
        seq += 1
        if not _quote_no_taken(session, quote_no):
            break

    s.next_quote_seq = seq
    session.add(s)
    session.commit()
    return quote_no


def next_sales_no(session: Session) -> str:
    s = get_settings_row(session)
    seq = int(s.next_sales_seq or 1)
    while True:
        order_no = format_number(s.org_prefix, s.system_abbr, s.sales_series, s.sales_pad or 3, seq)
        seq += 1
        if not _order_no_taken(session, order_no):
            break

    s.next_sales_seq = seq
    session.add(s)
    session.commit()
    return order_no


def peek_quote_no(session: Session) -> str:
    """
    The number next_quote_no would try first, without consuming it.
    """
    s = get_settings_row(session)
    return format_number(s.org_prefix, s.system_abbr, s.quote_series, s.quote_pad or 4, s.next_quote_seq or 1)


def _parse_start_from(start_from: Optional[str]) -> tuple[int, int]:
    if not start_from or not isinstance(start_from, str):
        raise ValueError('start_from (e.g., "SCM-Q0000") is required')

    m = _TRAILING_NUMBER.search(start_from)
    if not m:
        raise ValueError("Could not find a trailing number in start_from")

    digits = m.group(1)
    next_seq = int(digits) + 1
    return next_seq, len(digits)


def seed_quote_sequence(
    session: Session,
    start_from: Optional[str],
    *,
    org_prefix: Optional[str] = None,
    system_abbr: Optional[str] = None,
    quote_series: Optional[str] = None,
    quote_pad: Optional[int] = None,
) -> AppSettings:
    """
    Continues numbering after start_from: "SCM-Q0123" -> next_quote_seq = 124.
    The pad defaults to the number of digits in start_from.
    """
    next_seq, digits = _parse_start_from(start_from)

    s = get_settings_row(session)
    if org_prefix is not None:
        s.org_prefix = org_prefix
    if system_abbr is not None:
        s.system_abbr = system_abbr
    if quote_series is not None:
        s.quote_series = quote_series
    s.quote_pad = quote_pad if isinstance(quote_pad, int) else digits
    s.next_quote_seq = next_seq

    session.add(s)
    session.commit()
    session.refresh(s)
    return s


def seed_sales_sequence(
    session: Session,
    start_from: Optional[str],
    *,
    sales_series: Optional[str] = None,
    sales_pad: Optional[int] = None,
) -> AppSettings:
    next_seq, digits = _parse_start_from(start_from)

    s = get_settings_row(session)
    if sales_series is not None:
        s.sales_series = sales_series
    s.sales_pad = sales_pad if isinstance(sales_pad, int) else digits
    s.next_sales_seq = next_seq

    session.add(s)
    session.commit()
    session.refresh(s)
    return s
