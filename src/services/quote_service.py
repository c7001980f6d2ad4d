# fil: src/services/quote_service.py
"""
Quotes: CRUD, soft delete, customers and pricing of a saved quote.

Customers have no table of their own. A customer is a distinct
customer_name on the quotes, exactly as typed ("Paper" != "paper").

Soft delete sets deleted_at; such quotes are hidden from every
listing except the admin "deleted" views and can be restored.
"""

from __future__ import annotations

import json
import sys
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from src.server.models import Quote, QuoteBOM
from src.services.errors import BadRequest, Conflict, NotFound
from src.services.numbering import next_quote_no
from src.services.price_history import pipe_weight_lookup, remember_row_prices
from src.services.system_materials import density_lookup
from src.services.pricing import price_quote
from src.services.units import to_iso_date

QUOTE_TEXT_FIELDS = (
    "quote_no",
    "customer_name",
    "description",
    "requested_by",
    "estimator",
    "status",
    "sales_order_no",
)


def _stderr(msg: str) -> None:
    print(f"[quotes] {msg}", file=sys.stderr)


def _clean_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def _to_int(value: Any, default: int = 0) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return default


def load_app_state(q: Quote) -> Dict[str, Any]:
    if not q.app_state:
        return {}
    try:
        data = json.loads(q.app_state)
    except (TypeError, ValueError):
        _stderr(f"Quote {q.id}: app_state is not valid JSON, ignoring")
        return {}
    return data if isinstance(data, dict) else {}


def quote_to_dict(q: Quote, include_state: bool = False) -> Dict[str, Any]:
    out = {
        "id": q.id,
        "quote_no": q.quote_no,
        "customer_name": q.customer_name,
        "description": q.description,
        "requested_by": q.requested_by,
        "estimator": q.estimator,
        "date": q.date,
        "status": q.status,
        "sales_order_no": q.sales_order_no,
        "rev": q.rev,
        "created_at": q.created_at.isoformat() if q.created_at else None,
        "updated_at": q.updated_at.isoformat() if q.updated_at else None,
        "deleted_at": q.deleted_at.isoformat() if q.deleted_at else None,
    }
    if include_state:
        out["app_state"] = load_app_state(q)
    return out


def _active():
    return Quote.deleted_at.is_(None)


def _quote_no_exists(session: Session, quote_no: str, exclude_id: Optional[int] = None) -> bool:
    stmt = select(Quote.id).where(Quote.quote_no == quote_no)
    if exclude_id is not None:
        stmt = stmt.where(Quote.id != exclude_id)
    return session.exec(stmt).first() is not None


def _commit_quote(session: Session, q: Quote) -> Quote:
    session.add(q)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise Conflict(f"Quote number already exists: {q.quote_no}")
    session.refresh(q)
    return q


# ---- CRUD --------------------------------------------------------------------

def list_quotes(session: Session) -> List[Quote]:
    stmt = select(Quote).where(_active()).order_by(Quote.date.desc(), Quote.id.desc())
    return list(session.exec(stmt).all())


def get_quote(session: Session, quote_id: int) -> Quote:
    q = session.get(Quote, quote_id)
    if q is None or q.deleted_at is not None:
        raise NotFound("Quote not found")
    return q


def create_quote(session: Session, data: Dict[str, Any]) -> Quote:
    """
    Logic:
      1) customer_name is required
      2) date is normalised to YYYY-MM-DD (today when missing or unreadable)
      3) quote_no is generated when blank; an explicit duplicate is a conflict
    """
    customer = _clean_text(data.get("customer_name"))
    if not customer:
        raise BadRequest("customer_name required")

    quote_no = _clean_text(data.get("quote_no"))
    if quote_no and _quote_no_exists(session, quote_no):
        raise Conflict(f"Quote number already exists: {quote_no}")
    if not quote_no:
        quote_no = next_quote_no(session)

    app_state = data.get("app_state")
    q = Quote(
        quote_no=quote_no,
        customer_name=customer,
        description=_clean_text(data.get("description")),
        requested_by=_clean_text(data.get("requested_by")),
        estimator=_clean_text(data.get("estimator")),
        date=to_iso_date(data.get("date")) or date.today().isoformat(),
        status=_clean_text(data.get("status")) or "Draft",
        sales_order_no=_clean_text(data.get("sales_order_no")),
        rev=_to_int(data.get("rev"), 0),
        app_state=json.dumps(app_state) if app_state is not None else None,
    )
    q = _commit_quote(session, q)
    _stderr(f"Created quote {q.quote_no} for {q.customer_name}")
    return q


def update_quote(session: Session, quote_id: int, data: Dict[str, Any]) -> Quote:
    """
    Only the fields present in data are touched.
    """
    q = get_quote(session, quote_id)

    changes: Dict[str, Optional[str]] = {}
    for field in QUOTE_TEXT_FIELDS:
        if field not in data:
            continue
        value = _clean_text(data[field])
        if field in ("quote_no", "customer_name") and not value:
            raise BadRequest(f"{field} cannot be empty")
        changes[field] = value

    new_no = changes.get("quote_no")
    if new_no and _quote_no_exists(session, new_no, exclude_id=q.id):
        raise Conflict(f"Quote number already exists: {new_no}")

    for field, value in changes.items():
        setattr(q, field, value)

    if "date" in data:
        iso = to_iso_date(data.get("date"))
        if data.get("date") and not iso:
            raise BadRequest("date must be YYYY-MM-DD or MM/DD/YYYY")
        q.date = iso or q.date
    if "rev" in data:
        q.rev = _to_int(data.get("rev"), q.rev or 0)
    if "app_state" in data:
        state = data.get("app_state")
        q.app_state = json.dumps(state) if state is not None else None

    q.updated_at = datetime.now(timezone.utc)
    return _commit_quote(session, q)


def soft_delete_quote(session: Session, quote_id: int) -> bool:
    q = session.get(Quote, quote_id)
    if q is None or q.deleted_at is not None:
        return False
    q.deleted_at = datetime.now(timezone.utc)
    session.add(q)
    session.commit()
    _stderr(f"Soft deleted quote {q.quote_no}")
    return True


# ---- Customers -----------------------------------------------------------------

def list_customers(session: Session) -> List[Dict[str, Any]]:
    """
    [{name, quote_count, last_updated}] over active quotes, most recently touched first.
    """
    stmt = (
        select(Quote.customer_name, func.count(Quote.id), func.max(Quote.updated_at))
        .where(_active())
        .group_by(Quote.customer_name)
    )
    out = []
    for name, count, last in session.exec(stmt).all():
        if not name:
            continue
        out.append(
            {
                "name": name,
                "quote_count": int(count or 0),
                "last_updated": last.isoformat() if isinstance(last, datetime) else last,
            }
        )
    out.sort(key=lambda c: c["last_updated"] or "", reverse=True)
    return out


def customer_quotes(session: Session, name: str) -> List[Quote]:
    stmt = (
        select(Quote)
        .where(_active(), Quote.customer_name == name)
        .order_by(Quote.date.desc(), Quote.id.desc())
    )
    return list(session.exec(stmt).all())


def soft_delete_customer(session: Session, name: str) -> int:
    quotes = customer_quotes(session, name)
    now = datetime.now(timezone.utc)
    for q in quotes:
        q.deleted_at = now
        session.add(q)
    session.commit()
    if quotes:
        _stderr(f"Soft deleted customer {name!r} ({len(quotes)} quotes)")
    return len(quotes)


# ---- Soft delete management (admin) -----------------------------------------------

def deleted_quotes(session: Session) -> List[Quote]:
    stmt = select(Quote).where(Quote.deleted_at.is_not(None)).order_by(Quote.deleted_at.desc())
    return list(session.exec(stmt).all())


def deleted_customers(session: Session) -> List[Dict[str, Any]]:
    """
    Customers whose every quote is soft deleted.
    """
    stmt = (
        select(
            Quote.customer_name,
            func.count(Quote.id),
            func.max(Quote.deleted_at),
            func.count(Quote.deleted_at),
        )
        .group_by(Quote.customer_name)
    )
    out = []
    for name, total, last_deleted, n_deleted in session.exec(stmt).all():
        if not name or n_deleted != total:
            continue
        out.append(
            {
                "name": name,
                "quote_count": int(total or 0),
                "deleted_at": last_deleted.isoformat() if isinstance(last_deleted, datetime) else last_deleted,
            }
        )
    return out


def _by_quote_no(session: Session, quote_no: str) -> Quote:
    q = session.exec(select(Quote).where(Quote.quote_no == quote_no)).first()
    if q is None:
        raise NotFound("Quote not found")
    return q


def restore_quote(session: Session, quote_no: str) -> Quote:
    q = _by_quote_no(session, quote_no)
    q.deleted_at = None
    q.updated_at = datetime.now(timezone.utc)
    session.add(q)
    session.commit()
    session.refresh(q)
    _stderr(f"Restored quote {q.quote_no}")
    return q


def permanently_delete_quote(session: Session, quote_no: str) -> bool:
    """
    Removes the quote and its BOM rows for good.
    """
    q = _by_quote_no(session, quote_no)
    for row in session.exec(select(QuoteBOM).where(QuoteBOM.quote_id == q.id)).all():
        session.delete(row)
    session.delete(q)
    session.commit()
    _stderr(f"Permanently deleted quote {quote_no}")
    return True


def restore_customer(session: Session, name: str) -> int:
    quotes = session.exec(
        select(Quote).where(Quote.customer_name == name, Quote.deleted_at.is_not(None))
    ).all()
    now = datetime.now(timezone.utc)
    for q in quotes:
        q.deleted_at = None
        q.updated_at = now
        session.add(q)
    session.commit()
    return len(quotes)


# ---- Pricing -------------------------------------------------------------------

def price_saved_quote(
    session: Session,
    quote_id: int,
    rows: Optional[List[Dict[str, Any]]] = None,
    meta: Optional[Dict[str, Any]] = None,
    remember_prices: bool = False,
) -> Dict[str, Any]:
    """
    Prices a quote and stores the result in its app_state.

    Strategy:
      1. rows / meta from the request, else from the saved app_state
      2. price with stored pipe weight overrides
      3. optionally remember the prices per material
      4. app_state = {..., rows, meta, totals, priced_at}
    """
    q = get_quote(session, quote_id)
    state = load_app_state(q)

    if not rows:
        rows = state.get("rows") or []
    if meta is None:
        meta = state.get("meta") or {}

    result = price_quote(rows, meta, pipe_weight_lookup(session), density_lookup(session))

    if remember_prices:
        n = remember_row_prices(session, result["rows"], meta)
        _stderr(f"Quote {q.quote_no}: remembered prices for {n} rows")

    state.update(
        {
            "rows": rows,
            "meta": meta,
            "totals": result["totals"],
            "priced_at": datetime.now(timezone.utc).isoformat(),
        }
    )
    q.app_state = json.dumps(state)
    q.updated_at = datetime.now(timezone.utc)
    session.add(q)
    session.commit()
    return result
