# fil: src/services/sales_order_service.py
"""
Sales orders and the production router.

The production router pools the BOM rows of the quotes behind a set of
orders and groups them into batches for the shop floor:

  - batch_by_material: one batch per lower-cased material ("misc" when blank)
  - otherwise: a single "ALL" batch
"""

from __future__ import annotations

import sys
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from src.server.models import Quote, QuoteBOM, SalesOrder
from src.services.bom_service import bom_to_dict
from src.services.errors import BadRequest, Conflict, NotFound
from src.services.numbering import next_sales_no
from src.services.quote_service import get_quote

ACCEPTED = "Accepted"
ARCHIVED = "Archived"

PATCHABLE_FIELDS = ("status", "po_number", "description")


def _stderr(msg: str) -> None:
    print(f"[sales_orders] {msg}", file=sys.stderr)


def order_to_dict(o: SalesOrder) -> Dict[str, Any]:
    return {
        "id": o.id,
        "order_no": o.order_no,
        "customer_name": o.customer_name,
        "po_number": o.po_number,
        "description": o.description,
        "status": o.status,
        "quote_id": o.quote_id,
        "created_at": o.created_at.isoformat() if o.created_at else None,
    }


def _commit_order(session: Session, o: SalesOrder) -> SalesOrder:
    session.add(o)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise Conflict(f"Order number already exists: {o.order_no}")
    session.refresh(o)
    return o


def _order_no_exists(session: Session, order_no: str) -> bool:
    return session.exec(select(SalesOrder.id).where(SalesOrder.order_no == order_no)).first() is not None


def _quote_for_order(session: Session, quote_id: Any) -> Optional[Quote]:
    """
    The quote an order will point at: must exist (404) and not already
    be turned into an order (409).
    """
    if quote_id is None:
        return None
    try:
        qid = int(quote_id)
    except (TypeError, ValueError):
        raise BadRequest("quote_id must be an integer")

    q = get_quote(session, qid)
    if q.sales_order_no:
        raise Conflict(f"Quote {q.quote_no} already has sales order {q.sales_order_no}")
    taken = session.exec(select(SalesOrder.order_no).where(SalesOrder.quote_id == q.id)).first()
    if taken is not None:
        raise Conflict(f"Quote {q.quote_no} already has sales order {taken}")
    return q


def create_order(session: Session, data: Dict[str, Any]) -> SalesOrder:
    """
    Creates an order. With a quote_id the quote is marked Accepted and
    gets the order number.
    """
    customer = str(data.get("customer_name") or "").strip()
    if not customer:
        raise BadRequest("customer_name required")

    q = _quote_for_order(session, data.get("quote_id"))

    order_no = str(data.get("order_no") or "").strip()
    if order_no and _order_no_exists(session, order_no):
        raise Conflict(f"Order number already exists: {order_no}")
    if not order_no:
        order_no = next_sales_no(session)

    o = SalesOrder(
        order_no=order_no,
        customer_name=customer,
        po_number=(str(data["po_number"]).strip() or None) if data.get("po_number") else None,
        description=str(data.get("description") or ""),
        status=str(data.get("status") or "Draft"),
        quote_id=q.id if q is not None else None,
    )
    o = _commit_order(session, o)
    _stderr(f"Created order {o.order_no} for {o.customer_name}")

    if q is not None:
        q.status = ACCEPTED
        q.sales_order_no = o.order_no
        q.updated_at = datetime.now(timezone.utc)
        session.add(q)
        session.commit()
        session.refresh(o)
        _stderr(f"Quote {q.quote_no} accepted as {o.order_no}")
    return o


def list_orders(session: Session) -> List[SalesOrder]:
    stmt = select(SalesOrder).order_by(SalesOrder.created_at.desc(), SalesOrder.id.desc())
    return list(session.exec(stmt).all())


def get_order(session: Session, order_id: int) -> SalesOrder:
    o = session.get(SalesOrder, order_id)
    if o is None:
        raise NotFound("Order not found")
    return o


def update_order(session: Session, order_id: int, data: Dict[str, Any]) -> SalesOrder:
    o = get_order(session, order_id)
    for field in PATCHABLE_FIELDS:
        if field in data and data[field] is not None:
            setattr(o, field, str(data[field]))
    return _commit_order(session, o)


def archive_order(session: Session, order_id: int) -> SalesOrder:
    o = get_order(session, order_id)
    o.status = ARCHIVED
    return _commit_order(session, o)


def create_from_quote(session: Session, quote_id: int, data: Optional[Dict[str, Any]] = None) -> SalesOrder:
    """
    Logic:
      1) the quote must exist and not already have an order (409)
      2) the order takes customer and description from the quote
      3) the quote is marked Accepted and gets the order number
    """
    q = _quote_for_order(session, quote_id)

    extra = data or {}
    return create_order(
        session,
        {
            "customer_name": q.customer_name,
            "description": extra.get("description") or q.description or "",
            "po_number": extra.get("po_number"),
            "order_no": extra.get("order_no"),
            "quote_id": q.id,
        },
    )


def production_router(
    session: Session,
    order_ids: List[int],
    batch_by_material: bool = False,
) -> Dict[str, Any]:
    """
    Returns {"batches": [{"key", "items"}], "scanned": n}.
    Unknown order ids and orders without a quote contribute nothing.
    """
    if not order_ids:
        raise BadRequest("order_ids required")

    pool: List[Dict[str, Any]] = []
    for order_id in order_ids:
        order = session.get(SalesOrder, order_id)
        if order is None or order.quote_id is None:
            continue
        rows = session.exec(
            select(QuoteBOM).where(QuoteBOM.quote_id == order.quote_id).order_by(QuoteBOM.id)
        ).all()
        for row in rows:
            pool.append(
                {
                    "order_id": order.id,
                    "order_no": order.order_no,
                    "customer": order.customer_name,
                    "item": bom_to_dict(row),
                }
            )

    batches: List[Dict[str, Any]] = []
    if batch_by_material:
        grouped: Dict[str, List[Dict[str, Any]]] = {}
        for p in pool:
            key = (p["item"].get("material") or "MISC").strip().lower() or "misc"
            grouped.setdefault(key, []).append(p)
        batches = [{"key": k, "items": items} for k, items in grouped.items()]
    else:
        batches.append({"key": "ALL", "items": pool})

    return {"batches": batches, "scanned": len(pool)}
