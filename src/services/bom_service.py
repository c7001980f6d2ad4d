# fil: src/services/bom_service.py
"""
Quote BOM rows.

Two ways in:
  - accept_bom_rows: lenient bulk insert of rows coming from a parsed
    material list; defaults fill the gaps and all rows go in one commit.
  - add_bom_row: a single row that has already passed strict validation.

The legacy "length" column is always feet; length_value / length_unit
keep what the user typed.
"""

from __future__ import annotations

import sys
from typing import Any, Dict, List

from sqlmodel import Session, select

from src.server.models import Quote, QuoteBOM
from src.services.errors import NotFound
from src.services.units import normalize_tol, to_feet


def _stderr(msg: str) -> None:
    print(f"[bom] {msg}", file=sys.stderr)


def bom_to_dict(row: QuoteBOM) -> Dict[str, Any]:
    return {
        "id": row.id,
        "quote_id": row.quote_id,
        "material": row.material,
        "size": row.size,
        "grade": row.grade,
        "thickness_or_wall": row.thickness_or_wall,
        "length": row.length,
        "qty": row.qty,
        "unit": row.unit,
        "notes": row.notes,
        "length_value": row.length_value,
        "length_unit": row.length_unit,
        "tol_plus": row.tol_plus,
        "tol_minus": row.tol_minus,
        "tol_unit": row.tol_unit,
    }


def _require_quote(session: Session, quote_id: int) -> Quote:
    q = session.get(Quote, quote_id)
    if q is None or q.deleted_at is not None:
        raise NotFound("Quote not found")
    return q


def _qty(value: Any) -> float:
    try:
        n = float(value)
    except (TypeError, ValueError):
        return 1
    return n or 1


def _row_from_loose(quote_id: int, r: Dict[str, Any]) -> QuoteBOM:
    # Callers may send either length_value or length
    lv = r.get("length_value")
    if lv is None or lv == "":
        lv = r.get("length")
    lu = str(r.get("length_unit") or "ft")
    tol = normalize_tol(r.get("tol_plus"), r.get("tol_minus"), r.get("tol_unit") or lu)

    try:
        length_value = float(lv) if lv not in (None, "") else None
    except (TypeError, ValueError):
        length_value = None

    return QuoteBOM(
        quote_id=quote_id,
        material=str(r.get("material") or ""),
        size=str(r.get("size") or ""),
        grade=str(r.get("grade") or ""),
        thickness_or_wall=str(r.get("thickness_or_wall") or ""),
        length=to_feet(lv, lu),
        qty=_qty(r.get("qty")),
        unit=str(r.get("unit") or "Each"),
        notes=str(r.get("notes") or ""),
        length_value=length_value,
        length_unit=lu,
        **tol,
    )


def accept_bom_rows(session: Session, quote_id: int, rows: List[Dict[str, Any]]) -> int:
    """
    Inserts all rows in one transaction. Returns how many were added.
    """
    _require_quote(session, quote_id)
    items = [r for r in rows or [] if isinstance(r, dict)]
    for r in items:
        session.add(_row_from_loose(quote_id, r))
    session.commit()
    _stderr(f"Quote {quote_id}: accepted {len(items)} BOM rows")
    return len(items)


def add_bom_row(session: Session, quote_id: int, data: Dict[str, Any]) -> QuoteBOM:
    """
    data is already validated: material, size, grade, thickness_or_wall and
    unit are non-empty, length (feet) > 0, qty a positive integer.
    """
    _require_quote(session, quote_id)
    length = float(data["length"])
    row = QuoteBOM(
        quote_id=quote_id,
        material=data["material"],
        size=data["size"],
        grade=data["grade"],
        thickness_or_wall=data["thickness_or_wall"],
        length=length,
        qty=data["qty"],
        unit=data["unit"],
        notes=data.get("notes") or "",
        length_value=length,
        length_unit="ft",
    )
    session.add(row)
    session.commit()
    session.refresh(row)
    return row


def list_bom(session: Session, quote_id: int) -> List[QuoteBOM]:
    _require_quote(session, quote_id)
    stmt = select(QuoteBOM).where(QuoteBOM.quote_id == quote_id).order_by(QuoteBOM.id)
    return list(session.exec(stmt).all())


def delete_bom_row(session: Session, quote_id: int, row_id: int) -> bool:
    row = session.get(QuoteBOM, row_id)
    if row is None or row.quote_id != quote_id:
        return False
    session.delete(row)
    session.commit()
    return True
