# fil: src/services/price_history.py
"""
Last-price memory and pipe weight overrides.

- price_history: one row per (material key, unit type, grade, domestic),
  the remembered prices stored as JSON.
- pipe_weights: exact lb/ft for a pipe size + schedule, wins over the
  estimate from geometry.estimate_pipe_weight.
"""

from __future__ import annotations

import json
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlmodel import Session, select

from src.server.models import PipeWeight, PriceHistory
from src.services.geometry import normalize_schedule, estimate_pipe_weight
from src.services.pricing import QuoteMeta, price_memory_key, price_payload


def _stderr(msg: str) -> None:
    print(f"[price_history] {msg}", file=sys.stderr)


def _find_price_row(
    session: Session,
    material_key: str,
    unit_type: str,
    grade: str,
    domestic: bool,
) -> Optional[PriceHistory]:
    stmt = select(PriceHistory).where(
        PriceHistory.material_key == material_key,
        PriceHistory.unit_type == unit_type,
        PriceHistory.grade == grade,
        PriceHistory.domestic == domestic,
    )
    return session.exec(stmt).first()


def remember_price(
    session: Session,
    family: Optional[str],
    description: Optional[str],
    unit_type: Optional[str],
    grade: Optional[str],
    domestic: bool,
    payload: Dict[str, Any],
) -> Optional[PriceHistory]:
    """
    Upserts the remembered prices for a material. An empty payload is ignored.
    """
    if not payload:
        return None

    key = price_memory_key(family, description, unit_type, grade, domestic)
    unit = str(unit_type or "")
    grade_key = str(grade or "").upper()
    now = datetime.now(timezone.utc)
    body = json.dumps({**payload, "updated_at": now.isoformat()})

    row = _find_price_row(session, key, unit, grade_key, bool(domestic))
    if row is None:
        row = PriceHistory(
            material_key=key,
            unit_type=unit,
            grade=grade_key,
            domestic=bool(domestic),
            payload_json=body,
            updated_at=now,
        )
    else:
        row.payload_json = body
        row.updated_at = now

    session.add(row)
    session.commit()
    session.refresh(row)
    _stderr(f"Remembered {key}")
    return row


def last_price(
    session: Session,
    family: Optional[str],
    description: Optional[str],
    unit_type: Optional[str],
    grade: Optional[str] = None,
    domestic: bool = False,
) -> Optional[Dict[str, Any]]:
    key = price_memory_key(family, description, unit_type, grade, domestic)
    row = _find_price_row(session, key, str(unit_type or ""), str(grade or "").upper(), bool(domestic))
    if row is None:
        return None
    try:
        return json.loads(row.payload_json)
    except (TypeError, ValueError):
        _stderr(f"Broken payload for {key}, ignoring")
        return None


# ---- Pipe weights ----------------------------------------------------------

def _pipe_key(size: Any, schedule: Optional[str]) -> tuple[str, str]:
    return str(size or "").strip(), normalize_schedule(schedule)


def stored_pipe_weight(session: Session, size: Any, schedule: Optional[str]) -> Optional[float]:
    s, sch = _pipe_key(size, schedule)
    row = session.exec(
        select(PipeWeight).where(PipeWeight.size == s, PipeWeight.schedule == sch)
    ).first()
    return float(row.weight_per_ft) if row else None


def get_pipe_weight(session: Session, size: Any, schedule: Optional[str]) -> Dict[str, Any]:
    """
    {"size", "schedule", "weight_per_ft", "source": "override" | "estimate"}
    weight_per_ft is None when the size cannot be parsed.
    """
    s, sch = _pipe_key(size, schedule)
    stored = stored_pipe_weight(session, s, sch)
    if stored is not None:
        return {"size": s, "schedule": sch, "weight_per_ft": stored, "source": "override"}
    return {"size": s, "schedule": sch, "weight_per_ft": estimate_pipe_weight(s, sch), "source": "estimate"}


def store_pipe_weight(session: Session, size: Any, schedule: Optional[str], weight_per_ft: Any) -> PipeWeight:
    try:
        wpf = float(weight_per_ft)
    except (TypeError, ValueError):
        raise ValueError("weight_per_ft must be a number")
    if wpf <= 0:
        raise ValueError("weight_per_ft must be positive")

    s, sch = _pipe_key(size, schedule)
    if not s:
        raise ValueError("size is required")

    row = session.exec(
        select(PipeWeight).where(PipeWeight.size == s, PipeWeight.schedule == sch)
    ).first()
    if row is None:
        row = PipeWeight(size=s, schedule=sch, weight_per_ft=wpf)
    else:
        row.weight_per_ft = wpf
        row.updated_at = datetime.now(timezone.utc)

    session.add(row)
    session.commit()
    session.refresh(row)
    return row


def pipe_weight_lookup(session: Session):
    """
    Lookup callable for pricing.price_line: stored override or None.
    """
    def _lookup(size: str, schedule: str) -> Optional[float]:
        return stored_pipe_weight(session, size, schedule)
    return _lookup


def remember_row_prices(
    session: Session,
    priced_rows: List[Dict[str, Any]],
    meta: Optional[Dict[str, Any]] = None,
) -> int:
    """
    Stores the prices of every priced row that carries any. Returns how many were stored.

    Only rows with a catalog material (a dict) are remembered; the domestic
    flag is the quote's domestic_only, not a per-row value.
    """
    domestic = QuoteMeta.from_dict(meta).domestic_only
    stored = 0
    for row in priced_rows:
        material = row.get("material")
        if not isinstance(material, dict) or not material:
            continue
        payload = price_payload(row)
        if not payload:
            continue
        remember_price(
            session,
            family=material.get("family") or material.get("type") or material.get("category"),
            description=material.get("size") or material.get("description"),
            unit_type=row.get("unit_type"),
            grade=row.get("grade") or material.get("grade"),
            domestic=domestic,
            payload=payload,
        )
        stored += 1
    return stored
