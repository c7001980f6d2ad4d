# fil: src/services/equipment_service.py
"""
Equipment registry: the shop's machines. Plain CRUD; capabilities are
kept as JSON text and handed back parsed.
"""

from __future__ import annotations

import json
import sys
from typing import Any, Dict, List, Optional

from sqlmodel import Session, select

from src.server.models import Equipment
from src.services.errors import BadRequest, NotFound

EDITABLE_FIELDS = ("name", "type", "status", "location", "manual_path", "capabilities_json")


def _stderr(msg: str) -> None:
    print(f"[equipment] {msg}", file=sys.stderr)


def _capabilities_text(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    if isinstance(value, str):
        return value
    return json.dumps(value)


def _capabilities(text: Optional[str]) -> Any:
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return text


def equipment_to_dict(e: Equipment) -> Dict[str, Any]:
    return {
        "id": e.id,
        "name": e.name,
        "type": e.type,
        "status": e.status,
        "location": e.location,
        "manual_path": e.manual_path,
        "capabilities": _capabilities(e.capabilities_json),
        "created_at": e.created_at.isoformat() if e.created_at else None,
    }


def list_equipment(session: Session) -> List[Equipment]:
    return list(session.exec(select(Equipment).order_by(Equipment.id.desc())).all())


def get_equipment(session: Session, equipment_id: int) -> Equipment:
    e = session.get(Equipment, equipment_id)
    if e is None:
        raise NotFound("Equipment not found")
    return e


def _apply(e: Equipment, data: Dict[str, Any]) -> None:
    for field in EDITABLE_FIELDS:
        if field not in data:
            continue
        value = data[field]
        if field == "name":
            value = str(value or "").strip()
            if not value:
                raise BadRequest("name required")
        elif field == "capabilities_json":
            value = _capabilities_text(value)
        else:
            value = (str(value).strip() or None) if value is not None else None
        setattr(e, field, value)


def create_equipment(session: Session, data: Dict[str, Any]) -> Equipment:
    if not str(data.get("name") or "").strip():
        raise BadRequest("name required")
    e = Equipment(name="")
    _apply(e, data)
    session.add(e)
    session.commit()
    session.refresh(e)
    _stderr(f"Created equipment {e.id}: {e.name}")
    return e


def update_equipment(session: Session, equipment_id: int, data: Dict[str, Any]) -> Equipment:
    """
    Applies only the fields sent.
    """
    e = get_equipment(session, equipment_id)
    _apply(e, data)
    session.add(e)
    session.commit()
    session.refresh(e)
    return e


def delete_equipment(session: Session, equipment_id: int) -> bool:
    e = session.get(Equipment, equipment_id)
    if e is None:
        return False
    session.delete(e)
    session.commit()
    return True
