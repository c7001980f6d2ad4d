# fil: src/services/system_materials.py
"""
System materials taxonomy: families, the grades (specs) within them and
their standard sizes.

Specs carry a density in lb/in^3. spec_density() is what the weight math
asks for a (family, grade) pair; without a matching spec it answers None
and the caller falls back to steel.
"""

from __future__ import annotations

import json
import sys
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from src.server.models import MaterialFamily, MaterialSize, MaterialSpec
from src.services.errors import BadRequest, Conflict, NotFound
from src.services.geometry import normalize_family


def _stderr(msg: str) -> None:
    print(f"[system_materials] {msg}", file=sys.stderr)


def _json_text(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    if isinstance(value, str):
        return value
    return json.dumps(value)


def _commit(session: Session, obj, conflict_msg: str):
    session.add(obj)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise Conflict(conflict_msg)
    session.refresh(obj)
    return obj


# ---- Families ----------------------------------------------------------------

def family_to_dict(f: MaterialFamily) -> Dict[str, Any]:
    return {"id": f.id, "name": f.name}


def list_families(session: Session) -> List[MaterialFamily]:
    return list(session.exec(select(MaterialFamily).order_by(MaterialFamily.name)).all())


def get_family(session: Session, family_id: int) -> MaterialFamily:
    f = session.get(MaterialFamily, family_id)
    if f is None:
        raise NotFound("Family not found")
    return f


def _family_name(data: Dict[str, Any]) -> str:
    name = str(data.get("name") or "").strip()
    if not name:
        raise BadRequest("name required")
    return name


def create_family(session: Session, data: Dict[str, Any]) -> MaterialFamily:
    name = _family_name(data)
    f = _commit(session, MaterialFamily(name=name), f"Family already exists: {name}")
    _stderr(f"Created family {f.id}: {f.name}")
    return f


def update_family(session: Session, family_id: int, data: Dict[str, Any]) -> MaterialFamily:
    f = get_family(session, family_id)
    f.name = _family_name(data)
    return _commit(session, f, f"Family already exists: {f.name}")


def delete_family(session: Session, family_id: int) -> bool:
    """
    Deletes a family together with its specs and sizes.
    """
    f = session.get(MaterialFamily, family_id)
    if f is None:
        return False
    for spec in session.exec(select(MaterialSpec).where(MaterialSpec.family_id == family_id)).all():
        session.delete(spec)
    for size in session.exec(select(MaterialSize).where(MaterialSize.family_id == family_id)).all():
        session.delete(size)
    session.delete(f)
    session.commit()
    return True


# ---- Specs -------------------------------------------------------------------

def spec_to_dict(s: MaterialSpec, family_name: Optional[str] = None) -> Dict[str, Any]:
    out = {
        "id": s.id,
        "family_id": s.family_id,
        "grade": s.grade,
        "density": s.density,
        "unit": s.unit,
        "notes": s.notes,
        "ai_searchable": s.ai_searchable,
    }
    if family_name is not None:
        out["family_name"] = family_name
    return out


def list_specs(session: Session) -> List[Dict[str, Any]]:
    stmt = (
        select(MaterialSpec, MaterialFamily.name)
        .join(MaterialFamily, MaterialSpec.family_id == MaterialFamily.id)
        .order_by(MaterialFamily.name, MaterialSpec.grade)
    )
    return [spec_to_dict(s, name) for s, name in session.exec(stmt).all()]


def _density(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        d = float(value)
    except (TypeError, ValueError):
        raise BadRequest("density must be a number")
    if d <= 0:
        raise BadRequest("density must be positive")
    return d


def _apply_spec(session: Session, s: MaterialSpec, data: Dict[str, Any]) -> None:
    if "family_id" in data:
        s.family_id = get_family(session, data["family_id"]).id
    if "grade" in data:
        s.grade = str(data["grade"]).strip().upper() if data["grade"] else None
    if "density" in data:
        s.density = _density(data["density"])
    for field in ("unit", "notes"):
        if field in data:
            setattr(s, field, data[field] or None)
    if "ai_searchable" in data:
        s.ai_searchable = bool(data["ai_searchable"])


def create_spec(session: Session, data: Dict[str, Any]) -> MaterialSpec:
    if data.get("family_id") is None:
        raise BadRequest("family_id required")
    s = MaterialSpec(family_id=0)
    _apply_spec(session, s, data)
    return _commit(session, s, f"Spec already exists: {s.grade}")


def update_spec(session: Session, spec_id: int, data: Dict[str, Any]) -> MaterialSpec:
    s = session.get(MaterialSpec, spec_id)
    if s is None:
        raise NotFound("Spec not found")
    _apply_spec(session, s, data)
    return _commit(session, s, f"Spec already exists: {s.grade}")


def delete_spec(session: Session, spec_id: int) -> bool:
    s = session.get(MaterialSpec, spec_id)
    if s is None:
        return False
    session.delete(s)
    session.commit()
    return True


def spec_density(session: Session, family: Optional[str], grade: Optional[str]) -> Optional[float]:
    """
    Density of a grade, lb/in^3.

    A spec under the same family wins; otherwise any spec with that grade
    ("304" under Stainless also answers for a 304 Angle). None without a grade
    or when nothing matches.
    """
    g = str(grade or "").strip().upper()
    if not g:
        return None

    rows = session.exec(
        select(MaterialSpec, MaterialFamily.name)
        .join(MaterialFamily, MaterialSpec.family_id == MaterialFamily.id)
        .where(func.upper(MaterialSpec.grade) == g, MaterialSpec.density.is_not(None))
        .order_by(MaterialSpec.id)
    ).all()
    if not rows:
        return None

    fam = normalize_family(family)
    for spec, name in rows:
        if fam and normalize_family(name) == fam:
            return spec.density
    return rows[0][0].density


def density_lookup(session: Session):
    """
    Lookup callable for pricing.price_line: (family, grade) -> density or None.
    """
    def _lookup(family: str, grade: Optional[str]) -> Optional[float]:
        return spec_density(session, family, grade)
    return _lookup


# ---- Sizes -------------------------------------------------------------------

def size_to_dict(s: MaterialSize) -> Dict[str, Any]:
    return {"id": s.id, "family_id": s.family_id, "size_label": s.size_label, "dims_json": s.dims_json}


def list_sizes(session: Session, family_id: Optional[int] = None) -> List[MaterialSize]:
    stmt = select(MaterialSize)
    if family_id is not None:
        stmt = stmt.where(MaterialSize.family_id == family_id)
    return list(session.exec(stmt.order_by(MaterialSize.family_id, MaterialSize.size_label)).all())


def _apply_size(session: Session, s: MaterialSize, data: Dict[str, Any]) -> None:
    if "family_id" in data:
        s.family_id = get_family(session, data["family_id"]).id
    if "size_label" in data:
        s.size_label = str(data["size_label"]).strip() if data["size_label"] else None
    if "dims_json" in data:
        s.dims_json = _json_text(data["dims_json"])


def create_size(session: Session, data: Dict[str, Any]) -> MaterialSize:
    if data.get("family_id") is None:
        raise BadRequest("family_id required")
    s = MaterialSize(family_id=0)
    _apply_size(session, s, data)
    session.add(s)
    session.commit()
    session.refresh(s)
    return s


def update_size(session: Session, size_id: int, data: Dict[str, Any]) -> MaterialSize:
    s = session.get(MaterialSize, size_id)
    if s is None:
        raise NotFound("Size not found")
    _apply_size(session, s, data)
    session.add(s)
    session.commit()
    session.refresh(s)
    return s


def delete_size(session: Session, size_id: int) -> bool:
    s = session.get(MaterialSize, size_id)
    if s is None:
        return False
    session.delete(s)
    session.commit()
    return True
