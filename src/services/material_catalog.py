# fil: src/services/material_catalog.py
"""
Materials catalog: list / search, CRUD and free-text matching.

Matching free text to a material (match_material):

  1) exact alias hit (case-insensitive)         -> confidence 1.0, via "alias"
  2) for every material:
       - family AND size found in the text
         (or the text found in them)            -> 0.99
       - otherwise character-bigram Jaccard of
         the text against "FAMILY|SIZE"
  3) best >= 0.93 -> "fuzzy-high", >= 0.80 -> "fuzzy", else no match
"""

from __future__ import annotations

import re
import sys
from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from src.server.models import Material, MaterialAlias
from src.services.errors import BadRequest, Conflict, NotFound
from src.services.geometry import augment_material, normalize_family
from src.services.material_families import grades_for_family
from src.services.system_materials import spec_density

MAX_LIMIT = 1000
DEFAULT_LIMIT = 200

FUZZY_HIGH = 0.93
FUZZY = 0.80

_X = re.compile(r"[×x]", re.IGNORECASE)
_NON = re.compile(r"[^A-Z0-9]")

MATERIAL_FIELDS = (
    "family",
    "size",
    "unit_type",
    "grade",
    "weight_per_ft",
    "weight_per_sqin",
    "price_per_lb",
    "price_per_ft",
    "price_each",
    "description",
)


def _stderr(msg: str) -> None:
    print(f"[materials] {msg}", file=sys.stderr)


def clamp_limit(limit: Optional[int]) -> int:
    try:
        n = int(limit) if limit is not None else DEFAULT_LIMIT
    except (TypeError, ValueError):
        n = DEFAULT_LIMIT
    return max(1, min(MAX_LIMIT, n))


def material_to_dict(m: Material) -> Dict[str, Any]:
    return {"id": m.id, **{f: getattr(m, f) for f in MATERIAL_FIELDS}}


# ---- Listing -----------------------------------------------------------------

def list_materials(
    session: Session,
    family: Optional[str] = None,
    q: Optional[str] = None,
    limit: Optional[int] = None,
) -> List[Material]:
    stmt = select(Material)
    if family:
        stmt = stmt.where(Material.family == family)
    if q:
        like = f"%{q.strip().lower()}%"
        stmt = stmt.where(
            or_(
                func.lower(Material.size).like(like),
                func.lower(func.coalesce(Material.description, "")).like(like),
                func.lower(func.coalesce(Material.grade, "")).like(like),
            )
        )
    stmt = stmt.order_by(Material.family, Material.size).limit(clamp_limit(limit))
    return list(session.exec(stmt).all())


def list_families(session: Session) -> List[str]:
    rows = session.exec(select(Material.family).distinct().order_by(Material.family)).all()
    return [r for r in rows if r]


def list_sizes(session: Session, family: Optional[str]) -> List[str]:
    if not family:
        raise BadRequest("family is required")
    rows = session.exec(
        select(Material.size).where(Material.family == family).order_by(Material.size)
    ).all()
    return list(rows)


def grade_options(family: Optional[str]) -> List[str]:
    if not family:
        return []
    return grades_for_family(normalize_family(family)) or grades_for_family(family)


# ---- CRUD --------------------------------------------------------------------

def _clean_payload(data: Dict[str, Any]) -> Dict[str, Any]:
    out = {k: v for k, v in data.items() if k in MATERIAL_FIELDS}
    for k in ("family", "size"):
        if k in out and out[k] is not None:
            out[k] = str(out[k]).strip()
    return out


def _commit_material(session: Session, m: Material) -> Material:
    session.add(m)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise Conflict(f"Material already exists: {m.family} {m.size}")
    session.refresh(m)
    return m


def _with_density(session: Session, data: Dict[str, Any]) -> Dict[str, Any]:
    # the grade's density from the taxonomy, unless one was sent
    if data.get("density"):
        return data
    density = spec_density(session, data.get("family"), data.get("grade"))
    return {**data, "density": density} if density else data


def create_material(session: Session, data: Dict[str, Any]) -> Material:
    """
    Creates a material. weight_per_ft / weight_per_sqin are inferred from
    the shape when not given.
    """
    payload = _clean_payload(data)
    if not payload.get("family") or not payload.get("size"):
        raise BadRequest("family and size are required")

    # thickness_in / density are not stored but feed the weights
    augmented = augment_material(_with_density(session, {**data, **payload}))
    m = Material(**_clean_payload(augmented))
    m = _commit_material(session, m)
    _stderr(f"Created material {m.id}: {m.family} {m.size}")
    return m


def update_material(session: Session, material_id: int, data: Dict[str, Any]) -> Material:
    m = session.get(Material, material_id)
    if m is None:
        raise NotFound("Material not found")

    payload = _clean_payload(data)
    if "family" in payload and not payload["family"]:
        raise BadRequest("family cannot be empty")
    if "size" in payload and not payload["size"]:
        raise BadRequest("size cannot be empty")

    merged = augment_material(_with_density(session, {**material_to_dict(m), **data, **payload}))
    for k in MATERIAL_FIELDS:
        setattr(m, k, merged.get(k))
    return _commit_material(session, m)


def delete_material(session: Session, material_id: int) -> bool:
    m = session.get(Material, material_id)
    if m is None:
        return False
    for alias in session.exec(select(MaterialAlias).where(MaterialAlias.material_id == material_id)).all():
        session.delete(alias)
    session.delete(m)
    session.commit()
    return True


def add_alias(session: Session, material_id: int, alias_text: str) -> MaterialAlias:
    if session.get(Material, material_id) is None:
        raise NotFound("Material not found")
    text = normalize_text(alias_text)
    if not text:
        raise BadRequest("alias_text is required")

    alias = MaterialAlias(material_id=material_id, alias_text=text)
    session.add(alias)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise Conflict(f"Alias already exists: {text}")
    session.refresh(alias)
    return alias


# ---- Free-text matching ------------------------------------------------------

def normalize_text(text: Optional[str]) -> str:
    if not text:
        return ""
    s = _X.sub("X", str(text).upper())
    return re.sub(r"\s+", " ", s).strip()


def key_from_text(text: Optional[str]) -> str:
    return _NON.sub("", normalize_text(text))


def canon_key(family: Optional[str], size: Optional[str]) -> str:
    return f"{key_from_text(family)}|{key_from_text(size)}"


def _bigrams(s: str) -> set:
    return {s[i:i + 2] for i in range(len(s) - 1)}


def bigram_score(a: str, b: str) -> float:
    """
    Jaccard similarity of character bigrams, 0..1.
    """
    A, B = _bigrams(a), _bigrams(b)
    inter = len(A & B)
    union = len(A) + len(B) - inter
    return inter / union if union else 0.0


def match_material(session: Session, text: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    Returns {"material": Material, "confidence": float, "via": str} or None.
    """
    free = normalize_text(text)
    if not free:
        return None

    alias_hit = session.exec(
        select(Material)
        .join(MaterialAlias, MaterialAlias.material_id == Material.id)
        .where(func.upper(MaterialAlias.alias_text) == free)
    ).first()
    if alias_hit is not None:
        return {"material": alias_hit, "confidence": 1.0, "via": "alias"}

    free_key = key_from_text(free)
    best: Optional[Material] = None
    best_score = -1.0

    for m in session.exec(select(Material)).all():
        size_key = key_from_text(m.size)
        fam_key = key_from_text(m.family)
        size_hit = size_key in free_key or free_key in size_key
        fam_hit = fam_key in free_key or free_key in fam_key
        if size_hit and fam_hit:
            sc = 0.99
        else:
            sc = bigram_score(free_key, canon_key(m.family, m.size))
        if sc > best_score:
            best, best_score = m, sc

    if best is None:
        return None
    if best_score >= FUZZY_HIGH:
        return {"material": best, "confidence": best_score, "via": "fuzzy-high"}
    if best_score >= FUZZY:
        return {"material": best, "confidence": best_score, "via": "fuzzy"}
    return None
