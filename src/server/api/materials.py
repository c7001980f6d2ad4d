# fil: src/server/api/materials.py
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session

from src.server.db.session import get_session
from src.server.schemas.material import AliasIn, MatchIn, MaterialIn
from src.services.geometry import DENSITY_STEEL, build_plate_options, build_sheet_options
from src.services.material_catalog import (
    add_alias,
    create_material,
    delete_material,
    grade_options,
    list_families,
    list_materials,
    list_sizes,
    match_material,
    material_to_dict,
    update_material,
)
from src.services.system_materials import spec_density

router = APIRouter(prefix="/api/materials", tags=["materials"])


# ==============================
# GENERATED CATALOGS
# ==============================

@router.get("/catalog/plate", summary="Plate thicknesses with weight per sq in")
def plate_catalog(grade: Optional[str] = Query(None), session: Session = Depends(get_session)):
    density = spec_density(session, "Plate", grade) or DENSITY_STEEL
    return {"ok": True, "grade": grade, "items": build_plate_options(density)}


@router.get("/catalog/sheet", summary="Sheet gauges with weight per sq in")
def sheet_catalog(grade: Optional[str] = Query(None), session: Session = Depends(get_session)):
    density = spec_density(session, "Sheet", grade) or DENSITY_STEEL
    return {"ok": True, "grade": grade, "items": build_sheet_options(density)}


# ==============================
# LOOKUPS
# ==============================

@router.get("/families")
def families(session: Session = Depends(get_session)):
    return {"ok": True, "families": list_families(session)}


@router.get("/sizes")
def sizes(family: Optional[str] = Query(None), session: Session = Depends(get_session)):
    return {"ok": True, "family": family, "sizes": list_sizes(session, family)}


@router.get("/grades")
def grades(family: Optional[str] = Query(None)):
    return {"ok": True, "family": family, "grades": grade_options(family)}


@router.post("/match", summary="Match free text to a catalog material")
def match(payload: MatchIn, session: Session = Depends(get_session)):
    hit = match_material(session, payload.text)
    if hit is None:
        return {"ok": True, "match": None}
    return {
        "ok": True,
        "match": {
            "material": material_to_dict(hit["material"]),
            "confidence": hit["confidence"],
            "via": hit["via"],
        },
    }


# ==============================
# CRUD
# ==============================

@router.get("", summary="List / search materials")
@router.get("/", include_in_schema=False)
def get_materials(
    family: Optional[str] = Query(None),
    q: Optional[str] = Query(None),
    limit: Optional[int] = Query(None),
    session: Session = Depends(get_session),
):
    rows = list_materials(session, family=family, q=q, limit=limit)
    return {"ok": True, "materials": [material_to_dict(m) for m in rows]}


@router.post("", status_code=201, summary="Create a material")
def post_material(payload: MaterialIn, session: Session = Depends(get_session)):
    m = create_material(session, payload.model_dump(exclude_none=True))
    return {"ok": True, "material": material_to_dict(m)}


@router.put("/{material_id}", summary="Update a material")
def put_material(material_id: int, payload: MaterialIn, session: Session = Depends(get_session)):
    m = update_material(session, material_id, payload.model_dump(exclude_unset=True))
    return {"ok": True, "material": material_to_dict(m)}


@router.delete("/{material_id}", summary="Delete a material")
def remove_material(material_id: int, session: Session = Depends(get_session)):
    if not delete_material(session, material_id):
        raise HTTPException(status_code=404, detail="Material not found")
    return {"ok": True, "deleted": True}


@router.post("/{material_id}/aliases", status_code=201, summary="Add a free-text alias")
def post_alias(material_id: int, payload: AliasIn, session: Session = Depends(get_session)):
    alias = add_alias(session, material_id, payload.alias_text)
    return {"ok": True, "alias": {"id": alias.id, "material_id": alias.material_id, "alias_text": alias.alias_text}}
