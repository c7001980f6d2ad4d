# fil: src/server/api/system_materials.py
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session

from src.server.db.session import get_session
from src.server.schemas.system_material import FamilyIn, SizeIn, SpecIn
from src.services.system_materials import (
    create_family,
    create_size,
    create_spec,
    delete_family,
    delete_size,
    delete_spec,
    family_to_dict,
    list_families,
    list_sizes,
    list_specs,
    size_to_dict,
    spec_to_dict,
    update_family,
    update_size,
    update_spec,
)

router = APIRouter(prefix="/api/system-materials", tags=["system-materials"])


# ==============================
# FAMILIES
# ==============================

@router.get("/families")
def get_families(session: Session = Depends(get_session)):
    return {"ok": True, "families": [family_to_dict(f) for f in list_families(session)]}


@router.post("/families", status_code=201)
def post_family(payload: FamilyIn, session: Session = Depends(get_session)):
    return {"ok": True, "family": family_to_dict(create_family(session, payload.model_dump()))}


@router.put("/families/{family_id}")
def put_family(family_id: int, payload: FamilyIn, session: Session = Depends(get_session)):
    return {"ok": True, "family": family_to_dict(update_family(session, family_id, payload.model_dump()))}


@router.delete("/families/{family_id}", summary="Delete a family with its specs and sizes")
def remove_family(family_id: int, session: Session = Depends(get_session)):
    if not delete_family(session, family_id):
        raise HTTPException(status_code=404, detail="Family not found")
    return {"ok": True, "deleted": True}


# ==============================
# SPECS (grades + density)
# ==============================

@router.get("/specs")
def get_specs(session: Session = Depends(get_session)):
    return {"ok": True, "specs": list_specs(session)}


@router.post("/specs", status_code=201)
def post_spec(payload: SpecIn, session: Session = Depends(get_session)):
    s = create_spec(session, payload.model_dump(exclude_none=True))
    return {"ok": True, "spec": spec_to_dict(s)}


@router.put("/specs/{spec_id}")
def put_spec(spec_id: int, payload: SpecIn, session: Session = Depends(get_session)):
    s = update_spec(session, spec_id, payload.model_dump(exclude_unset=True))
    return {"ok": True, "spec": spec_to_dict(s)}


@router.delete("/specs/{spec_id}")
def remove_spec(spec_id: int, session: Session = Depends(get_session)):
    if not delete_spec(session, spec_id):
        raise HTTPException(status_code=404, detail="Spec not found")
    return {"ok": True, "deleted": True}


# ==============================
# SIZES
# ==============================

@router.get("/sizes")
def get_sizes(family_id: Optional[int] = Query(None), session: Session = Depends(get_session)):
    return {"ok": True, "sizes": [size_to_dict(s) for s in list_sizes(session, family_id)]}


@router.post("/sizes", status_code=201)
def post_size(payload: SizeIn, session: Session = Depends(get_session)):
    s = create_size(session, payload.model_dump(exclude_none=True))
    return {"ok": True, "size": size_to_dict(s)}


@router.put("/sizes/{size_id}")
def put_size(size_id: int, payload: SizeIn, session: Session = Depends(get_session)):
    s = update_size(session, size_id, payload.model_dump(exclude_unset=True))
    return {"ok": True, "size": size_to_dict(s)}


@router.delete("/sizes/{size_id}")
def remove_size(size_id: int, session: Session = Depends(get_session)):
    if not delete_size(session, size_id):
        raise HTTPException(status_code=404, detail="Size not found")
    return {"ok": True, "deleted": True}
