# fil: src/server/api/equipment.py
from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from src.server.db.session import get_session
from src.server.schemas.equipment import EquipmentIn
from src.services.equipment_service import (
    create_equipment,
    delete_equipment,
    equipment_to_dict,
    get_equipment,
    list_equipment,
    update_equipment,
)

router = APIRouter(prefix="/api/equipment", tags=["equipment"])


@router.get("", summary="List equipment, newest first")
@router.get("/", include_in_schema=False)
def get_all(session: Session = Depends(get_session)):
    return {"ok": True, "equipment": [equipment_to_dict(e) for e in list_equipment(session)]}


@router.get("/{equipment_id}")
def get_one(equipment_id: int, session: Session = Depends(get_session)):
    return {"ok": True, "equipment": equipment_to_dict(get_equipment(session, equipment_id))}


@router.post("", status_code=201, summary="Register a machine")
def post_equipment(payload: EquipmentIn, session: Session = Depends(get_session)):
    e = create_equipment(session, payload.model_dump(exclude_none=True))
    return {"ok": True, "equipment": equipment_to_dict(e)}


@router.put("/{equipment_id}", summary="Update the fields sent")
def put_equipment(equipment_id: int, payload: EquipmentIn, session: Session = Depends(get_session)):
    e = update_equipment(session, equipment_id, payload.model_dump(exclude_unset=True))
    return {"ok": True, "equipment": equipment_to_dict(e)}


@router.delete("/{equipment_id}")
def remove_equipment(equipment_id: int, session: Session = Depends(get_session)):
    if not delete_equipment(session, equipment_id):
        raise HTTPException(status_code=404, detail="Equipment not found")
    return {"ok": True, "deleted": True}
