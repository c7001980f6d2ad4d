# fil: src/server/api/bom.py
from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from src.server.db.session import get_session
from src.server.schemas.bom import BomAcceptIn, BomRowIn
from src.services.bom_service import (
    accept_bom_rows,
    add_bom_row,
    bom_to_dict,
    delete_bom_row,
    list_bom,
)

router = APIRouter(prefix="/api/quotes", tags=["bom"])


@router.post("/{quote_id}/bom/accept", summary="Insert parsed BOM rows in one go")
def accept_rows(quote_id: int, payload: BomAcceptIn, session: Session = Depends(get_session)):
    added = accept_bom_rows(session, quote_id, payload.rows or [])
    return {"ok": True, "added": added}


@router.post("/{quote_id}/bom", status_code=201, summary="Add one validated BOM row")
def add_row(quote_id: int, payload: BomRowIn, session: Session = Depends(get_session)):
    row = add_bom_row(session, quote_id, payload.model_dump())
    return {"ok": True, "row": bom_to_dict(row)}


@router.get("/{quote_id}/bom", summary="BOM rows of a quote")
def get_rows(quote_id: int, session: Session = Depends(get_session)):
    return {"ok": True, "rows": [bom_to_dict(r) for r in list_bom(session, quote_id)]}


@router.delete("/{quote_id}/bom/{row_id}", summary="Delete a BOM row")
def delete_row(quote_id: int, row_id: int, session: Session = Depends(get_session)):
    if not delete_bom_row(session, quote_id, row_id):
        raise HTTPException(status_code=404, detail="BOM row not found")
    return {"ok": True, "deleted": True}
