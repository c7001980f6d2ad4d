# fil: src/server/api/pricing.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from src.server.db.session import get_session
from src.server.schemas.pricing import PipeWeightIn, PricingIn
from src.services.errors import BadRequest
from src.services.price_history import (
    get_pipe_weight,
    last_price,
    pipe_weight_lookup,
    remember_row_prices,
    store_pipe_weight,
)
from src.services.pricing import price_quote
from src.services.system_materials import density_lookup

router = APIRouter(prefix="/api/pricing", tags=["pricing"])


@router.post("/calculate", summary="Price quote rows and roll up the totals")
def calculate(payload: PricingIn, session: Session = Depends(get_session)):
    result = price_quote(payload.rows, payload.meta, pipe_weight_lookup(session), density_lookup(session))
    remembered = 0
    if payload.remember_prices:
        remembered = remember_row_prices(session, result["rows"], payload.meta)
    return {"ok": True, **result, "remembered": remembered}


@router.get("/last-price", summary="Last remembered prices for a material")
def get_last_price(
    family: str = Query(...),
    description: str = Query(...),
    unit_type: str = Query(...),
    grade: Optional[str] = Query(None),
    domestic: bool = Query(False),
    session: Session = Depends(get_session),
):
    prices = last_price(session, family, description, unit_type, grade, domestic)
    return {"ok": True, "prices": prices}


@router.get("/pipe-weight", summary="lb/ft for a pipe size and schedule")
def get_pipe_weight_endpoint(
    size: str = Query(...),
    schedule: Optional[str] = Query(None),
    session: Session = Depends(get_session),
):
    return {"ok": True, **get_pipe_weight(session, size, schedule)}


@router.put("/pipe-weight", summary="Store an exact lb/ft for a pipe size and schedule")
def put_pipe_weight(payload: PipeWeightIn, session: Session = Depends(get_session)):
    try:
        row = store_pipe_weight(session, payload.size, payload.schedule, payload.weight_per_ft)
    except ValueError as e:
        raise BadRequest(str(e))
    return {
        "ok": True,
        "size": row.size,
        "schedule": row.schedule,
        "weight_per_ft": row.weight_per_ft,
        "source": "override",
    }
