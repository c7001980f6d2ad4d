# fil: src/server/api/quotes.py
from typing import Optional

from fastapi import APIRouter, Body, Depends
from sqlmodel import Session

from src.server.db.session import get_session
from src.server.schemas.quote import QuoteIn, QuotePriceIn, QuoteUpdate
from src.services.quote_service import (
    create_quote,
    get_quote,
    list_quotes,
    price_saved_quote,
    quote_to_dict,
    soft_delete_quote,
    update_quote,
)

router = APIRouter(prefix="/api/quotes", tags=["quotes"])


# ==============================
# LIST / GET
# ==============================

@router.get("", summary="List active quotes")
@router.get("/", include_in_schema=False)
def get_quotes(session: Session = Depends(get_session)):
    return {"ok": True, "quotes": [quote_to_dict(q) for q in list_quotes(session)]}


@router.get("/{quote_id}", summary="Get one quote")
def get_one_quote(quote_id: int, session: Session = Depends(get_session)):
    q = get_quote(session, quote_id)
    return {"ok": True, "quote": quote_to_dict(q, include_state=True)}


# ==============================
# CREATE / UPDATE / DELETE
# ==============================

@router.post("", status_code=201, summary="Create a quote")
@router.post("/", status_code=201, include_in_schema=False)
def post_quote(payload: QuoteIn, session: Session = Depends(get_session)):
    q = create_quote(session, payload.model_dump())
    return {"ok": True, "quote": quote_to_dict(q, include_state=True)}


@router.put("/{quote_id}", summary="Update the fields sent")
def put_quote(quote_id: int, payload: QuoteUpdate, session: Session = Depends(get_session)):
    q = update_quote(session, quote_id, payload.model_dump(exclude_unset=True))
    return {"ok": True, "quote": quote_to_dict(q, include_state=True)}


@router.delete("/{quote_id}", summary="Soft delete a quote")
def delete_quote(quote_id: int, session: Session = Depends(get_session)):
    return {"ok": True, "deleted": soft_delete_quote(session, quote_id)}


# ==============================
# PRICING
# ==============================

@router.post("/{quote_id}/price", summary="Price a quote and store the result in app_state")
def price_quote_endpoint(
    quote_id: int,
    payload: Optional[QuotePriceIn] = Body(None),
    session: Session = Depends(get_session),
):
    body = payload or QuotePriceIn()
    result = price_saved_quote(
        session,
        quote_id,
        rows=body.rows,
        meta=body.meta,
        remember_prices=body.remember_prices,
    )
    return {"ok": True, **result}
