# fil: src/server/api/settings.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from src.server.db.session import get_session
from src.server.schemas.settings import QuoteSeedIn, SalesSeedIn
from src.services.errors import BadRequest
from src.services.numbering import get_settings_row, seed_quote_sequence, seed_sales_sequence

router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get("", summary="Numbering settings (singleton row)")
@router.get("/", include_in_schema=False)
def get_settings(session: Session = Depends(get_session)):
    return {"ok": True, "settings": get_settings_row(session).model_dump()}


@router.post("/quote-seed", summary="Continue quote numbering after start_from")
def post_quote_seed(payload: QuoteSeedIn, session: Session = Depends(get_session)):
    try:
        s = seed_quote_sequence(
            session,
            payload.start_from,
            org_prefix=payload.org_prefix,
            system_abbr=payload.system_abbr,
            quote_series=payload.quote_series,
            quote_pad=payload.quote_pad,
        )
    except ValueError as e:
        raise BadRequest(str(e))
    return {"ok": True, "settings": s.model_dump()}


@router.post("/sales-seed", summary="Continue sales-order numbering after start_from")
def post_sales_seed(payload: SalesSeedIn, session: Session = Depends(get_session)):
    try:
        s = seed_sales_sequence(
            session,
            payload.start_from,
            sales_series=payload.sales_series,
            sales_pad=payload.sales_pad,
        )
    except ValueError as e:
        raise BadRequest(str(e))
    return {"ok": True, "settings": s.model_dump()}
