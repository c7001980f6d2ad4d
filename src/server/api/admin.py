# fil: src/server/api/admin.py
from pathlib import Path

from fastapi import APIRouter, Depends
from sqlalchemy import func, text
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from src.server.db.session import get_session
from src.server.models import Material, Quote, SalesOrder
from src.server.schemas.api_key import ApiKeyIn, ApiKeyPatch
from src.server.settings.config import settings
from src.services.api_keys import key_to_dict, list_keys, rotate_key, set_active
from src.services.material_families import MATERIAL_FAMILIES_PATH
from src.services.numbering import get_settings_row
from src.services.quote_service import (
    deleted_customers,
    deleted_quotes,
    permanently_delete_quote,
    quote_to_dict,
    restore_customer,
    restore_quote,
)

router = APIRouter(prefix="/api/admin", tags=["admin"])


def _count(session: Session, stmt) -> int:
    return int(session.exec(stmt).one() or 0)


# ==============================
# OVERVIEW
# ==============================

@router.get("/stats")
def stats(session: Session = Depends(get_session)):
    return {
        "ok": True,
        "quotes": _count(session, select(func.count(Quote.id))),
        "active_quotes": _count(session, select(func.count(Quote.id)).where(Quote.deleted_at.is_(None))),
        "materials": _count(session, select(func.count(Material.id))),
        "sales_orders": _count(session, select(func.count(SalesOrder.id))),
    }


@router.get("/settings")
def admin_settings(session: Session = Depends(get_session)):
    return {"ok": True, "settings": get_settings_row(session).model_dump()}


@router.get("/system-status")
def system_status(session: Session = Depends(get_session)):
    db_ok = True
    db_error = None
    try:
        session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        db_ok = False
        db_error = str(e)

    return {
        "ok": db_ok,
        "environment": settings.environment,
        "database": {
            "backend": "sqlite" if settings.is_sqlite else "postgres",
            "ok": db_ok,
            "error": db_error,
        },
        "catalog": {
            "path": str(MATERIAL_FAMILIES_PATH),
            "exists": Path(MATERIAL_FAMILIES_PATH).exists(),
        },
    }


# ==============================
# SOFT DELETE MANAGEMENT
# ==============================

@router.get("/deleted/quotes")
def get_deleted_quotes(session: Session = Depends(get_session)):
    return {"ok": True, "quotes": [quote_to_dict(q) for q in deleted_quotes(session)]}


@router.get("/deleted/customers")
def get_deleted_customers(session: Session = Depends(get_session)):
    return {"ok": True, "customers": deleted_customers(session)}


@router.post("/quotes/{quote_no}/restore")
def post_restore_quote(quote_no: str, session: Session = Depends(get_session)):
    q = restore_quote(session, quote_no)
    return {"ok": True, "quote": quote_to_dict(q)}


@router.delete("/quotes/{quote_no}/permanent")
def delete_quote_permanently(quote_no: str, session: Session = Depends(get_session)):
    return {"ok": True, "deleted": permanently_delete_quote(session, quote_no)}


@router.post("/customers/{name}/restore")
def post_restore_customer(name: str, session: Session = Depends(get_session)):
    return {"ok": True, "customer": name, "restored": restore_customer(session, name)}


# ==============================
# API KEYS
# ==============================

@router.get("/api-keys", summary="Stored provider keys, masked")
def get_api_keys(session: Session = Depends(get_session)):
    return {"ok": True, "keys": [key_to_dict(k) for k in list_keys(session)]}


@router.post("/api-keys", summary="Rotate the key of a provider")
def post_api_key(payload: ApiKeyIn, session: Session = Depends(get_session)):
    result = rotate_key(session, payload.provider, payload.key_value, payload.active)
    return {"ok": True, **result}


@router.patch("/api-keys/{key_id}", summary="Activate / deactivate a key")
def patch_api_key(key_id: int, payload: ApiKeyPatch, session: Session = Depends(get_session)):
    k = set_active(session, key_id, payload.active)
    return {"ok": True, "key": key_to_dict(k)}
