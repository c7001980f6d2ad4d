# fil: src/server/api/customers.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from src.server.db.session import get_session
from src.services.quote_service import (
    customer_quotes,
    list_customers,
    quote_to_dict,
    soft_delete_customer,
)

# Registered before the quotes router so "/customers" never reaches "/{quote_id}"
router = APIRouter(prefix="/api/quotes", tags=["customers"])


@router.get("/customers", summary="List customers (distinct customer names on active quotes)")
def get_customers(session: Session = Depends(get_session)):
    return {"ok": True, "customers": list_customers(session)}


@router.get("/customers/{name}", summary="Active quotes for one customer")
def get_customer_quotes(name: str, session: Session = Depends(get_session)):
    quotes = customer_quotes(session, name)
    return {"ok": True, "customer": name, "quotes": [quote_to_dict(q) for q in quotes]}


@router.delete("/customers/{name}", summary="Soft delete all quotes of a customer")
def delete_customer(name: str, session: Session = Depends(get_session)):
    n = soft_delete_customer(session, name)
    return {"ok": True, "customer": name, "deleted": n}
