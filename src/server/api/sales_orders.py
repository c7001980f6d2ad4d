# fil: src/server/api/sales_orders.py
from typing import Optional

from fastapi import APIRouter, Body, Depends
from sqlmodel import Session

from src.server.db.session import get_session
from src.server.schemas.sales_order import (
    FromQuoteIn,
    ProductionRouterIn,
    SalesOrderIn,
    SalesOrderPatch,
)
from src.services.sales_order_service import (
    archive_order,
    create_from_quote,
    create_order,
    get_order,
    list_orders,
    order_to_dict,
    production_router,
    update_order,
)

router = APIRouter(prefix="/api/sales-orders", tags=["sales-orders"])


@router.post("", status_code=201, summary="Create a sales order")
@router.post("/", status_code=201, include_in_schema=False)
def post_order(payload: SalesOrderIn, session: Session = Depends(get_session)):
    o = create_order(session, payload.model_dump())
    return {"ok": True, "order": order_to_dict(o)}


@router.get("", summary="List sales orders, newest first")
@router.get("/", include_in_schema=False)
def get_orders(session: Session = Depends(get_session)):
    return {"ok": True, "orders": [order_to_dict(o) for o in list_orders(session)]}


@router.post("/production-router", summary="Batch the BOM rows of some orders for production")
def post_production_router(payload: ProductionRouterIn, session: Session = Depends(get_session)):
    result = production_router(
        session,
        payload.order_ids,
        batch_by_material=payload.options.batch_by_material,
    )
    return {"ok": True, **result}


@router.post("/from-quote/{quote_id}", status_code=201, summary="Turn an accepted quote into an order")
def post_from_quote(
    quote_id: int,
    payload: Optional[FromQuoteIn] = Body(None),
    session: Session = Depends(get_session),
):
    extra = payload.model_dump(exclude_none=True) if payload else {}
    o = create_from_quote(session, quote_id, extra)
    return {"ok": True, "order": order_to_dict(o)}


@router.get("/{order_id}")
def get_one_order(order_id: int, session: Session = Depends(get_session)):
    return {"ok": True, "order": order_to_dict(get_order(session, order_id))}


@router.patch("/{order_id}", summary="Update status / PO number / description")
def patch_order(order_id: int, payload: SalesOrderPatch, session: Session = Depends(get_session)):
    o = update_order(session, order_id, payload.model_dump(exclude_unset=True))
    return {"ok": True, "order": order_to_dict(o)}


@router.post("/{order_id}/archive")
def post_archive(order_id: int, session: Session = Depends(get_session)):
    o = archive_order(session, order_id)
    return {"ok": True, "order": order_to_dict(o)}
