# fil: src/server/schemas/sales_order.py
from typing import List, Optional

from pydantic import BaseModel


class SalesOrderIn(BaseModel):
    order_no: Optional[str] = None
    customer_name: Optional[str] = None
    po_number: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    quote_id: Optional[int] = None


class SalesOrderPatch(BaseModel):
    status: Optional[str] = None
    po_number: Optional[str] = None
    description: Optional[str] = None


class FromQuoteIn(BaseModel):
    order_no: Optional[str] = None
    po_number: Optional[str] = None
    description: Optional[str] = None


class RouterOptions(BaseModel):
    batch_by_material: bool = False


class ProductionRouterIn(BaseModel):
    order_ids: List[int] = []
    options: RouterOptions = RouterOptions()
