from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field

from .timestamps import utcnow


class SalesOrder(SQLModel, table=True):
    __tablename__ = "sales_orders"

    id: Optional[int] = Field(default=None, primary_key=True)
    order_no: str = Field(index=True, unique=True)
    customer_name: str
    po_number: Optional[str] = None
    description: str = ""
    status: str = "Draft"
    quote_id: Optional[int] = Field(default=None, foreign_key="quotes.id")
    created_at: datetime = Field(default_factory=utcnow)
