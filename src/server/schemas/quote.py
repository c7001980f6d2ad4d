# fil: src/server/schemas/quote.py
from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class QuoteIn(BaseModel):
    """
    Body for POST /api/quotes.

    Everything is optional on the wire; the service answers 400 when
    customer_name is missing and generates quote_no when blank.
    """
    quote_no: Optional[str] = None
    customer_name: Optional[str] = None
    description: Optional[str] = None
    requested_by: Optional[str] = None
    estimator: Optional[str] = None
    date: Optional[str] = None          # YYYY-MM-DD or MM/DD/YYYY
    status: Optional[str] = None
    sales_order_no: Optional[str] = None
    rev: Optional[Any] = None
    app_state: Optional[Dict[str, Any]] = None


class QuoteUpdate(QuoteIn):
    """
    Body for PUT /api/quotes/{id}. Only fields actually sent are applied
    (model_dump(exclude_unset=True)).
    """


class QuotePriceIn(BaseModel):
    rows: List[Dict[str, Any]] = []
    meta: Optional[Dict[str, Any]] = None
    remember_prices: bool = False
