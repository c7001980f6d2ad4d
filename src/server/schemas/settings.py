# fil: src/server/schemas/settings.py
from typing import Optional

from pydantic import BaseModel


class QuoteSeedIn(BaseModel):
    start_from: Optional[str] = None    # e.g. "SCM-Q0123"
    org_prefix: Optional[str] = None
    system_abbr: Optional[str] = None
    quote_series: Optional[str] = None
    quote_pad: Optional[int] = None


class SalesSeedIn(BaseModel):
    start_from: Optional[str] = None    # e.g. "SCM-S041"
    sales_series: Optional[str] = None
    sales_pad: Optional[int] = None
