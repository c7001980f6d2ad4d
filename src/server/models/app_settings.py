from typing import Optional

from sqlmodel import SQLModel, Field


class AppSettings(SQLModel, table=True):
    """
    Singleton row (id=1) holding the quote / sales-order numbering scheme.
    """
    __tablename__ = "settings"

    id: int = Field(default=1, primary_key=True)
    org_prefix: str = "SCM"
    system_abbr: Optional[str] = None
    quote_series: str = "Q"
    quote_pad: int = 4
    next_quote_seq: int = 1
    sales_series: str = "S"
    sales_pad: int = 3
    next_sales_seq: int = 1
