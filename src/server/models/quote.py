from datetime import date, datetime
from typing import Optional

from sqlmodel import SQLModel, Field

from .timestamps import utcnow


def _today_iso() -> str:
    return date.today().isoformat()


class Quote(SQLModel, table=True):
    __tablename__ = "quotes"

    id: Optional[int] = Field(default=None, primary_key=True)
    quote_no: str = Field(index=True, unique=True)
    customer_name: str = Field(index=True)
    description: Optional[str] = None
    requested_by: Optional[str] = None
    estimator: Optional[str] = None
    date: str = Field(default_factory=_today_iso, index=True)  # YYYY-MM-DD
    status: str = "Draft"
    sales_order_no: Optional[str] = None
    rev: int = 0
    app_state: Optional[str] = None  # JSON text of the quote builder state
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    deleted_at: Optional[datetime] = None


class QuoteBOM(SQLModel, table=True):
    __tablename__ = "quote_bom"

    id: Optional[int] = Field(default=None, primary_key=True)
    quote_id: int = Field(foreign_key="quotes.id", index=True)
    material: str = ""
    size: str = ""
    grade: str = ""
    thickness_or_wall: str = ""
    length: Optional[float] = None  # legacy column, always feet
    qty: float = 1
    unit: str = "Each"
    notes: str = ""
    length_value: Optional[float] = None
    length_unit: Optional[str] = "ft"
    tol_plus: Optional[float] = None
    tol_minus: Optional[float] = None
    tol_unit: Optional[str] = None
