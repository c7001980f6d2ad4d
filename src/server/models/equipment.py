from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field

from .timestamps import utcnow


class Equipment(SQLModel, table=True):
    """
    Shop machines (saws, brakes, lasers...) with where they are and what they can do.
    """
    __tablename__ = "equipment"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    type: Optional[str] = None
    status: Optional[str] = None
    location: Optional[str] = None
    manual_path: Optional[str] = None
    capabilities_json: Optional[str] = None  # JSON text, free form
    created_at: datetime = Field(default_factory=utcnow)
