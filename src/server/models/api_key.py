from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field

from .timestamps import utcnow


class ApiKey(SQLModel, table=True):
    __tablename__ = "api_keys"

    id: Optional[int] = Field(default=None, primary_key=True)
    provider: str = Field(index=True)
    key_value: str
    active: bool = True
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
