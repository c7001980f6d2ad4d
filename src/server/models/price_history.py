from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field

from .timestamps import utcnow


class PriceHistory(SQLModel, table=True):
    __tablename__ = "price_history"
    __table_args__ = (
        UniqueConstraint("material_key", "unit_type", "grade", "domestic", name="uq_price_history_key"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    material_key: str
    unit_type: str
    grade: str = ""
    domestic: bool = False
    payload_json: str
    updated_at: datetime = Field(default_factory=utcnow)


class PipeWeight(SQLModel, table=True):
    """
    Stored lb/ft override for a pipe size + schedule.
    """
    __tablename__ = "pipe_weights"
    __table_args__ = (UniqueConstraint("size", "schedule", name="uq_pipe_weights_size_schedule"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    size: str
    schedule: str
    weight_per_ft: float
    updated_at: datetime = Field(default_factory=utcnow)
