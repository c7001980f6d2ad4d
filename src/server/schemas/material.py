# fil: src/server/schemas/material.py
from typing import Optional

from pydantic import BaseModel


class MaterialIn(BaseModel):
    family: Optional[str] = None
    size: Optional[str] = None
    unit_type: Optional[str] = None     # "Per Foot" | "Each" | "Sq In"
    grade: Optional[str] = None
    weight_per_ft: Optional[float] = None
    weight_per_sqin: Optional[float] = None
    price_per_lb: Optional[float] = None
    price_per_ft: Optional[float] = None
    price_each: Optional[float] = None
    description: Optional[str] = None
    # Only used to infer weight_per_sqin, not stored
    thickness_in: Optional[float] = None
    density: Optional[float] = None


class AliasIn(BaseModel):
    alias_text: str


class MatchIn(BaseModel):
    text: str
