# fil: src/server/schemas/system_material.py
from typing import Any, Optional

from pydantic import BaseModel


class FamilyIn(BaseModel):
    name: Optional[str] = None


class SpecIn(BaseModel):
    family_id: Optional[int] = None
    grade: Optional[str] = None
    density: Optional[float] = None     # lb/in^3
    unit: Optional[str] = None
    notes: Optional[str] = None
    ai_searchable: Optional[bool] = None


class SizeIn(BaseModel):
    family_id: Optional[int] = None
    size_label: Optional[str] = None
    dims_json: Optional[Any] = None
