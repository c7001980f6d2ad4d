# fil: src/server/schemas/bom.py
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class BomAcceptIn(BaseModel):
    # Rows are lenient dicts: {material, size, grade, thickness_or_wall, length | length_value,
    # length_unit, qty, unit, notes, tol_plus, tol_minus, tol_unit}
    rows: Optional[List[Dict[str, Any]]] = None


class BomRowIn(BaseModel):
    """
    A single strictly validated BOM row. length is in feet.
    """
    material: str = Field(min_length=1)
    size: str = Field(min_length=1)
    grade: str = Field(min_length=1)
    thickness_or_wall: str = Field(min_length=1)
    length: float = Field(gt=0)
    qty: int = Field(gt=0)
    unit: str = Field(min_length=1)
    notes: Optional[str] = None
