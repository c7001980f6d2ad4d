# fil: src/server/schemas/equipment.py
from typing import Any, Optional

from pydantic import BaseModel


class EquipmentIn(BaseModel):
    name: Optional[str] = None
    type: Optional[str] = None          # "Saw", "Press Brake", "Laser"...
    status: Optional[str] = None        # "Active", "Down"...
    location: Optional[str] = None
    manual_path: Optional[str] = None
    capabilities_json: Optional[Any] = None   # object / list, or JSON text
