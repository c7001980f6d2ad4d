# fil: src/server/schemas/api_key.py
from typing import Optional

from pydantic import BaseModel


class ApiKeyIn(BaseModel):
    provider: Optional[str] = None
    key_value: Optional[str] = None
    active: bool = True


class ApiKeyPatch(BaseModel):
    active: bool
