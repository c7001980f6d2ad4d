from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field


class Material(SQLModel, table=True):
    __tablename__ = "materials"
    __table_args__ = (UniqueConstraint("family", "size", name="uq_materials_family_size"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    family: str = Field(index=True)
    size: str
    unit_type: Optional[str] = None
    grade: Optional[str] = None
    weight_per_ft: Optional[float] = None
    weight_per_sqin: Optional[float] = None
    price_per_lb: Optional[float] = None
    price_per_ft: Optional[float] = None
    price_each: Optional[float] = None
    description: Optional[str] = None


class MaterialAlias(SQLModel, table=True):
    __tablename__ = "material_alias"

    id: Optional[int] = Field(default=None, primary_key=True)
    material_id: int = Field(foreign_key="materials.id", index=True)
    alias_text: str = Field(unique=True)
