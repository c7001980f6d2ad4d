from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field


class MaterialFamily(SQLModel, table=True):
    __tablename__ = "material_families"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(unique=True)


class MaterialSpec(SQLModel, table=True):
    """
    A grade within a family. density (lb/in^3) drives the weight math for
    that grade, e.g. 304 stainless 0.289, 6061 aluminum 0.098.
    """
    __tablename__ = "material_specs"
    __table_args__ = (UniqueConstraint("family_id", "grade", name="uq_material_specs_family_grade"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    family_id: int = Field(foreign_key="material_families.id", index=True)
    grade: Optional[str] = None
    density: Optional[float] = None
    unit: Optional[str] = None
    notes: Optional[str] = None
    ai_searchable: bool = True


class MaterialSize(SQLModel, table=True):
    __tablename__ = "material_sizes"

    id: Optional[int] = Field(default=None, primary_key=True)
    family_id: int = Field(foreign_key="material_families.id", index=True)
    size_label: Optional[str] = None
    dims_json: Optional[str] = None
