# models/unit.py

from typing import Optional
from pydantic import BaseModel, field_validator

from .common import blank_to_none, require_text, stringify


# -------------------------------------------------
# Shared fields (collection "immobili")
# -------------------------------------------------
class UnitBase(BaseModel):
    condominio_id: int
    nome: str
    piano: str
    superficie: float
    owner_id: Optional[int] = None
    tenant_id: Optional[int] = None

    @field_validator("nome", "piano", mode="before")
    def text_fields(cls, v):
        return stringify(v)

    @field_validator("owner_id", "tenant_id", mode="before")
    def optional_refs(cls, v):
        return blank_to_none(v)


# -------------------------------------------------
# Create
# -------------------------------------------------
class UnitCreate(UnitBase):
    """Building, owner and tenant references are checked against the store on write."""

    @field_validator("nome")
    def validate_nome(cls, v):
        return require_text(v, "Unit name")

    @field_validator("piano")
    def validate_piano(cls, v):
        return require_text(v, "Floor")

    @field_validator("superficie")
    def validate_superficie(cls, v):
        if v <= 0:
            raise ValueError("Surface area must be greater than 0")
        return v


# -------------------------------------------------
# Read
# -------------------------------------------------
class UnitRead(UnitBase):
    id: int
    piano: str = ""
    superficie: float = 0


# -------------------------------------------------
# Update (partial)
# -------------------------------------------------
class UnitUpdate(BaseModel):
    condominio_id: Optional[int] = None
    nome: Optional[str] = None
    piano: Optional[str] = None
    superficie: Optional[float] = None

    # Explicit null clears the reference
    owner_id: Optional[int] = None
    tenant_id: Optional[int] = None

    @field_validator("nome", "piano", mode="before")
    def non_blank(cls, v, info):
        if v is None:
            return None
        return require_text(stringify(v), info.field_name)

    @field_validator("owner_id", "tenant_id", mode="before")
    def optional_refs(cls, v):
        return blank_to_none(v)

    @field_validator("superficie")
    def validate_superficie(cls, v):
        if v is not None and v <= 0:
            raise ValueError("Surface area must be greater than 0")
        return v
