# models/building.py

from typing import Optional
from pydantic import BaseModel, field_validator

from .common import require_email, require_text, stringify


# -------------------------------------------------
# Shared fields (collection "condomini")
# -------------------------------------------------
class BuildingBase(BaseModel):
    nome: str
    indirizzo: str
    city: str
    email: str
    codice_fiscale: str
    units_count: int = 0

    @field_validator("nome", "indirizzo", "city", "email", "codice_fiscale", mode="before")
    def text_fields(cls, v):
        return stringify(v)


# -------------------------------------------------
# Create
# -------------------------------------------------
class BuildingCreate(BuildingBase):
    """
    Used when creating a building.
    No ID supplied; the store assigns the next integer id.
    """

    @field_validator("nome")
    def validate_nome(cls, v):
        return require_text(v, "Building name")

    @field_validator("indirizzo")
    def validate_indirizzo(cls, v):
        return require_text(v, "Address")

    @field_validator("city")
    def validate_city(cls, v):
        return require_text(v, "City")

    @field_validator("email")
    def validate_email(cls, v):
        return require_email(v)

    @field_validator("codice_fiscale")
    def validate_codice_fiscale(cls, v):
        return require_text(v, "Tax code")

    @field_validator("units_count")
    def validate_units_count(cls, v):
        if v < 0:
            raise ValueError("Declared unit count cannot be negative")
        return v


# -------------------------------------------------
# Read
# -------------------------------------------------
class BuildingRead(BuildingBase):
    id: int
    # Legacy rows may miss columns added later
    indirizzo: str = ""
    city: str = ""
    email: str = ""
    codice_fiscale: str = ""


# -------------------------------------------------
# Update (partial)
# -------------------------------------------------
class BuildingUpdate(BaseModel):
    nome: Optional[str] = None
    indirizzo: Optional[str] = None
    city: Optional[str] = None
    email: Optional[str] = None
    codice_fiscale: Optional[str] = None
    units_count: Optional[int] = None

    @field_validator("nome", "indirizzo", "city", "codice_fiscale", mode="before")
    def non_blank(cls, v, info):
        if v is None:
            return None
        return require_text(stringify(v), info.field_name)

    @field_validator("email", mode="before")
    def validate_email(cls, v):
        if v is None:
            return None
        return require_email(v)

    @field_validator("units_count")
    def validate_units_count(cls, v):
        if v is not None and v < 0:
            raise ValueError("Declared unit count cannot be negative")
        return v
