# models/person.py

from typing import Optional
from pydantic import BaseModel, field_validator

from .common import require_email, require_text, stringify
from .enums import PersonRole


# -------------------------------------------------
# Shared fields (collection "anagrafiche")
# -------------------------------------------------
class PersonBase(BaseModel):
    nome: str
    email: str
    telefono: Optional[str] = ""
    # Doubles as the login secret of the person
    codice_fiscale: str
    role: PersonRole = PersonRole.owner

    @field_validator("nome", "email", "telefono", "codice_fiscale", mode="before")
    def text_fields(cls, v):
        return stringify(v)


class PersonCreate(PersonBase):
    @field_validator("nome")
    def validate_nome(cls, v):
        return require_text(v, "Name")

    @field_validator("email")
    def validate_email(cls, v):
        return require_email(v)

    @field_validator("codice_fiscale")
    def validate_codice_fiscale(cls, v):
        return require_text(v, "Tax code")


class PersonRead(PersonBase):
    id: int
    email: str = ""
    codice_fiscale: str = ""


class PersonUpdate(BaseModel):
    nome: Optional[str] = None
    email: Optional[str] = None
    telefono: Optional[str] = None
    codice_fiscale: Optional[str] = None
    role: Optional[PersonRole] = None

    @field_validator("nome", "codice_fiscale", mode="before")
    def non_blank(cls, v, info):
        # An emptied tax code would lock the person out
        if v is None:
            return None
        return require_text(stringify(v), info.field_name)

    @field_validator("email", mode="before")
    def validate_email(cls, v):
        if v is None:
            return None
        return require_email(v)

    @field_validator("telefono", mode="before")
    def validate_telefono(cls, v):
        return stringify(v)
