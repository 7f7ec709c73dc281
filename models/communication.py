from typing import Optional
from pydantic import BaseModel, field_validator

from .common import blank_to_none, require_text, stringify
from .enums import CommunicationTone


# -------------------------------------------------
# Collection "comunicazioni"
# -------------------------------------------------
class CommunicationBase(BaseModel):
    title: str
    content: str
    condominio_id: Optional[int] = None

    @field_validator("title", "content", mode="before")
    def text_fields(cls, v):
        return stringify(v)

    @field_validator("condominio_id", mode="before")
    def optional_building(cls, v):
        return blank_to_none(v)


class CommunicationCreate(CommunicationBase):
    @field_validator("title")
    def validate_title(cls, v):
        return require_text(v, "Title")

    @field_validator("content")
    def validate_content(cls, v):
        return require_text(v, "Content")


class CommunicationRead(CommunicationBase):
    id: int
    content: str = ""
    sent_at: Optional[str] = None


class CommunicationUpdate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    condominio_id: Optional[int] = None

    @field_validator("title", "content", mode="before")
    def non_blank(cls, v, info):
        if v is None:
            return None
        return require_text(stringify(v), info.field_name)


# -------------------------------------------------
# AI drafting
# -------------------------------------------------
class DraftRequest(BaseModel):
    topic: str
    tone: CommunicationTone = CommunicationTone.formal

    @field_validator("topic")
    def validate_topic(cls, v):
        return require_text(v, "Topic")


class CommunicationDraft(BaseModel):
    title: str
    content: str
