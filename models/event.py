from typing import Optional
from pydantic import BaseModel, field_validator

from .common import blank_to_none, require_text, stringify
from .enums import EventCategory


# -------------------------------------------------
# Shared Fields (collection "agenda")
# -------------------------------------------------
class EventBase(BaseModel):
    title: str
    description: Optional[str] = ""
    start_date: str
    end_date: Optional[str] = None
    type: EventCategory = EventCategory.assembly

    # No building = applies to every building
    condominio_id: Optional[int] = None

    @field_validator("title", "description", "start_date", mode="before")
    def text_fields(cls, v):
        return stringify(v)

    @field_validator("end_date", mode="before")
    def optional_end(cls, v):
        return blank_to_none(stringify(v))

    @field_validator("condominio_id", mode="before")
    def optional_building(cls, v):
        return blank_to_none(v)


# -------------------------------------------------
# Create Event
# -------------------------------------------------
class EventCreate(EventBase):
    @field_validator("title")
    def validate_title(cls, v):
        return require_text(v, "Title")

    @field_validator("start_date")
    def validate_start_date(cls, v):
        return require_text(v, "Start date")


# -------------------------------------------------
# Read Event
# -------------------------------------------------
class EventRead(EventBase):
    id: int
    start_date: str = ""


# -------------------------------------------------
# Update Event (partial)
# -------------------------------------------------
class EventUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    type: Optional[EventCategory] = None
    condominio_id: Optional[int] = None

    @field_validator("title", "start_date", mode="before")
    def non_blank(cls, v, info):
        if v is None:
            return None
        return require_text(stringify(v), info.field_name)

    @field_validator("end_date", "condominio_id", mode="before")
    def optional_fields(cls, v):
        return blank_to_none(v)
