# models/ticket.py

from typing import Optional
from pydantic import BaseModel, field_validator

from .common import blank_to_none, require_text, stringify
from .enums import TicketPriority, TicketStatus


# -------------------------------------------------
# Shared fields (collection "segnalazioni")
# -------------------------------------------------
class TicketBase(BaseModel):
    condominio_id: int
    title: str
    description: str
    priority: TicketPriority = TicketPriority.medium

    @field_validator("title", "description", mode="before")
    def text_fields(cls, v):
        return stringify(v)


# -------------------------------------------------
# Create
# -------------------------------------------------
class TicketCreate(TicketBase):
    """
    Client sends this when opening a ticket.
    Status, created_at and ai_analysis are set by the service.
    """

    @field_validator("title")
    def validate_title(cls, v):
        return require_text(v, "Title")

    @field_validator("description")
    def validate_description(cls, v):
        return require_text(v, "Description")


# -------------------------------------------------
# Read
# -------------------------------------------------
class TicketRead(TicketBase):
    id: int
    description: str = ""
    status: TicketStatus = TicketStatus.open
    created_at: Optional[str] = None
    ai_analysis: Optional[str] = None

    @field_validator("created_at", "ai_analysis", mode="before")
    def optional_text(cls, v):
        return blank_to_none(stringify(v))


# -------------------------------------------------
# Update (partial)
# -------------------------------------------------
class TicketUpdate(BaseModel):
    condominio_id: Optional[int] = None
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[TicketPriority] = None
    status: Optional[TicketStatus] = None

    @field_validator("title", "description", mode="before")
    def non_blank(cls, v, info):
        if v is None:
            return None
        return require_text(stringify(v), info.field_name)


class TicketStatusUpdate(BaseModel):
    """Staff-only triage: status and/or priority."""

    status: Optional[TicketStatus] = None
    priority: Optional[TicketPriority] = None
