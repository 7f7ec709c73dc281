# routers/tickets.py

from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from core.errors import KondoError, handle_store_error
from core.logging_config import logger
from core.permission_helpers import requires_permission, requires_view
from core.store import RecordStore, get_record_store
from models.auth import Session
from models.enums import EntityKind, TicketStatus, View
from models.ticket import TicketCreate, TicketRead, TicketStatusUpdate, TicketUpdate
from services.ai_assistant import analyze_ticket
from services.records import Tickets


router = APIRouter(
    prefix="/tickets",
    tags=["Tickets"],
)


# ============================================================
# LIST TICKETS
# ============================================================
@router.get(
    "",
    response_model=List[TicketRead],
    summary="List tickets",
    description="""
    Maintenance tickets (collection `segnalazioni`), newest first.

    **Query Parameters:**
    - `status`: `open`, `in_progress` or `resolved`
    - `condominio_id`: only tickets of this building
    """,
    dependencies=[Depends(requires_view(View.tickets))],
)
def list_tickets(
    status: Optional[TicketStatus] = Query(None),
    condominio_id: Optional[int] = Query(None),
    store: RecordStore = Depends(get_record_store),
):
    try:
        rows = Tickets(store).list()
    except KondoError as e:
        raise handle_store_error(e, "Failed to fetch tickets")

    if status:
        rows = [t for t in rows if t.status == status]
    if condominio_id is not None:
        rows = [t for t in rows if t.condominio_id == condominio_id]

    return sorted(rows, key=lambda t: t.created_at or "", reverse=True)


# ============================================================
# GET TICKET
# ============================================================
@router.get(
    "/{ticket_id}",
    response_model=TicketRead,
    summary="Get ticket",
    dependencies=[Depends(requires_view(View.tickets))],
)
def get_ticket(ticket_id: int, store: RecordStore = Depends(get_record_store)):
    try:
        return Tickets(store).get(ticket_id)
    except KondoError as e:
        raise handle_store_error(e, f"Failed to fetch ticket {ticket_id}")


# ============================================================
# CREATE TICKET (any signed-in role)
# ============================================================
@router.post(
    "",
    response_model=TicketRead,
    status_code=201,
    summary="Open a ticket",
    description="Starts as `open` with `created_at` set to now (UTC).",
)
def create_ticket(
    payload: TicketCreate,
    session: Session = Depends(requires_permission("create", EntityKind.tickets)),
    store: RecordStore = Depends(get_record_store),
):
    try:
        ticket = Tickets(store).create(payload)
    except KondoError as e:
        raise handle_store_error(e, "Failed to create ticket")

    logger.info(f"Ticket {ticket.id} opened by {session.email} ({session.role})")
    return ticket


# ============================================================
# UPDATE TICKET
# ============================================================
@router.put(
    "/{ticket_id}",
    response_model=TicketRead,
    summary="Update ticket",
    dependencies=[Depends(requires_permission("edit", EntityKind.tickets))],
)
def update_ticket(
    ticket_id: int,
    payload: TicketUpdate,
    store: RecordStore = Depends(get_record_store),
):
    try:
        return Tickets(store).update(ticket_id, payload)
    except KondoError as e:
        raise handle_store_error(e, f"Failed to update ticket {ticket_id}")


# ============================================================
# STATUS / PRIORITY (staff triage)
# ============================================================
@router.patch(
    "/{ticket_id}/status",
    response_model=TicketRead,
    summary="Change ticket status or priority",
    dependencies=[Depends(requires_permission("manage_status", EntityKind.tickets))],
)
def update_ticket_status(
    ticket_id: int,
    payload: TicketStatusUpdate,
    store: RecordStore = Depends(get_record_store),
):
    try:
        return Tickets(store).update(ticket_id, payload)
    except KondoError as e:
        raise handle_store_error(e, f"Failed to update status of ticket {ticket_id}")


# ============================================================
# AI ANALYSIS
# ============================================================
@router.post(
    "/{ticket_id}/analyze",
    response_model=TicketRead,
    summary="Analyze ticket with AI",
    description="""
    Generates a short triage note (priority estimate, professional to call,
    suggested reply) and stores it in `ai_analysis`. When the AI service is
    not configured or fails, the stored text says so.
    """,
    dependencies=[Depends(requires_permission("analyze", EntityKind.tickets))],
)
def analyze(ticket_id: int, store: RecordStore = Depends(get_record_store)):
    tickets = Tickets(store)

    try:
        ticket = tickets.get(ticket_id)
    except KondoError as e:
        raise handle_store_error(e, f"Failed to fetch ticket {ticket_id}")

    analysis = analyze_ticket(ticket.title, ticket.description)

    try:
        return tickets.set_analysis(ticket_id, analysis)
    except KondoError as e:
        raise handle_store_error(e, f"Failed to save analysis of ticket {ticket_id}")


# ============================================================
# DELETE TICKET
# ============================================================
@router.delete(
    "/{ticket_id}",
    summary="Delete ticket",
    dependencies=[Depends(requires_permission("delete", EntityKind.tickets))],
)
def delete_ticket(ticket_id: int, store: RecordStore = Depends(get_record_store)):
    try:
        Tickets(store).delete(ticket_id)
    except KondoError as e:
        raise handle_store_error(e, f"Failed to delete ticket {ticket_id}")

    return {"success": True, "deleted_id": ticket_id}
