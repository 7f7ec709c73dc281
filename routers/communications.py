# routers/communications.py

from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from core.errors import KondoError, handle_store_error
from core.permission_helpers import requires_permission, requires_view
from core.store import RecordStore, get_record_store
from models.communication import (
    CommunicationCreate,
    CommunicationDraft,
    CommunicationRead,
    CommunicationUpdate,
    DraftRequest,
)
from models.enums import EntityKind, View
from services.ai_assistant import draft_communication
from services.records import Communications


router = APIRouter(
    prefix="/communications",
    tags=["Communications"],
)


# ============================================================
# LIST
# ============================================================
@router.get(
    "",
    response_model=List[CommunicationRead],
    summary="List communications",
    description="""
    Announcements sent to residents (collection `comunicazioni`), newest first.

    **Query Parameters:**
    - `condominio_id`: announcements for this building plus general ones
    """,
    dependencies=[Depends(requires_view(View.communications))],
)
def list_communications(
    condominio_id: Optional[int] = Query(None),
    store: RecordStore = Depends(get_record_store),
):
    try:
        rows = Communications(store).list()
    except KondoError as e:
        raise handle_store_error(e, "Failed to fetch communications")

    if condominio_id is not None:
        rows = [c for c in rows if c.condominio_id is None or c.condominio_id == condominio_id]

    return sorted(rows, key=lambda c: c.sent_at or "", reverse=True)


# ============================================================
# AI DRAFT
# ============================================================
@router.post(
    "/draft",
    response_model=CommunicationDraft,
    summary="Draft a communication with AI",
    description="""
    Returns a `{title, content}` draft for the given topic and tone. Nothing
    is stored; the client sends the edited draft to `POST /communications`.
    """,
    dependencies=[Depends(requires_permission("draft", EntityKind.communications))],
)
def draft(payload: DraftRequest):
    return draft_communication(payload.topic, payload.tone)


@router.get(
    "/{communication_id}",
    response_model=CommunicationRead,
    summary="Get communication",
    dependencies=[Depends(requires_view(View.communications))],
)
def get_communication(communication_id: int, store: RecordStore = Depends(get_record_store)):
    try:
        return Communications(store).get(communication_id)
    except KondoError as e:
        raise handle_store_error(e, f"Failed to fetch communication {communication_id}")


# ============================================================
# CREATE / UPDATE / DELETE
# ============================================================
@router.post(
    "",
    response_model=CommunicationRead,
    status_code=201,
    summary="Send communication",
    dependencies=[Depends(requires_permission("create", EntityKind.communications))],
)
def create_communication(payload: CommunicationCreate, store: RecordStore = Depends(get_record_store)):
    try:
        return Communications(store).create(payload)
    except KondoError as e:
        raise handle_store_error(e, "Failed to create communication")


@router.put(
    "/{communication_id}",
    response_model=CommunicationRead,
    summary="Update communication",
    dependencies=[Depends(requires_permission("edit", EntityKind.communications))],
)
def update_communication(
    communication_id: int,
    payload: CommunicationUpdate,
    store: RecordStore = Depends(get_record_store),
):
    try:
        return Communications(store).update(communication_id, payload)
    except KondoError as e:
        raise handle_store_error(e, f"Failed to update communication {communication_id}")


@router.delete(
    "/{communication_id}",
    summary="Delete communication",
    dependencies=[Depends(requires_permission("delete", EntityKind.communications))],
)
def delete_communication(communication_id: int, store: RecordStore = Depends(get_record_store)):
    try:
        Communications(store).delete(communication_id)
    except KondoError as e:
        raise handle_store_error(e, f"Failed to delete communication {communication_id}")

    return {"success": True, "deleted_id": communication_id}
