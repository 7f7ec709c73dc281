# routers/events.py

from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from core.errors import KondoError, handle_store_error
from core.permission_helpers import requires_permission, requires_view
from core.store import RecordStore, get_record_store
from models.enums import EntityKind, EventCategory, View
from models.event import EventCreate, EventUpdate, EventRead
from services.records import Events


router = APIRouter(
    prefix="/events",
    tags=["Agenda"],
)


# -----------------------------------------------------
# List events
# -----------------------------------------------------
@router.get(
    "",
    response_model=List[EventRead],
    summary="List agenda events",
    description="""
    Agenda entries (collection `agenda`) ordered by start date.

    **Query Parameters:**
    - `condominio_id`: events of this building plus events not tied to any building
    - `type`: `assemblea`, `manutenzione`, `scadenza` or `altro`
    """,
    dependencies=[Depends(requires_view(View.agenda))],
)
def list_events(
    condominio_id: Optional[int] = Query(None),
    type: Optional[EventCategory] = Query(None),
    store: RecordStore = Depends(get_record_store),
):
    try:
        rows = Events(store).list()
    except KondoError as e:
        raise handle_store_error(e, "Failed to fetch events")

    if condominio_id is not None:
        rows = [ev for ev in rows if ev.condominio_id is None or ev.condominio_id == condominio_id]
    if type:
        rows = [ev for ev in rows if ev.type == type]

    return sorted(rows, key=lambda ev: ev.start_date)


# -----------------------------------------------------
# Get one event
# -----------------------------------------------------
@router.get(
    "/{event_id}",
    response_model=EventRead,
    summary="Get event",
    dependencies=[Depends(requires_view(View.agenda))],
)
def get_event(event_id: int, store: RecordStore = Depends(get_record_store)):
    try:
        return Events(store).get(event_id)
    except KondoError as e:
        raise handle_store_error(e, f"Failed to fetch event {event_id}")


# -----------------------------------------------------
# Create event
# -----------------------------------------------------
@router.post(
    "",
    response_model=EventRead,
    status_code=201,
    summary="Create event",
    dependencies=[Depends(requires_permission("create", EntityKind.events))],
)
def create_event(payload: EventCreate, store: RecordStore = Depends(get_record_store)):
    try:
        return Events(store).create(payload)
    except KondoError as e:
        raise handle_store_error(e, "Failed to create event")


# -----------------------------------------------------
# Update event
# -----------------------------------------------------
@router.put(
    "/{event_id}",
    response_model=EventRead,
    summary="Update event",
    dependencies=[Depends(requires_permission("edit", EntityKind.events))],
)
def update_event(
    event_id: int,
    payload: EventUpdate,
    store: RecordStore = Depends(get_record_store),
):
    try:
        return Events(store).update(event_id, payload)
    except KondoError as e:
        raise handle_store_error(e, f"Failed to update event {event_id}")


# -----------------------------------------------------
# Delete event
# -----------------------------------------------------
@router.delete(
    "/{event_id}",
    summary="Delete event",
    dependencies=[Depends(requires_permission("delete", EntityKind.events))],
)
def delete_event(event_id: int, store: RecordStore = Depends(get_record_store)):
    try:
        Events(store).delete(event_id)
    except KondoError as e:
        raise handle_store_error(e, f"Failed to delete event {event_id}")

    return {"success": True, "deleted_id": event_id}
