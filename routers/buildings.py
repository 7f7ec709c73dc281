# routers/buildings.py

from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from core.errors import KondoError, handle_store_error
from core.permission_helpers import requires_permission, requires_view
from core.store import RecordStore, get_record_store
from models.building import BuildingCreate, BuildingUpdate, BuildingRead
from models.enums import EntityKind, View
from models.event import EventRead
from models.ticket import TicketRead
from models.unit import UnitRead
from services.records import Buildings, Events, Tickets, Units


router = APIRouter(
    prefix="/buildings",
    tags=["Buildings"]
)


# ============================================================
# LIST BUILDINGS
# ============================================================
@router.get(
    "",
    response_model=List[BuildingRead],
    summary="List Buildings",
    description="""
    Retrieve every building (collection `condomini`).

    **Permissions:** staff only (`buildings` view).

    **Query Parameters:**
    - `name`: case-insensitive partial match on the building name
    - `city`: case-insensitive partial match on the city
    """,
    dependencies=[Depends(requires_view(View.buildings))],
)
def list_buildings(
    name: Optional[str] = Query(None, description="Filter by name (partial match)"),
    city: Optional[str] = Query(None, description="Filter by city (partial match)"),
    store: RecordStore = Depends(get_record_store),
):
    try:
        rows = Buildings(store).list()
    except KondoError as e:
        raise handle_store_error(e, "Failed to fetch buildings")

    if name:
        rows = [b for b in rows if name.lower() in b.nome.lower()]
    if city:
        rows = [b for b in rows if city.lower() in b.city.lower()]

    return rows


# ============================================================
# GET BUILDING
# ============================================================
@router.get(
    "/{building_id}",
    response_model=BuildingRead,
    summary="Get Building",
    dependencies=[Depends(requires_view(View.buildings))],
)
def get_building(building_id: int, store: RecordStore = Depends(get_record_store)):
    try:
        return Buildings(store).get(building_id)
    except KondoError as e:
        raise handle_store_error(e, f"Failed to fetch building {building_id}")


# ============================================================
# CREATE BUILDING
# ============================================================
@router.post(
    "",
    response_model=BuildingRead,
    status_code=201,
    summary="Create Building",
    dependencies=[Depends(requires_permission("create", EntityKind.buildings))],
)
def create_building(payload: BuildingCreate, store: RecordStore = Depends(get_record_store)):
    try:
        return Buildings(store).create(payload)
    except KondoError as e:
        raise handle_store_error(e, "Failed to create building")


# ============================================================
# UPDATE BUILDING (partial merge)
# ============================================================
@router.put(
    "/{building_id}",
    response_model=BuildingRead,
    summary="Update Building",
    dependencies=[Depends(requires_permission("edit", EntityKind.buildings))],
)
def update_building(
    building_id: int,
    payload: BuildingUpdate,
    store: RecordStore = Depends(get_record_store),
):
    try:
        return Buildings(store).update(building_id, payload)
    except KondoError as e:
        raise handle_store_error(e, f"Failed to update building {building_id}")


# ============================================================
# DELETE BUILDING
# ============================================================
@router.delete(
    "/{building_id}",
    summary="Delete Building",
    description="""
    Removes the building only. Units, tickets and events that reference it
    are left untouched. Deleting an id that does not exist succeeds.
    """,
    dependencies=[Depends(requires_permission("delete", EntityKind.buildings))],
)
def delete_building(building_id: int, store: RecordStore = Depends(get_record_store)):
    try:
        Buildings(store).delete(building_id)
    except KondoError as e:
        raise handle_store_error(e, f"Failed to delete building {building_id}")

    return {"success": True, "deleted_id": building_id}


# ============================================================
# UNITS / TICKETS / EVENTS OF A BUILDING
# ============================================================
@router.get(
    "/{building_id}/units",
    response_model=List[UnitRead],
    summary="List units for a building",
    dependencies=[Depends(requires_view(View.units))],
)
def get_building_units(building_id: int, store: RecordStore = Depends(get_record_store)):
    try:
        return [u for u in Units(store).list() if u.condominio_id == building_id]
    except KondoError as e:
        raise handle_store_error(e, "Failed to fetch building units")


@router.get(
    "/{building_id}/tickets",
    response_model=List[TicketRead],
    summary="List tickets for a building",
    dependencies=[Depends(requires_view(View.buildings))],
)
def get_building_tickets(building_id: int, store: RecordStore = Depends(get_record_store)):
    try:
        return [t for t in Tickets(store).list() if t.condominio_id == building_id]
    except KondoError as e:
        raise handle_store_error(e, "Failed to fetch building tickets")


@router.get(
    "/{building_id}/events",
    response_model=List[EventRead],
    summary="List agenda events for a building",
    dependencies=[Depends(requires_view(View.buildings))],
)
def get_building_events(building_id: int, store: RecordStore = Depends(get_record_store)):
    # Events without a building apply to all of them
    try:
        return [
            ev for ev in Events(store).list()
            if ev.condominio_id is None or ev.condominio_id == building_id
        ]
    except KondoError as e:
        raise handle_store_error(e, "Failed to fetch building events")
