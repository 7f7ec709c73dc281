# routers/units.py

from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from core.errors import KondoError, handle_store_error
from core.permission_helpers import requires_permission, requires_view
from core.store import RecordStore, get_record_store
from models.enums import EntityKind, View
from models.unit import UnitCreate, UnitUpdate, UnitRead
from services.records import Units


router = APIRouter(
    prefix="/units",
    tags=["Units"],
)


# ============================================================
# LIST UNITS
# ============================================================
@router.get(
    "",
    response_model=List[UnitRead],
    summary="List units",
    description="""
    Retrieve units (collection `immobili`).

    **Query Parameters:**
    - `condominio_id`: only units of this building
    """,
    dependencies=[Depends(requires_view(View.units))],
)
def list_units(
    condominio_id: Optional[int] = Query(None, description="Filter by building"),
    store: RecordStore = Depends(get_record_store),
):
    try:
        rows = Units(store).list()
    except KondoError as e:
        raise handle_store_error(e, "Failed to fetch units")

    if condominio_id is not None:
        rows = [u for u in rows if u.condominio_id == condominio_id]

    return rows


# ============================================================
# GET UNIT
# ============================================================
@router.get(
    "/{unit_id}",
    response_model=UnitRead,
    summary="Get unit",
    dependencies=[Depends(requires_view(View.units))],
)
def get_unit(unit_id: int, store: RecordStore = Depends(get_record_store)):
    try:
        return Units(store).get(unit_id)
    except KondoError as e:
        raise handle_store_error(e, f"Failed to fetch unit {unit_id}")


# ============================================================
# CREATE UNIT
# ============================================================
@router.post(
    "",
    response_model=UnitRead,
    status_code=201,
    summary="Create unit",
    description="""
    The building must exist. Owner and tenant, when given, must exist in
    the people collection.
    """,
    dependencies=[Depends(requires_permission("create", EntityKind.units))],
)
def create_unit(payload: UnitCreate, store: RecordStore = Depends(get_record_store)):
    try:
        return Units(store).create(payload)
    except KondoError as e:
        raise handle_store_error(e, "Failed to create unit")


# ============================================================
# UPDATE UNIT
# ============================================================
@router.put(
    "/{unit_id}",
    response_model=UnitRead,
    summary="Update unit",
    dependencies=[Depends(requires_permission("edit", EntityKind.units))],
)
def update_unit(
    unit_id: int,
    payload: UnitUpdate,
    store: RecordStore = Depends(get_record_store),
):
    try:
        return Units(store).update(unit_id, payload)
    except KondoError as e:
        raise handle_store_error(e, f"Failed to update unit {unit_id}")


# ============================================================
# DELETE UNIT
# ============================================================
@router.delete(
    "/{unit_id}",
    summary="Delete unit",
    dependencies=[Depends(requires_permission("delete", EntityKind.units))],
)
def delete_unit(unit_id: int, store: RecordStore = Depends(get_record_store)):
    try:
        Units(store).delete(unit_id)
    except KondoError as e:
        raise handle_store_error(e, f"Failed to delete unit {unit_id}")

    return {"success": True, "deleted_id": unit_id}
