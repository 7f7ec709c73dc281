# routers/people.py

from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from core.errors import KondoError, handle_store_error
from core.logging_config import logger
from core.permission_helpers import requires_permission, requires_view
from core.store import RecordStore, get_record_store
from dependencies.auth import revoke_person_tokens
from models.enums import EntityKind, PersonRole, View
from models.person import PersonCreate, PersonUpdate, PersonRead
from services.records import People


router = APIRouter(
    prefix="/people",
    tags=["People"],
)


@router.get(
    "",
    response_model=List[PersonRead],
    summary="List people",
    description="""
    Owners and tenants (collection `anagrafiche`). The tax code is returned
    decrypted.

    **Query Parameters:**
    - `role`: `owner` or `tenant`
    - `q`: case-insensitive search on name and email
    """,
    dependencies=[Depends(requires_view(View.people))],
)
def list_people(
    role: Optional[PersonRole] = Query(None),
    q: Optional[str] = Query(None, description="Search name / email"),
    store: RecordStore = Depends(get_record_store),
):
    try:
        rows = People(store).list()
    except KondoError as e:
        raise handle_store_error(e, "Failed to fetch people")

    if role:
        rows = [p for p in rows if p.role == role]
    if q:
        needle = q.lower()
        rows = [p for p in rows if needle in p.nome.lower() or needle in p.email.lower()]

    return rows


@router.get(
    "/{person_id}",
    response_model=PersonRead,
    summary="Get person",
    dependencies=[Depends(requires_view(View.people))],
)
def get_person(person_id: int, store: RecordStore = Depends(get_record_store)):
    try:
        return People(store).get(person_id)
    except KondoError as e:
        raise handle_store_error(e, f"Failed to fetch person {person_id}")


@router.post(
    "",
    response_model=PersonRead,
    status_code=201,
    summary="Create person",
    dependencies=[Depends(requires_permission("create", EntityKind.people))],
)
def create_person(payload: PersonCreate, store: RecordStore = Depends(get_record_store)):
    try:
        return People(store).create(payload)
    except KondoError as e:
        raise handle_store_error(e, "Failed to create person")


@router.put(
    "/{person_id}",
    response_model=PersonRead,
    summary="Update person",
    dependencies=[Depends(requires_permission("edit", EntityKind.people))],
)
def update_person(
    person_id: int,
    payload: PersonUpdate,
    store: RecordStore = Depends(get_record_store),
):
    people = People(store)
    try:
        before = people.get(person_id)
        person = people.update(person_id, payload)
    except KondoError as e:
        raise handle_store_error(e, f"Failed to update person {person_id}")

    # Tax code and email are the login credentials
    if payload.codice_fiscale is not None or person.email.strip().lower() != before.email.strip().lower():
        revoke_person_tokens(person_id)
        logger.info(f"Credentials changed for person {person_id}, sessions revoked")

    return person


@router.delete(
    "/{person_id}",
    summary="Delete person",
    description="Units keep their owner_id / tenant_id references.",
    dependencies=[Depends(requires_permission("delete", EntityKind.people))],
)
def delete_person(person_id: int, store: RecordStore = Depends(get_record_store)):
    try:
        People(store).delete(person_id)
    except KondoError as e:
        raise handle_store_error(e, f"Failed to delete person {person_id}")

    return {"success": True, "deleted_id": person_id}
