# routers/transfer.py

"""
CSV export / import.

Registered before the per-collection routers so `/buildings/export` is not
captured by `/buildings/{building_id}`.
"""

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import Response

from core.csv_utils import import_records, records_to_csv
from core.errors import KondoError, handle_store_error
from core.logging_config import logger
from core.permission_helpers import can_perform
from core.store import RecordStore, get_record_store
from dependencies.auth import get_current_session
from models.auth import Session
from models.enums import EntityKind
from services.records import collection_for


router = APIRouter(tags=["Import / Export"])


EXPORTABLE = {EntityKind.buildings, EntityKind.units, EntityKind.people, EntityKind.tickets}

# Rows missing any of these are counted as failed without hitting the store
IMPORT_REQUIRED = {
    EntityKind.buildings: ["nome", "indirizzo"],
    EntityKind.units: ["condominio_id", "nome"],
    EntityKind.people: ["nome", "email"],
}


def _require(session: Session, action: str, collection: EntityKind) -> None:
    if not can_perform(session.role, action, collection):
        raise HTTPException(
            status_code=403,
            detail=f"Insufficient permissions: '{collection.value}:{action}' required",
        )


# ============================================================
# EXPORT
# ============================================================
@router.get(
    "/{collection}/export",
    summary="Export a collection as CSV",
    response_class=Response,
    description="""
    Available for `buildings`, `units`, `people` and `tickets`.
    Every cell is double-quoted; the header comes from the record fields.
    """,
)
def export_collection(
    collection: EntityKind,
    session: Session = Depends(get_current_session),
    store: RecordStore = Depends(get_record_store),
):
    if collection not in EXPORTABLE:
        raise HTTPException(404, f"'{collection.value}' cannot be exported")
    _require(session, "export", collection)

    try:
        rows = [r.model_dump(mode="json") for r in collection_for(collection, store).list()]
    except KondoError as e:
        raise handle_store_error(e, f"Failed to export {collection.value}")

    logger.info(f"{session.email} exported {len(rows)} {collection.value}")
    return Response(
        content=records_to_csv(rows),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{collection.value}.csv"'},
    )


# ============================================================
# IMPORT
# ============================================================
@router.post(
    "/{collection}/import",
    summary="Import a CSV file into a collection",
    description="""
    Available for `buildings`, `units` and `people`.

    The first line is the header. An `id` column is ignored: every valid row
    becomes a new record. Rows that fail validation or reference missing
    records are counted in `failed`.
    """,
)
async def import_collection(
    collection: EntityKind,
    file: UploadFile = File(...),
    session: Session = Depends(get_current_session),
    store: RecordStore = Depends(get_record_store),
):
    if collection not in IMPORT_REQUIRED:
        raise HTTPException(404, f"'{collection.value}' cannot be imported")
    _require(session, "import", collection)

    raw = await file.read()
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise HTTPException(422, "CSV file must be UTF-8 encoded")

    target = collection_for(collection, store)
    success, failed = import_records(
        text,
        IMPORT_REQUIRED[collection],
        lambda record: target.create(target.parse_create(record)),
    )

    return {"success": success, "failed": failed}
