# routers/documents.py

import base64
import binascii
from pathlib import Path as PathLib
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from fastapi.responses import Response

from core.config import settings
from core.errors import KondoError, ValidationFailure, handle_store_error
from core.logging_config import logger
from core.permission_helpers import requires_permission, requires_view
from core.store import RecordStore, get_record_store
from models.document import PDF_DATA_URL_PREFIX, DocumentCreate, DocumentRead, DocumentSummary
from models.enums import DocumentCategory, EntityKind, View
from services.records import Documents


router = APIRouter(
    prefix="/documents",
    tags=["Documents"],
)


# ============================================================
# LIST DOCUMENTS (without payload)
# ============================================================
@router.get(
    "",
    response_model=List[DocumentSummary],
    summary="List documents",
    description="""
    Document archive (collection `documenti`). The PDF payload is not part of
    the listing; use `GET /documents/{id}/download`.

    **Query Parameters:**
    - `tipo`: `contratto`, `avviso`, `verbale` or `altro`
    - `q`: case-insensitive search on the document name
    """,
    dependencies=[Depends(requires_view(View.documents))],
)
def list_documents(
    tipo: Optional[DocumentCategory] = Query(None),
    q: Optional[str] = Query(None, description="Search by name"),
    store: RecordStore = Depends(get_record_store),
):
    try:
        rows = Documents(store).summaries()
    except KondoError as e:
        raise handle_store_error(e, "Failed to fetch documents")

    if tipo:
        rows = [d for d in rows if d.tipo == tipo]
    if q:
        rows = [d for d in rows if q.lower() in d.nome.lower()]

    return rows


@router.get(
    "/{document_id}",
    response_model=DocumentRead,
    summary="Get document with payload",
    dependencies=[Depends(requires_view(View.documents))],
)
def get_document(document_id: int, store: RecordStore = Depends(get_record_store)):
    try:
        return Documents(store).get(document_id)
    except KondoError as e:
        raise handle_store_error(e, f"Failed to fetch document {document_id}")


# ============================================================
# DOWNLOAD
# ============================================================
@router.get(
    "/{document_id}/download",
    summary="Download document as PDF",
    response_class=Response,
    dependencies=[Depends(requires_view(View.documents))],
)
def download_document(document_id: int, store: RecordStore = Depends(get_record_store)):
    try:
        document = Documents(store).get(document_id)
    except KondoError as e:
        raise handle_store_error(e, f"Failed to fetch document {document_id}")

    data_url = document.file_data or ""
    if not data_url.startswith(PDF_DATA_URL_PREFIX):
        raise HTTPException(404, f"Document {document_id} has no PDF payload")

    try:
        content = base64.b64decode(data_url[len(PDF_DATA_URL_PREFIX):], validate=True)
    except (binascii.Error, ValueError):
        logger.error(f"Document {document_id} payload is not valid base64")
        raise HTTPException(502, f"Document {document_id} payload is corrupted")

    filename = document.file_name or f"{document.nome}.pdf"
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# ============================================================
# CREATE (JSON, payload already a data URL)
# ============================================================
@router.post(
    "",
    response_model=DocumentSummary,
    status_code=201,
    summary="Create document from a data URL",
    description=f"""
    `file_data` must be a `{PDF_DATA_URL_PREFIX}...` data URL and `dimensione`
    the original size in bytes (at most {settings.MAX_DOCUMENT_SIZE_BYTES // 1024}KB).
    """,
    dependencies=[Depends(requires_permission("create", EntityKind.documents))],
)
def create_document(payload: DocumentCreate, store: RecordStore = Depends(get_record_store)):
    try:
        document = Documents(store).create(payload)
    except KondoError as e:
        raise handle_store_error(e, "Failed to create document")

    return DocumentSummary.model_validate(document.model_dump())


# ============================================================
# UPLOAD (multipart)
# ============================================================
@router.post(
    "/upload",
    response_model=DocumentSummary,
    status_code=201,
    summary="Upload a PDF document",
    description=f"""
    Multipart upload. Only PDF files are accepted, up to
    {settings.MAX_DOCUMENT_SIZE_BYTES // 1024}KB. The file is stored inline as
    a base64 data URL.
    """,
    dependencies=[Depends(requires_permission("create", EntityKind.documents))],
)
async def upload_document(
    file: UploadFile = File(...),
    nome: Optional[str] = Form(None, description="Display name, defaults to the file name"),
    tipo: DocumentCategory = Form(DocumentCategory.contract),
    store: RecordStore = Depends(get_record_store),
):
    filename = file.filename or ""
    is_pdf = PathLib(filename).suffix.lower() == ".pdf" or file.content_type == "application/pdf"
    if not is_pdf:
        raise HTTPException(422, "Only PDF files can be uploaded")

    # Read one byte past the limit so oversized files are detected without loading them whole
    content = await file.read(settings.MAX_DOCUMENT_SIZE_BYTES + 1)
    if len(content) > settings.MAX_DOCUMENT_SIZE_BYTES:
        raise HTTPException(
            422,
            f"File too large: the limit is {settings.MAX_DOCUMENT_SIZE_BYTES // 1024}KB per document",
        )

    documents = Documents(store)
    try:
        payload = documents.parse_create({
            "nome": nome or PathLib(filename).stem or filename,
            "tipo": tipo.value,
            "file_name": filename,
            "file_data": PDF_DATA_URL_PREFIX + base64.b64encode(content).decode("ascii"),
            "dimensione": len(content),
        })
        document = documents.create(payload)
    except ValidationFailure as e:
        raise HTTPException(422, e.message)
    except KondoError as e:
        raise handle_store_error(e, "Failed to upload document")

    logger.info(f"Uploaded document {document.id}: {filename} ({len(content)} bytes)")
    return DocumentSummary.model_validate(document.model_dump())


# ============================================================
# DELETE
# ============================================================
@router.delete(
    "/{document_id}",
    summary="Delete document",
    dependencies=[Depends(requires_permission("delete", EntityKind.documents))],
)
def delete_document(document_id: int, store: RecordStore = Depends(get_record_store)):
    try:
        Documents(store).delete(document_id)
    except KondoError as e:
        raise handle_store_error(e, f"Failed to delete document {document_id}")

    return {"success": True, "deleted_id": document_id}
