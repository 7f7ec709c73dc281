from typing import Optional
from pydantic import BaseModel, Field, field_validator

from core.config import settings
from .common import require_text, stringify
from .enums import DocumentCategory


PDF_DATA_URL_PREFIX = "data:application/pdf;base64,"


# ======================================================
# BASE MODEL (collection "documenti")
# ======================================================

class DocumentBase(BaseModel):
    """
    Shared fields for create/read.
    The binary payload is kept inline as a base64 data URL.
    """

    nome: str = Field(..., description="Display name (required)")
    tipo: DocumentCategory = DocumentCategory.contract

    @field_validator("nome", mode="before")
    def text_fields(cls, v):
        return stringify(v)


# ======================================================
# CREATE
# ======================================================

class DocumentCreate(DocumentBase):
    file_name: str
    file_data: str
    dimensione: int = Field(..., description="Size in bytes of the original file")

    @field_validator("nome")
    def validate_nome(cls, v):
        return require_text(v, "Document name")

    @field_validator("file_data")
    def validate_file_data(cls, v):
        if not v.startswith(PDF_DATA_URL_PREFIX):
            raise ValueError("Only PDF files can be uploaded")
        return v

    @field_validator("dimensione")
    def validate_dimensione(cls, v):
        if v <= 0:
            raise ValueError("Uploaded file is empty")
        if v > settings.MAX_DOCUMENT_SIZE_BYTES:
            raise ValueError(
                f"File too large: the limit is {settings.MAX_DOCUMENT_SIZE_BYTES // 1024}KB per document"
            )
        return v


# ======================================================
# READ
# ======================================================

class DocumentSummary(DocumentBase):
    """Listing shape; the payload is served by the download endpoint only."""

    id: int
    data_caricamento: Optional[str] = None
    file_name: Optional[str] = None
    dimensione: Optional[int] = None


class DocumentRead(DocumentSummary):
    file_data: Optional[str] = None
