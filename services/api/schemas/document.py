"""
Pydantic schemas for documents.
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from models import Document, DocumentType, ProductType


class DocumentOut(BaseModel):
    """Schema for document output."""
    id: str = Field(..., description="Document ID")
    name: str
    description: str = ""
    filename: str = ""
    url: str = ""
    size: int = 0
    type: DocumentType
    required: bool = False
    product_type: ProductType
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_document(cls, doc: Document) -> "DocumentOut":
        return cls.model_validate(doc)


class DocumentUpdate(BaseModel):
    """Editable metadata. Anything else on a document is fixed at upload."""
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    required: Optional[bool] = None
    type: Optional[DocumentType] = None


class DocumentWithData(DocumentOut):
    """Document plus its base64 content (export for the renderer)."""
    file_data: str = Field(..., serialization_alias="fileData")
