from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator


class ProductType(str, Enum):
    STRUCTURAL_FLOOR = "structural-floor"
    UNDERLAYMENT = "underlayment"


class DocumentType(str, Enum):
    """
    Document category. Values are the short codes stored in the
    `documents.type` column and sent to the renderer as-is.
    """
    TECHNICAL_DATA_SHEET = "TDS"
    EVALUATION_REPORT = "ESR"
    SAFETY_DATA_SHEET = "MSDS"
    LEED_GUIDE = "LEED"
    INSTALLATION_GUIDE = "Installation"
    WARRANTY = "warranty"
    ACOUSTIC_REPORT = "Acoustic"
    PART_SPEC = "PartSpec"


class Document(BaseModel):
    """
    Domain model for a row of the `documents` table.
    Stored documents are treated as immutable; updates go through the store.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    filename: str = ""
    url: str = ""
    size: int = 0
    type: DocumentType = DocumentType.TECHNICAL_DATA_SHEET
    required: bool = False
    product_type: ProductType

    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class SelectedDocument(BaseModel):
    """
    One entry of a packet-build session: a stored document plus the
    caller-controlled inclusion flag and packet position.
    """
    id: str = ""
    document: Document
    selected: bool = True
    order: int = 0

    @model_validator(mode="after")
    def _default_id(self) -> "SelectedDocument":
        if not self.id:
            self.id = self.document.id
        return self


__all__ = ["Document", "DocumentType", "ProductType", "SelectedDocument"]
