from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict

from . import Document, DocumentType, ProductType

logger = logging.getLogger(__name__)


def _bool_from_row(v: Any) -> bool:
    """
    Convert a stored boolean to Python bool.
    Accepts: True/False, 1/0, "true"/"false", yes/no (case-insensitive).
    """
    if v is None:
        return False
    if isinstance(v, bool):
        return v
    s = str(v).strip().upper()
    return s in ("TRUE", "1", "YES", "Y")


def _timestamp(v: Any) -> str | None:
    if v is None or v == "":
        return None
    if isinstance(v, datetime):
        return v.isoformat()
    return str(v)


def _document_type(v: Any) -> DocumentType:
    try:
        return DocumentType(v)
    except ValueError:
        # Legacy rows stored the product type in `type`
        logger.warning(f"Unknown document type {v!r}, falling back to TDS")
        return DocumentType.TECHNICAL_DATA_SHEET


def document_from_row(row: Dict[str, Any]) -> Document:
    return Document(
        id=str(row.get("id", "")),
        name=row.get("name") or "",
        description=row.get("description") or "",
        filename=row.get("filename") or "",
        url=row.get("file_url") or "",
        size=int(row.get("size") or 0),
        type=_document_type(row.get("type")),
        required=_bool_from_row(row.get("required")),
        product_type=ProductType(row.get("product_type")),
        created_at=_timestamp(row.get("created_at")),
        updated_at=_timestamp(row.get("updated_at")),
    )

