# services/api/core/document_service.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from adapters.base import DocumentStore
from core.errors import DocumentNotFoundError, StorageError
from core.file_storage import LocalFileStorage
from core.validation import (
    MAX_UPLOAD_BYTES,
    MIN_UPLOAD_BYTES,
    detect_document_type,
    extract_document_name,
    validate_pdf_upload,
)
from models import Document, ProductType

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "description", "required", "type")


class DocumentService:
    """
    Upload / edit / delete of stored documents.
    Metadata goes to the DocumentStore, binaries to LocalFileStorage.
    """

    def __init__(
        self,
        store: DocumentStore,
        files: LocalFileStorage,
        max_upload_bytes: int = MAX_UPLOAD_BYTES,
        min_upload_bytes: int = MIN_UPLOAD_BYTES,
    ):
        self.store = store
        self.files = files
        self.max_upload_bytes = max_upload_bytes
        self.min_upload_bytes = min_upload_bytes

    def upload_document(
        self,
        *,
        filename: str,
        content_type: Optional[str],
        data: bytes,
        product_type: ProductType,
    ) -> Document:
        page_count = validate_pdf_upload(
            filename,
            content_type,
            data,
            max_bytes=self.max_upload_bytes,
            min_bytes=self.min_upload_bytes,
        )

        product_type = ProductType(product_type)
        try:
            file_url = self.files.save(product_type.value, filename, data)
        except OSError as e:
            logger.error(f"Storage upload error: {e}")
            raise StorageError(f"Failed to upload file: {e}") from e

        doc_type = detect_document_type(filename)
        try:
            doc = self.store.create_document(
                name=extract_document_name(filename, doc_type),
                description=f"{doc_type.value} Document",
                filename=filename,
                file_url=file_url,
                size=len(data),
                type=doc_type,
                product_type=product_type,
                required=False,
            )
        except Exception as e:
            logger.error(f"Database insert error: {e}")
            # Don't leave an orphaned file behind
            try:
                self.files.remove(file_url)
            except OSError as cleanup_err:
                logger.error(f"Failed to remove orphaned upload {file_url}: {cleanup_err}")
            raise StorageError(f"Failed to save document metadata: {e}") from e

        logger.info(
            f"Uploaded {filename} as {doc.id} ({doc_type.value}, {page_count} pages, "
            f"{len(data)} bytes)"
        )
        return doc

    def update_document(self, document_id: str, updates: Dict[str, Any]) -> Document:
        if self.store.get_document(document_id) is None:
            raise DocumentNotFoundError(document_id)

        # Only non-empty values are applied; `required` may be False
        clean: Dict[str, Any] = {}
        for key in UPDATABLE_FIELDS:
            value = updates.get(key)
            if key == "required":
                if value is not None:
                    clean[key] = bool(value)
            elif value:
                clean[key] = value

        return self.store.update_document(document_id, clean)

    def delete_document(self, document_id: str) -> None:
        existing = self.store.get_document(document_id)
        if existing is None:
            raise DocumentNotFoundError(document_id)

        if existing.url:
            try:
                removed = self.files.remove(existing.url)
                if not removed:
                    logger.warning(f"No stored file behind {existing.url}")
            except OSError as e:
                logger.error(f"Error deleting file from storage: {e}")

        self.store.delete_document(document_id)
