"""
JSON file storage adapter for the submittal packet service.
Simple file-based storage for quick demos and testing.
Not production-ready (no proper locking, not suitable for concurrent access).
"""
import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from core.errors import DocumentNotFoundError
from models import Document, DocumentType, ProductType
from models.converters import document_from_row

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = {"name", "description", "required", "type"}


class JsonDocumentStore:
    """
    JSON file-based document store.
    All rows live in `documents.json` under the data directory.
    Uses atomic file operations for basic consistency.
    """

    def __init__(self, data_dir: str = "data"):
        """
        Initialize the JSON store.

        Args:
            data_dir: Directory to store JSON files
        """
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.documents_file = self.data_dir / "documents.json"

        if not self.documents_file.exists():
            self._write_file(self.documents_file, [])

    def _read_file(self, filepath: Path) -> List[Dict[str, Any]]:
        """Read and parse a JSON file."""
        try:
            with open(filepath, "r", encoding="utf-8") as f:
                return json.load(f)
        except (FileNotFoundError, json.JSONDecodeError):
            return []

    def _write_file(self, filepath: Path, data: List[Dict[str, Any]]) -> None:
        """Write data to a JSON file atomically."""
        # Write to temporary file first
        tmp_file = filepath.with_suffix(".tmp")
        with open(tmp_file, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False, default=str)

        # Atomic rename
        tmp_file.replace(filepath)

    def _rows_newest_first(self) -> List[Dict[str, Any]]:
        rows = self._read_file(self.documents_file)
        # stable sort keeps insertion order for identical timestamps
        return sorted(rows, key=lambda r: r.get("created_at") or "", reverse=True)

    def list_documents(self) -> List[Document]:
        return [document_from_row(r) for r in self._rows_newest_first()]

    def list_documents_by_product_type(self, product_type: ProductType) -> List[Document]:
        key = ProductType(product_type).value
        return [
            document_from_row(r)
            for r in self._rows_newest_first()
            if r.get("product_type") == key
        ]

    def get_document(self, document_id: str) -> Optional[Document]:
        for row in self._read_file(self.documents_file):
            if row.get("id") == document_id:
                return document_from_row(row)
        return None

    def create_document(
        self,
        *,
        name: str,
        filename: str,
        file_url: str,
        size: int,
        type: DocumentType,
        product_type: ProductType,
        description: str = "",
        required: bool = False,
    ) -> Document:
        """Create a new document."""
        now = datetime.now(timezone.utc).isoformat()
        row = {
            "id": str(uuid.uuid4()),
            "name": name,
            "description": description or "",
            "filename": filename,
            "file_url": file_url,
            "size": int(size or 0),
            "type": DocumentType(type).value,
            "product_type": ProductType(product_type).value,
            "required": bool(required),
            "created_at": now,
            "updated_at": now,
        }
        rows = self._read_file(self.documents_file)
        rows.append(row)
        self._write_file(self.documents_file, rows)
        return document_from_row(row)

    def update_document(self, document_id: str, updates: Dict[str, Any]) -> Document:
        rows = self._read_file(self.documents_file)
        for row in rows:
            if row.get("id") != document_id:
                continue
            for key, value in updates.items():
                if key in UPDATABLE_FIELDS:
                    row[key] = value.value if isinstance(value, DocumentType) else value
            row["updated_at"] = datetime.now(timezone.utc).isoformat()
            self._write_file(self.documents_file, rows)
            return document_from_row(row)
        raise DocumentNotFoundError(document_id)

    def delete_document(self, document_id: str) -> None:
        rows = self._read_file(self.documents_file)
        remaining = [r for r in rows if r.get("id") != document_id]
        if len(remaining) == len(rows):
            raise DocumentNotFoundError(document_id)
        self._write_file(self.documents_file, remaining)
