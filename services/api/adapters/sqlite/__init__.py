# services/api/adapters/sqlite/__init__.py
from __future__ import annotations

import logging
import os
import sqlite3
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from cachetools import TTLCache
from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    DateTime,
    Index,
    MetaData,
    String,
    Table,
    Text,
    create_engine,
    delete,
    event,
    insert,
    select,
    update,
)
from sqlalchemy.engine import Engine

from core.errors import DocumentNotFoundError
from models import Document, DocumentType, ProductType
from models.converters import document_from_row

logger = logging.getLogger(__name__)

# Columns a caller may change after upload
UPDATABLE_COLUMNS = {"name", "description", "required", "type"}

# ---- Engine (SQLite) with WAL & pragmas -------------------------------------

def _ensure_dir(path: str):
    d = os.path.dirname(path)
    if d and not os.path.isdir(d):
        os.makedirs(d, exist_ok=True)

def make_engine(db_url: str) -> Engine:
    # Create data dir if sqlite file
    if db_url.startswith("sqlite:///"):
        file_path = db_url.replace("sqlite:///", "", 1)
        _ensure_dir(file_path)

    engine = create_engine(db_url, future=True, pool_pre_ping=True)

    # Apply pragmas per-connection
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):  # type: ignore
        if isinstance(dbapi_connection, sqlite3.Connection):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA journal_mode=WAL;")
            cursor.execute("PRAGMA synchronous=NORMAL;")
            cursor.execute("PRAGMA temp_store=MEMORY;")
            cursor.close()

    return engine

def _now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)

# ---- Schema via SQLAlchemy Core ---------------------------------------------

metadata = MetaData()

documents = Table(
    "documents",
    metadata,
    Column("id", String, primary_key=True),
    Column("name", Text, nullable=False),
    Column("description", Text, default=""),
    Column("filename", Text, nullable=False),
    Column("file_url", Text, nullable=False),
    Column("size", BigInteger, default=0),
    Column("type", String, nullable=False),
    Column("product_type", String, nullable=False),
    Column("required", Boolean, default=False),
    Column("created_at", DateTime, nullable=False, default=_now),
    Column("updated_at", DateTime, nullable=False, default=_now),
)

Index("idx_documents_product_type", documents.c.product_type, documents.c.created_at)

# ---- Adapter implementation --------------------------------------------------

@dataclass(frozen=True)
class SqliteDocumentStore:
    engine: Engine
    # product_type -> catalog; dropped on every write
    catalog_cache: TTLCache = field(
        default_factory=lambda: TTLCache(maxsize=16, ttl=5), compare=False, repr=False
    )

    @classmethod
    def from_url(cls, db_url: str = "sqlite:///data/packets.db") -> "SqliteDocumentStore":
        eng = make_engine(db_url)
        metadata.create_all(eng)
        return cls(engine=eng)

    def _select_newest_first(self):
        return select(documents).order_by(documents.c.created_at.desc())

    # Reads
    def list_documents(self) -> List[Document]:
        with self.engine.begin() as conn:
            rows = conn.execute(self._select_newest_first()).mappings().all()
        return [document_from_row(dict(r)) for r in rows]

    def list_documents_by_product_type(self, product_type: ProductType) -> List[Document]:
        key = ProductType(product_type).value
        cached = self.catalog_cache.get(key)
        if cached is not None:
            return list(cached)

        with self.engine.begin() as conn:
            rows = conn.execute(
                self._select_newest_first().where(documents.c.product_type == key)
            ).mappings().all()
        docs = [document_from_row(dict(r)) for r in rows]
        self.catalog_cache[key] = docs
        return list(docs)

    def get_document(self, document_id: str) -> Optional[Document]:
        with self.engine.begin() as conn:
            row = conn.execute(
                select(documents).where(documents.c.id == document_id)
            ).mappings().first()
        return document_from_row(dict(row)) if row else None

    # Writes
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
        document_id = str(uuid4())
        now = _now()
        with self.engine.begin() as conn:
            conn.execute(
                insert(documents).values(
                    id=document_id,
                    name=name,
                    description=description or "",
                    filename=filename,
                    file_url=file_url,
                    size=int(size or 0),
                    type=DocumentType(type).value,
                    product_type=ProductType(product_type).value,
                    required=bool(required),
                    created_at=now,
                    updated_at=now,
                )
            )
        self.catalog_cache.clear()
        logger.info(f"Created document {document_id} ({name}) for {ProductType(product_type).value}")
        return self.get_document(document_id)

    def update_document(self, document_id: str, updates: Dict[str, Any]) -> Document:
        values: Dict[str, Any] = {}
        for key, value in updates.items():
            if key not in UPDATABLE_COLUMNS:
                continue
            values[key] = value.value if isinstance(value, DocumentType) else value
        values["updated_at"] = _now()

        with self.engine.begin() as conn:
            res = conn.execute(
                update(documents).where(documents.c.id == document_id).values(**values)
            )
            if res.rowcount == 0:
                raise DocumentNotFoundError(document_id)
        self.catalog_cache.clear()
        return self.get_document(document_id)

    def delete_document(self, document_id: str) -> None:
        with self.engine.begin() as conn:
            res = conn.execute(delete(documents).where(documents.c.id == document_id))
            if res.rowcount == 0:
                raise DocumentNotFoundError(document_id)
        self.catalog_cache.clear()
        logger.info(f"Deleted document row {document_id}")
