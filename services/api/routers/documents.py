# services/api/routers/documents.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

import httpx
from fastapi import APIRouter, File, Form, HTTPException, Query, Request, Response, UploadFile, status

from core.document_encoder import DocumentEncoder
from core.document_service import DocumentService
from core.errors import DocumentNotFoundError, InvalidDocumentError, StorageError
from models import ProductType
from schemas.document import DocumentOut, DocumentUpdate, DocumentWithData

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])


# ====== Helpers ======

def _store(request: Request):
    store = getattr(request.app.state, "document_store", None)
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Document store not initialized",
        )
    return store


@asynccontextmanager
async def _http_client(request: Request) -> AsyncIterator[httpx.AsyncClient]:
    client = getattr(request.app.state, "http_client", None)
    if client is not None:
        yield client
        return
    settings = request.app.state.settings
    async with httpx.AsyncClient(
        timeout=settings.document_fetch_timeout_seconds, follow_redirects=True
    ) as client:
        yield client


def _service(request: Request) -> DocumentService:
    return DocumentService(
        _store(request),
        request.app.state.file_storage,
        max_upload_bytes=request.app.state.settings.max_upload_bytes,
        min_upload_bytes=request.app.state.settings.min_upload_bytes,
    )


# ====== Endpoints ======

@router.get("", response_model=List[DocumentOut])
async def list_documents(
    request: Request,
    product_type: Optional[ProductType] = Query(None, description="Filter by product type"),
):
    store = _store(request)
    if product_type is not None:
        docs = store.list_documents_by_product_type(product_type)
    else:
        docs = store.list_documents()
    return [DocumentOut.from_document(d) for d in docs]


@router.get("/export", response_model=List[DocumentWithData], response_model_by_alias=True)
async def export_documents(request: Request):
    """
    Every document with its base64 content, in one response.
    Documents whose content cannot be fetched are left out.
    """
    store = _store(request)
    async with _http_client(request) as client:
        encoded = await DocumentEncoder(store, client).encode_all()
    return [
        DocumentWithData(**DocumentOut.from_document(doc).model_dump(), file_data=data)
        for doc, data in encoded
    ]


@router.get("/{document_id}", response_model=DocumentOut)
async def get_document(document_id: str, request: Request):
    doc = _store(request).get_document(document_id)
    if doc is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Document not found: {document_id}",
        )
    return DocumentOut.from_document(doc)


@router.post("", response_model=DocumentOut, status_code=status.HTTP_201_CREATED)
async def upload_document(
    request: Request,
    file: UploadFile = File(...),
    product_type: ProductType = Form(...),
):
    data = await file.read()
    try:
        doc = _service(request).upload_document(
            filename=file.filename or "document.pdf",
            content_type=file.content_type,
            data=data,
            product_type=product_type,
        )
    except InvalidDocumentError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StorageError as e:
        logger.error(f"Upload failed for {file.filename}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    return DocumentOut.from_document(doc)


@router.patch("/{document_id}", response_model=DocumentOut)
async def update_document(document_id: str, body: DocumentUpdate, request: Request):
    try:
        doc = _service(request).update_document(
            document_id, body.model_dump(exclude_unset=True)
        )
    except DocumentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return DocumentOut.from_document(doc)


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(document_id: str, request: Request):
    try:
        _service(request).delete_document(document_id)
    except DocumentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
