# services/api/core/document_encoder.py
from __future__ import annotations

import base64
import logging
from typing import List, Optional, Tuple

import httpx

from adapters.base import DocumentStore
from models import Document

logger = logging.getLogger(__name__)


class DocumentEncoder:
    """
    Turns a stored document's binary content into standard base64 text
    (no line folding, padding kept) for the renderer payload.
    """

    def __init__(self, store: DocumentStore, client: httpx.AsyncClient):
        self.store = store
        self.client = client

    async def fetch_bytes(self, url: str) -> bytes:
        """Download raw content. HTTP and transport errors propagate."""
        r = await self.client.get(url)
        r.raise_for_status()
        return r.content

    async def encode_as_text(self, document_id: str) -> Optional[str]:
        """
        Base64 content of a document.

        Returns:
            The encoded content, or None when there is nothing to encode
            (unknown document or no URL on record).

        Raises:
            httpx.HTTPError: the content exists but could not be downloaded
        """
        doc = self.store.get_document(document_id)
        if doc is None or not doc.url:
            logger.info(f"Nothing to encode for document {document_id}")
            return None

        content = await self.fetch_bytes(doc.url)
        return base64.b64encode(content).decode("ascii")

    async def encode_all(self) -> List[Tuple[Document, str]]:
        """
        Every stored document with its encoded content, one after another.
        Documents without content or whose download fails are skipped.
        """
        results: List[Tuple[Document, str]] = []
        for doc in self.store.list_documents():
            try:
                data = await self.encode_as_text(doc.id)
            except httpx.HTTPError as e:
                logger.error(f"Error exporting document {doc.name}: {e}")
                continue
            if data:
                results.append((doc, data))
        return results
