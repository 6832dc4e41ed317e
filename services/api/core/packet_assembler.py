# services/api/core/packet_assembler.py
"""
Packet assembly: pick and order the selected documents, encode their
content, describe the project, and have the remote worker render one PDF.

Flow for one assemble() call:
  1) filter selection to selected=True, sort by `order` (stable)
     -> EmptySelectionError before any I/O if nothing is left
  2) fetch + base64 every selected document concurrently (TaskGroup);
     first failure cancels the rest -> DocumentProcessingError
  3) selected names + full product-type catalog (for "not included" rows)
  4) project data with both flag groups filled in
  5) POST to the worker -> PDF bytes
"""
from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, List, Mapping, Optional, Sequence

import httpx

from adapters.base import DocumentStore
from core.document_encoder import DocumentEncoder
from core.errors import DocumentProcessingError, EmptySelectionError
from core.renderer_client import RendererClient
from models import SelectedDocument
from schemas.packet import PacketDocument, PacketRequest, merge_project_defaults
from settings import Settings, get_settings

logger = logging.getLogger(__name__)


def order_selection(selection: Sequence[SelectedDocument]) -> List[SelectedDocument]:
    """
    Selected entries only, ascending by `order`. Ties keep their
    original sequence (sorted() is stable).

    Raises:
        EmptySelectionError: nothing is selected
    """
    ordered = sorted((s for s in selection if s.selected), key=lambda s: s.order)
    if not ordered:
        raise EmptySelectionError()
    return ordered


class PacketAssembler:
    def __init__(
        self,
        store: DocumentStore,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.store = store
        self.settings = settings or get_settings()
        # Shared client (tests inject one with a MockTransport)
        self.client = client

    @asynccontextmanager
    async def _http_client(self) -> AsyncIterator[httpx.AsyncClient]:
        if self.client is not None:
            yield self.client
            return
        async with httpx.AsyncClient(
            timeout=self.settings.document_fetch_timeout_seconds,
            follow_redirects=True,
        ) as client:
            yield client

    async def assemble(
        self,
        form_data: Mapping[str, Any],
        selection: Sequence[SelectedDocument],
    ) -> bytes:
        """
        Build the packet and return the rendered PDF bytes.

        Args:
            form_data: Project fields, camelCase as on the wire
                       (productType, status, submittalType, ...).
            selection: Documents offered to the user with their
                       selected flag and order.
        """
        entries = order_selection(selection)

        async with self._http_client() as client:
            encoder = DocumentEncoder(self.store, client)
            packet = await self.build_request(form_data, entries, encoder)

            renderer = RendererClient(
                self.settings.renderer_base_url,
                client,
                timeout=self.settings.renderer_timeout_seconds,
            )
            return await renderer.render(packet)

    async def build_request(
        self,
        form_data: Mapping[str, Any],
        entries: Sequence[SelectedDocument],
        encoder: DocumentEncoder,
    ) -> PacketRequest:
        """Compose the renderer request from already-ordered entries."""
        documents = await self._encode_documents(entries, encoder)

        selected_names = [e.document.name for e in entries]

        product_type = form_data.get("productType")
        if product_type:
            catalog = self.store.list_documents_by_product_type(product_type)
        else:
            logger.warning("No productType in project data; sending empty document catalog")
            catalog = []

        return PacketRequest(
            project_data=merge_project_defaults(form_data),
            documents=documents,
            selected_document_names=selected_names,
            all_available_documents=[d.name for d in catalog],
        )

    async def _encode_documents(
        self,
        entries: Sequence[SelectedDocument],
        encoder: DocumentEncoder,
    ) -> List[PacketDocument]:
        async def _resolve(entry: SelectedDocument) -> PacketDocument:
            doc = entry.document
            try:
                file_data = await encoder.encode_as_text(doc.id)
            except Exception as e:
                logger.error(f"Error processing document {doc.name}: {e}")
                raise DocumentProcessingError(doc.name, e) from e
            return PacketDocument(
                id=entry.id,
                name=doc.name,
                url=doc.url or "",
                type=doc.type,
                file_data=file_data or None,
            )

        try:
            async with asyncio.TaskGroup() as tg:
                tasks = [tg.create_task(_resolve(e)) for e in entries]
        except ExceptionGroup as eg:
            # siblings are already cancelled; report the first failure
            raise eg.exceptions[0]

        return [t.result() for t in tasks]
