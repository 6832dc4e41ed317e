# services/api/routers/packets.py
from __future__ import annotations

import logging
from typing import List, Literal
from urllib.parse import quote

from fastapi import APIRouter, HTTPException, Query, Request, Response, status

from core.artifact_presenter import ensure_pdf_filename
from core.errors import (
    DocumentProcessingError,
    EmptyArtifactError,
    EmptySelectionError,
    RenderError,
    RendererTimeoutError,
    RendererUnreachableError,
)
from core.packet_assembler import PacketAssembler
from models import SelectedDocument
from schemas.packet import PacketGenerateRequest

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/packets", tags=["packets"])


def _resolve_selection(store, req: PacketGenerateRequest) -> List[SelectedDocument]:
    """
    Look up the selected entries only. Unselected ids are never read
    from the store, so a stale unselected id cannot fail the request.
    """
    chosen = [item for item in req.selection if item.selected]
    if not chosen:
        raise EmptySelectionError()

    selection: List[SelectedDocument] = []
    for item in chosen:
        doc = store.get_document(item.document_id)
        if doc is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Document not found: {item.document_id}",
            )
        selection.append(
            SelectedDocument(document=doc, selected=True, order=item.order)
        )
    return selection


def content_disposition(disposition: str, filename: str) -> str:
    """
    Content-Disposition value for the packet.
    Non-ASCII names go in `filename*` (RFC 6266) with an ASCII `filename` fallback.
    """
    cleaned = "".join(c for c in filename if c.isprintable() and c not in '"\\')
    name = ensure_pdf_filename(cleaned.strip() or "submittal-packet")
    if name.isascii():
        return f'{disposition}; filename="{name}"'
    fallback = "".join(c if c.isascii() else "_" for c in name)
    return f"{disposition}; filename=\"{fallback}\"; filename*=UTF-8''{quote(name, safe='')}"


@router.post(
    "/generate",
    response_class=Response,
    responses={200: {"content": {"application/pdf": {}}}},
)
async def generate_packet(
    req: PacketGenerateRequest,
    request: Request,
    disposition: Literal["inline", "attachment"] = Query(
        "inline", description="inline = preview in browser, attachment = download"
    ),
    filename: str = Query("submittal-packet", min_length=1),
) -> Response:
    """
    Assemble the selected documents into one submittal packet PDF.

    - Only entries with selected=true are used, ordered by `order`.
    - The renderer gets the project data (flag groups filled with false
      when missing) plus the product type's full document list.
    """
    app = request.app
    store = getattr(app.state, "document_store", None)
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Document store not initialized",
        )

    header = content_disposition(disposition, filename)
    form_data = req.project_data.model_dump(mode="json", by_alias=True, exclude_none=True)

    assembler = PacketAssembler(
        store,
        settings=app.state.settings,
        client=getattr(app.state, "http_client", None),
    )

    try:
        selection = _resolve_selection(store, req)
        pdf_bytes = await assembler.assemble(form_data, selection)
    except EmptySelectionError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except DocumentProcessingError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except RendererTimeoutError as e:
        raise HTTPException(status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail=str(e))
    except RendererUnreachableError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    except (RenderError, EmptyArtifactError) as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": header,
            "Content-Length": str(len(pdf_bytes)),
        },
    )
