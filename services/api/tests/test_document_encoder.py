"""DocumentEncoder: base64 content of stored documents."""
import base64

import httpx
import pytest

from core.document_encoder import DocumentEncoder
from models import DocumentType, ProductType


def _files_transport(contents):
    """Serve `contents[path]` from the fake files host, 404 otherwise."""
    def handler(request: httpx.Request) -> httpx.Response:
        body = contents.get(request.url.path)
        if body is None:
            return httpx.Response(404, text="not found")
        return httpx.Response(200, content=body, headers={"Content-Type": "application/pdf"})
    return httpx.MockTransport(handler)


@pytest.mark.asyncio
async def test_encoding_round_trips_exact_bytes(store, floor_docs, pdf_bytes):
    tds = floor_docs[0]
    raw = pdf_bytes + bytes(range(256))
    async with httpx.AsyncClient(transport=_files_transport({"/tds.pdf": raw})) as client:
        text = await DocumentEncoder(store, client).encode_as_text(tds.id)

    assert text is not None
    assert "\n" not in text
    assert base64.b64decode(text, validate=True) == raw


@pytest.mark.asyncio
async def test_unknown_document_encodes_to_none(store):
    async with httpx.AsyncClient(transport=_files_transport({})) as client:
        assert await DocumentEncoder(store, client).encode_as_text("missing") is None


@pytest.mark.asyncio
async def test_document_without_url_encodes_to_none(store):
    doc = store.create_document(
        name="Placeholder",
        filename="placeholder.pdf",
        file_url="",
        size=0,
        type=DocumentType.WARRANTY,
        product_type=ProductType.UNDERLAYMENT,
    )
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, content=b"%PDF")

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        assert await DocumentEncoder(store, client).encode_as_text(doc.id) is None
    assert calls == []


@pytest.mark.asyncio
async def test_failed_download_raises(store, floor_docs):
    async with httpx.AsyncClient(transport=_files_transport({})) as client:
        with pytest.raises(httpx.HTTPStatusError):
            await DocumentEncoder(store, client).encode_as_text(floor_docs[0].id)


@pytest.mark.asyncio
async def test_encode_all_skips_unavailable(store, floor_docs, pdf_bytes):
    contents = {"/tds.pdf": pdf_bytes, "/install.pdf": pdf_bytes}
    async with httpx.AsyncClient(transport=_files_transport(contents)) as client:
        results = await DocumentEncoder(store, client).encode_all()

    names = sorted(doc.name for doc, _ in results)
    assert names == ["Installation Guide", "Technical Data Sheet"]
    for _, data in results:
        assert base64.b64decode(data) == pdf_bytes

