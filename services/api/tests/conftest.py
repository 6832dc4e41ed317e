"""
Shared fixtures.

Run with: pytest services/api/tests -v
"""
import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from adapters.json import JsonDocumentStore
from models import DocumentType, ProductType
from settings import Settings

RENDERER_URL = "https://renderer.test"
FILES_HOST = "https://files.test"


def make_pdf(min_size: int = 2048) -> bytes:
    """Smallest well-formed one-page PDF, padded past the upload minimum."""
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] >>",
    ]
    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for i, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += f"{i} 0 obj\n".encode() + body + b"\nendobj\n"
    while len(out) < min_size:
        out += b"% padding padding padding padding padding padding\n"
    xref_at = len(out)
    out += f"xref\n0 {len(objects) + 1}\n".encode()
    out += b"0000000000 65535 f \n"
    for off in offsets:
        out += f"{off:010d} 00000 n \n".encode()
    out += (
        f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\n"
        f"startxref\n{xref_at}\n%%EOF\n"
    ).encode()
    return bytes(out)


@pytest.fixture
def pdf_bytes() -> bytes:
    return make_pdf()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        renderer_base_url=RENDERER_URL,
        renderer_timeout_seconds=5,
        document_fetch_timeout_seconds=5,
        storage_backend="json",
        json_data_dir=str(tmp_path / "data"),
        files_dir=str(tmp_path / "files"),
        public_base_url="http://testserver",
        download_dir=str(tmp_path / "downloads"),
    )


@pytest.fixture
def store(tmp_path) -> JsonDocumentStore:
    return JsonDocumentStore(str(tmp_path / "store"))


@pytest.fixture
def floor_docs(store):
    """Three structural-floor documents plus one underlayment document."""
    tds = store.create_document(
        name="Technical Data Sheet",
        filename="floor-tds.pdf",
        file_url=f"{FILES_HOST}/tds.pdf",
        size=2048,
        type=DocumentType.TECHNICAL_DATA_SHEET,
        product_type=ProductType.STRUCTURAL_FLOOR,
    )
    esr = store.create_document(
        name="Evaluation Report",
        filename="floor-esr.pdf",
        file_url=f"{FILES_HOST}/esr.pdf",
        size=2048,
        type=DocumentType.EVALUATION_REPORT,
        product_type=ProductType.STRUCTURAL_FLOOR,
    )
    warranty = store.create_document(
        name="Limited Warranty",
        filename="floor-warranty.pdf",
        file_url=f"{FILES_HOST}/warranty.pdf",
        size=2048,
        type=DocumentType.WARRANTY,
        product_type=ProductType.STRUCTURAL_FLOOR,
    )
    store.create_document(
        name="Installation Guide",
        filename="underlayment-install.pdf",
        file_url=f"{FILES_HOST}/install.pdf",
        size=2048,
        type=DocumentType.INSTALLATION_GUIDE,
        product_type=ProductType.UNDERLAYMENT,
    )
    return [tds, esr, warranty]
