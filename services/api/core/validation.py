"""
Validation utilities for uploaded documents.
Ensures uploads are real PDFs and derives their category and display name.
"""
from typing import Optional

import pypdfium2 as pdfium

from core.errors import InvalidDocumentError
from models import DocumentType

MAX_UPLOAD_BYTES = 50 * 1024 * 1024
MIN_UPLOAD_BYTES = 1024

# Checked in order; first hit wins
_TYPE_KEYWORDS = [
    (("tds", "technical data"), DocumentType.TECHNICAL_DATA_SHEET),
    (("esr", "evaluation report"), DocumentType.EVALUATION_REPORT),
    (("msds", "safety data"), DocumentType.SAFETY_DATA_SHEET),
    (("leed",), DocumentType.LEED_GUIDE),
    (("installation", "install"), DocumentType.INSTALLATION_GUIDE),
    (("warranty",), DocumentType.WARRANTY),
    (("acoustic", "esl"), DocumentType.ACOUSTIC_REPORT),
    (("spec", "3-part"), DocumentType.PART_SPEC),
]

DOCUMENT_TYPE_NAMES = {
    DocumentType.TECHNICAL_DATA_SHEET: "Technical Data Sheet",
    DocumentType.EVALUATION_REPORT: "Evaluation Report",
    DocumentType.SAFETY_DATA_SHEET: "Material Safety Data Sheet",
    DocumentType.LEED_GUIDE: "LEED Credit Guide",
    DocumentType.INSTALLATION_GUIDE: "Installation Guide",
    DocumentType.WARRANTY: "Limited Warranty",
    DocumentType.ACOUSTIC_REPORT: "Acoustical Performance",
    DocumentType.PART_SPEC: "3-Part Specifications",
}


def validate_pdf_upload(
    filename: str,
    content_type: Optional[str],
    data: bytes,
    max_bytes: int = MAX_UPLOAD_BYTES,
    min_bytes: int = MIN_UPLOAD_BYTES,
) -> int:
    """
    Validate an uploaded file before it is stored.

    Rules:
    - content type must be application/pdf
    - size must be within [min_bytes, max_bytes]
    - content must start with the %PDF signature
    - pdfium must be able to open it

    Returns:
        Page count of the PDF.

    Raises:
        InvalidDocumentError: with a user-facing message
    """
    if (content_type or "").split(";")[0].strip().lower() != "application/pdf":
        raise InvalidDocumentError("File must be a PDF document")

    size = len(data)
    if size > max_bytes:
        raise InvalidDocumentError(f"File size exceeds {max_bytes / (1024 * 1024):g}MB limit")
    if size < min_bytes:
        raise InvalidDocumentError("File is too small to be a valid PDF")

    if not data[:5].startswith(b"%PDF"):
        raise InvalidDocumentError("File does not appear to be a valid PDF")

    try:
        pdf = pdfium.PdfDocument(data)
    except pdfium.PdfiumError as e:
        raise InvalidDocumentError(f"File could not be parsed as a PDF: {filename}") from e
    try:
        return len(pdf)
    finally:
        pdf.close()


def detect_document_type(filename: str) -> DocumentType:
    """
    Guess the document category from its filename.

    Args:
        filename: Original upload filename

    Returns:
        Matching DocumentType; TDS when nothing matches.
    """
    lower = filename.lower()
    for keywords, doc_type in _TYPE_KEYWORDS:
        if any(k in lower for k in keywords):
            return doc_type
    return DocumentType.TECHNICAL_DATA_SHEET


def extract_document_name(filename: str, doc_type: Optional[DocumentType]) -> str:
    """
    Display name for a new document: the category's canonical title,
    or the filename without its .pdf extension for unknown categories.
    """
    if doc_type in DOCUMENT_TYPE_NAMES:
        return DOCUMENT_TYPE_NAMES[doc_type]
    name = filename
    if name.lower().endswith(".pdf"):
        name = name[:-4]
    return name
