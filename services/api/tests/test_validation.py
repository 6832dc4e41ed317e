"""
Tests for upload validation and filename sniffing.

Run with: pytest tests/test_validation.py -v
"""
import pytest

from core.errors import InvalidDocumentError
from core.validation import (
    detect_document_type,
    extract_document_name,
    validate_pdf_upload,
)
from models import DocumentType


class TestValidatePdfUpload:
    """Tests for PDF upload validation."""

    def test_valid_pdf(self, pdf_bytes):
        """A real PDF passes and reports its page count."""
        assert validate_pdf_upload("tds.pdf", "application/pdf", pdf_bytes) == 1

    def test_wrong_content_type(self, pdf_bytes):
        with pytest.raises(InvalidDocumentError) as exc:
            validate_pdf_upload("tds.pdf", "image/png", pdf_bytes)
        assert "must be a PDF" in str(exc.value)

    def test_missing_content_type(self, pdf_bytes):
        with pytest.raises(InvalidDocumentError):
            validate_pdf_upload("tds.pdf", None, pdf_bytes)

    def test_too_large(self, pdf_bytes):
        with pytest.raises(InvalidDocumentError) as exc:
            validate_pdf_upload("tds.pdf", "application/pdf", pdf_bytes, max_bytes=1500)
        assert "exceeds" in str(exc.value)

    def test_too_small(self):
        with pytest.raises(InvalidDocumentError) as exc:
            validate_pdf_upload("tds.pdf", "application/pdf", b"%PDF-1.4\n")
        assert "too small" in str(exc.value)

    def test_bad_signature(self):
        """Right size, wrong magic bytes."""
        with pytest.raises(InvalidDocumentError) as exc:
            validate_pdf_upload("tds.pdf", "application/pdf", b"GIF89a" + b"0" * 2000)
        assert "does not appear" in str(exc.value)

    def test_unparseable_pdf(self):
        """Signature present but pdfium cannot open it."""
        data = b"%PDF-1.4\n" + b"garbage " * 300
        with pytest.raises(InvalidDocumentError) as exc:
            validate_pdf_upload("broken.pdf", "application/pdf", data)
        assert "could not be parsed" in str(exc.value)


class TestDetectDocumentType:
    """Tests for filename-based category sniffing."""

    @pytest.mark.parametrize(
        "filename,expected",
        [
            ("Floor_TDS_2024.pdf", DocumentType.TECHNICAL_DATA_SHEET),
            ("technical data sheet.pdf", DocumentType.TECHNICAL_DATA_SHEET),
            ("ICC-ESR-5194.pdf", DocumentType.EVALUATION_REPORT),
            ("MSDS.pdf", DocumentType.SAFETY_DATA_SHEET),
            ("Safety Data.pdf", DocumentType.SAFETY_DATA_SHEET),
            ("leed-v4.pdf", DocumentType.LEED_GUIDE),
            ("Install Instructions.pdf", DocumentType.INSTALLATION_GUIDE),
            ("warranty.pdf", DocumentType.WARRANTY),
            ("Acoustic Test.pdf", DocumentType.ACOUSTIC_REPORT),
            ("3-Part Spec.pdf", DocumentType.PART_SPEC),
        ],
    )
    def test_keywords(self, filename, expected):
        assert detect_document_type(filename) == expected

    def test_first_match_wins(self):
        """'esl' is acoustic, but 'tds' is checked first."""
        assert detect_document_type("tds-esl.pdf") == DocumentType.TECHNICAL_DATA_SHEET

    def test_default_is_tds(self):
        assert detect_document_type("brochure.pdf") == DocumentType.TECHNICAL_DATA_SHEET


class TestExtractDocumentName:
    def test_known_type(self):
        assert extract_document_name("x.pdf", DocumentType.LEED_GUIDE) == "LEED Credit Guide"
        assert extract_document_name("x.pdf", DocumentType.PART_SPEC) == "3-Part Specifications"

    def test_unknown_type_uses_filename(self):
        assert extract_document_name("Floor Brochure.PDF", None) == "Floor Brochure"
