# services/api/core/errors.py
"""
Exception taxonomy for packet assembly and document management.

Core modules raise these; routers translate them into HTTP responses.
"""
from __future__ import annotations

from typing import Optional


class PacketError(Exception):
    """Base class for every failure surfaced by the packet core."""


# ========== Packet assembly ==========

class EmptySelectionError(PacketError):
    def __init__(self, message: str = "No documents selected for packet generation"):
        super().__init__(message)


class DocumentProcessingError(PacketError):
    """A selected document's content could not be resolved."""

    def __init__(self, document_name: str, cause: Optional[BaseException] = None):
        self.document_name = document_name
        self.cause = cause
        super().__init__(f"Failed to process document: {document_name}")


class RendererUnreachableError(PacketError):
    """The renderer host could not be reached at all."""

    def __init__(self, endpoint: str, message: Optional[str] = None):
        self.endpoint = endpoint
        super().__init__(
            message
            or (
                f"Cannot connect to PDF Worker at {endpoint}. "
                "Please check your internet connection and make sure the worker is running."
            )
        )


class RendererTimeoutError(RendererUnreachableError):
    def __init__(self, endpoint: str, timeout: float):
        self.timeout = timeout
        super().__init__(
            endpoint,
            f"PDF Worker at {endpoint} did not respond within {timeout:g} seconds.",
        )


class RenderError(PacketError):
    """The renderer answered with a non-2xx status."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(message)


class EmptyArtifactError(PacketError):
    def __init__(self, message: str = "Received empty PDF from worker"):
        super().__init__(message)


class PresentationError(PacketError):
    pass


# ========== Document store ==========

class DocumentNotFoundError(PacketError):
    def __init__(self, document_id: str):
        self.document_id = document_id
        super().__init__(f"Document not found: {document_id}")


class InvalidDocumentError(PacketError):
    """Upload rejected by validation."""


class StorageError(PacketError):
    pass
