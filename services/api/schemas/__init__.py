"""
Pydantic schemas for API request/response validation.
"""
from .document import DocumentOut, DocumentUpdate, DocumentWithData
from .packet import (
    PacketDocument,
    PacketGenerateRequest,
    PacketRequest,
    ProjectData,
    ProjectStatus,
    SelectionItem,
    SubmittalType,
    merge_project_defaults,
)

__all__ = [
    "DocumentOut",
    "DocumentUpdate",
    "DocumentWithData",
    "PacketDocument",
    "PacketGenerateRequest",
    "PacketRequest",
    "ProjectData",
    "ProjectStatus",
    "SelectionItem",
    "SubmittalType",
    "merge_project_defaults",
]
