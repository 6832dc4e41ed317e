"""
Pydantic schemas for the packet wire contract.

Field names are snake_case in Python and camelCase on the wire
(POST {renderer}/generate-packet).
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from models import DocumentType, ProductType


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============ Flag groups ============


class ProjectStatus(_CamelModel):
    """Submittal status checkboxes. Every flag defaults to False."""
    for_review: bool = False
    for_approval: bool = False
    for_record: bool = False
    for_information_only: bool = False


class SubmittalType(_CamelModel):
    """Which document categories the submission requires."""
    tds: bool = False
    three_part_specs: bool = False
    test_report_icc_esr5194: bool = False
    test_report_icc_esl1645: bool = False
    fire_assembly: bool = False
    fire_assembly01: bool = False
    fire_assembly02: bool = False
    fire_assembly03: bool = False
    msds: bool = False
    leed_guide: bool = False
    installation_guide: bool = False
    warranty: bool = False
    samples: bool = False
    other: bool = False


class ProjectData(_CamelModel):
    """
    Project form data as sent by the caller.
    Unknown fields are kept and forwarded to the renderer untouched.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    product_type: Optional[ProductType] = None
    status: Optional[ProjectStatus] = None
    submittal_type: Optional[SubmittalType] = None


def merge_project_defaults(form_data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Copy caller fields and make sure both flag groups are present with
    every flag explicit. Missing/null groups become all-False.
    """
    project = dict(form_data)
    project["status"] = ProjectStatus.model_validate(
        form_data.get("status") or {}
    ).model_dump(by_alias=True)
    project["submittalType"] = SubmittalType.model_validate(
        form_data.get("submittalType") or {}
    ).model_dump(by_alias=True)
    return project


# ============ Renderer request ============


class PacketDocument(_CamelModel):
    id: str
    name: str
    url: str = ""
    type: DocumentType
    file_data: Optional[str] = Field(None, description="Base64 PDF content")


class PacketRequest(_CamelModel):
    project_data: Dict[str, Any]
    documents: List[PacketDocument]
    selected_document_names: List[str]
    all_available_documents: List[str]

    def to_wire(self) -> Dict[str, Any]:
        """JSON body for /generate-packet. `fileData` is omitted when absent."""
        return {
            "projectData": self.project_data,
            "documents": [
                d.model_dump(mode="json", by_alias=True, exclude_none=True)
                for d in self.documents
            ],
            "selectedDocumentNames": list(self.selected_document_names),
            "allAvailableDocuments": list(self.all_available_documents),
        }

    def to_log_summary(self) -> Dict[str, Any]:
        """Same as to_wire() but with fileData truncated for logging."""
        body = self.to_wire()
        for d in body["documents"]:
            data = d.get("fileData")
            d["fileData"] = f"{data[:30]}..." if data else "No file data"
        return body


# ============ API request (POST /packets/generate) ============


class SelectionItem(_CamelModel):
    document_id: str = Field(..., min_length=1)
    selected: bool = True
    order: int = 0


class PacketGenerateRequest(_CamelModel):
    project_data: ProjectData = Field(default_factory=ProjectData)
    selection: List[SelectionItem] = Field(default_factory=list)
