"""
Storage adapter interface for the submittal packet service.
Defines the contract that all document stores must implement.
"""

from typing import Protocol, List, Dict, Any, Optional

from models import Document, DocumentType, ProductType


class DocumentStore(Protocol):
    """
    Protocol defining the interface for all document stores.

    This allows swapping between SQLite and JSON files without changing
    the routers or the packet assembler.

    NOTE:
    - Stores only hold metadata. Binary content lives behind `Document.url`
      and is fetched over HTTP.
    - Listings are ordered newest first (created_at descending).
    """

    def list_documents(self) -> List[Document]:
        """Return every stored document."""
        ...

    def list_documents_by_product_type(self, product_type: ProductType) -> List[Document]:
        """
        Return the catalog of documents for one product type.
        Used by the assembler to tell the renderer what was left out.
        """
        ...

    def get_document(self, document_id: str) -> Optional[Document]:
        """
        Fetch a document by id.

        Returns:
            Document, or None if not found.
        """
        ...

    def create_document(
        self,
        *,
        name: str,
        filename: str,
        file_url: str,
        size: int,
        type: DocumentType,
        product_type: ProductType,
        description: str = "",
        required: bool = False,
    ) -> Document:
        """
        Insert a new metadata row.

        Returns:
            The stored Document (with generated id and timestamps).
        """
        ...

    def update_document(self, document_id: str, updates: Dict[str, Any]) -> Document:
        """
        Update fields on a document row.

        Implementations should:
            - overwrite only the provided keys
            - update 'updated_at' internally
            - raise DocumentNotFoundError if the row does not exist
        """
        ...

    def delete_document(self, document_id: str) -> None:
        """
        Delete a metadata row.

        Raises:
            DocumentNotFoundError if the row does not exist.
        """
        ...
