"""
Document client interface.

Defines the link-addressed document operations the try-helpers delegate to.
Implementations signal failures with ``CosmosHttpResponseError`` carrying
the HTTP status code of the store's response.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from azure.cosmos.exceptions import CosmosHttpResponseError
from azure.cosmos.http_constants import StatusCodes

from .models import RequestOptions, ResourceResponse

NOT_FOUND = StatusCodes.NOT_FOUND
CONFLICT = StatusCodes.CONFLICT
PRECONDITION_FAILED = StatusCodes.PRECONDITION_FAILED


def status_code_of(error: BaseException) -> Optional[int]:
    """Return the HTTP status code of a client error, if it carries one."""
    if isinstance(error, CosmosHttpResponseError):
        return error.status_code
    return None


class DocumentClient(ABC):
    """
    Abstract base class for document clients.

    Documents are addressed by id-based links
    (``dbs/{db}/colls/{coll}/docs/{doc}``); creates and upserts target a
    collection link. Every method performs exactly one store round trip.
    """

    @abstractmethod
    async def read_document(
        self,
        document_link: str,
        options: Optional[RequestOptions] = None
    ) -> ResourceResponse:
        """
        Read a document.

        Raises:
            CosmosHttpResponseError: 404 if the document does not exist
        """
        pass

    @abstractmethod
    async def create_document(
        self,
        collection_link: str,
        document: Any,
        options: Optional[RequestOptions] = None,
        disable_automatic_id_generation: bool = False
    ) -> ResourceResponse:
        """
        Create a document.

        Raises:
            CosmosHttpResponseError: 409 if a document with the same id exists
        """
        pass

    @abstractmethod
    async def replace_document(
        self,
        document_link: str,
        document: Any,
        options: Optional[RequestOptions] = None
    ) -> ResourceResponse:
        """
        Replace a document's content.

        Raises:
            CosmosHttpResponseError: 404 if the document does not exist,
                412 if an If-Match precondition does not hold
        """
        pass

    @abstractmethod
    async def delete_document(
        self,
        document_link: str,
        options: Optional[RequestOptions] = None
    ) -> ResourceResponse:
        """
        Delete a document.

        Raises:
            CosmosHttpResponseError: 404 if the document does not exist
        """
        pass

    @abstractmethod
    async def upsert_document(
        self,
        collection_link: str,
        document: Any,
        options: Optional[RequestOptions] = None,
        disable_automatic_id_generation: bool = False
    ) -> ResourceResponse:
        """Create a document, or replace it if it already exists."""
        pass

    async def close(self) -> None:
        """Release client resources."""
        pass
