"""
Optimistic locking exceptions.

Raised when a conditional replace is rejected because the document was
modified since the caller read it.
"""

from typing import Any, Optional

from .models import Document


class OptimisticLockError(Exception):
    """Base exception for optimistic locking failures.

    Attributes:
        message: Error message
    """

    def __init__(self, message: str = "Optimistic locking error"):
        """Initialize optimistic lock error.

        Args:
            message: Error message
        """
        super().__init__(message)
        self.message = message


class DocumentOptimisticLockError(OptimisticLockError):
    """A document replace failed its If-Match precondition.

    Either ``document`` or ``document_object`` is set, whichever the
    caller passed to the failed replace. ``from_document`` and ``from_link``
    guarantee exactly one; direct construction may leave both unset.

    Attributes:
        document: The Document, when one was supplied
        document_object: The plain payload, when no Document was supplied
        document_link: Link of the document
        etag: The eTag that was expected
    """

    def __init__(
        self,
        message: str = "Optimistic locking error",
        document: Optional[Document] = None,
        document_object: Any = None,
        document_link: Optional[str] = None,
        etag: Optional[str] = None,
    ):
        """Initialize document optimistic lock error.

        Args:
            message: Error message
            document: Document being replaced
            document_object: Plain payload being replaced
            document_link: Link of the document
            etag: Expected eTag
        """
        if document is not None and document_object is not None:
            raise ValueError("Only one of document or document_object may be set")

        super().__init__(message)
        self.document = document
        self.document_object = document_object
        self.document_link = document_link
        self.etag = etag

    @classmethod
    def from_document(
        cls,
        message: str,
        document: Document,
        cause: Optional[BaseException] = None,
        etag: Optional[str] = None,
        document_link: Optional[str] = None,
    ) -> "DocumentOptimisticLockError":
        """Build the error from a Document.

        Link and eTag are taken from the document unless given explicitly.
        """
        error = cls(
            message,
            document=document,
            document_link=document_link or document.self_link,
            etag=etag if etag is not None else document.etag,
        )
        error.__cause__ = cause
        return error

    @classmethod
    def from_link(
        cls,
        message: str,
        document_link: str,
        etag: str,
        document_object: Any,
        cause: Optional[BaseException] = None,
    ) -> "DocumentOptimisticLockError":
        """Build the error from a link, eTag and plain payload.

        Raises:
            ValueError: If ``document_object`` is None
        """
        if document_object is None:
            raise ValueError("document_object is required")

        error = cls(
            message,
            document_object=document_object,
            document_link=document_link,
            etag=etag,
        )
        error.__cause__ = cause
        return error
