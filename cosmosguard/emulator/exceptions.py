"""
In-memory store exceptions.

Raised by the in-memory document client with the status codes Azure
Cosmos DB uses, so callers handle them exactly as they would errors from
the real service.
"""

from azure.cosmos.exceptions import CosmosHttpResponseError
from azure.cosmos.http_constants import StatusCodes


class CosmosDBError(CosmosHttpResponseError):
    """Base exception for in-memory store errors.

    Attributes:
        message: Error message
        error_code: Azure Cosmos DB error code
        status_code: HTTP status code
    """

    def __init__(self, message: str, status_code: int = 500, error_code: str = "InternalServerError"):
        """Initialize Cosmos DB error.

        Args:
            message: Error message
            status_code: HTTP status code
            error_code: Azure error code
        """
        super().__init__(status_code=status_code, message=message)
        self.message = message
        self.error_code = error_code


class DatabaseNotFoundError(CosmosDBError):
    """Database not found error."""

    def __init__(self, message: str, database_id: str = ""):
        super().__init__(message, StatusCodes.NOT_FOUND, "NotFound")
        self.database_id = database_id


class DatabaseAlreadyExistsError(CosmosDBError):
    """Database already exists error."""

    def __init__(self, message: str, database_id: str = ""):
        super().__init__(message, StatusCodes.CONFLICT, "Conflict")
        self.database_id = database_id


class CollectionNotFoundError(CosmosDBError):
    """Collection not found error."""

    def __init__(self, message: str, collection_id: str = "", database_id: str = ""):
        super().__init__(message, StatusCodes.NOT_FOUND, "NotFound")
        self.collection_id = collection_id
        self.database_id = database_id


class CollectionAlreadyExistsError(CosmosDBError):
    """Collection already exists error."""

    def __init__(self, message: str, collection_id: str = "", database_id: str = ""):
        super().__init__(message, StatusCodes.CONFLICT, "Conflict")
        self.collection_id = collection_id
        self.database_id = database_id


class BadRequestError(CosmosDBError):
    """Bad request error."""

    def __init__(self, message: str):
        super().__init__(message, StatusCodes.BAD_REQUEST, "BadRequest")


class DocumentNotFoundError(CosmosDBError):
    """Document not found error."""

    def __init__(self, message: str, document_id: str = ""):
        """Initialize document not found error.

        Args:
            message: Error message
            document_id: Document identifier
        """
        super().__init__(message, StatusCodes.NOT_FOUND, "NotFound")
        self.document_id = document_id


class DocumentAlreadyExistsError(CosmosDBError):
    """Document already exists error."""

    def __init__(self, message: str, document_id: str = ""):
        """Initialize document already exists error.

        Args:
            message: Error message
            document_id: Document identifier
        """
        super().__init__(message, StatusCodes.CONFLICT, "Conflict")
        self.document_id = document_id


class PreconditionFailedError(CosmosDBError):
    """Precondition failed error (ETag mismatch)."""

    def __init__(self, message: str, etag: str = ""):
        """Initialize precondition failed error.

        Args:
            message: Error message
            etag: Expected ETag value
        """
        super().__init__(message, StatusCodes.PRECONDITION_FAILED, "PreconditionFailed")
        self.etag = etag
