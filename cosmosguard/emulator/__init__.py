"""
In-memory Cosmos DB document store.

Local stand-in for Azure Cosmos DB that follows its status codes and
eTag semantics, for development and testing.
"""

from .backend import InMemoryDocumentClient
from .exceptions import (
    CosmosDBError,
    DatabaseNotFoundError,
    DatabaseAlreadyExistsError,
    CollectionNotFoundError,
    CollectionAlreadyExistsError,
    BadRequestError,
    DocumentNotFoundError,
    DocumentAlreadyExistsError,
    PreconditionFailedError,
)

__all__ = [
    "InMemoryDocumentClient",
    "CosmosDBError",
    "DatabaseNotFoundError",
    "DatabaseAlreadyExistsError",
    "CollectionNotFoundError",
    "CollectionAlreadyExistsError",
    "BadRequestError",
    "DocumentNotFoundError",
    "DocumentAlreadyExistsError",
    "PreconditionFailedError",
]
