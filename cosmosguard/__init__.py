"""
cosmosguard: try-semantics and optimistic locking for Cosmos DB documents.

Returns empty outcomes instead of raising for expected not-found and
conflict statuses, and turns eTag precondition failures into a typed
lock-conflict error.
"""

__version__ = "0.1.0"

from .documents import (
    Document,
    DocumentClient,
    DocumentOptimisticLockError,
    DocumentOutcome,
    DocumentRef,
    OptimisticLockError,
    OutcomeKind,
    RequestOptions,
    ResourceResponse,
    try_create_document,
    try_delete_document,
    try_read_document,
    try_replace_document,
    try_replace_document_with_optimistic_locking,
    upsert_document,
    upsert_documents_individually,
)
from .emulator import InMemoryDocumentClient
from .adapters import AzureCosmosDocumentClient
from .factory import create_document_client

__all__ = [
    "Document",
    "DocumentClient",
    "DocumentOptimisticLockError",
    "DocumentOutcome",
    "DocumentRef",
    "OptimisticLockError",
    "OutcomeKind",
    "RequestOptions",
    "ResourceResponse",
    "try_create_document",
    "try_delete_document",
    "try_read_document",
    "try_replace_document",
    "try_replace_document_with_optimistic_locking",
    "upsert_document",
    "upsert_documents_individually",
    "InMemoryDocumentClient",
    "AzureCosmosDocumentClient",
    "create_document_client",
    "__version__",
]
