"""
Document operations with try semantics and optimistic locking.

Wraps a document client so that expected not-found and conflict statuses
become empty outcomes, and eTag precondition failures become
``DocumentOptimisticLockError``.
"""

from .client import DocumentClient, status_code_of
from .exceptions import DocumentOptimisticLockError, OptimisticLockError
from .links import (
    DocumentRef,
    create_collection_link,
    create_database_link,
    create_document_link,
    parse_collection_link,
    parse_document_link,
    resolve_collection_link,
    resolve_document_link,
)
from .models import (
    AccessCondition,
    AccessConditionType,
    Document,
    DocumentResponse,
    RequestOptions,
    ResourceResponse,
)
from .operations import (
    try_create_document,
    try_delete_document,
    try_read_document,
    try_replace_document,
    try_replace_document_with_optimistic_locking,
    upsert_document,
    upsert_documents_individually,
)
from .outcome import DocumentOutcome, OutcomeKind

__all__ = [
    # Client
    "DocumentClient",
    "status_code_of",
    # Links
    "DocumentRef",
    "create_database_link",
    "create_collection_link",
    "create_document_link",
    "parse_collection_link",
    "parse_document_link",
    "resolve_collection_link",
    "resolve_document_link",
    # Models
    "AccessCondition",
    "AccessConditionType",
    "Document",
    "DocumentResponse",
    "RequestOptions",
    "ResourceResponse",
    # Outcomes
    "DocumentOutcome",
    "OutcomeKind",
    # Operations
    "try_read_document",
    "try_create_document",
    "try_delete_document",
    "try_replace_document",
    "try_replace_document_with_optimistic_locking",
    "upsert_document",
    "upsert_documents_individually",
    # Exceptions
    "OptimisticLockError",
    "DocumentOptimisticLockError",
]
