"""
Document operations with try semantics.

Each try-operation delegates one call to a ``DocumentClient`` and turns the
expected failure statuses into an empty ``DocumentOutcome``:

- read, delete, replace: 404 Not Found -> NOT_FOUND
- create: 409 Conflict -> CONFLICT

The optimistic-locking replace adds an If-Match precondition and turns
412 Precondition Failed into ``DocumentOptimisticLockError``. Every other
client error propagates unchanged. Nothing is retried.
"""

import logging
from typing import Any, Iterable, List, Optional, Type

from azure.cosmos.exceptions import CosmosHttpResponseError
from pydantic import BaseModel

from ..core.logging_config import trace
from .client import CONFLICT, NOT_FOUND, PRECONDITION_FAILED, DocumentClient, status_code_of
from .exceptions import DocumentOptimisticLockError
from .links import CollectionLike, DocumentLike, resolve_collection_link, resolve_document_link
from .models import Document, DocumentResponse, RequestOptions, ResourceResponse
from .outcome import DocumentOutcome


async def try_read_document(
    client: DocumentClient,
    ref: DocumentLike,
    options: Optional[RequestOptions] = None,
    model: Optional[Type[BaseModel]] = None,
    logger: Optional[logging.Logger] = None,
) -> DocumentOutcome:
    """
    Read a document, if it exists.

    Args:
        client: Document client
        ref: Document link or (database_id, collection_id, document_id)
        options: Request options
        model: Pydantic model to validate the document into; the response
            is then a ``DocumentResponse`` whose ``document`` is a model instance
        logger: Optional logger for TRACE diagnostics

    Returns:
        OK outcome with the response, or NOT_FOUND
    """
    link = resolve_document_link(ref)

    try:
        response = await client.read_document(link, options)
    except CosmosHttpResponseError as e:
        if status_code_of(e) != NOT_FOUND:
            raise
        trace(logger, f"Document '{link}' does not exist")
        return DocumentOutcome.not_found(link)

    if model is not None:
        response = DocumentResponse(
            resource=response.resource,
            status_code=response.status_code,
            headers=response.headers,
            request_charge=response.request_charge,
            typed_document=model.model_validate(response.resource),
        )

    return DocumentOutcome.ok(link, response)


async def try_create_document(
    client: DocumentClient,
    collection: CollectionLike,
    document: Any,
    options: Optional[RequestOptions] = None,
    disable_automatic_id_generation: bool = False,
    logger: Optional[logging.Logger] = None,
) -> DocumentOutcome:
    """
    Create a document, unless one with the same id already exists.

    Args:
        client: Document client
        collection: Collection link or (database_id, collection_id)
        document: Payload to create
        options: Request options
        disable_automatic_id_generation: Require the payload to carry its id
        logger: Optional logger for TRACE diagnostics

    Returns:
        OK outcome with the response, or CONFLICT
    """
    collection_link = resolve_collection_link(collection)

    try:
        response = await client.create_document(
            collection_link, document, options, disable_automatic_id_generation
        )
    except CosmosHttpResponseError as e:
        if status_code_of(e) != CONFLICT:
            raise
        trace(logger, f"Document already exists in collection '{collection_link}'")
        return DocumentOutcome.conflict(collection_link)

    return DocumentOutcome.ok(collection_link, response)


async def try_delete_document(
    client: DocumentClient,
    ref: DocumentLike,
    options: Optional[RequestOptions] = None,
    logger: Optional[logging.Logger] = None,
) -> DocumentOutcome:
    """
    Delete a document, if it exists.

    Returns:
        OK outcome with the response, or NOT_FOUND
    """
    link = resolve_document_link(ref)

    try:
        response = await client.delete_document(link, options)
    except CosmosHttpResponseError as e:
        if status_code_of(e) != NOT_FOUND:
            raise
        trace(logger, f"Document '{link}' does not exist")
        return DocumentOutcome.not_found(link)

    return DocumentOutcome.ok(link, response)


def _replace_link(document: Any, ref: Optional[DocumentLike]) -> str:
    if ref is not None:
        return resolve_document_link(ref)
    if isinstance(document, Document) and document.self_link:
        return document.self_link
    raise ValueError("A document reference is required unless the document carries its self link")


async def try_replace_document(
    client: DocumentClient,
    document: Any,
    ref: Optional[DocumentLike] = None,
    options: Optional[RequestOptions] = None,
    logger: Optional[logging.Logger] = None,
) -> DocumentOutcome:
    """
    Replace a document, if it exists.

    Args:
        client: Document client
        document: New content; a ``Document`` may omit ``ref`` and be
            addressed by its self link
        ref: Document link or (database_id, collection_id, document_id)
        options: Request options
        logger: Optional logger for TRACE diagnostics

    Returns:
        OK outcome with the response, or NOT_FOUND

    Raises:
        ValueError: If no reference is given and the document has no self link
    """
    link = _replace_link(document, ref)

    try:
        response = await client.replace_document(link, document, options)
    except CosmosHttpResponseError as e:
        if status_code_of(e) != NOT_FOUND:
            raise
        trace(logger, f"Document '{link}' does not exist - so it cannot be replaced")
        return DocumentOutcome.not_found(link)

    return DocumentOutcome.ok(link, response)


async def try_replace_document_with_optimistic_locking(
    client: DocumentClient,
    document: Any,
    ref: Optional[DocumentLike] = None,
    etag: Optional[str] = None,
    options: Optional[RequestOptions] = None,
    logger: Optional[logging.Logger] = None,
) -> DocumentOutcome:
    """
    Replace a document only if its current eTag is the one given.

    The replace is attempted once. On a version conflict the caller is
    expected to re-read the document and decide whether to try again.

    Args:
        client: Document client
        document: New content
        ref: Document link or (database_id, collection_id, document_id);
            optional when ``document`` is a ``Document`` with a self link
        etag: Expected eTag; defaults to ``document.etag`` for a ``Document``
        options: Request options; not modified
        logger: Optional logger for TRACE diagnostics

    Returns:
        OK outcome with the response, or NOT_FOUND

    Raises:
        DocumentOptimisticLockError: If the stored eTag differs from ``etag``
        ValueError: If no eTag or no document reference can be determined
    """
    if etag is None and isinstance(document, Document) and document.etag:
        etag = document.etag
    if not etag:
        raise ValueError("An eTag is required for an optimistic locking replace")

    link = _replace_link(document, ref)
    locked_options = (options or RequestOptions()).with_if_match(etag)

    try:
        return await try_replace_document(client, document, link, locked_options, logger)
    except CosmosHttpResponseError as e:
        if status_code_of(e) != PRECONDITION_FAILED:
            raise
        message = (
            f"Optimistic locking error occurred while replacing document '{link}'. "
            f"Expected eTag {etag}."
        )
        trace(logger, message)
        if isinstance(document, Document):
            raise DocumentOptimisticLockError.from_document(
                message, document, e, etag=etag, document_link=link
            ) from e
        raise DocumentOptimisticLockError.from_link(message, link, etag, document, e) from e


async def upsert_document(
    client: DocumentClient,
    collection: CollectionLike,
    document: Any,
    options: Optional[RequestOptions] = None,
    disable_automatic_id_generation: bool = False,
) -> ResourceResponse:
    """Create or replace a document in a collection."""
    return await client.upsert_document(
        resolve_collection_link(collection), document, options, disable_automatic_id_generation
    )


async def upsert_documents_individually(
    client: DocumentClient,
    collection: CollectionLike,
    documents: Iterable[Any],
    options: Optional[RequestOptions] = None,
    disable_automatic_id_generation: bool = False,
) -> List[ResourceResponse]:
    """
    Upsert each document with its own request, one after another.

    This costs one round trip per document. A stored procedure that upserts
    the whole batch server-side is far cheaper for large batches.

    Returns:
        Responses in the order of ``documents``
    """
    collection_link = resolve_collection_link(collection)
    responses: List[ResourceResponse] = []

    for document in documents:
        responses.append(
            await client.upsert_document(
                collection_link, document, options, disable_automatic_id_generation
            )
        )

    return responses
