"""
In-memory document client.

Local implementation of the document client for development and testing.
Stores documents in memory, generates system properties, and honours
If-Match / If-None-Match preconditions the way Azure Cosmos DB does.
"""

import asyncio
import copy
import hashlib
import logging
import time
import uuid
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from azure.cosmos.http_constants import StatusCodes

from ..documents.client import DocumentClient
from ..documents.links import create_collection_link, create_database_link, parse_collection_link, parse_document_link
from ..documents.models import AccessConditionType, RequestOptions, ResourceResponse, to_document_body
from .exceptions import (
    BadRequestError,
    CollectionAlreadyExistsError,
    CollectionNotFoundError,
    DatabaseAlreadyExistsError,
    DatabaseNotFoundError,
    DocumentAlreadyExistsError,
    DocumentNotFoundError,
    PreconditionFailedError,
)

logger = logging.getLogger(__name__)

SYSTEM_PROPERTIES = ("_rid", "_ts", "_self", "_etag", "_attachments")


class InMemoryDocumentClient(DocumentClient):
    """In-memory document client.

    Thread-safe with async locking for concurrent operations. Every call is
    counted in ``call_counts`` by operation name.

    Attributes:
        _databases: Database resources by ID
        _documents: Documents by database ID, collection ID and document ID
        _lock: Async lock for thread safety
    """

    def __init__(self) -> None:
        """Initialize in-memory document client."""
        self._databases: Dict[str, Dict[str, Any]] = {}
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._documents: Dict[str, Dict[str, Dict[str, Dict[str, Any]]]] = {}
        self._lock = asyncio.Lock()
        self.call_counts: Counter = Counter()

    def _generate_resource_id(self, resource_type: str, identifier: str) -> str:
        """Generate a unique resource ID.

        Args:
            resource_type: Type of resource (db, coll, doc)
            identifier: Resource identifier

        Returns:
            Generated resource ID
        """
        hash_input = f"{resource_type}:{identifier}:{time.time()}:{uuid.uuid4().hex}"
        return hashlib.sha256(hash_input.encode()).hexdigest()[:8]

    def _generate_timestamp(self) -> int:
        return int(datetime.now(timezone.utc).timestamp())

    def _generate_etag(self) -> str:
        return f'"{uuid.uuid4().hex[:16]}"'

    async def create_database(self, database_id: str) -> Dict[str, Any]:
        """Create a new database.

        Raises:
            DatabaseAlreadyExistsError: If database already exists
        """
        async with self._lock:
            if database_id in self._databases:
                raise DatabaseAlreadyExistsError(
                    f"Database with id '{database_id}' already exists",
                    database_id=database_id
                )

            link = create_database_link(database_id)
            database = {
                "id": database_id,
                "_rid": self._generate_resource_id("db", database_id),
                "_ts": self._generate_timestamp(),
                "_self": link,
                "_etag": self._generate_etag(),
            }
            self._databases[database_id] = database
            self._collections[database_id] = {}
            self._documents[database_id] = {}

            logger.debug(f"Created database '{database_id}'")
            return copy.deepcopy(database)

    async def delete_database(self, database_id: str) -> None:
        """Delete a database with all its collections and documents.

        Raises:
            DatabaseNotFoundError: If database not found
        """
        async with self._lock:
            if database_id not in self._databases:
                raise DatabaseNotFoundError(
                    f"Database with id '{database_id}' not found",
                    database_id=database_id
                )

            del self._documents[database_id]
            del self._collections[database_id]
            del self._databases[database_id]

    async def create_collection(self, database_id: str, collection_id: str) -> Dict[str, Any]:
        """Create a new collection in a database.

        Raises:
            DatabaseNotFoundError: If database not found
            CollectionAlreadyExistsError: If collection already exists
        """
        async with self._lock:
            if database_id not in self._databases:
                raise DatabaseNotFoundError(
                    f"Database with id '{database_id}' not found",
                    database_id=database_id
                )
            if collection_id in self._collections[database_id]:
                raise CollectionAlreadyExistsError(
                    f"Collection with id '{collection_id}' already exists in database '{database_id}'",
                    collection_id=collection_id,
                    database_id=database_id
                )

            link = create_collection_link(database_id, collection_id)
            collection = {
                "id": collection_id,
                "_rid": self._generate_resource_id("coll", collection_id),
                "_ts": self._generate_timestamp(),
                "_self": link,
                "_etag": self._generate_etag(),
                "_docs": "docs/",
            }
            self._collections[database_id][collection_id] = collection
            self._documents[database_id][collection_id] = {}

            logger.debug(f"Created collection '{link}'")
            return copy.deepcopy(collection)

    def _get_collection_unlocked(self, database_id: str, collection_id: str) -> Dict[str, Dict[str, Any]]:
        """Return the document map of a collection (lock must be held).

        Raises:
            DatabaseNotFoundError: If database not found
            CollectionNotFoundError: If collection not found
        """
        if database_id not in self._databases:
            raise DatabaseNotFoundError(
                f"Database with id '{database_id}' not found",
                database_id=database_id
            )
        if collection_id not in self._collections[database_id]:
            raise CollectionNotFoundError(
                f"Collection with id '{collection_id}' not found in database '{database_id}'",
                collection_id=collection_id,
                database_id=database_id
            )
        return self._documents[database_id][collection_id]

    def _check_precondition(self, existing: Optional[Dict[str, Any]], options: Optional[RequestOptions]) -> None:
        """Evaluate the request's access condition against the stored document.

        Raises:
            PreconditionFailedError: If the condition does not hold
        """
        if options is None or options.access_condition is None:
            return

        condition = options.access_condition
        current_etag = existing["_etag"] if existing is not None else None

        if condition.type == AccessConditionType.IF_MATCH:
            if condition.condition != "*" and current_etag != condition.condition:
                raise PreconditionFailedError(
                    f"ETag mismatch. Expected '{condition.condition}', got '{current_etag}'",
                    etag=condition.condition
                )
            if condition.condition == "*" and existing is None:
                raise PreconditionFailedError("Document does not exist", etag=condition.condition)
        elif existing is not None and condition.condition in ("*", current_etag):
            raise PreconditionFailedError(
                f"ETag '{current_etag}' matches If-None-Match condition",
                etag=condition.condition
            )

    def _prepare_body(self, document: Any, disable_automatic_id_generation: bool) -> Dict[str, Any]:
        body = {
            key: value for key, value in to_document_body(document).items()
            if key not in SYSTEM_PROPERTIES
        }

        if not body.get("id"):
            if disable_automatic_id_generation:
                raise BadRequestError(
                    "The input content is invalid because the required properties - 'id; ' - are missing"
                )
            body["id"] = str(uuid.uuid4())
        elif not isinstance(body["id"], str) or "/" in body["id"]:
            raise BadRequestError(f"The input id '{body['id']}' is invalid: ids must be strings without '/'")
        return body

    def _store(
        self,
        documents: Dict[str, Dict[str, Any]],
        collection_link: str,
        body: Dict[str, Any],
        existing: Optional[Dict[str, Any]]
    ) -> Dict[str, Any]:
        """Write a document with fresh system properties (lock must be held)."""
        doc_id = body["id"]
        self_link = f"{collection_link}/docs/{doc_id}"
        document = {
            **body,
            "_rid": existing["_rid"] if existing else self._generate_resource_id("doc", doc_id),
            "_ts": self._generate_timestamp(),
            "_self": self_link,
            "_etag": self._generate_etag(),
            "_attachments": "attachments/",
        }
        documents[doc_id] = document
        return copy.deepcopy(document)

    def _response(self, resource: Dict[str, Any], status_code: int) -> ResourceResponse:
        headers = {"x-ms-request-charge": "1.0"}
        if resource.get("_etag"):
            headers["etag"] = resource["_etag"]
        return ResourceResponse(
            resource=resource,
            status_code=status_code,
            headers=headers,
            request_charge=1.0
        )

    async def read_document(
        self,
        document_link: str,
        options: Optional[RequestOptions] = None
    ) -> ResourceResponse:
        """Read a document.

        Raises:
            DatabaseNotFoundError: If database not found
            CollectionNotFoundError: If collection not found
            DocumentNotFoundError: If document not found
        """
        self.call_counts["read_document"] += 1
        ref = parse_document_link(document_link)

        async with self._lock:
            documents = self._get_collection_unlocked(ref.database_id, ref.collection_id)
            if ref.document_id not in documents:
                raise DocumentNotFoundError(
                    f"Document with id '{ref.document_id}' not found",
                    document_id=ref.document_id
                )
            return self._response(copy.deepcopy(documents[ref.document_id]), StatusCodes.OK)

    async def create_document(
        self,
        collection_link: str,
        document: Any,
        options: Optional[RequestOptions] = None,
        disable_automatic_id_generation: bool = False
    ) -> ResourceResponse:
        """Create a new document in a collection.

        Raises:
            DatabaseNotFoundError: If database not found
            CollectionNotFoundError: If collection not found
            DocumentAlreadyExistsError: If document already exists
            BadRequestError: If the id is missing and generation is disabled
        """
        self.call_counts["create_document"] += 1
        database_id, collection_id = parse_collection_link(collection_link)
        body = self._prepare_body(document, disable_automatic_id_generation)

        async with self._lock:
            documents = self._get_collection_unlocked(database_id, collection_id)
            if body["id"] in documents:
                raise DocumentAlreadyExistsError(
                    f"Document with id '{body['id']}' already exists",
                    document_id=body["id"]
                )
            stored = self._store(documents, collection_link.strip("/"), body, None)
            return self._response(stored, StatusCodes.CREATED)

    async def replace_document(
        self,
        document_link: str,
        document: Any,
        options: Optional[RequestOptions] = None
    ) -> ResourceResponse:
        """Replace an entire document.

        Raises:
            DatabaseNotFoundError: If database not found
            CollectionNotFoundError: If collection not found
            DocumentNotFoundError: If document not found
            PreconditionFailedError: If the access condition does not hold
        """
        self.call_counts["replace_document"] += 1
        ref = parse_document_link(document_link)
        body = {
            key: value for key, value in to_document_body(document).items()
            if key not in SYSTEM_PROPERTIES
        }

        async with self._lock:
            documents = self._get_collection_unlocked(ref.database_id, ref.collection_id)
            existing = documents.get(ref.document_id)
            if existing is None:
                raise DocumentNotFoundError(
                    f"Document with id '{ref.document_id}' not found",
                    document_id=ref.document_id
                )
            self._check_precondition(existing, options)

            body["id"] = ref.document_id

            stored = self._store(documents, ref.collection_link, body, existing)
            return self._response(stored, StatusCodes.OK)

    async def delete_document(
        self,
        document_link: str,
        options: Optional[RequestOptions] = None
    ) -> ResourceResponse:
        """Delete a document.

        Raises:
            DatabaseNotFoundError: If database not found
            CollectionNotFoundError: If collection not found
            DocumentNotFoundError: If document not found
            PreconditionFailedError: If the access condition does not hold
        """
        self.call_counts["delete_document"] += 1
        ref = parse_document_link(document_link)

        async with self._lock:
            documents = self._get_collection_unlocked(ref.database_id, ref.collection_id)
            existing = documents.get(ref.document_id)
            if existing is None:
                raise DocumentNotFoundError(
                    f"Document with id '{ref.document_id}' not found",
                    document_id=ref.document_id
                )
            self._check_precondition(existing, options)

            del documents[ref.document_id]
            return self._response({}, StatusCodes.NO_CONTENT)

    async def upsert_document(
        self,
        collection_link: str,
        document: Any,
        options: Optional[RequestOptions] = None,
        disable_automatic_id_generation: bool = False
    ) -> ResourceResponse:
        """Create a document, or replace it if it already exists.

        Raises:
            DatabaseNotFoundError: If database not found
            CollectionNotFoundError: If collection not found
            PreconditionFailedError: If the access condition does not hold
        """
        self.call_counts["upsert_document"] += 1
        database_id, collection_id = parse_collection_link(collection_link)
        body = self._prepare_body(document, disable_automatic_id_generation)

        async with self._lock:
            documents = self._get_collection_unlocked(database_id, collection_id)
            existing = documents.get(body["id"])
            self._check_precondition(existing, options)

            stored = self._store(documents, collection_link.strip("/"), body, existing)
            return self._response(stored, StatusCodes.OK if existing else StatusCodes.CREATED)

    async def clear(self) -> None:
        """Remove all databases, collections and documents."""
        async with self._lock:
            self._databases.clear()
            self._collections.clear()
            self._documents.clear()
            self.call_counts.clear()

