"""
Unit tests for the try-semantics document operations.

Covers not-found/conflict translation, optimistic locking, upsert and
individual batch upserts against both a mocked client and the in-memory
document client.
"""

import logging
from unittest.mock import AsyncMock, MagicMock

import pytest
from azure.cosmos.exceptions import CosmosHttpResponseError
from pydantic import BaseModel

from cosmosguard.core.logging_config import TRACE
from cosmosguard.documents.client import DocumentClient
from cosmosguard.documents.exceptions import DocumentOptimisticLockError, OptimisticLockError
from cosmosguard.documents.links import DocumentRef
from cosmosguard.documents.models import AccessConditionType, Document, DocumentResponse, RequestOptions, ResourceResponse
from cosmosguard.documents.operations import (
    try_create_document,
    try_delete_document,
    try_read_document,
    try_replace_document,
    try_replace_document_with_optimistic_locking,
    upsert_document,
    upsert_documents_individually,
)
from cosmosguard.documents.outcome import OutcomeKind
from cosmosguard.emulator.backend import InMemoryDocumentClient

DOC_LINK = "dbs/shop/colls/orders/docs/X"
COLL_LINK = "dbs/shop/colls/orders"


class Order(BaseModel):
    id: str
    total: int


def _error(status_code: int) -> CosmosHttpResponseError:
    return CosmosHttpResponseError(status_code=status_code, message=f"status {status_code}")


@pytest.fixture
def client():
    """Mocked document client."""
    mock = MagicMock(spec=DocumentClient)
    for name in ("read_document", "create_document", "replace_document", "delete_document", "upsert_document"):
        setattr(mock, name, AsyncMock(return_value=ResourceResponse(resource={"id": "X", "_etag": '"v2"'})))
    return mock


@pytest.fixture
def trace_logger():
    """Logger that records TRACE messages."""
    logger = logging.getLogger("tests.cosmosguard.operations")
    logger.setLevel(TRACE)
    return logger


async def make_store() -> InMemoryDocumentClient:
    store = InMemoryDocumentClient()
    await store.create_database("shop")
    await store.create_collection("shop", "orders")
    return store


class TestTryReadDocument:
    """Test try_read_document."""

    @pytest.mark.asyncio
    async def test_read_existing(self, client):
        """Test reading a document that exists."""
        outcome = await try_read_document(client, DOC_LINK)

        assert outcome.kind == OutcomeKind.OK
        assert outcome.response.resource["id"] == "X"
        client.read_document.assert_awaited_once_with(DOC_LINK, None)

    @pytest.mark.asyncio
    async def test_read_missing_returns_empty_outcome(self, client):
        """Test that 404 becomes a NOT_FOUND outcome."""
        client.read_document.side_effect = _error(404)

        outcome = await try_read_document(client, DOC_LINK)

        assert outcome.is_not_found
        assert outcome.response is None
        assert not outcome

    @pytest.mark.asyncio
    async def test_read_triple_is_normalised_to_link(self, client):
        """Test that a (database, collection, document) triple becomes a link."""
        await try_read_document(client, ("shop", "orders", "X"))
        await try_read_document(client, DocumentRef("shop", "orders", "X"))

        for call in client.read_document.await_args_list:
            assert call.args[0] == DOC_LINK

    @pytest.mark.asyncio
    async def test_read_other_error_propagates(self, client):
        """Test that statuses other than 404 propagate unchanged."""
        error = _error(500)
        client.read_document.side_effect = error

        with pytest.raises(CosmosHttpResponseError) as exc_info:
            await try_read_document(client, DOC_LINK)

        assert exc_info.value is error

    @pytest.mark.asyncio
    async def test_read_missing_traces(self, client, trace_logger, caplog):
        """Test that a missing document is traced on the injected logger."""
        client.read_document.side_effect = _error(404)

        with caplog.at_level(TRACE, logger=trace_logger.name):
            await try_read_document(client, DOC_LINK, logger=trace_logger)

        assert f"Document '{DOC_LINK}' does not exist" in caplog.text
        assert caplog.records[0].levelno == TRACE

    @pytest.mark.asyncio
    async def test_read_typed(self, client):
        """Test reading into a pydantic model."""
        client.read_document.return_value = ResourceResponse(resource={"id": "X", "total": 7, "_etag": '"v1"'})

        outcome = await try_read_document(client, DOC_LINK, model=Order)

        assert isinstance(outcome.response, DocumentResponse)
        assert outcome.response.document == Order(id="X", total=7)
        assert outcome.response.etag == '"v1"'


class TestTryCreateDocument:
    """Test try_create_document."""

    @pytest.mark.asyncio
    async def test_create(self, client):
        """Test creating a document."""
        outcome = await try_create_document(client, ("shop", "orders"), {"id": "X"}, disable_automatic_id_generation=True)

        assert outcome.is_ok
        client.create_document.assert_awaited_once_with(COLL_LINK, {"id": "X"}, None, True)

    @pytest.mark.asyncio
    async def test_create_conflict_returns_empty_outcome(self, client, trace_logger, caplog):
        """Test that 409 becomes a CONFLICT outcome."""
        client.create_document.side_effect = _error(409)

        with caplog.at_level(TRACE, logger=trace_logger.name):
            outcome = await try_create_document(client, COLL_LINK, {"id": "X"}, logger=trace_logger)

        assert outcome.is_conflict
        assert outcome.response is None
        assert f"Document already exists in collection '{COLL_LINK}'" in caplog.text

    @pytest.mark.asyncio
    async def test_create_not_found_propagates(self, client):
        """Test that 404 is not absorbed by create."""
        client.create_document.side_effect = _error(404)

        with pytest.raises(CosmosHttpResponseError):
            await try_create_document(client, COLL_LINK, {"id": "X"})

    @pytest.mark.asyncio
    async def test_create_existing_leaves_store_unchanged(self):
        """Test that a conflicting create does not touch the stored document."""
        store = await make_store()
        first = await try_create_document(store, COLL_LINK, {"id": "X", "total": 1})

        outcome = await try_create_document(store, COLL_LINK, {"id": "X", "total": 99})

        assert outcome.is_conflict
        stored = (await store.read_document(DOC_LINK)).resource
        assert stored["total"] == 1
        assert stored["_etag"] == first.response.etag


class TestTryDeleteDocument:
    """Test try_delete_document."""

    @pytest.mark.asyncio
    async def test_delete_missing_returns_empty_outcome(self, client):
        """Test that 404 becomes a NOT_FOUND outcome."""
        client.delete_document.side_effect = _error(404)

        outcome = await try_delete_document(client, DOC_LINK)

        assert outcome.is_not_found

    @pytest.mark.asyncio
    async def test_delete_existing(self):
        """Test deleting a document that exists."""
        store = await make_store()
        await store.create_document(COLL_LINK, {"id": "X"})

        outcome = await try_delete_document(store, ("shop", "orders", "X"))

        assert outcome.is_ok
        assert (await try_read_document(store, DOC_LINK)).is_not_found

    @pytest.mark.asyncio
    async def test_delete_conflict_propagates(self, client):
        """Test that 409 is not absorbed by delete."""
        client.delete_document.side_effect = _error(409)

        with pytest.raises(CosmosHttpResponseError):
            await try_delete_document(client, DOC_LINK)


class TestTryReplaceDocument:
    """Test try_replace_document."""

    @pytest.mark.asyncio
    async def test_replace_by_reference(self, client):
        """Test replacing a document addressed by reference."""
        outcome = await try_replace_document(client, {"id": "X", "total": 2}, ref=("shop", "orders", "X"))

        assert outcome.is_ok
        client.replace_document.assert_awaited_once_with(DOC_LINK, {"id": "X", "total": 2}, None)

    @pytest.mark.asyncio
    async def test_replace_document_uses_self_link(self, client):
        """Test that a Document is addressed by its self link."""
        document = Document(id="X", _self=DOC_LINK, _etag='"v1"')

        await try_replace_document(client, document)

        assert client.replace_document.await_args.args[0] == DOC_LINK

    @pytest.mark.asyncio
    async def test_replace_without_reference_raises(self, client):
        """Test that a plain payload needs a reference."""
        with pytest.raises(ValueError):
            await try_replace_document(client, {"id": "X"})

        client.replace_document.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_replace_missing_returns_empty_outcome(self, client, trace_logger, caplog):
        """Test that 404 becomes a NOT_FOUND outcome."""
        client.replace_document.side_effect = _error(404)

        with caplog.at_level(TRACE, logger=trace_logger.name):
            outcome = await try_replace_document(client, {"id": "X"}, ref=DOC_LINK, logger=trace_logger)

        assert outcome.is_not_found
        assert "does not exist - so it cannot be replaced" in caplog.text

    @pytest.mark.asyncio
    async def test_replace_missing_in_store(self):
        """Test replacing a document that was never created."""
        store = await make_store()

        outcome = await try_replace_document(store, {"id": "X"}, ref=DOC_LINK)

        assert outcome.is_not_found


class TestOptimisticLocking:
    """Test try_replace_document_with_optimistic_locking."""

    @pytest.mark.asyncio
    async def test_attaches_if_match(self, client):
        """Test that the expected eTag is sent as an If-Match precondition."""
        options = RequestOptions(partition_key="X")

        await try_replace_document_with_optimistic_locking(client, {"id": "X"}, ref=DOC_LINK, etag='"v1"', options=options)

        sent = client.replace_document.await_args.args[2]
        assert sent.access_condition.type == AccessConditionType.IF_MATCH
        assert sent.access_condition.condition == '"v1"'
        assert sent.partition_key == "X"
        assert options.access_condition is None

    @pytest.mark.asyncio
    async def test_document_etag_is_default(self, client):
        """Test that a Document's own eTag is used when none is given."""
        document = Document(id="X", _self=DOC_LINK, _etag='"v1"')

        await try_replace_document_with_optimistic_locking(client, document)

        sent = client.replace_document.await_args.args[2]
        assert sent.access_condition.condition == '"v1"'

    @pytest.mark.asyncio
    async def test_missing_etag_raises(self, client):
        """Test that a plain payload without an eTag is rejected."""
        with pytest.raises(ValueError):
            await try_replace_document_with_optimistic_locking(client, {"id": "X"}, ref=DOC_LINK)

    @pytest.mark.asyncio
    async def test_precondition_failed_with_payload(self, client, trace_logger, caplog):
        """Test that 412 becomes a lock error carrying the plain payload."""
        cause = _error(412)
        client.replace_document.side_effect = cause
        payload = {"id": "X", "total": 3}

        with caplog.at_level(TRACE, logger=trace_logger.name):
            with pytest.raises(DocumentOptimisticLockError) as exc_info:
                await try_replace_document_with_optimistic_locking(
                    client, payload, ref=("shop", "orders", "X"), etag='"v1"', logger=trace_logger
                )

        error = exc_info.value
        assert error.etag == '"v1"'
        assert error.document_link == DOC_LINK
        assert error.document_object == payload
        assert error.document is None
        assert error.__cause__ is cause
        assert "Expected eTag \"v1\"" in error.message
        assert "Optimistic locking error occurred" in caplog.text

    @pytest.mark.asyncio
    async def test_precondition_failed_with_document(self, client):
        """Test that 412 becomes a lock error carrying the Document."""
        client.replace_document.side_effect = _error(412)
        document = Document(id="X", _self=DOC_LINK, _etag='"v1"')

        with pytest.raises(OptimisticLockError) as exc_info:
            await try_replace_document_with_optimistic_locking(client, document)

        error = exc_info.value
        assert isinstance(error, DocumentOptimisticLockError)
        assert error.document is document
        assert error.document_object is None
        assert error.etag == '"v1"'
        assert error.document_link == DOC_LINK

    @pytest.mark.asyncio
    async def test_not_found_still_empty(self, client):
        """Test that 404 is still absorbed under locking."""
        client.replace_document.side_effect = _error(404)

        outcome = await try_replace_document_with_optimistic_locking(client, {"id": "X"}, ref=DOC_LINK, etag='"v1"')

        assert outcome.is_not_found

    @pytest.mark.asyncio
    async def test_other_errors_propagate(self, client):
        """Test that other statuses propagate unchanged."""
        error = _error(429)
        client.replace_document.side_effect = error

        with pytest.raises(CosmosHttpResponseError) as exc_info:
            await try_replace_document_with_optimistic_locking(client, {"id": "X"}, ref=DOC_LINK, etag='"v1"')

        assert exc_info.value is error
        assert client.replace_document.await_count == 1

    @pytest.mark.asyncio
    async def test_stale_etag_scenario(self):
        """Test a fresh eTag succeeding and a stale one then failing."""
        store = await make_store()
        created = await store.create_document(COLL_LINK, {"id": "X", "total": 1})
        v1 = created.etag

        first = await try_replace_document_with_optimistic_locking(
            store, {"id": "X", "total": 2}, ref=DOC_LINK, etag=v1
        )
        assert first.is_ok
        v2 = first.response.etag
        assert v2 != v1

        with pytest.raises(DocumentOptimisticLockError) as exc_info:
            await try_replace_document_with_optimistic_locking(
                store, {"id": "X", "total": 3}, ref=DOC_LINK, etag=v1
            )

        assert exc_info.value.etag == v1
        assert exc_info.value.document_link == DOC_LINK
        stored = (await store.read_document(DOC_LINK)).resource
        assert stored["total"] == 2
        assert stored["_etag"] == v2

    @pytest.mark.asyncio
    async def test_read_modify_write_with_document(self):
        """Test replacing a Document read back from the store."""
        store = await make_store()
        await store.create_document(COLL_LINK, {"id": "X", "total": 1})
        document = (await try_read_document(store, DOC_LINK)).unwrap().document
        document.total = 5

        outcome = await try_replace_document_with_optimistic_locking(store, document)

        assert outcome.is_ok
        assert outcome.response.resource["total"] == 5
        assert outcome.response.etag != document.etag


class TestUpsert:
    """Test upsert_document and upsert_documents_individually."""

    @pytest.mark.asyncio
    async def test_upsert_creates_then_overwrites(self):
        """Test upsert on a missing and then an existing document."""
        store = await make_store()

        created = await upsert_document(store, ("shop", "orders"), {"id": "X", "total": 1})
        updated = await upsert_document(store, COLL_LINK, {"id": "X", "total": 2})

        assert created.status_code == 201
        assert updated.status_code == 200
        assert updated.resource["total"] == 2
        assert (await store.read_document(DOC_LINK)).resource["total"] == 2

    @pytest.mark.asyncio
    async def test_upsert_errors_propagate(self, client):
        """Test that upsert does not absorb any status."""
        client.upsert_document.side_effect = _error(404)

        with pytest.raises(CosmosHttpResponseError):
            await upsert_document(client, COLL_LINK, {"id": "X"})

    @pytest.mark.asyncio
    async def test_upsert_individually_preserves_order(self):
        """Test one sequential call per document with responses in input order."""
        store = await make_store()
        documents = [{"id": f"doc-{i}", "n": i} for i in range(5)]

        responses = await upsert_documents_individually(store, COLL_LINK, documents)

        assert [r.resource["id"] for r in responses] == [d["id"] for d in documents]
        assert store.call_counts["upsert_document"] == 5

    @pytest.mark.asyncio
    async def test_upsert_individually_is_sequential(self, client):
        """Test that each upsert finishes before the next one starts."""
        in_flight = []
        calls = []

        async def upsert(collection_link, document, options, disable_automatic_id_generation):
            assert not in_flight
            in_flight.append(document)
            calls.append(document["id"])
            in_flight.pop()
            return ResourceResponse(resource=document)

        client.upsert_document.side_effect = upsert

        responses = await upsert_documents_individually(client, COLL_LINK, [{"id": "a"}, {"id": "b"}, {"id": "c"}])

        assert calls == ["a", "b", "c"]
        assert len(responses) == 3

    @pytest.mark.asyncio
    async def test_upsert_individually_stops_on_error(self, client):
        """Test that a failure stops the remaining upserts."""
        client.upsert_document.side_effect = [ResourceResponse(), _error(500), ResourceResponse()]

        with pytest.raises(CosmosHttpResponseError):
            await upsert_documents_individually(client, COLL_LINK, [{"id": "a"}, {"id": "b"}, {"id": "c"}])

        assert client.upsert_document.await_count == 2

    @pytest.mark.asyncio
    async def test_upsert_individually_empty(self, client):
        """Test upserting no documents."""
        assert await upsert_documents_individually(client, COLL_LINK, []) == []
        client.upsert_document.assert_not_awaited()
