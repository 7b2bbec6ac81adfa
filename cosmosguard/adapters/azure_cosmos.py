"""
Azure Cosmos DB document client.

Adapts the link-addressed document interface onto the container proxies of
the async Azure Cosmos SDK (``azure.cosmos.aio``). Failures surface as the
SDK's own ``CosmosHttpResponseError`` subclasses, untouched.
"""

import logging
import uuid
from typing import Any, Dict, Optional

from azure.core import MatchConditions
from azure.cosmos.aio import CosmosClient, ContainerProxy

from ..core.config_manager import CosmosConfig
from ..documents.client import DocumentClient
from ..documents.links import parse_collection_link, parse_document_link
from ..documents.models import AccessConditionType, RequestOptions, ResourceResponse, to_document_body

logger = logging.getLogger(__name__)

REQUEST_CHARGE_HEADER = "x-ms-request-charge"


class AzureCosmosDocumentClient(DocumentClient):
    """Document client backed by ``azure.cosmos.aio.CosmosClient``.

    Reads and deletes need a partition key; it is taken from
    ``RequestOptions.partition_key`` and defaults to the document id, which
    matches collections partitioned on ``/id``.
    """

    def __init__(self, cosmos_client: CosmosClient):
        self._client = cosmos_client

    @classmethod
    def from_config(cls, config: CosmosConfig) -> "AzureCosmosDocumentClient":
        """Create a client for the account in ``config``.

        Raises:
            ValueError: If endpoint or key is missing
        """
        if not config.endpoint or not config.key:
            raise ValueError("Azure backend requires both an endpoint and a key")

        kwargs: Dict[str, Any] = {}
        if config.consistency_level:
            kwargs["consistency_level"] = config.consistency_level

        logger.info(f"Connecting to Cosmos DB account at {config.endpoint}")
        return cls(CosmosClient(config.endpoint, credential=config.key, **kwargs))

    def _container(self, database_id: str, collection_id: str) -> ContainerProxy:
        return self._client.get_database_client(database_id).get_container_client(collection_id)

    def _request_kwargs(self, options: Optional[RequestOptions], write: bool = False) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {}
        if options is None:
            return kwargs

        if options.session_token:
            kwargs["session_token"] = options.session_token
        if options.access_condition is not None:
            kwargs["etag"] = options.access_condition.condition
            if options.access_condition.type == AccessConditionType.IF_MATCH:
                kwargs["match_condition"] = MatchConditions.IfNotModified
            else:
                kwargs["match_condition"] = MatchConditions.IfModified
        if write:
            if options.pre_trigger_include:
                kwargs["pre_trigger_include"] = options.pre_trigger_include
            if options.post_trigger_include:
                kwargs["post_trigger_include"] = options.post_trigger_include
        return kwargs

    def _partition_key(self, options: Optional[RequestOptions], document_id: str) -> Any:
        if options is not None and options.partition_key is not None:
            return options.partition_key
        return document_id

    def _response(self, container: ContainerProxy, resource: Optional[Dict[str, Any]], status_code: int) -> ResourceResponse:
        connection = getattr(container, "client_connection", None)
        headers = dict(getattr(connection, "last_response_headers", None) or {})
        try:
            request_charge = float(headers.get(REQUEST_CHARGE_HEADER, 0.0))
        except (TypeError, ValueError):
            request_charge = 0.0
        return ResourceResponse(
            resource=dict(resource or {}),
            status_code=status_code,
            headers={key: str(value) for key, value in headers.items()},
            request_charge=request_charge
        )

    async def read_document(
        self,
        document_link: str,
        options: Optional[RequestOptions] = None
    ) -> ResourceResponse:
        ref = parse_document_link(document_link)
        container = self._container(ref.database_id, ref.collection_id)
        resource = await container.read_item(
            ref.document_id,
            partition_key=self._partition_key(options, ref.document_id),
            **self._request_kwargs(options)
        )
        return self._response(container, resource, 200)

    async def create_document(
        self,
        collection_link: str,
        document: Any,
        options: Optional[RequestOptions] = None,
        disable_automatic_id_generation: bool = False
    ) -> ResourceResponse:
        database_id, collection_id = parse_collection_link(collection_link)
        container = self._container(database_id, collection_id)
        resource = await container.create_item(
            to_document_body(document),
            enable_automatic_id_generation=not disable_automatic_id_generation,
            **self._request_kwargs(options, write=True)
        )
        return self._response(container, resource, 201)

    async def replace_document(
        self,
        document_link: str,
        document: Any,
        options: Optional[RequestOptions] = None
    ) -> ResourceResponse:
        ref = parse_document_link(document_link)
        container = self._container(ref.database_id, ref.collection_id)
        body = to_document_body(document)
        body.setdefault("id", ref.document_id)
        resource = await container.replace_item(
            ref.document_id,
            body,
            **self._request_kwargs(options, write=True)
        )
        return self._response(container, resource, 200)

    async def delete_document(
        self,
        document_link: str,
        options: Optional[RequestOptions] = None
    ) -> ResourceResponse:
        ref = parse_document_link(document_link)
        container = self._container(ref.database_id, ref.collection_id)
        await container.delete_item(
            ref.document_id,
            partition_key=self._partition_key(options, ref.document_id),
            **self._request_kwargs(options, write=True)
        )
        return self._response(container, None, 204)

    async def upsert_document(
        self,
        collection_link: str,
        document: Any,
        options: Optional[RequestOptions] = None,
        disable_automatic_id_generation: bool = False
    ) -> ResourceResponse:
        database_id, collection_id = parse_collection_link(collection_link)
        container = self._container(database_id, collection_id)
        body = to_document_body(document)
        if not body.get("id") and not disable_automatic_id_generation:
            # upsert_item has no automatic id generation of its own
            body["id"] = str(uuid.uuid4())
        resource = await container.upsert_item(
            body,
            **self._request_kwargs(options, write=True)
        )
        return self._response(container, resource, 200)

    async def close(self) -> None:
        await self._client.close()
