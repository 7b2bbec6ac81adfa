"""
Document client factory.

Creates the document client selected by configuration.
"""

import logging

from .adapters.azure_cosmos import AzureCosmosDocumentClient
from .core.config_manager import ClientBackendType, CosmosConfig
from .documents.client import DocumentClient
from .emulator.backend import InMemoryDocumentClient

logger = logging.getLogger(__name__)


def create_document_client(config: CosmosConfig) -> DocumentClient:
    """
    Factory function to create a document client based on configuration.

    Args:
        config: Cosmos configuration

    Returns:
        Document client instance

    Raises:
        ValueError: If the backend is unknown, or the Azure backend lacks
            an endpoint or key

    Example:
        ```python
        config = CosmosConfig(
            backend="azure",
            endpoint="https://myaccount.documents.azure.com:443/",
            key=os.environ["COSMOS_KEY"],
        )
        client = create_document_client(config)
        ```
    """
    try:
        backend = ClientBackendType(config.backend)
    except ValueError as e:
        raise ValueError(
            f"Unknown document client backend: {config.backend}. "
            f"Supported backends: {[b.value for b in ClientBackendType]}"
        ) from e

    if backend == ClientBackendType.MEMORY:
        logger.info("Using in-memory document client")
        return InMemoryDocumentClient()

    return AzureCosmosDocumentClient.from_config(config)
