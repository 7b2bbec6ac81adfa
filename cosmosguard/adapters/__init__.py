"""Adapters onto third-party document clients."""

from .azure_cosmos import AzureCosmosDocumentClient

__all__ = ["AzureCosmosDocumentClient"]
