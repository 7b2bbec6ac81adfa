"""
cosmosguard - Optimistic Locking Example

Two writers race to update the same document. The first replace with the
current eTag succeeds; the second, holding the now-stale eTag, gets a
DocumentOptimisticLockError and re-reads before trying again.

Runs against the in-memory client by default. Set COSMOSGUARD_BACKEND=azure
with COSMOSGUARD_ENDPOINT and COSMOSGUARD_KEY to use a real account (the
database and collection must already exist there).

Usage:
    python optimistic_locking.py
"""

import asyncio
import logging

from cosmosguard import (
    DocumentOptimisticLockError,
    InMemoryDocumentClient,
    create_document_client,
    try_create_document,
    try_read_document,
    try_replace_document_with_optimistic_locking,
)
from cosmosguard.core import ConfigManager, setup_logging

DATABASE_ID = "shop"
COLLECTION_ID = "orders"


async def main():
    config = ConfigManager().load()
    setup_logging(level=config.logging.level, format_type="text")
    logger = logging.getLogger("examples.optimistic_locking")

    client = create_document_client(config.cosmos)
    if isinstance(client, InMemoryDocumentClient):
        await client.create_database(DATABASE_ID)
        await client.create_collection(DATABASE_ID, COLLECTION_ID)

    ref = (DATABASE_ID, COLLECTION_ID, "X")

    await try_create_document(
        client, (DATABASE_ID, COLLECTION_ID), {"id": "X", "status": "new"}, logger=logger
    )
    v1 = (await try_read_document(client, ref, logger=logger)).unwrap().etag
    print(f"Stored eTag: {v1}")

    first = await try_replace_document_with_optimistic_locking(
        client, {"id": "X", "status": "paid"}, ref=ref, etag=v1, logger=logger
    )
    print(f"First writer succeeded, eTag is now {first.unwrap().etag}")

    try:
        await try_replace_document_with_optimistic_locking(
            client, {"id": "X", "status": "cancelled"}, ref=ref, etag=v1, logger=logger
        )
    except DocumentOptimisticLockError as e:
        print(f"Second writer rejected: expected {e.etag} for {e.document_link}")
        latest = (await try_read_document(client, ref)).unwrap()
        retried = await try_replace_document_with_optimistic_locking(
            client, {"id": "X", "status": "cancelled"}, ref=ref, etag=latest.etag, logger=logger
        )
        print(f"Second writer retried with {latest.etag}: {retried.unwrap().resource['status']}")

    await client.close()


if __name__ == "__main__":
    asyncio.run(main())
