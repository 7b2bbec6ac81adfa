"""
Resource links.

Builds and parses the id-based resource links Cosmos DB uses to address
databases, collections and documents:

    dbs/{database_id}/colls/{collection_id}/docs/{document_id}
"""

from typing import NamedTuple, Tuple, Union


class DocumentRef(NamedTuple):
    """Composite reference to a document."""

    database_id: str
    collection_id: str
    document_id: str

    @property
    def link(self) -> str:
        return create_document_link(self.database_id, self.collection_id, self.document_id)

    @property
    def collection_link(self) -> str:
        return create_collection_link(self.database_id, self.collection_id)


DocumentLike = Union[str, DocumentRef, Tuple[str, str, str]]
CollectionLike = Union[str, Tuple[str, str]]


def _validate_id(kind: str, value: str) -> str:
    if not isinstance(value, str) or not value:
        raise ValueError(f"{kind} id must be a non-empty string")
    if "/" in value:
        raise ValueError(f"{kind} id '{value}' must not contain '/'")
    return value


def create_database_link(database_id: str) -> str:
    """Create the link of a database."""
    return f"dbs/{_validate_id('Database', database_id)}"


def create_collection_link(database_id: str, collection_id: str) -> str:
    """Create the link of a document collection."""
    return f"{create_database_link(database_id)}/colls/{_validate_id('Collection', collection_id)}"


def create_document_link(database_id: str, collection_id: str, document_id: str) -> str:
    """Create the link of a document."""
    return (
        f"{create_collection_link(database_id, collection_id)}"
        f"/docs/{_validate_id('Document', document_id)}"
    )


def _split(link: str, expected: Tuple[str, ...]) -> Tuple[str, ...]:
    parts = link.strip("/").split("/")
    if len(parts) != len(expected) * 2:
        raise ValueError(f"Malformed resource link: '{link}'")

    ids = []
    for index, segment in enumerate(expected):
        if parts[index * 2] != segment or not parts[index * 2 + 1]:
            raise ValueError(f"Malformed resource link: '{link}'")
        ids.append(parts[index * 2 + 1])
    return tuple(ids)


def parse_collection_link(link: str) -> Tuple[str, str]:
    """Split a collection link into (database_id, collection_id).

    Raises:
        ValueError: If the link is not a collection link
    """
    database_id, collection_id = _split(link, ("dbs", "colls"))
    return database_id, collection_id


def parse_document_link(link: str) -> DocumentRef:
    """Split a document link into a DocumentRef.

    Raises:
        ValueError: If the link is not a document link
    """
    return DocumentRef(*_split(link, ("dbs", "colls", "docs")))


def resolve_document_link(ref: DocumentLike) -> str:
    """Normalise a document reference into its link."""
    if isinstance(ref, str):
        return ref
    if isinstance(ref, tuple) and len(ref) == 3:
        return create_document_link(*ref)
    raise ValueError(f"Unsupported document reference: {ref!r}")


def resolve_collection_link(collection: CollectionLike) -> str:
    """Normalise a collection reference into its link."""
    if isinstance(collection, str):
        return collection
    if isinstance(collection, tuple) and len(collection) == 2:
        return create_collection_link(*collection)
    raise ValueError(f"Unsupported collection reference: {collection!r}")
