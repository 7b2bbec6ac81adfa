"""
Document models.

Pydantic models for documents, per-request options and client responses,
using the Cosmos DB REST property names as aliases.
"""

from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class Document(BaseModel):
    """Cosmos DB document.

    Represents a document with user data and system-generated properties.

    Attributes:
        id: Document identifier
        User fields: Any additional fields provided by user
        _rid: Resource ID (system-generated)
        _ts: Timestamp (system-generated)
        _self: Self link (system-generated)
        _etag: ETag for optimistic concurrency (system-generated)
        _attachments: Attachments link (system-generated)
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="allow"
    )

    id: str

    rid: str = Field(default="", alias="_rid")
    ts: int = Field(default=0, alias="_ts")
    self_link: str = Field(default="", alias="_self")
    etag: str = Field(default="", alias="_etag")
    attachments: str = Field(default="", alias="_attachments")

    def to_body(self) -> Dict[str, Any]:
        """Dump the document using its wire property names."""
        return self.model_dump(by_alias=True)


class AccessConditionType(str, Enum):
    """Conditional request header types."""
    IF_MATCH = "IfMatch"
    IF_NONE_MATCH = "IfNoneMatch"


class AccessCondition(BaseModel):
    """Precondition attached to a request.

    Attributes:
        type: Header type (If-Match or If-None-Match)
        condition: ETag the precondition is evaluated against
    """

    type: AccessConditionType = AccessConditionType.IF_MATCH
    condition: str


class RequestOptions(BaseModel):
    """Per-request options passed through to the document client."""

    partition_key: Optional[Any] = None
    access_condition: Optional[AccessCondition] = None
    session_token: Optional[str] = None
    pre_trigger_include: Optional[List[str]] = None
    post_trigger_include: Optional[List[str]] = None

    model_config = ConfigDict(populate_by_name=True)

    def with_if_match(self, etag: str) -> "RequestOptions":
        """Return a copy carrying an If-Match precondition on ``etag``."""
        return self.model_copy(
            update={"access_condition": AccessCondition(type=AccessConditionType.IF_MATCH, condition=etag)}
        )


class ResourceResponse(BaseModel):
    """Response of a single document operation.

    Attributes:
        resource: Raw document body returned by the store (empty on delete)
        status_code: HTTP status code
        headers: Response headers
        request_charge: Request units consumed
    """

    resource: Dict[str, Any] = Field(default_factory=dict)
    status_code: int = 200
    headers: Dict[str, str] = Field(default_factory=dict)
    request_charge: float = 0.0

    @property
    def etag(self) -> Optional[str]:
        return self.resource.get("_etag") or self.headers.get("etag")

    @property
    def document(self) -> Optional[Document]:
        """The resource as a Document, or None for responses without a body."""
        if not self.resource:
            return None
        return Document.model_validate(self.resource)


def to_document_body(document: Any) -> Dict[str, Any]:
    """Convert a payload (dict, Document or pydantic model) into a JSON body."""
    if isinstance(document, Document):
        return document.to_body()
    if isinstance(document, BaseModel):
        return document.model_dump(by_alias=True, mode="json")
    if isinstance(document, dict):
        return dict(document)
    raise TypeError(f"Unsupported document payload type: {type(document).__name__}")


class DocumentResponse(ResourceResponse, Generic[T]):
    """Response whose document was validated into a caller-supplied model."""

    typed_document: Optional[T] = None

    @property
    def document(self) -> T:  # type: ignore[override]
        return self.typed_document
