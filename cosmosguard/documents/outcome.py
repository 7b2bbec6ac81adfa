"""
Outcome of a try-operation.

A try-operation either succeeds with a response or ends in one of the
expected-failure variants (not found, conflict). Both empty variants carry
no response, so callers can branch on the variant instead of on ``None``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

R = TypeVar("R")


class OutcomeKind(str, Enum):
    """Variants of a try-operation outcome."""
    OK = "ok"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"


@dataclass(frozen=True)
class DocumentOutcome(Generic[R]):
    """Tagged result of a try-operation.

    Attributes:
        kind: Which variant this outcome is
        link: Link of the document or collection the operation addressed
        response: Store response, only set for OK
    """

    kind: OutcomeKind
    link: str
    response: Optional[R] = None

    @classmethod
    def ok(cls, link: str, response: R) -> "DocumentOutcome[R]":
        return cls(OutcomeKind.OK, link, response)

    @classmethod
    def not_found(cls, link: str) -> "DocumentOutcome[R]":
        return cls(OutcomeKind.NOT_FOUND, link)

    @classmethod
    def conflict(cls, link: str) -> "DocumentOutcome[R]":
        return cls(OutcomeKind.CONFLICT, link)

    @property
    def is_ok(self) -> bool:
        return self.kind is OutcomeKind.OK

    @property
    def is_not_found(self) -> bool:
        return self.kind is OutcomeKind.NOT_FOUND

    @property
    def is_conflict(self) -> bool:
        return self.kind is OutcomeKind.CONFLICT

    def __bool__(self) -> bool:
        return self.is_ok

    def unwrap(self) -> R:
        """Return the response of an OK outcome.

        Raises:
            LookupError: If the outcome is one of the empty variants
        """
        if not self.is_ok:
            raise LookupError(f"No response for '{self.link}': {self.kind.value}")
        return self.response
