"""
Core Type Definitions for the Stream Bucketizer

Implements the Result/Either monad for fallible helpers and the immutable
value types that flow through the engine:

- RDF terms (NamedNode, BlankNode, Literal) and Quad statements
- Relation descriptors (hypermedia controls) linking buckets

Design Principles:
- Value types are frozen and hashable
- Every type that appears in a snapshot round-trips through to_dict/from_dict
- A record is a plain mutable list of Quads owned by the caller
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import (
    Any,
    Callable,
    ClassVar,
    Generic,
    Literal as LiteralType,
    Optional,
    TypeVar,
    Union,
)
from uuid import uuid4

from bucketizer.core import constants as C

# =============================================================================
# TYPE VARIABLES FOR GENERIC CONTAINERS
# =============================================================================
T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type
U = TypeVar("U")  # Transform result type


# =============================================================================
# RESULT MONAD
# =============================================================================
@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """
    Success variant of Result monad.

    Immutable, hashable container for successful computation results.
    """

    value: T

    def is_ok(self) -> LiteralType[True]:
        return True

    def is_err(self) -> LiteralType[False]:
        return False

    def unwrap(self) -> T:
        """Extract value. Safe to call after is_ok() check."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        """Return value, ignoring default."""
        return self.value

    def map(self, fn: Callable[[T], U]) -> Ok[U]:
        """Apply transformation to success value."""
        return Ok(fn(self.value))

    def flat_map(self, fn: Callable[[T], Result[U, E]]) -> Result[U, E]:
        """Monadic bind for chaining fallible operations."""
        return fn(self.value)

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """
    Failure variant of Result monad.

    Carries full error context for exhaustive handling.
    """

    error: E

    def is_ok(self) -> LiteralType[False]:
        return False

    def is_err(self) -> LiteralType[True]:
        return True

    def unwrap(self) -> Any:
        """
        Attempting to unwrap an error is a programming error.

        Raises:
            RuntimeError: Always, with error context
        """
        raise RuntimeError(f"Called unwrap() on Err: {self.error}")

    def unwrap_or(self, default: T) -> T:
        """Return default value on error."""
        return default

    def map(self, fn: Callable[[Any], U]) -> Err[E]:
        """No-op on error variant - propagates error unchanged."""
        return self

    def flat_map(self, fn: Callable[[Any], Result[U, E]]) -> Err[E]:
        """Propagate error through monadic chain."""
        return self

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


# Union type for pattern matching
Result = Union[Ok[T], Err[E]]


# =============================================================================
# RDF TERMS
# =============================================================================
@dataclass(frozen=True, slots=True)
class NamedNode:
    """IRI-identified resource."""

    term_type: ClassVar[str] = "NamedNode"

    value: str

    def to_dict(self) -> dict[str, Any]:
        return {"termType": self.term_type, "value": self.value}

    def __str__(self) -> str:
        return f"<{self.value}>"


@dataclass(frozen=True, slots=True)
class BlankNode:
    """Anonymous resource, scoped to the statements that mention it."""

    term_type: ClassVar[str] = "BlankNode"

    value: str

    @classmethod
    def generate(cls) -> BlankNode:
        """Fresh blank node with a random label."""
        return cls(value=f"b{uuid4().hex}")

    def to_dict(self) -> dict[str, Any]:
        return {"termType": self.term_type, "value": self.value}

    def __str__(self) -> str:
        return f"_:{self.value}"


@dataclass(frozen=True, slots=True)
class Literal:
    """
    Typed or language-tagged lexical value.

    The datatype is kept as given; a language tag does not change it.
    """

    term_type: ClassVar[str] = "Literal"

    value: str
    datatype: str = C.XSD_STRING
    language: Optional[str] = None

    @classmethod
    def string(cls, value: str) -> Literal:
        """xsd:string literal."""
        return cls(value=value, datatype=C.XSD_STRING)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "termType": self.term_type,
            "value": self.value,
            "datatype": self.datatype,
        }
        if self.language is not None:
            data["language"] = self.language
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Literal:
        """
        Rebuild a literal from its snapshot form.

        Raises:
            KeyError: value is missing
            TypeError: value is not a string
        """
        value = data["value"]
        if not isinstance(value, str):
            raise TypeError(f"Literal value must be a string, got {type(value).__name__}")
        return cls(
            value=value,
            datatype=data.get("datatype", C.XSD_STRING),
            language=data.get("language"),
        )

    def __str__(self) -> str:
        if self.language:
            return f'"{self.value}"@{self.language}'
        return f'"{self.value}"^^<{self.datatype}>'


Term = Union[NamedNode, BlankNode, Literal]


# =============================================================================
# QUAD STATEMENT
# =============================================================================
@dataclass(frozen=True, slots=True)
class Quad:
    """Single statement. graph=None means the default graph."""

    subject: Union[NamedNode, BlankNode]
    predicate: NamedNode
    object: Term
    graph: Optional[NamedNode] = None

    def __str__(self) -> str:
        parts = [str(self.subject), str(self.predicate), str(self.object)]
        if self.graph is not None:
            parts.append(str(self.graph))
        return " ".join(parts) + " ."


# A record is the caller's statement list; the engine appends to it.
Record = list[Quad]


# =============================================================================
# RELATION DESCRIPTORS
# =============================================================================
class RelationType(Enum):
    """Kind of hypermedia edge between two buckets."""

    RELATION = C.TREE_RELATION_CLASS               # Unconditional "continue here"
    SUBSTRING = C.TREE_SUBSTRING_RELATION_CLASS    # Valid for a matching key segment

    @property
    def iri(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class RelationParameters:
    """
    Outgoing relation descriptor registered on a bucket.

    Invariant: SUBSTRING relations carry a value, RELATION edges do not
    need one.
    """

    target_bucket_id: str
    kind: RelationType
    value: Optional[tuple[Literal, ...]] = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to snapshot form."""
        return {
            "targetBucketId": self.target_bucket_id,
            "kind": self.kind.name,
            "value": (
                [literal.to_dict() for literal in self.value]
                if self.value is not None
                else None
            ),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RelationParameters:
        """
        Rebuild from snapshot form.

        Raises:
            KeyError: Required key or unknown kind
            TypeError: Wrong value shapes
        """
        target = data["targetBucketId"]
        if not isinstance(target, str):
            raise TypeError(f"targetBucketId must be a string, got {type(target).__name__}")
        raw_value = data.get("value")
        value = (
            tuple(Literal.from_dict(item) for item in raw_value)
            if raw_value is not None
            else None
        )
        return cls(
            target_bucket_id=target,
            kind=RelationType[data["kind"]],
            value=value,
        )
