"""
Collaborator Protocols: Record Representation Abstraction

Structural subtyping protocols (PEP 544) for the two collaborators the
engine receives at construction:
- ValueExtractor: pulls the partitioning value out of a record
- RecordFactory: builds the statements the engine appends to a record

Keeping these behind protocols leaves the engine free of any specific
statement representation; bucketizer.rdf provides the quad implementations.
"""

from __future__ import annotations

from typing import Optional, Protocol, Sequence, Union, runtime_checkable

from bucketizer.core.types import BlankNode, NamedNode, Quad, RelationParameters


@runtime_checkable
class ValueExtractor(Protocol):
    """Selects the partitioning value from a record."""

    @property
    def expression(self) -> str:
        """Source path expression, exported with engine state."""
        ...

    def extract(self, record: Sequence[Quad], record_id: str) -> Optional[str]:
        """
        Lexical value reached by the path, or None on a miss.

        A miss is an expected condition, never an error.
        """
        ...

    def describe(self, node: Union[NamedNode, BlankNode]) -> list[Quad]:
        """Statements attaching this path to a relation node (tree:path)."""
        ...


@runtime_checkable
class RecordFactory(Protocol):
    """Builds the annotation statements for records and relations."""

    def bucket_statements(self, record_id: str, bucket_ids: Sequence[str]) -> list[Quad]:
        """One "record belongs to bucket" statement per bucket id."""
        ...

    def relation_statements(
        self,
        bucket_id: str,
        parameters: RelationParameters,
        path: Optional[ValueExtractor] = None,
    ) -> list[Quad]:
        """Statements describing one outgoing relation of bucket_id."""
        ...
