"""
Quad Record Factory

Builds the statements the engine appends to a record:

    <record>  ldes:bucket   "<bucketId>" .

and, when a relation is registered during the same call:

    <bucket>  tree:relation _:r .
    _:r       rdf:type      tree:Relation | tree:SubstringRelation ;
              tree:node     <targetBucket> ;
              tree:value    "segment" ;          # substring relations only
              tree:path     <predicate> .        # when a path is supplied
"""

from __future__ import annotations

from typing import Optional, Sequence, Union

from bucketizer.core import constants as C
from bucketizer.core.protocols import ValueExtractor
from bucketizer.core.types import (
    BlankNode,
    Literal,
    NamedNode,
    Quad,
    RelationParameters,
)

_BUCKET = NamedNode(C.LDES_BUCKET)
_RELATION = NamedNode(C.TREE_RELATION)
_NODE = NamedNode(C.TREE_NODE)
_VALUE = NamedNode(C.TREE_VALUE)
_TYPE = NamedNode(C.RDF_TYPE)


def subject_for(record_id: str) -> Union[NamedNode, BlankNode]:
    """Node identifying a record; "_:label" ids denote blank nodes."""
    if record_id.startswith("_:"):
        return BlankNode(record_id[2:])
    return NamedNode(record_id)


class QuadRecordFactory:
    """
    Default RecordFactory producing Quad statements.

    Usage:
        factory = QuadRecordFactory()
        record.extend(factory.bucket_statements("http://ex.org/m/1", ["root"]))
    """

    __slots__ = ("_graph",)

    def __init__(self, graph: Optional[NamedNode] = None) -> None:
        self._graph = graph

    def bucket_statements(self, record_id: str, bucket_ids: Sequence[str]) -> list[Quad]:
        subject = subject_for(record_id)
        return [
            Quad(subject, _BUCKET, Literal.string(bucket_id), self._graph)
            for bucket_id in bucket_ids
        ]

    def relation_statements(
        self,
        bucket_id: str,
        parameters: RelationParameters,
        path: Optional[ValueExtractor] = None,
    ) -> list[Quad]:
        node = BlankNode.generate()
        out = [
            Quad(NamedNode(bucket_id), _RELATION, node, self._graph),
            Quad(node, _TYPE, NamedNode(parameters.kind.iri), self._graph),
            Quad(node, _NODE, NamedNode(parameters.target_bucket_id), self._graph),
        ]
        for literal in parameters.value or ():
            out.append(Quad(node, _VALUE, literal, self._graph))
        if path is not None:
            for quad in path.describe(node):
                out.append(Quad(quad.subject, quad.predicate, quad.object, self._graph))
        return out
