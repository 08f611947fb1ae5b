"""
Property Path Extraction

Evaluates sequence property paths over a record's statements, starting
from the record's own node.

Supported syntax (SPARQL property path subset):
    <p>                 single predicate
    (<p>)               parenthesized
    <p1>/<p2>/<p3>      sequence

The first value reached wins; its lexical form is returned regardless of
term type. A path that reaches nothing is a miss (None), not an error.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Sequence, Union

from bucketizer.core import constants as C
from bucketizer.core.types import BlankNode, NamedNode, Quad, Result, Ok, Err
from bucketizer.rdf.records import subject_for

_SEQUENCE = re.compile(r"\s*<[^<>\s]+>(?:\s*/\s*<[^<>\s]+>)*\s*")
_IRI = re.compile(r"<([^<>\s]+)>")

_PATH = NamedNode(C.TREE_PATH)
_FIRST = NamedNode(C.RDF_FIRST)
_REST = NamedNode(C.RDF_REST)
_NIL = NamedNode(C.RDF_NIL)


@dataclass(frozen=True, slots=True)
class PropertyPath:
    """Parsed sequence path; implements the ValueExtractor protocol."""

    expression: str
    predicates: tuple[str, ...]

    @classmethod
    def parse(cls, expression: str) -> Result[PropertyPath, str]:
        """
        Parse a path expression.

        Returns:
            Ok[PropertyPath]: Parsed path
            Err[str]: Reason the expression is not supported
        """
        body = expression.strip()
        while body.startswith("(") and body.endswith(")"):
            body = body[1:-1].strip()

        if not body:
            return Err("empty path")
        if _SEQUENCE.fullmatch(body) is None:
            return Err("expected <iri> or a '/'-separated sequence of <iri>")

        return Ok(cls(expression=expression, predicates=tuple(_IRI.findall(body))))

    def extract(self, record: Sequence[Quad], record_id: str) -> Optional[str]:
        frontier: list = [subject_for(record_id)]
        for predicate in self.predicates:
            focus = set(frontier)
            frontier = [
                quad.object for quad in record
                if quad.predicate.value == predicate and quad.subject in focus
            ]
            if not frontier:
                return None
        return frontier[0].value

    def describe(self, node: Union[NamedNode, BlankNode]) -> list[Quad]:
        if len(self.predicates) == 1:
            return [Quad(node, _PATH, NamedNode(self.predicates[0]))]

        # Sequence paths are RDF lists of predicates
        head = BlankNode.generate()
        out = [Quad(node, _PATH, head)]
        cell = head
        for index, predicate in enumerate(self.predicates):
            out.append(Quad(cell, _FIRST, NamedNode(predicate)))
            if index == len(self.predicates) - 1:
                out.append(Quad(cell, _REST, _NIL))
            else:
                nxt = BlankNode.generate()
                out.append(Quad(cell, _REST, nxt))
                cell = nxt
        return out

    def __str__(self) -> str:
        return self.expression
