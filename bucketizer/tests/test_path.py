"""
Unit Tests: Property Paths and Record Statements

Tests:
    - Path parsing
    - Value extraction
    - Path and relation descriptions
"""

import pytest

from bucketizer.core import constants as C
from bucketizer.core.protocols import RecordFactory, ValueExtractor
from bucketizer.core.types import (
    BlankNode,
    Literal,
    NamedNode,
    Quad,
    RelationParameters,
    RelationType,
)
from bucketizer.rdf.path import PropertyPath
from bucketizer.rdf.records import QuadRecordFactory, subject_for

NAME = "http://schema.org/name"
AUTHOR = "http://schema.org/author"


class TestParse:
    """Tests for PropertyPath.parse."""

    @pytest.mark.parametrize("expression,predicates", [
        (f"<{NAME}>", (NAME,)),
        (f"(<{NAME}>)", (NAME,)),
        (f"  ( <{NAME}> )  ", (NAME,)),
        (f"<{AUTHOR}>/<{NAME}>", (AUTHOR, NAME)),
        (f"(<{AUTHOR}> / <{NAME}>)", (AUTHOR, NAME)),
    ])
    def test_supported(self, expression, predicates):
        result = PropertyPath.parse(expression)

        assert result.is_ok()
        path = result.unwrap()
        assert path.predicates == predicates
        assert path.expression == expression

    @pytest.mark.parametrize("expression", [
        "",
        "()",
        "schema:name",
        f"<{AUTHOR}>|<{NAME}>",
        f"^<{NAME}>",
        f"<{NAME}>*",
    ])
    def test_unsupported(self, expression):
        assert PropertyPath.parse(expression).is_err()

    def test_implements_extractor_protocol(self):
        assert isinstance(PropertyPath.parse(f"<{NAME}>").unwrap(), ValueExtractor)


class TestExtract:
    """Tests for value extraction."""

    def test_single_predicate(self):
        path = PropertyPath.parse(f"<{NAME}>").unwrap()
        record = [Quad(NamedNode("http://ex.org/a"), NamedNode(NAME), Literal.string("Alice"))]

        assert path.extract(record, "http://ex.org/a") == "Alice"

    def test_only_record_node_is_followed(self):
        path = PropertyPath.parse(f"<{NAME}>").unwrap()
        record = [Quad(NamedNode("http://ex.org/other"), NamedNode(NAME), Literal.string("Bob"))]

        assert path.extract(record, "http://ex.org/a") is None

    def test_sequence_through_blank_node(self):
        path = PropertyPath.parse(f"<{AUTHOR}>/<{NAME}>").unwrap()
        author = BlankNode("b0")
        record = [
            Quad(NamedNode("http://ex.org/book"), NamedNode(AUTHOR), author),
            Quad(author, NamedNode(NAME), Literal("Carol", language="en")),
        ]

        assert path.extract(record, "http://ex.org/book") == "Carol"

    def test_blank_node_record_id(self):
        path = PropertyPath.parse(f"<{NAME}>").unwrap()
        record = [Quad(BlankNode("m1"), NamedNode(NAME), Literal.string("Dave"))]

        assert path.extract(record, "_:m1") == "Dave"

    def test_first_match_wins(self):
        path = PropertyPath.parse(f"<{NAME}>").unwrap()
        subject = NamedNode("http://ex.org/a")
        record = [
            Quad(subject, NamedNode(NAME), Literal.string("First")),
            Quad(subject, NamedNode(NAME), Literal.string("Second")),
        ]

        assert path.extract(record, "http://ex.org/a") == "First"

    def test_broken_sequence_is_a_miss(self):
        path = PropertyPath.parse(f"<{AUTHOR}>/<{NAME}>").unwrap()
        record = [Quad(NamedNode("http://ex.org/book"), NamedNode(AUTHOR), NamedNode("http://ex.org/p"))]

        assert path.extract(record, "http://ex.org/book") is None


class TestDescribe:
    """Tests for path description statements."""

    def test_single_predicate(self):
        node = BlankNode("r")
        quads = PropertyPath.parse(f"<{NAME}>").unwrap().describe(node)

        assert quads == [Quad(node, NamedNode(C.TREE_PATH), NamedNode(NAME))]

    def test_sequence_is_rdf_list(self):
        node = BlankNode("r")
        quads = PropertyPath.parse(f"<{AUTHOR}>/<{NAME}>").unwrap().describe(node)

        head = quads[0].object
        assert quads[0].predicate == NamedNode(C.TREE_PATH)
        firsts = [q.object.value for q in quads if q.predicate.value == C.RDF_FIRST]
        assert firsts == [AUTHOR, NAME]
        assert quads[-1].object == NamedNode(C.RDF_NIL)
        assert any(q.subject == head and q.predicate.value == C.RDF_FIRST for q in quads)


class TestQuadRecordFactory:
    """Tests for the default record factory."""

    def test_implements_factory_protocol(self):
        assert isinstance(QuadRecordFactory(), RecordFactory)

    def test_subject_for(self):
        assert subject_for("_:b1") == BlankNode("b1")
        assert subject_for("http://ex.org/a") == NamedNode("http://ex.org/a")

    def test_bucket_statements(self):
        quads = QuadRecordFactory().bucket_statements("http://ex.org/a", ["root"])

        assert quads == [
            Quad(NamedNode("http://ex.org/a"), NamedNode(C.LDES_BUCKET), Literal.string("root")),
        ]

    def test_named_graph(self):
        graph = NamedNode("http://ex.org/g")
        factory = QuadRecordFactory(graph)
        params = RelationParameters("1", RelationType.RELATION)

        quads = factory.bucket_statements("http://ex.org/a", ["0"]) + factory.relation_statements("0", params)

        assert all(q.graph == graph for q in quads)

    def test_relation_without_value_or_path(self):
        quads = QuadRecordFactory().relation_statements("0", RelationParameters("1", RelationType.RELATION))

        predicates = [q.predicate.value for q in quads]
        assert predicates == [C.TREE_RELATION, C.RDF_TYPE, C.TREE_NODE]


class TestLiteral:
    """Tests for Literal terms."""

    def test_language_tag_keeps_datatype(self):
        tagged = Literal("chat", language="fr")

        assert tagged.datatype == C.XSD_STRING
        assert tagged.to_dict() == {
            "termType": "Literal",
            "value": "chat",
            "datatype": C.XSD_STRING,
            "language": "fr",
        }
        assert tagged != Literal.string("chat")
