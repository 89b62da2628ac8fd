"""Tests for node <-> native value conversion."""
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest
from rdflib import BNode, Literal, Namespace
from rdflib.namespace import XSD

from rdf_dynamic.conversion import (
    is_expandable,
    lookup_node,
    plan_node,
    plan_values,
    to_node,
    to_value,
)
from rdf_dynamic.errors import LiteralDecodeError, UnsupportedValueError
from rdf_dynamic.rdf_list import RdfCollection, RdfListView
from rdf_dynamic.terms import RDF_FIRST, RDF_NIL, RDF_REST
from rdf_dynamic.views import DynamicNode

EX = Namespace("http://example.org/")


class PersonNode(DynamicNode):
    """Typed node used to check item_type wrapping."""
    pass


# ========== Read Direction ==========

class TestToValue:
    def test_plain_literal(self, graph):
        assert to_value(Literal("hello"), graph) == "hello"
        assert type(to_value(Literal("hello"), graph)) is str

    def test_xsd_string(self, graph):
        value = to_value(Literal("hello", datatype=XSD.string), graph)
        assert value == "hello"
        assert type(value) is str

    def test_language_tagged_literal_passes_through(self, graph):
        literal = Literal("bonjour", lang="fr")
        assert to_value(literal, graph) is literal

    def test_unknown_datatype_passes_through(self, graph):
        literal = Literal("x", datatype=EX.custom)
        assert to_value(literal, graph) is literal

    def test_typed_literals(self, graph):
        assert to_value(Literal("42", datatype=XSD.integer), graph) == 42
        assert to_value(Literal("true", datatype=XSD.boolean), graph) is True
        assert to_value(Literal("2.50", datatype=XSD.decimal), graph) == Decimal("2.5")
        assert to_value(Literal("2000-01-01", datatype=XSD.date), graph) == date(2000, 1, 1)

    def test_malformed_literal(self, graph):
        with pytest.raises(LiteralDecodeError):
            to_value(Literal("abc", datatype=XSD.integer), graph)

    def test_resource_becomes_node(self, graph):
        value = to_value(EX.alice, graph)
        assert isinstance(value, DynamicNode)
        assert value == EX.alice
        assert value.graph is graph

    def test_blank_node(self, graph):
        blank = BNode()
        value = to_value(blank, graph)
        assert isinstance(value, DynamicNode)
        assert value.node == blank

    def test_item_type(self, graph):
        value = to_value(EX.alice, graph, item_type=PersonNode)
        assert isinstance(value, PersonNode)

    def test_base_is_passed_on(self, graph):
        value = to_value(EX.alice, graph, base="http://example.org/vocab#")
        assert value.base == "http://example.org/vocab#"

    def test_list_head(self, graph):
        head = BNode()
        graph.add((head, RDF_FIRST, Literal("a")))
        graph.add((head, RDF_REST, RDF_NIL))
        value = to_value(head, graph)
        assert isinstance(value, RdfListView)
        assert list(value) == ["a"]

    def test_nil_is_empty_list(self, graph):
        value = to_value(RDF_NIL, graph)
        assert isinstance(value, RdfListView)
        assert len(value) == 0


# ========== Write Direction ==========

class TestPlanNode:
    def test_none(self, graph):
        with pytest.raises(ValueError):
            plan_node(None, graph)

    def test_string(self, graph):
        node, extra = plan_node("text", graph)
        assert node == Literal("text")
        assert node.datatype is None
        assert extra == []

    def test_scalars(self, graph):
        assert plan_node(42, graph)[0] == Literal("42", datatype=XSD.integer)
        assert plan_node(False, graph)[0] == Literal("false", datatype=XSD.boolean)
        assert plan_node(1.5, graph)[0] == Literal("1.5", datatype=XSD.double)
        assert plan_node(Decimal("1.5"), graph)[0] == Literal("1.5", datatype=XSD.decimal)

    def test_nodes_pass_through(self, graph):
        literal = Literal("x", lang="en")
        assert plan_node(EX.a, graph) == (EX.a, [])
        assert plan_node(literal, graph) == (literal, [])

    def test_node_handle(self, graph):
        assert plan_node(DynamicNode(EX.a, graph), graph) == (EX.a, [])

    def test_collection_builds_list(self, graph):
        node, extra = plan_node(RdfCollection([1, 2]), graph)
        assert isinstance(node, BNode)
        assert len(extra) == 4
        assert len(graph) == 0

    def test_empty_collection_is_nil(self, graph):
        assert plan_node(RdfCollection(), graph) == (RDF_NIL, [])

    def test_sequence_is_not_a_single_node(self, graph):
        with pytest.raises(UnsupportedValueError):
            plan_node([1, 2], graph)

    def test_unsupported_type(self, graph):
        with pytest.raises(UnsupportedValueError):
            plan_node(object(), graph)
        with pytest.raises(UnsupportedValueError):
            plan_node(complex(1, 2), graph)


class TestPlanValues:
    def test_scalar(self, graph):
        nodes, extra = plan_values("a", graph)
        assert nodes == [Literal("a")]
        assert extra == []

    def test_sequence(self, graph):
        nodes, _ = plan_values([1, "a", EX.b], graph)
        assert nodes == [Literal(1), Literal("a"), EX.b]

    def test_generator(self, graph):
        nodes, _ = plan_values((i for i in range(3)), graph)
        assert len(nodes) == 3

    def test_string_is_not_expanded(self, graph):
        nodes, _ = plan_values("abc", graph)
        assert len(nodes) == 1

    def test_bytes_are_not_expanded(self, graph):
        nodes, _ = plan_values(b"abc", graph)
        assert nodes == [Literal("YWJj", datatype=XSD.base64Binary)]

    def test_expandable(self):
        assert is_expandable([1])
        assert is_expandable({1})
        assert is_expandable(range(2))
        assert not is_expandable("abc")
        assert not is_expandable({"a": 1})
        assert not is_expandable(RdfCollection([1]))


class TestToNode:
    def test_asserts_list_statements(self, graph):
        head = to_node(RdfCollection(["a"]), graph)
        assert (head, RDF_FIRST, Literal("a")) in graph

    def test_lookup_never_asserts(self, graph):
        assert lookup_node(RdfCollection(["a"]), graph) is not None
        assert len(graph) == 0

    def test_lookup_unconvertible(self, graph):
        assert lookup_node(None, graph) is None
        assert lookup_node([1], graph) is None
        assert lookup_node(object(), graph) is None


# ========== Round Trips Through The Graph ==========

class TestNativeRoundTrip:
    @pytest.mark.parametrize("value", [
        True,
        False,
        0,
        2 ** 63 - 1,
        -(2 ** 63),
        2 ** 64 - 1,
        Decimal("79228162514264337593543950335"),
        Decimal("-0.000001"),
        0.1,
        -1.7976931348623157e308,
        float("inf"),
        "",
        "text with spaces",
        datetime(2024, 2, 29, 13, 45, 30),
        datetime(2024, 2, 29, 13, 45, 30, 123456, tzinfo=timezone.utc),
        date(1999, 12, 31),
        timedelta(0),
        timedelta(days=1, hours=2, seconds=3, microseconds=4),
        -timedelta(minutes=90),
        b"\x00\xffbinary",
    ])
    def test_value_survives_graph(self, graph, value):
        node = DynamicNode(EX.s, graph, collapse_singular=True)
        node["ex:value"] = value
        result = node["ex:value"]
        assert result == value
        assert type(result) is type(value)
