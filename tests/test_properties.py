"""
End-to-end behavior of the views on graphs loaded from Turtle.
"""
from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest
from rdflib import Graph, Literal, Namespace
from rdflib.compare import isomorphic

from rdf_dynamic import BaseIriRequiredError, DynamicGraph, DynamicNode
from rdf_dynamic.names import display_name, resolve_name

EX = Namespace("http://example.org/")

PREFIXES = "@prefix ex: <http://example.org/> .\n"


def turtle(data):
    graph = Graph(store="SimpleMemory", bind_namespaces="none")
    graph.parse(data=PREFIXES + data, format="turtle")
    return graph


@pytest.fixture
def people():
    graph = turtle("""
        ex:s ex:p1 "o1", "o2" ;
             ex:p2 "o3" .
        ex:t ex:p1 "x" .
    """)
    return DynamicGraph(graph)


class TestOverwriteSemantics:
    """Assigning a bag replaces mentioned predicates only."""

    def test_partial_overwrite(self, people):
        people["ex:s"] = {"ex:p1": "o"}
        expected = turtle("""
            ex:s ex:p1 "o" ; ex:p2 "o3" .
            ex:t ex:p1 "x" .
        """)
        assert isomorphic(people.graph, expected)

    def test_keys_in_first_seen_order(self, people):
        assert list(people["ex:s"]) == ["ex:p1", "ex:p2"]

    def test_none_retracts_subject(self, people):
        people["ex:s"] = None
        assert isomorphic(people.graph, turtle('ex:t ex:p1 "x" .'))

    def test_relative_name_without_base(self, people):
        before = set(people.graph)
        with pytest.raises(BaseIriRequiredError):
            people["ex:s"] = {"p1": "o"}
        assert set(people.graph) == before


class TestCollectionLaws:
    def test_clear_is_idempotent(self, people):
        objects = people["ex:s"]["ex:p1"]
        objects.clear()
        after_first = set(people.graph)
        objects.clear()
        assert set(people.graph) == after_first
        assert len(objects) == 0

    @pytest.mark.parametrize("value", ["new", 7, EX.thing])
    def test_add_remove_inverse(self, people, value):
        before = set(people.graph)
        objects = people["ex:s"]["ex:p1"]
        objects.add(value)
        assert value in objects
        objects.remove(value)
        assert set(people.graph) == before

    def test_discard_then_add_restores(self, people):
        before = set(people.graph)
        objects = people["ex:s"]["ex:p1"]
        assert objects.discard("o1")
        objects.add("o1")
        assert set(people.graph) == before


class TestDisplayNameDeterminism:
    @pytest.mark.parametrize("base", [None, "http://example.org/", "http://example.org/vocab#"])
    def test_keys_resolve_to_predicates(self, base):
        graph = turtle("""
            ex:s ex:name "a" ;
                 <http://example.org/vocab#age> 3 ;
                 <http://other.org/x/y> "b" .
        """)
        node = DynamicNode(EX.s, graph, base=base)
        for predicate, key in zip(node.predicates(), node):
            assert resolve_name(key, graph, base) == str(predicate)
            assert display_name(predicate, graph, base) == key


class TestExtremeValues:
    @pytest.mark.parametrize("value", [
        datetime.max,
        datetime.min,
        date.max,
        timedelta.max,
        timedelta.min,
        Decimal("-79228162514264337593543950335"),
        "￿",
    ])
    def test_round_trip(self, value):
        node = DynamicNode(EX.s, Graph(), collapse_singular=True)
        node["ex:v"] = value
        assert node["ex:v"] == value

    def test_literal_from_turtle(self):
        graph = turtle('ex:s ex:when "2024-01-02T03:04:05"^^<http://www.w3.org/2001/XMLSchema#dateTime> .')
        node = DynamicNode(EX.s, graph, collapse_singular=True)
        assert node["http://example.org/when"] == datetime(2024, 1, 2, 3, 4, 5)

    def test_language_literal_from_turtle(self):
        graph = turtle('ex:s ex:label "chat"@fr .')
        node = DynamicNode(EX.s, graph, collapse_singular=True)
        assert node["http://example.org/label"] == Literal("chat", lang="fr")
