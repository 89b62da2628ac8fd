"""Tests for RDF list reading and writing."""
import pytest
from rdflib import BNode, Graph, Literal, Namespace

from rdf_dynamic.errors import MalformedListError, UnsupportedValueError
from rdf_dynamic.rdf_list import RdfCollection, RdfListView, is_list_head, plan_list
from rdf_dynamic.terms import RDF_FIRST, RDF_NIL, RDF_REST
from rdf_dynamic.views import DynamicNode

EX = Namespace("http://example.org/")


@pytest.fixture
def node(graph):
    return DynamicNode(EX.s, graph, collapse_singular=True)


def add_list(graph, items):
    """Write an RDF list by hand, returning its head."""
    if not items:
        return RDF_NIL
    cells = [BNode() for _ in items]
    for i, (cell, item) in enumerate(zip(cells, items)):
        graph.add((cell, RDF_FIRST, item))
        graph.add((cell, RDF_REST, cells[i + 1] if i + 1 < len(cells) else RDF_NIL))
    return cells[0]


class TestRdfCollection:
    def test_sequence(self):
        collection = RdfCollection(x for x in "abc")
        assert len(collection) == 3
        assert collection[1] == "b"
        assert collection == ["a", "b", "c"]
        assert collection == RdfCollection(["a", "b", "c"])

    def test_unhashable(self):
        with pytest.raises(TypeError):
            hash(RdfCollection())


class TestPlanList:
    def test_empty(self, graph):
        assert plan_list([], graph) == (RDF_NIL, [])

    def test_cells(self, graph):
        head, triples = plan_list(["a", "b"], graph)
        assert (head, RDF_FIRST, Literal("a")) in triples
        assert len(triples) == 4
        assert sum(1 for t in triples if t[2] == RDF_NIL) == 1

    def test_unconvertible_item(self, graph):
        with pytest.raises(UnsupportedValueError):
            plan_list(["a", object()], graph)


class TestRdfListView:
    def test_read(self, graph):
        head = add_list(graph, [Literal("a"), Literal(2), EX.o])
        view = RdfListView(head, graph)
        assert len(view) == 3
        assert view[0] == "a"
        assert view[1] == 2
        assert view[-1] == EX.o
        assert view[:2] == ["a", 2]
        assert view == ["a", 2, EX.o]
        assert view.nodes() == [Literal("a"), Literal(2), EX.o]

    def test_nil(self, graph):
        view = RdfListView(RDF_NIL, graph)
        assert len(view) == 0
        assert list(view) == []

    def test_requires_arguments(self, graph):
        with pytest.raises(ValueError):
            RdfListView(None, graph)
        with pytest.raises(ValueError):
            RdfListView(RDF_NIL, None)

    def test_is_live(self, graph):
        head = add_list(graph, [Literal("a")])
        view = RdfListView(head, graph)
        graph.set((head, RDF_FIRST, Literal("z")))
        assert list(view) == ["z"]

    def test_cycle(self, graph):
        first, second = BNode(), BNode()
        graph.add((first, RDF_FIRST, Literal("a")))
        graph.add((first, RDF_REST, second))
        graph.add((second, RDF_FIRST, Literal("b")))
        graph.add((second, RDF_REST, first))
        with pytest.raises(MalformedListError):
            len(RdfListView(first, graph))

    def test_missing_rest(self, graph):
        head = BNode()
        graph.add((head, RDF_FIRST, Literal("a")))
        with pytest.raises(MalformedListError):
            list(RdfListView(head, graph))

    def test_missing_first(self, graph):
        head = BNode()
        graph.add((head, RDF_REST, RDF_NIL))
        with pytest.raises(MalformedListError):
            list(RdfListView(head, graph))

    def test_is_list_head(self, graph):
        head = add_list(graph, [Literal("a")])
        assert is_list_head(head, graph)
        assert is_list_head(RDF_NIL, graph)
        assert not is_list_head(EX.o, graph)
        assert not is_list_head(Literal("a"), graph)


class TestListsThroughNodes:
    def test_assign_and_read(self, node, graph):
        node["ex:items"] = RdfCollection(["a", 1, EX.o])
        value = node["ex:items"]
        assert isinstance(value, RdfListView)
        assert value == ["a", 1, EX.o]
        assert len(graph) == 7

    def test_plain_list_is_not_an_rdf_list(self, node, graph):
        node["ex:items"] = ["a", "b"]
        assert len(graph) == 2

    def test_empty_collection(self, node, graph):
        node["ex:items"] = RdfCollection()
        assert (EX.s, EX.items, RDF_NIL) in graph
        assert len(node["ex:items"]) == 0

    def test_nested(self, node):
        node["ex:items"] = RdfCollection([RdfCollection(["a"]), "b"])
        outer = node["ex:items"]
        assert isinstance(outer[0], RdfListView)
        assert outer[0] == ["a"]
        assert outer[1] == "b"

    def test_list_item_nodes_keep_settings(self, node, graph):
        node["ex:items"] = RdfCollection([EX.o])
        graph.add((EX.o, EX.name, Literal("O")))
        item = node["ex:items"][0]
        assert isinstance(item, DynamicNode)
        assert set(item["ex:name"]) == {"O"}

    def test_reassign_same_graph_reuses_head(self, node, graph):
        node["ex:items"] = RdfCollection(["a"])
        view = node["ex:items"]
        node["ex:copy"] = view
        assert next(graph.objects(EX.s, EX.copy)) == view.node
        assert len(graph) == 4

    def test_assign_view_from_other_graph(self, node, graph):
        other = Graph()
        head = add_list(other, [Literal("a"), Literal("b")])
        node["ex:items"] = RdfListView(head, other)
        assert node["ex:items"] == ["a", "b"]
        assert len(graph) == 5

    def test_failed_list_leaves_graph(self, node, graph):
        with pytest.raises(UnsupportedValueError):
            node["ex:items"] = RdfCollection(["a", object()])
        assert len(graph) == 0

    def test_membership(self, node):
        node["ex:p"] = "a"
        assert node.contains("ex:p", "a")
        assert not node.contains("ex:p", RdfCollection(["a"]))
