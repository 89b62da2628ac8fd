"""
RDF lists (rdf:first / rdf:rest chains).

A plain Python list assigned to a predicate becomes one statement per
element. Wrapping it in RdfCollection makes it a single object instead: the
head of a linked list of cells. On the read side such a head decodes to an
RdfListView.

    node["p"] = ["a", "b"]                 # <s> <p> "a", "b" .
    node["p"] = RdfCollection(["a", "b"])  # <s> <p> ("a" "b") .
"""

from collections.abc import Sequence
from typing import Any, Iterable, Iterator, Optional

from rdflib import BNode, Graph
from rdflib.term import Node

from rdf_dynamic import store
from rdf_dynamic.errors import MalformedListError
from rdf_dynamic.terms import RDF_FIRST, RDF_NIL, RDF_REST, NodeHandle, is_resource


class RdfCollection(Sequence):
    """
    Marks a sequence as a single RDF list value.

    Items are converted like any other value; nested RdfCollections become
    nested lists.
    """

    def __init__(self, items: Iterable[Any] = ()):
        self._items = list(items)

    def __getitem__(self, index):
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other) -> bool:
        if isinstance(other, RdfCollection):
            return self._items == other._items
        if isinstance(other, list):
            return self._items == other
        return NotImplemented

    __hash__ = None

    def __repr__(self) -> str:
        return f"RdfCollection({self._items!r})"


def is_list_head(node: Node, graph: Graph) -> bool:
    """Check if a node is rdf:nil or the first cell of an RDF list."""
    if node == RDF_NIL:
        return True
    return is_resource(node) and store.exists(graph, node, RDF_FIRST)


def plan_list(items: Iterable[Any], graph: Graph) -> tuple[Node, list[store.Triple]]:
    """
    Build the statements encoding an RDF list without touching the graph.

    Returns:
        (head node, statements to assert). An empty list is rdf:nil with
        no statements.
    """
    from rdf_dynamic.conversion import plan_node

    triples: list[store.Triple] = []
    nodes = []
    for item in items:
        node, extra = plan_node(item, graph)
        nodes.append(node)
        triples.extend(extra)

    if not nodes:
        return RDF_NIL, triples

    head = BNode()
    cell: Node = head
    for i, node in enumerate(nodes):
        following = BNode() if i < len(nodes) - 1 else RDF_NIL
        triples.append((cell, RDF_FIRST, node))
        triples.append((cell, RDF_REST, following))
        cell = following
    return head, triples


class RdfListView(NodeHandle, Sequence):
    """
    Live, read-only view over an RDF list in a graph.

    Every access walks the list again, so changes to the graph show up
    immediately. Items are converted to native values like collection
    members are.
    """

    def __init__(self, head: Node, graph: Graph, base: Optional[str] = None):
        if head is None:
            raise ValueError("head must not be None")
        if graph is None:
            raise ValueError("graph must not be None")
        self._node = head
        self._graph = graph
        self._base = base

    @property
    def base(self) -> Optional[str]:
        return self._base

    def item_nodes(self) -> Iterator[Node]:
        """Yield the raw item nodes in list order."""
        cell = self._node
        seen = set()
        while cell != RDF_NIL:
            if cell in seen:
                raise MalformedListError(f"RDF list starting at {self._node} is cyclic")
            seen.add(cell)
            first = next(store.find(self._graph, cell, RDF_FIRST), None)
            if first is None:
                raise MalformedListError(f"List cell {cell} has no rdf:first")
            yield first[2]
            rest = next(store.find(self._graph, cell, RDF_REST), None)
            if rest is None:
                raise MalformedListError(f"List cell {cell} has no rdf:rest")
            cell = rest[2]

    def nodes(self) -> list[Node]:
        return list(self.item_nodes())

    def __iter__(self) -> Iterator[Any]:
        from rdf_dynamic.conversion import to_value

        for node in self.item_nodes():
            yield to_value(node, self._graph, self._base)

    def __len__(self) -> int:
        return sum(1 for _ in self.item_nodes())

    def __getitem__(self, index):
        if isinstance(index, slice):
            return list(self)[index]
        from rdf_dynamic.conversion import to_value

        return to_value(self.nodes()[index], self._graph, self._base)

    def __eq__(self, other) -> bool:
        if isinstance(other, (RdfListView, RdfCollection, list, tuple)):
            return list(self) == list(other)
        return NotImplemented

    __hash__ = None

    def __repr__(self) -> str:
        return f"RdfListView({self._node!r})"
