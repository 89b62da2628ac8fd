"""
Node dictionary: a graph node viewed as predicate -> objects.

    alice = DynamicNode(URIRef("http://example.org/alice"), graph)
    alice["foaf:name"] = "Alice"           # replaces every foaf:name
    alice["foaf:knows"] = [bob, carol]     # one statement per element
    alice["foaf:name"]                     # ObjectCollection {"Alice"}
    del alice["foaf:knows"]

Keys are short names resolved against the node's base IRI (see names).
Iterating yields the display names of the predicates the node has.
"""

import logging
from collections.abc import MutableMapping
from typing import TYPE_CHECKING, Any, Iterable, Iterator, Optional

from rdflib import Graph
from rdflib.term import Node

from rdf_dynamic import store
from rdf_dynamic.conversion import is_expandable, lookup_node, plan_values, to_value
from rdf_dynamic.names import display_name, resolve_key
from rdf_dynamic.records import as_predicate_bag, is_record
from rdf_dynamic.terms import NodeHandle, is_resource
from rdf_dynamic.views.objects import ObjectCollection
from rdf_dynamic.views.subjects import SubjectCollection

if TYPE_CHECKING:
    import polars as pl

logger = logging.getLogger(__name__)

_MISSING = object()

# (predicate, object nodes, statements the objects depend on)
Assignment = tuple[Node, list[Node], list[store.Triple]]


def graph_base(graph: Graph) -> Optional[str]:
    """The base IRI configured on an rdflib graph, if any."""
    base = getattr(graph, "base", None)
    return str(base) if base else None


class DynamicNode(NodeHandle, MutableMapping):
    """
    Mutable mapping view of the statements having a node as subject.

    Reading a key returns a live ObjectCollection (empty when the node has
    no such predicate), so `node[key].add(value)` works for new predicates.
    With collapse_singular, a key with exactly one object returns that
    object as a native value instead.

    Assignments are converted completely before the graph is touched: a
    value that fails to convert leaves the graph unchanged.
    """

    def __init__(
        self,
        node: Any,
        graph: Optional[Graph] = None,
        base: Optional[str] = None,
        collapse_singular: bool = False,
    ):
        """
        Args:
            node: IRI or blank node, or another node handle
            graph: Graph to view; defaults to the handle's graph
            base: Base IRI for short names; defaults to the graph's base
            collapse_singular: Return single objects unwrapped
        """
        if node is None:
            raise ValueError("node must not be None")
        if isinstance(node, NodeHandle):
            if graph is None:
                graph = node.graph
            node = node.node
        if graph is None:
            raise ValueError("graph must not be None")
        if not is_resource(node):
            raise ValueError(f"Only IRIs and blank nodes can be viewed as a dictionary: {node!r}")

        self._node = node
        self._graph = graph
        self._base = str(base) if base is not None else graph_base(graph)
        self._collapse_singular = collapse_singular

    @property
    def base(self) -> Optional[str]:
        return self._base

    @property
    def collapse_singular(self) -> bool:
        return self._collapse_singular

    def _predicate(self, key: Any) -> Node:
        return resolve_key(key, self._graph, self._base)

    # =========================================================================
    # Reading
    # =========================================================================

    def predicates(self) -> list[Node]:
        """Distinct predicates of the node, in first-seen order."""
        return store.distinct(p for _, p, _ in store.find(self._graph, self._node))

    def objects(self, key: Any, item_type: Optional[type] = None) -> ObjectCollection:
        """Live collection of the node's objects for a predicate."""
        return ObjectCollection(self, self._predicate(key), item_type=item_type)

    def subjects(self, key: Any, item_type: Optional[type] = None) -> SubjectCollection:
        """Live collection of the subjects pointing at this node through a predicate."""
        return SubjectCollection(
            self._predicate(key),
            self,
            item_type=item_type,
            collapse_singular=self._collapse_singular,
        )

    def __getitem__(self, key: Any) -> Any:
        collection = self.objects(key)
        if self._collapse_singular:
            nodes = collection.nodes()
            if len(nodes) == 1:
                return to_value(
                    nodes[0], self._graph, self._base,
                    collapse_singular=self._collapse_singular,
                )
        return collection

    def get(self, key: Any, default: Any = None) -> Any:
        """Like node[key], but returns default when the predicate is absent."""
        if not store.exists(self._graph, self._node, self._predicate(key)):
            return default
        return self[key]

    def __contains__(self, key: Any) -> bool:
        return store.exists(self._graph, self._node, self._predicate(key))

    def contains(self, key: Any, value: Any) -> bool:
        """
        Check whether the node has a statement with every given value.

        A sequence value must be matched element-wise. None for either
        argument is never contained.
        """
        if key is None or value is None:
            return False
        predicate = self._predicate(key)
        items = list(value) if is_expandable(value) else [value]
        if not items:
            return False
        for item in items:
            node = lookup_node(item, self._graph)
            if node is None or not store.exists(self._graph, self._node, predicate, node):
                return False
        return True

    def __iter__(self) -> Iterator[str]:
        for predicate in self.predicates():
            yield display_name(predicate, self._graph, self._base)

    def __len__(self) -> int:
        return len(self.predicates())

    # =========================================================================
    # Writing
    # =========================================================================

    def _plan(self, key: Any, value: Any) -> list[Assignment]:
        predicate = self._predicate(key)
        if value is None:
            return [(predicate, [], [])]
        # A record assigned to a key spreads its fields over this node;
        # a node handle is a link to another node
        if not isinstance(value, NodeHandle):
            bag = as_predicate_bag(value)
            if bag is not None:
                return self._plan_entries(bag.items())
        nodes, triples = plan_values(value, self._graph)
        return [(predicate, nodes, triples)]

    def _plan_entries(self, entries: Iterable[tuple[Any, Any]]) -> list[Assignment]:
        plan: list[Assignment] = []
        for key, value in entries:
            plan.extend(self._plan(key, value))
        return plan

    def _apply(self, plan: list[Assignment]) -> None:
        for predicate, nodes, triples in plan:
            store.retract_matching(self._graph, self._node, predicate)
            store.assert_statements(
                self._graph,
                triples + [(self._node, predicate, node) for node in nodes],
            )
            logger.debug(f"Set {len(nodes)} objects for {self._node} {predicate}")

    def __setitem__(self, key: Any, value: Any) -> None:
        """
        Replace every object of a predicate.

        - None removes the predicate
        - a sequence asserts one statement per element
        - a record (mapping, dataclass, pydantic model, ...) assigns each of
          its fields as a predicate of this node
        - anything else asserts a single statement
        """
        self._apply(self._plan(key, value))

    def update(self, other: Any = (), /, **kwargs: Any) -> None:
        """
        Assign several predicates at once.

        Accepts a record or an iterable of (key, value) pairs, plus keyword
        arguments. The whole update is converted before the graph changes.
        """
        if is_record(other):
            entries = list(as_predicate_bag(other).items())
        else:
            entries = list(other)
        entries.extend(kwargs.items())
        self._apply(self._plan_entries(entries))

    def add(self, key: Any, value: Any) -> None:
        """
        Add a predicate the node does not have yet.

        Raises:
            ValueError: If value is None or the predicate already exists
        """
        if value is None:
            raise ValueError("Can't add None")
        predicate = self._predicate(key)
        if store.exists(self._graph, self._node, predicate):
            raise ValueError(f"An item with the same key has already been added: {key}")
        nodes, triples = plan_values(value, self._graph)
        self._apply([(predicate, nodes, triples)])

    def __delitem__(self, key: Any) -> None:
        if not self.remove(key):
            raise KeyError(key)

    def remove(self, key: Any, value: Any = _MISSING) -> bool:
        """
        Remove a predicate, or only the given values of it.

        Returns:
            True if any statement was removed
        """
        predicate = self._predicate(key)
        if value is _MISSING:
            return store.retract_matching(self._graph, self._node, predicate) > 0
        if value is None:
            return False
        items = list(value) if is_expandable(value) else [value]
        triples = []
        for item in items:
            node = lookup_node(item, self._graph)
            if node is not None:
                triples.append((self._node, predicate, node))
        return store.retract_statements(self._graph, triples)

    def pop(self, key: Any, default: Any = _MISSING) -> Any:
        """
        Remove a predicate and return its values.

        The values are read before the statements are retracted: a list, or
        the single native value when collapse_singular applies.

        Raises:
            KeyError: If the predicate is absent and no default was given
        """
        if key not in self:
            if default is _MISSING:
                raise KeyError(key)
            return default
        values = self._values(self._predicate(key))
        self.remove(key)
        return values

    def popitem(self) -> tuple[str, Any]:
        """
        Remove the first predicate and return (name, values).

        Raises:
            KeyError: If the node has no statements
        """
        predicates = self.predicates()
        if not predicates:
            raise KeyError(f"popitem(): {self._node} has no statements")
        predicate = predicates[0]
        name = display_name(predicate, self._graph, self._base)
        values = self._values(predicate)
        store.retract_matching(self._graph, self._node, predicate)
        return name, values

    def setdefault(self, key: Any, default: Any = None) -> Any:
        """Assign default when the predicate is absent, then return node[key]."""
        if default is not None and key not in self:
            self[key] = default
        return self[key]

    def clear(self) -> None:
        """Remove every statement with this node as subject."""
        store.retract_matching(self._graph, self._node)

    def _values(self, predicate: Node) -> Any:
        value = self[predicate]
        if isinstance(value, ObjectCollection):
            return list(value)
        return value

    def snapshot(self) -> dict[str, Any]:
        """Detached copy of the node as {name: values}, values read as by pop()."""
        return {
            display_name(predicate, self._graph, self._base): self._values(predicate)
            for predicate in self.predicates()
        }

    # =========================================================================
    # Identity
    # =========================================================================

    def __eq__(self, other: object) -> bool:
        if isinstance(other, NodeHandle):
            return self._node == other.node
        if isinstance(other, Node):
            return self._node == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._node)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._node!r})"

    def to_frame(self) -> "pl.DataFrame":
        """Statements of this node as a polars DataFrame."""
        from rdf_dynamic.frames import node_frame

        return node_frame(self)
