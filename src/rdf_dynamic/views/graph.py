"""
Graph dictionary: a graph viewed as subject -> node dictionary.

    people = DynamicGraph(graph, subject_base="http://example.org/people/")
    people["alice"] = {"foaf:name": "Alice", "foaf:age": 42}
    people["alice"]["foaf:name"]    # ObjectCollection {"Alice"}
    "alice" in people               # True
    del people["alice"]             # retracts every statement about alice

Only IRI subjects are keys. Blank-node subjects are reachable through
blank_nodes() or by wrapping them in a DynamicNode directly.
"""

import logging
from collections.abc import MutableMapping
from typing import TYPE_CHECKING, Any, Iterator, Optional

from rdflib import BNode, Graph, URIRef
from rdflib.term import Node

from rdf_dynamic import store
from rdf_dynamic.errors import UnsupportedValueError
from rdf_dynamic.names import display_name, resolve_key
from rdf_dynamic.records import as_predicate_bag
from rdf_dynamic.views.node import DynamicNode, graph_base

if TYPE_CHECKING:
    import polars as pl

    from rdf_dynamic.config import DynamicConfig

logger = logging.getLogger(__name__)

_MISSING = object()


class DynamicGraph(MutableMapping):
    """
    Mutable mapping view of a graph keyed by subject.

    Subject keys resolve against subject_base; the node dictionaries handed
    out resolve predicate keys against predicate_base, which defaults to
    subject_base.
    """

    def __init__(
        self,
        graph: Optional[Graph] = None,
        subject_base: Optional[str] = None,
        predicate_base: Optional[str] = None,
        collapse_singular: bool = False,
    ):
        """
        Args:
            graph: Graph to view; a new in-memory graph if not given
            subject_base: Base IRI for subject keys; defaults to the graph's base
            predicate_base: Base IRI for predicate keys; defaults to subject_base
            collapse_singular: Passed on to the node dictionaries
        """
        self._graph = graph if graph is not None else Graph()
        self._subject_base = (
            str(subject_base) if subject_base is not None else graph_base(self._graph)
        )
        self._predicate_base = (
            str(predicate_base) if predicate_base is not None else self._subject_base
        )
        self._collapse_singular = collapse_singular

    @classmethod
    def from_config(cls, config: "DynamicConfig", graph: Optional[Graph] = None) -> "DynamicGraph":
        """
        Build a graph dictionary from a DynamicConfig.

        The config's prefixes are bound on the graph first.
        """
        config.validate_or_raise()
        if graph is None:
            graph = Graph()
        config.apply_prefixes(graph)
        return cls(
            graph,
            subject_base=config.subject_base,
            predicate_base=config.predicate_base,
            collapse_singular=config.collapse_singular,
        )

    @property
    def graph(self) -> Graph:
        return self._graph

    @property
    def subject_base(self) -> Optional[str]:
        return self._subject_base

    @property
    def predicate_base(self) -> Optional[str]:
        return self._predicate_base

    @property
    def collapse_singular(self) -> bool:
        return self._collapse_singular

    def _subject(self, key: Any) -> Node:
        return resolve_key(key, self._graph, self._subject_base)

    def _node_view(self, node: Node) -> DynamicNode:
        return DynamicNode(
            node,
            self._graph,
            base=self._predicate_base,
            collapse_singular=self._collapse_singular,
        )

    # =========================================================================
    # Reading
    # =========================================================================

    def subject_nodes(self) -> list[URIRef]:
        """Distinct IRI subjects, in first-seen order."""
        return store.distinct(
            s for s, _, _ in store.find(self._graph) if isinstance(s, URIRef)
        )

    def blank_nodes(self) -> list[DynamicNode]:
        """Node dictionaries for the distinct blank-node subjects."""
        nodes = store.distinct(
            s for s, _, _ in store.find(self._graph) if isinstance(s, BNode)
        )
        return [self._node_view(node) for node in nodes]

    def __getitem__(self, key: Any) -> DynamicNode:
        node = self._subject(key)
        if isinstance(node, URIRef) and store.exists(self._graph, node):
            return self._node_view(node)
        raise KeyError(key)

    def __contains__(self, key: Any) -> bool:
        node = self._subject(key)
        return isinstance(node, URIRef) and store.exists(self._graph, node)

    def contains(self, key: Any, value: Any) -> bool:
        """Check whether a subject has every predicate/value of a record."""
        if key is None or value is None or key not in self:
            return False
        bag = as_predicate_bag(value)
        if bag is None:
            return False
        node = self[key]
        return all(node.contains(predicate, item) for predicate, item in bag.items())

    def __iter__(self) -> Iterator[str]:
        for node in self.subject_nodes():
            yield display_name(node, self._graph, self._subject_base)

    def __len__(self) -> int:
        return len(self.subject_nodes())

    # =========================================================================
    # Writing
    # =========================================================================

    def __setitem__(self, key: Any, value: Any) -> None:
        """
        Assign a record to a subject.

        Each field of the record replaces the objects of that predicate;
        predicates not in the record are left alone. None removes every
        statement about the subject.

        Raises:
            UnsupportedValueError: If the value is not a record
        """
        node = self._subject(key)
        if value is None:
            removed = store.retract_matching(self._graph, node)
            logger.debug(f"Removed subject {node} ({removed} statements)")
            return
        bag = as_predicate_bag(value)
        if bag is None:
            raise UnsupportedValueError(
                f"Value type {type(value).__name__} lacks fields to use as predicates"
            )
        self._node_view(node).update(bag)

    def add(self, key: Any, value: Any) -> None:
        """
        Add a subject that does not exist yet.

        Raises:
            ValueError: If value is None or the subject already exists
        """
        if value is None:
            raise ValueError("Can't add None")
        if key in self:
            raise ValueError(f"An item with the same key has already been added: {key}")
        self[key] = value

    def __delitem__(self, key: Any) -> None:
        if not self.remove(key):
            raise KeyError(key)

    def remove(self, key: Any, value: Any = _MISSING) -> bool:
        """
        Remove a subject, or only the predicate/values of a record.

        Returns:
            True if any statement was removed
        """
        node = self._subject(key)
        if value is _MISSING:
            return store.retract_matching(self._graph, node) > 0
        if not self.contains(key, value):
            return False
        view = self._node_view(node)
        removed = False
        for predicate, item in as_predicate_bag(value).items():
            removed = view.remove(predicate, item) or removed
        return removed

    def pop(self, key: Any, default: Any = _MISSING) -> Any:
        """
        Remove a subject and return its statements as {name: values}.

        Raises:
            KeyError: If the subject is absent and no default was given
        """
        if key not in self:
            if default is _MISSING:
                raise KeyError(key)
            return default
        node = self._subject(key)
        record = self._node_view(node).snapshot()
        store.retract_matching(self._graph, node)
        return record

    def popitem(self) -> tuple[str, dict[str, Any]]:
        """
        Remove the first IRI subject and return (name, {name: values}).

        Raises:
            KeyError: If the graph has no IRI subjects
        """
        nodes = self.subject_nodes()
        if not nodes:
            raise KeyError("popitem(): graph has no IRI subjects")
        node = nodes[0]
        name = display_name(node, self._graph, self._subject_base)
        record = self._node_view(node).snapshot()
        store.retract_matching(self._graph, node)
        return name, record

    def clear(self) -> None:
        """Remove every statement about an IRI subject."""
        for node in self.subject_nodes():
            store.retract_matching(self._graph, node)

    def to_frame(self) -> "pl.DataFrame":
        """Statements of the graph as a polars DataFrame."""
        from rdf_dynamic.frames import graph_frame

        return graph_frame(self)

    def __repr__(self) -> str:
        return (
            f"DynamicGraph({len(self._graph)} statements, "
            f"subject_base={self._subject_base!r})"
        )
