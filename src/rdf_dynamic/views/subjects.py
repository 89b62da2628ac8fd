"""
Subject collection: live set view of the subjects of (*, predicate, object).
"""

import logging
from collections.abc import MutableSet
from typing import Any, Iterator, Optional

from rdflib import Graph
from rdflib.term import Node

from rdf_dynamic import store
from rdf_dynamic.conversion import lookup_node, plan_node, to_value
from rdf_dynamic.errors import DynamicGraphError, UnsupportedValueError
from rdf_dynamic.names import resolve_key
from rdf_dynamic.terms import NodeHandle, is_resource

logger = logging.getLogger(__name__)


class SubjectCollection(MutableSet):
    """
    Set of the subjects having a given object for one predicate.

    The anchor object may be any node, literals included:

        people = SubjectCollection("foaf:name", Literal("Alice"), graph)

    Members are always node handles since subjects are IRIs or blank nodes.
    For the same reason strings passed to add(), discard() and `in` are
    read as short names, not as plain literals.
    """

    def __init__(
        self,
        predicate: Any,
        object: Any,
        graph: Optional[Graph] = None,
        base: Optional[str] = None,
        item_type: Optional[type] = None,
        collapse_singular: bool = False,
    ):
        """
        Args:
            predicate: Predicate node, node handle or short name
            object: Anchor object, a node handle, an rdflib node or a
                native value converted like an assigned value
            graph: Graph to read; defaults to the anchor handle's graph
            base: Base IRI for short names; defaults to the anchor handle's base
            item_type: DynamicNode subclass to wrap members in
            collapse_singular: Passed on to the member handles
        """
        if predicate is None:
            raise ValueError("predicate must not be None")
        if object is None:
            raise ValueError("object must not be None")

        if isinstance(object, NodeHandle):
            if graph is None:
                graph = object.graph
            if base is None:
                base = getattr(object, "base", None)
            collapse_singular = collapse_singular or getattr(object, "collapse_singular", False)
        if graph is None:
            raise ValueError("graph must not be None")

        node, extra = plan_node(object, graph)
        if extra:
            raise UnsupportedValueError("An RDF list can't anchor a subject collection")

        self._graph = graph
        self._base = base
        self._object = node
        self._predicate = resolve_key(predicate, graph, base)
        self._item_type = item_type
        self._collapse_singular = collapse_singular

    # =========================================================================
    # Anchor
    # =========================================================================

    @property
    def object(self) -> Node:
        return self._object

    @property
    def predicate(self) -> Node:
        return self._predicate

    @property
    def graph(self) -> Graph:
        return self._graph

    @property
    def base(self) -> Optional[str]:
        return self._base

    def nodes(self) -> list[Node]:
        """The raw subject nodes, unconverted."""
        return [
            s for s, _, _ in store.find(self._graph, None, self._predicate, self._object)
        ]

    # =========================================================================
    # Set Protocol
    # =========================================================================

    def __iter__(self) -> Iterator[Any]:
        for node in self.nodes():
            yield to_value(
                node,
                self._graph,
                self._base,
                item_type=self._item_type,
                collapse_singular=self._collapse_singular,
            )

    def __len__(self) -> int:
        return store.count(self._graph, None, self._predicate, self._object)

    def __contains__(self, value: Any) -> bool:
        node = self._lookup_subject(value)
        if node is None:
            return False
        return store.exists(self._graph, node, self._predicate, self._object)

    def add(self, value: Any) -> None:
        """
        Assert (value, predicate, object).

        Raises:
            ValueError: If value is None
            UnsupportedValueError: If the value is not an IRI or blank node
        """
        node = self._subject_node(value)
        store.assert_statements(self._graph, [(node, self._predicate, self._object)])

    def discard(self, value: Any) -> bool:
        """
        Retract (value, predicate, object) if present.

        Returns:
            True if a statement was removed
        """
        node = self._lookup_subject(value)
        if node is None:
            return False
        return store.retract_statements(
            self._graph, [(node, self._predicate, self._object)]
        )

    def clear(self) -> None:
        removed = store.retract_matching(self._graph, None, self._predicate, self._object)
        logger.debug(f"Cleared {removed} subjects of {self._predicate} {self._object}")

    def _subject_node(self, value: Any) -> Node:
        if value is None:
            raise ValueError("Can't use None as a subject")
        if isinstance(value, NodeHandle):
            node = value.node
        elif isinstance(value, str) and not isinstance(value, Node):
            node = resolve_key(value, self._graph, self._base)
        else:
            node, extra = plan_node(value, self._graph)
            if extra:
                raise UnsupportedValueError("An RDF list can't be a subject")
        if not is_resource(node):
            raise UnsupportedValueError(
                f"Only IRIs and blank nodes can be subjects, got {type(value).__name__}"
            )
        return node

    def _lookup_subject(self, value: Any) -> Optional[Node]:
        if value is None:
            return None
        if isinstance(value, str) and not isinstance(value, Node):
            try:
                return resolve_key(value, self._graph, self._base)
            except DynamicGraphError:
                return None
        node = lookup_node(value, self._graph)
        if node is None or not is_resource(node):
            return None
        return node

    @classmethod
    def _from_iterable(cls, it):
        return set(it)

    def __repr__(self) -> str:
        return f"SubjectCollection({self._predicate!r}, {self._object!r})"
