"""
Object collection: live set view of the objects of (subject, predicate, *).
"""

import logging
from collections.abc import MutableSet
from typing import TYPE_CHECKING, Any, Iterator, Optional

from rdflib import Graph
from rdflib.term import Node

from rdf_dynamic import store
from rdf_dynamic.conversion import lookup_node, plan_node, to_value
from rdf_dynamic.names import resolve_key

if TYPE_CHECKING:
    from rdf_dynamic.views.node import DynamicNode

logger = logging.getLogger(__name__)


class ObjectCollection(MutableSet):
    """
    Set of the objects a subject has for one predicate.

    The collection holds no state besides its anchor: every operation reads
    or writes the graph directly, so two collections over the same pair
    always agree. Members come back as native values (see conversion).

    Example:
        names = node.objects("foaf:name")
        names.add("Alice")
        "Alice" in names  # True
    """

    def __init__(
        self,
        subject: "DynamicNode",
        predicate: Any,
        item_type: Optional[type] = None,
    ):
        """
        Args:
            subject: Node handle whose objects are viewed
            predicate: Predicate node, node handle or short name
            item_type: DynamicNode subclass to wrap resource members in
        """
        if subject is None:
            raise ValueError("subject must not be None")
        if predicate is None:
            raise ValueError("predicate must not be None")
        self._subject = subject
        self._predicate = resolve_key(predicate, subject.graph, subject.base)
        self._item_type = item_type

    # =========================================================================
    # Anchor
    # =========================================================================

    @property
    def subject(self) -> "DynamicNode":
        return self._subject

    @property
    def predicate(self) -> Node:
        return self._predicate

    @property
    def graph(self) -> Graph:
        return self._subject.graph

    @property
    def item_type(self) -> Optional[type]:
        return self._item_type

    def nodes(self) -> list[Node]:
        """The raw object nodes, unconverted."""
        return [
            o for _, _, o in store.find(self.graph, self._subject.node, self._predicate)
        ]

    # =========================================================================
    # Set Protocol
    # =========================================================================

    def __iter__(self) -> Iterator[Any]:
        for node in self.nodes():
            yield to_value(
                node,
                self.graph,
                self._subject.base,
                item_type=self._item_type,
                collapse_singular=self._subject.collapse_singular,
            )

    def __len__(self) -> int:
        return store.count(self.graph, self._subject.node, self._predicate)

    def __contains__(self, value: Any) -> bool:
        node = lookup_node(value, self.graph)
        if node is None:
            return False
        return store.exists(self.graph, self._subject.node, self._predicate, node)

    def add(self, value: Any) -> None:
        """
        Assert (subject, predicate, value).

        Raises:
            ValueError: If value is None
            UnsupportedValueError: If the value can't be converted to a node
        """
        node, extra = plan_node(value, self.graph)
        store.assert_statements(
            self.graph, extra + [(self._subject.node, self._predicate, node)]
        )

    def discard(self, value: Any) -> bool:
        """
        Retract (subject, predicate, value) if present.

        Returns:
            True if a statement was removed
        """
        node = lookup_node(value, self.graph)
        if node is None:
            return False
        return store.retract_statements(
            self.graph, [(self._subject.node, self._predicate, node)]
        )

    def clear(self) -> None:
        removed = store.retract_matching(self.graph, self._subject.node, self._predicate)
        logger.debug(f"Cleared {removed} objects of {self._subject.node} {self._predicate}")

    @classmethod
    def _from_iterable(cls, it):
        # Set operators produce detached Python sets
        return set(it)

    def __repr__(self) -> str:
        return f"ObjectCollection({self._subject.node!r}, {self._predicate!r})"
