"""
Statement access on the backing rdflib graph.

The views never hold statements themselves; every read goes through
find() and every write through assert_statements() / retract_statements(),
which report whether the graph content actually changed. Asserting an
existing statement or retracting a missing one is a no-op.

Thread-safety: NOT thread-safe. The rdflib store is solely responsible for
concurrent access; use external synchronization when sharing a graph
between threads.
"""

import logging
from typing import Iterable, Iterator, Optional

from rdflib import Graph
from rdflib.term import Node

logger = logging.getLogger(__name__)

Triple = tuple[Node, Node, Node]


def find(
    graph: Graph,
    subject: Optional[Node] = None,
    predicate: Optional[Node] = None,
    object: Optional[Node] = None,
) -> Iterator[Triple]:
    """Yield statements matching a pattern, None being a wildcard."""
    return graph.triples((subject, predicate, object))


def count(
    graph: Graph,
    subject: Optional[Node] = None,
    predicate: Optional[Node] = None,
    object: Optional[Node] = None,
) -> int:
    """Count statements matching a pattern."""
    return sum(1 for _ in graph.triples((subject, predicate, object)))


def exists(
    graph: Graph,
    subject: Optional[Node] = None,
    predicate: Optional[Node] = None,
    object: Optional[Node] = None,
) -> bool:
    """Check whether any statement matches a pattern."""
    for _ in graph.triples((subject, predicate, object)):
        return True
    return False


def assert_statements(graph: Graph, triples: Iterable[Triple]) -> bool:
    """
    Add statements to the graph.

    Returns:
        True if at least one statement was not already present
    """
    added = 0
    for triple in list(triples):
        if triple not in graph:
            graph.add(triple)
            added += 1
    if added:
        logger.debug(f"Asserted {added} statements")
    return added > 0


def retract_statements(graph: Graph, triples: Iterable[Triple]) -> bool:
    """
    Remove statements from the graph.

    The statements are materialized first so a generator over the same
    graph can be passed in.

    Returns:
        True if at least one statement was present
    """
    removed = 0
    for triple in list(triples):
        if triple in graph:
            graph.remove(triple)
            removed += 1
    if removed:
        logger.debug(f"Retracted {removed} statements")
    return removed > 0


def retract_matching(
    graph: Graph,
    subject: Optional[Node] = None,
    predicate: Optional[Node] = None,
    object: Optional[Node] = None,
) -> int:
    """Remove every statement matching a pattern, returning how many."""
    matches = list(graph.triples((subject, predicate, object)))
    for triple in matches:
        graph.remove(triple)
    if matches:
        logger.debug(
            f"Retracted {len(matches)} statements matching "
            f"({subject}, {predicate}, {object})"
        )
    return len(matches)


def copy_node(node: Node, graph: Graph) -> Node:
    """
    Copy a node into a graph.

    rdflib nodes are not bound to a graph, so the node itself is the copy;
    a blank node keeps its label and therefore its identity in the target.
    """
    return node


def distinct(nodes: Iterable[Node]) -> list[Node]:
    """Deduplicate nodes, keeping first-seen order."""
    return list(dict.fromkeys(nodes))
