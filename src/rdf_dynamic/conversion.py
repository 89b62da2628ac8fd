"""
Conversion between graph nodes and native Python values.

Read direction (node -> value):
- IRI / blank node heading an RDF list  -> RdfListView
- other IRI / blank node                -> DynamicNode
- plain literal                         -> str
- literal with a recognized datatype    -> native value (see terms.Datatype)
- language-tagged literal, or a literal
  with an unrecognized datatype         -> the Literal itself

Write direction (value -> node):
- node handles and rdflib nodes         -> the node
- RdfCollection                         -> a new RDF list
- str                                   -> plain literal
- bool, int, Decimal, float, datetime,
  date, timedelta, bytes                -> typed literal
- expandable sequences                  -> rejected, callers assert one
                                           statement per element

The write side is planned: plan_node() returns the node together with any
statements it needs (RDF list cells) without touching the graph, so callers
can convert everything up front and mutate only once conversion succeeded.
"""

from collections.abc import Mapping
from types import GeneratorType
from typing import Any, Optional

from rdflib import Graph, Literal
from rdflib.term import Node

from rdf_dynamic import store
from rdf_dynamic.errors import UnsupportedValueError
from rdf_dynamic.literals import decode_lexical, encode_scalar
from rdf_dynamic.rdf_list import RdfCollection, RdfListView, is_list_head, plan_list
from rdf_dynamic.terms import Datatype, NodeHandle, is_resource


# Sequence types expanded into one statement per element. Strings, bytes,
# mappings and the RDF list types are single values.
EXPANDABLE_TYPES = (list, tuple, set, frozenset, range, GeneratorType)


# =============================================================================
# Read Direction
# =============================================================================

def to_value(
    node: Node,
    graph: Graph,
    base: Optional[str] = None,
    item_type: Optional[type] = None,
    collapse_singular: bool = False,
) -> Any:
    """
    Convert a graph node to a native value.

    Args:
        node: Node to convert
        graph: Graph the node lives in (needed for node handles and lists)
        base: Base IRI handed to the node handles created
        item_type: DynamicNode subclass to wrap IRIs and blank nodes in
        collapse_singular: Passed on to the node handles created

    Raises:
        LiteralDecodeError: If a recognized datatype has a malformed lexical form
    """
    if is_resource(node):
        if is_list_head(node, graph):
            return RdfListView(node, graph, base)
        if item_type is None:
            from rdf_dynamic.views.node import DynamicNode
            item_type = DynamicNode
        return item_type(node, graph, base, collapse_singular=collapse_singular)

    if isinstance(node, Literal):
        if node.language:
            return node
        if node.datatype is None:
            return str(node)
        datatype = Datatype.from_iri(node.datatype)
        if datatype is None:
            return node
        return decode_lexical(str(node), datatype)

    raise UnsupportedValueError(f"Can't convert node type {type(node).__name__}")


# =============================================================================
# Write Direction
# =============================================================================

def is_expandable(value: Any) -> bool:
    """Check if a value is a sequence asserted one statement per element."""
    from rdf_dynamic.views.objects import ObjectCollection
    from rdf_dynamic.views.subjects import SubjectCollection

    if isinstance(value, (str, bytes, bytearray, Mapping, RdfCollection, RdfListView)):
        return False
    return isinstance(value, EXPANDABLE_TYPES + (ObjectCollection, SubjectCollection))


def plan_node(value: Any, graph: Graph) -> tuple[Node, list[store.Triple]]:
    """
    Convert a native value to a node without modifying the graph.

    Returns:
        (node, statements the node depends on)

    Raises:
        ValueError: If value is None
        UnsupportedValueError: If the value's type has no node mapping
    """
    if value is None:
        raise ValueError("Can't convert None to a node")

    if isinstance(value, RdfListView):
        if value.graph is graph:
            return value.node, []
        return plan_list(list(value), graph)
    if isinstance(value, NodeHandle):
        return store.copy_node(value.node, graph), []
    if isinstance(value, Node):
        return store.copy_node(value, graph), []
    if isinstance(value, RdfCollection):
        return plan_list(value, graph)
    if isinstance(value, str):
        return Literal(value), []

    encoded = encode_scalar(value)
    if encoded is not None:
        lexical, datatype = encoded
        return Literal(lexical, datatype=datatype.iri), []

    if is_expandable(value):
        raise UnsupportedValueError(
            f"Can't convert {type(value).__name__} to a single node, "
            f"assert one statement per element or wrap it in RdfCollection"
        )
    raise UnsupportedValueError(f"Can't convert type {type(value).__name__}")


def plan_values(value: Any, graph: Graph) -> tuple[list[Node], list[store.Triple]]:
    """
    Convert a value, or each element of an expandable sequence, to nodes.

    Returns:
        (object nodes, statements they depend on)
    """
    items = list(value) if is_expandable(value) else [value]
    nodes = []
    triples: list[store.Triple] = []
    for item in items:
        node, extra = plan_node(item, graph)
        nodes.append(node)
        triples.extend(extra)
    return nodes, triples


def to_node(value: Any, graph: Graph) -> Node:
    """Convert a native value to a node, asserting any statements it needs."""
    node, extra = plan_node(value, graph)
    if extra:
        store.assert_statements(graph, extra)
    return node


def lookup_node(value: Any, graph: Graph) -> Optional[Node]:
    """
    Convert a value for a membership test.

    Returns None when the value can't be a node, so the caller reports it
    as not contained. RDF list values are never asserted here.
    """
    if value is None or is_expandable(value):
        return None
    try:
        node, _ = plan_node(value, graph)
    except UnsupportedValueError:
        return None
    return node
