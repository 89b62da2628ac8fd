"""
Tabular projection of statements as polars DataFrames.

Terms are rendered as strings: IRIs as-is, blank nodes as `_:label`,
literals by lexical form with the datatype and language in their own
columns.
"""

from typing import TYPE_CHECKING, Dict, List, Optional

import polars as pl
from rdflib import BNode, Graph, Literal
from rdflib.term import Node

from rdf_dynamic import store
from rdf_dynamic.names import display_name
from rdf_dynamic.terms import get_term_kind

if TYPE_CHECKING:
    from rdf_dynamic.views.graph import DynamicGraph
    from rdf_dynamic.views.node import DynamicNode


STATEMENT_SCHEMA = {
    "subject": pl.Utf8,
    "predicate": pl.Utf8,
    "object": pl.Utf8,
    "kind": pl.Utf8,
    "datatype": pl.Utf8,
    "lang": pl.Utf8,
}


def term_text(node: Node) -> str:
    """String form of a term used in frame cells."""
    if isinstance(node, BNode):
        return f"_:{node}"
    return str(node)


def _statement_rows(
    graph: Graph,
    subject: Optional[Node] = None,
    predicate: Optional[Node] = None,
    object: Optional[Node] = None,
) -> tuple[Dict[str, List[Optional[str]]], list[store.Triple]]:
    rows: Dict[str, List[Optional[str]]] = {column: [] for column in STATEMENT_SCHEMA}
    triples = list(store.find(graph, subject, predicate, object))
    for s, p, o in triples:
        rows["subject"].append(term_text(s))
        rows["predicate"].append(term_text(p))
        rows["object"].append(term_text(o))
        rows["kind"].append(get_term_kind(o).name.lower())
        if isinstance(o, Literal):
            rows["datatype"].append(str(o.datatype) if o.datatype else None)
            rows["lang"].append(o.language)
        else:
            rows["datatype"].append(None)
            rows["lang"].append(None)
    return rows, triples


def statements_frame(
    graph: Graph,
    subject: Optional[Node] = None,
    predicate: Optional[Node] = None,
    object: Optional[Node] = None,
) -> pl.DataFrame:
    """
    Get statements matching a pattern as a DataFrame.

    Args:
        graph: Graph to read
        subject, predicate, object: Pattern terms, None being a wildcard

    Returns:
        DataFrame with columns subject, predicate, object, kind, datatype
        and lang, one row per statement in store order
    """
    rows, _ = _statement_rows(graph, subject, predicate, object)
    return pl.DataFrame(rows, schema=STATEMENT_SCHEMA)


def node_frame(node: "DynamicNode") -> pl.DataFrame:
    """Statements of a node dictionary, with a `name` column of predicate display names."""
    rows, triples = _statement_rows(node.graph, node.node)
    names = [display_name(p, node.graph, node.base) for _, p, _ in triples]
    return pl.DataFrame(rows, schema=STATEMENT_SCHEMA).with_columns(
        pl.Series("name", names, dtype=pl.Utf8)
    )


def graph_frame(graph: "DynamicGraph") -> pl.DataFrame:
    """
    Statements of a graph dictionary.

    Adds `key` (subject display name, null for blank nodes) and `name`
    (predicate display name) columns.
    """
    rows, triples = _statement_rows(graph.graph)
    keys = [
        None if isinstance(s, BNode) else display_name(s, graph.graph, graph.subject_base)
        for s, _, _ in triples
    ]
    names = [display_name(p, graph.graph, graph.predicate_base) for _, p, _ in triples]
    return pl.DataFrame(rows, schema=STATEMENT_SCHEMA).with_columns(
        pl.Series("key", keys, dtype=pl.Utf8),
        pl.Series("name", names, dtype=pl.Utf8),
    )
