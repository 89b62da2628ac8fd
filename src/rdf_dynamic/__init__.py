"""
rdf-dynamic: dictionary-style access to RDF graphs.

Wraps an rdflib Graph so subjects read like dictionaries of predicates,
predicates like sets of native Python values, and RDF lists like sequences.

Thread-safety: the views add no locking. Concurrent access is the
responsibility of the underlying rdflib store.
"""

__version__ = "0.1.0"

from rdf_dynamic.views import (
    DynamicGraph,
    DynamicNode,
    ObjectCollection,
    SubjectCollection,
)
from rdf_dynamic.rdf_list import RdfCollection, RdfListView
from rdf_dynamic.records import SupportsPredicateBag
from rdf_dynamic.config import DynamicConfig
from rdf_dynamic.conversion import to_node, to_value
from rdf_dynamic.names import display_name, resolve_name
from rdf_dynamic.terms import Datatype, TermKind
from rdf_dynamic.errors import (
    DynamicGraphError,
    InvalidNameError,
    BaseIriRequiredError,
    UnsupportedValueError,
    LiteralDecodeError,
    MalformedListError,
    ConfigValidationError,
)

__all__ = [
    "DynamicGraph",
    "DynamicNode",
    "ObjectCollection",
    "SubjectCollection",
    "RdfCollection",
    "RdfListView",
    "SupportsPredicateBag",
    "DynamicConfig",
    "to_node",
    "to_value",
    "display_name",
    "resolve_name",
    "Datatype",
    "TermKind",
    # Errors
    "DynamicGraphError",
    "InvalidNameError",
    "BaseIriRequiredError",
    "UnsupportedValueError",
    "LiteralDecodeError",
    "MalformedListError",
    "ConfigValidationError",
    # Tabular projection (imports polars on first use)
    "statements_frame",
]


def __getattr__(name):
    if name == "statements_frame":
        from rdf_dynamic.frames import statements_frame
        return statements_frame
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
