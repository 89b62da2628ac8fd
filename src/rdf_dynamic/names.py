"""
Short names, base IRIs and display names.

A short name is what callers type as a dictionary key: a prefixed name
("ex:alice"), a name relative to the configured base ("alice"), or an
absolute IRI. Display names are the reverse projection used when a view
enumerates its keys.

Base IRI rules:
- a base ending in '#' takes the name as its fragment
- a hierarchical base (http, https, file, ...) resolves per RFC 3986
- an opaque base (urn:, tag:, ...) replaces everything after its last
  '/' or ':'
"""

import re
from typing import Optional
from urllib.parse import urldefrag, urljoin, urlsplit, uses_relative

from rdflib import BNode, Graph, Literal, URIRef
from rdflib.term import Node

from rdf_dynamic.errors import (
    BaseIriRequiredError,
    DynamicGraphError,
    InvalidNameError,
)
from rdf_dynamic.terms import NodeHandle


_QNAME_RE = re.compile(r"^\w*:\w+$")
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")
# Characters never allowed unescaped in an IRI
_FORBIDDEN_RE = re.compile(r'[\x00-\x20<>"{}|\\^`\x7f]')


# =============================================================================
# Parsing
# =============================================================================

def expand_qname(name: str, graph: Graph) -> Optional[str]:
    """
    Expand a prefixed name using the graph's namespace bindings.

    Only names shaped like `prefix:local` are considered, and URNs are
    never treated as prefixed names. Returns None when the name is not a
    prefixed name or its prefix is unbound.
    """
    if name.startswith("urn:") or not _QNAME_RE.match(name):
        return None
    prefix, local = name.split(":", 1)
    namespace = graph.namespace_manager.store.namespace(prefix)
    if namespace is None:
        return None
    return str(namespace) + local


def is_absolute_iri(name: str) -> bool:
    """
    Check whether a string is an absolute IRI.

    Raises:
        InvalidNameError: If the string is not a well-formed IRI reference
    """
    if not name:
        raise InvalidNameError("Empty name")
    if _FORBIDDEN_RE.search(name):
        raise InvalidNameError(f"Illegal character in IRI: {name!r}")
    try:
        parts = urlsplit(name)
        parts.port  # validates the authority
    except ValueError as e:
        raise InvalidNameError(f"Illegal IRI: {name!r} ({e})") from e

    if not parts.scheme or not _SCHEME_RE.match(parts.scheme):
        return False
    if "://" in name and not parts.netloc and parts.scheme != "file":
        raise InvalidNameError(f"Illegal IRI, empty authority: {name!r}")
    return True


def join_base(base: str, reference: str) -> str:
    """Combine a relative reference with a base IRI."""
    if base.endswith("#"):
        return urldefrag(base)[0] + "#" + reference
    scheme = urlsplit(base).scheme
    if scheme in uses_relative:
        return urljoin(base, reference)
    return _base_stem(base) + reference


def _base_stem(base: str) -> str:
    """The part of a base IRI a relative name is appended to."""
    if base.endswith("#"):
        return base
    if urlsplit(base).scheme in uses_relative:
        return base[: base.rfind("/") + 1] if "/" in base else base
    cut = max(base.rfind("/"), base.rfind(":"))
    return base[: cut + 1]


def resolve_name(name: str, graph: Graph, base: Optional[str]) -> str:
    """
    Resolve a short name to an absolute IRI.

    Args:
        name: Prefixed name, relative name or absolute IRI
        graph: Graph whose namespace bindings expand prefixed names
        base: Base IRI for relative names (may be None)

    Returns:
        The absolute IRI

    Raises:
        InvalidNameError: If the name is not a well-formed IRI reference
        BaseIriRequiredError: If the name is relative and no base is set
    """
    expanded = expand_qname(name, graph)
    if expanded is not None:
        return expanded
    if is_absolute_iri(name):
        return name
    if base is None:
        raise BaseIriRequiredError(f"Can't use relative name {name!r} without a base IRI")
    return join_base(base, name)


def resolve_key(key: object, graph: Graph, base: Optional[str]) -> Node:
    """
    Turn a dictionary key into a graph node.

    Node handles yield their node, IRIs and blank nodes are used as they
    are, strings go through resolve_name().
    """
    if key is None:
        raise ValueError("Key must not be None")
    if isinstance(key, tuple):
        raise ValueError(f"Exactly one index expected, got {len(key)}")
    if isinstance(key, NodeHandle):
        return key.node
    if isinstance(key, Literal):
        raise ValueError(f"A literal cannot be used as a key: {key!r}")
    if isinstance(key, (URIRef, BNode)):
        return key
    if isinstance(key, str):
        return URIRef(resolve_name(key, graph, base))
    raise TypeError(f"Unsupported key type: {type(key).__name__}")


# =============================================================================
# Display Names
# =============================================================================

def reduce_qname(iri: str, graph: Graph) -> Optional[str]:
    """Reduce an IRI to `prefix:local` using the longest bound namespace."""
    best = None
    for prefix, namespace in graph.namespaces():
        namespace = str(namespace)
        if not namespace or not iri.startswith(namespace):
            continue
        local = iri[len(namespace):]
        if not re.fullmatch(r"\w+", local):
            continue
        if best is None or len(namespace) > len(best[1]):
            best = (prefix, namespace, local)
    if best is None:
        return None
    return f"{best[0]}:{best[2]}"


def _round_trips(name: str, iri: str, graph: Graph, base: Optional[str]) -> bool:
    try:
        return resolve_name(name, graph, base) == iri
    except DynamicGraphError:
        return False


def display_name(node: Node, graph: Graph, base: Optional[str]) -> str:
    """
    Project a node to the short name used as a dictionary key.

    Prefers the prefixed form, then the name relative to the base, then
    the absolute IRI. A short form is only used when resolving it gives
    the IRI back.
    """
    if not isinstance(node, URIRef):
        return str(node)
    iri = str(node)

    qname = reduce_qname(iri, graph)
    if qname is not None and _round_trips(qname, iri, graph, base):
        return qname

    if base is not None:
        stem = _base_stem(base)
        if iri.startswith(stem) and len(iri) > len(stem):
            relative = iri[len(stem):]
            if _round_trips(relative, iri, graph, base):
                return relative

    return iri
