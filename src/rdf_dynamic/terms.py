"""
Term kinds and the closed datatype enumeration.

Every literal the views decode is classified by exactly one `Datatype` member.
Anything outside the enumeration is an unrecognized datatype and is passed
through as the literal itself, never coerced.
"""

from enum import Enum, IntEnum
from typing import Optional

from rdflib import BNode, Graph, Literal, URIRef
from rdflib.term import Node


# =============================================================================
# Term Kinds
# =============================================================================

class TermKind(IntEnum):
    """RDF term kind enumeration."""
    IRI = 0
    LITERAL = 1
    BNODE = 2


def get_term_kind(node: Node) -> TermKind:
    """Classify an rdflib node."""
    if isinstance(node, URIRef):
        return TermKind.IRI
    if isinstance(node, BNode):
        return TermKind.BNODE
    if isinstance(node, Literal):
        return TermKind.LITERAL
    raise TypeError(f"Unsupported node type: {type(node).__name__}")


def is_resource(node: object) -> bool:
    """Check if a node can stand in subject position (IRI or blank node)."""
    return isinstance(node, (URIRef, BNode))


class NodeHandle:
    """
    Mixin for views anchored on a single graph node.

    Subclasses set `_node` and `_graph`. Handles are accepted wherever a
    node is expected: as dictionary keys and as values to write.
    """
    _node: Node
    _graph: Graph

    @property
    def node(self) -> Node:
        """The wrapped graph node."""
        return self._node

    @property
    def graph(self) -> Graph:
        """The graph the handle reads from and writes to."""
        return self._graph


# =============================================================================
# Well-known IRIs
# =============================================================================

XSD_NS = "http://www.w3.org/2001/XMLSchema#"
RDF_NS = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"

RDF_FIRST = URIRef(RDF_NS + "first")
RDF_REST = URIRef(RDF_NS + "rest")
RDF_NIL = URIRef(RDF_NS + "nil")


class NativeType(Enum):
    """Native value families a recognized datatype decodes to."""
    BOOLEAN = "boolean"
    INTEGER = "integer"
    DECIMAL = "decimal"
    FLOAT = "float"
    DATETIME = "datetime"
    DATE = "date"
    DURATION = "duration"
    STRING = "string"
    BINARY = "binary"


class Datatype(Enum):
    """
    Supported XSD datatypes.

    Each member's value is the local name under the XSD namespace. The
    `native` property tells which native type family the lexical form
    decodes to.
    """
    BOOLEAN = "boolean"

    INTEGER = "integer"
    LONG = "long"
    INT = "int"
    SHORT = "short"
    BYTE = "byte"
    NON_NEGATIVE_INTEGER = "nonNegativeInteger"
    NON_POSITIVE_INTEGER = "nonPositiveInteger"
    POSITIVE_INTEGER = "positiveInteger"
    NEGATIVE_INTEGER = "negativeInteger"
    UNSIGNED_LONG = "unsignedLong"
    UNSIGNED_INT = "unsignedInt"
    UNSIGNED_SHORT = "unsignedShort"
    UNSIGNED_BYTE = "unsignedByte"

    DECIMAL = "decimal"
    DOUBLE = "double"
    FLOAT = "float"

    DATETIME = "dateTime"
    DATETIME_STAMP = "dateTimeStamp"
    DATE = "date"
    DURATION = "duration"
    DAYTIME_DURATION = "dayTimeDuration"

    STRING = "string"
    BASE64_BINARY = "base64Binary"
    HEX_BINARY = "hexBinary"

    @property
    def iri(self) -> URIRef:
        """Full datatype IRI."""
        return URIRef(XSD_NS + self.value)

    @property
    def native(self) -> NativeType:
        return _NATIVE_TYPES[self]

    @property
    def bounds(self) -> tuple[Optional[int], Optional[int]]:
        """Inclusive value range for the bounded integer types."""
        return _INTEGER_BOUNDS.get(self, (None, None))

    @classmethod
    def from_iri(cls, iri: Optional[str]) -> Optional["Datatype"]:
        """
        Look up a datatype by IRI.

        Returns None for a missing or unrecognized datatype.
        """
        if iri is None:
            return None
        return _BY_IRI.get(str(iri))


_NATIVE_TYPES = {
    Datatype.BOOLEAN: NativeType.BOOLEAN,
    Datatype.INTEGER: NativeType.INTEGER,
    Datatype.LONG: NativeType.INTEGER,
    Datatype.INT: NativeType.INTEGER,
    Datatype.SHORT: NativeType.INTEGER,
    Datatype.BYTE: NativeType.INTEGER,
    Datatype.NON_NEGATIVE_INTEGER: NativeType.INTEGER,
    Datatype.NON_POSITIVE_INTEGER: NativeType.INTEGER,
    Datatype.POSITIVE_INTEGER: NativeType.INTEGER,
    Datatype.NEGATIVE_INTEGER: NativeType.INTEGER,
    Datatype.UNSIGNED_LONG: NativeType.INTEGER,
    Datatype.UNSIGNED_INT: NativeType.INTEGER,
    Datatype.UNSIGNED_SHORT: NativeType.INTEGER,
    Datatype.UNSIGNED_BYTE: NativeType.INTEGER,
    Datatype.DECIMAL: NativeType.DECIMAL,
    Datatype.DOUBLE: NativeType.FLOAT,
    Datatype.FLOAT: NativeType.FLOAT,
    Datatype.DATETIME: NativeType.DATETIME,
    Datatype.DATETIME_STAMP: NativeType.DATETIME,
    Datatype.DATE: NativeType.DATE,
    Datatype.DURATION: NativeType.DURATION,
    Datatype.DAYTIME_DURATION: NativeType.DURATION,
    Datatype.STRING: NativeType.STRING,
    Datatype.BASE64_BINARY: NativeType.BINARY,
    Datatype.HEX_BINARY: NativeType.BINARY,
}

_INTEGER_BOUNDS = {
    Datatype.LONG: (-(2 ** 63), 2 ** 63 - 1),
    Datatype.INT: (-(2 ** 31), 2 ** 31 - 1),
    Datatype.SHORT: (-(2 ** 15), 2 ** 15 - 1),
    Datatype.BYTE: (-(2 ** 7), 2 ** 7 - 1),
    Datatype.NON_NEGATIVE_INTEGER: (0, None),
    Datatype.NON_POSITIVE_INTEGER: (None, 0),
    Datatype.POSITIVE_INTEGER: (1, None),
    Datatype.NEGATIVE_INTEGER: (None, -1),
    Datatype.UNSIGNED_LONG: (0, 2 ** 64 - 1),
    Datatype.UNSIGNED_INT: (0, 2 ** 32 - 1),
    Datatype.UNSIGNED_SHORT: (0, 2 ** 16 - 1),
    Datatype.UNSIGNED_BYTE: (0, 2 ** 8 - 1),
}

_BY_IRI = {XSD_NS + member.value: member for member in Datatype}
