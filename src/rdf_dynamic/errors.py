"""
Exceptions raised by the dynamic views.

Each class also derives from the builtin exception callers would expect for
the condition, so `except ValueError` keeps working for format problems and
`except TypeError` for unconvertible values.
"""


class DynamicGraphError(Exception):
    """Base class for dynamic view errors."""
    pass


class InvalidNameError(DynamicGraphError, ValueError):
    """A short name is neither a bound prefix form nor a well-formed IRI."""
    pass


class BaseIriRequiredError(DynamicGraphError, RuntimeError):
    """A relative name was used where no base IRI is configured."""
    pass


class UnsupportedValueError(DynamicGraphError, TypeError):
    """A native value has no node mapping, or a record has no fields."""
    pass


class LiteralDecodeError(DynamicGraphError, ValueError):
    """The lexical form of a recognized datatype is malformed."""
    pass


class MalformedListError(DynamicGraphError, ValueError):
    """An RDF list is cyclic or lacks rdf:first on one of its cells."""
    pass


class ConfigValidationError(DynamicGraphError, ValueError):
    """Configuration validation error."""
    pass
