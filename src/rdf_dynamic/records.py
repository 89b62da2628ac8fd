"""
Predicate bags from records.

Assigning a record to a node or subject key writes one predicate per field.
Types opt in explicitly instead of being inspected by reflection:

- any Mapping
- pydantic models (declared fields, values taken as they are)
- dataclass instances
- NamedTuple instances
- objects implementing SupportsPredicateBag
- DynamicNode (copies another node's predicates)
"""

import dataclasses
from collections.abc import Mapping
from typing import Any, Optional, Protocol, runtime_checkable

from pydantic import BaseModel

from rdf_dynamic.errors import UnsupportedValueError


@runtime_checkable
class SupportsPredicateBag(Protocol):
    """Opt-in protocol for objects that know their own predicate bag."""

    def predicate_bag(self) -> Mapping[Any, Any]:
        ...


def as_predicate_bag(value: Any) -> Optional[Mapping[Any, Any]]:
    """
    Get the predicate bag of a record.

    Returns:
        A mapping of predicate key -> value, or None if the value is not a
        record

    Raises:
        UnsupportedValueError: If the record has no fields
    """
    from rdf_dynamic.views.node import DynamicNode

    if isinstance(value, DynamicNode):
        bag = {predicate: value.objects(predicate) for predicate in value.predicates()}
    elif isinstance(value, Mapping):
        return value
    elif isinstance(value, BaseModel):
        bag = {name: getattr(value, name) for name in type(value).model_fields}
    elif dataclasses.is_dataclass(value) and not isinstance(value, type):
        bag = {field.name: getattr(value, field.name) for field in dataclasses.fields(value)}
    elif isinstance(value, tuple) and hasattr(value, "_asdict"):
        bag = dict(value._asdict())
    elif isinstance(value, SupportsPredicateBag):
        bag = dict(value.predicate_bag())
    else:
        return None

    if not bag and not isinstance(value, DynamicNode):
        raise UnsupportedValueError(
            f"Value type {type(value).__name__} lacks fields to use as predicates"
        )
    return bag


def is_record(value: Any) -> bool:
    """Check if a value would be expanded as a predicate bag."""
    from rdf_dynamic.views.node import DynamicNode

    return isinstance(value, (DynamicNode, Mapping, BaseModel)) or (
        dataclasses.is_dataclass(value) and not isinstance(value, type)
    ) or (
        isinstance(value, tuple) and hasattr(value, "_asdict")
    ) or isinstance(value, SupportsPredicateBag)
