"""
Declaration Decorators

Python has no property decorators, so key fields are marked with
``typing.Annotated`` metadata and the table is declared with a class
decorator::

    @dynamo_table("User")
    class UserEntity(DynamoEntity):
        orgId: Annotated[str, PartitionKey()]
        id: Annotated[str, SortKey()] = "generate-id"
        email: Annotated[str, IndexSortKey("EmailIndex")]

Markers are applied through the metadata registry when the class is
registered, so duplicate or malformed declarations fail while the class
statement is executing. ``DynamoEntity`` subclasses are registered
automatically; plain classes and dataclasses are registered by
``@dynamo_table`` (or an explicit ``register_key_fields`` call).
"""

import inspect
import logging
import sys
import weakref
from typing import Annotated, Any, Callable, Optional, TypeVar, get_args, get_origin

from ..exceptions import InvalidConfigurationError
from . import registry as _registry

logger = logging.getLogger(__name__)

C = TypeVar('C', bound=type)

_registered: "weakref.WeakSet[type]" = weakref.WeakSet()


class KeyMarker:
    """Base class for Annotated key markers."""

    declaration = "@Key"

    def __init__(self, name: Optional[str] = None):
        self.name = name

    def apply(self, cls: type, prop: str) -> str:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


class PartitionKey(KeyMarker):
    """Marks a field as the table's partition (HASH) key.

    Args:
        name: DynamoDB field name. Defaults to the property name.
    """

    declaration = "@PartitionKey"

    def apply(self, cls: type, prop: str) -> str:
        return _registry.declare_partition_key(cls, prop, self.name)


class SortKey(KeyMarker):
    """Marks a field as the table's sort (RANGE) key.

    Args:
        name: DynamoDB field name. Defaults to the property name.
    """

    declaration = "@SortKey"

    def apply(self, cls: type, prop: str) -> str:
        return _registry.declare_sort_key(cls, prop, self.name)


class IndexKeyMarker(KeyMarker):
    """Base class for markers scoped to a secondary index."""

    def __init__(self, index_name: str, name: Optional[str] = None):
        super().__init__(name)
        self.index_name = index_name

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(index_name={self.index_name!r}, name={self.name!r})"


class IndexPartitionKey(IndexKeyMarker):
    """Marks a field as the partition key of a secondary index.

    Args:
        index_name: Name of the DynamoDB index
        name: DynamoDB field name. Defaults to the property name.
    """

    declaration = "@IndexPartitionKey"

    def apply(self, cls: type, prop: str) -> str:
        return _registry.declare_index_partition_key(cls, prop, self.index_name, self.name)


class IndexSortKey(IndexKeyMarker):
    """Marks a field as the sort key of a secondary index."""

    declaration = "@IndexSortKey"

    def apply(self, cls: type, prop: str) -> str:
        return _registry.declare_index_sort_key(cls, prop, self.index_name, self.name)


def _own_annotations(cls: type) -> dict:
    """The class's own annotations, with string hints that mention Annotated evaluated.

    Other string hints are left as they are, so forward references to names
    defined later in the module do not break registration.

    Raises:
        InvalidConfigurationError: If an Annotated string hint cannot be evaluated
    """
    annotations = dict(inspect.get_annotations(cls))
    module = sys.modules.get(cls.__module__)
    globalns = vars(module) if module else {}
    for prop, hint in annotations.items():
        if not isinstance(hint, str) or "Annotated" not in hint:
            continue
        try:
            annotations[prop] = eval(hint, globalns, dict(vars(cls)))
        except NameError as e:
            raise InvalidConfigurationError(
                f"Cannot resolve annotation of {cls.__name__}.{prop}: {e}", "annotation"
            ) from e
    return annotations


def register_key_fields(cls: C) -> C:
    """Apply every key marker found in the class's own annotations.

    Registration happens once per class; later calls are no-ops.

    Raises:
        DuplicateDeclarationError: If two markers declare the same key
        InvalidConfigurationError: If a marker has an empty name or index name,
            or an Annotated string hint cannot be evaluated
    """
    if cls in _registered:
        return cls
    _registered.add(cls)

    for prop, hint in _own_annotations(cls).items():
        if get_origin(hint) is not Annotated:
            continue
        for marker in get_args(hint)[1:]:
            if isinstance(marker, KeyMarker):
                marker.apply(cls, prop)
    return cls


def dynamo_table(table_name: Optional[str] = None) -> Callable[[C], C]:
    """Class decorator declaring the DynamoDB table an entity lives in.

    Args:
        table_name: Optional. Defaults to the class name.

    Example:
        >>> @dynamo_table("User")
        ... class UserEntity(DynamoEntity):
        ...     orgId: Annotated[str, PartitionKey()]
    """
    def decorator(cls: C) -> C:
        register_key_fields(cls)
        _registry.declare_table(cls, table_name)
        return cls
    return decorator
