"""
Entity Metadata Registry

Process-wide store of the structural facts declared on entity classes:
table name, partition key, sort key and per-index partition/sort keys.

Declaration and resolution are separate:

- ``declare_*`` functions run once, at class-definition time, and validate
  their input (empty names, duplicate declarations).
- ``resolve_*`` functions run on every repository call and never raise for
  "not declared"; they return ``None`` and leave the policy to the caller.

Resolution accepts either a class or an instance and walks the class MRO, so
a subclass of a declared entity resolves to its parent's metadata unless it
declares its own. Duplicate checks only look at the exact class being
declared.

The registry is written during class definition and only read afterwards,
so it carries no locking.
"""

import copy
import logging
import weakref
from typing import Any, Dict, Iterator, Optional, Type

from ..exceptions import DuplicateDeclarationError, InvalidConfigurationError

logger = logging.getLogger(__name__)


class EntityMetadata:
    """Structural metadata declared on a single entity class."""

    def __init__(self):
        self.table_name: Optional[str] = None
        self.partition_key: Optional[str] = None
        self.sort_key: Optional[str] = None
        self.index_partition_keys: Dict[str, str] = {}
        self.index_sort_keys: Dict[str, str] = {}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EntityMetadata):
            return NotImplemented
        return vars(self) == vars(other)

    def __repr__(self) -> str:
        return (
            f"EntityMetadata(table_name={self.table_name!r}, partition_key={self.partition_key!r}, "
            f"sort_key={self.sort_key!r}, index_partition_keys={self.index_partition_keys!r}, "
            f"index_sort_keys={self.index_sort_keys!r})"
        )


def _entity_class(target: Any) -> type:
    """Normalize a class-or-instance target to its class."""
    return target if isinstance(target, type) else type(target)


def _validate_non_empty(value: str, parameter: str) -> None:
    if not isinstance(value, str) or value.strip() == "":
        raise InvalidConfigurationError(f"Invalid {parameter}: cannot be an empty string.", parameter)


class MetadataRegistry:
    """Registry of EntityMetadata keyed by entity class identity."""

    def __init__(self):
        self._entries: "weakref.WeakKeyDictionary[type, EntityMetadata]" = weakref.WeakKeyDictionary()

    def _own(self, cls: type) -> EntityMetadata:
        entry = self._entries.get(cls)
        if entry is None:
            entry = EntityMetadata()
            self._entries[cls] = entry
        return entry

    def _lineage(self, target: Any) -> Iterator[EntityMetadata]:
        for klass in _entity_class(target).__mro__:
            entry = self._entries.get(klass)
            if entry is not None:
                yield entry

    # ------------------------------------------------------------------
    # Declaration
    # ------------------------------------------------------------------

    def declare_table(self, cls: type, name: Optional[str] = None) -> str:
        """Declare the DynamoDB table name for ``cls``.

        Args:
            cls: Entity class
            name: Table name; defaults to the class name

        Returns:
            The declared table name

        Raises:
            InvalidConfigurationError: If ``name`` is empty or whitespace
            DuplicateDeclarationError: If ``cls`` already has a table name
        """
        if name is not None:
            _validate_non_empty(name, "tableName")
        table_name = name if name is not None else cls.__name__

        entry = self._own(cls)
        if entry.table_name is not None:
            raise DuplicateDeclarationError(cls.__name__, "@DynamoTable", entry.table_name, table_name)

        entry.table_name = table_name
        logger.debug(f"Declared table '{table_name}' for {cls.__name__}")
        return table_name

    def declare_partition_key(self, cls: type, prop: str, name: Optional[str] = None) -> str:
        """Declare the partition key field of ``cls``.

        Args:
            cls: Entity class
            prop: Name of the declaring property
            name: DynamoDB field name; defaults to ``prop``

        Returns:
            The declared field name
        """
        if name is not None:
            _validate_non_empty(name, "fieldName")
        field_name = name if name is not None else prop

        entry = self._own(cls)
        if entry.partition_key is not None:
            raise DuplicateDeclarationError(cls.__name__, "@PartitionKey", entry.partition_key, prop)

        entry.partition_key = field_name
        logger.debug(f"Declared partition key '{field_name}' for {cls.__name__}")
        return field_name

    def declare_sort_key(self, cls: type, prop: str, name: Optional[str] = None) -> str:
        """Declare the sort key field of ``cls``. Same rules as the partition key."""
        if name is not None:
            _validate_non_empty(name, "fieldName")
        field_name = name if name is not None else prop

        entry = self._own(cls)
        if entry.sort_key is not None:
            raise DuplicateDeclarationError(cls.__name__, "@SortKey", entry.sort_key, prop)

        entry.sort_key = field_name
        logger.debug(f"Declared sort key '{field_name}' for {cls.__name__}")
        return field_name

    def declare_index_partition_key(self, cls: type, prop: str, index_name: str, name: Optional[str] = None) -> str:
        """Declare the partition key field of index ``index_name`` on ``cls``.

        Raises:
            InvalidConfigurationError: If ``index_name`` or ``name`` is empty
            DuplicateDeclarationError: If the index already has a partition key
        """
        return self._declare_index_key(
            cls, prop, index_name, name, "@IndexPartitionKey", self._own(cls).index_partition_keys
        )

    def declare_index_sort_key(self, cls: type, prop: str, index_name: str, name: Optional[str] = None) -> str:
        """Declare the sort key field of index ``index_name`` on ``cls``."""
        return self._declare_index_key(
            cls, prop, index_name, name, "@IndexSortKey", self._own(cls).index_sort_keys
        )

    def _declare_index_key(
        self,
        cls: type,
        prop: str,
        index_name: str,
        name: Optional[str],
        declaration: str,
        keys: Dict[str, str]
    ) -> str:
        _validate_non_empty(index_name, "indexName")
        if name is not None:
            _validate_non_empty(name, "fieldName")
        field_name = name if name is not None else prop

        if index_name in keys:
            raise DuplicateDeclarationError(cls.__name__, declaration, keys[index_name], prop, index_name)

        keys[index_name] = field_name
        logger.debug(f"Declared {declaration} '{field_name}' on index '{index_name}' for {cls.__name__}")
        return field_name

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve_table_name(self, target: Any) -> Optional[str]:
        """Return the declared table name for a class or instance, or None."""
        return next((e.table_name for e in self._lineage(target) if e.table_name is not None), None)

    def resolve_partition_key(self, target: Any) -> Optional[str]:
        """Return the partition key field name for a class or instance, or None."""
        return next((e.partition_key for e in self._lineage(target) if e.partition_key is not None), None)

    def resolve_sort_key(self, target: Any) -> Optional[str]:
        """Return the sort key field name for a class or instance, or None."""
        return next((e.sort_key for e in self._lineage(target) if e.sort_key is not None), None)

    def resolve_index_partition_key(self, target: Any, index_name: str) -> Optional[str]:
        """Return the partition key field name of ``index_name``, or None.

        Raises:
            InvalidConfigurationError: If ``index_name`` is empty
        """
        _validate_non_empty(index_name, "indexName")
        return next(
            (e.index_partition_keys[index_name] for e in self._lineage(target) if index_name in e.index_partition_keys),
            None
        )

    def resolve_index_sort_key(self, target: Any, index_name: str) -> Optional[str]:
        """Return the sort key field name of ``index_name``, or None."""
        _validate_non_empty(index_name, "indexName")
        return next(
            (e.index_sort_keys[index_name] for e in self._lineage(target) if index_name in e.index_sort_keys),
            None
        )

    def describe(self, target: Any) -> EntityMetadata:
        """Return a merged copy of all metadata visible from ``target``."""
        merged = EntityMetadata()
        # Walk from the most generic class so subclasses override
        for entry in reversed(list(self._lineage(target))):
            if entry.table_name is not None:
                merged.table_name = entry.table_name
            if entry.partition_key is not None:
                merged.partition_key = entry.partition_key
            if entry.sort_key is not None:
                merged.sort_key = entry.sort_key
            merged.index_partition_keys.update(entry.index_partition_keys)
            merged.index_sort_keys.update(entry.index_sort_keys)
        return copy.deepcopy(merged)


default_registry = MetadataRegistry()


def declare_table(cls: Type[Any], name: Optional[str] = None) -> str:
    return default_registry.declare_table(cls, name)


def declare_partition_key(cls: Type[Any], prop: str, name: Optional[str] = None) -> str:
    return default_registry.declare_partition_key(cls, prop, name)


def declare_sort_key(cls: Type[Any], prop: str, name: Optional[str] = None) -> str:
    return default_registry.declare_sort_key(cls, prop, name)


def declare_index_partition_key(cls: Type[Any], prop: str, index_name: str, name: Optional[str] = None) -> str:
    return default_registry.declare_index_partition_key(cls, prop, index_name, name)


def declare_index_sort_key(cls: Type[Any], prop: str, index_name: str, name: Optional[str] = None) -> str:
    return default_registry.declare_index_sort_key(cls, prop, index_name, name)


def resolve_table_name(target: Any) -> Optional[str]:
    return default_registry.resolve_table_name(target)


def resolve_partition_key(target: Any) -> Optional[str]:
    return default_registry.resolve_partition_key(target)


def resolve_sort_key(target: Any) -> Optional[str]:
    return default_registry.resolve_sort_key(target)


def resolve_index_partition_key(target: Any, index_name: str) -> Optional[str]:
    return default_registry.resolve_index_partition_key(target, index_name)


def resolve_index_sort_key(target: Any, index_name: str) -> Optional[str]:
    return default_registry.resolve_index_sort_key(target, index_name)


def describe_entity(target: Any) -> EntityMetadata:
    return default_registry.describe(target)
