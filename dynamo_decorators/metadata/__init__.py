"""
Entity metadata: declaration decorators and the registry they write to.
"""

from .decorators import (
    IndexPartitionKey,
    IndexSortKey,
    PartitionKey,
    SortKey,
    dynamo_table,
    register_key_fields,
)
from .registry import (
    EntityMetadata,
    MetadataRegistry,
    declare_index_partition_key,
    declare_index_sort_key,
    declare_partition_key,
    declare_sort_key,
    declare_table,
    describe_entity,
    default_registry,
    resolve_index_partition_key,
    resolve_index_sort_key,
    resolve_partition_key,
    resolve_sort_key,
    resolve_table_name,
)

__all__ = [
    "IndexPartitionKey",
    "IndexSortKey",
    "PartitionKey",
    "SortKey",
    "dynamo_table",
    "register_key_fields",
    "EntityMetadata",
    "MetadataRegistry",
    "declare_index_partition_key",
    "declare_index_sort_key",
    "declare_partition_key",
    "declare_sort_key",
    "declare_table",
    "describe_entity",
    "default_registry",
    "resolve_index_partition_key",
    "resolve_index_sort_key",
    "resolve_partition_key",
    "resolve_sort_key",
    "resolve_table_name",
]
