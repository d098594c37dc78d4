"""
dynamo-decorators

Declare DynamoDB table and key metadata on plain Python classes and get a
generic repository (create, get, put, soft-delete, remove, query) that turns
typed calls into DynamoDB keys and expressions.
"""

from .config import DynamoDBConfig
from .exceptions import (
    ConnectionError,
    DecoratorMissingError,
    DuplicateDeclarationError,
    DynamoDecoratorsError,
    InvalidConfigurationError,
    InvalidParametersError,
    ItemNotFoundError,
    ValidationError,
)
from .metadata import (
    IndexPartitionKey,
    IndexSortKey,
    PartitionKey,
    SortKey,
    declare_index_partition_key,
    declare_index_sort_key,
    declare_partition_key,
    declare_sort_key,
    declare_table,
    describe_entity,
    dynamo_table,
    register_key_fields,
    resolve_index_partition_key,
    resolve_index_sort_key,
    resolve_partition_key,
    resolve_sort_key,
    resolve_table_name,
)
from .models import (
    DynamoEntity,
    DynamoKey,
    DynamoKeyMap,
    QueryOptions,
    QueryResult,
    SortComparator,
)
from .core import DynamoClient, create_client
from .repositories import DynamoRepository

__version__ = "1.0.0"
__all__ = [
    # Configuration
    "DynamoDBConfig",

    # Exceptions
    "ConnectionError",
    "DecoratorMissingError",
    "DuplicateDeclarationError",
    "DynamoDecoratorsError",
    "InvalidConfigurationError",
    "InvalidParametersError",
    "ItemNotFoundError",
    "ValidationError",

    # Declarations
    "dynamo_table",
    "PartitionKey",
    "SortKey",
    "IndexPartitionKey",
    "IndexSortKey",
    "register_key_fields",
    "declare_table",
    "declare_partition_key",
    "declare_sort_key",
    "declare_index_partition_key",
    "declare_index_sort_key",

    # Resolution
    "resolve_table_name",
    "resolve_partition_key",
    "resolve_sort_key",
    "resolve_index_partition_key",
    "resolve_index_sort_key",
    "describe_entity",

    # Models
    "DynamoEntity",
    "DynamoKey",
    "DynamoKeyMap",
    "QueryOptions",
    "QueryResult",
    "SortComparator",

    # Store access
    "DynamoClient",
    "create_client",
    "DynamoRepository",
]
