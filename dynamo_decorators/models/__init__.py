from .base import SOFT_DELETE_FIELD, DynamoEntity, to_dynamodb_value
from .query import (
    DynamoKey,
    DynamoKeyMap,
    QueryOptions,
    QueryResult,
    SortComparator,
)

__all__ = [
    "SOFT_DELETE_FIELD",
    "DynamoEntity",
    "to_dynamodb_value",
    "DynamoKey",
    "DynamoKeyMap",
    "QueryOptions",
    "QueryResult",
    "SortComparator",
]
