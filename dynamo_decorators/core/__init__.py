"""
Core infrastructure components for DynamoDB operations.

- DynamoClient: Thin, table-agnostic wrapper over the boto3 DynamoDB resource
- Expression builders for key conditions and conditional writes
"""

from .client import DynamoClient, create_client
from .expressions import (
    Expression,
    build_create_condition_expression,
    build_expression_attribute_names,
    build_key_condition_expression,
)

__all__ = [
    "DynamoClient",
    "create_client",
    "Expression",
    "build_create_condition_expression",
    "build_expression_attribute_names",
    "build_key_condition_expression",
]
