"""
Domain-Specific Exceptions for dynamo-decorators

Every failure the library raises on its own extends DynamoDecoratorsError.
Errors surfaced by DynamoDB itself (botocore ClientError and friends) are
never wrapped here; they reach the caller unchanged.

Organized by category:
1. Declaration Errors
2. Parameter and Data Errors
3. Resource Not Found Errors
4. Infrastructure Errors
"""

from typing import Any, Dict, Optional

from .base import DynamoDecoratorsError


# =============================================================================
# Declaration Errors
# =============================================================================

class InvalidConfigurationError(DynamoDecoratorsError):
    """Raised when declaration input is malformed.

    Used for:
    - Empty or whitespace-only table names
    - Empty or whitespace-only field names
    - Empty or whitespace-only index names (declaration and resolution)
    """

    def __init__(self, message: str, parameter: Optional[str] = None):
        self.parameter = parameter
        context = {}
        if parameter:
            context['parameter'] = parameter
        super().__init__(message, context=context)


class DuplicateDeclarationError(DynamoDecoratorsError):
    """Raised when a class declares the same structural fact twice.

    Used for:
    - A second table name on the same class
    - A second partition key or sort key on the same class
    - A second partition/sort key for the same index name
    """

    def __init__(self, entity_name: str, declaration: str, existing: str, conflicting: str, index_name: Optional[str] = None):
        """Initialize duplicate declaration error.

        Args:
            entity_name: Name of the class being declared
            declaration: Kind of declaration (e.g. '@PartitionKey')
            existing: Value already registered
            conflicting: Property or value that attempted to redeclare it
            index_name: Index the declaration is scoped to, if any
        """
        self.entity_name = entity_name
        self.declaration = declaration
        self.existing = existing
        self.conflicting = conflicting
        self.index_name = index_name
        scope = f' for index "{index_name}"' if index_name else ""
        message = (
            f'Multiple {declaration} declarations found{scope} in class "{entity_name}". '
            f'Existing: "{existing}", conflicting: "{conflicting}"'
        )
        super().__init__(message)


class DecoratorMissingError(DynamoDecoratorsError):
    """Raised when an operation needs metadata that was never declared.

    Used for:
    - Repositories over a class without @dynamo_table
    - Key operations on a class without a PartitionKey
    - Sort values supplied for a class (or index) without a sort key
    """

    def __init__(self, message: str, entity_name: Optional[str] = None):
        self.entity_name = entity_name
        context = {}
        if entity_name:
            context['entity'] = entity_name
        super().__init__(message, context=context)


# =============================================================================
# Parameter and Data Errors
# =============================================================================

class InvalidParametersError(DynamoDecoratorsError):
    """Raised when a required argument is missing or unusable.

    Used for:
    - create()/put() called with None
    - Query options that fail validation
    - BETWEEN queries without an upper bound
    """

    def __init__(self, message: str, errors: Optional[Any] = None):
        self.errors = errors
        context = {}
        if errors:
            context['errors'] = errors
        super().__init__(message, context=context)


class ValidationError(DynamoDecoratorsError):
    """Raised when a stored item cannot be loaded into its entity model."""

    def __init__(self, message: str, errors: Optional[Dict[str, Any]] = None, original_error: Optional[Exception] = None):
        self.errors = errors or {}
        context = {
            'validation_errors': self.errors
        }
        super().__init__(message, original_error, context)


# =============================================================================
# Resource Not Found Errors
# =============================================================================

class ItemNotFoundError(DynamoDecoratorsError):
    """Raised when a point read finds no item at the requested key."""

    def __init__(self, table_name: str, key: dict, original_error: Optional[Exception] = None):
        """Initialize item not found error.

        Args:
            table_name: Name of the DynamoDB table
            key: The key that was not found
            original_error: The original exception that caused this error
        """
        self.table_name = table_name
        self.key = key
        message = f"Item not found in table '{table_name}' with key: {key}"
        context = {
            'table_name': table_name,
            'key': key
        }
        super().__init__(message, original_error, context)


# =============================================================================
# Infrastructure Errors
# =============================================================================

class ConnectionError(DynamoDecoratorsError):
    """Raised when the boto3 session or DynamoDB resource cannot be created.

    Failures of individual store calls are not mapped to this class.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None, context: Optional[Dict[str, Any]] = None):
        super().__init__(message, original_error, context)
