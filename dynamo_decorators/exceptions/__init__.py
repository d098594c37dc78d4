# Base exception class
from .base import DynamoDecoratorsError

from .domain_exceptions import (
    ConnectionError,
    DecoratorMissingError,
    DuplicateDeclarationError,
    InvalidConfigurationError,
    InvalidParametersError,
    ItemNotFoundError,
    ValidationError,
)

__all__ = [
    # Base exception
    "DynamoDecoratorsError",

    # Domain exceptions (alphabetically ordered)
    "ConnectionError",
    "DecoratorMissingError",
    "DuplicateDeclarationError",
    "InvalidConfigurationError",
    "InvalidParametersError",
    "ItemNotFoundError",
    "ValidationError",
]
