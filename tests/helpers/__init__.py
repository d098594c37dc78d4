"""
Test helpers for dynamo-decorators.

Decorated entity classes shared by unit and integration tests.
"""

from .entities import OrderEntity, UserEntity

__all__ = [
    'OrderEntity',
    'UserEntity',
]
