from .base import DynamoRepository

__all__ = [
    "DynamoRepository",
]
