"""
Base Entity Model

``DynamoEntity`` is the pydantic base class for decorated entities. It ties
the declaration markers to class creation and owns the conversion between
models and DynamoDB items.

## Key registration

Pydantic calls ``__pydantic_init_subclass__`` once the subclass is fully
built. ``DynamoEntity`` uses that hook to apply every ``PartitionKey`` /
``SortKey`` / ``IndexPartitionKey`` / ``IndexSortKey`` marker found in the
subclass annotations, so a duplicate marker fails on the class statement
itself, before ``@dynamo_table`` even runs.

## Item conversion

DynamoDB items are stored under the field aliases (``deleted_at`` is stored
as ``deletedAt``). Declared key names must match the stored attribute names.

- datetime → ISO string
- float → Decimal (boto3 rejects floats)
- None values are dropped
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ValidationError
from ..metadata.decorators import register_key_fields

logger = logging.getLogger(__name__)

SOFT_DELETE_FIELD = "deletedAt"


def to_dynamodb_value(obj: Any) -> Any:
    """Recursively convert Python values to DynamoDB-compatible types."""
    if isinstance(obj, dict):
        return {k: to_dynamodb_value(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [to_dynamodb_value(item) for item in obj]
    elif isinstance(obj, datetime):
        return obj.isoformat()
    elif isinstance(obj, bool):
        return obj
    elif isinstance(obj, float):
        return Decimal(str(obj))
    else:
        return obj


class DynamoEntity(BaseModel):
    """
    Base model for entities stored through DynamoRepository.

    Extra attributes found on stored items are kept, so items written by
    other code paths round-trip without loss.
    """

    deleted_at: Optional[str] = Field(
        default=None,
        alias=SOFT_DELETE_FIELD,
        description="Soft-delete timestamp; set by DynamoRepository.soft_delete"
    )

    model_config = ConfigDict(
        extra="allow",
        populate_by_name=True
    )

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        register_key_fields(cls)

    @property
    def is_deleted(self) -> bool:
        """Whether the entity carries a soft-delete timestamp."""
        return self.deleted_at is not None

    def to_dynamodb_item(self) -> Dict[str, Any]:
        """
        Convert the model to a DynamoDB-compatible item.

        Returns:
            Dictionary keyed by field alias, ready for put_item
        """
        dumped_item = self.model_dump(by_alias=True, exclude_none=True)
        return to_dynamodb_value(dumped_item)

    @classmethod
    def from_dynamodb_item(cls, item: Dict[str, Any]):
        """
        Create a model instance from a DynamoDB item.

        Args:
            item: Item as returned by the boto3 resource API

        Raises:
            ValidationError: If the item does not fit the model
        """
        try:
            return cls.model_validate(item)
        except PydanticValidationError as e:
            logger.error(f"Failed to convert DynamoDB item to {cls.__name__}: {e}")
            raise ValidationError(f"Failed to convert DynamoDB item to {cls.__name__}: {e}", original_error=e) from e
