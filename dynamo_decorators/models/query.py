"""
Query Models

Validated inputs and outputs of DynamoRepository.query().
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

DynamoKey = Union[str, int, Decimal]
DynamoKeyMap = Dict[str, DynamoKey]


class SortComparator(str, Enum):
    """Comparison applied to the sort key in a key-condition expression."""
    EQ = "="
    GT = ">"
    LT = "<"
    GTE = ">="
    LTE = "<="
    BETWEEN = "BETWEEN"
    BEGINS_WITH = "begins_with"


class QueryOptions(BaseModel):
    """Options for a key-condition query against the table or one of its indexes."""

    pk: DynamoKey = Field(..., description="Partition key value")
    sk: Optional[DynamoKey] = Field(None, description="Sort key value (lower bound for BETWEEN)")
    sk_comparator: SortComparator = Field(SortComparator.EQ, description="Sort key comparison")
    sk_end: Optional[DynamoKey] = Field(None, description="Upper bound for BETWEEN")
    index_name: Optional[str] = Field(None, description="Secondary index to query")
    scan_index_forward: bool = Field(True, description="Ascending sort key order when True")
    limit: Optional[int] = Field(None, gt=0, description="Maximum number of items to evaluate")
    exclusive_start_key: Optional[Dict[str, Any]] = Field(
        None,
        description="last_evaluated_key of a previous page, to continue a paged query"
    )

    model_config = ConfigDict(
        frozen=True
    )

    @model_validator(mode='after')
    def validate_sort_range(self) -> 'QueryOptions':
        """``sk_end`` only makes sense as the upper bound of a BETWEEN on ``sk``."""
        if self.sk_end is not None:
            if self.sk is None:
                raise ValueError("sk_end requires a sort key value (sk)")
            if self.sk_comparator is not SortComparator.BETWEEN:
                raise ValueError(f"sk_end is only valid with the BETWEEN comparator, got '{self.sk_comparator.value}'")
        elif self.sk is not None and self.sk_comparator is SortComparator.BETWEEN:
            raise ValueError("BETWEEN comparator requires an upper bound (sk_end)")
        return self


class QueryResult(BaseModel):
    """Result page of a query.

    ``last_evaluated_key`` is the store's continuation key, passed through
    untouched; feed it back as ``exclusive_start_key`` for the next page.
    """

    items: List[Any] = Field(default_factory=list)
    last_evaluated_key: Optional[Dict[str, Any]] = None
    count: int = 0

    model_config = ConfigDict(
        arbitrary_types_allowed=True
    )
