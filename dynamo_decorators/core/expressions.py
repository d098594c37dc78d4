"""
Expression Builders

Pure functions producing DynamoDB expression strings with their
placeholder bindings. Attribute names are always aliased (``#pk``/``#sk``)
so key names that collide with DynamoDB reserved words are safe.
"""

from typing import Any, Dict, NamedTuple, Optional, Union

from ..exceptions import InvalidParametersError
from ..models.query import SortComparator


class Expression(NamedTuple):
    """An expression string plus the placeholders it references."""
    expression: str
    attribute_names: Dict[str, str]
    attribute_values: Dict[str, Any]


def build_expression_attribute_names(pk_name: str, sk_name: Optional[str] = None) -> Dict[str, str]:
    """Map the ``#pk``/``#sk`` placeholders to the key field names."""
    expression_attribute_names = {"#pk": pk_name}
    if sk_name:
        expression_attribute_names["#sk"] = sk_name
    return expression_attribute_names


def build_create_condition_expression(pk_name: str, sk_name: Optional[str] = None) -> Expression:
    """Build the condition that stops create() from overwriting an item.

    With a sort key both key attributes must be absent on the target item;
    without one only the partition key is checked.

    Example:
        >>> build_create_condition_expression("pk", "sk").expression
        'attribute_not_exists(#pk) AND attribute_not_exists(#sk)'
    """
    if sk_name:
        condition = "attribute_not_exists(#pk) AND attribute_not_exists(#sk)"
    else:
        condition = "attribute_not_exists(#pk)"
    return Expression(condition, build_expression_attribute_names(pk_name, sk_name), {})


def build_key_condition_expression(
    pk_value: Any,
    pk_name: str,
    sk_value: Optional[Any] = None,
    sk_name: Optional[str] = None,
    comparator: Union[SortComparator, str] = SortComparator.EQ,
    sk_end: Optional[Any] = None
) -> Expression:
    """Build a KeyConditionExpression for a query.

    Args:
        pk_value: Partition key value
        pk_name: Partition key field name
        sk_value: Sort key value; the sort condition is skipped when None
        sk_name: Sort key field name
        comparator: One of ``=``, ``>``, ``<``, ``>=``, ``<=``, ``BETWEEN``,
            ``begins_with``
        sk_end: Upper bound, required for ``BETWEEN``

    Returns:
        Expression with ``:pkValue``/``:skValue`` (and ``:skValueEnd``) bindings

    Raises:
        InvalidParametersError: For an unknown comparator, a BETWEEN
            without ``sk_end``, or an ``sk_end`` with no BETWEEN on a sort value

    Examples:
        >>> build_key_condition_expression("USER", "pk").expression
        '#pk = :pkValue'
        >>> build_key_condition_expression("USER", "pk", "2024-", "sk", "begins_with").expression
        '#pk = :pkValue AND begins_with(#sk, :skValue)'
    """
    expression_attribute_names = {"#pk": pk_name}
    expression_attribute_values = {":pkValue": pk_value}
    key_condition_expression = "#pk = :pkValue"

    if sk_value is None and sk_end is not None:
        raise InvalidParametersError("sk_end requires a sort key value")

    if sk_value is None or not sk_name:
        return Expression(key_condition_expression, expression_attribute_names, expression_attribute_values)

    try:
        comparator = SortComparator(comparator)
    except ValueError:
        supported = ", ".join(c.value for c in SortComparator)
        raise InvalidParametersError(
            f"Unsupported sort key comparator: {comparator}. Supported values: {supported}"
        ) from None

    if sk_end is not None and comparator is not SortComparator.BETWEEN:
        raise InvalidParametersError(f"sk_end is only valid with BETWEEN, got '{comparator.value}'")

    if comparator is SortComparator.BEGINS_WITH:
        sk_condition = "begins_with(#sk, :skValue)"
    elif comparator is SortComparator.BETWEEN:
        if sk_end is None:
            raise InvalidParametersError("BETWEEN comparator requires an upper bound (sk_end)")
        sk_condition = "#sk BETWEEN :skValue AND :skValueEnd"
        expression_attribute_values[":skValueEnd"] = sk_end
    else:
        sk_condition = f"#sk {comparator.value} :skValue"

    expression_attribute_names["#sk"] = sk_name
    expression_attribute_values[":skValue"] = sk_value

    return Expression(
        f"{key_condition_expression} AND {sk_condition}",
        expression_attribute_names,
        expression_attribute_values
    )
