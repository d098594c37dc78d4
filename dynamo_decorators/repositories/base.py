import dataclasses
import logging
from collections.abc import Mapping, MutableMapping
from typing import Any, Dict, Generic, Optional, Type, TypeVar, Union

from botocore.exceptions import BotoCoreError, ClientError
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..core.client import DynamoClient
from ..core.expressions import build_create_condition_expression, build_key_condition_expression
from ..exceptions import (
    DecoratorMissingError,
    InvalidParametersError,
    ItemNotFoundError,
    ValidationError,
)
from ..metadata import registry
from ..models.base import SOFT_DELETE_FIELD, DynamoEntity, to_dynamodb_value
from ..models.query import DynamoKey, DynamoKeyMap, QueryOptions, QueryResult
from ..utils import utc_timestamp

T = TypeVar('T')

logger = logging.getLogger(__name__)

StoreError = (ClientError, BotoCoreError)


def _public_attributes(obj: Any) -> Dict[str, Any]:
    return {k: v for k, v in getattr(obj, '__dict__', {}).items() if not k.startswith('_')}


def _load_dataclass(cls: type, raw: Dict[str, Any]) -> Any:
    """Build a dataclass from a stored item; attributes without an init field are set afterwards."""
    init_fields = {f.name for f in dataclasses.fields(cls) if f.init}
    entity = cls(**{k: v for k, v in raw.items() if k in init_fields})
    for k, v in raw.items():
        if k not in init_fields:
            setattr(entity, k, v)
    return entity


class DynamoRepository(Generic[T]):
    """Generic repository over a decorated entity class.

    Table and key names are resolved from the metadata registry on every
    call, so declarations made after the repository was built are honoured.

    Store errors (botocore ClientError/BotoCoreError) are logged and
    re-raised unchanged; a failed create condition surfaces as the raw
    ``ConditionalCheckFailedException``.

    Example:
        >>> class UsersRepository(DynamoRepository[UserEntity]):
        ...     def __init__(self, client: DynamoClient):
        ...         super().__init__(client, UserEntity)
    """

    def __init__(self, client: DynamoClient, entity_class: Type[T]):
        """Initialize repository.

        Args:
            client: Store client used for every DynamoDB call
            entity_class: Decorated entity class this repository manages
        """
        self.client = client
        self.entity_class = entity_class

    @property
    def entity_name(self) -> str:
        return self.entity_class.__name__

    # ------------------------------------------------------------------
    # Metadata resolution
    # ------------------------------------------------------------------

    def _get_table_name(self) -> str:
        table_name = registry.resolve_table_name(self.entity_class)
        if not table_name:
            raise DecoratorMissingError(
                f'Table name not found for entity class "{self.entity_name}". '
                f'Make sure the class is decorated with @dynamo_table.',
                self.entity_name
            )
        return table_name

    def _get_pk_name(self, index_name: Optional[str] = None) -> str:
        """Partition key field name, scoped to ``index_name`` when it declares one."""
        pk_name = None
        if index_name:
            pk_name = registry.resolve_index_partition_key(self.entity_class, index_name)

        pk_name = pk_name or registry.resolve_partition_key(self.entity_class)
        if pk_name:
            return pk_name

        raise DecoratorMissingError(
            f'Partition key not found for entity class "{self.entity_name}". '
            f'Make sure a field is annotated with PartitionKey.',
            self.entity_name
        )

    def _get_sk_name(self, index_name: Optional[str] = None) -> Optional[str]:
        """Sort key field name, scoped to ``index_name`` when it declares one."""
        sk_name = None
        if index_name:
            sk_name = registry.resolve_index_sort_key(self.entity_class, index_name)

        return sk_name or registry.resolve_sort_key(self.entity_class)

    def _build_key_map(self, pk: DynamoKey, sk: Optional[DynamoKey] = None) -> DynamoKeyMap:
        """Build a DynamoDB key from a partition key and optional sort key value."""
        keys = {self._get_pk_name(): pk}

        if sk is not None:
            sk_name = self._get_sk_name()
            if not sk_name:
                raise DecoratorMissingError(
                    f'Sort key provided but entity class "{self.entity_name}" does not have a sort key defined. '
                    f'Make sure a field is annotated with SortKey.',
                    self.entity_name
                )
            keys[sk_name] = sk

        return keys

    # ------------------------------------------------------------------
    # Item conversion
    # ------------------------------------------------------------------

    def _to_item(self, item: Any) -> Dict[str, Any]:
        """Convert an entity (model, dataclass, mapping or plain object) to a DynamoDB item.

        Attributes set on dataclass or plain instances outside their declared
        fields (``deletedAt`` after a soft delete) are written too; names
        starting with an underscore are not.
        """
        if isinstance(item, DynamoEntity):
            return item.to_dynamodb_item()
        if isinstance(item, BaseModel):
            return to_dynamodb_value(item.model_dump(by_alias=True, exclude_none=True))
        if isinstance(item, Mapping):
            return to_dynamodb_value(dict(item))
        if isinstance(item, type) or not hasattr(item, '__dict__') and not dataclasses.is_dataclass(item):
            raise InvalidParametersError(
                f"Unsupported item type {type(item).__name__}: "
                f"expected a pydantic model, dataclass, mapping or object with attributes"
            )

        data = _public_attributes(item)
        if dataclasses.is_dataclass(item):
            data.update(dataclasses.asdict(item))
        return to_dynamodb_value(data)

    def _to_entity(self, raw: Dict[str, Any]) -> T:
        """Load a raw item into the entity class.

        Mapping entity classes get the raw dict back.
        """
        entity_class = self.entity_class
        if issubclass(entity_class, DynamoEntity):
            return entity_class.from_dynamodb_item(raw)
        if issubclass(entity_class, Mapping):
            return raw

        try:
            if issubclass(entity_class, BaseModel):
                return entity_class.model_validate(raw)
            if dataclasses.is_dataclass(entity_class):
                return _load_dataclass(entity_class, raw)
            entity = entity_class.__new__(entity_class)
            vars(entity).update(raw)
            return entity
        except (PydanticValidationError, TypeError) as e:
            logger.error(f"Failed to convert DynamoDB item to {self.entity_name}: {e}")
            raise ValidationError(
                f"Failed to convert DynamoDB item to {self.entity_name}: {e}", original_error=e
            ) from e

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def create(self, item: T) -> T:
        """Create a new item, failing if an item with the same key exists.

        Args:
            item: Entity to store

        Returns:
            The item, unchanged

        Raises:
            InvalidParametersError: If item is None
            DecoratorMissingError: If table or partition key is undeclared
            ClientError: ConditionalCheckFailedException when the key is taken
        """
        if item is None:
            raise InvalidParametersError("Item cannot be None")

        table_name = self._get_table_name()
        pk_name = self._get_pk_name()
        sk_name = self._get_sk_name()
        condition = build_create_condition_expression(pk_name, sk_name)

        try:
            self.client.put_item(
                table_name,
                self._to_item(item),
                condition_expression=condition.expression,
                expression_attribute_names=condition.attribute_names
            )
        except StoreError as e:
            logger.error(f"Error creating item in DynamoDB table {table_name}: {e}")
            raise
        return item

    def get_item(self, pk: DynamoKey, sk: Optional[DynamoKey] = None) -> T:
        """Get an item by partition key (and sort key if applicable).

        Raises:
            DecoratorMissingError: If table, partition key, or a needed sort key is undeclared
            ItemNotFoundError: If no item exists at the key
        """
        table_name = self._get_table_name()
        key = self._build_key_map(pk, sk)

        try:
            raw = self.client.get_item(table_name, key)
        except StoreError as e:
            logger.error(f"Error getting item from DynamoDB table {table_name}: {e}")
            raise

        if not raw:
            raise ItemNotFoundError(table_name, key)
        return self._to_entity(raw)

    def put(self, item: T) -> T:
        """Unconditionally write an item, replacing any existing one.

        Raises:
            InvalidParametersError: If item is None
        """
        if item is None:
            raise InvalidParametersError("Item cannot be None")

        table_name = self._get_table_name()
        try:
            self.client.put_item(table_name, self._to_item(item))
        except StoreError as e:
            logger.error(f"Error putting item to DynamoDB table {table_name}: {e}")
            raise
        return item

    def soft_delete(self, pk: DynamoKey, sk: Optional[DynamoKey] = None) -> T:
        """Mark an item deleted by setting its ``deletedAt`` timestamp.

        This is a read followed by a separate write, not an atomic update:
        a concurrent put/remove on the same key between the two calls is
        neither detected nor prevented, and the last write wins.

        Returns:
            The item as written back
        """
        item = self.get_item(pk, sk)
        timestamp = utc_timestamp()

        if isinstance(item, DynamoEntity):
            item.deleted_at = timestamp
        elif isinstance(item, MutableMapping):
            item[SOFT_DELETE_FIELD] = timestamp
        else:
            setattr(item, SOFT_DELETE_FIELD, timestamp)

        return self.put(item)

    def remove(self, pk: DynamoKey, sk: Optional[DynamoKey] = None) -> None:
        """Hard-delete the item at the key. Missing items are not an error."""
        table_name = self._get_table_name()
        key = self._build_key_map(pk, sk)

        try:
            self.client.delete_item(table_name, key)
        except StoreError as e:
            logger.error(f"Error deleting item from DynamoDB table {table_name}: {e}")
            raise

    def query(self, options: Union[QueryOptions, Mapping, None] = None, **kwargs: Any) -> QueryResult:
        """Query the table, or one of its indexes, by key condition.

        Accepts a QueryOptions instance, a mapping, or the same fields as
        keyword arguments::

            repository.query(pk="USER", sk="2024-", sk_comparator="begins_with")

        With ``index_name`` the index's declared keys are used, falling back to
        the table keys for any the index does not declare.

        Raises:
            InvalidParametersError: If the options are invalid
            DecoratorMissingError: If a sort value is given but no sort key resolves
        """
        options = self._query_options(options, kwargs)

        table_name = self._get_table_name()
        pk_name = self._get_pk_name(options.index_name)
        sk_name = self._get_sk_name(options.index_name) if options.sk is not None else None

        if options.sk is not None and not sk_name:
            raise DecoratorMissingError(
                f'Sort key provided but no sort key found in entity class "{self.entity_name}". '
                f'Make sure a field is annotated with SortKey or IndexSortKey.',
                self.entity_name
            )

        condition = build_key_condition_expression(
            options.pk,
            pk_name,
            options.sk,
            sk_name,
            options.sk_comparator,
            options.sk_end
        )

        try:
            response = self.client.query(
                table_name,
                condition.expression,
                condition.attribute_names,
                condition.attribute_values,
                index_name=options.index_name,
                scan_index_forward=options.scan_index_forward,
                limit=options.limit,
                exclusive_start_key=options.exclusive_start_key
            )
        except StoreError as e:
            logger.error(f"Error querying items from DynamoDB table {table_name}: {e}")
            raise

        items = [self._to_entity(raw) for raw in response.get('Items', [])]
        return QueryResult(
            items=items,
            last_evaluated_key=response.get('LastEvaluatedKey'),
            count=response.get('Count') or 0
        )

    @staticmethod
    def _query_options(options: Union[QueryOptions, Mapping, None], overrides: Dict[str, Any]) -> QueryOptions:
        if isinstance(options, QueryOptions) and not overrides:
            return options

        fields = {}
        if isinstance(options, QueryOptions):
            fields.update(options.model_dump(exclude_unset=True))
        elif isinstance(options, Mapping):
            fields.update(options)
        elif options is not None:
            raise InvalidParametersError(f"Unsupported query options type {type(options).__name__}")
        fields.update(overrides)

        try:
            return QueryOptions(**fields)
        except PydanticValidationError as e:
            raise InvalidParametersError(f"Invalid query options: {e}", e.errors()) from e
