"""
DynamoDB Store Client

Thin wrapper around the boto3 DynamoDB resource. Unlike a per-table gateway,
the client is table-agnostic: repositories resolve the table name from entity
metadata on every call and pass it in.

The client exposes exactly the four request shapes the repository needs:

- get_item: point read by key map
- put_item: write, optionally guarded by a condition expression
- delete_item: delete by key map
- query: key-condition query on the table or a secondary index

Store failures (botocore ClientError, BotoCoreError) are not caught here;
they reach the repository unchanged.
"""

import logging
from typing import Any, Dict, Optional

import boto3

from ..config import DynamoDBConfig
from ..exceptions import ConnectionError

logger = logging.getLogger(__name__)


class DynamoClient:
    """
    Table-agnostic DynamoDB client used by DynamoRepository.

    Either builds a boto3 resource lazily from a DynamoDBConfig or wraps a
    resource supplied by the caller (useful for sharing sessions and for
    tests).
    """

    def __init__(self, config: Optional[DynamoDBConfig] = None, resource=None):
        """Initialize the client.

        Args:
            config: DynamoDB configuration; read from the environment when omitted
            resource: Optional pre-built boto3 DynamoDB service resource
        """
        self.config = config or DynamoDBConfig.from_env()
        self._dynamodb = resource
        self._tables: Dict[str, Any] = {}

        if self.config.enable_debug_logging:
            logging.getLogger("dynamo_decorators").setLevel(logging.DEBUG)

    @property
    def dynamodb(self):
        """Lazy initialization of DynamoDB resource."""
        if self._dynamodb is None:
            try:
                session = boto3.Session(**self.config.session_kwargs())
                self._dynamodb = session.resource('dynamodb', **self.config.resource_kwargs())
                logger.debug(f"Created DynamoDB resource in {self.config.region_name}")
            except Exception as e:
                logger.error(f"Failed to create DynamoDB resource: {e}")
                raise ConnectionError(f"Failed to connect to DynamoDB: {e}", e) from e
        return self._dynamodb

    def table(self, table_name: str):
        """Get (and cache) the boto3 Table resource for a declared table name."""
        full_table_name = self.config.get_table_name(table_name)
        if full_table_name not in self._tables:
            try:
                self._tables[full_table_name] = self.dynamodb.Table(full_table_name)
            except ConnectionError:
                raise
            except Exception as e:
                logger.error(f"Failed to access table '{full_table_name}': {e}")
                raise ConnectionError(f"Failed to access table '{full_table_name}': {e}", e) from e
        return self._tables[full_table_name]

    def get_item(self, table_name: str, key: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Read a single item by key.

        Returns:
            The raw item, or None when no item exists at ``key``
        """
        response = self.table(table_name).get_item(Key=key)
        logger.debug(f"Got item from {table_name}: {key}")
        return response.get('Item')

    def put_item(
        self,
        table_name: str,
        item: Dict[str, Any],
        condition_expression: Optional[str] = None,
        expression_attribute_names: Optional[Dict[str, str]] = None
    ) -> None:
        """
        Put item into a DynamoDB table.

        Args:
            table_name: Declared table name
            item: Item to store
            condition_expression: Optional condition for the put
            expression_attribute_names: Aliases referenced by the condition

        Example:
            client.put_item(
                "User",
                item={'pk': 'USER', 'sk': 'user-1'},
                condition_expression='attribute_not_exists(#pk)',
                expression_attribute_names={'#pk': 'pk'}
            )
        """
        put_kwargs = {'Item': item}
        if condition_expression is not None:
            put_kwargs['ConditionExpression'] = condition_expression
        if expression_attribute_names:
            put_kwargs['ExpressionAttributeNames'] = expression_attribute_names

        self.table(table_name).put_item(**put_kwargs)
        logger.info(f"Put item in {table_name}: {item}")

    def delete_item(self, table_name: str, key: Dict[str, Any]) -> None:
        """Delete the item at ``key``; deleting a missing item is not an error."""
        self.table(table_name).delete_item(Key=key)
        logger.info(f"Deleted item from {table_name}: {key}")

    def query(
        self,
        table_name: str,
        key_condition_expression: str,
        expression_attribute_names: Dict[str, str],
        expression_attribute_values: Dict[str, Any],
        index_name: Optional[str] = None,
        scan_index_forward: bool = True,
        limit: Optional[int] = None,
        exclusive_start_key: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Execute a DynamoDB Query operation.

        Optional arguments are only sent when set, since boto3 rejects None
        parameters.

        Returns:
            Raw DynamoDB response (Items, Count, LastEvaluatedKey, ...)
        """
        query_kwargs = {
            'KeyConditionExpression': key_condition_expression,
            'ExpressionAttributeNames': expression_attribute_names,
            'ExpressionAttributeValues': expression_attribute_values,
            'ScanIndexForward': scan_index_forward
        }
        if index_name:
            query_kwargs['IndexName'] = index_name
        if limit is not None:
            query_kwargs['Limit'] = limit
        if exclusive_start_key:
            query_kwargs['ExclusiveStartKey'] = exclusive_start_key

        response = self.table(table_name).query(**query_kwargs)
        logger.debug(f"Query on {table_name} returned {response.get('Count', 0)} items")
        return response


def create_client(config: Optional[DynamoDBConfig] = None) -> DynamoClient:
    """
    Factory function to create a DynamoClient.

    Args:
        config: DynamoDB configuration; read from the environment when omitted

    Returns:
        Configured DynamoClient instance
    """
    return DynamoClient(config)
