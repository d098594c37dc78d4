"""
Test configuration and fixtures for dynamo-decorators.

Unit tests talk to a Mock(spec=DynamoClient); integration tests run the real
client against moto's in-memory DynamoDB.
"""

from unittest.mock import Mock

import boto3
import pytest
from moto import mock_aws

from dynamo_decorators import DynamoClient, DynamoDBConfig, DynamoRepository
from tests.helpers import OrderEntity, UserEntity


@pytest.fixture
def aws_credentials(monkeypatch):
    """Fake AWS credentials so nothing can reach a real account."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def dynamodb_config():
    """DynamoDB configuration for testing."""
    return DynamoDBConfig(
        aws_access_key_id="test_key",
        aws_secret_access_key="test_secret",
        region_name="us-east-1",
        endpoint_url=None,
        table_prefix=""
    )


@pytest.fixture
def mock_client():
    """Store client double; configure return values per test."""
    client = Mock(spec=DynamoClient)
    client.get_item.return_value = None
    client.put_item.return_value = None
    client.delete_item.return_value = None
    client.query.return_value = {'Items': [], 'Count': 0}
    return client


@pytest.fixture
def user_repository(mock_client):
    return DynamoRepository(mock_client, UserEntity)


@pytest.fixture
def order_repository(mock_client):
    return DynamoRepository(mock_client, OrderEntity)


@pytest.fixture
def sample_user_item():
    """Raw DynamoDB item for a user."""
    return {
        "pk": "USER",
        "sk": "user-1",
        "type": "USER",
        "email": "a@x.com",
        "name": "Ada",
    }


# ===== moto fixtures =====

@pytest.fixture
def mock_dynamodb_resource(aws_credentials):
    """In-memory DynamoDB resource."""
    with mock_aws():
        yield boto3.resource('dynamodb', region_name='us-east-1')


@pytest.fixture
def user_table(mock_dynamodb_resource):
    """Create the User table with its EmailIndex."""
    return mock_dynamodb_resource.create_table(
        TableName='User',
        KeySchema=[
            {'AttributeName': 'pk', 'KeyType': 'HASH'},
            {'AttributeName': 'sk', 'KeyType': 'RANGE'}
        ],
        AttributeDefinitions=[
            {'AttributeName': 'pk', 'AttributeType': 'S'},
            {'AttributeName': 'sk', 'AttributeType': 'S'},
            {'AttributeName': 'type', 'AttributeType': 'S'},
            {'AttributeName': 'email', 'AttributeType': 'S'}
        ],
        GlobalSecondaryIndexes=[
            {
                'IndexName': 'EmailIndex',
                'KeySchema': [
                    {'AttributeName': 'type', 'KeyType': 'HASH'},
                    {'AttributeName': 'email', 'KeyType': 'RANGE'}
                ],
                'Projection': {'ProjectionType': 'ALL'}
            }
        ],
        BillingMode='PAY_PER_REQUEST'
    )


@pytest.fixture
def orders_table(mock_dynamodb_resource):
    """Create the partition-key-only Orders table."""
    return mock_dynamodb_resource.create_table(
        TableName='Orders',
        KeySchema=[
            {'AttributeName': 'id', 'KeyType': 'HASH'}
        ],
        AttributeDefinitions=[
            {'AttributeName': 'id', 'AttributeType': 'S'}
        ],
        BillingMode='PAY_PER_REQUEST'
    )


@pytest.fixture
def moto_client(mock_dynamodb_resource, dynamodb_config):
    """Real DynamoClient bound to the moto resource."""
    return DynamoClient(dynamodb_config, resource=mock_dynamodb_resource)
