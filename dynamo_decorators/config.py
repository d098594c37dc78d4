"""
Connection settings for DynamoClient.

Every field falls back to an environment variable, and a ``.env`` file in the
working directory is loaded on import:

=========================  ===========================
Variable                   Field
=========================  ===========================
AWS_ACCESS_KEY_ID          aws_access_key_id
AWS_SECRET_ACCESS_KEY      aws_secret_access_key
AWS_REGION                 region_name (us-east-1)
DYNAMODB_ENDPOINT_URL      endpoint_url
DYNAMODB_TABLE_PREFIX      table_prefix
DYNAMODB_DEBUG_LOGGING     enable_debug_logging
=========================  ===========================
"""

import os
from typing import Any, Callable, Dict, Optional

from botocore.config import Config
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

load_dotenv()


def _env(name: str, default: Optional[str] = None) -> Callable[[], Optional[str]]:
    return lambda: os.getenv(name, default)


def _env_flag(name: str) -> Callable[[], bool]:
    return lambda: os.getenv(name, "false").strip().lower() in ("1", "true", "yes")


class DynamoDBConfig(BaseModel):
    """Credentials, endpoint, table prefix and botocore tuning."""

    model_config = ConfigDict(validate_assignment=True)

    aws_access_key_id: Optional[str] = Field(default_factory=_env("AWS_ACCESS_KEY_ID"))
    aws_secret_access_key: Optional[str] = Field(default_factory=_env("AWS_SECRET_ACCESS_KEY"))
    region_name: str = Field(default_factory=_env("AWS_REGION", "us-east-1"))
    endpoint_url: Optional[str] = Field(
        default_factory=_env("DYNAMODB_ENDPOINT_URL"),
        description="Override endpoint, e.g. DynamoDB Local or LocalStack"
    )
    table_prefix: str = Field(
        default_factory=_env("DYNAMODB_TABLE_PREFIX", ""),
        description="Joined to declared table names as '{prefix}_{name}'"
    )

    # botocore client tuning
    max_pool_connections: int = Field(default=50, gt=0)
    retries: int = Field(default=3, ge=0, description="botocore max_attempts")
    timeout_seconds: float = Field(default=30.0, gt=0)

    enable_debug_logging: bool = Field(default_factory=_env_flag("DYNAMODB_DEBUG_LOGGING"))

    @field_validator('region_name')
    @classmethod
    def validate_region(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("AWS region name is required")
        return v.strip()

    @field_validator('table_prefix')
    @classmethod
    def strip_table_prefix(cls, v: str) -> str:
        return v.strip()

    def get_table_name(self, base_name: str) -> str:
        """Physical table name for a declared table name."""
        return f"{self.table_prefix}_{base_name}" if self.table_prefix else base_name

    def session_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for ``boto3.Session``."""
        return {
            'aws_access_key_id': self.aws_access_key_id,
            'aws_secret_access_key': self.aws_secret_access_key,
            'region_name': self.region_name,
        }

    def resource_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for ``session.resource('dynamodb', ...)``."""
        kwargs: Dict[str, Any] = {
            'region_name': self.region_name,
            'config': Config(
                retries={'max_attempts': self.retries},
                max_pool_connections=self.max_pool_connections,
                connect_timeout=self.timeout_seconds,
                read_timeout=self.timeout_seconds,
            ),
        }
        if self.endpoint_url:
            kwargs['endpoint_url'] = self.endpoint_url
        return kwargs

    @classmethod
    def from_env(cls) -> 'DynamoDBConfig':
        """Build a config purely from the environment."""
        return cls()

    @classmethod
    def for_local_development(cls, endpoint_url: str = "http://localhost:8000") -> 'DynamoDBConfig':
        """Config for DynamoDB Local with dummy credentials and debug logging."""
        return cls(
            aws_access_key_id="local",
            aws_secret_access_key="local",
            region_name="us-east-1",
            endpoint_url=endpoint_url,
            enable_debug_logging=True
        )
