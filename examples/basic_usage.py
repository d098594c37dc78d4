#!/usr/bin/env python3
"""
Basic usage example for dynamo-decorators.

This example demonstrates:
1. Declaring an entity with table and key annotations
2. Building an application repository on top of DynamoRepository
3. Creating, reading, querying and soft-deleting users

It expects DynamoDB Local on http://localhost:8000 with a "User" table
(HASH orgId, RANGE id) and an "EmailIndex" GSI (HASH orgId, RANGE email).
"""

import uuid
from typing import Annotated, List, Optional

from dynamo_decorators import (
    DynamoClient,
    DynamoDBConfig,
    DynamoEntity,
    DynamoRepository,
    IndexSortKey,
    ItemNotFoundError,
    PartitionKey,
    SortKey,
    dynamo_table,
)
from dynamo_decorators.utils import utc_timestamp


@dynamo_table("User")
class UserEntity(DynamoEntity):
    orgId: Annotated[str, PartitionKey()] = "USER"
    id: Annotated[str, SortKey()]
    email: Annotated[str, IndexSortKey("EmailIndex")]
    role: str = "USER"
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None


class UsersRepository(DynamoRepository[UserEntity]):
    """Users of a single organisation, keyed by id and looked up by email."""

    def __init__(self, client: DynamoClient):
        super().__init__(client, UserEntity)

    def find_all(self) -> List[UserEntity]:
        users = []
        start_key = None
        while True:
            page = self.query(pk="USER", exclusive_start_key=start_key)
            users.extend(page.items)
            start_key = page.last_evaluated_key
            if not start_key:
                return users

    def get_by_id(self, user_id: str) -> UserEntity:
        return self.get_item("USER", user_id)

    def delete(self, user_id: str) -> UserEntity:
        return self.soft_delete("USER", user_id)

    def find_by_email(self, email: str) -> UserEntity:
        # email is the index sort key, so at most one user matches
        result = self.query(pk="USER", sk=email, index_name="EmailIndex")
        if result.count:
            return result.items[0]
        raise ItemNotFoundError("User", {"orgId": "USER", "email": email})


def main():
    """Walk through the repository operations against DynamoDB Local."""

    # 1. Configure DynamoDB connection
    print("1. Setting up DynamoDB configuration...")
    config = DynamoDBConfig.for_local_development()
    # In deployed environments use DynamoDBConfig.from_env()

    users = UsersRepository(DynamoClient(config))

    # 2. Create a user
    print("2. Creating user...")
    now = utc_timestamp()
    user = users.create(UserEntity(
        id=str(uuid.uuid4()),
        email="ada@example.com",
        createdAt=now,
        updatedAt=now
    ))
    print(f"   Created user {user.id}")

    # 3. Read it back by id and by email
    print("3. Reading user...")
    print(f"   By id: {users.get_by_id(user.id).email}")
    print(f"   By email: {users.find_by_email('ada@example.com').id}")

    # 4. List all users
    print("4. Listing users...")
    for existing in users.find_all():
        print(f"   {existing.id} {existing.email} deleted={existing.is_deleted}")

    # 5. Soft delete
    print("5. Soft-deleting user...")
    deleted = users.delete(user.id)
    print(f"   deletedAt={deleted.deleted_at}")


if __name__ == "__main__":
    main()
