"""
Tests for the declaration decorators (metadata/decorators.py).

Covers Annotated key markers on DynamoEntity subclasses, dataclasses and
plain classes, and the @dynamo_table class decorator.
"""

from dataclasses import dataclass
from typing import Annotated, Optional

import pytest

from dynamo_decorators import (
    DynamoEntity,
    IndexPartitionKey,
    IndexSortKey,
    PartitionKey,
    SortKey,
    dynamo_table,
    register_key_fields,
    resolve_index_partition_key,
    resolve_index_sort_key,
    resolve_partition_key,
    resolve_sort_key,
    resolve_table_name,
)
from dynamo_decorators.exceptions import DuplicateDeclarationError, InvalidConfigurationError
from tests.helpers import UserEntity


class TestDynamoTable:
    """Test the @dynamo_table class decorator."""

    def test_explicit_table_name(self):
        @dynamo_table("Customers")
        class Customer(DynamoEntity):
            id: Annotated[str, PartitionKey()]

        assert resolve_table_name(Customer) == "Customers"

    def test_default_table_name(self):
        @dynamo_table()
        class Customer(DynamoEntity):
            id: Annotated[str, PartitionKey()]

        assert resolve_table_name(Customer) == "Customer"

    def test_empty_table_name(self):
        with pytest.raises(InvalidConfigurationError):
            @dynamo_table("  ")
            class Customer(DynamoEntity):
                id: Annotated[str, PartitionKey()]

    def test_decorator_returns_class(self):
        class Customer(DynamoEntity):
            id: Annotated[str, PartitionKey()]

        assert dynamo_table("Customers")(Customer) is Customer

    def test_applying_twice_is_a_duplicate(self):
        class Customer(DynamoEntity):
            id: Annotated[str, PartitionKey()]

        dynamo_table("Customers")(Customer)
        with pytest.raises(DuplicateDeclarationError):
            dynamo_table("Other")(Customer)


class TestKeyMarkers:
    """Test Annotated key markers."""

    def test_user_entity_metadata(self):
        assert resolve_table_name(UserEntity) == "User"
        assert resolve_partition_key(UserEntity) == "pk"
        assert resolve_sort_key(UserEntity) == "sk"
        assert resolve_index_partition_key(UserEntity, "EmailIndex") == "type"
        assert resolve_index_sort_key(UserEntity, "EmailIndex") == "email"

    def test_marker_names(self):
        class Customer(DynamoEntity):
            org_id: Annotated[str, PartitionKey("orgId")]
            customer_id: Annotated[str, SortKey()]

        assert resolve_partition_key(Customer) == "orgId"
        assert resolve_sort_key(Customer) == "customer_id"

    def test_markers_without_table(self):
        class Customer(DynamoEntity):
            id: Annotated[str, PartitionKey()]

        assert resolve_partition_key(Customer) == "id"
        assert resolve_table_name(Customer) is None

    def test_multiple_markers_on_one_field(self):
        class Customer(DynamoEntity):
            org_id: Annotated[str, PartitionKey(), IndexPartitionKey("OrgIndex")]
            email: Annotated[str, IndexSortKey("OrgIndex")]

        assert resolve_partition_key(Customer) == "org_id"
        assert resolve_index_partition_key(Customer, "OrgIndex") == "org_id"
        assert resolve_index_sort_key(Customer, "OrgIndex") == "email"

    def test_unannotated_fields_are_ignored(self):
        class Customer(DynamoEntity):
            id: Annotated[str, PartitionKey()]
            name: Optional[str] = None
            note: Annotated[str, "free text"] = ""

        assert resolve_partition_key(Customer) == "id"
        assert resolve_sort_key(Customer) is None

    def test_entity_still_validates(self):
        class Customer(DynamoEntity):
            id: Annotated[str, PartitionKey()]
            age: int = 0

        customer = Customer(id="c-1", age="42")
        assert customer.id == "c-1"
        assert customer.age == 42


class TestDuplicateMarkers:
    """Duplicate markers fail while the class statement executes."""

    def test_two_partition_keys(self):
        with pytest.raises(DuplicateDeclarationError, match="@PartitionKey"):
            class Customer(DynamoEntity):
                a: Annotated[str, PartitionKey()]
                b: Annotated[str, PartitionKey()]

    def test_two_sort_keys(self):
        with pytest.raises(DuplicateDeclarationError, match="@SortKey"):
            class Customer(DynamoEntity):
                a: Annotated[str, SortKey()]
                b: Annotated[str, SortKey()]

    def test_two_index_partition_keys_same_index(self):
        with pytest.raises(DuplicateDeclarationError, match='index "EmailIndex"'):
            class Customer(DynamoEntity):
                a: Annotated[str, IndexPartitionKey("EmailIndex")]
                b: Annotated[str, IndexPartitionKey("EmailIndex")]

    def test_two_index_sort_keys_same_index(self):
        with pytest.raises(DuplicateDeclarationError, match="@IndexSortKey"):
            class Customer(DynamoEntity):
                a: Annotated[str, IndexSortKey("EmailIndex")]
                b: Annotated[str, IndexSortKey("EmailIndex")]

    def test_empty_index_name(self):
        with pytest.raises(InvalidConfigurationError, match="indexName"):
            class Customer(DynamoEntity):
                a: Annotated[str, IndexSortKey("")]

    def test_same_key_kind_on_different_indexes_is_fine(self):
        class Customer(DynamoEntity):
            a: Annotated[str, IndexSortKey("AIndex")]
            b: Annotated[str, IndexSortKey("BIndex")]

        assert resolve_index_sort_key(Customer, "AIndex") == "a"
        assert resolve_index_sort_key(Customer, "BIndex") == "b"


class TestNonPydanticEntities:
    """Markers on dataclasses and plain classes are applied by @dynamo_table."""

    def test_dataclass_entity(self):
        @dynamo_table("Notes")
        @dataclass
        class Note:
            owner: Annotated[str, PartitionKey()]
            created_at: Annotated[str, SortKey("createdAt")]
            body: str = ""

        assert resolve_table_name(Note) == "Notes"
        assert resolve_partition_key(Note) == "owner"
        assert resolve_sort_key(Note) == "createdAt"

    def test_plain_class_entity(self):
        @dynamo_table()
        class Tag:
            name: Annotated[str, PartitionKey()]

        assert resolve_table_name(Tag) == "Tag"
        assert resolve_partition_key(Tag) == "name"

    def test_string_annotations(self):
        @dynamo_table("Labels")
        class Label:
            name: "Annotated[str, PartitionKey()]"

        assert resolve_partition_key(Label) == "name"

    def test_register_key_fields_is_idempotent(self):
        class Tag:
            name: Annotated[str, PartitionKey()]

        register_key_fields(Tag)
        register_key_fields(Tag)

        assert resolve_partition_key(Tag) == "name"


class TestInheritance:
    """Subclasses of decorated entities."""

    def test_subclass_inherits_keys_and_table(self):
        class AdminUser(UserEntity):
            permissions: list = []

        assert resolve_table_name(AdminUser) == "User"
        assert resolve_partition_key(AdminUser) == "pk"
        assert resolve_index_sort_key(AdminUser, "EmailIndex") == "email"

    def test_subclass_can_declare_own_table(self):
        @dynamo_table("Admins")
        class AdminUser(UserEntity):
            pass

        assert resolve_table_name(AdminUser) == "Admins"
        assert resolve_table_name(UserEntity) == "User"
