"""Shared fixtures: a small customers/orders design."""

import pytest

from erd_toolkit.schema.engine import SchemaEngine
from erd_toolkit.schema.types import (
    DataType,
    ReferentialAction,
    Relationship,
    RelationshipType,
    Table,
)


@pytest.fixture(name="customers")
def customers_table() -> Table:
    """Create a parent table with a key and a unique email column."""
    return {
        "id": "t-customers",
        "logical_name": "Customers",
        "physical_name": "customers",
        "columns": [
            {
                "id": "c-customers-id",
                "logical_name": "ID",
                "physical_name": "id",
                "data_type": DataType.INT,
                "order": 0,
                "constraints": {"is_primary_key": True, "is_not_null": True},
            },
            {
                "id": "c-customers-email",
                "logical_name": "Email",
                "physical_name": "email",
                "data_type": DataType.VARCHAR,
                "type_options": {"length": 100},
                "order": 1,
                "constraints": {"is_unique": True, "is_not_null": True},
            },
        ],
        "position": {"x": 100, "y": 100},
    }


@pytest.fixture(name="orders")
def orders_table() -> Table:
    """Create a child table referencing customers."""
    return {
        "id": "t-orders",
        "logical_name": "Orders",
        "physical_name": "orders",
        "columns": [
            {
                "id": "c-orders-id",
                "logical_name": "ID",
                "physical_name": "id",
                "data_type": DataType.INT,
                "order": 0,
                "constraints": {"is_primary_key": True, "is_not_null": True},
            },
            {
                "id": "c-orders-customer",
                "logical_name": "Customer ID",
                "physical_name": "customer_id",
                "data_type": DataType.INT,
                "order": 1,
                "constraints": {
                    "is_not_null": True,
                    "foreign_key": {
                        "table_id": "t-customers",
                        "column_id": "c-customers-id",
                    },
                },
            },
            {
                "id": "c-orders-total",
                "logical_name": "Total",
                "physical_name": "total",
                "data_type": DataType.DECIMAL,
                "type_options": {"precision": 12, "scale": 2},
                "order": 2,
                "constraints": {"check": "total >= 0", "default_value": 0},
            },
        ],
        "position": {"x": 500, "y": 100},
    }


@pytest.fixture(name="placed_orders")
def placed_orders_relationship() -> Relationship:
    """Relate customers (one) to orders (many)."""
    return {
        "id": "r-placed",
        "name": "Customers-Orders",
        "type": RelationshipType.ONE_TO_MANY,
        "source_table_id": "t-customers",
        "source_column_ids": ["c-customers-id"],
        "target_table_id": "t-orders",
        "target_column_ids": ["c-orders-customer"],
        "on_delete": ReferentialAction.CASCADE,
        "on_update": ReferentialAction.NO_ACTION,
    }


@pytest.fixture(name="engine")
def loaded_engine(
    customers: Table,
    orders: Table,
    placed_orders: Relationship,
) -> SchemaEngine:
    """Create an engine holding customers, orders and their relationship."""
    return SchemaEngine([customers, orders], [placed_orders])
