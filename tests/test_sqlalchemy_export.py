"""Tests for SQLAlchemy metadata export."""

from sqlalchemy import CHAR, Numeric, String
from sqlalchemy.dialects import sqlite
from sqlalchemy.schema import CreateTable

from erd_toolkit.ddl import schema_to_metadata, sorted_table_ids
from erd_toolkit.ddl.sqlalchemy_export import data_type_to_sql
from erd_toolkit.schema.types import DataType, Relationship, RelationshipType, Table


def test_schema_to_metadata(
    customers: Table,
    orders: Table,
    placed_orders: Relationship,
) -> None:
    """Test that tables, keys and foreign keys are exported."""
    metadata = schema_to_metadata([customers, orders], [placed_orders])

    orders_table = metadata.tables["orders"]
    assert [column.name for column in orders_table.primary_key] == ["id"]
    (foreign_key,) = orders_table.foreign_key_constraints
    assert foreign_key.name == "FK_orders_customers"
    assert foreign_key.ondelete == "CASCADE"
    assert foreign_key.referred_table.name == "customers"
    assert not orders_table.c.customer_id.nullable
    assert orders_table.c.total.nullable


def test_metadata_compiles(customers: Table, orders: Table) -> None:
    """Test that exported tables compile with a SQLAlchemy dialect."""
    metadata = schema_to_metadata([customers, orders], [])

    ddl = str(CreateTable(metadata.tables["customers"]).compile(dialect=sqlite.dialect()))

    assert "email VARCHAR(100) NOT NULL" in ddl
    assert "CONSTRAINT \"UQ_customers_email\" UNIQUE (email)" in ddl


def test_many_to_many_has_no_constraint(
    customers: Table,
    orders: Table,
    placed_orders: Relationship,
) -> None:
    """Test that many-to-many relationships add no foreign key."""
    placed_orders["type"] = RelationshipType.MANY_TO_MANY

    metadata = schema_to_metadata([customers, orders], [placed_orders])

    assert not metadata.tables["orders"].foreign_key_constraints


def test_sorted_table_ids(
    customers: Table,
    orders: Table,
    placed_orders: Relationship,
) -> None:
    """Test that referenced tables sort first."""
    orders["physical_name"] = "accounts"

    assert sorted_table_ids([orders, customers], [placed_orders]) == [
        "t-customers",
        "t-orders",
    ]


def test_data_type_to_sql() -> None:
    """Test type options on the SQLAlchemy types."""
    varchar = data_type_to_sql(DataType.VARCHAR)
    assert isinstance(varchar, String)
    assert varchar.length == 255

    char = data_type_to_sql(DataType.CHAR, {"length": 2})
    assert isinstance(char, CHAR)
    assert char.length == 2

    decimal = data_type_to_sql(DataType.DECIMAL, {"precision": 8})
    assert isinstance(decimal, Numeric)
    assert (decimal.precision, decimal.scale) == (8, 0)
