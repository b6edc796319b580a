"""SQLAlchemy metadata export of a design."""

from collections.abc import Iterable
from typing import Any
from warnings import catch_warnings, filterwarnings

from sqlalchemy import (
    CHAR,
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Float,
    ForeignKeyConstraint,
    Integer,
    MetaData,
    Numeric,
    PrimaryKeyConstraint,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.exc import SAWarning
from sqlalchemy.schema import Column as AlchemyColumn
from sqlalchemy.schema import Table as AlchemyTable
from sqlalchemy.types import TypeEngine

from erd_toolkit.ddl.sql_utils import (
    DEFAULT_CHAR_LENGTH,
    DEFAULT_PRECISION,
    DEFAULT_SCALE,
    DEFAULT_VARCHAR_LENGTH,
)
from erd_toolkit.schema.types import (
    Column,
    DataType,
    Relationship,
    RelationshipType,
    Table,
    TypeOptions,
)

# Key under which the design id is kept in sqlalchemy Table.info
TABLE_ID_KEY = "erd_table_id"


def data_type_to_sql(
    data_type: DataType,
    type_options: TypeOptions | None = None,
) -> TypeEngine[Any]:
    """Convert an abstract column type to a SQLAlchemy TypeEngine."""
    options = type_options or {}
    sql_type: TypeEngine[Any]

    match data_type:
        case DataType.INT:
            sql_type = Integer()
        case DataType.FLOAT:
            sql_type = Float()
        case DataType.DECIMAL:
            if precision := options.get("precision"):
                sql_type = Numeric(precision=precision, scale=options.get("scale") or 0)
            else:
                sql_type = Numeric(precision=DEFAULT_PRECISION, scale=DEFAULT_SCALE)
        case DataType.VARCHAR:
            sql_type = String(options.get("length") or DEFAULT_VARCHAR_LENGTH)
        case DataType.CHAR:
            sql_type = CHAR(options.get("length") or DEFAULT_CHAR_LENGTH)
        case DataType.TEXT:
            sql_type = Text()
        case DataType.DATE:
            sql_type = Date()
        case DataType.DATETIME:
            sql_type = DateTime()
        case DataType.BOOLEAN:
            sql_type = Boolean()

    return sql_type


def _column_to_sqla(column: Column) -> AlchemyColumn[Any]:
    """Build a SQLAlchemy Column from a design column."""
    constraints = column["constraints"]
    return AlchemyColumn(
        column["physical_name"],
        data_type_to_sql(column["data_type"], column.get("type_options")),
        nullable=not (
            constraints.get("is_not_null") or constraints.get("is_primary_key")
        ),
        comment=column.get("description"),
    )


def _table_to_sqla(table: Table, metadata: MetaData) -> AlchemyTable:
    """Build a SQLAlchemy Table, with named key, unique and check constraints."""
    name = table["physical_name"]
    columns = sorted(table["columns"], key=lambda column: column["order"])

    args: list[Any] = [_column_to_sqla(column) for column in columns]

    if primary_keys := [
        c["physical_name"] for c in columns if c["constraints"].get("is_primary_key")
    ]:
        args.append(PrimaryKeyConstraint(*primary_keys, name=f"PK_{name}"))

    args.extend(
        UniqueConstraint(c["physical_name"], name=f"UQ_{name}_{c['physical_name']}")
        for c in columns
        if c["constraints"].get("is_unique")
        and not c["constraints"].get("is_primary_key")
    )
    args.extend(
        CheckConstraint(check, name=f"CK_{name}_{c['physical_name']}")
        for c in columns
        if (check := c["constraints"].get("check"))
    )

    return AlchemyTable(
        name,
        metadata,
        *args,
        comment=table.get("description"),
        info={TABLE_ID_KEY: table["id"]},
    )


def _column_names(table: Table, column_ids: Iterable[str]) -> list[str]:
    by_id = {column["id"]: column["physical_name"] for column in table["columns"]}
    return [by_id[column_id] for column_id in column_ids if column_id in by_id]


def _add_foreign_key(
    relationship: Relationship,
    tables: dict[str, Table],
    sqla_tables: dict[str, AlchemyTable],
) -> None:
    """Attach the relationship's foreign key to its child table, when resolvable."""
    parent = tables.get(relationship["source_table_id"])
    child = tables.get(relationship["target_table_id"])
    if parent is None or child is None:
        return

    parent_columns = _column_names(parent, relationship["source_column_ids"])
    child_columns = _column_names(child, relationship["target_column_ids"])
    if not parent_columns or len(parent_columns) != len(child_columns):
        return

    referenced = sqla_tables[parent["id"]]
    sqla_tables[child["id"]].append_constraint(
        ForeignKeyConstraint(
            child_columns,
            [referenced.c[column] for column in parent_columns],
            name=f"FK_{child['physical_name']}_{parent['physical_name']}",
            ondelete=relationship.get("on_delete"),
            onupdate=relationship.get("on_update"),
        ),
    )


def schema_to_metadata(
    tables: Iterable[Table],
    relationships: Iterable[Relationship],
) -> MetaData:
    """Build SQLAlchemy metadata for a design.

    Many-to-many relationships carry no constraint of their own; their keys
    live on the junction table's columns.
    """
    metadata = MetaData()
    tables_by_id = {table["id"]: table for table in tables}
    sqla_tables = {
        table_id: _table_to_sqla(table, metadata)
        for table_id, table in tables_by_id.items()
    }

    for relationship in relationships:
        if relationship["type"] != RelationshipType.MANY_TO_MANY:
            _add_foreign_key(relationship, tables_by_id, sqla_tables)

    return metadata


def sorted_table_ids(
    tables: Iterable[Table],
    relationships: Iterable[Relationship],
) -> list[str]:
    """Return table ids ordered so referenced tables come first."""
    metadata = schema_to_metadata(tables, relationships)
    with catch_warnings():
        # Cycles are broken arbitrarily, which is fine for ALTER-based keys
        filterwarnings("ignore", category=SAWarning)
        return [table.info[TABLE_ID_KEY] for table in metadata.sorted_tables]
