"""DDL generation from a design, for a chosen dialect."""

from collections.abc import Collection, Iterable, Sequence
from datetime import date
from logging import getLogger

from sqlalchemy.exc import SQLAlchemyError

from erd_toolkit.ddl.dialects import Dialect, DialectOptions, GenerationOptions
from erd_toolkit.ddl.sql_utils import (
    drop_statement,
    foreign_key_constraint,
    map_type,
    quote_identifier,
    table_options,
    table_reference,
    uses_named_constraints,
)
from erd_toolkit.ddl.sqlalchemy_export import sorted_table_ids
from erd_toolkit.schema.types import (
    Column,
    DefaultValue,
    Relationship,
    RelationshipType,
    Table,
)

logger = getLogger(__name__)

DEFAULT_DIALECT = Dialect.POSTGRESQL

EMPTY_SELECTION = "/* No tables selected. Select one or more tables to generate DDL. */"

NUMERIC_BOOLEAN_DIALECTS = frozenset({Dialect.ORACLE, Dialect.SQLSERVER})


def render_default(value: DefaultValue, dialect: Dialect = DEFAULT_DIALECT) -> str:
    """Render a default value as a SQL literal.

    String values are trusted and wrapped in single quotes verbatim. Booleans
    become ``1``/``0`` on dialects without a boolean literal.
    """
    match value:
        case None:
            return "NULL"
        case bool() if dialect in NUMERIC_BOOLEAN_DIALECTS:
            return "1" if value else "0"
        case bool():
            return "TRUE" if value else "FALSE"
        case str():
            return f"'{value}'"
        case _:
            return str(value)


def generate_column_definition(
    column: Column,
    dialect: Dialect,
    dialect_options: DialectOptions | None = None,
) -> str:
    """Render ``name TYPE [NOT NULL] [DEFAULT value]`` for one column."""
    constraints = column["constraints"]
    name = quote_identifier(column["physical_name"], dialect, dialect_options)
    sql_type = map_type(column["data_type"], column.get("type_options"), dialect)

    definition = f"  {name} {sql_type}"
    if constraints.get("is_not_null"):
        definition += " NOT NULL"
    if "default_value" in constraints:
        definition += f" DEFAULT {render_default(constraints['default_value'], dialect)}"

    return definition


def _constraint(
    name: str,
    body: str,
    dialect: Dialect,
    dialect_options: DialectOptions | None,
) -> str:
    """Render a table constraint, named for dialects that expect it."""
    if uses_named_constraints(dialect):
        return f"  CONSTRAINT {quote_identifier(name, dialect, dialect_options)} {body}"
    return f"  {body}"


def generate_table_constraints(
    table: Table,
    columns: Sequence[Column],
    dialect: Dialect,
    dialect_options: DialectOptions | None = None,
) -> list[str]:
    """Render PRIMARY KEY, then UNIQUE, then CHECK constraints of a table."""
    table_name = table["physical_name"]
    lines: list[str] = []

    def quoted(column: Column) -> str:
        return quote_identifier(column["physical_name"], dialect, dialect_options)

    if primary_keys := [c for c in columns if c["constraints"].get("is_primary_key")]:
        key_list = ", ".join(quoted(column) for column in primary_keys)
        lines.append(
            _constraint(
                f"PK_{table_name}",
                f"PRIMARY KEY ({key_list})",
                dialect,
                dialect_options,
            ),
        )

    lines.extend(
        _constraint(
            f"UQ_{table_name}_{column['physical_name']}",
            f"UNIQUE ({quoted(column)})",
            dialect,
            dialect_options,
        )
        for column in columns
        if column["constraints"].get("is_unique")
        and not column["constraints"].get("is_primary_key")
    )

    lines.extend(
        _constraint(
            f"CK_{table_name}_{column['physical_name']}",
            f"CHECK ({check})",
            dialect,
            dialect_options,
        )
        for column in columns
        if (check := column["constraints"].get("check"))
    )

    return lines


def generate_table_ddl(table: Table, options: GenerationOptions) -> str:
    """Generate the CREATE TABLE block for one table."""
    dialect = options.get("dialect", DEFAULT_DIALECT)
    dialect_options = options.get("dialect_options")
    schema_prefix = options.get("include_schema_prefix", False)
    parts: list[str] = []

    if options.get("include_drop_statements"):
        parts.append(
            drop_statement(
                table["physical_name"],
                dialect,
                dialect_options,
                schema_prefix=schema_prefix,
            )
            + "\n\n",
        )

    if options.get("include_comments"):
        parts.append(f"-- {table['logical_name']} table\n")

    columns = sorted(table["columns"], key=lambda column: column["order"])
    body = [
        generate_column_definition(column, dialect, dialect_options)
        for column in columns
    ]
    body.extend(generate_table_constraints(table, columns, dialect, dialect_options))

    name = table_reference(
        table["physical_name"],
        dialect,
        dialect_options,
        schema_prefix=schema_prefix,
    )
    parts.extend(
        (
            f"CREATE TABLE {name} (\n",
            ",\n".join(body),
            f"\n){table_options(dialect, dialect_options)};\n",
        ),
    )

    return "".join(parts)


def _column_names(table: Table, column_ids: Iterable[str]) -> list[str]:
    """Resolve column ids to physical names, skipping unknown ids."""
    by_id = {column["id"]: column["physical_name"] for column in table["columns"]}
    return [by_id[column_id] for column_id in column_ids if column_id in by_id]


def generate_foreign_key_ddl(
    relationship: Relationship,
    tables: Sequence[Table],
    options: GenerationOptions,
) -> str:
    """Generate the ALTER TABLE statement for a relationship's foreign key.

    The target table holds the foreign key and references the source table.
    Many-to-many relationships and unresolvable references yield nothing.
    """
    if relationship["type"] == RelationshipType.MANY_TO_MANY:
        return ""

    dialect = options.get("dialect", DEFAULT_DIALECT)
    tables_by_id = {table["id"]: table for table in tables}
    parent = tables_by_id.get(relationship["source_table_id"])
    child = tables_by_id.get(relationship["target_table_id"])
    if parent is None or child is None:
        return ""

    parent_columns = _column_names(parent, relationship["source_column_ids"])
    child_columns = _column_names(child, relationship["target_column_ids"])
    if not parent_columns or not child_columns:
        return ""

    comment = (
        f"-- Foreign key for relationship {relationship['name']}\n"
        if options.get("include_comments")
        else ""
    )
    statement = foreign_key_constraint(
        f"FK_{child['physical_name']}_{parent['physical_name']}",
        child["physical_name"],
        child_columns,
        parent["physical_name"],
        parent_columns,
        dialect,
        options.get("dialect_options"),
        on_delete=relationship.get("on_delete"),
        on_update=relationship.get("on_update"),
        schema_prefix=options.get("include_schema_prefix", False),
    )

    return f"{comment}{statement}\n"


def _dependency_order(
    tables: Sequence[Table],
    relationships: Sequence[Relationship],
) -> list[Table]:
    """Order tables parents-first, keeping model order when sorting fails."""
    try:
        order = sorted_table_ids(tables, relationships)
    except SQLAlchemyError as err:
        logger.warning("Cannot sort tables by dependency, keeping model order: %s", err)
        return list(tables)

    by_id = {table["id"]: table for table in tables}
    return [by_id[table_id] for table_id in order]


def generate_ddl(
    tables: Sequence[Table],
    relationships: Sequence[Relationship],
    options: GenerationOptions,
) -> str:
    """Generate DDL for tables followed by their foreign keys."""
    dialect = options.get("dialect", DEFAULT_DIALECT)
    parts: list[str] = []

    if options.get("include_comments"):
        parts.append(
            f"-- DDL generated for {dialect}\n"
            f"-- Generated on {date.today().isoformat()}\n\n",
        )

    if options.get("sort_by_dependency"):
        tables = _dependency_order(tables, relationships)

    parts.extend(f"{generate_table_ddl(table, options)}\n" for table in tables)
    parts.extend(
        generate_foreign_key_ddl(relationship, tables, options)
        for relationship in relationships
    )

    return "".join(parts)


def generate_for_selection(
    table_ids: Collection[str],
    tables: Iterable[Table],
    relationships: Iterable[Relationship],
    options: GenerationOptions,
) -> str:
    """Generate DDL for the selected tables only.

    Relationships with an endpoint outside the selection are dropped. An empty
    selection yields a placeholder comment rather than an error.
    """
    selected = set(table_ids)
    selected_tables = [table for table in tables if table["id"] in selected]
    if not selected_tables:
        return EMPTY_SELECTION

    selected_relationships = [
        relationship
        for relationship in relationships
        if relationship["source_table_id"] in selected
        and relationship["target_table_id"] in selected
    ]
    logger.debug(
        "Generating %s DDL for %d tables and %d relationships",
        options.get("dialect", DEFAULT_DIALECT),
        len(selected_tables),
        len(selected_relationships),
    )

    return generate_ddl(selected_tables, selected_relationships, options)
