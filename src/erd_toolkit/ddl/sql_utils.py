"""Dialect-specific lexical forms: identifier quoting, types and statements.

Every function here is pure; dialect differences are resolved with ``match``
over the closed ``Dialect`` enum.
"""

from collections.abc import Sequence

from erd_toolkit.ddl.dialects import Dialect, DialectOptions, IdentifierQuotes
from erd_toolkit.schema.types import DataType, ReferentialAction, TypeOptions

DEFAULT_VARCHAR_LENGTH = 255
DEFAULT_CHAR_LENGTH = 1
DEFAULT_PRECISION = 10
DEFAULT_SCALE = 2

# Oracle error raised when dropping a table that does not exist
ORACLE_TABLE_NOT_FOUND = -942

QUOTE_PAIRS: dict[IdentifierQuotes, tuple[str, str]] = {
    "single": ("'", "'"),
    "double": ('"', '"'),
    "backtick": ("`", "`"),
    "brackets": ("[", "]"),
    "none": ("", ""),
}

# Types that take no options, per dialect
FIXED_TYPES: dict[Dialect, dict[DataType, str]] = {
    Dialect.MYSQL: {
        DataType.INT: "INT",
        DataType.FLOAT: "FLOAT",
        DataType.TEXT: "TEXT",
        DataType.DATE: "DATE",
        DataType.DATETIME: "DATETIME",
        DataType.BOOLEAN: "TINYINT(1)",
    },
    Dialect.POSTGRESQL: {
        DataType.INT: "INTEGER",
        DataType.FLOAT: "REAL",
        DataType.TEXT: "TEXT",
        DataType.DATE: "DATE",
        DataType.DATETIME: "TIMESTAMP",
        DataType.BOOLEAN: "BOOLEAN",
    },
    Dialect.ORACLE: {
        DataType.INT: "NUMBER(10)",
        DataType.FLOAT: "FLOAT",
        DataType.TEXT: "CLOB",
        DataType.DATE: "DATE",
        DataType.DATETIME: "TIMESTAMP",
        DataType.BOOLEAN: "NUMBER(1)",
    },
    Dialect.SQLSERVER: {
        DataType.INT: "INT",
        DataType.FLOAT: "FLOAT",
        DataType.TEXT: "TEXT",
        DataType.DATE: "DATE",
        DataType.DATETIME: "DATETIME",
        DataType.BOOLEAN: "BIT",
    },
    Dialect.SQLITE: {
        DataType.INT: "INTEGER",
        DataType.FLOAT: "REAL",
        DataType.TEXT: "TEXT",
        DataType.DATE: "TEXT",
        DataType.DATETIME: "TEXT",
        DataType.BOOLEAN: "INTEGER",
    },
}


def identifier_quotes(
    dialect: Dialect,
    options: DialectOptions | None = None,
) -> tuple[str, str]:
    """Return the opening and closing identifier quote for a dialect."""
    if options and (style := options.get("identifier_quotes")):
        return QUOTE_PAIRS[style]

    match dialect:
        case Dialect.MYSQL:
            return QUOTE_PAIRS["backtick"]
        case Dialect.POSTGRESQL | Dialect.ORACLE | Dialect.SQLITE:
            return QUOTE_PAIRS["double"]
        case Dialect.SQLSERVER:
            return QUOTE_PAIRS["brackets"]


def quote_identifier(
    identifier: str,
    dialect: Dialect,
    options: DialectOptions | None = None,
) -> str:
    """Quote a table or column name, leaving already quoted names untouched."""
    opening, closing = identifier_quotes(dialect, options)
    if not opening:
        return identifier

    already_quoted = (
        len(identifier) >= len(opening) + len(closing)
        and identifier.startswith(opening)
        and identifier.endswith(closing)
    )
    if already_quoted:
        return identifier

    return f"{opening}{identifier}{closing}"


def table_reference(
    table_name: str,
    dialect: Dialect,
    options: DialectOptions | None = None,
    *,
    schema_prefix: bool = False,
) -> str:
    """Quote a table name, qualifying it with the configured schema if asked."""
    quoted = quote_identifier(table_name, dialect, options)
    if schema_prefix and options and (schema := options.get("schema")):
        return f"{quote_identifier(schema, dialect, options)}.{quoted}"
    return quoted


def _length(type_options: TypeOptions | None, default: int) -> int:
    """Length option, falling back to a default when missing."""
    return (type_options or {}).get("length") or default


def _precision_scale(type_options: TypeOptions | None) -> tuple[int, int]:
    """Precision and scale options; a missing precision selects the defaults."""
    options = type_options or {}
    if not (precision := options.get("precision")):
        return DEFAULT_PRECISION, DEFAULT_SCALE
    return precision, options.get("scale") or 0


def _decimal_type(dialect: Dialect, type_options: TypeOptions | None) -> str:
    precision, scale = _precision_scale(type_options)
    match dialect:
        case Dialect.MYSQL | Dialect.SQLSERVER:
            return f"DECIMAL({precision},{scale})"
        case Dialect.POSTGRESQL:
            return f"NUMERIC({precision},{scale})"
        case Dialect.ORACLE:
            return f"NUMBER({precision},{scale})"
        case Dialect.SQLITE:
            return "REAL"


def _varchar_type(dialect: Dialect, type_options: TypeOptions | None) -> str:
    length = _length(type_options, DEFAULT_VARCHAR_LENGTH)
    match dialect:
        case Dialect.MYSQL | Dialect.POSTGRESQL | Dialect.SQLSERVER:
            return f"VARCHAR({length})"
        case Dialect.ORACLE:
            return f"VARCHAR2({length})"
        case Dialect.SQLITE:
            # SQLite does not enforce character lengths
            return "TEXT"


def _char_type(dialect: Dialect, type_options: TypeOptions | None) -> str:
    length = _length(type_options, DEFAULT_CHAR_LENGTH)
    match dialect:
        case Dialect.SQLITE:
            return "TEXT"
        case _:
            return f"CHAR({length})"


def map_type(
    data_type: DataType,
    type_options: TypeOptions | None,
    dialect: Dialect,
) -> str:
    """Translate an abstract column type to the dialect's native SQL type.

    Examples:
        varchar(100), PostgreSQL -> VARCHAR(100)
        int, Oracle -> NUMBER(10)
        decimal without options, MySQL -> DECIMAL(10,2)
        boolean, SQL Server -> BIT

    """
    match data_type:
        case DataType.DECIMAL:
            return _decimal_type(dialect, type_options)
        case DataType.VARCHAR:
            return _varchar_type(dialect, type_options)
        case DataType.CHAR:
            return _char_type(dialect, type_options)
        case (
            DataType.INT
            | DataType.FLOAT
            | DataType.TEXT
            | DataType.DATE
            | DataType.DATETIME
            | DataType.BOOLEAN
        ):
            return FIXED_TYPES[dialect][data_type]


def uses_named_constraints(dialect: Dialect) -> bool:
    """Whether table constraints are emitted as named CONSTRAINT clauses."""
    match dialect:
        case Dialect.ORACLE | Dialect.SQLSERVER:
            return True
        case Dialect.MYSQL | Dialect.POSTGRESQL | Dialect.SQLITE:
            return False


def supports_on_update(dialect: Dialect) -> bool:
    """Whether foreign keys accept an ON UPDATE action."""
    match dialect:
        case Dialect.ORACLE | Dialect.SQLITE:
            return False
        case Dialect.MYSQL | Dialect.POSTGRESQL | Dialect.SQLSERVER:
            return True


def table_options(dialect: Dialect, options: DialectOptions | None = None) -> str:
    """Return the option suffix placed after a CREATE TABLE body."""
    match dialect:
        case Dialect.MYSQL:
            parts: list[str] = []
            if options and (charset := options.get("charset")):
                parts.append(f"DEFAULT CHARACTER SET={charset}")
            if options and (collation := options.get("collation")):
                parts.append(f"COLLATE={collation}")
            return f" {' '.join(parts)}" if parts else ""
        case Dialect.POSTGRESQL | Dialect.ORACLE | Dialect.SQLSERVER | Dialect.SQLITE:
            return ""


def drop_statement(
    table_name: str,
    dialect: Dialect,
    options: DialectOptions | None = None,
    *,
    schema_prefix: bool = False,
) -> str:
    """Return a statement dropping the table only if it exists."""
    reference = table_reference(
        table_name,
        dialect,
        options,
        schema_prefix=schema_prefix,
    )

    match dialect:
        case Dialect.MYSQL | Dialect.POSTGRESQL | Dialect.SQLITE:
            return f"DROP TABLE IF EXISTS {reference};"
        case Dialect.ORACLE:
            return "\n".join(
                (
                    "BEGIN",
                    f"  EXECUTE IMMEDIATE 'DROP TABLE {reference}';",
                    "EXCEPTION",
                    "  WHEN OTHERS THEN",
                    f"    IF SQLCODE != {ORACLE_TABLE_NOT_FOUND} THEN",
                    "      RAISE;",
                    "    END IF;",
                    "END;",
                    "/",
                ),
            )
        case Dialect.SQLSERVER:
            object_name = table_name
            if schema_prefix and options and (schema := options.get("schema")):
                object_name = f"{schema}.{table_name}"
            return (
                f"IF OBJECT_ID('{object_name}', 'U') IS NOT NULL\n"
                f"  DROP TABLE {reference};"
            )


def foreign_key_constraint(  # noqa: PLR0913
    constraint_name: str,
    table_name: str,
    columns: Sequence[str],
    referenced_table: str,
    referenced_columns: Sequence[str],
    dialect: Dialect,
    options: DialectOptions | None = None,
    *,
    on_delete: ReferentialAction | None = None,
    on_update: ReferentialAction | None = None,
    schema_prefix: bool = False,
) -> str:
    """Return an ALTER TABLE statement adding a foreign key constraint.

    ON UPDATE is never emitted for dialects that do not support it, even when
    requested.
    """
    table = table_reference(table_name, dialect, options, schema_prefix=schema_prefix)
    referenced = table_reference(
        referenced_table,
        dialect,
        options,
        schema_prefix=schema_prefix,
    )
    quoted_columns = ", ".join(quote_identifier(c, dialect, options) for c in columns)
    quoted_referenced = ", ".join(
        quote_identifier(c, dialect, options) for c in referenced_columns
    )

    lines = [
        f"ALTER TABLE {table} ADD CONSTRAINT "
        f"{quote_identifier(constraint_name, dialect, options)}",
        f"  FOREIGN KEY ({quoted_columns})",
        f"  REFERENCES {referenced} ({quoted_referenced})",
    ]
    if on_delete:
        lines.append(f"  ON DELETE {on_delete}")
    if on_update and supports_on_update(dialect):
        lines.append(f"  ON UPDATE {on_update}")

    return "\n".join(lines) + ";"
