"""Target SQL dialects and generation options."""

from enum import StrEnum
from typing import Literal, TypedDict


class Dialect(StrEnum):
    """Supported target database systems."""

    MYSQL = "MySQL"
    POSTGRESQL = "PostgreSQL"
    ORACLE = "Oracle"
    SQLSERVER = "SQL Server"
    SQLITE = "SQLite"


type IdentifierQuotes = Literal["single", "double", "backtick", "brackets", "none"]

IDENTIFIER_QUOTES: tuple[IdentifierQuotes, ...] = (
    "single",
    "double",
    "backtick",
    "brackets",
    "none",
)


class DialectOptions(TypedDict, total=False):
    """Per-dialect options."""

    version: str
    charset: str  # MySQL only
    collation: str  # MySQL only
    schema: str
    identifier_quotes: IdentifierQuotes


class GenerationOptions(TypedDict, total=False):
    """Options controlling DDL output."""

    dialect: Dialect
    dialect_options: DialectOptions
    include_drop_statements: bool
    include_comments: bool
    include_schema_prefix: bool
    sort_by_dependency: bool


def parse_dialect(value: str) -> Dialect:
    """Resolve a dialect from its display name or member name, case-insensitively."""
    normalized = value.strip().casefold()
    for dialect in Dialect:
        if normalized in (dialect.value.casefold(), dialect.name.casefold()):
            return dialect
    msg = f"Unknown dialect: {value}"
    raise ValueError(msg)
