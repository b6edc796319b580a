"""Dialect-aware DDL generation for designed schemas."""

from erd_toolkit.ddl.dialects import (
    Dialect,
    DialectOptions,
    GenerationOptions,
    parse_dialect,
)
from erd_toolkit.ddl.generator import (
    EMPTY_SELECTION,
    generate_ddl,
    generate_for_selection,
)
from erd_toolkit.ddl.sql_utils import (
    drop_statement,
    foreign_key_constraint,
    map_type,
    quote_identifier,
)
from erd_toolkit.ddl.sqlalchemy_export import schema_to_metadata, sorted_table_ids

__all__ = [
    "EMPTY_SELECTION",
    "Dialect",
    "DialectOptions",
    "GenerationOptions",
    "drop_statement",
    "foreign_key_constraint",
    "generate_ddl",
    "generate_for_selection",
    "map_type",
    "parse_dialect",
    "quote_identifier",
    "schema_to_metadata",
    "sorted_table_ids",
]
