"""Identifier and name generation for model objects."""

from collections.abc import Iterable
from uuid import uuid4


def new_id(prefix: str) -> str:
    """Generate a unique id such as ``col-1f0c9e2a5b7d``."""
    return f"{prefix}-{uuid4().hex[:12]}"


def table_id() -> str:
    """Generate a table id."""
    return new_id("node")


def column_id() -> str:
    """Generate a column id."""
    return new_id("col")


def relationship_id() -> str:
    """Generate a relationship id."""
    return new_id("rel")


def unique_name(base: str, existing: Iterable[str]) -> str:
    """Return base, or base suffixed with the first free counter."""
    taken = set(existing)
    if base not in taken:
        return base
    counter = 2
    while f"{base}_{counter}" in taken:
        counter += 1
    return f"{base}_{counter}"


def foreign_key_column_name(physical_table_name: str) -> str:
    """Derive the foreign key column name pointing at a table."""
    return f"{physical_table_name.lower().replace('-', '_')}_id"
