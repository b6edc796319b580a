"""TypedDict schemas for the entity-relationship design model."""

from __future__ import annotations

from enum import StrEnum
from typing import Literal, NotRequired, TypedDict


class DataType(StrEnum):
    """Abstract column types, independent of any SQL dialect."""

    INT = "int"
    FLOAT = "float"
    DECIMAL = "decimal"
    VARCHAR = "varchar"
    CHAR = "char"
    TEXT = "text"
    DATE = "date"
    DATETIME = "datetime"
    BOOLEAN = "boolean"


class RelationshipType(StrEnum):
    """Cardinality of a relationship between two tables."""

    ONE_TO_ONE = "ONE_TO_ONE"
    ONE_TO_MANY = "ONE_TO_MANY"
    MANY_TO_ONE = "MANY_TO_ONE"
    MANY_TO_MANY = "MANY_TO_MANY"


class ReferentialAction(StrEnum):
    """Action taken on the child rows when a referenced row changes."""

    CASCADE = "CASCADE"
    SET_NULL = "SET NULL"
    RESTRICT = "RESTRICT"
    NO_ACTION = "NO ACTION"


class TypeOptions(TypedDict, total=False):
    """Length for character types, precision and scale for decimals."""

    length: int
    precision: int
    scale: int


class ForeignKeyReference(TypedDict):
    """Column this foreign key points to."""

    table_id: str
    column_id: str


type DefaultValue = str | int | float | bool | None


class ColumnConstraints(TypedDict, total=False):
    """Constraints attached to a single column."""

    is_primary_key: bool
    is_unique: bool
    is_not_null: bool
    default_value: DefaultValue
    check: str
    foreign_key: ForeignKeyReference


class Column(TypedDict):
    """Schema for a table column."""

    id: str  # Unique across the whole model
    logical_name: str
    physical_name: str
    data_type: DataType
    order: int
    constraints: ColumnConstraints
    type_options: NotRequired[TypeOptions]
    description: NotRequired[str]


class Position(TypedDict):
    """Canvas position, layout only."""

    x: float
    y: float


class Table(TypedDict):
    """Schema for a designed table."""

    id: str
    logical_name: str
    physical_name: str
    columns: list[Column]
    position: Position
    color: NotRequired[str]
    description: NotRequired[str]


class JunctionTable(TypedDict):
    """Associative table realizing a many-to-many relationship."""

    table_id: str
    source_column_ids: list[str]
    target_column_ids: list[str]


class Relationship(TypedDict):
    """Directed association between the key columns of two tables.

    The source side is the referenced (parent) table, the target side holds
    the foreign key columns. Column id lists are paired by position.
    """

    id: str
    name: str
    type: RelationshipType
    source_table_id: str
    source_column_ids: list[str]
    target_table_id: str
    target_column_ids: list[str]
    source_handle: NotRequired[str | None]
    target_handle: NotRequired[str | None]
    junction_table: NotRequired[JunctionTable]
    on_delete: NotRequired[ReferentialAction]
    on_update: NotRequired[ReferentialAction]
    description: NotRequired[str]


class EdgeData(TypedDict):
    """Payload carried by a diagram edge."""

    relationship: Relationship


class Edge(TypedDict):
    """Diagram edge derived from a relationship."""

    id: str
    source: str  # Table ids
    target: str
    source_handle: str | None
    target_handle: str | None
    type: Literal["deletableEdge"]
    data: EdgeData


class DocumentMetadata(TypedDict):
    """Metadata stored alongside a persisted design."""

    name: str
    description: str
    created_at: str
    last_modified: str
    version: str


class SchemaDocument(TypedDict):
    """Root of a persisted design."""

    metadata: DocumentMetadata
    nodes: list[Table]
    relationships: list[Relationship]
