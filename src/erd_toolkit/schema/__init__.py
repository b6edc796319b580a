"""Relational model and persisted documents.

The consistency engine lives in ``erd_toolkit.schema.engine``; it depends on
the DDL and diagram packages, which in turn import the model from here.
"""

from erd_toolkit.schema.document import (
    SchemaDocumentError,
    dump_document,
    parse_document,
    read_document,
    write_document,
)
from erd_toolkit.schema.types import (
    Column,
    DataType,
    Edge,
    ReferentialAction,
    Relationship,
    RelationshipType,
    SchemaDocument,
    Table,
)

__all__ = [
    "Column",
    "DataType",
    "Edge",
    "ReferentialAction",
    "Relationship",
    "RelationshipType",
    "SchemaDocument",
    "SchemaDocumentError",
    "Table",
    "dump_document",
    "parse_document",
    "read_document",
    "write_document",
]
