"""Reading and writing persisted designs (``.scst`` JSON documents).

Documents use camelCase keys and store tables as diagram nodes::

    {
        "metadata": {"name": ..., "createdAt": ..., "version": "1.0"},
        "nodes": [{"id": ..., "type": "SchemaNode", "position": ..., "data": {...}}],
        "relationships": [{"id": ..., "sourceTableId": ..., ...}]
    }

Older or hand-edited documents are backfilled with ids, names and empty
constraints so they always load as a structurally valid model. Anything that
cannot be repaired raises ``SchemaDocumentError``.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from logging import getLogger
from pathlib import Path
from typing import Any

from erd_toolkit.schema import identifiers
from erd_toolkit.schema.types import (
    Column,
    ColumnConstraints,
    DataType,
    DocumentMetadata,
    JunctionTable,
    ReferentialAction,
    Relationship,
    RelationshipType,
    SchemaDocument,
    Table,
    TypeOptions,
)

logger = getLogger(__name__)

DOCUMENT_VERSION = "1.0"
DOCUMENT_SUFFIX = ".scst"
NODE_TYPE = "SchemaNode"
DEFAULT_DOCUMENT_NAME = "Imported schema"
RESTORED_LOGICAL_NAME = "Restored Table"
RESTORED_PHYSICAL_NAME = "restored_table"

type JSONObject = dict[str, Any]


class SchemaDocumentError(ValueError):
    """Raised when a persisted design is malformed beyond repair."""


def _now() -> str:
    return datetime.now(UTC).isoformat()


def _enum[E: (DataType, RelationshipType, ReferentialAction)](
    enum_type: type[E],
    value: object,
    what: str,
) -> E:
    """Convert a stored value to an enum member, rejecting unknown values."""
    try:
        return enum_type(value)
    except ValueError as err:
        msg = f"Invalid schema document: unknown {what} {value!r}"
        raise SchemaDocumentError(msg) from err


def _number[N: (int, float)](number_type: type[N], value: object, what: str) -> N:
    """Convert a stored number, rejecting values that are not numeric."""
    try:
        return number_type(value)  # pyright: ignore[reportArgumentType]
    except (TypeError, ValueError) as err:
        msg = f"Invalid schema document: {what} must be a number, got {value!r}"
        raise SchemaDocumentError(msg) from err


def _id_list(value: object) -> list[str]:
    return [str(item) for item in value] if isinstance(value, list) else []


# Decoding


def _decode_constraints(raw: object) -> ColumnConstraints:
    """Decode column constraints, keeping only known keys."""
    if not isinstance(raw, dict):
        return {}

    constraints: ColumnConstraints = {}
    if "isPrimaryKey" in raw:
        constraints["is_primary_key"] = bool(raw["isPrimaryKey"])
    if "isUnique" in raw:
        constraints["is_unique"] = bool(raw["isUnique"])
    if "isNotNull" in raw:
        constraints["is_not_null"] = bool(raw["isNotNull"])
    if "defaultValue" in raw:
        constraints["default_value"] = raw["defaultValue"]
    if raw.get("check"):
        constraints["check"] = str(raw["check"])
    if isinstance(foreign_key := raw.get("foreignKey"), dict) and (
        foreign_key.get("tableId") and foreign_key.get("columnId")
    ):
        constraints["foreign_key"] = {
            "table_id": str(foreign_key["tableId"]),
            "column_id": str(foreign_key["columnId"]),
        }
    return constraints


def _decode_column(raw: JSONObject, index: int) -> Column:
    """Decode a column, backfilling id, names, type and order."""
    physical_name = raw.get("physicalName") or raw.get("logicalName") or f"column_{index + 1}"
    column: Column = {
        "id": str(raw.get("id") or identifiers.column_id()),
        "logical_name": raw.get("logicalName") or physical_name,
        "physical_name": physical_name,
        "data_type": _enum(DataType, raw.get("dataType") or DataType.INT, "data type"),
        "order": raw["order"] if isinstance(raw.get("order"), int) else index,
        "constraints": _decode_constraints(raw.get("constraints")),
    }
    if isinstance(type_options := raw.get("typeOptions"), dict):
        column["type_options"] = TypeOptions(
            **{
                key: _number(int, value, key)
                for key, value in type_options.items()
                if key in ("length", "precision", "scale") and value is not None
            },
        )
    if description := raw.get("description"):
        column["description"] = str(description)
    return column


def _decode_table(raw: object) -> Table:
    """Decode a diagram node into a table."""
    if not isinstance(raw, dict):
        msg = f"Invalid schema document: node must be an object, got {type(raw).__name__}"
        raise SchemaDocumentError(msg)

    node_id = str(raw.get("id") or identifiers.table_id())
    data = raw.get("data")
    if not isinstance(data, dict):
        logger.warning("Node %s has no data, restoring an empty table", node_id)
        data = {}

    raw_columns = data.get("columns")
    columns = raw_columns if isinstance(raw_columns, list) else []
    position = raw.get("position") if isinstance(raw.get("position"), dict) else {}

    table: Table = {
        "id": node_id,
        "logical_name": data.get("logicalName") or RESTORED_LOGICAL_NAME,
        "physical_name": data.get("physicalName") or RESTORED_PHYSICAL_NAME,
        "columns": [
            _decode_column(column, index)
            for index, column in enumerate(columns)
            if isinstance(column, dict)
        ],
        "position": {
            "x": _number(float, position.get("x") or 0, "position x"),
            "y": _number(float, position.get("y") or 0, "position y"),
        },
    }
    if color := data.get("color"):
        table["color"] = str(color)
    if description := data.get("description"):
        table["description"] = str(description)
    return table


def _decode_relationship(raw: object) -> Relationship:
    """Decode a relationship, backfilling id, name, type and column lists."""
    if not isinstance(raw, dict):
        msg = (
            "Invalid schema document: relationship must be an object, "
            f"got {type(raw).__name__}"
        )
        raise SchemaDocumentError(msg)

    relationship: Relationship = {
        "id": str(raw.get("id") or identifiers.relationship_id()),
        "name": str(raw.get("name") or ""),
        "type": _enum(
            RelationshipType,
            raw.get("type") or RelationshipType.ONE_TO_MANY,
            "relationship type",
        ),
        "source_table_id": str(raw.get("sourceTableId") or ""),
        "source_column_ids": _id_list(raw.get("sourceColumnIds")),
        "target_table_id": str(raw.get("targetTableId") or ""),
        "target_column_ids": _id_list(raw.get("targetColumnIds")),
    }
    if raw.get("sourceHandle"):
        relationship["source_handle"] = str(raw["sourceHandle"])
    if raw.get("targetHandle"):
        relationship["target_handle"] = str(raw["targetHandle"])
    if raw.get("onDelete"):
        relationship["on_delete"] = _enum(
            ReferentialAction,
            raw["onDelete"],
            "referential action",
        )
    if raw.get("onUpdate"):
        relationship["on_update"] = _enum(
            ReferentialAction,
            raw["onUpdate"],
            "referential action",
        )
    if isinstance(junction := raw.get("junctionTable"), dict):
        relationship["junction_table"] = JunctionTable(
            table_id=str(junction.get("tableId") or ""),
            source_column_ids=_id_list(junction.get("sourceColumnIds")),
            target_column_ids=_id_list(junction.get("targetColumnIds")),
        )
    if description := raw.get("description"):
        relationship["description"] = str(description)
    return relationship


def _decode_metadata(raw: object) -> DocumentMetadata:
    metadata = raw if isinstance(raw, dict) else {}
    now = _now()
    return {
        "name": str(metadata.get("name") or DEFAULT_DOCUMENT_NAME),
        "description": str(metadata.get("description") or ""),
        "created_at": str(metadata.get("createdAt") or now),
        "last_modified": str(metadata.get("lastModified") or now),
        "version": str(metadata.get("version") or DOCUMENT_VERSION),
    }


def decode_document(raw: object) -> SchemaDocument:
    """Decode an already parsed JSON value into a schema document."""
    if not isinstance(raw, dict):
        msg = "Invalid schema document: root must be an object"
        raise SchemaDocumentError(msg)

    nodes = raw.get("nodes")
    if not isinstance(nodes, list):
        msg = "Invalid schema document: nodes must be a list"
        raise SchemaDocumentError(msg)

    relationships = raw.get("relationships")
    if not isinstance(relationships, list):
        if relationships is not None:
            logger.warning("Ignoring relationships that are not a list")
        relationships = []

    return {
        "metadata": _decode_metadata(raw.get("metadata")),
        "nodes": [_decode_table(node) for node in nodes],
        "relationships": [_decode_relationship(rel) for rel in relationships],
    }


def parse_document(content: str | bytes) -> SchemaDocument:
    """Parse document text into a schema document."""
    try:
        raw = json.loads(content)
    except json.JSONDecodeError as err:
        msg = f"Invalid schema document: {err}"
        raise SchemaDocumentError(msg) from err
    return decode_document(raw)


def read_document(path: Path) -> SchemaDocument:
    """Read and parse a document file."""
    return parse_document(path.read_bytes())


# Encoding


def _encode_constraints(constraints: ColumnConstraints) -> JSONObject:
    names = {
        "is_primary_key": "isPrimaryKey",
        "is_unique": "isUnique",
        "is_not_null": "isNotNull",
        "default_value": "defaultValue",
        "check": "check",
    }
    encoded: JSONObject = {
        names[key]: value for key, value in constraints.items() if key in names
    }
    if foreign_key := constraints.get("foreign_key"):
        encoded["foreignKey"] = {
            "tableId": foreign_key["table_id"],
            "columnId": foreign_key["column_id"],
        }
    return encoded


def _encode_column(column: Column) -> JSONObject:
    encoded: JSONObject = {
        "id": column["id"],
        "logicalName": column["logical_name"],
        "physicalName": column["physical_name"],
        "dataType": str(column["data_type"]),
        "order": column["order"],
        "constraints": _encode_constraints(column["constraints"]),
    }
    if type_options := column.get("type_options"):
        encoded["typeOptions"] = dict(type_options)
    if description := column.get("description"):
        encoded["description"] = description
    return encoded


def _encode_table(table: Table) -> JSONObject:
    data: JSONObject = {
        "id": table["id"],
        "logicalName": table["logical_name"],
        "physicalName": table["physical_name"],
        "color": table.get("color", ""),
        "columns": [_encode_column(column) for column in table["columns"]],
    }
    if description := table.get("description"):
        data["description"] = description
    return {
        "id": table["id"],
        "type": NODE_TYPE,
        "position": dict(table["position"]),
        "data": data,
    }


def _encode_relationship(relationship: Relationship) -> JSONObject:
    encoded: JSONObject = {
        "id": relationship["id"],
        "name": relationship["name"],
        "type": str(relationship["type"]),
        "sourceTableId": relationship["source_table_id"],
        "sourceColumnIds": list(relationship["source_column_ids"]),
        "targetTableId": relationship["target_table_id"],
        "targetColumnIds": list(relationship["target_column_ids"]),
    }
    optional = (
        ("source_handle", "sourceHandle"),
        ("target_handle", "targetHandle"),
        ("on_delete", "onDelete"),
        ("on_update", "onUpdate"),
        ("description", "description"),
    )
    for source, target in optional:
        if value := relationship.get(source):
            encoded[target] = str(value)
    if junction := relationship.get("junction_table"):
        encoded["junctionTable"] = {
            "tableId": junction["table_id"],
            "sourceColumnIds": list(junction["source_column_ids"]),
            "targetColumnIds": list(junction["target_column_ids"]),
        }
    return encoded


def dump_document(
    tables: list[Table],
    relationships: list[Relationship],
    metadata: DocumentMetadata | None = None,
) -> str:
    """Serialize a design, stamping its last modification time."""
    now = _now()
    stored = metadata or {
        "name": DEFAULT_DOCUMENT_NAME,
        "description": "",
        "created_at": now,
        "last_modified": now,
        "version": DOCUMENT_VERSION,
    }
    document = {
        "metadata": {
            "name": stored["name"],
            "description": stored["description"],
            "createdAt": stored["created_at"] or now,
            "lastModified": now,
            "version": DOCUMENT_VERSION,
        },
        "nodes": [_encode_table(table) for table in tables],
        "relationships": [_encode_relationship(rel) for rel in relationships],
    }
    return json.dumps(document, indent=2, ensure_ascii=False)


def write_document(
    path: Path,
    tables: list[Table],
    relationships: list[Relationship],
    metadata: DocumentMetadata | None = None,
) -> None:
    """Write a design to a document file."""
    path.write_text(dump_document(tables, relationships, metadata), encoding="utf-8")
