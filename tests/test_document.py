"""Tests for reading and writing persisted designs."""

import json
from pathlib import Path

import pytest

from erd_toolkit.schema import (
    SchemaDocumentError,
    dump_document,
    parse_document,
    read_document,
    write_document,
)
from erd_toolkit.schema.types import (
    DataType,
    DocumentMetadata,
    ReferentialAction,
    Relationship,
    RelationshipType,
    Table,
)


@pytest.fixture(name="metadata")
def document_metadata() -> DocumentMetadata:
    """Create metadata of an existing document."""
    return {
        "name": "Shop",
        "description": "Orders and customers",
        "created_at": "2024-01-01T00:00:00+00:00",
        "last_modified": "2024-01-01T00:00:00+00:00",
        "version": "1.0",
    }


def test_dump_uses_camel_case_nodes(
    customers: Table,
    orders: Table,
    placed_orders: Relationship,
    metadata: DocumentMetadata,
) -> None:
    """Test that tables are stored as diagram nodes with camelCase keys."""
    raw = json.loads(dump_document([customers, orders], [placed_orders], metadata))

    node = raw["nodes"][1]
    assert node["id"] == "t-orders"
    assert node["type"] == "SchemaNode"
    assert node["position"] == {"x": 500, "y": 100}
    assert node["data"]["physicalName"] == "orders"
    foreign_key = node["data"]["columns"][1]
    assert foreign_key["dataType"] == "int"
    assert foreign_key["constraints"] == {
        "isNotNull": True,
        "foreignKey": {"tableId": "t-customers", "columnId": "c-customers-id"},
    }
    assert raw["relationships"][0]["sourceTableId"] == "t-customers"
    assert raw["relationships"][0]["onDelete"] == "CASCADE"


def test_dump_stamps_last_modified(
    customers: Table,
    metadata: DocumentMetadata,
) -> None:
    """Test that dumping keeps createdAt and refreshes lastModified."""
    raw = json.loads(dump_document([customers], [], metadata))

    assert raw["metadata"]["name"] == "Shop"
    assert raw["metadata"]["createdAt"] == "2024-01-01T00:00:00+00:00"
    assert raw["metadata"]["lastModified"] != "2024-01-01T00:00:00+00:00"
    assert raw["metadata"]["version"] == "1.0"


def test_write_then_read(
    tmp_path: Path,
    customers: Table,
    orders: Table,
    placed_orders: Relationship,
) -> None:
    """Test that a written document reads back to the same model."""
    path = tmp_path / "shop.scst"

    write_document(path, [customers, orders], [placed_orders])
    document = read_document(path)

    assert document["nodes"] == [customers, orders]
    assert document["relationships"] == [placed_orders]


def test_parse_backfills_missing_fields() -> None:
    """Test that sparse documents are completed with defaults."""
    document = parse_document(
        json.dumps(
            {
                "nodes": [
                    {
                        "data": {
                            "physicalName": "users",
                            "columns": [
                                {"physicalName": "id"},
                                {"logicalName": "E-mail", "dataType": "varchar"},
                            ],
                        },
                    },
                    {"id": "t-empty"},
                ],
                "relationships": [{"sourceTableId": "a", "targetTableId": "b"}],
            },
        ),
    )

    users, empty = document["nodes"]
    assert users["id"].startswith("node-")
    assert users["logical_name"] == "Restored Table"
    assert users["position"] == {"x": 0, "y": 0}
    first, second = users["columns"]
    assert first["id"].startswith("col-")
    assert first["logical_name"] == "id"
    assert first["data_type"] == DataType.INT
    assert first["constraints"] == {}
    assert (second["physical_name"], second["order"]) == ("E-mail", 1)
    assert second["data_type"] == DataType.VARCHAR

    assert empty["id"] == "t-empty"
    assert empty["physical_name"] == "restored_table"
    assert empty["columns"] == []

    (relationship,) = document["relationships"]
    assert relationship["id"].startswith("rel-")
    assert relationship["type"] == RelationshipType.ONE_TO_MANY
    assert relationship["source_column_ids"] == []
    assert relationship["target_column_ids"] == []

    assert document["metadata"]["version"] == "1.0"
    assert document["metadata"]["created_at"]


def test_parse_relationship_options() -> None:
    """Test that actions, handles and junction tables are decoded."""
    document = parse_document(
        json.dumps(
            {
                "nodes": [],
                "relationships": [
                    {
                        "id": "r-tags",
                        "type": "MANY_TO_MANY",
                        "onDelete": "SET NULL",
                        "sourceHandle": "right",
                        "junctionTable": {
                            "tableId": "t-link",
                            "sourceColumnIds": ["c-a"],
                            "targetColumnIds": ["c-b"],
                        },
                    },
                ],
            },
        ),
    )

    (relationship,) = document["relationships"]
    assert relationship["type"] == RelationshipType.MANY_TO_MANY
    assert relationship["on_delete"] == ReferentialAction.SET_NULL
    assert relationship["source_handle"] == "right"
    assert relationship["junction_table"] == {
        "table_id": "t-link",
        "source_column_ids": ["c-a"],
        "target_column_ids": ["c-b"],
    }


def test_parse_non_list_relationships() -> None:
    """Test that relationships which are not a list are treated as empty."""
    document = parse_document('{"nodes": [], "relationships": {"a": 1}}')

    assert document["relationships"] == []


@pytest.mark.parametrize(
    ("content", "message"),
    [
        ("{not json", "Invalid schema document"),
        ("[]", "root must be an object"),
        ("{}", "nodes must be a list"),
        ('{"nodes": {"id": "t"}}', "nodes must be a list"),
        ('{"nodes": [1]}', "node must be an object"),
        (
            '{"nodes": [{"data": {"columns": [{"dataType": "money"}]}}]}',
            "unknown data type",
        ),
        ('{"nodes": [], "relationships": [{"type": "SOME"}]}', "relationship type"),
        ('{"nodes": [{"position": {"x": "left"}}]}', "position x must be a number"),
        ('{"nodes": [{"position": {"x": 0, "y": [1]}}]}', "position y must be a number"),
        (
            '{"nodes": [{"data": {"columns": [{"typeOptions": {"length": "long"}}]}}]}',
            "length must be a number",
        ),
    ],
)
def test_parse_rejects_malformed(content: str, message: str) -> None:
    """Test that malformed documents raise a document error."""
    with pytest.raises(SchemaDocumentError, match=message):
        parse_document(content)


def test_document_error_is_value_error() -> None:
    """Test that document errors can be handled as value errors."""
    with pytest.raises(ValueError, match="nodes must be a list"):
        parse_document('{"nodes": null}')


def test_parse_null_position_defaults_to_origin() -> None:
    """Test that null coordinates are restored as zero."""
    document = parse_document('{"nodes": [{"position": {"x": null, "y": 40}}]}')

    (table,) = document["nodes"]
    assert table["position"] == {"x": 0, "y": 40}
