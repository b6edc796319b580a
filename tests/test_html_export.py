"""Tests for the HTML overview export."""

import json
import re

from erd_toolkit.diagram import schema_to_html
from erd_toolkit.schema.types import Relationship, Table


def test_schema_to_html(
    customers: Table,
    orders: Table,
    placed_orders: Relationship,
) -> None:
    """Test that tables, columns and relationships are rendered."""
    html = schema_to_html([customers, orders], [placed_orders], "Shop")

    assert "<title>Shop</title>" in html
    assert "2 tables, 1 relationships" in html
    assert 'id="t-customers"' in html
    assert '<span class="name">customer_id</span>' in html
    assert "<td>Customers-Orders</td>" in html
    assert "<td>ONE_TO_MANY</td>" in html


def test_embedded_diagram_json(
    customers: Table,
    orders: Table,
    placed_orders: Relationship,
) -> None:
    """Test that nodes and edges are embedded as JSON."""
    html = schema_to_html([customers, orders], [placed_orders])

    match = re.search(
        r'<script id="diagram-data" type="application/json">(.*?)</script>',
        html,
        re.DOTALL,
    )
    assert match is not None
    diagram = json.loads(match.group(1))
    assert [node["id"] for node in diagram["nodes"]] == ["t-customers", "t-orders"]
    assert [edge["id"] for edge in diagram["edges"]] == ["r-placed"]


def test_names_are_escaped(customers: Table) -> None:
    """Test that markup in names is escaped."""
    customers["logical_name"] = "<b>Customers</b>"

    html = schema_to_html([customers], [])

    assert "&lt;b&gt;Customers&lt;/b&gt;" in html
    assert "<b>Customers</b>" not in html
