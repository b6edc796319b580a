"""HTML export of a design as a standalone overview page."""

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader

from erd_toolkit.diagram.edges import relationships_to_edges
from erd_toolkit.schema.types import Relationship, Table

DEFAULT_TITLE = "ER Diagram"


def _table_view(table: Table) -> dict[str, Any]:
    """Flatten a table into what the template lists per row."""
    columns = sorted(table["columns"], key=lambda column: column["order"])
    return {
        "id": table["id"],
        "logical_name": table["logical_name"],
        "physical_name": table["physical_name"],
        "color": table.get("color", ""),
        "description": table.get("description", ""),
        "columns": [
            {
                "logical_name": column["logical_name"],
                "physical_name": column["physical_name"],
                "data_type": str(column["data_type"]),
                "primary_key": column["constraints"].get("is_primary_key", False),
                "foreign_key": "foreign_key" in column["constraints"],
                "not_null": column["constraints"].get("is_not_null", False),
                "unique": column["constraints"].get("is_unique", False),
            }
            for column in columns
        ],
    }


def _relationship_view(
    relationship: Relationship,
    names: dict[str, str],
) -> dict[str, str]:
    return {
        "name": relationship["name"],
        "type": str(relationship["type"]),
        "source": names.get(relationship["source_table_id"], relationship["source_table_id"]),
        "target": names.get(relationship["target_table_id"], relationship["target_table_id"]),
        "on_delete": str(relationship.get("on_delete", "")),
    }


def schema_to_html(
    tables: Sequence[Table],
    relationships: Sequence[Relationship],
    title: str = DEFAULT_TITLE,
) -> str:
    """Create an HTML overview of tables, relationships and diagram edges."""
    template_dir = Path(__file__).parent / "templates"

    env = Environment(loader=FileSystemLoader(template_dir), autoescape=True)
    template = env.get_template("diagram.html")

    names = {table["id"]: table["physical_name"] for table in tables}
    diagram = {
        "nodes": [
            {"id": table["id"], "position": table["position"]} for table in tables
        ],
        "edges": relationships_to_edges(relationships),
    }

    css_content = (template_dir / "diagram.css").read_text()
    js_content = (template_dir / "diagram.js").read_text()

    return template.render(
        title=title,
        css_content=css_content,
        js_content=js_content,
        tables=[_table_view(table) for table in tables],
        relationships=[_relationship_view(rel, names) for rel in relationships],
        # Keep embedded JSON from closing the script element
        diagram_json=json.dumps(diagram, indent=2).replace("</", "<\\/"),
    )
