"""Diagram projections of a design."""

from erd_toolkit.diagram.edges import edge_relationship_id, relationships_to_edges
from erd_toolkit.diagram.html_export import schema_to_html

__all__ = [
    "edge_relationship_id",
    "relationships_to_edges",
    "schema_to_html",
]
