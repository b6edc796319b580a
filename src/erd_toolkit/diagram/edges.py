"""Projection of relationships onto diagram edges."""

from collections.abc import Iterable
from copy import deepcopy

from erd_toolkit.schema.types import Edge, Relationship

EDGE_TYPE = "deletableEdge"
JUNCTION_SUFFIXES = ("-source", "-target")


def _build_edge(relationship: Relationship) -> Edge:
    """Build a diagram edge from a relationship."""
    return {
        "id": relationship["id"],
        "source": relationship["source_table_id"],
        "target": relationship["target_table_id"],
        "source_handle": relationship.get("source_handle") or None,
        "target_handle": relationship.get("target_handle") or None,
        "type": EDGE_TYPE,
        "data": {"relationship": deepcopy(relationship)},
    }


def relationships_to_edges(relationships: Iterable[Relationship]) -> list[Edge]:
    """Derive the complete edge list, one edge per relationship."""
    return [_build_edge(relationship) for relationship in relationships]


def edge_relationship_id(edge_id: str) -> str:
    """Resolve the relationship id an edge id stands for.

    Junction table edges are drawn as ``<relationship>-source`` and
    ``<relationship>-target``.
    """
    for suffix in JUNCTION_SUFFIXES:
        if edge_id.endswith(suffix):
            return edge_id.removesuffix(suffix)
    return edge_id
