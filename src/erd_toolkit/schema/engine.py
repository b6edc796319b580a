"""Consistency engine owning the canonical in-memory design.

All mutations go through ``SchemaEngine``. Each one either completes, keeping
foreign keys, relationships and diagram edges consistent, or is a logged
no-op when its pre-conditions are not met.
"""

from __future__ import annotations

from collections.abc import Callable, Collection, Iterable, Mapping, Sequence
from copy import deepcopy
from logging import getLogger
from typing import Any, cast

from erd_toolkit.ddl.dialects import GenerationOptions
from erd_toolkit.ddl.generator import generate_for_selection
from erd_toolkit.diagram.edges import edge_relationship_id, relationships_to_edges
from erd_toolkit.schema import identifiers
from erd_toolkit.schema.types import (
    Column,
    DataType,
    Edge,
    ForeignKeyReference,
    Position,
    ReferentialAction,
    Relationship,
    RelationshipType,
    Table,
)

logger = getLogger(__name__)

type Listener = Callable[[SchemaEngine], None]

# Layout of synthesized tables
FIRST_X = 100
FIRST_Y = 100
HORIZONTAL_SPACING = 400
VERTICAL_SPACING = 400
ESTIMATED_VIEWPORT_WIDTH = 1500
CLONE_OFFSET_X = 300
CLONE_OFFSET_Y = 350

DEFAULT_TABLE_LOGICAL_NAME = "New Table"
DEFAULT_TABLE_PHYSICAL_NAME = "new_table"
DEFAULT_COLUMN_LOGICAL_NAME = "New Column"
DEFAULT_COLUMN_PHYSICAL_NAME = "new_column"
COPY_SUFFIX = "-copy"
MIN_TABLES_FOR_RELATIONSHIP = 2

# Header colors handed to synthesized tables in turn
TABLE_COLORS = (
    "red",
    "orange",
    "gold",
    "yellowgreen",
    "green",
    "seagreen",
    "teal",
    "darkcyan",
    "skyblue",
    "blue",
    "indigo",
    "violet",
    "purple",
    "deeppink",
)


def primary_key_or_first(table: Table) -> Column | None:
    """Return the table's first primary key column, else its first column."""
    columns = table["columns"]
    return next(
        (column for column in columns if column["constraints"].get("is_primary_key")),
        columns[0] if columns else None,
    )


def relationship_table_ids(relationship: Relationship) -> set[str]:
    """Ids of every table a relationship touches, junction table included."""
    table_ids = {relationship["source_table_id"], relationship["target_table_id"]}
    if junction := relationship.get("junction_table"):
        table_ids.add(junction["table_id"])
    return table_ids


def relationship_columns(relationship: Relationship) -> set[tuple[str, str]]:
    """(table id, column id) of every column a relationship maps, junction included."""
    source_id = relationship["source_table_id"]
    target_id = relationship["target_table_id"]
    columns = {(source_id, column_id) for column_id in relationship["source_column_ids"]}
    columns.update((target_id, column_id) for column_id in relationship["target_column_ids"])
    if junction := relationship.get("junction_table"):
        columns.update(
            (junction["table_id"], column_id)
            for column_id in (*junction["source_column_ids"], *junction["target_column_ids"])
        )
    return columns


def restamp_orders(columns: Iterable[Column]) -> list[Column]:
    """Set each column's order to its index."""
    restamped = list(columns)
    for order, column in enumerate(restamped):
        column["order"] = order
    return restamped


class SchemaEngine:
    """Owns tables, relationships, the derived edge list and selection state."""

    def __init__(
        self,
        tables: Iterable[Table] = (),
        relationships: Iterable[Relationship] = (),
    ) -> None:
        """Initialize the engine, optionally loading an existing design."""
        self._tables: dict[str, Table] = {}
        self._relationships: list[Relationship] = []
        self._edges: list[Edge] = []
        self._listeners: list[Listener] = []
        self._selected_table_id: str | None = None
        self._selected_column_id: str | None = None
        self._selected_relationship_id: str | None = None
        self.load(tables, relationships)

    # Observers

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call listener after every completed change; returns an unsubscriber."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(self, *, relationships_changed: bool = False) -> None:
        """Rebuild derived state and notify listeners once."""
        if relationships_changed:
            self._edges = relationships_to_edges(self._relationships)
        for listener in list(self._listeners):
            listener(self)

    # Read access

    @property
    def tables(self) -> list[Table]:
        """Copies of all tables in insertion order."""
        return deepcopy(list(self._tables.values()))

    @property
    def relationships(self) -> list[Relationship]:
        """Copies of all relationships."""
        return deepcopy(self._relationships)

    @property
    def edges(self) -> list[Edge]:
        """Copies of the diagram edges derived from the relationships."""
        return deepcopy(self._edges)

    @property
    def selected_table_id(self) -> str | None:
        return self._selected_table_id

    @property
    def selected_column_id(self) -> str | None:
        return self._selected_column_id

    @property
    def selected_relationship_id(self) -> str | None:
        return self._selected_relationship_id

    def get_table(self, table_id: str) -> Table | None:
        """Return a copy of a table."""
        table = self._tables.get(table_id)
        return deepcopy(table) if table is not None else None

    def get_column(self, table_id: str, column_id: str) -> Column | None:
        """Return a copy of a column of a table."""
        column = self._column(table_id, column_id)
        return deepcopy(column) if column is not None else None

    def get_relationship(self, relationship_id: str) -> Relationship | None:
        """Return a copy of a relationship."""
        relationship = self._relationship(relationship_id)
        return deepcopy(relationship) if relationship is not None else None

    def selected_table(self) -> Table | None:
        """Return the selected table."""
        if self._selected_table_id is None:
            return None
        return self.get_table(self._selected_table_id)

    def selected_column(self) -> Column | None:
        """Return the selected column, if it belongs to the selected table."""
        if self._selected_table_id is None or self._selected_column_id is None:
            return None
        return self.get_column(self._selected_table_id, self._selected_column_id)

    def selected_relationship(self) -> Relationship | None:
        """Return the selected relationship."""
        if self._selected_relationship_id is None:
            return None
        return self.get_relationship(self._selected_relationship_id)

    def _column(self, table_id: str, column_id: str) -> Column | None:
        if (table := self._tables.get(table_id)) is None:
            return None
        return next((c for c in table["columns"] if c["id"] == column_id), None)

    def _column_owner(self, column_id: str) -> Table | None:
        """Return the table holding a column; column ids are model-wide unique."""
        return next(
            (
                table
                for table in self._tables.values()
                if any(column["id"] == column_id for column in table["columns"])
            ),
            None,
        )

    def _relationship(self, relationship_id: str) -> Relationship | None:
        return next(
            (r for r in self._relationships if r["id"] == relationship_id),
            None,
        )

    def _column_ids(self) -> set[str]:
        return {
            column["id"] for table in self._tables.values() for column in table["columns"]
        }

    # Tables

    def _next_position(self) -> Position:
        """Place right of the rightmost table, wrapping past the viewport width."""
        if not self._tables:
            return {"x": FIRST_X, "y": FIRST_Y}

        positions = [table["position"] for table in self._tables.values()]
        x = max(position["x"] for position in positions) + HORIZONTAL_SPACING
        y = max(position["y"] for position in positions)
        if x > ESTIMATED_VIEWPORT_WIDTH:
            return {"x": FIRST_X, "y": y + VERTICAL_SPACING}
        return {"x": x, "y": y}

    def _default_table(self) -> Table:
        """Synthesize a table with a single integer primary key column."""
        physical_name = identifiers.unique_name(
            DEFAULT_TABLE_PHYSICAL_NAME,
            (table["physical_name"] for table in self._tables.values()),
        )
        return {
            "id": identifiers.table_id(),
            "logical_name": DEFAULT_TABLE_LOGICAL_NAME,
            "physical_name": physical_name,
            "columns": [
                {
                    "id": identifiers.column_id(),
                    "logical_name": "ID",
                    "physical_name": "id",
                    "data_type": DataType.INT,
                    "order": 0,
                    "constraints": {"is_primary_key": True, "is_not_null": True},
                },
            ],
            "position": self._next_position(),
            "color": TABLE_COLORS[len(self._tables) % len(TABLE_COLORS)],
        }

    def add_table(self, table: Table | None = None) -> str:
        """Add a table, or a default one, and select it."""
        if table is None:
            new_table = self._default_table()
        else:
            new_table = deepcopy(table)
            if not new_table.get("id") or new_table["id"] in self._tables:
                new_table["id"] = identifiers.table_id()
            new_table.setdefault("position", self._next_position())
            taken = self._column_ids()
            for column in new_table["columns"]:
                if not column.get("id") or column["id"] in taken:
                    column["id"] = identifiers.column_id()
                taken.add(column["id"])

        self._tables[new_table["id"]] = new_table
        logger.debug("Added table %s", new_table["id"])
        self._select_table(new_table["id"])
        self._commit()
        return new_table["id"]

    def _strip_foreign_keys(
        self,
        predicate: Callable[[ForeignKeyReference], bool],
    ) -> None:
        """Drop foreign key references matching predicate from all columns."""
        for table in self._tables.values():
            for column in table["columns"]:
                reference = column["constraints"].get("foreign_key")
                if reference is not None and predicate(reference):
                    del column["constraints"]["foreign_key"]
                    logger.debug(
                        "Dropped dangling foreign key on %s.%s",
                        table["physical_name"],
                        column["physical_name"],
                    )

    def _drop_column_references(self, table_id: str, column_ids: Collection[str]) -> None:
        """Prune relationships and foreign keys mapping the given columns of a table."""
        removed = {(table_id, column_id) for column_id in column_ids}
        self._relationships = [
            relationship
            for relationship in self._relationships
            if not relationship_columns(relationship) & removed
        ]
        self._strip_foreign_keys(
            lambda reference: (reference["table_id"], reference["column_id"]) in removed,
        )

    def _prune_selected_relationship(self) -> None:
        if self._selected_relationship_id is not None and (
            self._relationship(self._selected_relationship_id) is None
        ):
            self._selected_relationship_id = None

    def remove_table(self, table_id: str) -> None:
        """Remove a table and every relationship touching it.

        Foreign key references to the table are stripped from surviving
        columns; the columns themselves are kept.
        """
        if table_id not in self._tables:
            logger.warning("Cannot remove table %s: not found", table_id)
            return

        del self._tables[table_id]
        self._relationships = [
            relationship
            for relationship in self._relationships
            if table_id not in relationship_table_ids(relationship)
        ]
        self._strip_foreign_keys(lambda reference: reference["table_id"] == table_id)

        if self._selected_table_id == table_id:
            self._selected_table_id = None
            self._selected_column_id = None
        self._prune_selected_relationship()

        logger.debug("Removed table %s", table_id)
        self._commit(relationships_changed=True)

    def clone_table(self, table_id: str) -> str | None:
        """Copy a table without its foreign key columns and select the copy."""
        original = self._tables.get(table_id)
        if original is None:
            logger.warning("Cannot clone table %s: not found", table_id)
            return None

        clone = deepcopy(original)
        clone["id"] = identifiers.table_id()
        columns = sorted(
            (c for c in clone["columns"] if "foreign_key" not in c["constraints"]),
            key=lambda column: column["order"],
        )
        for column in columns:
            column["id"] = identifiers.column_id()
        clone["columns"] = restamp_orders(columns)
        clone["position"] = {
            "x": original["position"]["x"] + CLONE_OFFSET_X,
            "y": original["position"]["y"] + CLONE_OFFSET_Y,
        }
        clone["logical_name"] = f"{original['logical_name']}{COPY_SUFFIX}"
        clone["physical_name"] = f"{original['physical_name']}{COPY_SUFFIX}"

        self._tables[clone["id"]] = clone
        logger.debug("Cloned table %s as %s", table_id, clone["id"])
        self._select_table(clone["id"])
        self._commit()
        return clone["id"]

    def update_table(self, table_id: str, data: Mapping[str, Any]) -> None:
        """Merge data into a table; the id cannot change.

        A new column list is re-stamped in the given order, and relationships
        or foreign keys mapping columns it no longer holds are pruned.
        """
        table = self._tables.get(table_id)
        if table is None:
            logger.warning("Cannot update table %s: not found", table_id)
            return

        changes = {key: value for key, value in deepcopy(dict(data)).items() if key != "id"}
        columns: list[Column] | None = changes.pop("columns", None)
        table.update(changes)
        if columns is None:
            self._commit()
            return

        previous = {column["id"] for column in table["columns"]}
        taken = self._column_ids() - previous
        for column in columns:
            if not column.get("id") or column["id"] in taken:
                column["id"] = identifiers.column_id()
            taken.add(column["id"])
        table["columns"] = restamp_orders(columns)

        if removed := previous - {column["id"] for column in columns}:
            logger.debug("Columns %s dropped from table %s", sorted(removed), table_id)
            self._drop_column_references(table_id, removed)
        if self._selected_column_id in removed:
            self._selected_column_id = columns[0]["id"] if columns else None
        self._prune_selected_relationship()
        self._commit(relationships_changed=True)

    # Columns

    def add_column(self, table_id: str) -> str | None:
        """Append a default integer column to a table and select it."""
        table = self._tables.get(table_id)
        if table is None:
            logger.warning("Cannot add column to table %s: not found", table_id)
            return None

        columns = table["columns"]
        column: Column = {
            "id": identifiers.column_id(),
            "logical_name": DEFAULT_COLUMN_LOGICAL_NAME,
            "physical_name": identifiers.unique_name(
                DEFAULT_COLUMN_PHYSICAL_NAME,
                (c["physical_name"] for c in columns),
            ),
            "data_type": DataType.INT,
            "order": len(columns),
            "constraints": {},
        }
        columns.append(column)

        self._selected_table_id = table_id
        self._selected_column_id = column["id"]
        self._commit()
        return column["id"]

    def remove_column(self, table_id: str, column_id: str) -> None:
        """Remove a column and every relationship mapping it."""
        table = self._tables.get(table_id)
        if table is None or self._column(table_id, column_id) is None:
            logger.warning("Cannot remove column %s from %s: not found", column_id, table_id)
            return

        table["columns"] = restamp_orders(
            column for column in table["columns"] if column["id"] != column_id
        )
        self._drop_column_references(table_id, [column_id])

        if self._selected_column_id == column_id:
            columns = table["columns"]
            self._selected_column_id = columns[0]["id"] if columns else None
        self._prune_selected_relationship()

        logger.debug("Removed column %s from table %s", column_id, table_id)
        self._commit(relationships_changed=True)

    def update_column(
        self,
        table_id: str,
        column_id: str,
        data: Mapping[str, Any],
    ) -> None:
        """Merge data into a column.

        Foreign key columns keep the data type and primary key flag they were
        created with.
        """
        column = self._column(table_id, column_id)
        if column is None:
            logger.warning("Cannot update column %s of %s: not found", column_id, table_id)
            return

        changes = {key: value for key, value in deepcopy(dict(data)).items() if key != "id"}
        if "foreign_key" in column["constraints"]:
            if changes.pop("data_type", column["data_type"]) != column["data_type"]:
                logger.warning("Data type of foreign key column %s is fixed", column_id)
            if (constraints := changes.get("constraints")) is not None:
                was_key = column["constraints"].get("is_primary_key", False)
                if constraints.get("is_primary_key", False) != was_key:
                    logger.warning("Primary key flag of foreign key column %s is fixed", column_id)
                    constraints.pop("is_primary_key", None)
                    if was_key:
                        constraints["is_primary_key"] = was_key

        column.update(changes)
        self._commit()

    def update_column_orders(self, table_id: str, columns: Sequence[Column]) -> None:
        """Replace a table's columns with a reordering, re-stamping each order."""
        table = self._tables.get(table_id)
        if table is None:
            logger.warning("Cannot reorder columns of %s: not found", table_id)
            return

        current = {column["id"] for column in table["columns"]}
        if {column["id"] for column in columns} != current or len(columns) != len(current):
            logger.warning("Cannot reorder columns of %s: column set differs", table_id)
            return

        table["columns"] = restamp_orders(deepcopy(list(columns)))
        self._commit()

    # Relationships

    def _invalid_reason(self, relationship: Relationship) -> str | None:
        """Explain why a relationship cannot be part of the model, if it cannot."""
        source = self._tables.get(relationship["source_table_id"])
        target = self._tables.get(relationship["target_table_id"])
        if source is None or target is None:
            return "source or target table does not exist"

        source_ids = relationship["source_column_ids"]
        target_ids = relationship["target_column_ids"]
        if not source_ids or len(source_ids) != len(target_ids):
            return "source and target columns must be non-empty and paired"

        checks = [(source, source_ids), (target, target_ids)]
        if junction := relationship.get("junction_table"):
            if (junction_table := self._tables.get(junction["table_id"])) is None:
                return "junction table does not exist"
            checks.append(
                (
                    junction_table,
                    [*junction["source_column_ids"], *junction["target_column_ids"]],
                ),
            )

        for table, column_ids in checks:
            known = {column["id"] for column in table["columns"]}
            if missing := [c for c in column_ids if c not in known]:
                return f"unknown columns on {table['physical_name']}: {missing}"

        return None

    def _synthesize_relationship(self) -> str:
        """Relate the selected table to another table by their key columns."""
        new_id = identifiers.relationship_id()
        if len(self._tables) < MIN_TABLES_FOR_RELATIONSHIP:
            logger.warning("Cannot create relationship: at least two tables are needed")
            return new_id

        source_id = (
            self._selected_table_id
            if self._selected_table_id in self._tables
            else next(iter(self._tables))
        )
        source = self._tables[source_id]
        target = next(t for t in self._tables.values() if t["id"] != source_id)

        source_column = primary_key_or_first(source)
        target_column = next(
            (c for c in target["columns"] if "foreign_key" in c["constraints"]),
            target["columns"][0] if target["columns"] else None,
        )
        if source_column is None or target_column is None:
            logger.warning("Cannot create relationship: no usable column found")
            return new_id

        self._relationships.append(
            {
                "id": new_id,
                "name": f"{source['logical_name']}-{target['logical_name']}",
                "type": RelationshipType.ONE_TO_MANY,
                "source_table_id": source_id,
                "source_column_ids": [source_column["id"]],
                "target_table_id": target["id"],
                "target_column_ids": [target_column["id"]],
                "on_delete": ReferentialAction.CASCADE,
                "description": (
                    f"Relationship between {source['logical_name']} "
                    f"and {target['logical_name']}"
                ),
            },
        )
        self._selected_relationship_id = new_id
        self._commit(relationships_changed=True)
        return new_id

    def add_relationship(self, relationship: Relationship | None = None) -> str:
        """Add a relationship, or synthesize one from the selected table.

        Returns the relationship id even when nothing could be added.
        """
        if relationship is None:
            return self._synthesize_relationship()

        new_relationship = deepcopy(relationship)
        if not new_relationship.get("id") or self._relationship(new_relationship["id"]):
            new_relationship["id"] = identifiers.relationship_id()

        if reason := self._invalid_reason(new_relationship):
            logger.warning(
                "Relationship %s not added: %s",
                new_relationship["id"],
                reason,
            )
            return new_relationship["id"]

        self._relationships.append(new_relationship)
        self._commit(relationships_changed=True)
        return new_relationship["id"]

    def update_relationship(self, relationship_id: str, data: Mapping[str, Any]) -> None:
        """Merge data into a relationship, keeping it valid."""
        relationship = self._relationship(relationship_id)
        if relationship is None:
            logger.warning("Cannot update relationship %s: not found", relationship_id)
            return

        changes = {key: value for key, value in data.items() if key != "id"}
        updated = cast("Relationship", {**relationship, **deepcopy(changes)})
        if reason := self._invalid_reason(updated):
            logger.warning("Relationship %s not updated: %s", relationship_id, reason)
            return

        index = self._relationships.index(relationship)
        self._relationships[index] = updated
        self._commit(relationships_changed=True)

    def remove_relationship(self, relationship_id: str) -> None:
        """Remove a relationship, moving the selection to a remaining one."""
        if self._relationship(relationship_id) is None:
            logger.warning("Cannot remove relationship %s: not found", relationship_id)
            return

        self._relationships = [
            r for r in self._relationships if r["id"] != relationship_id
        ]
        if self._selected_relationship_id == relationship_id:
            self._selected_relationship_id = (
                self._relationships[0]["id"] if self._relationships else None
            )
        self._commit(relationships_changed=True)

    def remove_edge(self, edge_id: str) -> None:
        """Remove the relationship a diagram edge was derived from."""
        if self._relationship(edge_id) is None:
            edge_id = edge_relationship_id(edge_id)
        self.remove_relationship(edge_id)

    def connect_tables(
        self,
        source_table_id: str,
        target_table_id: str,
        source_handle: str | None = None,
        target_handle: str | None = None,
    ) -> str | None:
        """Relate two tables as one (source) to many (target).

        The target gets a foreign key column referencing the source's key,
        unless it already has one pointing at the source. Connecting the same
        pair again reuses that column and the existing relationship.
        """
        source = self._tables.get(source_table_id)
        target = self._tables.get(target_table_id)
        if source is None or target is None:
            logger.warning(
                "Cannot connect %s to %s: table not found",
                source_table_id,
                target_table_id,
            )
            return None

        parent_column = primary_key_or_first(source)
        if parent_column is None:
            logger.warning("Cannot connect: %s has no columns", source["physical_name"])
            return None

        logger.debug(
            "Connecting %s (parent) to %s (child)",
            source["logical_name"],
            target["logical_name"],
        )

        child_column = next(
            (
                column
                for column in target["columns"]
                if column["constraints"].get("foreign_key", {}).get("table_id")
                == source_table_id
            ),
            None,
        )
        if child_column is None:
            child_column = self._add_foreign_key_column(source, target, parent_column)
        elif existing := next(
            (
                r
                for r in self._relationships
                if r["source_table_id"] == source_table_id
                and r["target_table_id"] == target_table_id
                and r["source_column_ids"] == [parent_column["id"]]
                and r["target_column_ids"] == [child_column["id"]]
            ),
            None,
        ):
            return existing["id"]

        relationship: Relationship = {
            "id": identifiers.relationship_id(),
            "name": f"{source['logical_name']}-{target['logical_name']}",
            "type": RelationshipType.ONE_TO_MANY,
            "source_table_id": source_table_id,
            "source_column_ids": [parent_column["id"]],
            "target_table_id": target_table_id,
            "target_column_ids": [child_column["id"]],
            "on_delete": ReferentialAction.CASCADE,
            "description": (
                f"One-to-many relationship between {source['logical_name']} "
                f"(parent) and {target['logical_name']} (child)"
            ),
        }
        if source_handle:
            relationship["source_handle"] = source_handle
        if target_handle:
            relationship["target_handle"] = target_handle

        self._relationships.append(relationship)
        self._commit(relationships_changed=True)
        return relationship["id"]

    def _add_foreign_key_column(
        self,
        source: Table,
        target: Table,
        parent_column: Column,
    ) -> Column:
        """Append a NOT NULL column on target referencing the parent column."""
        column: Column = {
            "id": identifiers.column_id(),
            "logical_name": f"{source['logical_name']} ID",
            "physical_name": identifiers.unique_name(
                identifiers.foreign_key_column_name(source["physical_name"]),
                (c["physical_name"] for c in target["columns"]),
            ),
            "data_type": parent_column["data_type"],
            "order": len(target["columns"]),
            "constraints": {
                "is_not_null": True,
                "foreign_key": {
                    "table_id": source["id"],
                    "column_id": parent_column["id"],
                },
            },
        }
        if type_options := parent_column.get("type_options"):
            column["type_options"] = deepcopy(type_options)

        target["columns"].append(column)
        return column

    # Selection

    def _select_table(self, table_id: str) -> None:
        """Select a table, keeping a column selection made within it."""
        owner = (
            self._column_owner(self._selected_column_id)
            if self._selected_column_id is not None
            else None
        )
        self._selected_table_id = table_id
        if owner is None or owner["id"] != table_id:
            columns = self._tables[table_id]["columns"]
            self._selected_column_id = columns[0]["id"] if columns else None

    def select_table(self, table_id: str) -> None:
        """Select a table, defaulting the column selection to its first column."""
        if table_id not in self._tables:
            logger.warning("Cannot select table %s: not found", table_id)
            return
        self._select_table(table_id)
        self._commit()

    def select_column(self, column_id: str) -> None:
        """Select a column and the table holding it."""
        owner = self._column_owner(column_id)
        if owner is None:
            logger.warning("Cannot select column %s: not found", column_id)
            return
        self._selected_table_id = owner["id"]
        self._selected_column_id = column_id
        self._commit()

    def select_relationship(self, relationship_id: str) -> None:
        """Select a relationship."""
        if self._relationship(relationship_id) is None:
            logger.warning("Cannot select relationship %s: not found", relationship_id)
            return
        self._selected_relationship_id = relationship_id
        self._commit()

    def clear_selection(self) -> None:
        """Clear table, column and relationship selection."""
        self._selected_table_id = None
        self._selected_column_id = None
        self._selected_relationship_id = None
        self._commit()

    # Whole-model operations

    def reset(self) -> None:
        """Remove every table and relationship."""
        self._tables = {}
        self._relationships = []
        self._selected_table_id = None
        self._selected_column_id = None
        self._selected_relationship_id = None
        self._commit(relationships_changed=True)

    def load(
        self,
        tables: Iterable[Table],
        relationships: Iterable[Relationship],
    ) -> None:
        """Replace the model: all tables, then all relationships, then notify.

        Column ids repeated across the model are regenerated. Relationships and
        foreign keys referencing tables or columns that do not exist are
        pruned.
        """
        self._tables = {}
        taken: set[str] = set()
        for table in tables:
            new_table = deepcopy(table)
            if not new_table.get("id") or new_table["id"] in self._tables:
                logger.warning("Table %s has a missing or duplicate id", new_table.get("id"))
                new_table["id"] = identifiers.table_id()
            for column in new_table["columns"]:
                if not column.get("id") or column["id"] in taken:
                    logger.warning(
                        "Column %s of table %s has a missing or duplicate id",
                        column.get("id"),
                        new_table["id"],
                    )
                    column["id"] = identifiers.column_id()
                taken.add(column["id"])
            self._tables[new_table["id"]] = new_table

        def unresolved(reference: ForeignKeyReference) -> bool:
            if self._column(reference["table_id"], reference["column_id"]) is not None:
                return False
            logger.warning(
                "Foreign key to %s.%s does not resolve",
                reference["table_id"],
                reference["column_id"],
            )
            return True

        self._strip_foreign_keys(unresolved)

        self._relationships = []
        for relationship in relationships:
            new_relationship = deepcopy(relationship)
            if reason := self._invalid_reason(new_relationship):
                logger.warning(
                    "Dropped relationship %s: %s",
                    new_relationship.get("id"),
                    reason,
                )
                continue
            if not new_relationship.get("id") or self._relationship(new_relationship["id"]):
                new_relationship["id"] = identifiers.relationship_id()
            self._relationships.append(new_relationship)

        first = next(iter(self._tables.values()), None)
        self._selected_table_id = first["id"] if first else None
        self._selected_column_id = (
            first["columns"][0]["id"] if first and first["columns"] else None
        )
        self._selected_relationship_id = None
        self._commit(relationships_changed=True)

    def generate_ddl(
        self,
        table_ids: Collection[str],
        options: GenerationOptions,
    ) -> str:
        """Generate DDL for the selected tables of the current model."""
        return generate_for_selection(
            table_ids,
            self._tables.values(),
            self._relationships,
            options,
        )
