"""Command line interface for ERD Toolkit."""

import logging
import sys
from collections.abc import Iterable
from pathlib import Path

from cyclopts import App
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from erd_toolkit.config import load_config
from erd_toolkit.ddl import Dialect, GenerationOptions, parse_dialect
from erd_toolkit.diagram import schema_to_html
from erd_toolkit.schema import SchemaDocument, SchemaDocumentError, read_document
from erd_toolkit.schema.engine import SchemaEngine

app = App(help="ERD Toolkit CLI tool")

console = Console()
err_console = Console(stderr=True)

# Constants
DOCUMENT_EXTENSIONS = {".scst", ".json"}


def print_error(message: str) -> None:
    """Print error message to stderr."""
    err_console.print(f"[bold red]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print success message to stderr."""
    err_console.print(f"[bold green]✓[/] {message}")


def print_info(message: str) -> None:
    """Print info message to stderr."""
    err_console.print(f"[bold blue]i[/] {message}")


def configure_logging(*, verbose: bool) -> None:
    """Route library logging through rich when verbose output is requested."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
            force=True,
        )


def validate_document_location(document_location: Path) -> None:
    """Validate that the document exists and has a known extension."""
    if not document_location.exists():
        print_error(f"Document does not exist: {document_location}")
        sys.exit(1)
    if document_location.suffix.lower() not in DOCUMENT_EXTENSIONS:
        print_error(
            f"Document has invalid extension, expected one of: "
            f"{', '.join(sorted(DOCUMENT_EXTENSIONS))}",
        )
        sys.exit(1)


def load_document(document_location: Path) -> SchemaDocument:
    """Read a document, exiting with an error message when it is malformed."""
    validate_document_location(document_location)
    try:
        return read_document(document_location)
    except SchemaDocumentError as e:
        print_error(str(e))
        sys.exit(1)


def resolve_table_ids(engine: SchemaEngine, names: Iterable[str]) -> list[str]:
    """Resolve table ids or physical names, exiting on unknown tables."""
    tables = engine.tables
    by_name = {table["physical_name"]: table["id"] for table in tables}
    ids = {table["id"] for table in tables}

    resolved: list[str] = []
    for name in names:
        if name in ids:
            resolved.append(name)
        elif name in by_name:
            resolved.append(by_name[name])
        else:
            print_error(f"Unknown table '{name}'")
            sys.exit(1)
    return resolved


@app.command
def ddl(
    document: Path,
    *,
    dialect: str | None = None,
    table: list[str] | None = None,
    drop: bool = False,
    comments: bool | None = None,
    schema_prefix: bool = False,
    sort: bool = False,
    config: Path | None = None,
    verbose: bool = False,
) -> None:
    """Generate DDL for the tables of a design."""
    configure_logging(verbose=verbose)

    try:
        options: GenerationOptions = load_config(config)
        if dialect is not None:
            options["dialect"] = parse_dialect(dialect)
    except ValueError as e:
        print_error(str(e))
        sys.exit(1)

    if drop:
        options["include_drop_statements"] = True
    if comments is not None:
        options["include_comments"] = comments
    if schema_prefix:
        options["include_schema_prefix"] = True
    if sort:
        options["sort_by_dependency"] = True

    schema_document = load_document(document)
    engine = SchemaEngine(schema_document["nodes"], schema_document["relationships"])
    table_ids = (
        resolve_table_ids(engine, table)
        if table
        else [t["id"] for t in engine.tables]
    )

    print_info(f"Source document: {document}")
    print_info(f"Dialect: {options.get('dialect', Dialect.POSTGRESQL)}")

    sys.stdout.write(engine.generate_ddl(table_ids, options))
    print_success(f"Generated DDL for {len(table_ids)} tables")


@app.command
def tables(document: Path, *, verbose: bool = False) -> None:
    """Summarize the tables and relationships of a design."""
    configure_logging(verbose=verbose)
    schema_document = load_document(document)
    engine = SchemaEngine(schema_document["nodes"], schema_document["relationships"])

    summary = Table(title=schema_document["metadata"]["name"])
    summary.add_column("Table", style="bold cyan")
    summary.add_column("Physical name")
    summary.add_column("Columns", justify="right")
    summary.add_column("Primary key", style="bold yellow")

    for schema_table in engine.tables:
        columns = schema_table["columns"]
        summary.add_row(
            schema_table["logical_name"],
            schema_table["physical_name"],
            str(len(columns)),
            ", ".join(
                c["physical_name"]
                for c in columns
                if c["constraints"].get("is_primary_key")
            ),
        )
    console.print(summary)

    relationships = engine.relationships
    if not relationships:
        console.print("No relationships defined.")
        return

    names = {t["id"]: t["physical_name"] for t in engine.tables}
    links = Table(title="Relationships")
    links.add_column("Name", style="bold cyan")
    links.add_column("Type")
    links.add_column("Parent")
    links.add_column("Child")
    links.add_column("On delete")
    for relationship in relationships:
        links.add_row(
            relationship["name"],
            str(relationship["type"]),
            names[relationship["source_table_id"]],
            names[relationship["target_table_id"]],
            str(relationship.get("on_delete", "")),
        )
    console.print(links)


@app.command
def diagram(document: Path, *, title: str | None = None, verbose: bool = False) -> None:
    """Render a design as a standalone HTML page."""
    configure_logging(verbose=verbose)
    schema_document = load_document(document)
    engine = SchemaEngine(schema_document["nodes"], schema_document["relationships"])

    html = schema_to_html(
        engine.tables,
        engine.relationships,
        title or f"ER Diagram - {schema_document['metadata']['name']}",
    )
    sys.stdout.write(html)
    print_success("Diagram generated successfully")


@app.command
def dialects() -> None:
    """List supported SQL dialects."""
    for dialect in Dialect:
        console.print(f"{dialect.value} [dim]({dialect.name.lower()})[/]")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
