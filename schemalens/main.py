"""schemalens - Main entry point."""

import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .config import settings
from .database.executor import PostgresExecutor, QueryExecutor, SQLiteExecutor
from .database.models import DiscoveryConfig, DiscoveryResult, SchemaInfo
from .discovery.dialects import Dialect, parse_dialect
from .discovery.factory import DiscoveryFactory
from .discovery.relationship import RelationshipDiscovery
from .discovery.schema_coordinator import SchemaDiscoveryCoordinator
from .errors import SchemaLensError

app = typer.Typer(
    name="schemalens",
    help="Discover relational schemas and infer table relationships",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)

POSTGRES_SCHEMES = ("postgres://", "postgresql://")


def _setup_logging(verbose: bool):
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True)],
    )


def _guess_dialect(target: str) -> str:
    if target.lower().startswith(POSTGRES_SCHEMES):
        return Dialect.POSTGRESQL.value
    return settings.default_dialect


def _open_executor(target: str, dialect: Dialect) -> QueryExecutor:
    if dialect is Dialect.POSTGRESQL:
        return PostgresExecutor(dsn=target)
    if target != ":memory:" and not Path(target).exists():
        raise SchemaLensError(f"SQLite database not found: {target}", code="DATABASE_NOT_FOUND")
    return SQLiteExecutor(target)


def _print_tables(schema: SchemaInfo, detail: bool):
    table = Table(title="Tables")
    table.add_column("Name", style="cyan")
    table.add_column("Columns", justify="right")
    table.add_column("Primary Key", style="green")
    table.add_column("Foreign Keys", justify="right")
    table.add_column("Indexes", justify="right")
    table.add_column("Checks", justify="right")

    for info in schema.tables:
        table.add_row(
            info.full_name,
            str(len(info.columns)),
            ", ".join(info.primary_key) or "-",
            str(len(info.foreign_keys)),
            str(len(info.indexes)),
            str(len(info.check_constraints)),
        )
    console.print(table)

    if not detail:
        return

    for info in schema.tables:
        columns = Table(title=f"{info.full_name} columns")
        columns.add_column("Column", style="cyan")
        columns.add_column("Native Type")
        columns.add_column("Type", style="green")
        columns.add_column("Nullable")
        columns.add_column("Default")
        for column in info.columns:
            flags = " (pk)" if column.is_primary_key else ""
            columns.add_row(
                column.name + flags,
                column.native_type or "-",
                column.type,
                "yes" if column.nullable else "no",
                "-" if column.default_value is None else str(column.default_value),
            )
        console.print(columns)


def _print_relationships(schema: SchemaInfo):
    if not schema.relationships:
        console.print("[yellow]No relationships found.[/yellow]")
        return

    table = Table(title="Relationships")
    table.add_column("Name", style="cyan")
    table.add_column("Type", style="magenta")
    table.add_column("From", style="green")
    table.add_column("To", style="blue")
    table.add_column("Via")
    for rel in schema.relationships:
        table.add_row(
            rel.name,
            rel.type.value,
            f"{rel.from_table}.{rel.from_column}",
            f"{rel.to_table}.{rel.to_column}",
            rel.junction_table or "",
        )
    console.print(table)


def _print_views(schema: SchemaInfo):
    table = Table(title="Views")
    table.add_column("Name", style="cyan")
    table.add_column("Columns", justify="right")
    for view in schema.views:
        table.add_row(view.name, str(len(view.columns)))
    console.print(table)


def _print_report(result: DiscoveryResult, relationship_discovery: RelationshipDiscovery):
    report = result.report
    if report.foreign_keys_enforced is False:
        console.print("[yellow]Foreign key enforcement is disabled on this connection.[/yellow]")
    for name in report.degraded_tables:
        console.print(f"[red]Table {name} discovered without indexes or constraints: {report.error_for(name)}[/red]")

    cycles = relationship_discovery.detect_circular_references(result.schema.tables)
    if cycles:
        console.print("[bold]Circular references[/bold]")
        for cycle in cycles:
            console.print(f"  {cycle}")


@app.command()
def inspect(
    target: str = typer.Argument(..., help="SQLite database path or PostgreSQL DSN"),
    dialect: Optional[str] = typer.Option(None, "--dialect", "-d", help="Database dialect (guessed from target if omitted)"),
    views: bool = typer.Option(settings.include_views, "--views/--no-views", help="Include views"),
    exclude: Optional[List[str]] = typer.Option(None, "--exclude", "-x", help="Glob pattern of tables to skip (repeatable)"),
    schema_name: str = typer.Option(settings.postgres_schema, "--schema", "-s", help="PostgreSQL namespace"),
    many_to_many: bool = typer.Option(False, "--many-to-many", help="Infer many-to-many relationships through junction tables"),
    detail: bool = typer.Option(False, "--detail", help="Show the columns of every table"),
    as_json: bool = typer.Option(False, "--json", help="Print the schema as JSON"),
):
    """Discover a database schema and print tables, relationships and views."""
    dialect_name = dialect or _guess_dialect(target)
    factory = DiscoveryFactory()
    config = DiscoveryConfig.from_settings(
        exclude_tables=list(exclude or []),
        include_views=views,
        schema=schema_name,
        infer_many_to_many=many_to_many,
    )

    try:
        # Reject unknown or unimplemented dialects before connecting
        factory.create_discovery_coordinator(dialect_name)
        with _open_executor(target, parse_dialect(dialect_name)) as executor:
            result = SchemaDiscoveryCoordinator(factory).discover_schema_with_report(
                executor, config, dialect=dialect_name
            )
    except SchemaLensError as e:
        err_console.print(f"[red]Error: {e.message}[/red]")
        raise typer.Exit(1)
    except Exception as e:
        err_console.print(f"[red]Error discovering {dialect_name} schema: {e}[/red]")
        raise typer.Exit(1)

    if as_json:
        payload = result.schema.to_dict()
        payload["report"] = {
            "dialect": result.report.dialect,
            "foreign_keys_enforced": result.report.foreign_keys_enforced,
            "degraded_tables": result.report.degraded_tables,
        }
        typer.echo(json.dumps(payload, indent=2, default=str))
        return

    _print_tables(result.schema, detail)
    _print_relationships(result.schema)
    if config.include_views:
        _print_views(result.schema)
    _print_report(result, factory.relationship_discovery)


@app.command()
def capabilities(dialect: str = typer.Argument(..., help="Dialect name or alias")):
    """Show what discovery supports for a dialect."""
    factory = DiscoveryFactory()
    if not factory.is_dialect_supported(dialect):
        console.print(f"[yellow]Discovery is not available for '{dialect}'.[/yellow]")

    table = Table(title=f"Capabilities: {dialect}")
    table.add_column("Feature", style="cyan")
    table.add_column("Supported")
    for feature, supported in factory.get_dialect_capabilities(dialect).to_dict().items():
        table.add_row(feature, "[green]yes[/green]" if supported else "[red]no[/red]")
    console.print(table)


@app.command()
def config():
    """Show current configuration."""
    console.print("[bold]Current Configuration[/bold]")
    console.print(f"  Default Dialect: {settings.default_dialect}")
    console.print(f"  Max Workers: {settings.max_workers}")
    console.print(f"  Include Views: {'Yes' if settings.include_views else 'No'}")
    console.print(f"  PostgreSQL Schema: {settings.postgres_schema}")
    console.print(f"  Log Level: {settings.log_level}")
    console.print(f"  Supported Dialects: {', '.join(DiscoveryFactory().get_supported_dialects())}")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")):
    """
    schemalens - Discover relational schemas and infer table relationships.

    Examples:

        schemalens inspect app.db

        schemalens inspect postgresql://localhost/shop --schema sales --views

        schemalens capabilities postgres
    """
    _setup_logging(verbose)


if __name__ == "__main__":
    app()
