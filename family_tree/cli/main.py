"""Family Tree CLI - Main entry point.

This module provides the command-line interface for the Family Tree project.
"""

from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.table import Table
from rich.tree import Tree

from family_tree.config import Settings, settings
from family_tree.errors import FamilyTreeError
from family_tree.log import configure_logging
from family_tree.schemas.tree import TreeNode
from family_tree.service import FamilyTreeService
from family_tree.storage.sqlite import FamilyTreeDatabase

app = typer.Typer(
    name="familytree",
    help="Family Tree - Build ancestry trees and guard parent/child links",
    add_completion=False,
)
console = Console()


def _service(db_path: Path, radius: int | None = None) -> FamilyTreeService:
    config = Settings(
        db_path=db_path,
        consanguinity_radius=radius or settings.consanguinity_radius,
        traversal_node_limit=settings.traversal_node_limit,
        traversal_timeout=settings.traversal_timeout,
    )
    return FamilyTreeService(FamilyTreeDatabase(db_path=db_path), config)


def _fail(error: FamilyTreeError) -> NoReturn:
    console.print(f"[red]{type(error).__name__}: {error!s}[/red]")
    raise typer.Exit(1)


def _render(node: TreeNode, branch: Tree) -> None:
    for parent in node.parents:
        if parent.ref:
            branch.add(f"{parent.name} [dim]({parent.id}, see above)[/dim]")
            continue
        _render(parent, branch.add(f"{parent.name} [dim]({parent.id})[/dim]"))


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")) -> None:
    """Family Tree command-line interface."""
    configure_logging("DEBUG" if verbose else settings.log_level)


@app.command("add-person")
def add_person(
    names: list[str] = typer.Argument(..., help="Display names of the people to add"),
    db_path: Path = typer.Option(settings.db_path, "--db", help="Path to SQLite database"),
) -> None:
    """Add one or more people."""
    service = _service(db_path)
    people = service.add_people(names)

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim")
    table.add_column("Name")
    for person in people:
        table.add_row(person.id, person.name)
    console.print(table)


@app.command()
def people(
    db_path: Path = typer.Option(settings.db_path, "--db", help="Path to SQLite database"),
) -> None:
    """List everyone in the database."""
    service = _service(db_path)
    everyone = service.list_people()

    if not everyone:
        console.print("[yellow]No people found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold cyan", title="People")
    table.add_column("ID", style="dim")
    table.add_column("Name")
    table.add_column("Created", style="dim")
    for person in everyone:
        table.add_row(person.id, person.name, person.created_at)
    console.print(table)


@app.command()
def link(
    parent_id: str = typer.Argument(..., help="Id of the parent"),
    child_id: str = typer.Argument(..., help="Id of the child"),
    db_path: Path = typer.Option(settings.db_path, "--db", help="Path to SQLite database"),
    radius: int | None = typer.Option(
        None, "--radius", min=1, help="Generations to search for shared ancestors"
    ),
) -> None:
    """Record that PARENT_ID is a parent of CHILD_ID."""
    service = _service(db_path, radius)
    try:
        edge_id = service.add_relationship(parent_id, child_id, deadline=service.new_deadline())
    except FamilyTreeError as e:
        _fail(e)
    console.print(f"[green]✓ Relationship added:[/green] {edge_id}")


@app.command()
def unlink(
    relationship_id: str = typer.Argument(..., help="Id of the relationship to delete"),
    db_path: Path = typer.Option(settings.db_path, "--db", help="Path to SQLite database"),
) -> None:
    """Delete a relationship."""
    service = _service(db_path)
    try:
        service.delete_relationship(relationship_id)
    except FamilyTreeError as e:
        _fail(e)
    console.print(f"[green]✓ Relationship deleted:[/green] {relationship_id}")


@app.command()
def check(
    parent_id: str = typer.Argument(..., help="Id of the proposed parent"),
    child_id: str = typer.Argument(..., help="Id of the proposed child"),
    db_path: Path = typer.Option(settings.db_path, "--db", help="Path to SQLite database"),
    radius: int | None = typer.Option(
        None, "--radius", min=1, help="Generations to search for shared ancestors"
    ),
) -> None:
    """Check whether a parent/child link would be refused, without adding it."""
    service = _service(db_path, radius)
    try:
        evidence = service.check_relationship(parent_id, child_id, deadline=service.new_deadline())
    except FamilyTreeError as e:
        _fail(e)

    if not evidence.related:
        console.print("[green]✓ Not related; the relationship would be allowed.[/green]")
        return

    console.print("[bold red]✗ Related; the relationship would be refused.[/bold red]")
    for edge in evidence.direct_edges:
        console.print(f"[dim]Existing edge:[/dim] {edge.parent_id} -> {edge.child_id}")
    for person_id in evidence.shared_ancestors:
        console.print(
            f"[dim]Shared ancestor:[/dim] {person_id} "
            f"(generations {evidence.ancestors_a[person_id]} / {evidence.ancestors_b[person_id]})"
        )
    raise typer.Exit(2)


@app.command()
def tree(
    person_id: str = typer.Argument(..., help="Id of the person at the root"),
    db_path: Path = typer.Option(settings.db_path, "--db", help="Path to SQLite database"),
    flat: bool = typer.Option(False, "--flat", help="Print a member table instead of a tree"),
    children: bool = typer.Option(
        False, "--children", help="With --flat, also list each member's children"
    ),
) -> None:
    """Show the ancestry of a person."""
    service = _service(db_path)
    try:
        if flat:
            family = service.ancestry_members(
                person_id, include_children=children, deadline=service.new_deadline()
            )
        else:
            root = service.ancestry_nested(person_id, deadline=service.new_deadline())
    except FamilyTreeError as e:
        _fail(e)

    if not flat:
        display = Tree(f"[bold cyan]{root.name}[/bold cyan] [dim]({root.id})[/dim]")
        _render(root, display)
        console.print(display)
        return

    table = Table(show_header=True, header_style="bold cyan", title="Ancestry")
    table.add_column("Member")
    table.add_column("Relationships")
    for member in family.members:
        rels = ", ".join(f"{r.name} ({r.relationship})" for r in member.relationships)
        table.add_row(member.name, rels or "[dim]none[/dim]")
    console.print(table)


@app.command()
def stats(
    db_path: Path = typer.Option(settings.db_path, "--db", help="Path to SQLite database"),
) -> None:
    """Display statistics about the family tree database."""
    console.print("\n[bold cyan]Family Tree - Database Statistics[/bold cyan]\n")

    db_stats = _service(db_path).get_stats()

    table = Table(show_header=True, header_style="bold cyan", title="SQLite Database")
    table.add_column("Metric", style="dim")
    table.add_column("Count", justify="right")

    for key, value in db_stats.items():
        table.add_row(key.replace("_", " ").title(), str(value))

    console.print(table)
    console.print()


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind"),
    port: int = typer.Option(5001, "--port", help="Port to listen on"),
    env: str = typer.Option("development", "--env", help="Configuration environment"),
    db_path: Path = typer.Option(settings.db_path, "--db", help="Path to SQLite database"),
) -> None:
    """Run the HTTP API."""
    from family_tree.app import create_app

    web_app = create_app(env, db_path=db_path)
    web_app.run(host=host, port=port, debug=web_app.config["DEBUG"])


@app.command()
def version() -> None:
    """Display version information."""
    from family_tree import __version__

    console.print(f"\n[bold cyan]Family Tree[/bold cyan] version {__version__}\n")


if __name__ == "__main__":
    app()
