"""Database management commands."""

import typer
from rich.console import Console
from sqlalchemy.exc import SQLAlchemyError

from tasktracker.cli import context
from tasktracker.models import Base

app = typer.Typer(help="Database management commands")
console = Console()


@app.command()
def init() -> None:
    """Create all tables that do not exist yet."""
    console.print("\n[bold cyan]Creating database tables...[/bold cyan]")
    try:
        Base.metadata.create_all(bind=context.get_engine())
    except SQLAlchemyError as e:
        console.print(f"[red]✗ Error creating tables: {e}[/red]")
        raise typer.Exit(1) from e

    for table in sorted(Base.metadata.tables):
        console.print(f"  • {table}")
    console.print("[green]✓ Database ready[/green]")
