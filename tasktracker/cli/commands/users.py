"""User management commands."""

import typer
from rich.console import Console
from rich.table import Table

from tasktracker.cli import context
from tasktracker.services import UserService

app = typer.Typer(help="User management commands")
console = Console()


@app.command("create-admin")
def create_admin(
    email: str = typer.Option(..., "--email", "-e", help="Admin email address"),
    name: str = typer.Option(None, "--name", "-n", help="Display name"),
    password: str = typer.Option(
        ...,
        "--password",
        "-p",
        prompt=True,
        hide_input=True,
        confirmation_prompt=True,
        help="Admin password (prompted when omitted)",
    ),
) -> None:
    """Create an admin account, or promote an existing account to admin."""
    if len(password) < 6:
        console.print("[red]✗ Password must be at least 6 characters[/red]")
        raise typer.Exit(1)

    db = context.open_session()
    try:
        user, created = UserService(db).ensure_admin(email, password, name)
        if created:
            console.print(f"[green]✓ Admin user created: {user.email}[/green]")
        else:
            console.print(f"[yellow]User {user.email} already exists; role is admin[/yellow]")
    finally:
        db.close()


@app.command("list")
def list_users() -> None:
    """List all users."""
    db = context.open_session()
    try:
        users = UserService(db).list_users()
        if not users:
            console.print("[yellow]No users[/yellow]")
            return

        table = Table(title="Users")
        table.add_column("ID", style="dim")
        table.add_column("Email")
        table.add_column("Name")
        table.add_column("Role")
        table.add_column("Created")
        for user in users:
            table.add_row(user.id, user.email, user.name or "", user.role, str(user.created_at))
        console.print(table)
        console.print(f"{len(users)} user(s)")
    finally:
        db.close()
