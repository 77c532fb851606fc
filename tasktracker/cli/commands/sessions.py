"""Session maintenance commands."""

import typer
from rich.console import Console

from tasktracker.cli import context
from tasktracker.core.auth.session_manager import SessionManager
from tasktracker.repositories.session_repository import SessionRepository

app = typer.Typer(help="Session maintenance commands")
console = Console()


@app.command()
def clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete every session, logging all users out."""
    if not yes:
        typer.confirm("This will log out every user. Continue?", abort=True)

    db = context.open_session()
    try:
        deleted = SessionRepository(db).delete_all()
        console.print(f"[green]✓ Deleted {deleted} session(s)[/green]")
    finally:
        db.close()


@app.command("purge-expired")
def purge_expired() -> None:
    """Delete sessions whose expiry has passed."""
    db = context.open_session()
    try:
        deleted = SessionManager(db).delete_expired_sessions()
        console.print(f"[green]✓ Purged {deleted} expired session(s)[/green]")
    finally:
        db.close()
