"""Operator CLI entry point."""

import typer

from tasktracker.cli.commands import db, sessions, users

app = typer.Typer(
    name="tasktracker",
    help="Task Tracker operator tools",
    add_completion=False,
)

app.add_typer(db.app, name="db")
app.add_typer(users.app, name="users")
app.add_typer(sessions.app, name="sessions")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
