"""Database access for CLI commands."""

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from tasktracker.core.db.session import SessionLocal, engine


def get_engine() -> Engine:
    return engine


def open_session() -> Session:
    return SessionLocal()
