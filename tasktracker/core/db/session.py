from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from tasktracker.core.config import get_settings

settings = get_settings()


def build_engine(database_url: str, **kwargs) -> Engine:
    """Create an engine for the given URL.

    SQLite connections get foreign keys switched on so that session and
    task rows cascade with their owning user like they do on PostgreSQL.
    An in-memory SQLite database lives on one shared connection, otherwise
    every pooled connection would see its own empty database.
    """
    if database_url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        if make_url(database_url).database in (None, "", ":memory:"):
            kwargs.setdefault("poolclass", StaticPool)
        engine = create_engine(database_url, future=True, **kwargs)

        @event.listens_for(engine, "connect")
        def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    kwargs.setdefault("pool_pre_ping", True)
    kwargs.setdefault("pool_size", 10)
    kwargs.setdefault("max_overflow", 20)
    kwargs.setdefault(
        "connect_args",
        {"connect_timeout": 10, "options": "-c timezone=utc"},
    )
    return create_engine(database_url, future=True, **kwargs)


engine = build_engine(settings.database_url, echo=settings.DEBUG)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()
