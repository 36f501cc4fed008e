"""
Database configuration and session management.
"""

import logging
from contextlib import contextmanager
from typing import Generator, Iterator

from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session, declarative_base
from sqlalchemy.pool import StaticPool

from crudhub.config import Settings


logger = logging.getLogger(__name__)

# Create declarative base
Base = declarative_base()


def _enable_sqlite_transactions(engine: Engine) -> None:
    """
    Let SQLAlchemy emit BEGIN itself and turn on foreign keys, so savepoints
    and RESTRICT references behave on SQLite as on a server database.
    """

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        dbapi_conn.isolation_level = None
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _begin(conn):
        conn.exec_driver_sql("BEGIN")


class Database:
    """
    Owns the engine and session factory for one application instance.
    Built at startup and shared through app.state, never a module global.
    """

    def __init__(
        self,
        url: str,
        echo: bool = False,
        pool_size: int = 25,
        max_overflow: int = 0,
        pool_recycle: int = 300,
        connect_timeout: int = 10
    ):
        self.url = url

        if url.startswith("sqlite"):
            engine_kwargs = {"connect_args": {"check_same_thread": False}}
            if ":memory:" in url or url.rstrip("/") == "sqlite:":
                # One shared connection, otherwise every session sees an empty database
                engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs = {
                "pool_size": pool_size,
                "max_overflow": max_overflow,
                "pool_recycle": pool_recycle,
                "pool_pre_ping": True,
                "connect_args": {"connect_timeout": connect_timeout},
            }

        self.engine = create_engine(url, echo=echo, **engine_kwargs)
        if self.is_sqlite:
            _enable_sqlite_transactions(self.engine)

        self.session_factory = sessionmaker(
            autoflush=False,
            expire_on_commit=False,
            bind=self.engine,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Build the database from application settings."""
        return cls(
            settings.database_url,
            echo=settings.database_echo,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_recycle=settings.db_pool_recycle_seconds,
            connect_timeout=settings.db_connect_timeout_seconds,
        )

    @property
    def is_sqlite(self) -> bool:
        return self.engine.dialect.name == "sqlite"

    def create_tables(self) -> None:
        """Create all tables. Used for SQLite development databases and tests."""
        # Register the models on Base.metadata
        from crudhub.infrastructure.db import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def ping(self) -> bool:
        """Run a trivial query to check connectivity."""
        with self.engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return True

    def dispose(self) -> None:
        """Close every pooled connection."""
        self.engine.dispose()

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """
        Provide a transactional scope: commit on success, rollback on error.
        """
        session = self.session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


def get_database(request: Request) -> Database:
    """
    Dependency function to get the application's database.
    """
    return request.app.state.database


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Dependency function to get a database session.
    One transaction per request.
    """
    with get_database(request).session_scope() as session:
        yield session
