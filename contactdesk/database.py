"""Database configuration and session management.

This module defines the declarative base, the :class:`Database` handle
owning the SQLAlchemy engine and session factory, and the session
dependency for FastAPI routes.
"""

from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool


Base = declarative_base()
"""Declarative base class for SQLAlchemy models."""


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Data-access handle bound to one database URL.

    An application builds exactly one instance and hands it to whatever
    needs sessions; nothing in the package keeps a module-level engine.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.engine: Engine = self._build_engine(url, echo)
        self.SessionLocal = sessionmaker(
            bind=self.engine,
            autoflush=False,
            autocommit=False,
            expire_on_commit=False,
        )

    @staticmethod
    def _build_engine(url: str, echo: bool) -> Engine:
        kwargs: dict = {"echo": echo}
        if url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            if ":memory:" in url or url in ("sqlite://", "sqlite+pysqlite://"):
                # every session must see the same in-memory database
                kwargs["poolclass"] = StaticPool

        engine = create_engine(url, **kwargs)
        if engine.dialect.name == "sqlite":
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    def create_all(self) -> None:
        """Create every table known to the declarative base."""
        # models must be imported so their tables are registered
        from . import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def session(self) -> Session:
        """Open a new session."""
        return self.SessionLocal()

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request) -> Iterator[Session]:
    """
    Provide a SQLAlchemy database session.

    This function is used as a FastAPI dependency.
    It yields a session from the application's :class:`Database` and
    ensures it is properly closed after the request is completed.
    """

    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
