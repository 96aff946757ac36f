"""
Database Base Module
Provides engine and session management
"""

from typing import Generator
from contextlib import contextmanager
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
import os

from ai_caller.core.logging import get_logger
from .models import Base

logger = get_logger(__name__)


def _ensure_sqlite_directory(db_url: str) -> None:
    path = db_url.split("sqlite:///", 1)[-1] if db_url.startswith("sqlite:///") else ""
    if path and path != ":memory:":
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)


class Database:
    """
    Owns one engine and its session factory.

    Created once at startup and handed to request handlers through
    the application state.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url

        if url.startswith("sqlite"):
            _ensure_sqlite_directory(url)
            self.engine: Engine = create_engine(
                url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
                echo=echo
            )

            # Enable foreign keys for SQLite
            @event.listens_for(self.engine, "connect")
            def set_sqlite_pragma(dbapi_connection, connection_record):
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()
        else:
            self.engine = create_engine(
                url,
                pool_size=5,
                max_overflow=10,
                pool_pre_ping=True,
                echo=echo
            )

        self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def create_all(self) -> None:
        """Create any missing tables"""
        Base.metadata.create_all(bind=self.engine)
        logger.info("Database tables created/verified")

    def new_session(self) -> Session:
        """Create a session; the caller closes it"""
        return self._session_factory()

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """
        Context manager for database sessions
        For use outside of FastAPI routes
        """
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def dispose(self) -> None:
        """Close database connections"""
        self.engine.dispose()
        logger.info("Database connections closed")
