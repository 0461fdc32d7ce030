"""
SQLAlchemy-based storage backend for the persistent local store.

Each key/value pair is a row in a single table, so the store survives process
restarts when backed by a SQLite file (the default) or any other database
SQLAlchemy can reach.
"""

from contextlib import contextmanager
from typing import Generator, Optional

from loguru import logger
from sqlalchemy import Column, DateTime, String, Text, create_engine, func
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from campus_board.storage.base_store import LocalStore

Base = declarative_base()


class StoreEntry(Base):
    """SQLAlchemy model for the local_store_entries table."""
    __tablename__ = "local_store_entries"

    key = Column(String(512), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self):
        return f"<StoreEntry(key={self.key}, size={len(self.value or '')})>"


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:")


class SQLAlchemyStore(LocalStore):
    """Key/value store persisted through SQLAlchemy."""

    def __init__(self, url: str = "sqlite:///campus_board.db", echo: bool = False):
        """
        Initialize the store and create its table if needed.

        Args:
            url: SQLAlchemy database URL
            echo: Log emitted SQL
        """
        engine_kwargs = {"echo": echo}
        if _is_memory_sqlite(url):
            # One shared connection, otherwise every session sees an empty database
            engine_kwargs.update(
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
            )

        self.url = url
        self.engine = create_engine(url, **engine_kwargs)
        self._session_factory = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)
        Base.metadata.create_all(self.engine)
        logger.info(f"Initialized SQLAlchemyStore at {self.engine.url.render_as_string(hide_password=True)}")

    @contextmanager
    def _session(self) -> Generator[Session, None, None]:
        """
        Provide a session that commits on success and rolls back on error.

        Yields:
            SQLAlchemy session
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

    def get(self, key: str) -> Optional[str]:
        with self._session() as session:
            entry = session.get(StoreEntry, key)
            return entry.value if entry is not None else None

    def set(self, key: str, value: str) -> None:  # noqa: A003
        with self._session() as session:
            entry = session.get(StoreEntry, key)
            if entry is None:
                session.add(StoreEntry(key=key, value=value))
            else:
                entry.value = value
        logger.debug(f"Stored {len(value)} chars under '{key}'")

    def remove(self, key: str) -> None:
        with self._session() as session:
            entry = session.get(StoreEntry, key)
            if entry is not None:
                session.delete(entry)

    def close(self) -> None:
        """Dispose of the engine's connection pool."""
        self.engine.dispose()
