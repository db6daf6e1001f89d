"""SQLite engine and session management for the catalog Store."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from coursecatalog.store.models import Base

if TYPE_CHECKING:
    from sqlalchemy import Engine

MEMORY_PATH = ":memory:"
BUSY_TIMEOUT_SECONDS = 10

_PRAGMAS = ("PRAGMA journal_mode=WAL", "PRAGMA foreign_keys=ON")


def _apply_pragmas(dbapi_connection: object, _connection_record: object) -> None:
    cursor = dbapi_connection.cursor()  # type: ignore[attr-defined]
    for pragma in _PRAGMAS:
        cursor.execute(pragma)
    cursor.close()


def build_engine(db_path: str) -> Engine:
    """Create a SQLite engine for a file path or ``:memory:``.

    The in-memory database lives on a single shared connection, so every
    session (and every thread) sees the same data. File databases wait up to
    BUSY_TIMEOUT_SECONDS for a competing writer instead of failing at once.
    """
    if db_path == MEMORY_PATH:
        engine = create_engine(
            "sqlite://",
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    else:
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        engine = create_engine(
            f"sqlite:///{db_path}",
            connect_args={"timeout": BUSY_TIMEOUT_SECONDS, "check_same_thread": False},
        )
    event.listen(engine, "connect", _apply_pragmas)
    return engine


class Database:
    """Lazily built engine plus session factory for one catalog database."""

    def __init__(self, db_path: str = "coursecatalog.db") -> None:
        """Initialize the database manager. Nothing connects until first use.

        Args:
            db_path: SQLite file path, or ":memory:" for a private in-memory database
        """
        self.db_path = db_path
        self._engine: Engine | None = None
        self._sessions: sessionmaker[Session] | None = None

    @property
    def engine(self) -> Engine:
        """Get or build the SQLite engine.

        Returns:
            The engine for ``db_path``, created on first access
        """
        if self._engine is None:
            self._engine = build_engine(self.db_path)
        return self._engine

    @property
    def session_factory(self) -> sessionmaker[Session]:
        """Session factory whose objects keep their state after commit.

        Detached records stay readable, so the resolver can merge onto them
        and hand them back to the store.
        """
        if self._sessions is None:
            self._sessions = sessionmaker(bind=self.engine, expire_on_commit=False)
        return self._sessions

    def create_tables(self) -> None:
        """Create the users and courses tables if they don't exist."""
        Base.metadata.create_all(self.engine)

    def get_session(self) -> Session:
        """Open a new session.

        Returns:
            A Session the caller must close (use it as a context manager)
        """
        return self.session_factory()

    def journal_mode(self) -> str:
        """Return the SQLite journal mode currently in effect (e.g. "wal")."""
        with self.engine.connect() as conn:
            return str(conn.execute(text("PRAGMA journal_mode")).scalar())

    def is_wal_mode(self) -> bool:
        """True when the database runs in write-ahead-log mode."""
        return self.journal_mode().lower() == "wal"

    def close(self) -> None:
        """Dispose of the engine. The next access builds a fresh one."""
        if self._engine is not None:
            self._engine.dispose()
        self._engine = None
        self._sessions = None
