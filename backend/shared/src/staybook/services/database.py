"""Database service wrapper around a SQLAlchemy engine.

Owns the engine, the session factories and the transaction discipline the
booking flow relies on:

- PostgreSQL: booking transactions run at SERIALIZABLE isolation; the
  exclusion constraint on ``reservations`` is the authoritative overlap guard.
- SQLite: pysqlite's implicit transaction handling is disabled and every
  transaction starts with ``BEGIN IMMEDIATE``, which serializes writers.
"""

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from staybook.config import get_settings
from staybook.utils.logging import get_logger

from .tables import OVERLAP_CONSTRAINT_NAME, Base

logger = get_logger(__name__)

# PostgreSQL SQLSTATE codes
SERIALIZATION_FAILURE = "40001"
DEADLOCK_DETECTED = "40P01"
EXCLUSION_VIOLATION = "23P01"

# Module-level singleton for connection pool reuse
_database_service_instance: "DatabaseService | None" = None


def get_database_service() -> "DatabaseService":
    """Get or create the singleton DatabaseService instance.

    Returns:
        Shared DatabaseService bound to ``DATABASE_URL``
    """
    global _database_service_instance
    if _database_service_instance is None:
        _database_service_instance = DatabaseService()
    return _database_service_instance


def reset_database_service() -> None:
    """Dispose and forget the singleton instance (for testing only)."""
    global _database_service_instance
    if _database_service_instance is not None:
        _database_service_instance.dispose()
    _database_service_instance = None


def _enable_immediate_transactions(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record):  # type: ignore[no-untyped-def]
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):  # type: ignore[no-untyped-def]
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(url: str) -> Engine:
    """Create an engine configured for the booking transaction discipline.

    Args:
        url: SQLAlchemy database URL

    Returns:
        Configured Engine
    """
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite":
        kwargs: dict = {"connect_args": {"check_same_thread": False, "timeout": 30}}
        if parsed.database in (None, "", ":memory:"):
            # One shared connection so every session sees the same in-memory database
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, **kwargs)
        _enable_immediate_transactions(engine)
        return engine

    return create_engine(url, pool_pre_ping=True)


def sqlstate(exc: DBAPIError) -> str | None:
    """Extract the SQLSTATE code from a driver error, if the driver exposes one."""
    orig = exc.orig
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def is_serialization_failure(exc: DBAPIError) -> bool:
    """Whether the transaction lost a serialization race and may be retried."""
    return sqlstate(exc) in (SERIALIZATION_FAILURE, DEADLOCK_DETECTED)


def is_overlap_violation(exc: DBAPIError) -> bool:
    """Whether the error is the reservations overlap constraint firing."""
    if not isinstance(exc, IntegrityError):
        return False
    return sqlstate(exc) == EXCLUSION_VIOLATION or OVERLAP_CONSTRAINT_NAME in str(exc.orig)


class DatabaseService:
    """Service for relational storage access."""

    def __init__(self, url: str | None = None, *, engine: Engine | None = None) -> None:
        """Initialize the database service.

        Args:
            url: SQLAlchemy URL. Defaults to DATABASE_URL from settings.
            engine: Pre-built engine (overrides url)
        """
        self.engine = engine or build_engine(url or get_settings().database_url)
        self._sessions = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)

        serializable_bind = self.engine
        if self.dialect == "postgresql":
            serializable_bind = self.engine.execution_options(isolation_level="SERIALIZABLE")
        self._serializable_sessions = sessionmaker(
            bind=serializable_bind, autoflush=False, expire_on_commit=False
        )

    @property
    def dialect(self) -> str:
        return self.engine.dialect.name

    def create_schema(self) -> None:
        """Create all tables (and PostgreSQL extensions) if missing."""
        Base.metadata.create_all(self.engine)
        logger.info("Database schema ensured on %s", self.dialect)

    @contextmanager
    def session_scope(self, *, serializable: bool = False) -> Iterator[Session]:
        """Provide a transactional scope around a series of operations.

        Commits on normal exit, rolls back on any exception and re-raises it.

        Args:
            serializable: Run at SERIALIZABLE isolation where the backend supports it

        Yields:
            An open Session
        """
        factory = self._serializable_sessions if serializable else self._sessions
        session = factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def dispose(self) -> None:
        self.engine.dispose()
