"""Database engine and session factory used across the application."""

from collections.abc import Iterator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy import Engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, create_engine

from book_catalog.runtime.config.config_data import DatabaseConfig
from book_catalog.runtime.context import get_config


def build_engine(db_config: DatabaseConfig) -> Engine:
    """Create the pooled engine for the configured books database."""
    if db_config.is_sqlite:
        # SQLite has no server-side pool; sessions may be used from worker threads
        return create_engine(
            db_config.url(),
            connect_args={"check_same_thread": False, "timeout": 20},
            echo=False,
        )

    return create_engine(
        db_config.url(),
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_recycle=db_config.pool_recycle,
        pool_pre_ping=True,  # Validate connections before use
        echo=False,
    )


class DbSessionService:
    """Owns the shared engine for the lifetime of the process.

    Created once at startup and disposed once at shutdown; request handlers
    borrow short-lived sessions from it.
    """

    def __init__(self, engine: Engine | None = None):
        if engine is None:
            db_config = get_config().database
            logger.info("Initializing database engine for {}", db_config.describe())
            engine = build_engine(db_config)
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine

    def get_session(self) -> Session:
        """Return a new SQLModel session bound to the shared engine."""
        return Session(
            self._engine,
            expire_on_commit=False,  # Prevent lazy loading issues
            autoflush=True,
        )

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Yield a session that is always closed afterwards."""
        db = self.get_session()
        try:
            yield db
        finally:
            db.close()

    def ping(self) -> None:
        """Run a trivial query, raising if the database is unreachable."""
        with self._engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        logger.info("Connected to database successfully")

    def health_check(self) -> bool:
        """Perform a health check on the database connection."""
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
                return True
        except SQLAlchemyError as e:
            logger.bind(
                error_type=type(e).__name__,
                error_message=str(e),
            ).error("Database health check failed")
            return False

    def dispose(self) -> None:
        """Release every pooled connection."""
        self._engine.dispose()
        logger.info("Database engine disposed")
