"""Idempotent creation of the books database and table."""

from collections.abc import Iterator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy import Connection, Engine, create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel

from book_catalog.core.exceptions import BootstrapError
from book_catalog.entities.service.book import BookTable
from book_catalog.runtime.config.config_data import DatabaseConfig


def _create_database(connection: Connection, database_name: str) -> None:
    dialect = connection.dialect.name
    quoted = connection.dialect.identifier_preparer.quote(database_name)

    if dialect in ("mysql", "mariadb"):
        connection.execute(text(f"CREATE DATABASE IF NOT EXISTS {quoted}"))
    elif dialect == "postgresql":
        # PostgreSQL has no IF NOT EXISTS for databases
        exists = connection.execute(
            text("SELECT 1 FROM pg_database WHERE datname = :name"),
            {"name": database_name},
        ).scalar()
        if not exists:
            connection.execute(text(f"CREATE DATABASE {quoted}"))
    elif dialect == "sqlite":
        # The database file is created when the connection opens
        pass
    else:
        raise BootstrapError(
            "create database", f"unsupported database dialect {dialect!r}"
        )


@contextmanager
def _use_database(connection: Connection, database_name: str) -> Iterator[Connection]:
    """Yield a connection whose statements target ``database_name``."""
    dialect = connection.dialect.name

    if dialect in ("mysql", "mariadb"):
        quoted = connection.dialect.identifier_preparer.quote(database_name)
        connection.execute(text(f"USE {quoted}"))
        yield connection
    elif dialect == "postgresql":
        # A PostgreSQL connection is bound to one database for its lifetime
        target_url = connection.engine.url.set(database=database_name)
        target_engine = create_engine(target_url, isolation_level="AUTOCOMMIT")
        try:
            with target_engine.connect() as target:
                yield target
        finally:
            target_engine.dispose()
    else:
        yield connection


def bootstrap(connection: Connection, database_name: str) -> None:
    """Ensure ``database_name`` and its books table exist.

    Safe to run any number of times: every step is create-if-absent. The
    connection should be in AUTOCOMMIT mode since some servers refuse
    ``CREATE DATABASE`` inside a transaction.

    Raises:
        BootstrapError: If the dialect is unsupported or any statement fails.
    """
    step = "create database"
    try:
        _create_database(connection, database_name)
        step = "select database"
        with _use_database(connection, database_name) as target:
            step = "create table"
            SQLModel.metadata.create_all(
                target, tables=[BookTable.__table__], checkfirst=True
            )
        if connection.in_transaction():
            connection.commit()
    except SQLAlchemyError as exc:
        raise BootstrapError(step, exc) from exc


class DbManageService:
    """Runs the bootstrap procedure against the configured server."""

    def __init__(self, db_config: DatabaseConfig, admin_engine: Engine | None = None):
        self._db_config = db_config
        self._admin_engine = admin_engine

    def _connect_admin(self) -> Engine:
        if self._admin_engine is not None:
            return self._admin_engine
        return create_engine(
            self._db_config.admin_url(), isolation_level="AUTOCOMMIT"
        )

    def bootstrap(self) -> None:
        """Create the database and books table if they are missing.

        Raises:
            BootstrapError: If the server is unreachable or a statement fails.
        """
        logger.info("Bootstrapping database {}", self._db_config.describe())
        engine = self._connect_admin()
        try:
            with engine.connect() as connection:
                bootstrap(connection, self._db_config.name)
        except SQLAlchemyError as exc:
            raise BootstrapError("connect", exc) from exc
        finally:
            if self._admin_engine is None:
                engine.dispose()
        logger.info("Database bootstrapped successfully")
