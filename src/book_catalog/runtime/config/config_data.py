"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field
from sqlalchemy.engine import URL, make_url

# Server-level database used for administrative statements, per dialect.
# MySQL accepts connections without a database; SQLite has no server.
_ADMIN_DATABASES = {
    "postgresql": "postgres",
    "mysql": None,
    "mariadb": None,
}


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="plain", description="Log format")
    file: str | None = Field(default=None, description="Log file path")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )


class DatabaseConfig(BaseModel):
    """Database configuration model."""

    driver: str = Field(
        default="postgresql+psycopg2",
        description="SQLAlchemy driver name, e.g. postgresql+psycopg2, mysql+pymysql or sqlite",
    )
    host: str | None = Field(default="localhost", description="Database host")
    port: int | None = Field(
        default=None, description="Database port (driver default when unset)"
    )
    name: str = Field(
        default="bookdb",
        description="Database name (file path for SQLite)",
    )
    user: str | None = Field(default="postgres", description="Database username")
    password: str | None = Field(default=None, description="Database password")
    password_file: str | None = Field(
        default=None,
        description="Path to file containing database password",
    )
    skip_bootstrap: bool = Field(
        default=False,
        description="Skip creating the database and books table at startup",
    )
    pool_size: int = Field(default=10, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    pool_recycle: int = Field(default=1800, description="Pool recycle time in seconds")

    @property
    def backend(self) -> str:
        """Dialect name without the DBAPI suffix (``postgresql``, ``mysql``, ``sqlite``)."""
        return make_url(f"{self.driver}://").get_backend_name()

    @property
    def is_sqlite(self) -> bool:
        return self.backend == "sqlite"

    def resolve_password(self) -> str | None:
        """Return the password, preferring a mounted secrets file when configured."""
        if self.password_file:
            try:
                with open(self.password_file) as f:
                    return f.read().strip()
            except OSError as e:
                raise ValueError(
                    f"Failed to read database password from {self.password_file}"
                ) from e
        return self.password or None

    def url(self, database: str | None = None) -> URL:
        """Build the SQLAlchemy URL for ``database`` (defaults to the configured name)."""
        target = self.name if database is None else database
        if self.is_sqlite:
            return URL.create(self.driver, database=target)

        return URL.create(
            self.driver,
            username=self.user,
            password=self.resolve_password(),
            host=self.host,
            port=self.port,
            database=target,
        )

    def admin_url(self) -> URL:
        """URL of the server-level connection used to create the database."""
        if self.is_sqlite:
            return self.url()
        return self.url(database=_ADMIN_DATABASES.get(self.backend))

    def describe(self) -> str:
        """Human-readable target without credentials, for logs."""
        if self.is_sqlite:
            return f"sqlite:///{self.name}"
        port = f":{self.port}" if self.port else ""
        return f"{self.user}@{self.host}{port}/{self.name}"


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    host: str = Field(default="0.0.0.0", description="Address the server binds to")
    port: int = Field(default=8080, description="Application port")
    static_dir: str | None = Field(
        default="static", description="Directory served at /static when present"
    )

    @property
    def base_url(self) -> str:
        """Construct the base URL from host and port."""
        host = "localhost" if self.host == "0.0.0.0" else self.host
        return f"http://{host}:{self.port}"


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
