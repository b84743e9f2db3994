"""Centralized configuration management for sqlagent."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict, Optional, Union
from urllib.parse import unquote, urlparse

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from sqlagent.errors import ConfigError

MEMORY_DATABASE = ":memory:"

_SCHEME_DRIVERS = {
    "mysql": "mysql",
    "mariadb": "mysql",
    "duckdb": "duckdb",
}


class ConnectionOptions(BaseModel):
    """Parameters for opening one connection."""

    driver: str = Field(default="duckdb", description="Driver name: duckdb or mysql")
    host: str = Field(default="localhost")
    port: Optional[int] = Field(default=None, ge=1, le=65535)
    user: str = Field(default="")
    password: str = Field(default="")
    database: str = Field(default=MEMORY_DATABASE, description="Schema name, or DuckDB file path")
    options: Dict[str, Any] = Field(default_factory=dict, description="Extra driver keyword arguments")

    @classmethod
    def from_url(cls, url: str) -> ConnectionOptions:
        """
        Parse a connection string.

        Examples:
            >>> ConnectionOptions.from_url("mysql://root:secret@db:3306/shop").database
            'shop'
            >>> ConnectionOptions.from_url("duckdb:///data/app.duckdb").database
            'data/app.duckdb'
            >>> ConnectionOptions.from_url("duckdb:////var/lib/app.duckdb").database
            '/var/lib/app.duckdb'
        """
        parsed = urlparse(url)
        driver = _SCHEME_DRIVERS.get(parsed.scheme.lower())
        if driver is None:
            raise ConfigError(f"Unsupported connection URL scheme: '{parsed.scheme}'")

        if driver == "duckdb":
            # SQLAlchemy convention: three slashes relative, four absolute
            path = parsed.path[1:] if parsed.path.startswith("/") else parsed.path
            return cls(driver=driver, database=unquote(path) or MEMORY_DATABASE)

        try:
            port = parsed.port
        except ValueError as e:
            raise ConfigError(f"Invalid port in connection URL: {e}") from e

        return cls(
            driver=driver,
            host=parsed.hostname or "localhost",
            port=port,
            user=unquote(parsed.username or ""),
            password=unquote(parsed.password or ""),
            database=unquote(parsed.path.lstrip("/")),
        )

    @classmethod
    def coerce(cls, value: Union[ConnectionOptions, str, Dict[str, Any], None]) -> ConnectionOptions:
        """Build options from a model, URL, mapping, or the configured default."""
        if isinstance(value, ConnectionOptions):
            return value
        if isinstance(value, str):
            return cls.from_url(value)
        if isinstance(value, dict):
            return cls.model_validate(value)
        if value is None:
            url = get_settings().database_url
            return cls.from_url(url) if url else cls()
        raise ConfigError(f"Cannot build connection options from {type(value).__name__}")


class DuckDBSettings(BaseModel):
    """Settings related to DuckDB connections."""

    threads: int = Field(default=4, ge=1, description="Number of DuckDB threads to use")


class SqlAgentSettings(BaseSettings):
    """Library-wide settings loaded from env, .env, and defaults."""

    database_url: Optional[str] = Field(default=None, description="Default connection URL")
    autoclose: bool = Field(default=True, description="Close the connection when a pipeline completes")
    duckdb: DuckDBSettings = Field(default_factory=DuckDBSettings)

    model_config = SettingsConfigDict(
        env_prefix="SQLAGENT_",
        env_file=".env",
        extra="ignore",
        env_nested_delimiter="__",
    )


@lru_cache(maxsize=1)
def get_settings() -> SqlAgentSettings:
    """Return a cached settings instance."""

    return SqlAgentSettings()
