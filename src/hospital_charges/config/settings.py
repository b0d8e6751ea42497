"""
Configuration management for the hospital charges data-access layer.

This module provides environment-based configuration using Pydantic BaseSettings.
Each charge setting (inpatient DRG data, outpatient APC data) lives in its own
MySQL database, so connection parameters are declared once per database while
the pool policy is shared.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Determine project root for resolving .env by default
PROJECT_ROOT = Path(__file__).resolve().parents[3]
DEFAULT_ENV_FILE = PROJECT_ROOT / ".env"
ENV_FILE_OVERRIDE = os.getenv("HC_ENV_FILE")
if ENV_FILE_OVERRIDE:
    env_file_candidate = Path(ENV_FILE_OVERRIDE).expanduser()
    if not env_file_candidate.is_absolute():
        env_file_candidate = PROJECT_ROOT / env_file_candidate
    SETTINGS_ENV_FILE = env_file_candidate
else:
    SETTINGS_ENV_FILE = DEFAULT_ENV_FILE


class DatabaseSettings:
    """
    Connection parameters for one charge database.

    Lightweight wrapper assembled from the flat Settings fields so the pool
    factory does not need to know about the environment variable layout.
    """

    def __init__(
        self,
        host: str,
        port: int = 3306,
        user: str = "",
        password: str = "",
        database: str = "",
        connect_timeout: int = 10,
        read_timeout: int = 30,
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.database = database
        self.connect_timeout = connect_timeout
        self.read_timeout = read_timeout

    def connect_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for ``pymysql.connect`` (cursor class excluded)."""
        return {
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "password": self.password,
            "database": self.database,
            "charset": "utf8mb4",
            "autocommit": True,
            "connect_timeout": self.connect_timeout,
            "read_timeout": self.read_timeout,
        }

    def describe(self) -> str:
        """Password-free connection summary for log records."""
        return f"mysql://{self.user}@{self.host}:{self.port}/{self.database}"


class PoolSettings:
    """Pool policy shared by every charge database."""

    def __init__(
        self,
        pool_size: int = 5,
        max_overflow: int = 0,
        timeout: float = 30.0,
        recycle: int = 3600,
        prefill: bool = False,
    ):
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.timeout = timeout
        self.recycle = recycle
        self.prefill = prefill


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Environment variables are loaded with the HC_ prefix, for example
    HC_INPATIENT_MYSQL_HOST overrides ``inpatient_mysql_host``.

    Unprefixed fields (uppercase names):
    - ENVIRONMENT: Deployment environment (dev, staging, prod)
    - LOG_LEVEL: Logging level
    """

    ENVIRONMENT: Literal["dev", "staging", "prod"] = Field(
        default="dev",
        validation_alias="ENVIRONMENT",
        description="Deployment environment",
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Logging level (uppercase)",
    )

    app_name: str = Field(default="HospitalCharges", description="Application name")

    # Inpatient (DRG) charge database
    inpatient_mysql_host: str = Field(
        default="localhost", description="Inpatient charge database host"
    )
    inpatient_mysql_port: int = Field(
        default=3306, description="Inpatient charge database port"
    )
    inpatient_mysql_user: str = Field(
        default="charges_reader", description="Inpatient charge database user"
    )
    inpatient_mysql_password: str = Field(
        default="", description="Inpatient charge database password"
    )
    inpatient_mysql_database: str = Field(
        default="inpatient_charges", description="Inpatient charge database name"
    )

    # Outpatient (APC) charge database
    outpatient_mysql_host: str = Field(
        default="localhost", description="Outpatient charge database host"
    )
    outpatient_mysql_port: int = Field(
        default=3306, description="Outpatient charge database port"
    )
    outpatient_mysql_user: str = Field(
        default="charges_reader", description="Outpatient charge database user"
    )
    outpatient_mysql_password: str = Field(
        default="", description="Outpatient charge database password"
    )
    outpatient_mysql_database: str = Field(
        default="outpatient_charges", description="Outpatient charge database name"
    )

    # Connection pool policy
    db_pool_size: int = Field(
        default=5, ge=1, description="Connections kept open per charge database"
    )
    db_max_overflow: int = Field(
        default=0,
        ge=0,
        description="Extra connections allowed beyond db_pool_size under load",
    )
    db_pool_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Seconds to wait for a free connection before failing",
    )
    db_pool_recycle: int = Field(
        default=3600,
        description="Seconds after which a pooled connection is reopened (-1 disables)",
    )
    db_pool_prefill: bool = Field(
        default=False,
        description="Open db_pool_size connections when the services start",
    )
    db_connect_timeout: int = Field(
        default=10, description="MySQL connect timeout in seconds"
    )
    db_read_timeout: int = Field(
        default=30, description="MySQL read timeout in seconds"
    )

    @property
    def inpatient_database(self) -> DatabaseSettings:
        return DatabaseSettings(
            host=self.inpatient_mysql_host,
            port=self.inpatient_mysql_port,
            user=self.inpatient_mysql_user,
            password=self.inpatient_mysql_password,
            database=self.inpatient_mysql_database,
            connect_timeout=self.db_connect_timeout,
            read_timeout=self.db_read_timeout,
        )

    @property
    def outpatient_database(self) -> DatabaseSettings:
        return DatabaseSettings(
            host=self.outpatient_mysql_host,
            port=self.outpatient_mysql_port,
            user=self.outpatient_mysql_user,
            password=self.outpatient_mysql_password,
            database=self.outpatient_mysql_database,
            connect_timeout=self.db_connect_timeout,
            read_timeout=self.db_read_timeout,
        )

    @property
    def pool(self) -> PoolSettings:
        return PoolSettings(
            pool_size=self.db_pool_size,
            max_overflow=self.db_max_overflow,
            timeout=self.db_pool_timeout,
            recycle=self.db_pool_recycle,
            prefill=self.db_pool_prefill,
        )

    model_config = SettingsConfigDict(
        env_prefix="HC_",
        env_file=str(SETTINGS_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are loaded once and reused for the lifetime of the process.

    Returns:
        Settings instance with loaded configuration
    """
    return Settings()
