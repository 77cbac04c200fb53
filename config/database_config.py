"""
PostgreSQL Database Configuration.

Provides configuration for the relational store that holds
user accounts and shopping carts.

Exports:
    DatabaseConfig: Database configuration
    get_postgres_connection_string: Connection string factory
"""

import os
from typing import Optional
from pydantic import BaseModel, Field

from .defaults import DatabaseDefaults


# ============================================================================
# DATABASE CONFIGURATION
# ============================================================================

class DatabaseConfig(BaseModel):
    """
    PostgreSQL configuration.

    Either a complete POSTGRES_CONNECTION_STRING or individual components.
    A complete string takes precedence.
    """

    url: Optional[str] = Field(
        default=None,
        repr=False,
        description="Complete connection string (POSTGRES_CONNECTION_STRING). Overrides the components below."
    )

    host: str = Field(
        default=DatabaseDefaults.HOST,
        description="PostgreSQL server hostname"
    )

    port: int = Field(
        default=DatabaseDefaults.PORT,
        description="PostgreSQL server port number"
    )

    user: Optional[str] = Field(
        default=None,
        description="PostgreSQL username"
    )

    password: Optional[str] = Field(
        default=None,
        repr=False,
        description="PostgreSQL password from POSTGRES_PASSWORD"
    )

    database: str = Field(
        default=DatabaseDefaults.DATABASE,
        description="PostgreSQL database name",
        examples=["storefront"]
    )

    db_schema: str = Field(
        default=DatabaseDefaults.SCHEMA,
        description="Schema holding the users and cart tables"
    )

    sslmode: str = Field(
        default=DatabaseDefaults.SSLMODE,
        description="libpq sslmode (disable, prefer, require, verify-full)"
    )

    @property
    def connection_string(self) -> str:
        """Build PostgreSQL connection string."""
        if self.url:
            return self.url
        parts = [
            f"host={self.host}",
            f"port={self.port}",
            f"dbname={self.database}",
            f"sslmode={self.sslmode}",
        ]
        if self.user:
            parts.append(f"user={self.user}")
        if self.password:
            parts.append(f"password={self.password}")
        return " ".join(parts)

    def debug_dict(self) -> dict:
        """Debug output with masked password."""
        return {
            "url": "***MASKED***" if self.url else None,
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "database": self.database,
            "password": "***MASKED***" if self.password else None,
            "db_schema": self.db_schema,
            "sslmode": self.sslmode,
        }

    @classmethod
    def from_environment(cls):
        """Load from environment variables."""
        return cls(
            url=os.environ.get("POSTGRES_CONNECTION_STRING") or None,
            host=os.environ.get("POSTGRES_HOST", DatabaseDefaults.HOST),
            port=int(os.environ.get("POSTGRES_PORT", str(DatabaseDefaults.PORT))),
            user=os.environ.get("POSTGRES_USER"),
            password=os.environ.get("POSTGRES_PASSWORD"),
            database=os.environ.get("POSTGRES_DB", DatabaseDefaults.DATABASE),
            db_schema=os.environ.get("POSTGRES_SCHEMA", DatabaseDefaults.SCHEMA),
            sslmode=os.environ.get("POSTGRES_SSLMODE", DatabaseDefaults.SSLMODE),
        )


def get_postgres_connection_string(config: Optional[DatabaseConfig] = None) -> str:
    """
    Get PostgreSQL connection string.

    Args:
        config: Optional DatabaseConfig instance. If None, creates from environment.

    Returns:
        PostgreSQL connection string
    """
    if config is None:
        config = DatabaseConfig.from_environment()

    return config.connection_string
