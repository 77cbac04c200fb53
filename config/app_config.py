"""
Main Application Configuration.

Composes domain-specific configuration modules:
    - StorageConfig (Azure Storage account)
    - DatabaseConfig (PostgreSQL users and carts)
    - AuthConfig (session cookie)

Exports:
    AppConfig: Main configuration class

Pattern:
    Composition over inheritance - domain configs are composed, not inherited.
"""

import os
from pydantic import BaseModel, Field

from .storage_config import StorageConfig
from .database_config import DatabaseConfig
from .auth_config import AuthConfig
from .defaults import AppDefaults


# ============================================================================
# APPLICATION CONFIGURATION
# ============================================================================

class AppConfig(BaseModel):
    """
    Application configuration - composition of domain configs.

    Each domain config manages its own validation and defaults.
    """

    debug_mode: bool = Field(
        default=AppDefaults.DEBUG_MODE,
        description="Enable debug mode (verbose logs, exception detail on the error page). "
                    "Set DEBUG_MODE=true in environment to enable.",
        examples=[True, False]
    )

    environment: str = Field(
        default=AppDefaults.ENVIRONMENT,
        description="Environment name (dev, qa, prod)",
        examples=["dev", "qa", "prod"]
    )

    log_level: str = Field(
        default=AppDefaults.LOG_LEVEL,
        description="Root log level for the web process"
    )

    app_name: str = Field(
        default=AppDefaults.APP_NAME,
        description="Application name shown in page titles and health output"
    )

    # ========================================================================
    # Domain configs
    # ========================================================================

    storage: StorageConfig = Field(default_factory=StorageConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)

    @classmethod
    def from_environment(cls):
        """Load all configs from environment."""
        return cls(
            debug_mode=os.environ.get("DEBUG_MODE", str(AppDefaults.DEBUG_MODE).lower()).lower() == "true",
            environment=os.environ.get("ENVIRONMENT", AppDefaults.ENVIRONMENT),
            log_level=os.environ.get("LOG_LEVEL", AppDefaults.LOG_LEVEL),
            app_name=os.environ.get("APP_NAME", AppDefaults.APP_NAME),

            # Domain configs
            storage=StorageConfig.from_environment(),
            database=DatabaseConfig.from_environment(),
            auth=AuthConfig.from_environment(),
        )
