"""
Configuration Package - Domain-Specific Configuration Modules

This package provides application configuration using a composition-based approach.

Structure:
    config/
    ├── __init__.py              # This file - exports and singleton
    ├── app_config.py            # Main config (composes domain configs)
    ├── storage_config.py        # Azure Storage account
    ├── database_config.py       # PostgreSQL users and carts
    ├── auth_config.py           # Session cookie
    └── defaults.py              # Default values and storage resource names

Usage:
    # Singleton pattern (preferred)
    from config import get_config
    config = get_config()
    days = config.storage.image_sas_days

    # Resource names
    from config import StorageNames
    queue = StorageNames.QUEUE_ORDER_NOTIFICATIONS

    # Debug output
    from config import debug_config
    info = debug_config()  # Secrets masked
"""

from typing import Optional

from .defaults import StorageNames, AuthDefaults
from .storage_config import StorageConfig
from .database_config import DatabaseConfig, get_postgres_connection_string
from .auth_config import AuthConfig
from .app_config import AppConfig

__version__ = "1.0.0"


# ============================================================================
# SINGLETON PATTERN
# ============================================================================

_config_instance: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Get global configuration singleton.

    Returns:
        AppConfig instance loaded from environment
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = AppConfig.from_environment()
    return _config_instance


def reset_config() -> None:
    """Drop the cached configuration so the next get_config() re-reads the environment."""
    global _config_instance
    _config_instance = None


def debug_config() -> dict:
    """
    Get sanitized configuration for debugging (masks sensitive values).

    Returns:
        Dictionary with configuration values, secrets masked
    """
    try:
        config = get_config()
        return {
            'storage': config.storage.debug_dict(),
            'database': config.database.debug_dict(),
            'auth': config.auth.debug_dict(),

            # Application
            'app_name': config.app_name,
            'debug_mode': config.debug_mode,
            'environment': config.environment,
            'log_level': config.log_level,
            'version': __version__,
        }
    except Exception as e:
        return {'error': f'Configuration validation failed: {e}'}


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    # Main config
    'AppConfig',
    'get_config',
    'reset_config',
    'debug_config',
    '__version__',

    # Domain configs
    'StorageConfig',
    'DatabaseConfig',
    'get_postgres_connection_string',
    'AuthConfig',

    # Constants
    'StorageNames',
    'AuthDefaults',
]
