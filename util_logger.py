"""
Storefront structured logging.

Every component logger writes one JSON object per line to stdout, which is
what App Service and Azure Monitor collect from a container. Records carry
the component that produced them plus whatever request fields the web
middleware bound for the current request.

Exports:
    ComponentType: Application layer that owns a logger
    LogLevel: Level names with a mapping onto logging constants
    bind_request_context / reset_request_context: Per-request correlation
    JSONFormatter: JSON log line formatter
    LoggerFactory: Builds component loggers

Dependencies:
    Standard library only (logging, contextvars, json)
"""

from contextvars import ContextVar, Token
from enum import Enum
from typing import Optional, Dict, Any
from datetime import datetime, timezone
from dataclasses import dataclass
import logging
import sys
import os
import json


class ComponentType(Enum):
    """Layer a logger belongs to; becomes the logger name prefix."""
    CONTROLLER = "controller"  # Web routes
    SERVICE = "service"        # Business logic layer
    REPOSITORY = "repository"  # Data access layer
    TRIGGER = "trigger"        # Application entry point (lifespan, middleware)
    VALIDATOR = "validator"    # Form and price validation


class LogLevel(Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    def to_python_level(self) -> int:
        return getattr(logging, self.value)

    @classmethod
    def from_string(cls, level: str) -> 'LogLevel':
        """Case-insensitive lookup, e.g. from LOG_LEVEL=warning."""
        return cls[level.upper()]


# ============================================================================
# REQUEST CONTEXT - Correlation across one HTTP request
# ============================================================================

_request_context: ContextVar[Dict[str, Any]] = ContextVar('request_context', default={})


def bind_request_context(**values: Any) -> Token:
    """
    Attach correlation fields (request_id, username) to every log record
    emitted while the current request is being handled.

    Returns:
        Token for reset_request_context()
    """
    return _request_context.set({k: v for k, v in values.items() if v is not None})


def reset_request_context(token: Token) -> None:
    _request_context.reset(token)


def current_request_context() -> Dict[str, Any]:
    return dict(_request_context.get())


# ============================================================================
# JSON FORMATTER
# ============================================================================

class JSONFormatter(logging.Formatter):
    """One JSON object per record; customDimensions carries the structured fields."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name,
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        if hasattr(record, 'custom_dimensions'):
            log_obj['customDimensions'] = record.custom_dimensions

        if record.exc_info and record.exc_info[0]:
            log_obj['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': self.formatException(record.exc_info)
            }

        return json.dumps(log_obj, default=str)


class ComponentLogFilter(logging.Filter):
    """
    Stamps component identity and the bound request context onto records.

    Explicit ``extra={'custom_dimensions': {...}}`` values win over the
    request context on key collisions.
    """

    def __init__(self, component_type: ComponentType, name: str):
        super().__init__()
        self.component_type = component_type
        self.component_name = name

    def filter(self, record: logging.LogRecord) -> bool:
        dims = {
            'component_type': self.component_type.value,
            'component_name': self.component_name,
        }
        dims.update(current_request_context())
        dims.update(getattr(record, 'custom_dimensions', None) or {})
        record.custom_dimensions = dims
        return True


# ============================================================================
# LOGGER FACTORY
# ============================================================================

@dataclass
class ComponentConfig:
    component_type: ComponentType
    log_level: LogLevel = LogLevel.INFO


class LoggerFactory:
    """
    Creates component loggers.

    Example:
        logger = LoggerFactory.create_logger(ComponentType.SERVICE, "OrderService")
        logger.info("Creating order", extra={'custom_dimensions': {'order_id': order_id}})
    """

    # LOG_LEVEL applies to every component unless a config is passed explicitly
    _default_level = LogLevel.from_string(os.getenv('LOG_LEVEL', 'INFO'))

    @classmethod
    def create_logger(
        cls,
        component_type: ComponentType,
        name: str,
        config: Optional[ComponentConfig] = None
    ) -> logging.Logger:
        """
        Create (or fetch) the logger for one component.

        Args:
            component_type: Layer owning the logger
            name: Component name (e.g., "OrderService")
            config: Optional level override

        Returns:
            Logger named "<layer>.<name>" with a JSON stdout handler
        """
        if config is None:
            config = ComponentConfig(component_type=component_type, log_level=cls._default_level)

        logger = logging.getLogger(f"{component_type.value}.{name}")
        log_level = config.log_level.to_python_level()
        logger.setLevel(log_level)

        # create_logger runs at import time in many modules; attach handler and filter once
        if not any(isinstance(h.formatter, JSONFormatter) for h in logger.handlers):
            handler = logging.StreamHandler(sys.stdout)
            handler.setLevel(log_level)
            handler.setFormatter(JSONFormatter())
            logger.addHandler(handler)

        if not any(isinstance(f, ComponentLogFilter) for f in logger.filters):
            logger.addFilter(ComponentLogFilter(component_type, name))

        # Root handler (uvicorn console) sees the plain-text line as well
        logger.propagate = True

        return logger
