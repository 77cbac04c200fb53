"""
DatabaseInitializer - Relational Store Setup.

Creates the schema, the users table and the cart table when they are
missing. Every statement is idempotent (IF NOT EXISTS), so the web
application runs this on every start.

Usage:
    from infrastructure.database_initializer import DatabaseInitializer

    result = DatabaseInitializer().ensure_tables()
    if not result.success:
        logger.error(result.to_dict())

Exports:
    DatabaseInitializer: Creates the relational tables
    InitializationResult: Dataclass for step results
"""

from typing import Dict, Any, List, Optional
from dataclasses import dataclass, field
from datetime import datetime, timezone
from psycopg import sql

from util_logger import LoggerFactory, ComponentType
from config import AppConfig, get_config
from config.defaults import DatabaseDefaults
from exceptions import DatabaseError
from .postgresql import PostgreSQLRepository

logger = LoggerFactory.create_logger(ComponentType.SERVICE, "DatabaseInitializer")


# ============================================================================
# DATA CLASSES
# ============================================================================

@dataclass
class StepResult:
    """Result of a single initialization step."""
    name: str
    status: str  # 'success', 'failed'
    message: str = ""
    error: Optional[str] = None


@dataclass
class InitializationResult:
    """Complete result of database initialization."""
    database_name: str
    schema_name: str
    timestamp: str
    success: bool = False
    steps: List[StepResult] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "database_name": self.database_name,
            "schema_name": self.schema_name,
            "timestamp": self.timestamp,
            "success": self.success,
            "steps": [
                {"name": s.name, "status": s.status, "message": s.message, "error": s.error}
                for s in self.steps
            ],
        }


# ============================================================================
# DATABASE INITIALIZER
# ============================================================================

class DatabaseInitializer:
    """
    Creates the users and cart tables.

    Each step runs in its own transaction; a failed step does not stop
    the following ones.
    """

    def __init__(self, repository: Optional[PostgreSQLRepository] = None,
                 config: Optional[AppConfig] = None):
        self.config = config or get_config()
        self._repo = repository or PostgreSQLRepository(config=self.config)
        self.schema_name = self._repo.schema_name

    def _statements(self) -> List[tuple]:
        schema = sql.Identifier(self.schema_name)
        users = sql.SQL("{}.{}").format(schema, sql.Identifier(DatabaseDefaults.USERS_TABLE))
        cart = sql.SQL("{}.{}").format(schema, sql.Identifier(DatabaseDefaults.CART_TABLE))

        return [
            ("create_schema", sql.SQL("CREATE SCHEMA IF NOT EXISTS {}").format(schema)),
            ("create_users_table", sql.SQL("""
                CREATE TABLE IF NOT EXISTS {} (
                    id SERIAL PRIMARY KEY,
                    username VARCHAR(100) NOT NULL UNIQUE,
                    password_hash VARCHAR(255) NOT NULL,
                    role VARCHAR(20) NOT NULL DEFAULT 'Customer'
                )
            """).format(users)),
            ("create_cart_table", sql.SQL("""
                CREATE TABLE IF NOT EXISTS {} (
                    id SERIAL PRIMARY KEY,
                    customer_username VARCHAR(100),
                    product_id VARCHAR(100),
                    quantity INTEGER NOT NULL DEFAULT 1
                )
            """).format(cart)),
            ("create_cart_username_index", sql.SQL(
                "CREATE INDEX IF NOT EXISTS {} ON {} (customer_username)"
            ).format(sql.Identifier(f"ix_{DatabaseDefaults.CART_TABLE}_customer_username"), cart)),
        ]

    def ensure_tables(self) -> InitializationResult:
        """
        Create any missing relational objects.

        Returns:
            InitializationResult with one step per statement
        """
        result = InitializationResult(
            database_name=self.config.database.database,
            schema_name=self.schema_name,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )
        logger.info(f"🚀 Ensuring relational tables in schema {self.schema_name}")

        for name, statement in self._statements():
            try:
                self._repo._execute_query(statement)
                result.steps.append(StepResult(name=name, status="success"))
                logger.debug(f"   ✅ {name}")
            except DatabaseError as e:
                result.steps.append(StepResult(name=name, status="failed", error=str(e)))
                logger.error(f"   ❌ {name} failed: {e}")

        result.success = all(step.status == "success" for step in result.steps)
        logger.info(f"🏁 Relational tables {'ready' if result.success else 'NOT ready'}")
        return result
