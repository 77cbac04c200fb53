"""
PostgreSQL Repository Implementation - Users and Carts.

The relational store holds login accounts and shopping cart rows. Products,
customers and orders live in table storage; cart rows reference products
by their table row key.

Architecture:
    BaseRepository (abstract)
        ↓
    PostgreSQLRepository (PostgreSQL-specific base)
        ↓
    UserRepository, CartRepository

Key Features:
- Direct PostgreSQL access using psycopg3
- SQL composition (sql.SQL / sql.Identifier) for injection safety
- One connection per operation, always committed
- psycopg errors surfaced as DatabaseError
"""

from contextlib import contextmanager
from typing import Any, List, Optional, Tuple

import psycopg
from psycopg import sql
from psycopg.rows import dict_row

from config import AppConfig, get_config
from config.defaults import DatabaseDefaults
from core.models import CartRow, User, UserRole
from exceptions import ContractViolationError, DatabaseError
from .base import BaseRepository


# ============================================================================
# POSTGRESQL BASE REPOSITORY - Connection and common operations
# ============================================================================

class PostgreSQLRepository(BaseRepository):
    """
    PostgreSQL-specific repository base class with connection management.

    Each operation opens its own connection, so instances are safe to share
    between request threads.
    """

    def __init__(self, connection_string: Optional[str] = None,
                 schema_name: Optional[str] = None,
                 config: Optional[AppConfig] = None):
        """
        Args:
            connection_string: Explicit connection string (overrides config)
            schema_name: Schema holding the tables (default from config)
            config: AppConfig, defaults to get_config()
        """
        super().__init__()
        self.config = config or get_config()
        self.schema_name = schema_name or self.config.database.db_schema
        self.conn_string = connection_string or self.config.database.connection_string
        self.logger.debug(f"✅ {self.__class__.__name__} initialized with schema: {self.schema_name}")

    @contextmanager
    def _get_connection(self):
        """
        Context manager for PostgreSQL database connections.

        Rolls back on error and always closes the connection.

        Yields:
            psycopg.Connection with dict_row row factory
        """
        conn = None
        try:
            conn = psycopg.connect(self.conn_string, row_factory=dict_row)
            yield conn
        except psycopg.Error as e:
            self.logger.error(f"❌ PostgreSQL error: {type(e).__name__}: {e}")
            if conn:
                conn.rollback()
            raise
        finally:
            if conn:
                conn.close()

    def _table(self, table_name: str) -> sql.Composed:
        return sql.SQL("{}.{}").format(sql.Identifier(self.schema_name), sql.Identifier(table_name))

    def _execute_query(self, query: sql.Composable, params: Optional[Tuple] = None,
                       fetch: Optional[str] = None) -> Optional[Any]:
        """
        Execute a query and ALWAYS commit.

        Args:
            query: Query built with psycopg.sql composition
            params: Parameters for %s placeholders
            fetch: None | 'one' | 'all' | 'many'

        Returns:
            - For fetch operations: row dict(s)
            - For DML operations: number of affected rows

        Raises:
            ContractViolationError: query is a plain string or fetch is unknown
            DatabaseError: Any database failure
        """
        if not isinstance(query, sql.Composable):
            raise ContractViolationError(f"Query must be psycopg.sql composed, got {type(query).__name__}")
        if fetch and fetch not in ('one', 'all', 'many'):
            raise ContractViolationError(f"Invalid fetch mode: {fetch}")

        try:
            with self._get_connection() as conn:
                with conn.cursor() as cursor:
                    cursor.execute(query, params)

                    result = None
                    if fetch == 'one':
                        result = cursor.fetchone()
                    elif fetch == 'all':
                        result = cursor.fetchall()
                    elif fetch == 'many':
                        result = cursor.fetchmany()

                    conn.commit()

                    if fetch:
                        return result
                    return cursor.rowcount
        except psycopg.Error as e:
            self.logger.error(f"❌ Query failed: {e}")
            raise DatabaseError(f"Database operation failed: {e}") from e


# ============================================================================
# USER REPOSITORY
# ============================================================================

class UserRepository(PostgreSQLRepository):
    """Login accounts (users table)."""

    TABLE = DatabaseDefaults.USERS_TABLE

    @staticmethod
    def _to_user(row) -> User:
        return User(
            id=row['id'],
            username=row['username'],
            password_hash=row['password_hash'],
            role=row['role'],
        )

    def get_by_username(self, username: str) -> Optional[User]:
        query = sql.SQL(
            "SELECT id, username, password_hash, role FROM {} WHERE username = %s"
        ).format(self._table(self.TABLE))
        row = self._execute_query(query, (username,), fetch='one')
        if not row:
            self.logger.debug(f"👤 User not found: {username}")
            return None
        return self._to_user(row)

    def create_user(self, username: str, password_hash: str, role: str = UserRole.CUSTOMER.value) -> User:
        with self._error_context("user creation", username):
            query = sql.SQL(
                "INSERT INTO {} (username, password_hash, role) VALUES (%s, %s, %s) "
                "RETURNING id, username, password_hash, role"
            ).format(self._table(self.TABLE))
            row = self._execute_query(query, (username, password_hash, role), fetch='one')
        self.logger.info(f"✅ User created: {username} role={role}")
        return self._to_user(row)

    def list_users(self) -> List[User]:
        query = sql.SQL(
            "SELECT id, username, password_hash, role FROM {} ORDER BY username"
        ).format(self._table(self.TABLE))
        rows = self._execute_query(query, fetch='all') or []
        return [self._to_user(row) for row in rows]


# ============================================================================
# CART REPOSITORY
# ============================================================================

class CartRepository(PostgreSQLRepository):
    """Shopping cart rows (cart table), always scoped to one username."""

    TABLE = DatabaseDefaults.CART_TABLE
    COLUMNS = sql.SQL("id, customer_username, product_id, quantity")

    @staticmethod
    def _to_row(row) -> CartRow:
        return CartRow(
            id=row['id'],
            customer_username=row['customer_username'],
            product_id=row['product_id'],
            quantity=row['quantity'],
        )

    def find_item(self, username: str, product_id: str) -> Optional[CartRow]:
        """The user's row for a product, if any."""
        query = sql.SQL(
            "SELECT {} FROM {} WHERE customer_username = %s AND product_id = %s ORDER BY id LIMIT 1"
        ).format(self.COLUMNS, self._table(self.TABLE))
        row = self._execute_query(query, (username, product_id), fetch='one')
        return self._to_row(row) if row else None

    def get_item(self, cart_id: int, username: str) -> Optional[CartRow]:
        """A row by id, only if it belongs to the user."""
        query = sql.SQL(
            "SELECT {} FROM {} WHERE id = %s AND customer_username = %s"
        ).format(self.COLUMNS, self._table(self.TABLE))
        row = self._execute_query(query, (cart_id, username), fetch='one')
        return self._to_row(row) if row else None

    def insert_item(self, username: str, product_id: str, quantity: int) -> CartRow:
        query = sql.SQL(
            "INSERT INTO {} (customer_username, product_id, quantity) VALUES (%s, %s, %s) RETURNING {}"
        ).format(self._table(self.TABLE), self.COLUMNS)
        row = self._execute_query(query, (username, product_id, quantity), fetch='one')
        self.logger.debug(f"🛒 Cart row {row['id']} inserted for {username}")
        return self._to_row(row)

    def set_quantity(self, cart_id: int, quantity: int) -> bool:
        query = sql.SQL("UPDATE {} SET quantity = %s WHERE id = %s").format(self._table(self.TABLE))
        return self._execute_query(query, (quantity, cart_id)) > 0

    def delete_item(self, cart_id: int) -> bool:
        query = sql.SQL("DELETE FROM {} WHERE id = %s").format(self._table(self.TABLE))
        return self._execute_query(query, (cart_id,)) > 0

    def list_items(self, username: str) -> List[CartRow]:
        query = sql.SQL(
            "SELECT {} FROM {} WHERE customer_username = %s ORDER BY id"
        ).format(self.COLUMNS, self._table(self.TABLE))
        rows = self._execute_query(query, (username,), fetch='all') or []
        return [self._to_row(row) for row in rows]

    def sum_quantity(self, username: str) -> int:
        query = sql.SQL(
            "SELECT COALESCE(SUM(quantity), 0) AS total FROM {} WHERE customer_username = %s"
        ).format(self._table(self.TABLE))
        row = self._execute_query(query, (username,), fetch='one')
        return int(row['total']) if row else 0

    def delete_all_for_user(self, username: str) -> int:
        query = sql.SQL("DELETE FROM {} WHERE customer_username = %s").format(self._table(self.TABLE))
        deleted = self._execute_query(query, (username,))
        self.logger.info(f"🧹 Removed {deleted} cart rows for {username}")
        return deleted
