"""
Authentication Service.

Registers and authenticates accounts stored in the users table.
Passwords are hashed with bcrypt. Accounts seeded before hashing was
introduced still hold their password in plain text; those are compared
directly until the user is re-registered.

Exports:
    AuthService: Account registration and login
"""

from typing import Optional

import bcrypt

from util_logger import LoggerFactory, ComponentType
from core.models import User, UserRole
from infrastructure.postgresql import UserRepository

logger = LoggerFactory.create_logger(ComponentType.SERVICE, "AuthService")

# Stored values shorter than this without a bcrypt prefix are plain-text passwords
LEGACY_HASH_MAX_LENGTH = 30


class AuthService:
    """Business logic for login accounts."""

    def __init__(self, users: Optional[UserRepository] = None):
        """Initialize with repository dependencies."""
        self.users = users or UserRepository()

    def register(self, username: str, password: str, role: str = UserRole.CUSTOMER.value) -> bool:
        """
        Create an account.

        Returns:
            False when the username is already taken
        """
        if self.users.get_by_username(username) is not None:
            logger.info(f"Registration rejected, username exists: {username}")
            return False

        self.users.create_user(username, self.hash_password(password), role)
        logger.info(f"👤 Registered {username} as {role}")
        return True

    def login(self, username: str, password: str) -> Optional[User]:
        """Return the user when the credentials match, else None."""
        user = self.users.get_by_username(username)
        if user is None:
            logger.info(f"Login failed, unknown user: {username}")
            return None
        if not self.verify_password(password, user.password_hash):
            logger.info(f"Login failed, bad password: {username}")
            return None
        logger.info(f"🔓 Login: {username} ({user.role})")
        return user

    def get_user(self, username: str) -> Optional[User]:
        return self.users.get_by_username(username)

    def is_admin(self, username: str) -> bool:
        user = self.get_user(username)
        return user is not None and user.is_admin

    @staticmethod
    def hash_password(password: str) -> str:
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")

    @staticmethod
    def verify_password(password: str, password_hash: str) -> bool:
        """
        Check a password against its stored value.

        Short values without the "$2" bcrypt prefix are legacy plain-text
        passwords. Anything bcrypt cannot parse counts as a mismatch.
        """
        if password_hash is None:
            return False
        if len(password_hash) < LEGACY_HASH_MAX_LENGTH and not password_hash.startswith("$2"):
            return password == password_hash
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError as e:
            logger.warning(f"⚠️ Stored password hash could not be verified: {e}")
            return False
