"""
Session Authentication Configuration.

Provides configuration for the signed session cookie that carries the
logged-in user, its role and its expiry.

Exports:
    AuthConfig: Pydantic auth configuration model
"""

import os
from pydantic import BaseModel, Field

from .defaults import AuthDefaults


class AuthConfig(BaseModel):
    """Cookie session settings."""

    secret_key: str = Field(
        default=AuthDefaults.SECRET_KEY,
        repr=False,
        description="Key used to sign the session cookie (SESSION_SECRET_KEY)"
    )

    cookie_name: str = Field(
        default=AuthDefaults.COOKIE_NAME,
        description="Session cookie name"
    )

    remember_me_days: int = Field(
        default=AuthDefaults.REMEMBER_ME_DAYS,
        ge=1,
        description="Login lifetime in days when 'remember me' is ticked"
    )

    session_hours: int = Field(
        default=AuthDefaults.SESSION_HOURS,
        ge=1,
        description="Login lifetime in hours without 'remember me'"
    )

    https_only: bool = Field(
        default=False,
        description="Mark the session cookie Secure (SESSION_HTTPS_ONLY)"
    )

    @property
    def cookie_max_age_seconds(self) -> int:
        """Cookie lifetime; the per-login expiry stored in the session is checked separately."""
        return self.remember_me_days * 24 * 3600

    def debug_dict(self) -> dict:
        """Debug output with masked secret."""
        return {
            "secret_key": "***MASKED***",
            "cookie_name": self.cookie_name,
            "remember_me_days": self.remember_me_days,
            "session_hours": self.session_hours,
            "https_only": self.https_only,
        }

    @classmethod
    def from_environment(cls):
        """Load from environment variables."""
        return cls(
            secret_key=os.environ.get("SESSION_SECRET_KEY", AuthDefaults.SECRET_KEY),
            cookie_name=os.environ.get("SESSION_COOKIE_NAME", AuthDefaults.COOKIE_NAME),
            remember_me_days=int(os.environ.get("SESSION_REMEMBER_ME_DAYS", str(AuthDefaults.REMEMBER_ME_DAYS))),
            session_hours=int(os.environ.get("SESSION_HOURS", str(AuthDefaults.SESSION_HOURS))),
            https_only=os.environ.get("SESSION_HTTPS_ONLY", "false").lower() == "true",
        )
