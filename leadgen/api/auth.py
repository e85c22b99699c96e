"""Admin authentication for the dashboard endpoints.

A single shared admin password (``ADMIN_PASSWORD``) is exchanged for an
opaque session token. Tokens are passed back as ``Authorization: Bearer``
headers and expire after ``admin_session_hours``.

Usage:
    @router.get("/stats")
    async def stats(_: str = Depends(require_admin)):
        ...
"""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from leadgen.config.settings import Settings, get_settings

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


class AuthError(HTTPException):
    """Authentication error with the standard bearer challenge."""

    def __init__(self, detail: str = "Admin authentication required"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class AdminSessionManager:
    """Issues, validates and revokes admin session tokens (in-process)."""

    def __init__(self, ttl: timedelta = timedelta(hours=24)) -> None:
        self._ttl = ttl
        self._sessions: dict[str, datetime] = {}

    def login(self, password: str, expected_password: str) -> Optional[str]:
        """Return a new token when the password matches, else None."""
        if not expected_password:
            logger.warning("Admin login attempted but ADMIN_PASSWORD is not configured")
            return None
        if not secrets.compare_digest(password.encode(), expected_password.encode()):
            logger.info("Admin login rejected")
            return None
        now = datetime.now(tz=timezone.utc)
        self._sweep(now)
        token = secrets.token_urlsafe(32)
        self._sessions[token] = now + self._ttl
        logger.info("Admin session started")
        return token

    def is_valid(self, token: Optional[str]) -> bool:
        if not token:
            return False
        expires_at = self._sessions.get(token)
        if expires_at is None:
            return False
        if expires_at <= datetime.now(tz=timezone.utc):
            self._sessions.pop(token, None)
            return False
        return True

    def logout(self, token: Optional[str]) -> None:
        if token:
            self._sessions.pop(token, None)

    @property
    def active_sessions(self) -> int:
        return len(self._sessions)

    def _sweep(self, now: datetime) -> None:
        expired = [token for token, expires_at in self._sessions.items() if expires_at <= now]
        for token in expired:
            del self._sessions[token]


_session_manager: Optional[AdminSessionManager] = None


def get_session_manager(settings: Settings = Depends(get_settings)) -> AdminSessionManager:
    global _session_manager
    if _session_manager is None:
        _session_manager = AdminSessionManager(ttl=timedelta(hours=settings.admin_session_hours))
    return _session_manager


def bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[str]:
    return credentials.credentials if credentials is not None else None


async def require_admin(
    token: Optional[str] = Depends(bearer_token),
    sessions: AdminSessionManager = Depends(get_session_manager),
) -> str:
    """Require a valid admin session token. Raises 401 otherwise."""
    if token is None:
        raise AuthError()
    if not sessions.is_valid(token):
        raise AuthError("Invalid or expired session")
    return token
