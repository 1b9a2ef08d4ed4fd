"""
Local password authentication provider.
"""

from __future__ import annotations

from jose import JWTError

from app.core.config import Settings
from app.core.security import decode_access_token
from app.interfaces.auth_provider import IAuthProvider, User
from app.interfaces.user_repository import IUserRepository


class LocalAuthProvider(IAuthProvider):
    """Local auth provider with HMAC JWT validation."""

    def __init__(self, settings: Settings, user_repo: IUserRepository):
        if not settings.LOCAL_JWT_SECRET:
            raise ValueError("LOCAL_JWT_SECRET must be set for local auth")
        self._settings = settings
        self._user_repo = user_repo

    async def verify_token(self, token: str) -> User:
        claims = decode_access_token(token, self._settings)
        subject = claims.get("sub")
        if not subject:
            raise JWTError("Missing subject")
        user = await self._user_repo.get(str(subject))
        if not user:
            raise JWTError("User not found")
        return User(id=user.id, email=user.email, display_name=user.name or None)
