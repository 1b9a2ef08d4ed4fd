"""
User repositories.

Emails are stored normalized (stripped, lower-case) so lookups are
case-insensitive.
"""

from __future__ import annotations

import asyncio
from typing import Optional
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from app.core.exceptions import DuplicateError
from app.infrastructure.local.database import UserORM, get_session_factory
from app.interfaces.user_repository import IUserRepository
from app.models.user import UserAccount, UserCreate
from app.utils.datetime_utils import now_utc


def normalize_email(value: str) -> str:
    return value.strip().lower()


class InMemoryUserRepository(IUserRepository):
    """In-memory implementation of user repository."""

    def __init__(self):
        self._users: dict[str, UserAccount] = {}
        self._lock = asyncio.Lock()

    async def get(self, user_id: str) -> Optional[UserAccount]:
        return self._users.get(user_id)

    async def get_by_email(self, email: str) -> Optional[UserAccount]:
        normalized = normalize_email(email)
        return next((user for user in self._users.values() if user.email == normalized), None)

    async def create(self, data: UserCreate) -> UserAccount:
        async with self._lock:
            email = normalize_email(data.email)
            if await self.get_by_email(email):
                raise DuplicateError("User with this email already exists")
            user = UserAccount(
                id=str(uuid4()),
                email=email,
                name=data.name,
                password_hash=data.password_hash,
                created_at=now_utc(),
            )
            self._users[user.id] = user
            return user


class SqliteUserRepository(IUserRepository):
    """SQLite implementation of user repository."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_factory()

    def _orm_to_model(self, orm: UserORM) -> UserAccount:
        return UserAccount(
            id=orm.id,
            email=orm.email,
            name=orm.name or "",
            password_hash=orm.password_hash,
            created_at=orm.created_at,
        )

    async def get(self, user_id: str) -> Optional[UserAccount]:
        async with self._session_factory() as session:
            result = await session.execute(select(UserORM).where(UserORM.id == user_id))
            orm = result.scalar_one_or_none()
            return self._orm_to_model(orm) if orm else None

    async def get_by_email(self, email: str) -> Optional[UserAccount]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(UserORM).where(UserORM.email == normalize_email(email))
            )
            orm = result.scalar_one_or_none()
            return self._orm_to_model(orm) if orm else None

    async def create(self, data: UserCreate) -> UserAccount:
        async with self._session_factory() as session:
            orm = UserORM(
                id=str(uuid4()),
                email=normalize_email(data.email),
                name=data.name,
                password_hash=data.password_hash,
                created_at=now_utc(),
            )
            session.add(orm)
            try:
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                raise DuplicateError("User with this email already exists") from exc
            await session.refresh(orm)
            return self._orm_to_model(orm)
