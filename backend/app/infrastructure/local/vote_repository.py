"""
Vote repositories.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import and_, delete, select

from app.infrastructure.local.database import VoteORM, get_session_factory
from app.interfaces.vote_repository import IVoteRepository
from app.models.enums import VoteValue
from app.models.vote import VoteRecord


class InMemoryVoteRepository(IVoteRepository):
    """In-memory implementation of vote repository.

    Stores votes in a dictionary keyed by (user_id, message_id). Suitable for
    development and testing; contents are lost on restart.
    """

    def __init__(self):
        self._votes: dict[tuple[str, str], VoteRecord] = {}

    async def get(self, user_id: str, message_id: str) -> Optional[VoteRecord]:
        return self._votes.get((user_id, message_id))

    async def put(self, record: VoteRecord) -> VoteRecord:
        self._votes[(record.user_id, record.message_id)] = record
        return record

    async def delete(self, user_id: str, message_id: str) -> bool:
        return self._votes.pop((user_id, message_id), None) is not None

    async def list_for_chat(self, user_id: str, chat_id: str) -> list[VoteRecord]:
        return [
            record
            for record in self._votes.values()
            if record.user_id == user_id and record.chat_id == chat_id
        ]


class SqliteVoteRepository(IVoteRepository):
    """SQLite implementation of vote repository."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_factory()

    def _orm_to_model(self, orm: VoteORM) -> VoteRecord:
        """Convert ORM object to Pydantic model."""
        return VoteRecord(
            message_id=orm.message_id,
            chat_id=orm.chat_id,
            user_id=orm.user_id,
            vote=VoteValue(orm.vote),
            timestamp=orm.timestamp,
            message_content=orm.message_content,
            model=orm.model,
        )

    def _key_clause(self, user_id: str, message_id: str):
        return and_(VoteORM.user_id == user_id, VoteORM.message_id == message_id)

    async def get(self, user_id: str, message_id: str) -> Optional[VoteRecord]:
        async with self._session_factory() as session:
            result = await session.execute(select(VoteORM).where(self._key_clause(user_id, message_id)))
            orm = result.scalar_one_or_none()
            return self._orm_to_model(orm) if orm else None

    async def put(self, record: VoteRecord) -> VoteRecord:
        async with self._session_factory() as session:
            result = await session.execute(
                select(VoteORM).where(self._key_clause(record.user_id, record.message_id))
            )
            orm = result.scalar_one_or_none()
            if orm is None:
                orm = VoteORM(user_id=record.user_id, message_id=record.message_id)
                session.add(orm)
            orm.chat_id = record.chat_id
            orm.vote = record.vote.value
            orm.timestamp = record.timestamp
            orm.message_content = record.message_content
            orm.model = record.model

            await session.commit()
            await session.refresh(orm)
            return self._orm_to_model(orm)

    async def delete(self, user_id: str, message_id: str) -> bool:
        async with self._session_factory() as session:
            result = await session.execute(delete(VoteORM).where(self._key_clause(user_id, message_id)))
            await session.commit()
            return (result.rowcount or 0) > 0

    async def list_for_chat(self, user_id: str, chat_id: str) -> list[VoteRecord]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(VoteORM)
                .where(and_(VoteORM.user_id == user_id, VoteORM.chat_id == chat_id))
                .order_by(VoteORM.id.asc())
            )
            return [self._orm_to_model(orm) for orm in result.scalars().all()]
