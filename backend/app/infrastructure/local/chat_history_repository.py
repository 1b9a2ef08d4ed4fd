"""
Chat history repositories.

InMemoryChatHistoryRepository keeps each user's sessions in a list ordered by
insertion; SqliteChatHistoryRepository persists the same structure in the
``chat_histories`` table.
"""

from __future__ import annotations

import asyncio
import itertools
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import and_, delete, func, select

from app.infrastructure.local.database import ChatHistoryORM, get_session_factory
from app.interfaces.chat_history_repository import IChatHistoryRepository
from app.models.chat_history import ChatSession, ChatSessionSummary, Message
from app.utils.datetime_utils import now_iso, now_utc

DEFAULT_HISTORY_CAPACITY = 15


def _unique_most_recent(
    entries: list[tuple[int, ChatSessionSummary]],
    limit: int,
) -> list[ChatSessionSummary]:
    """Keep the most recently touched entry per id, newest first."""
    latest: dict[str, tuple[int, ChatSessionSummary]] = {}
    for touched, summary in entries:
        current = latest.get(summary.id)
        if current is None or touched >= current[0]:
            latest[summary.id] = (touched, summary)
    ordered = sorted(latest.values(), key=lambda item: item[0], reverse=True)
    return [summary for _, summary in ordered[:limit]]


@dataclass
class _StoredChat:
    session: ChatSession
    touched: int


class InMemoryChatHistoryRepository(IChatHistoryRepository):
    """In-memory implementation of the chat history repository.

    Stores sessions in a dictionary keyed by user. Contents live for the
    lifetime of the process; a restart discards all history.
    """

    def __init__(self, capacity: int = DEFAULT_HISTORY_CAPACITY):
        self._capacity = capacity
        self._histories: dict[str, list[_StoredChat]] = {}
        self._clock = itertools.count(1)
        self._lock = asyncio.Lock()

    async def upsert(self, user_id: str, session: ChatSession) -> ChatSession:
        async with self._lock:
            history = self._histories.setdefault(user_id, [])
            existing = next((entry for entry in history if entry.session.id == session.id), None)

            if existing:
                stored = existing.session.model_copy(
                    update={
                        "title": session.title,
                        "timestamp": session.timestamp or existing.session.timestamp,
                        "messages": list(session.messages),
                        "user_id": user_id,
                    }
                )
                existing.session = stored
                existing.touched = next(self._clock)
                return stored

            stored = session.model_copy(
                update={
                    "timestamp": session.timestamp or now_iso(),
                    "messages": list(session.messages),
                    "user_id": user_id,
                }
            )
            history.append(_StoredChat(session=stored, touched=next(self._clock)))
            while len(history) > self._capacity:
                history.pop(0)
            return stored

    async def get(self, user_id: str, chat_id: str) -> Optional[ChatSession]:
        for entry in self._histories.get(user_id, []):
            if entry.session.id == chat_id:
                return entry.session
        return None

    async def list_recent(
        self,
        user_id: str,
        limit: int = DEFAULT_HISTORY_CAPACITY,
    ) -> list[ChatSessionSummary]:
        entries = [
            (entry.touched, entry.session.summary())
            for entry in self._histories.get(user_id, [])
        ]
        return _unique_most_recent(entries, min(limit, self._capacity))

    async def delete(self, user_id: str, chat_id: str) -> bool:
        async with self._lock:
            history = self._histories.get(user_id, [])
            remaining = [entry for entry in history if entry.session.id != chat_id]
            self._histories[user_id] = remaining
            return len(remaining) != len(history)


class SqliteChatHistoryRepository(IChatHistoryRepository):
    """SQLite implementation of the chat history repository."""

    def __init__(self, session_factory=None, capacity: int = DEFAULT_HISTORY_CAPACITY):
        self._session_factory = session_factory or get_session_factory()
        self._capacity = capacity

    def _orm_to_model(self, orm: ChatHistoryORM) -> ChatSession:
        """Convert ORM object to Pydantic model."""
        return ChatSession(
            id=orm.chat_id,
            title=orm.title,
            timestamp=orm.timestamp,
            messages=[Message.model_validate(item) for item in (orm.messages or [])],
            user_id=orm.user_id,
        )

    async def upsert(self, user_id: str, session: ChatSession) -> ChatSession:
        messages = [message.model_dump(mode="json") for message in session.messages]
        async with self._session_factory() as db:
            result = await db.execute(
                select(ChatHistoryORM).where(
                    and_(
                        ChatHistoryORM.user_id == user_id,
                        ChatHistoryORM.chat_id == session.id,
                    )
                )
            )
            orm = result.scalar_one_or_none()

            if orm:
                orm.title = session.title
                orm.timestamp = session.timestamp or orm.timestamp
                orm.messages = messages
                orm.updated_at = now_utc()
            else:
                orm = ChatHistoryORM(
                    chat_id=session.id,
                    user_id=user_id,
                    title=session.title,
                    timestamp=session.timestamp or now_iso(),
                    messages=messages,
                )
                db.add(orm)
                await db.flush()
                await self._evict_overflow(db, user_id)

            await db.commit()
            await db.refresh(orm)
            return self._orm_to_model(orm)

    async def _evict_overflow(self, db, user_id: str) -> None:
        """Delete the oldest inserted sessions beyond capacity."""
        count_result = await db.execute(
            select(func.count()).select_from(ChatHistoryORM).where(ChatHistoryORM.user_id == user_id)
        )
        overflow = count_result.scalar_one() - self._capacity
        if overflow <= 0:
            return
        oldest = await db.execute(
            select(ChatHistoryORM.seq)
            .where(ChatHistoryORM.user_id == user_id)
            .order_by(ChatHistoryORM.seq.asc())
            .limit(overflow)
        )
        seqs = [row[0] for row in oldest.all()]
        await db.execute(delete(ChatHistoryORM).where(ChatHistoryORM.seq.in_(seqs)))

    async def get(self, user_id: str, chat_id: str) -> Optional[ChatSession]:
        async with self._session_factory() as db:
            result = await db.execute(
                select(ChatHistoryORM).where(
                    and_(
                        ChatHistoryORM.user_id == user_id,
                        ChatHistoryORM.chat_id == chat_id,
                    )
                )
            )
            orm = result.scalar_one_or_none()
            return self._orm_to_model(orm) if orm else None

    async def list_recent(
        self,
        user_id: str,
        limit: int = DEFAULT_HISTORY_CAPACITY,
    ) -> list[ChatSessionSummary]:
        async with self._session_factory() as db:
            result = await db.execute(
                select(
                    ChatHistoryORM.chat_id,
                    ChatHistoryORM.title,
                    ChatHistoryORM.timestamp,
                )
                .where(ChatHistoryORM.user_id == user_id)
                .order_by(ChatHistoryORM.updated_at.desc(), ChatHistoryORM.seq.desc())
                .limit(min(limit, self._capacity))
            )
            rows = result.all()
        entries = [
            (len(rows) - index, ChatSessionSummary(id=chat_id, title=title, timestamp=timestamp))
            for index, (chat_id, title, timestamp) in enumerate(rows)
        ]
        return _unique_most_recent(entries, limit)

    async def delete(self, user_id: str, chat_id: str) -> bool:
        async with self._session_factory() as db:
            result = await db.execute(
                delete(ChatHistoryORM).where(
                    and_(
                        ChatHistoryORM.user_id == user_id,
                        ChatHistoryORM.chat_id == chat_id,
                    )
                )
            )
            await db.commit()
            return (result.rowcount or 0) > 0
