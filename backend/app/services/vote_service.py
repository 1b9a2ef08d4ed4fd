"""
Vote service: one vote per user per message with toggle-off semantics.
"""

from __future__ import annotations

import asyncio
from typing import Optional

from app.core.exceptions import ValidationError
from app.core.logger import logger
from app.interfaces.vote_repository import IVoteRepository
from app.models.enums import VoteAction, VoteValue
from app.models.vote import VoteRecord, VoteResult
from app.utils.datetime_utils import now_iso


def parse_vote(value: object) -> VoteValue:
    try:
        return VoteValue(value)
    except ValueError:
        raise ValidationError('Invalid vote. Must be "up" or "down"')


class VoteService:
    """Cast and read votes."""

    def __init__(self, repo: IVoteRepository):
        self._repo = repo
        self._lock = asyncio.Lock()

    async def cast_vote(
        self,
        user_id: str,
        message_id: str,
        chat_id: str,
        vote: VoteValue,
        message_content: Optional[str] = None,
        model: Optional[str] = None,
    ) -> VoteResult:
        """
        Record a vote.

        Repeating the current vote removes it; any other vote creates or
        replaces the record.
        """
        async with self._lock:
            existing = await self._repo.get(user_id, message_id)

            if existing and existing.vote == vote:
                await self._repo.delete(user_id, message_id)
                logger.info(f"Vote removed for message {message_id}")
                return VoteResult(action=VoteAction.REMOVED, vote=None)

            await self._repo.put(
                VoteRecord(
                    message_id=message_id,
                    chat_id=chat_id,
                    user_id=user_id,
                    vote=vote,
                    timestamp=now_iso(),
                    message_content=message_content,
                    model=model,
                )
            )
            logger.info(f"Vote {vote.value} recorded for message {message_id}")
            action = VoteAction.UPDATED if existing else VoteAction.CREATED
            return VoteResult(action=action, vote=vote)

    async def get_vote(self, user_id: str, message_id: str) -> Optional[VoteValue]:
        record = await self._repo.get(user_id, message_id)
        return record.vote if record else None

    async def list_votes(self, user_id: str, chat_id: str) -> list[VoteRecord]:
        return await self._repo.list_for_chat(user_id, chat_id)
