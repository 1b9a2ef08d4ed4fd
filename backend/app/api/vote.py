"""
Vote API endpoints.
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from app.api.deps import CurrentUser, Votes
from app.models.vote import ChatVotes, VoteCreate, VoteLookup, VoteResult
from app.services.vote_service import parse_vote

router = APIRouter()


@router.post("", response_model=VoteResult)
async def cast_vote(
    data: VoteCreate,
    user: CurrentUser,
    votes: Votes,
):
    """Cast a vote; repeating the same vote removes it."""
    if not data.message_id or not data.chat_id or not data.vote:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing required fields: messageId, chatId, vote",
        )

    return await votes.cast_vote(
        user.owner_id,
        data.message_id,
        data.chat_id,
        parse_vote(data.vote),
        message_content=data.message_content,
        model=data.model,
    )


@router.get("")
async def get_votes(
    user: CurrentUser,
    votes: Votes,
    message_id: Optional[str] = Query(None, alias="messageId"),
    chat_id: Optional[str] = Query(None, alias="chatId"),
):
    """Get the vote on one message, or all votes in a chat."""
    if message_id:
        return VoteLookup(vote=await votes.get_vote(user.owner_id, message_id))

    if chat_id:
        return ChatVotes(votes=await votes.list_votes(user.owner_id, chat_id))

    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Missing messageId or chatId",
    )
