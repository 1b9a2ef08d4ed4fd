"""
Chat history API endpoints.
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from app.api.deps import CurrentUser, History
from app.models.chat_history import ChatHistorySave, ChatHistorySaveResult

router = APIRouter()


@router.get("")
async def get_history(
    user: CurrentUser,
    history: History,
    chat_id: Optional[str] = Query(None, alias="chatId"),
):
    """Return one chat when chatId is given, else the recent chat summaries."""
    if chat_id:
        session = await history.get(user.owner_id, chat_id)
        if not session:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Chat not found",
            )
        return session

    return await history.list_recent(user.owner_id)


@router.post("", response_model=ChatHistorySaveResult, response_model_exclude_none=True)
async def save_history(
    payload: ChatHistorySave,
    user: CurrentUser,
    history: History,
):
    """Create or replace a chat session; rapid repeats are debounced."""
    return await history.save(user.owner_id, payload)


@router.delete("", response_model=ChatHistorySaveResult, response_model_exclude_none=True)
async def delete_history(
    user: CurrentUser,
    history: History,
    chat_id: Optional[str] = Query(None, alias="chatId"),
):
    """Delete a chat session. Deleting an unknown chat succeeds."""
    if not chat_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing chatId parameter",
        )
    await history.delete(user.owner_id, chat_id)
    return ChatHistorySaveResult(success=True)
