"""
Chat API endpoint.

Sends the latest user message to the requested model, falling back to the
other provider when the first one fails.
"""

from fastapi import APIRouter, HTTPException, status

from app.api.deps import CurrentUser, Dispatcher
from app.core.config import get_settings
from app.core.logger import logger
from app.models.chat import ChatRequest, ChatResponse

router = APIRouter()


@router.post("", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    user: CurrentUser,
    dispatcher: Dispatcher,
):
    """
    Generate an assistant reply.

    Returns:
        Assistant message and the identifier of the model that produced it
    """
    if not request.messages:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid messages array",
        )

    user_content = request.messages[-1].content
    if not user_content.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Empty message content",
        )

    model_id = request.model or get_settings().DEFAULT_CHAT_MODEL
    logger.info(
        f"Chat request: user={user.email or user.owner_id} model={model_id} "
        f"message_length={len(user_content)} web_search={request.web_search}"
    )

    result = await dispatcher.complete(model_id, user_content)

    logger.info(f"Chat response sent: model={result.model} response_length={len(result.content)}")
    return ChatResponse(content=result.content, model=result.model)
