"""
Available models endpoint.

Returns the selectable chat models and whether their provider is configured.
"""

from fastapi import APIRouter

from app.api.deps import CurrentUser, Dispatcher
from app.core.config import get_settings
from app.models.chat import ModelCatalog, ModelOption
from app.services.model_dispatcher import MODEL_CATALOG

router = APIRouter()


@router.get("", response_model=ModelCatalog)
async def list_available_models(
    user: CurrentUser,
    dispatcher: Dispatcher,
):
    """List available AI models for model selection."""
    models = [
        ModelOption(
            id=model_id,
            name=name,
            provider=kind.value,
            available=dispatcher.provider(kind).is_configured(),
        )
        for model_id, (name, kind) in MODEL_CATALOG.items()
    ]
    return ModelCatalog(default_model_id=get_settings().DEFAULT_CHAT_MODEL, models=models)
