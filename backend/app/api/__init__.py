"""API routers."""

from app.api import (
    auth,
    chat,
    history,
    models,
    upload,
    vote,
)

__all__ = [
    "auth",
    "chat",
    "history",
    "models",
    "upload",
    "vote",
]
