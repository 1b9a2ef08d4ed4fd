"""
AI Chatbot Backend - Main Application Entry Point

Chat completions with provider fallback, per-user chat history, message
votes, file uploads and local accounts.
"""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_settings
from app.core.exceptions import (
    AuthenticationError,
    DuplicateError,
    NotFoundError,
    ProvidersUnavailableError,
    ValidationError,
)
from app.core.logger import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # Startup
    settings = get_settings()
    logger.info(f"Starting AI Chatbot backend with {settings.STORE_BACKEND} store...")

    if settings.is_sqlite:
        from app.infrastructure.local.database import init_db

        await init_db()

    yield

    # Shutdown
    logger.info("Shutting down AI Chatbot backend...")


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def register_exception_handlers(app: FastAPI) -> None:
    """Render every failure as an {"error": message} body."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": message},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        return _error(status.HTTP_400_BAD_REQUEST, message)

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return _error(status.HTTP_400_BAD_REQUEST, exc.message)

    @app.exception_handler(DuplicateError)
    async def duplicate_error_handler(request: Request, exc: DuplicateError):
        return _error(status.HTTP_409_CONFLICT, exc.message)

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return _error(status.HTTP_404_NOT_FOUND, exc.message)

    @app.exception_handler(AuthenticationError)
    async def authentication_error_handler(request: Request, exc: AuthenticationError):
        return _error(status.HTTP_401_UNAUTHORIZED, exc.message)

    @app.exception_handler(ProvidersUnavailableError)
    async def providers_unavailable_handler(request: Request, exc: ProvidersUnavailableError):
        logger.error(f"Chat failed on every provider: {exc.details}")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, exc.message)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "An unexpected error occurred")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="AI Chatbot",
        description="Chat backend with Gemini / DeepSeek fallback",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    from app.api import auth, chat, history, models, upload, vote

    app.include_router(chat.router, prefix="/api/chat", tags=["chat"])
    app.include_router(history.router, prefix="/api/history", tags=["history"])
    app.include_router(vote.router, prefix="/api/vote", tags=["vote"])
    app.include_router(upload.router, prefix="/api/upload", tags=["upload"])
    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    app.include_router(models.router, prefix="/api/models", tags=["models"])

    # Serve uploaded files
    storage_path = settings.STORAGE_BASE_PATH
    if not os.path.isabs(storage_path):
        storage_path = os.path.join(os.getcwd(), storage_path)

    os.makedirs(storage_path, exist_ok=True)
    app.mount("/storage", StaticFiles(directory=storage_path), name="storage")

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "store": settings.STORE_BACKEND,
            "version": "0.1.0",
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
