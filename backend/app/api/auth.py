"""
Local authentication endpoints (signup/login).
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from app.api.deps import UserRepo
from app.core.config import Settings, get_settings
from app.core.exceptions import DuplicateError
from app.core.logger import logger
from app.core.security import create_access_token, hash_password, verify_password
from app.infrastructure.local.user_repository import normalize_email
from app.models.user import (
    LoginRequest,
    LoginResponse,
    SignupRequest,
    SignupResponse,
    UserAccount,
    UserCreate,
    UserSummary,
)

router = APIRouter()


def _summary(user: UserAccount) -> UserSummary:
    return UserSummary(id=user.id, email=user.email, name=user.name)


def _ensure_local_auth(settings: Settings) -> None:
    if settings.AUTH_PROVIDER != "local":
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Local auth is not enabled",
        )
    if not settings.LOCAL_JWT_SECRET:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="LOCAL_JWT_SECRET is not configured",
        )


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    data: SignupRequest,
    user_repo: UserRepo,
) -> SignupResponse:
    settings = get_settings()

    email = normalize_email(data.email or "")
    password = data.password or ""
    if not email or not password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email and password are required",
        )

    min_length = settings.SIGNUP_MIN_PASSWORD_LENGTH
    if len(password) < min_length:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Password must be at least {min_length} characters",
        )

    if await user_repo.get_by_email(email):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User with this email already exists",
        )

    try:
        user = await user_repo.create(
            UserCreate(
                email=email,
                name=(data.name or "").strip(),
                password_hash=hash_password(password),
            )
        )
    except DuplicateError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=e.message,
        )

    logger.info(f"New user registered: {user.email}")
    return SignupResponse(user=_summary(user))


@router.post("/login", response_model=LoginResponse)
async def login(
    data: LoginRequest,
    user_repo: UserRepo,
) -> LoginResponse:
    settings = get_settings()
    _ensure_local_auth(settings)

    user = await user_repo.get_by_email(normalize_email(data.email))
    if not user or not verify_password(data.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    token = create_access_token(user.id, settings, email=user.email)
    return LoginResponse(access_token=token, user=_summary(user))
