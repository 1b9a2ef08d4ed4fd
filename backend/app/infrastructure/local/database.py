"""
SQLite database configuration and ORM models.

This module defines the SQLAlchemy ORM models and database initialization
used when STORE_BACKEND=sqlite.
"""

from functools import lru_cache
from uuid import uuid4

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from app.core.config import get_settings
from app.utils.datetime_utils import now_utc


class Base(DeclarativeBase):
    """SQLAlchemy declarative base."""

    pass


# ===========================================
# ORM Models
# ===========================================


class ChatHistoryORM(Base):
    """Chat session ORM model.

    ``seq`` records insertion order (eviction), ``updated_at`` records the
    last save (listing order).
    """

    __tablename__ = "chat_histories"
    __table_args__ = (UniqueConstraint("user_id", "chat_id", name="uq_chat_histories_user_chat"),)

    seq = Column(Integer, primary_key=True, autoincrement=True)
    chat_id = Column(String(100), nullable=False)
    user_id = Column(String(255), nullable=False, index=True)
    title = Column(String(500), nullable=False, default="")
    timestamp = Column(String(64), nullable=False)
    messages = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, index=True)


class VoteORM(Base):
    """Vote ORM model, unique per (user, message)."""

    __tablename__ = "votes"
    __table_args__ = (UniqueConstraint("user_id", "message_id", name="uq_votes_user_message"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(255), nullable=False, index=True)
    message_id = Column(String(100), nullable=False)
    chat_id = Column(String(100), nullable=False, index=True)
    vote = Column(String(10), nullable=False)
    timestamp = Column(String(64), nullable=False)
    message_content = Column(Text, nullable=True)
    model = Column(String(200), nullable=True)


class UserORM(Base):
    """User account ORM model."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    email = Column(String(255), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False, default="")
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), default=now_utc)


# ===========================================
# Database Session Management
# ===========================================


@lru_cache()
def get_engine():
    """Get async engine instance."""
    settings = get_settings()
    return create_async_engine(settings.DATABASE_URL, echo=False)


def get_session_factory():
    """Get async session factory."""
    return sessionmaker(get_engine(), class_=AsyncSession, expire_on_commit=False)


async def init_db():
    """Initialize database tables."""
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
