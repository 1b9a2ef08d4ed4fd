"""
Unit tests for chat history repositories (in-memory and SQLite).
"""

import pytest

from app.infrastructure.local.chat_history_repository import (
    InMemoryChatHistoryRepository,
    SqliteChatHistoryRepository,
    _unique_most_recent,
)
from app.models.chat_history import ChatSession, ChatSessionSummary, Message
from app.models.enums import MessageRole, VoteValue


def _session(chat_id: str, title: str = "", timestamp: str = "2026-01-01T00:00:00.000Z", content: str = "hi"):
    return ChatSession(
        id=chat_id,
        title=title or f"Chat {chat_id}",
        timestamp=timestamp,
        user_id="test_user",
        messages=[
            Message(id=f"{chat_id}-u", role=MessageRole.USER, content=content, timestamp=timestamp),
            Message(id=f"{chat_id}-a", role=MessageRole.ASSISTANT, content="reply", timestamp=timestamp),
        ],
    )


@pytest.fixture(params=["memory", "sqlite"])
async def repo(request, session_factory):
    if request.param == "memory":
        return InMemoryChatHistoryRepository(capacity=15)
    return SqliteChatHistoryRepository(session_factory=session_factory, capacity=15)


@pytest.mark.asyncio
async def test_upsert_same_id_twice_keeps_one_entry(repo, test_user_id):
    await repo.upsert(test_user_id, _session("c1", content="first"))
    await repo.upsert(test_user_id, _session("c1", title="Renamed", content="second"))

    listed = await repo.list_recent(test_user_id)
    assert [s.id for s in listed] == ["c1"]
    assert listed[0].title == "Renamed"

    stored = await repo.get(test_user_id, "c1")
    assert stored.messages[0].content == "second"


@pytest.mark.asyncio
async def test_sixteenth_insert_evicts_oldest(repo, test_user_id):
    for i in range(16):
        await repo.upsert(test_user_id, _session(f"c{i}"))

    listed = await repo.list_recent(test_user_id)
    ids = [s.id for s in listed]

    assert len(ids) == 15
    assert len(ids) == len(set(ids))
    assert "c0" not in ids
    assert "c15" in ids
    assert await repo.get(test_user_id, "c0") is None


@pytest.mark.asyncio
async def test_eviction_follows_insertion_order_not_updates(repo, test_user_id):
    for i in range(15):
        await repo.upsert(test_user_id, _session(f"c{i}"))
    # Updating the oldest chat does not protect it from eviction
    await repo.upsert(test_user_id, _session("c0", title="Updated"))
    await repo.upsert(test_user_id, _session("c15"))

    assert await repo.get(test_user_id, "c0") is None
    assert await repo.get(test_user_id, "c1") is not None


@pytest.mark.asyncio
async def test_list_is_most_recently_touched_first(repo, test_user_id):
    await repo.upsert(test_user_id, _session("a"))
    await repo.upsert(test_user_id, _session("b"))
    await repo.upsert(test_user_id, _session("c"))
    await repo.upsert(test_user_id, _session("a", title="Touched again"))

    listed = await repo.list_recent(test_user_id)

    assert [s.id for s in listed] == ["a", "c", "b"]
    assert len({s.id for s in listed}) == len(listed)


@pytest.mark.asyncio
async def test_list_respects_limit(repo, test_user_id):
    for i in range(5):
        await repo.upsert(test_user_id, _session(f"c{i}"))

    listed = await repo.list_recent(test_user_id, limit=3)

    assert [s.id for s in listed] == ["c4", "c3", "c2"]


def test_unique_most_recent_keeps_newest_entry_per_id():
    entries = [
        (1, ChatSessionSummary(id="a", title="old a", timestamp="t1")),
        (2, ChatSessionSummary(id="b", title="b", timestamp="t2")),
        (3, ChatSessionSummary(id="a", title="new a", timestamp="t3")),
        (0, ChatSessionSummary(id="b", title="stale b", timestamp="t0")),
    ]

    listed = _unique_most_recent(entries, limit=15)

    assert [(s.id, s.title) for s in listed] == [("a", "new a"), ("b", "b")]


def test_unique_most_recent_applies_limit_after_dedup():
    entries = [(i, ChatSessionSummary(id="same", title=str(i), timestamp="t")) for i in range(5)]
    entries.append((5, ChatSessionSummary(id="other", title="other", timestamp="t")))

    listed = _unique_most_recent(entries, limit=2)

    assert [s.id for s in listed] == ["other", "same"]
    assert listed[1].title == "4"


@pytest.mark.asyncio
async def test_summaries_exclude_messages(repo, test_user_id):
    await repo.upsert(test_user_id, _session("c1"))

    summary = (await repo.list_recent(test_user_id))[0]

    assert summary.model_dump(by_alias=True) == {
        "id": "c1",
        "title": "Chat c1",
        "timestamp": "2026-01-01T00:00:00.000Z",
    }


@pytest.mark.asyncio
async def test_missing_timestamp_keeps_previous_value(repo, test_user_id):
    await repo.upsert(test_user_id, _session("c1", timestamp="2026-01-01T10:00:00.000Z"))
    await repo.upsert(test_user_id, _session("c1", timestamp=""))

    stored = await repo.get(test_user_id, "c1")
    assert stored.timestamp == "2026-01-01T10:00:00.000Z"


@pytest.mark.asyncio
async def test_missing_timestamp_defaults_on_insert(repo, test_user_id):
    await repo.upsert(test_user_id, _session("c1", timestamp=""))

    stored = await repo.get(test_user_id, "c1")
    assert stored.timestamp


@pytest.mark.asyncio
async def test_delete_is_idempotent(repo, test_user_id):
    await repo.upsert(test_user_id, _session("c1"))

    assert await repo.delete(test_user_id, "c1") is True
    assert await repo.delete(test_user_id, "c1") is False
    assert await repo.get(test_user_id, "c1") is None
    assert await repo.list_recent(test_user_id) == []


@pytest.mark.asyncio
async def test_users_are_isolated(repo, test_user_id):
    await repo.upsert(test_user_id, _session("c1"))

    assert await repo.get("other_user", "c1") is None
    assert await repo.list_recent("other_user") == []
    assert await repo.delete("other_user", "c1") is False
    assert await repo.get(test_user_id, "c1") is not None


@pytest.mark.asyncio
async def test_message_fields_survive_storage(repo, test_user_id):
    session = _session("c1")
    session.messages[1] = session.messages[1].model_copy(
        update={"vote": VoteValue.UP, "model": "gemini", "file_url": "http://x/storage/uploads/a.png"}
    )
    await repo.upsert(test_user_id, session)

    stored = await repo.get(test_user_id, "c1")
    assert stored.messages[1].vote == VoteValue.UP
    assert stored.messages[1].model == "gemini"
    assert stored.messages[1].file_url == "http://x/storage/uploads/a.png"
    assert stored.user_id == test_user_id
