"""
Unit tests for the client-side chat session state.
"""

import itertools
import time
from unittest.mock import MagicMock

import pytest

from app.client.api_client import ApiClientError, ChatApiClient
from app.client.session_state import ChatSessionState, make_title
from app.models.enums import MessageRole, VoteValue


@pytest.fixture
def api():
    client = MagicMock(spec=ChatApiClient)
    client.send_chat.return_value = {"role": "assistant", "content": "Hi!", "model": "gemini"}
    client.save_history.return_value = {"success": True}
    return client


@pytest.fixture
def state(api):
    counter = itertools.count(1)
    session = ChatSessionState(
        api,
        model="gemini",
        save_delay_seconds=60,
        id_factory=lambda: f"id-{next(counter)}",
    )
    yield session
    session.close()


def test_make_title_truncates_long_messages():
    assert make_title("short") == "short"
    assert make_title("x" * 50) == "x" * 50
    assert make_title("x" * 51) == "x" * 50 + "..."


def test_submit_appends_user_and_assistant(state, api):
    reply = state.submit("  Hello there  ")

    assert [m.role for m in state.messages] == [MessageRole.USER, MessageRole.ASSISTANT]
    assert state.messages[0].content == "Hello there"
    assert reply.content == "Hi!"
    assert reply.model == "gemini"
    sent = api.send_chat.call_args
    assert sent.args[0][-1]["content"] == "Hello there"
    assert sent.kwargs["model"] == "gemini"
    assert sent.kwargs["chat_id"] == state.chat_id


def test_blank_submit_is_ignored(state, api):
    assert state.submit("   ") is None
    assert state.messages == []
    api.send_chat.assert_not_called()


def test_first_exchange_sets_title_and_schedules_save(state):
    state.submit("What is the weather like today?")

    assert state.title == "What is the weather like today?"
    assert state.save_pending


def test_failed_submit_becomes_assistant_message(state, api):
    api.send_chat.side_effect = ApiClientError("Both AI models are unavailable. Please try again later.", 500)

    reply = state.submit("Hello")

    assert reply.role == MessageRole.ASSISTANT
    assert reply.content == "Both AI models are unavailable. Please try again later."
    assert len(state.messages) == 2


def test_empty_reply_is_reported(state, api):
    api.send_chat.return_value = {"role": "assistant", "content": "", "model": "gemini"}

    reply = state.submit("Hello")

    assert reply.content == "Empty response from AI"


def test_no_save_without_both_roles(state, api):
    api.send_chat.side_effect = None
    state.messages = []
    assert not state.is_saveable()

    state.flush()

    api.save_history.assert_not_called()


def test_flush_saves_immediately(state, api):
    state.submit("Hello")

    state.flush()

    api.save_history.assert_called_once()
    chat_id, title, timestamp, messages = api.save_history.call_args.args
    assert chat_id == state.chat_id
    assert title == "Hello"
    assert timestamp
    assert [m["role"] for m in messages] == ["user", "assistant"]
    assert not state.save_pending


def test_only_last_scheduled_save_fires(api):
    state = ChatSessionState(api, save_delay_seconds=0.05)
    try:
        state.submit("one")
        state.submit("two")
        state.submit("three")
        time.sleep(0.3)
    finally:
        state.close()

    assert api.save_history.call_count == 1
    messages = api.save_history.call_args.args[3]
    assert len(messages) == 6


def test_late_timer_does_not_orphan_its_replacement(api):
    state = ChatSessionState(api, save_delay_seconds=0.01)
    try:
        with state._lock:
            state.submit("Hello")
            first_timer = state._timer
            # Let the first timer fire and block on the lock
            time.sleep(0.2)
            state._save_delay = 60
            state._schedule_save()
            second_timer = state._timer
        first_timer.join(timeout=1)

        assert state._timer is second_timer
        assert state.save_pending
    finally:
        state.close()

    assert not state.save_pending
    assert second_timer.finished.is_set()
    api.save_history.assert_not_called()


def test_regenerate_replaces_message_in_place(state, api):
    state.submit("Hello")
    assistant_id = state.messages[1].id
    state.messages[1] = state.messages[1].model_copy(update={"vote": VoteValue.UP})
    api.send_chat.return_value = {"role": "assistant", "content": "Another answer", "model": "gemini-2.0-flash-exp"}

    replaced = state.regenerate(assistant_id)

    assert len(state.messages) == 2
    assert replaced.id == assistant_id
    assert replaced.content == "Another answer"
    assert replaced.model == "gemini-2.0-flash-exp"
    assert replaced.vote is None
    # Only the messages before the regenerated one are sent
    assert len(api.send_chat.call_args.args[0]) == 1


def test_failed_regenerate_reports_in_place(state, api):
    state.submit("Hello")
    assistant_id = state.messages[1].id
    api.send_chat.side_effect = ApiClientError("Upstream down", 500)

    replaced = state.regenerate(assistant_id)

    assert state.messages[1] is replaced
    assert replaced.content == "Failed to regenerate: Upstream down"
    assert replaced.role == MessageRole.ASSISTANT


def test_regenerate_unknown_message_is_noop(state, api):
    assert state.regenerate("missing") is None
    api.send_chat.assert_not_called()


def test_regenerate_ignores_user_messages(state, api):
    state.submit("Hello")
    api.send_chat.reset_mock()

    assert state.regenerate(state.messages[0].id) is None
    assert state.messages[0].content == "Hello"
    api.send_chat.assert_not_called()


def test_vote_updates_marker_from_response(state, api):
    state.submit("Hello")
    assistant = state.messages[1]
    api.cast_vote.return_value = {"success": True, "action": "created", "vote": "up"}

    assert state.vote(assistant.id, "up") is VoteValue.UP
    assert state.messages[1].vote is VoteValue.UP
    api.cast_vote.assert_called_once_with(
        assistant.id, state.chat_id, "up", message_content="Hi!", model="gemini"
    )

    api.cast_vote.return_value = {"success": True, "action": "removed", "vote": None}
    assert state.vote(assistant.id, "up") is None
    assert state.messages[1].vote is None


def test_vote_failure_keeps_marker(state, api):
    state.submit("Hello")
    api.cast_vote.side_effect = ApiClientError("Unauthorized", 401)

    assert state.vote(state.messages[1].id, "down") is None
    assert state.messages[1].vote is None


def test_attachment_goes_on_next_user_message(state, api):
    api.upload_file.return_value = {
        "url": "http://localhost:8000/storage/uploads/cat-abc.png",
        "pathname": "uploads/cat-abc.png",
        "contentType": "image/png",
    }

    state.attach_file("cat.png", b"\x89PNG", "image/png")
    state.submit("Look at this")

    user_message = state.messages[0]
    assert user_message.file_url == "http://localhost:8000/storage/uploads/cat-abc.png"
    assert user_message.file_name == "cat.png"
    assert user_message.file_type == "image/png"
    assert state.attachment is None


def test_new_chat_saves_current_and_resets(state, api):
    state.submit("Hello")
    old_id = state.chat_id

    new_id = state.new_chat()

    api.save_history.assert_called_once()
    assert api.save_history.call_args.args[0] == old_id
    assert new_id != old_id
    assert state.messages == []
    assert state.title == ""
    assert not state.save_pending


def test_select_chat_loads_history(state, api):
    state.submit("Hello")
    api.get_history.return_value = {
        "id": "other",
        "title": "Earlier chat",
        "timestamp": "2026-01-01T00:00:00.000Z",
        "userId": "test_user",
        "messages": [
            {"id": "m1", "role": "user", "content": "Hi", "timestamp": "2026-01-01T00:00:00.000Z"},
            {"id": "m2", "role": "assistant", "content": "Hey", "timestamp": "2026-01-01T00:00:01.000Z", "vote": "down"},
        ],
    }

    state.select_chat("other")

    api.save_history.assert_called_once()
    api.get_history.assert_called_once_with("other")
    assert state.chat_id == "other"
    assert state.title == "Earlier chat"
    assert state.messages[1].vote is VoteValue.DOWN


def test_save_failure_is_swallowed(state, api):
    state.submit("Hello")
    api.save_history.side_effect = ApiClientError("Unauthorized", 401)

    assert state.flush() is None
