"""
Client-side state for the active conversation.

ChatSessionState holds the transcript of one chat and drives the chat,
history, vote and upload endpoints. Every transcript change that leaves both
a user and an assistant message in place re-arms a save timer; only the last
timer within the delay actually posts the chat to /history.
"""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Optional

from app.client.api_client import ApiClientError, ChatApiClient
from app.core.logger import setup_logger
from app.models.chat_history import Message
from app.models.enums import MessageRole, VoteValue
from app.utils.datetime_utils import now_iso

logger = setup_logger("chatbot.client")

TITLE_MAX_CHARS = 50
GENERIC_CHAT_ERROR = "Sorry, I encountered an error. Please try again."
EMPTY_RESPONSE_ERROR = "Empty response from AI"


def new_message_id() -> str:
    return uuid.uuid4().hex[:13]


def make_title(content: str) -> str:
    """First user message, cut to TITLE_MAX_CHARS with an ellipsis when longer."""
    if len(content) > TITLE_MAX_CHARS:
        return f"{content[:TITLE_MAX_CHARS]}..."
    return content


@dataclass
class Attachment:
    url: str
    name: str
    content_type: str


class ChatSessionState:
    def __init__(
        self,
        api: ChatApiClient,
        *,
        model: str = "gemini",
        web_search: bool = False,
        save_delay_seconds: float = 1.0,
        id_factory: Callable[[], str] = new_message_id,
    ):
        self._api = api
        self._new_id = id_factory
        self._save_delay = save_delay_seconds
        self._lock = threading.RLock()
        self._timer: Optional[threading.Timer] = None

        self.model = model
        self.web_search = web_search
        self.chat_id = self._new_id()
        self.title = ""
        self.messages: list[Message] = []
        self.attachment: Optional[Attachment] = None

    @classmethod
    def from_config(cls, api: ChatApiClient) -> "ChatSessionState":
        config = api.config
        return cls(
            api,
            model=config.model,
            web_search=config.web_search,
            save_delay_seconds=config.save_delay_seconds,
        )

    # ------------------------------------------------------------------
    # Transcript helpers
    # ------------------------------------------------------------------

    def _wire_messages(self, messages: list[Message]) -> list[dict[str, Any]]:
        return [m.model_dump(mode="json", by_alias=True, exclude_none=True) for m in messages]

    def _index_of(self, message_id: str) -> Optional[int]:
        for index, message in enumerate(self.messages):
            if message.id == message_id:
                return index
        return None

    def _assistant_message(self, content: str, model: Optional[str] = None) -> Message:
        return Message(
            id=self._new_id(),
            role=MessageRole.ASSISTANT,
            content=content,
            timestamp=now_iso(),
            model=model,
        )

    def _complete(self, history: list[Message]) -> dict[str, Any]:
        data = self._api.send_chat(
            self._wire_messages(history),
            model=self.model,
            web_search=self.web_search,
            chat_id=self.chat_id,
        )
        if not data.get("content"):
            raise ApiClientError(EMPTY_RESPONSE_ERROR)
        return data

    def is_saveable(self) -> bool:
        with self._lock:
            roles = {m.role for m in self.messages}
        return MessageRole.USER in roles and MessageRole.ASSISTANT in roles

    def _transcript_changed(self) -> None:
        with self._lock:
            if not self.is_saveable():
                return
            if not self.title:
                first_user = next(m for m in self.messages if m.role == MessageRole.USER)
                self.title = make_title(first_user.content)
            self._schedule_save()

    # ------------------------------------------------------------------
    # Debounced save
    # ------------------------------------------------------------------

    def _schedule_save(self) -> None:
        with self._lock:
            self._cancel_timer()
            timer = threading.Timer(self._save_delay, self._on_timer)
            timer.daemon = True
            self._timer = timer
            timer.start()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    @property
    def save_pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def _on_timer(self) -> None:
        with self._lock:
            # A timer that was superseded or cancelled after firing must not
            # clear the reference to the one that replaced it
            if self._timer is not threading.current_thread():
                return
            self._timer = None
        self._save_now()

    def _save_now(self) -> Optional[dict[str, Any]]:
        with self._lock:
            if not self.messages or not self.title:
                return None
            chat_id = self.chat_id
            title = self.title
            messages = self._wire_messages(self.messages)

        try:
            result = self._api.save_history(chat_id, title, now_iso(), messages)
        except ApiClientError as e:
            logger.warning(f"Failed to save history for chat {chat_id}: {e.message}")
            return None

        if result.get("debounced"):
            logger.debug(f"History save for chat {chat_id} was debounced by the server")
        return result

    def flush(self) -> Optional[dict[str, Any]]:
        """Cancel the pending timer and save the current chat immediately."""
        with self._lock:
            self._cancel_timer()
        return self._save_now()

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def submit(self, text: str) -> Optional[Message]:
        """
        Send a user message and append the reply.

        Failures never raise: they are appended as an assistant message
        carrying the error text.
        """
        content = (text or "").strip()
        if not content:
            return None

        with self._lock:
            attachment = self.attachment
            self.attachment = None
            user_message = Message(
                id=self._new_id(),
                role=MessageRole.USER,
                content=content,
                timestamp=now_iso(),
                file_url=attachment.url if attachment else None,
                file_name=attachment.name if attachment else None,
                file_type=attachment.content_type if attachment else None,
            )
            self.messages.append(user_message)
            history = list(self.messages)

        try:
            data = self._complete(history)
            reply = self._assistant_message(data["content"], data.get("model") or self.model)
        except ApiClientError as e:
            logger.error(f"Chat request failed: {e.message}")
            reply = self._assistant_message(e.message or GENERIC_CHAT_ERROR)

        with self._lock:
            self.messages.append(reply)
        self._transcript_changed()
        return reply

    def regenerate(self, message_id: str) -> Optional[Message]:
        """Replace an assistant message with a fresh reply to the messages before it."""
        with self._lock:
            index = self._index_of(message_id)
            if index is None or self.messages[index].role != MessageRole.ASSISTANT:
                return None
            history = self.messages[:index]

        try:
            data = self._complete(history)
            replacement: Optional[Message] = None
        except ApiClientError as e:
            logger.error(f"Regenerate failed for message {message_id}: {e.message}")
            data = None
            replacement = self._assistant_message(f"Failed to regenerate: {e.message}")

        with self._lock:
            index = self._index_of(message_id)
            if index is None:
                # Chat was switched or reset while the request was in flight
                return None
            if replacement is None:
                replacement = self.messages[index].model_copy(
                    update={
                        "content": data["content"],
                        "timestamp": now_iso(),
                        "model": data.get("model"),
                        "vote": None,
                    }
                )
            self.messages[index] = replacement

        self._transcript_changed()
        return replacement

    def vote(self, message_id: str, value: str) -> Optional[VoteValue]:
        """Vote on a message and store the resulting marker (None when toggled off)."""
        with self._lock:
            index = self._index_of(message_id)
            if index is None:
                return None
            message = self.messages[index]
            chat_id = self.chat_id

        try:
            data = self._api.cast_vote(
                message_id,
                chat_id,
                value,
                message_content=message.content,
                model=message.model or self.model,
            )
        except ApiClientError as e:
            logger.error(f"Failed to vote on message {message_id}: {e.message}")
            return None

        marker = VoteValue(data["vote"]) if data.get("vote") else None
        with self._lock:
            index = self._index_of(message_id)
            if index is None:
                return marker
            self.messages[index] = self.messages[index].model_copy(update={"vote": marker})

        self._transcript_changed()
        return marker

    def attach_file(
        self,
        filename: str,
        data: bytes,
        content_type: Optional[str] = None,
    ) -> Attachment:
        """Upload a file; it is attached to the next submitted message."""
        result = self._api.upload_file(filename, data, content_type)
        attachment = Attachment(
            url=result["url"],
            name=filename,
            content_type=content_type or result.get("contentType") or "application/octet-stream",
        )
        with self._lock:
            self.attachment = attachment
        return attachment

    def clear_attachment(self) -> None:
        with self._lock:
            self.attachment = None

    def new_chat(self) -> str:
        """Save the current chat (if titled) and start an empty one."""
        with self._lock:
            has_content = bool(self.messages) and bool(self.title)
        if has_content:
            self.flush()

        with self._lock:
            self._cancel_timer()
            self.chat_id = self._new_id()
            self.title = ""
            self.messages = []
            self.attachment = None
            return self.chat_id

    def select_chat(self, chat_id: str) -> None:
        """Save the current chat and load another one from history."""
        with self._lock:
            switching = chat_id != self.chat_id and bool(self.messages) and bool(self.title)
        if switching:
            self.flush()

        data = self._api.get_history(chat_id)

        with self._lock:
            self._cancel_timer()
            self.chat_id = chat_id
            self.title = data.get("title") or ""
            self.messages = [Message.model_validate(m) for m in data.get("messages") or []]
            self.attachment = None

    def delete_chat(self, chat_id: str) -> None:
        self._api.delete_history(chat_id)
        with self._lock:
            if chat_id == self.chat_id:
                self._cancel_timer()
                self.chat_id = self._new_id()
                self.title = ""
                self.messages = []

    def close(self) -> None:
        with self._lock:
            self._cancel_timer()
