"""
Shared fixtures and in-memory collaborators.

The fakes stand in for Stream Chat, the database, and the chat model so the
relay can be exercised end to end without network access.
"""

import asyncio
import itertools
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Any

import pytest
from langchain_core.messages import AIMessage, BaseMessage

from app.services.relay import ChatRelayService
from packages.llm import ChatResponder


# -----------------------------
# Fakes
# -----------------------------


class FakeDirectory:
    """In-memory Stream Chat directory and channels."""

    bot_user_id = "ai_bot"

    def __init__(self) -> None:
        self.users: dict[str, dict[str, Any]] = {}
        self.channels: dict[str, list[dict[str, Any]]] = {}
        self.upsert_calls = 0
        self.fail_lookup = False
        self.fail_mirror = False
        self.mirror_delay = 0.0
        self.closed = False

    async def find_user(self, user_id: str) -> dict[str, Any] | None:
        if self.fail_lookup:
            raise RuntimeError("stream unavailable")
        return self.users.get(user_id)

    async def upsert_user(self, user_id: str, name: str, role: str) -> None:
        self.upsert_calls += 1
        self.users[user_id] = {"id": user_id, "name": name, "role": role}

    async def mirror_reply(self, user_id: str, text: str) -> None:
        if self.mirror_delay:
            await asyncio.sleep(self.mirror_delay)
        if self.fail_mirror:
            raise RuntimeError("channel create failed")
        self.channels.setdefault(f"chat-{user_id}", []).append(
            {"text": text, "user_id": self.bot_user_id}
        )

    async def close(self) -> None:
        self.closed = True


@dataclass
class StoredChat:
    id: str
    user_id: str
    message: str
    reply: str
    created_at: datetime


@dataclass
class FakeStore:
    """In-memory replacement for ChatStore."""

    users: dict[str, SimpleNamespace] = field(default_factory=dict)
    chats: list[StoredChat] = field(default_factory=list)
    user_creates: int = 0
    fail_create_user: bool = False
    fail_create_chat: bool = False
    fail_list_chats: bool = False
    create_user_delay: float = 0.0
    _ids: Any = field(default_factory=lambda: itertools.count(1))
    _clock: datetime = field(
        default_factory=lambda: datetime(2026, 1, 1, tzinfo=timezone.utc)
    )

    async def get_user(self, user_id: str) -> SimpleNamespace | None:
        return self.users.get(user_id)

    async def create_user(self, user_id: str, email: str, name: str | None, role: str):
        if self.create_user_delay:
            await asyncio.sleep(self.create_user_delay)
        if self.fail_create_user:
            raise RuntimeError("unique constraint violated")
        self.user_creates += 1
        user = SimpleNamespace(id=user_id, email=email, name=name, role=role)
        self.users[user_id] = user
        return user

    async def recent_chats(self, user_id: str, limit: int) -> list[StoredChat]:
        own = [c for c in self.chats if c.user_id == user_id]
        return sorted(own, key=lambda c: c.created_at, reverse=True)[:limit]

    async def create_chat(self, user_id: str, message: str, reply: str) -> StoredChat:
        if self.fail_create_chat:
            raise RuntimeError("database is read-only")
        self._clock += timedelta(seconds=1)
        chat = StoredChat(str(next(self._ids)), user_id, message, reply, self._clock)
        self.chats.append(chat)
        return chat

    async def list_chats(self, user_id: str) -> list[StoredChat]:
        if self.fail_list_chats:
            raise RuntimeError("connection reset")
        return [c for c in self.chats if c.user_id == user_id]


class RecordingChatModel:
    """Chat model double that records every prompt it receives."""

    def __init__(self, replies: list[Any] | None = None, delay: float = 0.0) -> None:
        self.replies = list(replies or [])
        self.delay = delay
        self.calls: list[list[BaseMessage]] = []
        self.error: Exception | None = None

    async def ainvoke(self, messages: list[BaseMessage]) -> AIMessage:
        self.calls.append(list(messages))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        content = self.replies.pop(0) if self.replies else f"reply {len(self.calls)}"
        return AIMessage(content=content)


# -----------------------------
# Fixtures
# -----------------------------


@pytest.fixture
def directory() -> FakeDirectory:
    return FakeDirectory()


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def chat_model() -> RecordingChatModel:
    return RecordingChatModel()


@pytest.fixture
def responder(chat_model: RecordingChatModel) -> ChatResponder:
    return ChatResponder(llm=chat_model, prompt_version="v1")


@pytest.fixture
def relay(
    store: FakeStore, directory: FakeDirectory, responder: ChatResponder
) -> ChatRelayService:
    """Relay service wired to the in-memory collaborators."""
    return ChatRelayService(
        store=store,
        directory=directory,
        responder=responder,
        history_limit=10,
        request_timeout=5.0,
    )


@pytest.fixture
def make_chat_model() -> type[RecordingChatModel]:
    """The recording model class, for tests that need custom replies."""
    return RecordingChatModel
