"""
Relay service.

Orchestrates the three endpoints across the messaging directory (Stream),
the relational store, and the chat model. Every collaborator failure is
raised as an ``UpstreamError``; the HTTP mapping happens in ``app.main``.
"""

import asyncio
import logging
from collections.abc import Awaitable
from typing import TypeVar

from app.core.constants import (
    MSG_CHAT_FIELDS_REQUIRED,
    MSG_HISTORY_FIELDS_REQUIRED,
    MSG_REGISTER_FIELDS_REQUIRED,
    MSG_USER_NOT_IN_DIRECTORY,
    MSG_USER_NOT_IN_STORE,
    USER_ROLE,
)
from app.core.exceptions import (
    NotFoundError,
    RelayError,
    UpstreamError,
    UpstreamTimeoutError,
    ValidationError,
)
from app.schemas.chat import (
    ChatExchange,
    ChatHistoryResponse,
    ChatResponse,
    RegisterUserResponse,
)
from app.models.chat import Chat
from app.services.chat_store import ChatStore
from app.services.identity import derive_user_id
from app.services.messaging import MessagingDirectory, ai_channel_id
from packages.core.conversation import build_conversation
from packages.llm import ChatResponder

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Service names used in UpstreamError
STREAM = "Stream Chat"
DATABASE = "Database"
LLM = "LLM"


def _require(error_message: str, /, **fields: str | None) -> None:
    """Raise ValidationError unless every field is a non-empty string."""
    missing = [name for name, value in fields.items() if not value]
    if missing:
        raise ValidationError(error_message, missing=missing)


async def _upstream(service: str, call: Awaitable[T]) -> T:
    """Await a collaborator call, wrapping any failure in UpstreamError."""
    try:
        return await call
    except RelayError:
        raise
    except Exception as e:
        raise UpstreamError(service, e) from e


class ChatRelayService:
    """
    Request-scoped orchestration for registration, chat, and history.

    Built per request from the shared clients and the request's DB session.
    Calls are strictly sequential; nothing is retried.
    """

    def __init__(
        self,
        store: ChatStore,
        directory: MessagingDirectory,
        responder: ChatResponder,
        history_limit: int = 10,
        request_timeout: float | None = None,
    ):
        self.store = store
        self.directory = directory
        self.responder = responder
        self.history_limit = history_limit
        self.request_timeout = request_timeout

    async def _bounded(self, operation: str, call: Awaitable[T]) -> T:
        """Run a whole handler under the configured request timeout."""
        if self.request_timeout is None:
            return await call
        try:
            return await asyncio.wait_for(call, timeout=self.request_timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"{operation} exceeded {self.request_timeout:g}s, cancelled")
            raise UpstreamTimeoutError(operation, self.request_timeout) from e

    # ──────────────────────────────────────────
    # Registration
    # ──────────────────────────────────────────

    async def register_user(
        self, name: str | None, email: str | None
    ) -> RegisterUserResponse:
        """
        Make sure a user exists in Stream and in the database.

        Both lookups happen before any create, so repeated registrations of
        the same email are no-ops. The two writes are not transactional: if
        the database insert fails after the Stream upsert, the Stream user
        is left in place and the mismatch is logged.

        Raises:
            ValidationError: If name or email is missing.
            UpstreamError: If Stream or the database fails.
        """
        _require(MSG_REGISTER_FIELDS_REQUIRED, name=name, email=email)
        return await self._bounded("register-user", self._register_user(name, email))

    async def _register_user(self, name: str, email: str) -> RegisterUserResponse:
        user_id = derive_user_id(email)

        created_in_directory = False
        if await _upstream(STREAM, self.directory.find_user(user_id)) is None:
            await _upstream(STREAM, self.directory.upsert_user(user_id, name, USER_ROLE))
            created_in_directory = True

        try:
            existing = await _upstream(DATABASE, self.store.get_user(user_id))
            if existing is None:
                await _upstream(
                    DATABASE,
                    self.store.create_user(user_id, email=email, name=name, role=USER_ROLE),
                )
                logger.info(f"Registered new user {user_id}")
        except BaseException:
            # Also on cancellation by the request timeout
            if created_in_directory:
                logger.error(
                    f"User {user_id} exists in Stream but could not be stored; "
                    "directory entry left for reconciliation"
                )
            raise

        return RegisterUserResponse(user_id=user_id, name=name, email=email)

    # ──────────────────────────────────────────
    # Chat
    # ──────────────────────────────────────────

    async def send_message(self, message: str | None, user_id: str | None) -> ChatResponse:
        """
        Answer a user message with the chat model.

        Loads at most ``history_limit`` previous exchanges (newest first) as
        context, stores the new exchange, then mirrors the reply into the
        user's Stream channel. The mirror is best-effort: the database row is
        the source of truth, so a Stream failure there is logged and the
        reply is still returned. The request timeout covers everything up to
        the commit; the mirror is bounded by the Stream client's own timeout.

        Raises:
            ValidationError: If message or user id is missing.
            NotFoundError: If the user is not registered in Stream or the database.
            UpstreamError: If Stream lookup, the database, or the model fails.
            UpstreamTimeoutError: If the exchange is not stored in time.
        """
        _require(MSG_CHAT_FIELDS_REQUIRED, message=message, user_id=user_id)
        chat = await self._bounded("chat", self._store_reply(message, user_id))

        try:
            await self.directory.mirror_reply(user_id, chat.reply)
        except Exception:
            logger.exception(
                f"Chat {chat.id} stored but not mirrored to channel {ai_channel_id(user_id)}"
            )

        return ChatResponse(reply=chat.reply)

    async def _store_reply(self, message: str, user_id: str) -> Chat:
        if await _upstream(STREAM, self.directory.find_user(user_id)) is None:
            raise NotFoundError(MSG_USER_NOT_IN_DIRECTORY, "directory user", user_id)

        if await _upstream(DATABASE, self.store.get_user(user_id)) is None:
            raise NotFoundError(MSG_USER_NOT_IN_STORE, "user", user_id)

        history = await _upstream(
            DATABASE, self.store.recent_chats(user_id, self.history_limit)
        )
        turns = build_conversation(history, message, max_exchanges=self.history_limit)

        reply = await _upstream(LLM, self.responder.generate(turns))

        return await _upstream(
            DATABASE, self.store.create_chat(user_id, message=message, reply=reply)
        )

    # ──────────────────────────────────────────
    # History
    # ──────────────────────────────────────────

    async def chat_history(self, user_id: str | None) -> ChatHistoryResponse:
        """
        List every stored exchange for a user.

        Raises:
            ValidationError: If the user id is missing.
            UpstreamError: If the database fails.
        """
        _require(MSG_HISTORY_FIELDS_REQUIRED, user_id=user_id)
        return await self._bounded("chat-history", self._chat_history(user_id))

    async def _chat_history(self, user_id: str) -> ChatHistoryResponse:
        rows = await _upstream(DATABASE, self.store.list_chats(user_id))
        return ChatHistoryResponse(
            messages=[ChatExchange(message=row.message, reply=row.reply) for row in rows]
        )
