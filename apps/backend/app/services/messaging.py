"""Stream Chat access: the messaging directory and the AI reply channels."""

import logging
from typing import Any

from stream_chat import StreamChatAsync

from app.core.config import get_stream_settings
from app.core.constants import AI_CHANNEL_NAME, AI_CHANNEL_PREFIX, AI_CHANNEL_TYPE

logger = logging.getLogger(__name__)


def ai_channel_id(user_id: str) -> str:
    """Id of the channel that mirrors a user's AI replies."""
    return f"{AI_CHANNEL_PREFIX}{user_id}"


class MessagingDirectory:
    """
    Thin wrapper over the Stream Chat async client.

    One instance is shared by all requests for the lifetime of the process;
    ``close`` releases its HTTP session on shutdown.
    """

    def __init__(self, client: StreamChatAsync, bot_user_id: str = "ai_bot"):
        self._client = client
        self.bot_user_id = bot_user_id

    @classmethod
    def from_settings(cls) -> "MessagingDirectory":
        """Build a directory client from StreamSettings."""
        settings = get_stream_settings()
        client = StreamChatAsync(
            api_key=settings.stream_api_key,
            api_secret=settings.stream_api_secret,
            timeout=settings.stream_timeout_seconds,
        )
        return cls(client, bot_user_id=settings.stream_bot_user_id)

    async def find_user(self, user_id: str) -> dict[str, Any] | None:
        """Return the Stream user with this id, or None."""
        response = await self._client.query_users({"id": {"$eq": user_id}})
        users = response.get("users") or []
        return users[0] if users else None

    async def upsert_user(self, user_id: str, name: str, role: str) -> None:
        """Create (or overwrite) a Stream user."""
        await self._client.upsert_user({"id": user_id, "name": name, "role": role})
        logger.info(f"Upserted Stream user {user_id}")

    async def mirror_reply(self, user_id: str, text: str) -> None:
        """
        Post an AI reply into the user's AI channel.

        The channel is fetched or created on every call, owned by the bot
        identity, and the reply is sent as a message from that identity.
        """
        channel = self._client.channel(
            AI_CHANNEL_TYPE,
            ai_channel_id(user_id),
            {"name": AI_CHANNEL_NAME, "created_by_id": self.bot_user_id},
        )
        await channel.create(self.bot_user_id)
        await channel.send_message({"text": text}, self.bot_user_id)

    async def close(self) -> None:
        await self._client.close()
