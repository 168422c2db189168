"""Conversation context for the chat relay."""

from packages.core.conversation.context import (
    ConversationTurn,
    Exchange,
    TurnRole,
    build_conversation,
)

__all__ = [
    "ConversationTurn",
    "Exchange",
    "TurnRole",
    "build_conversation",
]
