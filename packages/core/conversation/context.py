"""
Conversation context assembly.

Turns persisted exchanges into the alternating user/model turns that are
sent to the chat model alongside a new user message.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class TurnRole(str, Enum):
    """Speaker of a conversation turn."""

    USER = "user"
    MODEL = "model"


@dataclass(frozen=True)
class ConversationTurn:
    """A single turn in the context window."""

    role: TurnRole
    text: str


class Exchange(Protocol):
    """Anything carrying a user message and the reply it received."""

    message: str
    reply: str


def build_conversation(
    history: Sequence[Exchange],
    message: str,
    max_exchanges: int | None = None,
) -> list[ConversationTurn]:
    """
    Build the context window for a new user message.

    History is used in the order given. Callers load it most recent first and
    that order is kept as-is; it is not re-sorted chronologically.

    Args:
        history: Prior exchanges, in the order they should appear.
        message: The new user message, always the final turn.
        max_exchanges: Upper bound on prior exchanges included. Extra
            exchanges at the end of ``history`` are dropped.

    Returns:
        ``2 * len(history) + 1`` turns at most, ending with the new message.
    """
    if max_exchanges is not None:
        history = history[:max_exchanges]

    turns: list[ConversationTurn] = []
    for exchange in history:
        turns.append(ConversationTurn(TurnRole.USER, exchange.message))
        turns.append(ConversationTurn(TurnRole.MODEL, exchange.reply))

    turns.append(ConversationTurn(TurnRole.USER, message))
    return turns
