"""
Chat responder for the relay.

Sends an assembled conversation to the chat model and turns the response
into plain reply text.
"""

import logging
import time
from collections.abc import Sequence

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage

from packages.core.conversation import ConversationTurn, TurnRole
from packages.llm.factory import LLMFactory
from packages.llm.prompts import ChatPromptRegistry

logger = logging.getLogger(__name__)

NO_REPLY_FALLBACK = "No reply from AI"


class ChatResponder:
    """
    Generates AI replies for a conversation.

    The system instruction comes from the versioned chat prompt; the turns
    are passed through a messages placeholder untouched.
    """

    def __init__(
        self,
        llm: BaseChatModel | None = None,
        prompt_version: str = "latest",
    ):
        """
        Initialize the responder.

        Args:
            llm: LangChain chat model to use.
                Uses LLMFactory.create_from_settings() if not provided.
            prompt_version: Version of the prompt to use (e.g., "v1", "latest").
        """
        self._llm = llm or LLMFactory.create_from_settings()
        self._prompt = ChatPromptRegistry.get(prompt_version)
        self._template = self._prompt.build()

    @property
    def prompt_version(self) -> str:
        return self._prompt.version

    def build_messages(self, turns: Sequence[ConversationTurn]) -> list[BaseMessage]:
        """Render the prompt for ``turns``: system message first, then the turns."""
        return self._template.format_messages(
            **{self._prompt.conversation_key: [self._to_message(t) for t in turns]}
        )

    async def generate(self, turns: Sequence[ConversationTurn]) -> str:
        """
        Generate a reply for the conversation.

        Args:
            turns: Conversation turns, ending with the new user message.

        Returns:
            The concatenated text of the response, or ``NO_REPLY_FALLBACK``
            when the model returned no text.

        Raises:
            Whatever the underlying chat model raises. Nothing is retried here.
        """
        messages = self.build_messages(turns)

        start_time = time.perf_counter()
        response = await self._llm.ainvoke(messages)
        duration_ms = int((time.perf_counter() - start_time) * 1000)

        reply = self._extract_text(response.content)
        if not reply:
            logger.warning(f"Model returned no text after {duration_ms}ms, using fallback")
            return NO_REPLY_FALLBACK

        logger.info(
            f"Generated reply from {len(turns)} turns in {duration_ms}ms ({len(reply)} chars)"
        )
        return reply

    @staticmethod
    def _to_message(turn: ConversationTurn) -> BaseMessage:
        if turn.role is TurnRole.MODEL:
            return AIMessage(content=turn.text)
        return HumanMessage(content=turn.text)

    @staticmethod
    def _extract_text(content: str | list) -> str:
        """
        Concatenate the text parts of a response.

        Args:
            content: Raw content from the model (a string or a list of content blocks).

        Returns:
            All text parts joined without a separator. Non-text blocks are skipped.
        """
        if not content:
            return ""

        if isinstance(content, str):
            return content

        text_parts = []
        for block in content:
            if isinstance(block, str):
                text_parts.append(block)
            elif isinstance(block, dict) and block.get("type", "text") == "text":
                text = block.get("text")
                if text:
                    text_parts.append(str(text))
        return "".join(text_parts)
