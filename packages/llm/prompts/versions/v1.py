"""Version 1 of the chat reply prompt."""

from langchain_core.prompts import ChatPromptTemplate, MessagesPlaceholder

from packages.llm.prompts.base import BaseChatPrompt
from packages.llm.prompts.registry import ChatPromptRegistry

SYSTEM_INSTRUCTION = (
    "You are a helpful assistant who answers briefly replying on the previous context."
)


@ChatPromptRegistry.register
class ChatPromptV1(BaseChatPrompt):
    """Brief assistant that leans on the previous exchanges."""

    version = "v1"
    description = "Brief helpful assistant using previous context"

    def build(self) -> ChatPromptTemplate:
        """Build the v1 prompt template."""
        return ChatPromptTemplate.from_messages([
            ("system", SYSTEM_INSTRUCTION),
            MessagesPlaceholder(self.conversation_key),
        ])
