"""Base prompt interface for the chat relay."""

from abc import ABC, abstractmethod

from langchain_core.prompts import ChatPromptTemplate


class BaseChatPrompt(ABC):
    """
    Abstract base class for chat reply prompts.

    All prompt versions must inherit from this class and implement
    the build method.
    """

    # Version identifier (e.g., "v1", "v2")
    version: str

    # Human-readable description of this prompt version
    description: str

    # Name of the placeholder that receives the conversation turns
    conversation_key: str = "conversation"

    @abstractmethod
    def build(self) -> ChatPromptTemplate:
        """
        Build the prompt template.

        The template must contain a messages placeholder named
        ``conversation_key``; turns are passed through it verbatim so user
        text is never interpreted as a template.

        Returns:
            A ChatPromptTemplate ready for use with an LLM.
        """
        pass

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} version={self.version}>"
