"""LLM integration package for the chat relay."""

from .factory import LLMFactory, LLMProviderError
from .responder import NO_REPLY_FALLBACK, ChatResponder

__all__ = [
    "LLMFactory",
    "LLMProviderError",
    "ChatResponder",
    "NO_REPLY_FALLBACK",
]
