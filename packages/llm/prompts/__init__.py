"""Prompt management for chat replies."""

from .base import BaseChatPrompt
from .registry import ChatPromptRegistry

# Import versions to register them
from . import versions  # noqa: F401

__all__ = [
    "BaseChatPrompt",
    "ChatPromptRegistry",
]
