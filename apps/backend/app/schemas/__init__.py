"""Pydantic schemas."""

from app.schemas.chat import (
    ChatExchange,
    ChatHistoryRequest,
    ChatHistoryResponse,
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    RegisterUserRequest,
    RegisterUserResponse,
)

__all__ = [
    # Registration
    "RegisterUserRequest",
    "RegisterUserResponse",
    # Chat
    "ChatRequest",
    "ChatResponse",
    # History
    "ChatHistoryRequest",
    "ChatHistoryResponse",
    "ChatExchange",
    "ErrorResponse",
]
