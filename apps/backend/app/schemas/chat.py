"""Request and response schemas for the relay endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    """Accepts both the camelCase wire names and the Python field names."""

    model_config = ConfigDict(populate_by_name=True)


# ──────────────────────────────────────────────
# Registration
# ──────────────────────────────────────────────


class RegisterUserRequest(_CamelModel):
    """Request schema for /register-user. Presence is checked by the service."""

    name: str | None = None
    email: str | None = None


class RegisterUserResponse(_CamelModel):
    """Response schema for a registered (or already registered) user."""

    user_id: str = Field(alias="userId")
    name: str
    email: str


# ──────────────────────────────────────────────
# Chat
# ──────────────────────────────────────────────


class ChatRequest(_CamelModel):
    """Request schema for /chat."""

    message: str | None = None
    user_id: str | None = Field(default=None, alias="userId")


class ChatResponse(BaseModel):
    """Response schema carrying the AI reply."""

    reply: str


# ──────────────────────────────────────────────
# History
# ──────────────────────────────────────────────


class ChatHistoryRequest(_CamelModel):
    """Request schema for /chat-history."""

    user_id: str | None = Field(default=None, alias="userId")


class ChatExchange(BaseModel):
    """A persisted message/reply pair."""

    message: str
    reply: str

    model_config = {"from_attributes": True}


class ChatHistoryResponse(BaseModel):
    """Response schema listing a user's exchanges."""

    messages: list[ChatExchange]


class ErrorResponse(BaseModel):
    """Body of every non-2xx response."""

    error: str
