"""Chat relay API routes."""

from fastapi import APIRouter

from app.core.dependencies import RelayServiceDep
from app.schemas.chat import (
    ChatHistoryRequest,
    ChatHistoryResponse,
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    RegisterUserRequest,
    RegisterUserResponse,
)

router = APIRouter()

_ERRORS = {
    400: {"model": ErrorResponse, "description": "Missing or malformed field"},
    500: {"model": ErrorResponse, "description": "Upstream service failure"},
}


@router.post(
    "/register-user",
    response_model=RegisterUserResponse,
    responses=_ERRORS,
)
async def register_user(
    payload: RegisterUserRequest,
    relay: RelayServiceDep,
) -> RegisterUserResponse:
    """
    Register a user in Stream Chat and in the database.

    Idempotent: registering the same email again returns the same userId.

    Raises:
        ValidationError 400: If name or email is missing.
        UpstreamError 500: If Stream or the database fails.
    """
    return await relay.register_user(payload.name, payload.email)


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={
        **_ERRORS,
        404: {"model": ErrorResponse, "description": "User is not registered"},
        504: {"model": ErrorResponse, "description": "Request timed out"},
    },
)
async def chat(
    payload: ChatRequest,
    relay: RelayServiceDep,
) -> ChatResponse:
    """
    Send a message to the AI and return its reply.

    The last exchanges are used as context, the new exchange is stored, and
    the reply is mirrored into the user's Stream channel.

    Raises:
        ValidationError 400: If message or userId is missing.
        NotFoundError 404: If the user never registered.
        UpstreamError 500: If Stream, the database, or the model fails.
    """
    return await relay.send_message(payload.message, payload.user_id)


@router.post(
    "/chat-history",
    response_model=ChatHistoryResponse,
    responses={
        **_ERRORS,
        504: {"model": ErrorResponse, "description": "Request timed out"},
    },
)
async def chat_history(
    payload: ChatHistoryRequest,
    relay: RelayServiceDep,
) -> ChatHistoryResponse:
    """Return every stored message/reply pair for a user."""
    return await relay.chat_history(payload.user_id)
