"""FastAPI dependencies for services and database."""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings, get_settings
from app.db.session import get_async_session
from app.services.chat_store import ChatStore
from app.services.container import ServiceContainer
from app.services.relay import ChatRelayService


def get_services(request: Request) -> ServiceContainer:
    """Dependency returning the container created by the app lifespan."""
    return request.app.state.services


def get_relay_service(
    services: Annotated[ServiceContainer, Depends(get_services)],
    session: Annotated[AsyncSession, Depends(get_async_session)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ChatRelayService:
    """Dependency building the request-scoped relay service."""
    return ChatRelayService(
        store=ChatStore(session),
        directory=services.directory,
        responder=services.responder,
        history_limit=settings.history_context_limit,
        request_timeout=settings.request_timeout_seconds,
    )


# Type alias for convenience
AsyncSessionDep = Annotated[AsyncSession, Depends(get_async_session)]
RelayServiceDep = Annotated[ChatRelayService, Depends(get_relay_service)]
