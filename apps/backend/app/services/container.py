"""Process-wide collaborators shared by every request."""

import logging
from dataclasses import dataclass

from app.core.config import get_llm_settings
from app.services.messaging import MessagingDirectory
from packages.llm import ChatResponder

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Long-lived clients, created at startup and closed at shutdown."""

    directory: MessagingDirectory
    responder: ChatResponder

    @classmethod
    def from_settings(cls) -> "ServiceContainer":
        """Build the Stream client and the chat model from settings."""
        llm_settings = get_llm_settings()
        container = cls(
            directory=MessagingDirectory.from_settings(),
            responder=ChatResponder(prompt_version=llm_settings.llm_prompt_version),
        )
        logger.info(
            f"Services ready: llm={llm_settings.llm_provider}/{llm_settings.llm_model} "
            f"prompt={container.responder.prompt_version}"
        )
        return container

    async def aclose(self) -> None:
        await self.directory.close()
