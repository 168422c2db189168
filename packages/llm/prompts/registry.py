"""Versioned system prompts for the chat responder."""

from .base import BaseChatPrompt


class ChatPromptRegistry:
    """
    Maps version tags ("v1", "v2", ...) to chat prompt classes.

    ``LLM_PROMPT_VERSION`` picks the prompt the responder renders; "latest"
    resolves to the highest registered number.
    """

    _prompts: dict[str, type[BaseChatPrompt]] = {}

    @staticmethod
    def _number(version: str) -> int:
        if not version.startswith("v") or not version[1:].isdigit():
            raise ValueError(f"Chat prompt versions look like 'v1', got {version!r}")
        return int(version[1:])

    @classmethod
    def register(cls, prompt_class: type[BaseChatPrompt]) -> type[BaseChatPrompt]:
        """Class decorator adding a prompt under its ``version`` tag."""
        cls._number(prompt_class.version)
        cls._prompts[prompt_class.version] = prompt_class
        return prompt_class

    @classmethod
    def list_versions(cls) -> list[str]:
        """Registered tags, oldest first."""
        return sorted(cls._prompts, key=cls._number)

    @classmethod
    def get(cls, version: str = "latest") -> BaseChatPrompt:
        """
        Instantiate the prompt for ``version``.

        Raises:
            ValueError: If nothing is registered or the tag is unknown.
        """
        if not cls._prompts:
            raise ValueError("No chat prompts registered")

        if version == "latest":
            version = cls.list_versions()[-1]

        prompt_class = cls._prompts.get(version)
        if prompt_class is None:
            raise ValueError(
                f"Unknown chat prompt version: {version}. "
                f"Available: {', '.join(cls.list_versions())}"
            )
        return prompt_class()
