"""
LLM Factory for the chat relay.

Builds the LangChain chat model that answers user messages. Gemini is the
default provider; OpenAI and Anthropic are interchangeable through settings.
"""

from importlib import import_module

from langchain_core.language_models import BaseChatModel


# -----------------------------
# Errors
# -----------------------------


class LLMProviderError(Exception):
    """Raised when LLM provider configuration is invalid."""

    pass


# -----------------------------
# Provider Registry
# -----------------------------


class LLMFactory:
    """
    Factory for creating LLM instances from various providers.

    Supports:
    - gemini (Google Generative AI) - default
    - openai (OpenAI)
    - anthropic (Anthropic)
    """

    # Default models for each provider
    DEFAULT_MODELS: dict[str, str] = {
        "gemini": "gemini-2.0-flash",
        "openai": "gpt-4o-mini",
        "anthropic": "claude-3-5-sonnet-latest",
    }

    # provider -> (integration module, chat model class, distribution, api key kwarg)
    _PROVIDERS: dict[str, tuple[str, str, str, str]] = {
        "gemini": (
            "langchain_google_genai",
            "ChatGoogleGenerativeAI",
            "langchain-google-genai",
            "google_api_key",
        ),
        "openai": ("langchain_openai", "ChatOpenAI", "langchain-openai", "api_key"),
        "anthropic": (
            "langchain_anthropic",
            "ChatAnthropic",
            "langchain-anthropic",
            "api_key",
        ),
    }

    @classmethod
    def create(
        cls,
        provider: str,
        model: str | None = None,
        temperature: float = 0.0,
        api_key: str | None = None,
        **kwargs,
    ) -> BaseChatModel:
        """
        Create an LLM instance for the specified provider.

        Args:
            provider: The LLM provider ("gemini", "openai", "anthropic").
            model: Model name. Uses provider default if not specified.
            temperature: Temperature for generation (0.0 - 2.0).
            api_key: API key for the provider. Uses env var if not specified.
            **kwargs: Additional provider-specific arguments. ``None`` values
                are dropped so provider defaults apply.

        Returns:
            A LangChain BaseChatModel instance.

        Raises:
            LLMProviderError: If provider is unknown or its integration is missing.
        """
        provider = provider.lower()
        if provider not in cls._PROVIDERS:
            raise LLMProviderError(
                f"Unknown provider: {provider}. "
                f"Supported: {', '.join(cls._PROVIDERS)}"
            )

        module_name, class_name, distribution, key_kwarg = cls._PROVIDERS[provider]
        try:
            model_class = getattr(import_module(module_name), class_name)
        except ImportError as e:
            raise LLMProviderError(
                f"{distribution} is not installed. Run: pip install {distribution}"
            ) from e

        init_kwargs = {
            "model": model or cls.DEFAULT_MODELS[provider],
            "temperature": temperature,
            **{key: value for key, value in kwargs.items() if value is not None},
        }
        if api_key:
            init_kwargs[key_kwarg] = api_key

        return model_class(**init_kwargs)

    @classmethod
    def create_from_settings(cls) -> BaseChatModel:
        """
        Create an LLM instance from application settings.

        Reads configuration from environment variables via LLMSettings,
        including the request timeout and the client retry budget.

        Returns:
            A LangChain BaseChatModel instance.
        """
        # Import here to avoid circular imports
        from app.core.config import get_llm_settings

        settings = get_llm_settings()

        return cls.create(
            provider=settings.llm_provider,
            model=settings.llm_model,
            temperature=settings.llm_temperature,
            api_key=settings.get_api_key(),
            timeout=settings.llm_request_timeout_seconds,
            max_retries=settings.llm_max_retries,
        )
