"""LLM provider module for commitgen.

This module provides a unified interface to the supported LLM providers.
The active provider is configured in ~/.commitgen/config.yaml.
"""

from typing import Optional

from dotenv import load_dotenv

import commitgen.config as _config
from commitgen.config import LLMProvider
from commitgen.llm.base import (
    BaseLLMProvider,
    LLMResult,
    OverviewResult,
    RawLLMResult,
)
from commitgen.llm.exceptions import (
    JSONParseError,
    LLMError,
    MissingAPIKeyError,
)
from commitgen.llm.parsing import (
    parse_json_response,
    validate_commit_draft,
    validate_overview,
)

# Load environment variables from .env file
load_dotenv()


def get_provider(
    provider: Optional[LLMProvider] = None,
    model: Optional[str] = None,
) -> BaseLLMProvider:
    """Get an LLM provider instance.

    Args:
        provider: The provider to use. Defaults to ACTIVE_PROVIDER from config.
        model: The model to use. Defaults to ACTIVE_MODEL from config.

    Returns:
        An instance of the appropriate LLM provider.

    Raises:
        ValueError: If the provider is not supported.
    """
    provider = provider or _config.ACTIVE_PROVIDER
    model = model or _config.ACTIVE_MODEL

    if provider == LLMProvider.ANTHROPIC:
        from commitgen.llm.anthropic_provider import AnthropicProvider

        return AnthropicProvider(model=model)

    elif provider == LLMProvider.OPENAI:
        from commitgen.llm.openai_provider import OpenAIProvider

        return OpenAIProvider(model=model)

    elif provider == LLMProvider.GOOGLE:
        from commitgen.llm.google_provider import GoogleProvider

        return GoogleProvider(model=model)

    else:
        raise ValueError(f"Unsupported provider: {provider}")


__all__ = [
    "BaseLLMProvider",
    "LLMError",
    "MissingAPIKeyError",
    "JSONParseError",
    "LLMResult",
    "OverviewResult",
    "RawLLMResult",
    "get_provider",
    "parse_json_response",
    "validate_commit_draft",
    "validate_overview",
]
