"""Anthropic Claude provider implementation."""

from typing import Optional

from anthropic import Anthropic

import commitgen.config as _config
from commitgen.config import API_KEY_ENV_VARS, LLMProvider
from commitgen.llm.base import BaseLLMProvider, RawLLMResult, require_text
from commitgen.llm.exceptions import LLMError, MissingAPIKeyError


class AnthropicProvider(BaseLLMProvider):
    """Anthropic Claude LLM provider."""

    def __init__(self, model: Optional[str] = None):
        """Initialize the Anthropic provider.

        Args:
            model: The model to use. Defaults to ACTIVE_MODEL from config.
        """
        self.model = model or _config.ACTIVE_MODEL
        self.api_key_env_var = API_KEY_ENV_VARS[LLMProvider.ANTHROPIC]

    def get_api_key(self) -> str:
        """Get the Anthropic API key from environment or credentials file.

        Raises:
            MissingAPIKeyError: If ANTHROPIC_API_KEY is not found.
        """
        return self._get_api_key_with_fallback(self.api_key_env_var, "Anthropic")

    def generate_raw(self, system_prompt: str, user_prompt: str) -> RawLLMResult:
        """Call the Messages API.

        Raises:
            MissingAPIKeyError: If the API key is not set.
            LLMError: For other LLM-related errors.
        """
        api_key = self.get_api_key()
        client = Anthropic(api_key=api_key)

        try:
            message = client.messages.create(
                model=self.model,
                max_tokens=_config.MAX_TOKENS,
                temperature=_config.TEMPERATURE,
                system=system_prompt,
                messages=[{"role": "user", "content": user_prompt}],
            )
            raw_response = message.content[0].text
            input_tokens = message.usage.input_tokens
            output_tokens = message.usage.output_tokens
        except MissingAPIKeyError:
            raise
        except Exception as e:
            raise LLMError(f"Anthropic API call failed: {e}")

        return RawLLMResult(
            raw_response=require_text(raw_response, "Anthropic"),
            model=self.model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )
