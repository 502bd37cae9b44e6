"""OpenAI GPT provider implementation."""

from typing import Optional

from openai import OpenAI

import commitgen.config as _config
from commitgen.config import API_KEY_ENV_VARS, LLMProvider
from commitgen.llm.base import BaseLLMProvider, RawLLMResult, require_text
from commitgen.llm.exceptions import LLMError, MissingAPIKeyError


class OpenAIProvider(BaseLLMProvider):
    """OpenAI GPT LLM provider."""

    def __init__(self, model: Optional[str] = None):
        self.model = model or _config.ACTIVE_MODEL
        self.api_key_env_var = API_KEY_ENV_VARS[LLMProvider.OPENAI]

    def get_api_key(self) -> str:
        """Get the OpenAI API key from environment or credentials file.

        Raises:
            MissingAPIKeyError: If OPENAI_API_KEY is not found.
        """
        return self._get_api_key_with_fallback(self.api_key_env_var, "OpenAI")

    def generate_raw(self, system_prompt: str, user_prompt: str) -> RawLLMResult:
        """Call the Chat Completions API.

        Raises:
            MissingAPIKeyError: If the API key is not set.
            LLMError: For other LLM-related errors.
        """
        api_key = self.get_api_key()
        client = OpenAI(api_key=api_key)

        try:
            response = client.chat.completions.create(
                model=self.model,
                max_tokens=_config.MAX_TOKENS,
                temperature=_config.TEMPERATURE,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
            )
            raw_response = response.choices[0].message.content
            input_tokens = response.usage.prompt_tokens
            output_tokens = response.usage.completion_tokens
        except MissingAPIKeyError:
            raise
        except Exception as e:
            raise LLMError(f"OpenAI API call failed: {e}")

        return RawLLMResult(
            raw_response=require_text(raw_response, "OpenAI"),
            model=self.model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )
