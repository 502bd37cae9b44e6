"""Google Gemini provider implementation."""

from typing import Optional

from google import genai
from google.genai import types

import commitgen.config as _config
from commitgen.config import API_KEY_ENV_VARS, LLMProvider
from commitgen.llm.base import BaseLLMProvider, RawLLMResult, require_text
from commitgen.llm.exceptions import LLMError, MissingAPIKeyError

# Models that spend part of max_output_tokens on internal thinking
THINKING_MODELS = [
    "gemini-2.5",
    "gemini-3",
]

THINKING_TOKEN_MULTIPLIER = 3


class GoogleProvider(BaseLLMProvider):
    """Google Gemini LLM provider."""

    def __init__(self, model: Optional[str] = None):
        self.model = model or _config.ACTIVE_MODEL
        self.api_key_env_var = API_KEY_ENV_VARS[LLMProvider.GOOGLE]

    def get_api_key(self) -> str:
        """Get the Google API key from environment or credentials file.

        Raises:
            MissingAPIKeyError: If GOOGLE_API_KEY is not found.
        """
        return self._get_api_key_with_fallback(self.api_key_env_var, "Google")

    def _is_thinking_model(self) -> bool:
        return any(name in self.model.lower() for name in THINKING_MODELS)

    def generate_raw(self, system_prompt: str, user_prompt: str) -> RawLLMResult:
        """Call generate_content with the system prompt as an instruction.

        Raises:
            MissingAPIKeyError: If the API key is not set.
            LLMError: For other LLM-related errors, including blocked or
                truncated responses.
        """
        api_key = self.get_api_key()
        client = genai.Client(api_key=api_key)

        max_output_tokens = _config.MAX_TOKENS
        if self._is_thinking_model():
            max_output_tokens *= THINKING_TOKEN_MULTIPLIER

        try:
            response = client.models.generate_content(
                model=self.model,
                contents=user_prompt,
                config=types.GenerateContentConfig(
                    system_instruction=system_prompt,
                    max_output_tokens=max_output_tokens,
                    temperature=_config.TEMPERATURE,
                ),
            )

            if not response.candidates:
                raise LLMError("Google Gemini returned no candidates in response")

            finish_reason = str(getattr(response.candidates[0], "finish_reason", ""))
            if "SAFETY" in finish_reason:
                raise LLMError(f"Google Gemini blocked response due to safety filters: {finish_reason}")
            if "MAX_TOKENS" in finish_reason:
                raise LLMError("Google Gemini response was truncated due to max tokens limit.")

            raw_response = response.text

            input_tokens = None
            output_tokens = None
            usage = getattr(response, "usage_metadata", None)
            if usage:
                input_tokens = usage.prompt_token_count
                output_tokens = usage.candidates_token_count
                # Thinking tokens are billed against the output budget
                thoughts = getattr(usage, "thoughts_token_count", None) or 0
                if output_tokens is not None and thoughts:
                    output_tokens += thoughts

        except (MissingAPIKeyError, LLMError):
            raise
        except Exception as e:
            raise LLMError(f"Google Gemini API call failed: {e}")

        return RawLLMResult(
            raw_response=require_text(raw_response, "Google Gemini"),
            model=self.model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )
