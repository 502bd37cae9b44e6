"""Base classes and shared utilities for LLM providers."""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from commitgen.formatters import ChangesetOverview, CommitDraft
from commitgen.llm.exceptions import LLMError, MissingAPIKeyError
from commitgen.llm.parsing import parse_json_response, validate_commit_draft, validate_overview
from commitgen.log import get_logger
from commitgen.prompt.diagnostics import PromptDiagnostics
from commitgen.prompt.models import PromptPackage

logger = get_logger(__name__)


@dataclass
class RawLLMResult:
    """Unparsed provider response with reported token usage."""

    raw_response: str
    model: str
    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None


@dataclass
class LLMResult:
    """Commit draft from a generation call.

    The diagnostics are the prompt's diagnostics with the provider's
    actual token usage recorded.
    """

    draft: CommitDraft
    model: str
    diagnostics: PromptDiagnostics
    raw_response: str = ""


@dataclass
class OverviewResult:
    """Overview from a metadata-only generation call."""

    overview: ChangesetOverview
    model: str
    diagnostics: PromptDiagnostics
    raw_response: str = ""


COMMIT_RESPONSE_FORMAT = """Respond with ONLY a JSON object with exactly these keys:
- "subject": string (imperative mood, <=50 chars)
- "body": string or null (optional explanation of why the change was made)
No markdown fences. No extra keys. No commentary."""

OVERVIEW_RESPONSE_FORMAT = """Respond with ONLY a JSON object with exactly these keys:
- "summary": string (2-3 sentences on the overall purpose and scope)
- "category": string (one of: feature, bugfix, refactor, test, docs, chore)
- "key_files": array of up to 5 paths central to the change
No markdown fences. No extra keys. No commentary."""


class BaseLLMProvider(ABC):
    """Abstract base class for LLM providers.

    Subclasses implement the SDK call in ``generate_raw``. Prompt
    formatting and response validation are shared.
    """

    model: str

    @abstractmethod
    def generate_raw(self, system_prompt: str, user_prompt: str) -> RawLLMResult:
        """Send a prompt and return the raw response.

        Args:
            system_prompt: Instructions for the model.
            user_prompt: The content to respond to.

        Returns:
            A RawLLMResult with the response text and token usage.

        Raises:
            MissingAPIKeyError: If the API key is not set.
            LLMError: For other LLM-related errors.
        """
        pass

    @abstractmethod
    def get_api_key(self) -> str:
        """Get the API key from environment or credentials file.

        Checks in order:
        1. Environment variable (including a loaded .env file)
        2. ~/.commitgen/credentials file

        Raises:
            MissingAPIKeyError: If the API key is not found.
        """
        pass

    def _get_api_key_with_fallback(self, env_var_name: str, provider_name: str) -> str:
        """Get an API key from the environment, then the credentials file.

        Args:
            env_var_name: Environment variable name to check.
            provider_name: Human-readable provider name for error messages.

        Returns:
            The API key string.

        Raises:
            MissingAPIKeyError: If the API key is not found.
        """
        api_key = os.getenv(env_var_name)
        if api_key:
            return api_key

        from commitgen.global_config import GlobalConfigError, get_credential

        try:
            api_key = get_credential(env_var_name)
        except GlobalConfigError as e:
            logger.warning("Could not read credentials file", error=str(e))
            api_key = None
        if api_key:
            return api_key

        raise MissingAPIKeyError(
            f"{provider_name} API key not found. Set it using:\n"
            f"  1. Environment variable: export {env_var_name}=your_key_here\n"
            f"  2. Run: commitgen config set-key {provider_name.lower()}\n"
            f"  3. Manually add to ~/.commitgen/credentials"
        )

    def generate(self, package: PromptPackage) -> LLMResult:
        """Draft a commit message for a prompt package.

        Args:
            package: The rendered prompt.

        Returns:
            An LLMResult with the validated draft and updated diagnostics.

        Raises:
            MissingAPIKeyError: If the API key is not set.
            JSONParseError: If the response cannot be parsed.
            LLMError: For other LLM-related errors.
        """
        system_prompt = f"{package.system_prompt}\n\n{COMMIT_RESPONSE_FORMAT}"
        raw = self.generate_raw(system_prompt, package.user_prompt)
        draft = validate_commit_draft(parse_json_response(raw.raw_response))

        diagnostics = package.diagnostics.record_actual_token_usage(
            raw.input_tokens, raw.output_tokens
        )
        logger.debug(
            "Generated commit draft",
            model=raw.model,
            input_tokens=raw.input_tokens,
            output_tokens=raw.output_tokens,
            estimated_tokens=package.diagnostics.estimated_token_count,
        )
        return LLMResult(
            draft=draft,
            model=raw.model,
            diagnostics=diagnostics,
            raw_response=raw.raw_response,
        )

    def generate_overview(self, package: PromptPackage) -> OverviewResult:
        """Ask for a high-level overview of a metadata-only prompt.

        Raises:
            MissingAPIKeyError: If the API key is not set.
            JSONParseError: If the response cannot be parsed.
            LLMError: For other LLM-related errors.
        """
        system_prompt = f"{package.system_prompt}\n\n{OVERVIEW_RESPONSE_FORMAT}"
        raw = self.generate_raw(system_prompt, package.user_prompt)
        overview = validate_overview(parse_json_response(raw.raw_response))

        return OverviewResult(
            overview=overview,
            model=raw.model,
            diagnostics=package.diagnostics.record_actual_token_usage(
                raw.input_tokens, raw.output_tokens
            ),
            raw_response=raw.raw_response,
        )


def require_text(raw_response: Optional[str], provider_name: str) -> str:
    """Reject empty responses."""
    if not raw_response or not raw_response.strip():
        raise LLMError(f"{provider_name} returned empty response")
    return raw_response
