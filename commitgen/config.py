"""Configuration for commitgen.

Provider settings are loaded from ~/.commitgen/config.yaml.
Use 'commitgen config' commands to modify settings.

Contains:
- LLMProvider: Supported providers
- DEFAULT_* and ACTIVE_* provider settings
- PromptConfig: Token budget, batching and snippet settings
"""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Optional


class LLMProvider(Enum):
    """Supported LLM providers."""

    ANTHROPIC = "anthropic"
    OPENAI = "openai"
    GOOGLE = "google"


# ============================================================
# DEFAULT FALLBACK VALUES
# ============================================================
# These are used only if ~/.commitgen/config.yaml doesn't exist

DEFAULT_PROVIDER = LLMProvider.ANTHROPIC
DEFAULT_MODEL = "claude-sonnet-4-20250514"
DEFAULT_MAX_TOKENS = 1500
DEFAULT_TEMPERATURE = 0.3
DEFAULT_STYLE = "summary"


# ============================================================
# ACTIVE CONFIGURATION (loaded from global config)
# ============================================================

# Initially set to defaults - will be overridden by load_config()
ACTIVE_PROVIDER = DEFAULT_PROVIDER
ACTIVE_MODEL = DEFAULT_MODEL
MAX_TOKENS = DEFAULT_MAX_TOKENS
TEMPERATURE = DEFAULT_TEMPERATURE
ACTIVE_STYLE = DEFAULT_STYLE


def load_config() -> None:
    """Load configuration from the global config file.

    This should be called by the CLI before using the LLM.
    """
    global ACTIVE_PROVIDER, ACTIVE_MODEL, MAX_TOKENS, TEMPERATURE, ACTIVE_STYLE

    try:
        # Import here to avoid circular dependency
        from commitgen import global_config

        provider = global_config.get_active_provider()
        model = global_config.get_active_model()
        max_tokens = global_config.get_max_tokens()
        temperature = global_config.get_temperature()
        style = global_config.get_style()

        if provider:
            ACTIVE_PROVIDER = provider
        if model:
            ACTIVE_MODEL = model
        if max_tokens is not None:
            MAX_TOKENS = max_tokens
        if temperature is not None:
            TEMPERATURE = temperature
        if style:
            ACTIVE_STYLE = style

    except Exception:
        # Use defaults if the global config is unreadable
        pass


# ============================================================
# AVAILABLE MODELS PER PROVIDER
# ============================================================

AVAILABLE_MODELS = {
    LLMProvider.ANTHROPIC: [
        "claude-sonnet-4-20250514",
        "claude-3-5-sonnet-latest",
        "claude-3-5-haiku-latest",
    ],
    LLMProvider.OPENAI: [
        "gpt-4.1",
        "gpt-4.1-mini",
        "gpt-4o",
        "gpt-4o-mini",
    ],
    LLMProvider.GOOGLE: [
        "gemini-2.5-pro",
        "gemini-2.5-flash",
        "gemini-2.0-flash",
        "gemini-2.0-flash-lite",
    ],
}

# ============================================================
# API KEY ENVIRONMENT VARIABLES
# ============================================================

API_KEY_ENV_VARS = {
    LLMProvider.ANTHROPIC: "ANTHROPIC_API_KEY",
    LLMProvider.OPENAI: "OPENAI_API_KEY",
    LLMProvider.GOOGLE: "GOOGLE_API_KEY",
}


def get_api_key_env_var(provider: LLMProvider) -> str:
    """Get the environment variable name for the API key.

    Args:
        provider: The LLM provider.

    Returns:
        The environment variable name.
    """
    return API_KEY_ENV_VARS[provider]


# ============================================================
# PROMPT BUDGETING
# ============================================================

@dataclass
class PromptConfig:
    """Settings for summarizing, batching and compacting prompts.

    Attributes:
        token_budget: Raw token budget per prompt.
        headroom_ratio: Share of the budget reserved while packing batches.
        minimum_batch_size: Files a batch must hold before it may close at the target.
        max_files: Files rendered in a single prompt before compaction.
        max_snippet_lines: Snippet lines per file before compaction.
        line_budget: Line ceiling for a single prompt.
        max_lines_per_file: Full snippet line limit.
        compact_snippet_lines: Compact snippet line limit.
        max_group_size: Largest semantic group.
        semantic_grouping: Whether related files are kept together when batching.
        function_context: Request whole-function context from git diff.
        context_lines: Context radius passed to git diff (None for git's default).
    """

    token_budget: int = 4096
    headroom_ratio: float = 0.15
    minimum_batch_size: int = 1
    max_files: int = 12
    max_snippet_lines: int = 50
    line_budget: int = 600
    max_lines_per_file: int = 80
    compact_snippet_lines: int = 20
    max_group_size: int = 8
    semantic_grouping: bool = True
    function_context: bool = False
    context_lines: Optional[int] = None


def _as_int(value: Any, default: int, minimum: int) -> int:
    try:
        return max(minimum, int(value))
    except (TypeError, ValueError):
        return default


def _as_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "yes", "on", "1"):
            return True
        if lowered in ("false", "no", "off", "0"):
            return False
    return default


def load_prompt_config_from_dict(data: Optional[dict]) -> PromptConfig:
    """Build a PromptConfig from a config section.

    Unknown keys are ignored. Invalid values fall back to defaults and
    numeric values are clamped to their valid ranges.

    Args:
        data: The ``prompt:`` section of the config file.

    Returns:
        The validated PromptConfig.
    """
    defaults = PromptConfig()
    if not data:
        return defaults

    try:
        headroom = float(data.get("headroom_ratio", defaults.headroom_ratio))
    except (TypeError, ValueError):
        headroom = defaults.headroom_ratio
    headroom = max(0.0, min(headroom, 0.9))

    context_lines = data.get("context_lines", defaults.context_lines)
    if context_lines is not None:
        context_lines = _as_int(context_lines, 3, 0)

    return PromptConfig(
        token_budget=_as_int(data.get("token_budget"), defaults.token_budget, 1),
        headroom_ratio=headroom,
        minimum_batch_size=_as_int(data.get("minimum_batch_size"), defaults.minimum_batch_size, 1),
        max_files=_as_int(data.get("max_files"), defaults.max_files, 1),
        max_snippet_lines=_as_int(data.get("max_snippet_lines"), defaults.max_snippet_lines, 1),
        line_budget=_as_int(data.get("line_budget"), defaults.line_budget, 1),
        max_lines_per_file=_as_int(data.get("max_lines_per_file"), defaults.max_lines_per_file, 1),
        compact_snippet_lines=_as_int(
            data.get("compact_snippet_lines"), defaults.compact_snippet_lines, 1
        ),
        max_group_size=_as_int(data.get("max_group_size"), defaults.max_group_size, 1),
        semantic_grouping=_as_bool(data.get("semantic_grouping"), defaults.semantic_grouping),
        function_context=_as_bool(data.get("function_context"), defaults.function_context),
        context_lines=context_lines,
    )


def prompt_config_to_dict(config: PromptConfig) -> dict:
    """Serialize a PromptConfig for the config file."""
    return asdict(config)


