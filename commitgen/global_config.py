"""Global configuration management for commitgen.

Handles user-level configuration stored in ~/.commitgen/:
- config.yaml: Provider, model, style and prompt budget settings
- credentials: API keys for LLM providers
"""

import os
import stat
from pathlib import Path
from typing import Any, Optional

import yaml

from commitgen.config import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_MODEL,
    DEFAULT_PROVIDER,
    DEFAULT_STYLE,
    DEFAULT_TEMPERATURE,
    LLMProvider,
    PromptConfig,
    load_prompt_config_from_dict,
    prompt_config_to_dict,
)
from commitgen.log import get_logger

logger = get_logger(__name__)


class GlobalConfigError(Exception):
    """Raised when there's an error with global configuration."""

    pass


_CONFIG_DIR = Path.home() / ".commitgen"


def get_global_config_dir() -> Path:
    """Get the global commitgen configuration directory."""
    return _CONFIG_DIR


def ensure_global_config_dir() -> Path:
    """Ensure the global config directory exists.

    Returns:
        Path to ~/.commitgen/
    """
    config_dir = get_global_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_config_file_path() -> Path:
    return get_global_config_dir() / "config.yaml"


def get_credentials_file_path() -> Path:
    return get_global_config_dir() / "credentials"


def load_global_config() -> dict[str, Any]:
    """Load global configuration from ~/.commitgen/config.yaml.

    Returns:
        Dictionary with configuration values. Empty dict if the file doesn't exist.

    Raises:
        GlobalConfigError: If the file cannot be read or parsed.
    """
    config_file = get_config_file_path()

    if not config_file.exists():
        return {}

    try:
        with open(config_file, "r") as f:
            config = yaml.safe_load(f) or {}
    except Exception as e:
        raise GlobalConfigError(f"Failed to load config from {config_file}: {e}")

    if not isinstance(config, dict):
        raise GlobalConfigError(f"Config file {config_file} must contain a mapping")
    return config


def save_global_config(config: dict[str, Any]) -> None:
    """Save global configuration to ~/.commitgen/config.yaml.

    Args:
        config: Configuration dictionary to save.
    """
    ensure_global_config_dir()
    config_file = get_config_file_path()

    try:
        with open(config_file, "w") as f:
            yaml.dump(config, f, default_flow_style=False, sort_keys=False)
    except Exception as e:
        raise GlobalConfigError(f"Failed to save config to {config_file}: {e}")

    logger.debug("Saved global config", path=str(config_file))


def _read_credentials(credentials_file: Path) -> dict[str, str]:
    credentials = {}
    with open(credentials_file, "r") as f:
        for line in f:
            line = line.strip()
            # Skip empty lines and comments
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            credentials[key.strip()] = value.strip()
    return credentials


def load_credentials() -> dict[str, str]:
    """Load API keys from ~/.commitgen/credentials.

    Returns:
        Dictionary mapping environment variable names to API keys.
    """
    credentials_file = get_credentials_file_path()

    if not credentials_file.exists():
        return {}

    try:
        return _read_credentials(credentials_file)
    except Exception as e:
        raise GlobalConfigError(f"Failed to load credentials from {credentials_file}: {e}")


def save_credential(provider_key: str, api_key: str) -> None:
    """Save or update an API key in the credentials file.

    The file is rewritten with owner-only permissions.

    Args:
        provider_key: Environment variable name (e.g., "ANTHROPIC_API_KEY")
        api_key: The API key value.
    """
    ensure_global_config_dir()
    credentials_file = get_credentials_file_path()

    existing = load_credentials()
    existing[provider_key] = api_key

    try:
        with open(credentials_file, "w") as f:
            f.write("# commitgen API credentials\n")
            f.write("# Format: PROVIDER_API_KEY=your_key_here\n\n")
            for key, value in existing.items():
                f.write(f"{key}={value}\n")

        os.chmod(credentials_file, stat.S_IRUSR | stat.S_IWUSR)
    except Exception as e:
        raise GlobalConfigError(f"Failed to save credential: {e}")

    logger.info("Saved credential", key=provider_key)


def get_credential(provider_key: str) -> Optional[str]:
    """Get an API key from the credentials file.

    Args:
        provider_key: Environment variable name (e.g., "ANTHROPIC_API_KEY")

    Returns:
        The API key if found, None otherwise.
    """
    return load_credentials().get(provider_key)


def get_active_provider() -> Optional[LLMProvider]:
    """Get the active LLM provider from global config.

    Returns:
        LLMProvider enum value, or None if not configured or unknown.
    """
    provider_str = load_global_config().get("provider")

    if not provider_str:
        return None

    try:
        return LLMProvider(provider_str)
    except ValueError:
        return None


def get_active_model() -> Optional[str]:
    return load_global_config().get("model")


def set_provider_and_model(provider: LLMProvider, model: str) -> None:
    """Set the active provider and model in global config."""
    config = load_global_config()
    config["provider"] = provider.value
    config["model"] = model
    save_global_config(config)


def get_max_tokens() -> Optional[int]:
    return load_global_config().get("max_tokens")


def get_temperature() -> Optional[float]:
    return load_global_config().get("temperature")


def get_style() -> Optional[str]:
    """Get the commit message style (summary, conventional, detailed)."""
    return load_global_config().get("style")


def set_style(style: str) -> None:
    config = load_global_config()
    config["style"] = style
    save_global_config(config)


def get_prompt_config() -> PromptConfig:
    """Get the validated ``prompt:`` section from global config.

    Returns:
        PromptConfig built from the section, defaults when it is missing.
    """
    section = load_global_config().get("prompt")
    if section is not None and not isinstance(section, dict):
        raise GlobalConfigError("The 'prompt' section must be a mapping")
    return load_prompt_config_from_dict(section)


def set_prompt_config(prompt_config: PromptConfig) -> None:
    """Replace the ``prompt:`` section in global config."""
    config = load_global_config()
    config["prompt"] = prompt_config_to_dict(prompt_config)
    save_global_config(config)


def initialize_default_config() -> None:
    """Initialize config.yaml with default values if it doesn't exist."""
    if get_config_file_path().exists():
        return

    save_global_config({
        "provider": DEFAULT_PROVIDER.value,
        "model": DEFAULT_MODEL,
        "max_tokens": DEFAULT_MAX_TOKENS,
        "temperature": DEFAULT_TEMPERATURE,
        "style": DEFAULT_STYLE,
        "prompt": prompt_config_to_dict(PromptConfig()),
    })


def is_configured() -> bool:
    """Check if commitgen has been configured."""
    return get_config_file_path().exists()
