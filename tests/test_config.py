"""Tests for commitgen.config module."""

import commitgen.config as config_module
from commitgen.config import (
    API_KEY_ENV_VARS,
    AVAILABLE_MODELS,
    LLMProvider,
    PromptConfig,
    get_api_key_env_var,
    load_config,
    load_prompt_config_from_dict,
    prompt_config_to_dict,
)


class TestProviders:
    """Tests for provider tables."""

    def test_every_provider_has_models_and_key(self):
        """Test that each provider is fully described."""
        for provider in LLMProvider:
            assert AVAILABLE_MODELS[provider]
            assert provider in API_KEY_ENV_VARS

    def test_get_api_key_env_var(self):
        """Test the environment variable lookup."""
        assert get_api_key_env_var(LLMProvider.ANTHROPIC) == "ANTHROPIC_API_KEY"


class TestLoadConfig:
    """Tests for load_config function."""

    def test_applies_global_settings(self, mocker):
        """Test that configured values replace the active settings."""
        mocker.patch.object(config_module, "ACTIVE_PROVIDER", config_module.DEFAULT_PROVIDER)
        mocker.patch.object(config_module, "ACTIVE_MODEL", config_module.DEFAULT_MODEL)
        mocker.patch.object(config_module, "ACTIVE_STYLE", config_module.DEFAULT_STYLE)
        mocker.patch.object(config_module, "MAX_TOKENS", config_module.DEFAULT_MAX_TOKENS)
        mocker.patch("commitgen.global_config.get_active_provider", return_value=LLMProvider.OPENAI)
        mocker.patch("commitgen.global_config.get_active_model", return_value="gpt-4o")
        mocker.patch("commitgen.global_config.get_max_tokens", return_value=900)
        mocker.patch("commitgen.global_config.get_temperature", return_value=None)
        mocker.patch("commitgen.global_config.get_style", return_value="detailed")

        load_config()

        assert config_module.ACTIVE_PROVIDER is LLMProvider.OPENAI
        assert config_module.ACTIVE_MODEL == "gpt-4o"
        assert config_module.MAX_TOKENS == 900
        assert config_module.ACTIVE_STYLE == "detailed"

    def test_unreadable_config_keeps_defaults(self, mocker):
        """Test that errors leave the defaults in place."""
        mocker.patch.object(config_module, "ACTIVE_MODEL", config_module.DEFAULT_MODEL)
        mocker.patch("commitgen.global_config.get_active_provider", side_effect=Exception("broken"))

        load_config()

        assert config_module.ACTIVE_MODEL == config_module.DEFAULT_MODEL


class TestPromptConfig:
    """Tests for prompt config loading and validation."""

    def test_defaults(self):
        """Test missing and empty sections."""
        assert load_prompt_config_from_dict(None) == PromptConfig()
        assert load_prompt_config_from_dict({}) == PromptConfig()

    def test_values_are_read(self):
        """Test that valid values are used."""
        result = load_prompt_config_from_dict({
            "token_budget": 8000,
            "headroom_ratio": 0.25,
            "semantic_grouping": "no",
            "context_lines": 5,
        })

        assert result.token_budget == 8000
        assert result.headroom_ratio == 0.25
        assert result.semantic_grouping is False
        assert result.context_lines == 5

    def test_values_are_clamped(self):
        """Test the valid ranges."""
        result = load_prompt_config_from_dict({
            "token_budget": 0,
            "headroom_ratio": 1.5,
            "minimum_batch_size": -3,
            "context_lines": -1,
        })

        assert result.token_budget == 1
        assert result.headroom_ratio == 0.9
        assert result.minimum_batch_size == 1
        assert result.context_lines == 0

    def test_invalid_values_fall_back(self):
        """Test that unparseable values use defaults."""
        result = load_prompt_config_from_dict({
            "token_budget": "lots",
            "headroom_ratio": "some",
            "function_context": "maybe",
        })

        assert result.token_budget == PromptConfig().token_budget
        assert result.headroom_ratio == PromptConfig().headroom_ratio
        assert result.function_context is False

    def test_round_trip_through_dict(self):
        """Test that serialized settings load back unchanged."""
        config = PromptConfig(token_budget=2048, max_group_size=4)

        assert load_prompt_config_from_dict(prompt_config_to_dict(config)) == config
