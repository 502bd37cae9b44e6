"""CLI commands for global configuration management."""

from dataclasses import replace
from typing import Optional

import typer

from commitgen import global_config
from commitgen.config import (
    API_KEY_ENV_VARS,
    AVAILABLE_MODELS,
    LLMProvider,
    load_prompt_config_from_dict,
    prompt_config_to_dict,
)
from commitgen.log import resolve_level, setup_logging

# Subcommand group for configuration management
config_app = typer.Typer(
    name="config",
    help="Manage global commitgen configuration in ~/.commitgen/",
    add_completion=False,
)

VALID_PROVIDERS = ", ".join(provider.value for provider in LLMProvider)


@config_app.callback()
def config_main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only show warnings and errors"),
) -> None:
    """Configure logging for the config subcommands."""
    setup_logging(resolve_level(verbose, quiet))


def _parse_provider(provider: str) -> LLMProvider:
    try:
        return LLMProvider(provider.lower())
    except ValueError:
        typer.echo(f"Invalid provider: {provider}", err=True)
        typer.echo(f"Valid providers: {VALID_PROVIDERS}")
        raise typer.Exit(1)


def _mask(api_key: str) -> str:
    if len(api_key) > 12:
        return api_key[:8] + "..." + api_key[-4:]
    return "***"


@config_app.command("show")
def config_show() -> None:
    """Show current global configuration."""
    try:
        if not global_config.is_configured():
            typer.echo("No configuration found. Run 'commitgen config set-provider' to set up.")
            return

        config = global_config.load_global_config()
        prompt_config = global_config.get_prompt_config()

        typer.echo("Current commitgen configuration (~/.commitgen/config.yaml):")
        typer.echo()
        typer.echo(f"  Provider: {config.get('provider', 'not set')}")
        typer.echo(f"  Model: {config.get('model', 'not set')}")
        typer.echo(f"  Max Tokens: {config.get('max_tokens', 1500)}")
        typer.echo(f"  Temperature: {config.get('temperature', 0.3)}")
        typer.echo(f"  Style: {config.get('style', 'summary')}")
        typer.echo()
        typer.echo("  Prompt:")
        for key, value in prompt_config_to_dict(prompt_config).items():
            typer.echo(f"    {key}: {value}")
        typer.echo()

        provider_str = config.get("provider")
        if provider_str:
            try:
                env_var = API_KEY_ENV_VARS[LLMProvider(provider_str)]
            except ValueError:
                return
            api_key = global_config.get_credential(env_var)
            if api_key:
                typer.echo(f"  API Key ({env_var}): {_mask(api_key)}")
            else:
                typer.echo(f"  API Key ({env_var}): not set")

    except global_config.GlobalConfigError as e:
        typer.echo(f"Error reading configuration: {e}", err=True)
        raise typer.Exit(1)


@config_app.command("set-key")
def config_set_key(
    provider: str = typer.Argument(..., help=f"Provider name ({VALID_PROVIDERS})"),
) -> None:
    """Set or update an API key for a provider."""
    llm_provider = _parse_provider(provider)
    env_var = API_KEY_ENV_VARS[llm_provider]

    typer.echo(f"Setting API key for {llm_provider.value}")
    api_key = typer.prompt(f"Enter your {llm_provider.value} API key", hide_input=True)

    try:
        global_config.save_credential(env_var, api_key.strip())
    except global_config.GlobalConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"✓ API key saved for {llm_provider.value}")


@config_app.command("set-provider")
def config_set_provider(
    provider: str = typer.Argument(..., help=f"Provider name ({VALID_PROVIDERS})"),
    model: Optional[str] = typer.Option(
        None,
        "--model",
        "-m",
        help="Model name (optional, will prompt if not provided)",
    ),
) -> None:
    """Set the active LLM provider and model."""
    llm_provider = _parse_provider(provider)
    models = AVAILABLE_MODELS[llm_provider]

    if not model:
        typer.echo(f"Available models for {llm_provider.value}:")
        for i, name in enumerate(models, 1):
            typer.echo(f"  {i}. {name}")

        choice = typer.prompt(f"Select a model (1-{len(models)})", type=int, default=1)
        if choice < 1 or choice > len(models):
            typer.echo("Invalid choice. Aborting.", err=True)
            raise typer.Exit(1)
        model = models[choice - 1]
    elif model not in models:
        typer.echo(f"Warning: {model} is not in the list of known models for {llm_provider.value}")
        if not typer.confirm("Continue anyway?", default=False):
            raise typer.Exit(0)

    try:
        global_config.set_provider_and_model(llm_provider, model)
    except global_config.GlobalConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"✓ Provider set to: {llm_provider.value}")
    typer.echo(f"✓ Model set to: {model}")


@config_app.command("set-budget")
def config_set_budget(
    token_budget: Optional[int] = typer.Option(
        None,
        "--token-budget",
        help="Token budget per prompt",
    ),
    headroom: Optional[float] = typer.Option(
        None,
        "--headroom",
        help="Share of the budget reserved when batching (0 to 0.9)",
    ),
) -> None:
    """Set the prompt token budget and batching headroom."""
    if token_budget is None and headroom is None:
        typer.echo("Nothing to set. Pass --token-budget and/or --headroom.", err=True)
        raise typer.Exit(1)

    try:
        current = global_config.get_prompt_config()
        overrides = {}
        if token_budget is not None:
            overrides["token_budget"] = token_budget
        if headroom is not None:
            overrides["headroom_ratio"] = headroom
        updated = load_prompt_config_from_dict(prompt_config_to_dict(replace(current, **overrides)))
        global_config.set_prompt_config(updated)
    except global_config.GlobalConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"✓ Token budget: {updated.token_budget}")
    typer.echo(f"✓ Headroom ratio: {updated.headroom_ratio}")


@config_app.command("list-models")
def config_list_models(
    provider: Optional[str] = typer.Argument(
        None,
        help="Provider name (optional, shows all if not provided)",
    ),
) -> None:
    """List available models for a provider (or all providers)."""
    providers = [_parse_provider(provider)] if provider else list(LLMProvider)
    for llm_provider in providers:
        typer.echo(f"{llm_provider.value}:")
        for name in AVAILABLE_MODELS[llm_provider]:
            typer.echo(f"  • {name}")
        typer.echo()
