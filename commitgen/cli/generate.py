"""Generate command: draft a commit message for the current changes."""

import json
from typing import Optional

import typer

import commitgen.config as _config
from commitgen.cli.utils import (
    build_metadata,
    check_output_format,
    format_diagnostics,
    format_report,
    parse_style,
    resolve_prompt_config,
)
from commitgen.config import load_config
from commitgen.generation import collect_change_summary, generate_commit_draft, outcome_to_dict
from commitgen.git import GitError, NoChangesError, commit_with_message, stage_all
from commitgen.global_config import GlobalConfigError
from commitgen.llm import LLMError, MissingAPIKeyError, get_provider
from commitgen.log import resolve_level, setup_logging


def generate_command(
    staged_only: bool = typer.Option(
        False,
        "--staged-only",
        "-s",
        help="Only describe staged changes",
    ),
    output_format: str = typer.Option(
        "text",
        "--format",
        "-f",
        help="Output format (text, json)",
    ),
    style: Optional[str] = typer.Option(
        None,
        "--style",
        help="Commit message style (summary, conventional, detailed)",
    ),
    token_budget: Optional[int] = typer.Option(
        None,
        "--token-budget",
        help="Token budget per prompt (overrides config)",
    ),
    headroom: Optional[float] = typer.Option(
        None,
        "--headroom",
        help="Share of the budget reserved when batching, 0 to 0.9 (overrides config)",
    ),
    overview: bool = typer.Option(
        False,
        "--overview",
        help="Request a metadata-only overview first and share it with every prompt",
    ),
    commit: bool = typer.Option(
        False,
        "--commit",
        help="Commit staged changes with the generated message",
    ),
    stage: bool = typer.Option(
        False,
        "--stage",
        help="Stage all changes before generating",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logs and prompt diagnostics",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only show warnings and errors",
    ),
) -> None:
    """Generate a commit message from the current changes."""
    setup_logging(resolve_level(verbose, quiet))
    load_config()

    fmt = check_output_format(output_format)
    prompt_style = parse_style(style or _config.ACTIVE_STYLE)

    # Only staged changes end up in a commit
    include_staged_only = staged_only or commit

    try:
        if stage:
            stage_all()

        prompt_config = resolve_prompt_config(token_budget, headroom)
        summary = collect_change_summary(include_staged_only, prompt_config)
        metadata = build_metadata(prompt_style, include_unstaged=not include_staged_only)

        provider = get_provider()
        outcome = generate_commit_draft(
            summary,
            metadata,
            provider,
            prompt_config,
            use_overview=overview,
        )

        message = outcome.draft.commit_message

        if fmt == "json":
            typer.echo(json.dumps(outcome_to_dict(outcome), indent=2))
        else:
            typer.echo("")
            typer.echo("=" * 60)
            typer.echo(message)
            typer.echo("=" * 60)
            for line in format_report(outcome.report):
                typer.echo(line)
            if verbose:
                typer.echo("")
                typer.echo("Prompt diagnostics:")
                for line in format_diagnostics(outcome.diagnostics):
                    typer.echo(line)

        if commit:
            commit_with_message(message)
            typer.echo("✓ Committed", err=True)

    except NoChangesError as e:
        typer.echo(f"Nothing to commit: {e}", err=True)
        raise typer.Exit(1)
    except MissingAPIKeyError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    except GitError as e:
        typer.echo(f"Git error: {e}", err=True)
        raise typer.Exit(1)
    except LLMError as e:
        typer.echo(f"LLM error: {e}", err=True)
        raise typer.Exit(1)
    except GlobalConfigError as e:
        typer.echo(f"Config error: {e}", err=True)
        raise typer.Exit(1)
