"""Plan command: show how changes would be batched, without calling the LLM."""

import json
from typing import Optional

import typer

import commitgen.config as _config
from commitgen.cli.utils import (
    build_metadata,
    check_output_format,
    format_batch,
    format_diagnostics,
    parse_style,
    resolve_prompt_config,
)
from commitgen.config import load_config
from commitgen.generation import batch_context, builder_config, collect_change_summary, plan_summary
from commitgen.git import GitError, NoChangesError
from commitgen.global_config import GlobalConfigError
from commitgen.log import resolve_level, setup_logging
from commitgen.prompt import build_prompt, should_use_batching, target_budget


def plan_command(
    staged_only: bool = typer.Option(
        False,
        "--staged-only",
        "-s",
        help="Only plan staged changes",
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
        help="Commit message style used for rendered prompts",
    ),
    token_budget: Optional[int] = typer.Option(
        None,
        "--token-budget",
        help="Token budget per prompt (overrides config)",
    ),
    headroom: Optional[float] = typer.Option(
        None,
        "--headroom",
        help="Share of the budget reserved when batching (overrides config)",
    ),
    dry_run_prompt: bool = typer.Option(
        False,
        "--dry-run-prompt",
        help="Print the prompt that would be sent for each batch",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only show warnings and errors"),
) -> None:
    """Show the prompt batches for the current changes."""
    setup_logging(resolve_level(verbose, quiet))
    load_config()

    fmt = check_output_format(output_format)
    prompt_style = parse_style(style or _config.ACTIVE_STYLE)

    try:
        prompt_config = resolve_prompt_config(token_budget, headroom)
        summary = collect_change_summary(staged_only, prompt_config)
        batches = plan_summary(summary, prompt_config)
        batched = should_use_batching(batches)

        if fmt == "json":
            payload = {
                "file_count": summary.file_count,
                "token_budget": prompt_config.token_budget,
                "target_budget": target_budget(prompt_config.token_budget, prompt_config.headroom_ratio),
                "batched": batched,
                "batches": [
                    {
                        "index": index,
                        "paths": batch.paths,
                        "token_estimate": batch.token_estimate,
                        "line_estimate": batch.line_estimate,
                        "full_snippet_count": batch.full_snippet_count,
                        "exceeds_budget": batch.exceeds_budget,
                    }
                    for index, batch in enumerate(batches)
                ],
            }
            typer.echo(json.dumps(payload, indent=2))
            return

        typer.echo(
            f"Planned {len(batches)} batch(es) for {summary.file_count} file(s) "
            f"(budget {prompt_config.token_budget}, target "
            f"{target_budget(prompt_config.token_budget, prompt_config.headroom_ratio)})"
        )
        typer.echo("Mode: batched" if batched else "Mode: single prompt")
        for index, batch in enumerate(batches):
            typer.echo("")
            for line in format_batch(index, batch):
                typer.echo(line)

        if not dry_run_prompt:
            return

        metadata = build_metadata(prompt_style, include_unstaged=not staged_only)
        config = builder_config(prompt_config)
        packages = []
        if batched:
            for index, batch in enumerate(batches):
                package = build_prompt(batch.summary, metadata, config)
                packages.append(package.appending_user_context(batch_context(index + 1, len(batches), batch)))
        else:
            packages.append(build_prompt(summary, metadata, config))

        for index, package in enumerate(packages):
            typer.echo("")
            typer.echo("=" * 60)
            typer.echo(f"Prompt {index + 1} of {len(packages)}")
            typer.echo("=" * 60)
            typer.echo("[system]")
            typer.echo(package.system_prompt)
            typer.echo("")
            typer.echo("[user]")
            typer.echo(package.user_prompt)
            typer.echo("")
            for line in format_diagnostics(package.diagnostics):
                typer.echo(line)

    except NoChangesError as e:
        typer.echo(f"Nothing to plan: {e}", err=True)
        raise typer.Exit(1)
    except GitError as e:
        typer.echo(f"Git error: {e}", err=True)
        raise typer.Exit(1)
    except GlobalConfigError as e:
        typer.echo(f"Config error: {e}", err=True)
        raise typer.Exit(1)
