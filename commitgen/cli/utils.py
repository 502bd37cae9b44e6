"""Shared utility functions for CLI commands."""

from dataclasses import replace
from typing import Optional

import typer

from commitgen import global_config
from commitgen.config import PromptConfig, load_prompt_config_from_dict, prompt_config_to_dict
from commitgen.generation import MODE_BATCHED, GenerationReport
from commitgen.git import get_branch, get_repository_name
from commitgen.prompt import PromptBatch, PromptDiagnostics, PromptMetadata, PromptStyle

OUTPUT_FORMATS = ("text", "json")


def parse_style(value: str) -> PromptStyle:
    """Parse a style name, exiting with an error for unknown names."""
    try:
        return PromptStyle(value.lower())
    except ValueError:
        valid = ", ".join(style.value for style in PromptStyle)
        typer.echo(f"Invalid style: {value}", err=True)
        typer.echo(f"Valid styles: {valid}", err=True)
        raise typer.Exit(1)


def check_output_format(value: str) -> str:
    fmt = value.lower()
    if fmt not in OUTPUT_FORMATS:
        typer.echo(f"Invalid format: {value}. Use one of: {', '.join(OUTPUT_FORMATS)}", err=True)
        raise typer.Exit(1)
    return fmt


def resolve_prompt_config(
    token_budget: Optional[int] = None,
    headroom: Optional[float] = None,
) -> PromptConfig:
    """Prompt settings from global config with command-line overrides.

    Overrides go through the same validation as the config file, so
    out-of-range values are clamped.
    """
    prompt_config = global_config.get_prompt_config()

    overrides = {}
    if token_budget is not None:
        overrides["token_budget"] = token_budget
    if headroom is not None:
        overrides["headroom_ratio"] = headroom
    if not overrides:
        return prompt_config

    return load_prompt_config_from_dict(prompt_config_to_dict(replace(prompt_config, **overrides)))


def build_metadata(style: PromptStyle, include_unstaged: bool) -> PromptMetadata:
    """Prompt metadata for the current repository."""
    return PromptMetadata(
        repository_name=get_repository_name(),
        branch_name=get_branch(),
        style=style,
        include_unstaged=include_unstaged,
    )


def format_diagnostics(diagnostics: PromptDiagnostics) -> list[str]:
    """Human-readable lines describing a prompt's budget usage."""
    lines = [
        f"  Prompt lines: {diagnostics.estimated_line_count} / {diagnostics.line_budget}",
        f"  Estimated tokens: ~{diagnostics.estimated_token_count} / {diagnostics.estimated_token_limit}",
    ]
    if diagnostics.actual_total_tokens is not None:
        lines.append(
            f"  Actual tokens: {diagnostics.actual_total_tokens} "
            f"(prompt {diagnostics.actual_prompt_tokens}, output {diagnostics.actual_output_tokens})"
        )
    lines.append(f"  Files shown: {diagnostics.displayed_files} of {diagnostics.total_files}")

    if diagnostics.compaction_applied:
        lines.append(
            f"  Compaction: snippets capped at {diagnostics.snippet_line_limit} lines "
            f"(configured {diagnostics.configured_snippet_line_limit}); "
            f"{diagnostics.snippet_files_truncated} file(s) truncated"
        )
    if diagnostics.generated_files_omitted:
        lines.append(f"  Generated files omitted: {diagnostics.generated_files_omitted}")
    if diagnostics.remainder_count:
        lines.append(
            f"  Remaining {diagnostics.remainder_count} file(s) contribute "
            f"+{diagnostics.remainder_additions} / -{diagnostics.remainder_deletions}"
        )
    if diagnostics.exceeds_token_limit:
        lines.append("  Warning: estimated tokens exceed the model window")
    return lines


def format_report(report: GenerationReport) -> list[str]:
    """Summary of how a draft was produced."""
    if report.mode != MODE_BATCHED:
        return []

    lines = [f"Drafted in {len(report.batches)} batch(es):"]
    for info in report.batches:
        tokens = info.prompt_diagnostics.actual_total_tokens
        if tokens is None:
            tokens = info.prompt_diagnostics.estimated_token_count
        subject = info.draft.subject or "(empty)"
        paths = ", ".join(info.file_paths[:3])
        if info.file_count > 3:
            paths += f" +{info.file_count - 3} more"
        lines.append(f"  Batch {info.index + 1}: {info.file_count} file(s), ~{tokens} tokens, subject: {subject}")
        lines.append(f"    Files: {paths}")
    return lines


def format_batch(index: int, batch: PromptBatch) -> list[str]:
    """Planner view of one batch."""
    flag = " [over budget]" if batch.exceeds_budget else ""
    lines = [
        f"Batch {index + 1}: {len(batch.files)} file(s), ~{batch.token_estimate} tokens, "
        f"{batch.line_estimate} lines, {batch.full_snippet_count} full snippet(s){flag}"
    ]
    for usage in batch.file_usages:
        mode = "full" if usage.used_full_snippet else "compact"
        extras = []
        if usage.is_generated:
            extras.append("generated")
        if usage.is_binary:
            extras.append("binary")
        if usage.snippet_truncated:
            extras.append("trimmed")
        suffix = f" [{', '.join(extras)}]" if extras else ""
        lines.append(f"  - {usage.path} ({mode}, ~{usage.token_estimate} tok){suffix}")
    return lines
